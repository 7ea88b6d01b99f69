"""
Debounced auto-save for inline nooklet editing.

One entry is edited at a time. Changes arm a single debounce timer; when it
fires the buffer is compared with the last saved content and either nothing
happens, the entry is archived (empty buffer) or an update is sent. At most
one request is in flight; flushes requested meanwhile are deferred until it
settles.
"""

import asyncio
from datetime import datetime, timezone

from nooklet.client.api import ApiError, NookletApiClient, SerializedNooklet
from nooklet.config import settings
from nooklet.logging import get_logger
from nooklet.models import AutoSaveState, NookletType

logger = get_logger('client.autosave')

DEFAULT_TYPE = NookletType.JOURNAL.value


class AutoSaveController:
    """State machine behind the inline markdown editor."""

    def __init__(
        self,
        api: NookletApiClient,
        entries: list[SerializedNooklet] | None = None,
        debounce_seconds: float = settings.AUTOSAVE_DEBOUNCE_SECONDS,
    ):
        self.api = api
        self.entries: list[SerializedNooklet] = list(entries or [])
        self.debounce_seconds = debounce_seconds

        self.editing_id: str | None = None
        self.buffer = ""
        self.cursor: int | None = None
        self.dirty = False
        self.error: str | None = None
        self.last_saved_at: str | None = None

        self._timer: asyncio.TimerHandle | None = None
        self._flush_task: asyncio.Task | None = None
        self._saving_id: str | None = None
        self._rearm_after_save = False
        self._settled = asyncio.Event()
        self._settled.set()

    # ── State ──

    @property
    def state(self) -> AutoSaveState:
        if self.editing_id is None:
            return AutoSaveState.IDLE
        if self._saving_id == self.editing_id:
            return AutoSaveState.SAVING
        if self.dirty:
            return AutoSaveState.PENDING_SAVE
        return AutoSaveState.EDITING

    @property
    def is_saving(self) -> bool:
        return self._saving_id is not None

    @property
    def archive_pending(self) -> bool:
        """True when the buffer is blank and the next save will archive the entry."""
        return self.editing_id is not None and not self.buffer.strip()

    def status_label(self) -> str | None:
        if self.editing_id is None:
            return None
        if self.state is AutoSaveState.SAVING:
            return "Saving..."
        if self.error:
            return "Failed to save"
        if self.dirty:
            return "Unsaved changes"
        if self.last_saved_at:
            return f"Saved {self.last_saved_at}"
        return None

    def _find(self, nooklet_id: str) -> SerializedNooklet | None:
        return next((e for e in self.entries if e["id"] == nooklet_id), None)

    # ── Timer ──

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm_timer(self) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._on_debounce)

    def _on_debounce(self) -> None:
        self._timer = None
        self._flush_task = asyncio.ensure_future(self.flush())

    async def wait_for_autosave(self) -> None:
        """Await the flush started by the last debounce, if any."""
        if self._flush_task is not None:
            await self._flush_task

    # ── Transitions ──

    def begin_edit(
        self,
        entry: SerializedNooklet,
        cursor: int | None = None,
        content_override: str | None = None,
    ) -> None:
        self._cancel_timer()
        source = content_override if content_override is not None else entry["content"]
        self.editing_id = entry["id"]
        self.buffer = source
        self.cursor = cursor if cursor is not None else len(source)
        self.dirty = False
        self.error = None
        self._rearm_after_save = False
        self.last_saved_at = entry.get("updatedAt") or entry.get("createdAt")

    def change(self, value: str) -> None:
        if self.editing_id is None or value == self.buffer:
            return
        self.buffer = value
        self.dirty = True
        self.last_saved_at = None
        self.error = None
        if self.is_saving:
            self._rearm_after_save = True
            return
        self._arm_timer()

    def _reset_editing(self) -> None:
        self._cancel_timer()
        self.editing_id = None
        self.buffer = ""
        self.cursor = None
        self.dirty = False
        self.error = None
        self.last_saved_at = None
        self._rearm_after_save = False

    async def flush(self, force: bool = False) -> bool:
        """
        Persist the buffer if it differs from the saved content.

        :param force: save even when no change was recorded since the last flush
        :return: True when the entry is clean (saved, archived or unchanged)
        """
        if self.editing_id is None:
            return False
        entry = self._find(self.editing_id)
        if entry is None:
            return False

        self._cancel_timer()
        if not force and not self.dirty:
            return False

        next_content = self.buffer.strip()
        current_content = (entry.get("content") or "").strip()

        if next_content == current_content:
            self.dirty = False
            self.error = None
            if force:
                self.last_saved_at = entry.get("updatedAt") or entry.get("createdAt")
            return True

        if self.is_saving:
            self._rearm_after_save = True
            return False

        nooklet_id = self.editing_id
        sent_buffer = self.buffer
        self._saving_id = nooklet_id
        self._settled.clear()
        self.error = None

        try:
            if not next_content:
                await self.api.archive(nooklet_id)
                self.entries = [e for e in self.entries if e["id"] != nooklet_id]
                logger.info(f"Archived empty nooklet {nooklet_id[:8]}")
                if self.editing_id == nooklet_id:
                    self._reset_editing()
                return True

            saved = await self.api.update(
                nooklet_id,
                content=next_content,
                type=entry.get("type") or DEFAULT_TYPE,
            )
        except ApiError as exc:
            logger.warning(f"Auto-save failed for {nooklet_id[:8]}: {exc.message}")
            if self.editing_id == nooklet_id:
                self.dirty = True
                self.error = exc.message
            return False
        finally:
            self._saving_id = None
            self._settled.set()
            self._resume_deferred()

        self.entries = [saved if e["id"] == nooklet_id else e for e in self.entries]
        if self.editing_id == nooklet_id:
            if self.buffer == sent_buffer:
                self.buffer = saved.get("content", next_content)
                self.dirty = False
            self.error = None
            self.last_saved_at = saved.get("updatedAt") or datetime.now(timezone.utc).isoformat()
        return True

    def _resume_deferred(self) -> None:
        if self._rearm_after_save and self.dirty and self.editing_id is not None:
            self._rearm_after_save = False
            self._arm_timer()

    async def finish(self) -> bool:
        """Force-flush (blur/navigation) and leave editing once the entry is clean."""
        if self.editing_id is None:
            return True
        await self._settled.wait()
        saved = await self.flush(force=True)
        if not saved:
            return False
        self._reset_editing()
        return True

    def close(self) -> None:
        self._cancel_timer()
