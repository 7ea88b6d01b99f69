"""Client-side journal page state: the visible entry list plus its editor."""

from nooklet.client.api import NookletApiClient, SerializedNooklet
from nooklet.client.autosave import DEFAULT_TYPE, AutoSaveController
from nooklet.config import settings


class JournalSession:
    """Loads entries, creates new ones and hands editing to an AutoSaveController."""

    def __init__(
        self,
        api: NookletApiClient,
        debounce_seconds: float = settings.AUTOSAVE_DEBOUNCE_SECONDS,
    ):
        self.api = api
        self.editor = AutoSaveController(api, debounce_seconds=debounce_seconds)

    @property
    def entries(self) -> list[SerializedNooklet]:
        return self.editor.entries

    async def load(self) -> list[SerializedNooklet]:
        self.editor.entries = await self.api.list_entries()
        return self.entries

    async def create(self, content: str) -> SerializedNooklet | None:
        """Create an entry from the composer; blank input is ignored."""
        content = content.strip()
        if not content:
            return None
        created = await self.api.create(content, type=DEFAULT_TYPE)
        self.editor.entries = [*self.editor.entries, created]
        return created

    async def edit(self, nooklet_id: str, cursor: int | None = None) -> bool:
        """
        Move the editor to another entry, flushing the current one first.

        :return: False when the current entry failed to save; the editor stays on it
        """
        entry = next((e for e in self.entries if e["id"] == nooklet_id), None)
        if entry is None:
            raise KeyError(nooklet_id)
        current = self.editor.editing_id
        if current == nooklet_id:
            if cursor is not None:
                self.editor.cursor = cursor
            return True
        if current is not None:
            if not await self.editor.finish():
                return False
            # Saving may have replaced the entry dict, or archived it.
            entry = next((e for e in self.entries if e["id"] == nooklet_id), entry)
        self.editor.begin_edit(entry, cursor=cursor)
        return True

    async def close(self) -> None:
        self.editor.close()
        await self.api.aclose()
