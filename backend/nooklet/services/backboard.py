"""
Backboard.io transport for the RAG test endpoints.

Each user's journal chunks live on one Backboard assistant; questions are
asked on a fresh thread so answers come only from retrieval, never from
thread memory. Chunking and prompt assembly live in RagService.

Unlike the rest of the app, calls here retry transient failures (timeouts,
429, 5xx) with exponential backoff; set BACKBOARD_MAX_RETRIES=0 to disable.
"""

import asyncio
import re
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

from backboard import BackboardClient

from nooklet.config import settings
from nooklet.logging import get_logger
from nooklet.models import (
    AssistantCreated, ThreadCreated, DocumentCreated, ChatResponse,
)

logger = get_logger('services.backboard')
_T = TypeVar("_T")

TRANSIENT_ERROR_TOKENS = (
    "timed out",
    "timeout",
    "rate limit",
    "too many requests",
    "temporarily unavailable",
    "connection reset",
    "connection refused",
    "service unavailable",
    "429",
    "502",
    "503",
    "504",
)


def is_transient_error(error: Exception) -> bool:
    if isinstance(error, (TimeoutError, asyncio.TimeoutError, ConnectionError)):
        return True
    message = str(error).lower()
    return any(token in message for token in TRANSIENT_ERROR_TOKENS)


class BackboardService:
    """Thin async wrapper over BackboardClient with retry on transient errors."""

    def __init__(
        self,
        api_key: str | None = None,
        max_retries: int = settings.BACKBOARD_MAX_RETRIES,
        retry_base_seconds: float = settings.BACKBOARD_RETRY_BASE_SECONDS,
        retry_max_seconds: float = settings.BACKBOARD_RETRY_MAX_SECONDS,
        documents_path: str = settings.DOCUMENTS_PATH,
    ):
        self.api_key = api_key if api_key is not None else settings.BACKBOARD_API_KEY
        self.max_retries = max(int(max_retries), 0)
        self.retry_base_seconds = max(float(retry_base_seconds), 0.0)
        self.retry_max_seconds = max(float(retry_max_seconds), self.retry_base_seconds)
        self.documents_path = Path(documents_path)
        self.client: BackboardClient | None = None

    async def initialize(self):
        if not self.api_key:
            logger.warning("BACKBOARD_API_KEY not set - RAG test endpoints will fail")
            return

        try:
            self.client = BackboardClient(api_key=self.api_key)
            logger.info("Backboard client initialized")
        except Exception as e:
            logger.error(f"Failed to initialize Backboard: {e}")

    @property
    def is_available(self) -> bool:
        return self.client is not None

    async def _run_with_retry(
        self,
        operation_name: str,
        operation: Callable[[], Awaitable[_T]],
    ) -> _T:
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await operation()
            except Exception as error:
                if attempt == attempts or not is_transient_error(error):
                    raise
                delay = min(self.retry_base_seconds * 2 ** (attempt - 1), self.retry_max_seconds)
                logger.warning(
                    "Backboard %s failed (attempt %d/%d): %s. Retrying in %.2fs",
                    operation_name, attempt, attempts, error, delay,
                )
                if delay > 0:
                    await asyncio.sleep(delay)
        raise RuntimeError(f"Backboard {operation_name} made no attempts")

    # ── Assistants ──

    async def create_assistant(self, name: str, description: str = "") -> AssistantCreated:
        if not self.is_available:
            return AssistantCreated.failed()

        try:
            assistant = await self._run_with_retry(
                "create_assistant",
                lambda: self.client.create_assistant(
                    name=name,
                    embedding_provider=settings.EMBEDDING_PROVIDER,
                    embedding_model_name=settings.EMBEDDING_MODEL,
                    description=description,
                ),
            )
        except Exception as e:
            logger.error(f"Failed to create assistant {name}: {e}")
            return AssistantCreated.failed(str(e))

        logger.info(f"Created assistant {assistant.assistant_id} ({name})")
        return AssistantCreated(success=True, id=str(assistant.assistant_id))

    # ── Threads ──

    async def create_thread(self, assistant_id: str) -> ThreadCreated:
        if not self.is_available:
            return ThreadCreated.failed()

        try:
            thread = await self._run_with_retry(
                "create_thread",
                lambda: self.client.create_thread(assistant_id=assistant_id),
            )
        except Exception as e:
            logger.error(f"Failed to create thread for assistant {assistant_id}: {e}")
            return ThreadCreated.failed(str(e))
        return ThreadCreated(success=True, id=str(thread.thread_id))

    # ── Chat ──

    async def chat(self, thread_id: str, prompt: str) -> ChatResponse:
        if not self.is_available:
            return ChatResponse.failed()

        message: dict[str, Any] = {
            "thread_id": thread_id,
            "content": prompt,
            "memory": "off",
        }
        if settings.LLM_PROVIDER:
            message["llm_provider"] = settings.LLM_PROVIDER
        if settings.MODEL_NAME:
            message["model_name"] = settings.MODEL_NAME

        try:
            reply = await self._run_with_retry(
                "add_message",
                lambda: self.client.add_message(**message),
            )
        except Exception as e:
            logger.error(f"Chat failed for thread {thread_id}: {e}")
            return ChatResponse.failed(str(e))

        retrieved = getattr(reply, "retrieved_files", None) or []
        total_tokens = getattr(reply, "total_tokens", None)
        logger.info(f"Chat on thread {thread_id}: retrieved={len(retrieved)} tokens={total_tokens or '?'}")
        return ChatResponse(
            success=True,
            response=reply.content,
            model_name=getattr(reply, "model_name", None),
            total_tokens=total_tokens,
            retrieved_files_count=len(retrieved),
        )

    # ── Documents ──

    def _document_path(self, assistant_id: str, document_name: str) -> Path:
        self.documents_path.mkdir(parents=True, exist_ok=True)
        safe_name = re.sub(r'[^\w\-]', '_', document_name)
        return self.documents_path / f"{assistant_id}_{safe_name}.md"

    async def upload_document(
        self, assistant_id: str, document_name: str, content: str,
    ) -> DocumentCreated:
        """Write the chunk text to disk and attach it to the assistant for retrieval."""
        if not self.is_available:
            return DocumentCreated.failed()

        doc_path = self._document_path(assistant_id, document_name)
        try:
            doc_path.write_text(content, encoding='utf-8')
            document = await self._run_with_retry(
                "upload_document",
                lambda: self.client.upload_document_to_assistant(
                    assistant_id=assistant_id,
                    file_path=str(doc_path),
                ),
            )
        except Exception as e:
            logger.error(f"Failed to upload document {document_name}: {e}")
            return DocumentCreated.failed(str(e))

        logger.info(f"Uploaded {document_name} -> {document.document_id}")
        return DocumentCreated(success=True, id=str(document.document_id))
