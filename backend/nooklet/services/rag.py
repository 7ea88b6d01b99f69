"""Retrieval-augmented test pipeline: store journal text, ask questions about it."""

from datetime import datetime, timezone
from uuid import uuid4

import aiosqlite
from langchain_text_splitters import RecursiveCharacterTextSplitter

from nooklet.config import settings
from nooklet.database.db import connect
from nooklet.logging import get_logger
from nooklet.models import (
    EmbedTextRequest,
    EmbedTextResult,
    RagChatRequest,
    RagChatResult,
)
from nooklet.services.backboard import BackboardService
from nooklet.services.prompts import (
    build_rag_assistant_prompt,
    build_rag_chat_prompt,
    build_rag_system_prompt,
    render_rag_chunks,
)

logger = get_logger("services.rag")

SENTENCE_SEPARATORS = [".\n", ". ", "! ", "\n"]


class RagError(RuntimeError):
    """A step of the RAG pipeline failed."""


class RagService:
    """Splits text into sentence chunks and routes it through one assistant per user."""

    def __init__(
        self,
        db_path: str,
        backboard: BackboardService,
        collection: str = settings.RAG_COLLECTION,
        chunk_size: int = settings.RAG_CHUNK_SIZE,
        chunk_overlap: int = settings.RAG_CHUNK_OVERLAP,
    ):
        self.db_path = db_path
        self.backboard = backboard
        self.collection = collection
        self.splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=SENTENCE_SEPARATORS,
        )

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    def split_text(self, content: str) -> list[str]:
        return [chunk for chunk in self.splitter.split_text(content) if chunk.strip()]

    async def _get_assistant_id(self, user: str) -> str | None:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "SELECT assistant_id FROM rag_assistants WHERE user_key = ?",
                (user,),
            )
            row = await cursor.fetchone()
            return row["assistant_id"] if row else None
        finally:
            await db.close()

    async def _ensure_assistant(self, user: str) -> str:
        assistant_id = await self._get_assistant_id(user)
        if assistant_id:
            return assistant_id

        result = await self.backboard.create_assistant(
            name=f"{self.collection}:{user}",
            description=build_rag_assistant_prompt(user),
        )
        if not result.success or not result.id:
            raise RagError(f"Failed to create assistant for collection {self.collection}")

        db = await self._get_db()
        try:
            await db.execute(
                "INSERT OR IGNORE INTO rag_assistants (user_key, assistant_id, created_at) VALUES (?, ?, ?)",
                (user, result.id, datetime.now(timezone.utc).isoformat()),
            )
            await db.commit()
        finally:
            await db.close()
        # A concurrent request may have won the insert.
        return await self._get_assistant_id(user) or result.id

    async def embed_text(self, data: EmbedTextRequest) -> EmbedTextResult:
        chunks = self.split_text(data.content)
        if not chunks:
            raise RagError("No text to embed")

        assistant_id = await self._ensure_assistant(data.user)
        document = await self.backboard.upload_document(
            assistant_id=assistant_id,
            document_name=f"{self.collection}_{uuid4().hex[:12]}",
            content=render_rag_chunks(chunks, data.date),
        )
        if not document.success:
            raise RagError(document.error or "Failed to store chunks")

        logger.info(f"Stored {len(chunks)} chunks in {self.collection} for {data.user}")
        return EmbedTextResult(chunks_processed=len(chunks), collection=self.collection)

    async def chat(self, data: RagChatRequest) -> RagChatResult:
        assistant_id = await self._ensure_assistant(data.user)
        thread = await self.backboard.create_thread(assistant_id)
        if not thread.success or not thread.id:
            raise RagError("Failed to create chat thread")

        system_prompt = build_rag_system_prompt(datetime.now())
        logger.debug(f"systemPrompt: {system_prompt}")
        reply = await self.backboard.chat(
            thread_id=thread.id,
            prompt=build_rag_chat_prompt(system_prompt, data.prompt),
        )
        if not reply.success:
            raise RagError(reply.error or "Chat failed")

        return RagChatResult(
            response=reply.response or "",
            system_prompt=system_prompt,
            retrieved=reply.retrieved_files_count or 0,
        )
