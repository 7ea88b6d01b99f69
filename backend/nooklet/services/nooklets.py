"""Nooklet CRUD and the business rules around it."""

import json
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import aiosqlite

from nooklet.database.db import connect
from nooklet.errors import NookletNotFoundError
from nooklet.logging import get_logger
from nooklet.models import (
    CreateNookletPayload,
    Nooklet,
    NookletType,
    UpdateNookletPayload,
)

logger = get_logger("services.nooklets")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def compute_word_count(content: str | None) -> int | None:
    """
    Count whitespace-delimited, non-empty tokens.

    ``None`` means no content was given and stays ``None``; empty or
    whitespace-only content counts as 0.
    """
    if content is None:
        return None
    words = [word.strip() for word in content.split()]
    return len([word for word in words if word])


def sanitize_metadata(metadata: Any) -> dict[str, Any]:
    """
    Coerce metadata to an object.

    Missing values, arrays and primitives become ``{}``; objects pass
    through without deep validation.
    """
    if isinstance(metadata, dict):
        return metadata
    return {}


def _row_to_nooklet(row: dict) -> Nooklet:
    return Nooklet(
        id=row["id"],
        profile_id=row["profile_id"],
        type=row["type"],
        content=row["content"],
        raw_content=row.get("raw_content"),
        summary=row.get("summary"),
        metadata=sanitize_metadata(json.loads(row["metadata"] or "{}")),
        is_draft=bool(row["is_draft"]),
        is_favorite=bool(row["is_favorite"]),
        is_archived=bool(row["is_archived"]),
        word_count=row.get("word_count"),
        published_at=row.get("published_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class NookletService:
    """Owner-scoped persistence for nooklets."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    async def list_for_user(self, owner_id: str) -> list[Nooklet]:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                """SELECT * FROM nooklets
                   WHERE profile_id = ? AND is_archived = 0
                   ORDER BY created_at ASC, rowid ASC""",
                (owner_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_nooklet(dict(r)) for r in rows]
        finally:
            await db.close()

    async def get(self, nooklet_id: str, owner_id: str) -> Nooklet | None:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "SELECT * FROM nooklets WHERE id = ? AND profile_id = ?",
                (nooklet_id, owner_id),
            )
            row = await cursor.fetchone()
            return _row_to_nooklet(dict(row)) if row else None
        finally:
            await db.close()

    async def _get_owned(self, nooklet_id: str, owner_id: str) -> Nooklet:
        nooklet = await self.get(nooklet_id, owner_id)
        if not nooklet:
            raise NookletNotFoundError()
        return nooklet

    async def create(self, payload: CreateNookletPayload) -> Nooklet:
        now = _now()
        nooklet = Nooklet(
            id=str(uuid4()),
            profile_id=payload.profile_id,
            type=payload.type or NookletType.JOURNAL,
            content=payload.content,
            raw_content=payload.raw_content,
            summary=payload.summary,
            metadata=sanitize_metadata(payload.metadata),
            is_draft=bool(payload.is_draft),
            is_favorite=bool(payload.is_favorite),
            word_count=compute_word_count(payload.content),
            published_at=payload.published_at,
            created_at=now,
            updated_at=now,
        )
        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO nooklets (id, profile_id, type, content, raw_content, summary, metadata,
                                         is_favorite, is_archived, is_draft, word_count, published_at,
                                         created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    nooklet.id,
                    nooklet.profile_id,
                    nooklet.type.value,
                    nooklet.content,
                    nooklet.raw_content,
                    nooklet.summary,
                    json.dumps(nooklet.metadata),
                    int(nooklet.is_favorite),
                    int(nooklet.is_archived),
                    int(nooklet.is_draft),
                    nooklet.word_count,
                    _to_iso(nooklet.published_at),
                    now,
                    now,
                ),
            )
            await db.commit()
        finally:
            await db.close()

        logger.info(f"Created nooklet {nooklet.id[:8]} for profile {nooklet.profile_id[:8]}")
        return nooklet

    async def update(
        self, nooklet_id: str, owner_id: str, patch: UpdateNookletPayload
    ) -> Nooklet:
        existing = await self._get_owned(nooklet_id, owner_id)
        provided = patch.model_fields_set

        fields: dict[str, Any] = {}
        if "type" in provided and patch.type is not None:
            fields["type"] = NookletType(patch.type).value
        if "content" in provided and patch.content is not None:
            fields["content"] = patch.content
            fields["word_count"] = compute_word_count(patch.content)
        if "raw_content" in provided:
            fields["raw_content"] = patch.raw_content
        if "summary" in provided:
            fields["summary"] = patch.summary
        if "metadata" in provided:
            fields["metadata"] = json.dumps(sanitize_metadata(patch.metadata))
        if "is_favorite" in provided and patch.is_favorite is not None:
            fields["is_favorite"] = int(patch.is_favorite)
        if "published_at" in provided:
            fields["published_at"] = _to_iso(patch.published_at)
        # Draft wins over any publishedAt sent in the same patch.
        if "is_draft" in provided and patch.is_draft is not None:
            fields["is_draft"] = int(patch.is_draft)
            if patch.is_draft:
                fields["published_at"] = None

        if not fields:
            return existing

        fields["updated_at"] = _now()
        await self._write(nooklet_id, owner_id, fields)
        return await self._get_owned(nooklet_id, owner_id)

    async def archive(self, nooklet_id: str, owner_id: str) -> Nooklet:
        nooklet = await self._get_owned(nooklet_id, owner_id)
        if nooklet.is_archived:
            return nooklet
        await self._write(nooklet_id, owner_id, {"is_archived": 1, "updated_at": _now()})
        logger.info(f"Archived nooklet {nooklet_id[:8]}")
        return await self._get_owned(nooklet_id, owner_id)

    async def restore(self, nooklet_id: str, owner_id: str) -> Nooklet:
        nooklet = await self._get_owned(nooklet_id, owner_id)
        if not nooklet.is_archived:
            return nooklet
        await self._write(nooklet_id, owner_id, {"is_archived": 0, "updated_at": _now()})
        logger.info(f"Restored nooklet {nooklet_id[:8]}")
        return await self._get_owned(nooklet_id, owner_id)

    async def _write(self, nooklet_id: str, owner_id: str, fields: dict[str, Any]) -> None:
        set_clause = ", ".join(f"{k} = ?" for k in fields)
        params = list(fields.values()) + [nooklet_id, owner_id]
        db = await self._get_db()
        try:
            await db.execute(
                f"UPDATE nooklets SET {set_clause} WHERE id = ? AND profile_id = ?",
                params,
            )
            await db.commit()
        finally:
            await db.close()
