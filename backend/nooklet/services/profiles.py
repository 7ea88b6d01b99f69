"""
Profile lookups used to resolve the owner of a request.
"""

from datetime import datetime, timezone

import aiosqlite

from nooklet.database.db import connect
from nooklet.errors import ProfileNotFoundError
from nooklet.models import Profile


def _row_to_profile(row: dict) -> Profile:
    return Profile(
        id=row["id"],
        auth_user_id=row["auth_user_id"],
        username=row.get("username"),
        display_name=row.get("display_name"),
        timezone=row.get("timezone"),
        subscription_tier=row.get("subscription_tier"),
        is_archived=bool(row["is_archived"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class ProfileService:
    """Reads profiles and inserts them inside a caller's transaction."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def find_by_auth_user(self, auth_user_id: str) -> Profile | None:
        db = await connect(self.db_path)
        try:
            cursor = await db.execute(
                "SELECT * FROM profiles WHERE auth_user_id = ?",
                (auth_user_id,),
            )
            row = await cursor.fetchone()
            return _row_to_profile(dict(row)) if row else None
        finally:
            await db.close()

    async def resolve_owner_id(self, auth_user_id: str) -> str:
        """
        Return the id of the profile owning this identity's nooklets.

        :raises ProfileNotFoundError: when the identity has no profile
        """
        profile = await self.find_by_auth_user(auth_user_id)
        if not profile:
            raise ProfileNotFoundError()
        return profile.id

    async def insert(self, db: aiosqlite.Connection, profile: Profile) -> None:
        """Insert without committing; the caller owns the transaction."""
        await db.execute(
            """INSERT INTO profiles (id, auth_user_id, username, display_name, timezone,
                                     subscription_tier, is_archived, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                profile.id,
                profile.auth_user_id,
                profile.username,
                profile.display_name,
                profile.timezone,
                profile.subscription_tier,
                int(profile.is_archived),
                profile.created_at.astimezone(timezone.utc).isoformat(),
                profile.updated_at.astimezone(timezone.utc).isoformat(),
            ),
        )


def new_profile(auth_user_id: str, username: str | None = None, display_name: str | None = None) -> Profile:
    now = datetime.now(timezone.utc)
    return Profile(
        auth_user_id=auth_user_id,
        username=username,
        display_name=display_name,
        created_at=now,
        updated_at=now,
    )
