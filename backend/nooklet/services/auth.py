"""
Registration, credential checks and bearer tokens.
"""

from datetime import datetime, timedelta, timezone

import aiosqlite
import jwt
from fastapi import status
from passlib.context import CryptContext

from nooklet.config import settings
from nooklet.database.db import connect
from nooklet.errors import AuthError
from nooklet.logging import get_logger
from nooklet.models import (
    AccessToken,
    AuthIdentity,
    AuthUser,
    LoginRequest,
    Profile,
    RegisterRequest,
)
from nooklet.services.profiles import ProfileService, new_profile

logger = get_logger('services.auth')

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def _row_to_user(row: dict) -> AuthUser:
    return AuthUser(
        id=row["id"],
        email=row["email"],
        password_hash=row["password_hash"],
        is_active=bool(row["is_active"]),
        is_archived=bool(row["is_archived"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class AuthService:
    """Creates accounts and issues/validates HS256 bearer tokens."""

    def __init__(
        self,
        db_path: str,
        profiles: ProfileService,
        secret_key: str = settings.JWT_SECRET_KEY,
        algorithm: str = settings.JWT_ALGORITHM,
        expires_minutes: int = settings.JWT_EXPIRES_MINUTES,
    ):
        self.db_path = db_path
        self.profiles = profiles
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    async def get_user_by_email(self, email: str) -> AuthUser | None:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "SELECT * FROM auth_users WHERE email = ?",
                (email.strip().lower(),),
            )
            row = await cursor.fetchone()
            return _row_to_user(dict(row)) if row else None
        finally:
            await db.close()

    async def register(self, data: RegisterRequest) -> tuple[AuthUser, Profile]:
        now = datetime.now(timezone.utc)
        user = AuthUser(
            email=data.email,
            password_hash=pwd_context.hash(data.password),
            created_at=now,
            updated_at=now,
        )
        profile = new_profile(user.id, username=data.username)

        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO auth_users (id, email, password_hash, is_active, is_archived, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    user.id,
                    user.email,
                    user.password_hash,
                    int(user.is_active),
                    int(user.is_archived),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            await self.profiles.insert(db, profile)
            await db.commit()
        except aiosqlite.IntegrityError as exc:
            await db.rollback()
            message = str(exc)
            if "auth_users.email" in message:
                raise AuthError(
                    "EMAIL_TAKEN", "Email is already in use",
                    status_code=status.HTTP_409_CONFLICT,
                ) from exc
            if "profiles.username" in message:
                raise AuthError(
                    "USERNAME_TAKEN", "Username is already taken",
                    status_code=status.HTTP_409_CONFLICT,
                ) from exc
            raise
        finally:
            await db.close()

        logger.info(f"Registered user {user.id[:8]} with profile {profile.id[:8]}")
        return user, profile

    async def login(self, data: LoginRequest) -> AccessToken:
        user = await self.get_user_by_email(data.email)
        if not user or not pwd_context.verify(data.password, user.password_hash):
            raise AuthError("INVALID_CREDENTIALS", "Invalid email or password")
        if not user.is_active or user.is_archived:
            raise AuthError(
                "ACCOUNT_INACTIVE", "Account is inactive",
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return self.issue_token(user.id)

    def issue_token(self, user_id: str) -> AccessToken:
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(minutes=self.expires_minutes)
        token = jwt.encode(
            {"sub": user_id, "iat": int(now.timestamp()), "exp": int(expires_at.timestamp())},
            self.secret_key,
            algorithm=self.algorithm,
        )
        return AccessToken(access_token=token, expires_at=expires_at)

    def validate_token(self, token: str) -> AuthIdentity:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("TOKEN_EXPIRED", "Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError("INVALID_TOKEN", "Invalid token") from exc

        user_id = payload.get("sub")
        if not user_id:
            raise AuthError("INVALID_TOKEN", "Token missing subject")
        return AuthIdentity(user_id=str(user_id), token=token)
