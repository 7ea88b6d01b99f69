"""Auth user, profile and credential models."""

import re
from datetime import datetime, timezone
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, StringConstraints, field_validator, model_validator

from nooklet.models.base import CamelModel

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not _EMAIL_RE.match(value):
        raise ValueError("must be a valid email address")
    return value


class RegisterRequest(CamelModel):
    """Payload for creating an account and its profile."""
    email: str
    password: Annotated[str, StringConstraints(min_length=8, max_length=255)]
    password_confirmation: str
    username: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError("password confirmation does not match")
        return self


class LoginRequest(CamelModel):
    """Payload for exchanging credentials for a bearer token."""
    email: str
    password: Annotated[str, StringConstraints(min_length=1)]

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)


class AuthUser(CamelModel):
    """An authentication identity."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    email: str
    password_hash: str = Field(exclude=True)
    is_active: bool = True
    is_archived: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Profile(CamelModel):
    """The application-level identity that owns nooklets."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    auth_user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    timezone: Optional[str] = None
    subscription_tier: Optional[str] = None
    is_archived: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RegisteredUser(CamelModel):
    """Response body after a successful registration."""
    id: str
    email: str
    profile_id: str


class AccessToken(CamelModel):
    """Bearer token issued at login."""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class AuthIdentity(BaseModel):
    """Identity resolved from a validated bearer token."""
    user_id: str
    token: str
