"""Nooklet domain model."""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, StringConstraints, model_validator

from nooklet.models.base import CamelModel
from nooklet.models.enums import NookletType

StrippedText = Annotated[str, StringConstraints(strip_whitespace=True)]
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Present-but-null is rejected for these; the rest accept null as "clear".
_NON_NULLABLE_FIELDS = ("type", "content", "is_draft", "is_favorite")


class NookletCreate(CamelModel):
    """Request body for creating a nooklet."""
    type: Optional[NookletType] = None
    content: RequiredText
    raw_content: Optional[str] = None
    summary: Optional[str] = None
    metadata: Optional[dict[str, Any] | list[Any]] = None
    is_draft: Optional[bool] = None
    is_favorite: Optional[bool] = None
    published_at: Optional[str] = None


class NookletUpdate(CamelModel):
    """Request body for patching a nooklet. Omitted fields stay unchanged."""
    type: Optional[NookletType] = None
    content: Optional[StrippedText] = None
    raw_content: Optional[str] = None
    summary: Optional[str] = None
    metadata: Optional[dict[str, Any] | list[Any]] = None
    is_draft: Optional[bool] = None
    is_favorite: Optional[bool] = None
    published_at: Optional[str] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for name in _NON_NULLABLE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class CreateNookletPayload(BaseModel):
    """Service-level input for inserting a nooklet for an owner."""
    profile_id: str
    content: str
    type: Optional[NookletType] = None
    raw_content: Optional[str] = None
    summary: Optional[str] = None
    metadata: Any = None
    is_draft: Optional[bool] = None
    is_favorite: Optional[bool] = None
    published_at: Optional[datetime] = None


class UpdateNookletPayload(BaseModel):
    """Service-level partial patch; only fields that were set are applied."""
    type: Optional[NookletType] = None
    content: Optional[str] = None
    raw_content: Optional[str] = None
    summary: Optional[str] = None
    metadata: Any = None
    is_draft: Optional[bool] = None
    is_favorite: Optional[bool] = None
    published_at: Optional[datetime] = None


class Nooklet(CamelModel):
    """A single journal, voice or quick-capture entry owned by a profile."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    profile_id: str = Field(exclude=True)
    type: NookletType = NookletType.JOURNAL
    content: str
    raw_content: Optional[str] = None
    summary: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_draft: bool = False
    is_favorite: bool = False
    is_archived: bool = False
    word_count: Optional[int] = None
    published_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NookletEnvelope(BaseModel):
    """`{data: ...}` wrapper used by the JSON API."""
    data: Nooklet


class HomeView(BaseModel):
    """Props for the journal home view."""
    nooklets: list[Nooklet] = Field(default_factory=list)
