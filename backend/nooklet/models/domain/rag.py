"""Request/response models for the retrieval-augmented test endpoints."""

from typing import Annotated, Optional

from pydantic import StringConstraints

from nooklet.models.base import CamelModel

NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class EmbedTextRequest(CamelModel):
    """Text to split and store for later retrieval."""
    content: NonEmpty
    user: NonEmpty
    date: Optional[Annotated[str, StringConstraints(strip_whitespace=True)]] = None


class EmbedTextResult(CamelModel):
    success: bool = True
    chunks_processed: int
    collection: str


class RagChatRequest(CamelModel):
    """Question answered against a user's stored text."""
    prompt: NonEmpty
    user: NonEmpty


class RagChatResult(CamelModel):
    success: bool = True
    response: str
    system_prompt: str
    retrieved: int
