"""
Result models for Backboard transport calls.

The transport never raises; callers check ``success`` and read ``error``.
"""

from typing import Optional

from pydantic import BaseModel


class BackboardResult(BaseModel):
    """Outcome of one Backboard call."""
    success: bool
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str = "Backboard service unavailable"):
        return cls(success=False, error=error)


class AssistantCreated(BackboardResult):
    id: Optional[str] = None


class ThreadCreated(BackboardResult):
    id: Optional[str] = None


class DocumentCreated(BackboardResult):
    """A chunk document stored on an assistant."""
    id: Optional[str] = None


class ChatResponse(BackboardResult):
    """Assistant reply plus how many stored documents were retrieved for it."""
    response: Optional[str] = None
    model_name: Optional[str] = None
    total_tokens: Optional[int] = None
    retrieved_files_count: Optional[int] = None
