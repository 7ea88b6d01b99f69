"""Result models for service operations."""

from nooklet.models.results.backboard import (
    BackboardResult, AssistantCreated, ThreadCreated,
    DocumentCreated, ChatResponse,
)

__all__ = [
    "BackboardResult", "AssistantCreated", "ThreadCreated",
    "DocumentCreated", "ChatResponse",
]
