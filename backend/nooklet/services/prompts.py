"""Prompt builders shared across services."""

from datetime import datetime


def format_date(value: datetime) -> str:
    """Render e.g. ``Monday, January 1, 2024 - 3:04 PM``."""
    hour = value.hour % 12 or 12
    return (
        f"{value:%A}, {value:%B} {value.day}, {value.year}"
        f" - {hour}:{value:%M} {value:%p}"
    )


def build_rag_assistant_prompt(user: str) -> str:
    return (
        f"You answer questions about the journal of '{user}'. "
        "Ground every answer in the uploaded journal excerpts. "
        "Each excerpt is prefixed with the date it was written."
    )


def build_rag_system_prompt(now: datetime) -> str:
    return (
        "You are an assistant for question-answering tasks. "
        "Use the following pieces of retrieved context to answer the question accurately. "
        "If you don't know the answer, just say that you don't know.\n\n"
        f"Context (Current date: {format_date(now)}): the journal excerpts retrieved for this question."
    )


def build_rag_chat_prompt(system_prompt: str, question: str) -> str:
    return f"{system_prompt}\n\nQuestion: {question}"


def render_rag_chunks(chunks: list[str], date: str | None) -> str:
    label = date or "unknown"
    return "\n\n".join(
        f"[{index:02d}][date: {label}] {chunk.strip()}"
        for index, chunk in enumerate(chunks, start=1)
    )
