"""
Tests for the RAG pipeline with Backboard replaced by an in-memory fake.
"""

from datetime import datetime

import pytest

from conftest import FakeBackboard
from nooklet.database.db import init_db
from nooklet.models import EmbedTextRequest, RagChatRequest
from nooklet.services.prompts import format_date, render_rag_chunks
from nooklet.services.rag import RagError, RagService


@pytest.fixture
async def rag(db_path, fake_backboard):
    await init_db(db_path)
    return RagService(db_path=db_path, backboard=fake_backboard, collection="chunks_test")


class TestSplitText:

    def test_short_text_is_one_chunk(self, rag):
        assert rag.split_text("Went for a walk.") == ["Went for a walk."]

    def test_long_text_splits_on_sentences(self, rag):
        text = " ".join(f"Sentence number {i} is about the day." for i in range(30))

        chunks = rag.split_text(text)
        assert len(chunks) > 1
        assert all(len(chunk) <= 200 for chunk in chunks)

    def test_blank_text_yields_nothing(self, rag):
        assert rag.split_text("   \n  ") == []


class TestEmbedText:

    async def test_stores_dated_chunks(self, rag, fake_backboard):
        result = await rag.embed_text(
            EmbedTextRequest(content="Hiked up the ridge. Saw a hawk.", user="sam", date="2024-06-01")
        )

        assert result.success is True
        assert result.chunks_processed >= 1
        assert result.collection == "chunks_test"
        assert len(fake_backboard.documents) == 1
        assert "[01][date: 2024-06-01]" in fake_backboard.documents[0]["content"]

    async def test_reuses_one_assistant_per_user(self, rag, fake_backboard):
        await rag.embed_text(EmbedTextRequest(content="First entry.", user="sam"))
        await rag.embed_text(EmbedTextRequest(content="Second entry.", user="sam"))
        await rag.embed_text(EmbedTextRequest(content="Other entry.", user="alex"))

        assert len(fake_backboard.assistants) == 2
        sam_docs = {d["assistant_id"] for d in fake_backboard.documents[:2]}
        assert len(sam_docs) == 1

    async def test_backboard_unavailable_raises(self, db_path):
        await init_db(db_path)
        service = RagService(db_path=db_path, backboard=FakeBackboard(available=False))

        with pytest.raises(RagError):
            await service.embed_text(EmbedTextRequest(content="Anything.", user="sam"))


class TestChat:

    async def test_returns_answer_and_prompt(self, rag, fake_backboard):
        result = await rag.chat(RagChatRequest(prompt="What did I do on Saturday?", user="sam"))

        assert result.success is True
        assert result.response == "You went hiking on Saturday."
        assert result.retrieved == 3
        assert "Current date:" in result.system_prompt
        assert fake_backboard.prompts[0].endswith("Question: What did I do on Saturday?")

    async def test_chat_failure_raises(self, db_path):
        await init_db(db_path)
        service = RagService(db_path=db_path, backboard=FakeBackboard(available=False))

        with pytest.raises(RagError):
            await service.chat(RagChatRequest(prompt="Hello?", user="sam"))


class TestPrompts:

    def test_format_date(self):
        assert format_date(datetime(2024, 1, 1, 15, 4)) == "Monday, January 1, 2024 - 3:04 PM"

    def test_format_date_midnight(self):
        assert format_date(datetime(2024, 1, 1, 0, 5)) == "Monday, January 1, 2024 - 12:05 AM"

    def test_render_chunks_numbers_and_dates(self):
        rendered = render_rag_chunks(["One.", "Two."], None)

        assert rendered == "[01][date: unknown] One.\n\n[02][date: unknown] Two."
