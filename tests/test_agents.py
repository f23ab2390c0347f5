"""Tests for the prompt-level agents."""

from unittest.mock import AsyncMock

import pytest

from config.exceptions import (
    AuthError,
    CompletionError,
    ContentTooShortError,
    MalformedResponseError,
)
from conftest import PROSE, make_structure
from models.book import Chapter, GenerationBrief
from tools.image_utils import placeholder_cover

BRIEF = GenerationBrief(title="Echo", genre="Mystery", tone="Suspenseful", audience="Adults", premise="A lighthouse.")


class TestBaseAgent:
    def test_extract_section(self, mock_client, settings):
        from agents.base_agent import BaseAgent
        agent = BaseAgent(mock_client, settings)
        template = "# T\n\n## System Prompt\nBe kind.\n\n## Other\nIgnored."
        assert agent._extract_section(template, "System Prompt") == "Be kind."
        assert agent._extract_section(template, "Missing") == ""

    def test_missing_prompt_raises(self, mock_client, settings):
        from agents.base_agent import BaseAgent
        with pytest.raises(FileNotFoundError):
            BaseAgent(mock_client, settings)._load_prompt("nope")


class TestArchitectAgent:
    def test_prompts_carry_brief(self, mock_client, settings):
        from agents.architect_agent import ArchitectAgent
        system, user = ArchitectAgent(mock_client, settings).build_prompts(BRIEF)
        assert "JSON" in system
        for value in ("Echo", "Mystery", "Suspenseful", "Adults", "A lighthouse."):
            assert value in user
        assert f"{settings.min_chapters}-{settings.max_chapters}" in user

    @pytest.mark.asyncio
    async def test_generate_structure(self, mock_client, settings):
        from agents.architect_agent import ArchitectAgent
        structure = await ArchitectAgent(mock_client, settings).generate_structure(BRIEF)
        assert structure.title == "Echo"
        assert [o.title for o in structure.outlines()] == ["Chapter One", "Chapter Two", "Chapter Three"]

    @pytest.mark.asyncio
    async def test_malformed_outline_retried(self, mock_client, settings):
        from agents.architect_agent import ArchitectAgent
        mock_client.generate_structured_text = AsyncMock(side_effect=[{"chapters": "nope"}, make_structure()])
        structure = await ArchitectAgent(mock_client, settings).generate_structure(BRIEF)
        assert len(structure.chapters) == 3
        assert mock_client.generate_structured_text.await_count == 2

    @pytest.mark.asyncio
    async def test_malformed_outline_gives_up(self, mock_client, settings):
        from agents.architect_agent import ArchitectAgent
        mock_client.generate_structured_text = AsyncMock(return_value={"title": "Echo", "chapters": []})
        with pytest.raises(MalformedResponseError):
            await ArchitectAgent(mock_client, settings).generate_structure(BRIEF)
        assert mock_client.generate_structured_text.await_count == settings.retry_max_attempts

    @pytest.mark.asyncio
    async def test_out_of_range_count_kept(self, mock_client, settings):
        from agents.architect_agent import ArchitectAgent
        settings.min_chapters = 5
        structure = await ArchitectAgent(mock_client, settings).generate_structure(BRIEF)
        assert len(structure.chapters) == 3


class TestWriterAgent:
    def test_prompt_uses_previous_summary(self, mock_client, settings):
        from agents.writer_agent import WriterAgent
        chapter = Chapter("c1", "Chapter Two", "The bell rings.")
        _, user = WriterAgent(mock_client, settings).build_prompts("Echo", chapter, "Mara arrives.")
        assert "Chapter Two" in user
        assert "The bell rings." in user
        assert "Mara arrives." in user

    def test_opening_chapter_prompt(self, mock_client, settings):
        from agents.writer_agent import WriterAgent
        _, user = WriterAgent(mock_client, settings).build_prompts("Echo", Chapter("c0", "One", "s"))
        assert "opening chapter" in user

    @pytest.mark.asyncio
    async def test_write_chapter_strips(self, mock_client, settings):
        from agents.writer_agent import WriterAgent
        content = await WriterAgent(mock_client, settings).write_chapter("Echo", Chapter("c0", "One", "s"))
        assert content == PROSE.strip()

    @pytest.mark.asyncio
    async def test_short_content_retried(self, mock_client, settings):
        from agents.writer_agent import WriterAgent
        mock_client.generate_structured_text = AsyncMock(side_effect=[{"content": "  Too short.  "}, {"content": PROSE}])
        content = await WriterAgent(mock_client, settings).write_chapter("Echo", Chapter("c0", "One", "s"))
        assert content == PROSE.strip()
        assert mock_client.generate_structured_text.await_count == 2

    @pytest.mark.asyncio
    async def test_short_content_exhausts_retries(self, mock_client, settings):
        from agents.writer_agent import WriterAgent
        mock_client.generate_structured_text = AsyncMock(return_value={"content": "tiny"})
        with pytest.raises(ContentTooShortError):
            await WriterAgent(mock_client, settings).write_chapter("Echo", Chapter("c0", "One", "s"))
        assert mock_client.generate_structured_text.await_count == 3

    @pytest.mark.asyncio
    async def test_auth_failure_not_retried(self, mock_client, settings):
        from agents.writer_agent import WriterAgent
        mock_client.generate_structured_text = AsyncMock(side_effect=CompletionError("denied", status_code=403))
        with pytest.raises(AuthError):
            await WriterAgent(mock_client, settings).write_chapter("Echo", Chapter("c0", "One", "s"))
        assert mock_client.generate_structured_text.await_count == 1


class TestCoverAgent:
    @pytest.mark.asyncio
    async def test_returns_data_uri(self, mock_client, settings):
        from agents.cover_agent import CoverAgent
        cover = await CoverAgent(mock_client, settings).generate_cover("Echo", "Mystery", "Dark")
        assert cover.startswith("data:image/png;base64,")
        prompt, aspect = mock_client.generate_image.call_args.args
        assert "Echo" in prompt and "Mystery" in prompt
        assert aspect == "3:4"

    @pytest.mark.asyncio
    async def test_none_image_returns_none(self, make_client, settings):
        from agents.cover_agent import CoverAgent
        client = make_client(image=None)
        assert await CoverAgent(client, settings).generate_cover("Echo", "Mystery", "Dark") is None

    @pytest.mark.asyncio
    async def test_errors_downgraded(self, mock_client, settings):
        from agents.cover_agent import CoverAgent
        mock_client.generate_image = AsyncMock(side_effect=CompletionError("Quota exceeded", status_code=429))
        assert await CoverAgent(mock_client, settings).generate_cover("Echo", "Mystery", "Dark") is None
        assert mock_client.generate_image.await_count == 1

    @pytest.mark.asyncio
    async def test_undecodable_bytes_returns_none(self, make_client, settings):
        from agents.cover_agent import CoverAgent
        client = make_client(image=b"not an image")
        assert await CoverAgent(client, settings).generate_cover("Echo", "Mystery", "Dark") is None

    @pytest.mark.asyncio
    async def test_cover_or_placeholder(self, make_client, settings):
        from agents.cover_agent import CoverAgent
        client = make_client(image=None)
        cover = await CoverAgent(client, settings).cover_or_placeholder("Echo", "Mystery", "Dark")
        assert cover == placeholder_cover("Echo", "Mystery", "Dark")


class TestReaderAgent:
    @pytest.mark.asyncio
    async def test_answers(self, mock_client, settings):
        from agents.reader_agent import ReaderAgent
        answer = await ReaderAgent(mock_client, settings).ask_book("Why?", "Chapter text.", "Summaries.")
        assert answer == "It was the tide."
        user = mock_client.generate_structured_text.call_args.args[1]
        assert "Why?" in user and "Chapter text." in user and "Summaries." in user

    @pytest.mark.asyncio
    async def test_chapter_text_truncated(self, mock_client, settings):
        from agents.reader_agent import ReaderAgent
        await ReaderAgent(mock_client, settings).ask_book("Why?", "x" * 6000, "s")
        user = mock_client.generate_structured_text.call_args.args[1]
        assert "x" * 5000 in user
        assert "x" * 5001 not in user

    @pytest.mark.asyncio
    async def test_failure_gives_fallback(self, mock_client, settings):
        from agents.reader_agent import ReaderAgent
        mock_client.generate_structured_text = AsyncMock(side_effect=CompletionError("API key invalid"))
        answer = await ReaderAgent(mock_client, settings).ask_book("Why?", "text", "s")
        assert "ask me again" in answer

    @pytest.mark.asyncio
    async def test_blank_answer_gives_fallback(self, make_client, settings):
        from agents.reader_agent import ReaderAgent
        client = make_client(answer="   ")
        answer = await ReaderAgent(client, settings).ask_book("Why?", "text", "s")
        assert "ask me again" in answer

    @pytest.mark.asyncio
    async def test_ask_chapter_uses_book_summaries(self, mock_client, settings, sample_book):
        from agents.reader_agent import ReaderAgent
        answer = await ReaderAgent(mock_client, settings).ask_chapter(sample_book, 1, "Who rang?")
        assert answer == "It was the tide."
        user = mock_client.generate_structured_text.call_args.args[1]
        assert "Summary 1.\nSummary 2.\nSummary 3." in user
        assert "Line one of 2." in user
        assert "Line one of 1." not in user

    @pytest.mark.asyncio
    async def test_ask_chapter_bad_index(self, mock_client, settings, sample_book):
        from agents.reader_agent import ReaderAgent
        with pytest.raises(IndexError):
            await ReaderAgent(mock_client, settings).ask_chapter(sample_book, 3, "Who rang?")
