"""Writer Agent: drafts chapter prose with one chapter of look-back."""

import logging
from typing import Optional

from agents.base_agent import BaseAgent
from config.exceptions import ContentTooShortError
from config.settings import Settings
from models.book import Chapter
from models.schemas import CHAPTER_PROSE_SCHEMA, parse_chapter_prose
from tools.completion_client import CompletionClient
from tools.text_utils import count_total_chars

logger = logging.getLogger(__name__)


class WriterAgent(BaseAgent):
    """Generates the prose for a single chapter."""

    def __init__(
        self,
        llm_client: Optional[CompletionClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(llm_client, settings)
        self._template = self._load_prompt("writer")

    def build_prompts(
        self,
        book_title: str,
        chapter: Chapter,
        previous_summary: Optional[str] = None,
    ) -> tuple[str, str]:
        system_prompt = self._extract_section(self._template, "System Prompt")
        user_prompt = self._extract_section(self._template, "Chapter Instructions").format(
            chapter_title=chapter.title,
            book_title=book_title,
            chapter_summary=chapter.summary,
            previous_summary=previous_summary or "(This is the opening chapter.)",
            target_words=self.settings.chapter_target_words,
        )
        return system_prompt, user_prompt

    async def write_chapter(
        self,
        book_title: str,
        chapter: Chapter,
        previous_summary: Optional[str] = None,
    ) -> str:
        """Draft one chapter and return its prose.

        Only the previous chapter's summary is passed as context, never
        earlier prose. Replies shorter than chapter_min_chars raise
        ContentTooShortError and are retried.

        Raises:
            GenerationError: Once the retry policy gives up.
        """
        system_prompt, user_prompt = self.build_prompts(book_title, chapter, previous_summary)
        min_chars = self.settings.chapter_min_chars

        async def _attempt() -> str:
            data = await self.llm.generate_structured_text(
                system_prompt, user_prompt, CHAPTER_PROSE_SCHEMA,
            )
            content = parse_chapter_prose(data).strip()
            length = count_total_chars(content)
            if length < min_chars:
                raise ContentTooShortError(length, min_chars)
            return content

        logger.info("Writing chapter '%s'...", chapter.title)
        content = await self._retrying(_attempt, label=f"chapter '{chapter.title}'")
        logger.info("Chapter '%s' written: %d chars", chapter.title, len(content))
        return content
