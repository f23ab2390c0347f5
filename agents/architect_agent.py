"""Architect Agent: turns a brief into a titled, authored chapter outline."""

import logging
from typing import Optional

from agents.base_agent import BaseAgent
from config.settings import Settings
from models.book import GenerationBrief
from models.schemas import BOOK_STRUCTURE_SCHEMA, BookStructure, parse_book_structure
from tools.completion_client import CompletionClient

logger = logging.getLogger(__name__)


class ArchitectAgent(BaseAgent):
    """Generates the book structure: title, author, outlines, characters."""

    def __init__(
        self,
        llm_client: Optional[CompletionClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(llm_client, settings)
        self._template = self._load_prompt("architect")

    def build_prompts(self, brief: GenerationBrief) -> tuple[str, str]:
        system_prompt = self._extract_section(self._template, "System Prompt")
        user_prompt = self._extract_section(self._template, "Outline Instructions").format(
            title=brief.title,
            genre=brief.genre,
            tone=brief.tone,
            audience=brief.audience,
            premise=brief.premise or "None",
            min_chapters=self.settings.min_chapters,
            max_chapters=self.settings.max_chapters,
        )
        return system_prompt, user_prompt

    async def generate_structure(self, brief: GenerationBrief) -> BookStructure:
        """Request and validate the outline, retrying malformed replies.

        Raises:
            GenerationError: Once the retry policy gives up.
        """
        system_prompt, user_prompt = self.build_prompts(brief)

        async def _attempt() -> BookStructure:
            data = await self.llm.generate_structured_text(
                system_prompt, user_prompt, BOOK_STRUCTURE_SCHEMA,
            )
            return parse_book_structure(data)

        logger.info("Outlining '%s' (%s, %s)", brief.title, brief.genre, brief.tone)
        structure = await self._retrying(_attempt, label="outline")

        count = len(structure.chapters)
        if not self.settings.min_chapters <= count <= self.settings.max_chapters:
            logger.warning(
                "Outline has %d chapters, outside requested %d-%d; keeping as returned",
                count, self.settings.min_chapters, self.settings.max_chapters,
            )
        logger.info("Outline ready: '%s' with %d chapters", structure.title or brief.title, count)
        return structure
