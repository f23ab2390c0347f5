"""Reader Agent: answers reader questions in the narrator's voice."""

import logging
from typing import Optional

from agents.base_agent import BaseAgent
from config.exceptions import GenerationError
from config.settings import Settings
from models.book import Book
from models.schemas import READER_ANSWER_SCHEMA, parse_reader_answer
from tools.completion_client import CompletionClient
from tools.text_utils import truncate

logger = logging.getLogger(__name__)

_CHAPTER_CONTEXT_CHARS = 5000
_FALLBACK_ANSWER = "I couldn't reach the story just now. Please ask me again in a moment."


class ReaderAgent(BaseAgent):
    """Contextual Q&A over the chapter being read."""

    def __init__(
        self,
        llm_client: Optional[CompletionClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(llm_client, settings)
        self._template = self._load_prompt("reader")

    async def ask_book(self, question: str, chapter_content: str, book_summary: str) -> str:
        """Answer question from the chapter text and the book's summaries.

        Errors are logged and turned into an in-persona fallback reply.
        """
        system_prompt = self._extract_section(self._template, "System Prompt")
        user_prompt = self._extract_section(self._template, "Question Instructions").format(
            book_summary=book_summary,
            chapter_text=truncate(chapter_content, _CHAPTER_CONTEXT_CHARS),
            question=question,
        )

        async def _attempt() -> str:
            data = await self.llm.generate_structured_text(
                system_prompt, user_prompt, READER_ANSWER_SCHEMA,
            )
            return parse_reader_answer(data)

        try:
            answer = await self._retrying(_attempt, label="ask_book")
        except GenerationError as e:
            logger.warning("ask_book failed (%s): %s", e.kind.value, e)
            return _FALLBACK_ANSWER
        return answer.strip() or _FALLBACK_ANSWER

    async def ask_chapter(self, book: Book, index: int, question: str) -> str:
        """ask_book() for chapter `index` of book, with its summaries as context.

        Raises:
            IndexError: If index is out of range.
        """
        if not 0 <= index < len(book.chapters):
            raise IndexError(f"Chapter index {index} out of range for {len(book.chapters)} chapters")
        return await self.ask_book(question, book.chapters[index].content, book.summary_text())
