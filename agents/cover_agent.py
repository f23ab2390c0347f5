"""Cover Agent: best-effort cover art with a deterministic fallback."""

import logging
from typing import Optional

from agents.base_agent import BaseAgent
from config.settings import Settings
from tools.completion_client import CompletionClient
from tools.image_utils import normalize_image, placeholder_cover

logger = logging.getLogger(__name__)


class CoverAgent(BaseAgent):
    """Requests cover art; never raises for provider failures."""

    def __init__(
        self,
        llm_client: Optional[CompletionClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(llm_client, settings)
        self._template = self._load_prompt("cover")

    def build_prompt(self, title: str, genre: str, tone: str) -> str:
        return self._extract_section(self._template, "Cover Instructions").format(
            title=title, genre=genre, tone=tone,
        )

    async def generate_cover(self, title: str, genre: str, tone: str) -> Optional[str]:
        """Return a PNG/JPEG data URI, or None if no usable image came back.

        Every failure kind, including auth and quota, is downgraded here.
        """
        prompt = self.build_prompt(title, genre, tone)
        aspect_ratio = self.settings.cover_aspect_ratio

        async def _attempt() -> Optional[bytes]:
            return await self.llm.generate_image(prompt, aspect_ratio)

        try:
            data = await self._retrying(_attempt, label="cover")
        except Exception as e:
            logger.warning("Cover generation failed, using placeholder: %s", e)
            return None

        if data is None:
            logger.info("No cover image returned, using placeholder")
            return None
        return normalize_image(data)

    async def cover_or_placeholder(self, title: str, genre: str, tone: str) -> str:
        """Generated cover, or the placeholder derived from the same inputs."""
        cover = await self.generate_cover(title, genre, tone)
        return cover or placeholder_cover(title, genre, tone)
