"""Gemini completion adapter built on the google-genai SDK."""

import json
import logging
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from config.exceptions import AuthError, CompletionError, MalformedResponseError
from config.settings import Settings
from tools.llm_client import parse_json_response

logger = logging.getLogger(__name__)


class GeminiCompletionClient:
    """CompletionClient backed by Gemini text and image models.

    Structured text uses JSON mode with the caller's schema. Provider
    failures are re-raised as CompletionError carrying the HTTP status code,
    which the retry layer classifies.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[genai.Client] = None):
        self.settings = settings or Settings()
        self._client = client
        self.total_calls = 0

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.settings.gemini_api_key:
                raise AuthError("API Key is missing: set GEMINI_API_KEY or GOOGLE_API_KEY")
            self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    async def generate_structured_text(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: dict,
    ) -> dict:
        """Run a JSON-mode request and return the decoded object.

        Raises:
            CompletionError: On provider failure.
            MalformedResponseError: If the reply is empty or not JSON.
        """
        model = self.settings.llm_model_text
        self.total_calls += 1
        logger.debug("Gemini text call #%d: model=%s, prompt=%d chars", self.total_calls, model, len(user_prompt))

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=user_prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    response_mime_type="application/json",
                    response_json_schema=response_schema,
                ),
            )
        except genai_errors.APIError as e:
            raise CompletionError(f"Gemini request failed: {e}", status_code=e.code) from e

        text = response.text
        if not text:
            raise MalformedResponseError("No content generated")

        logger.debug("Gemini text result: %d chars", len(text))
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass
        try:
            return parse_json_response(text)
        except ValueError as e:
            raise MalformedResponseError(str(e), raw_response=text) from e

    async def generate_image(self, prompt: str, aspect_ratio: str) -> Optional[bytes]:
        """Request a single image; returns the first inline image part."""
        model = self.settings.llm_model_image
        self.total_calls += 1
        logger.debug("Gemini image call #%d: model=%s, aspect=%s", self.total_calls, model, aspect_ratio)

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_modalities=["IMAGE"],
                    image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
                ),
            )
        except genai_errors.APIError as e:
            raise CompletionError(f"Gemini image request failed: {e}", status_code=e.code) from e

        for candidate in response.candidates or []:
            content = candidate.content
            if content is None:
                continue
            for part in content.parts or []:
                inline = part.inline_data
                if inline and inline.data and (inline.mime_type or "").startswith("image"):
                    logger.debug("Gemini image result: %s, %d bytes", inline.mime_type, len(inline.data))
                    return inline.data

        logger.warning("Gemini returned no image part")
        return None
