"""Claude Agent SDK completion adapter."""

import json
import logging
import os
from typing import Optional

from claude_agent_sdk import (
    query,
    ClaudeAgentOptions,
    ResultMessage,
    AssistantMessage,
)

from config.exceptions import CompletionError, MalformedResponseError
from config.settings import Settings
from tools.llm_client import parse_json_response

logger = logging.getLogger(__name__)

# The SDK refuses to start while this variable is set by a parent session.
os.environ.pop("CLAUDECODE", None)


class AgentSDKClient:
    """CompletionClient backed by claude_agent_sdk.query().

    Authentication is handled by the Claude Code CLI. The SDK has no image
    modality, so generate_image always returns None and callers fall back to
    their placeholder cover.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.total_calls = 0

    async def chat(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
    ) -> str:
        """Send a single-turn request and return the text result.

        Raises:
            CompletionError: If the query fails.
        """
        model = model or self.settings.llm_model_claude
        self.total_calls += 1

        logger.debug("AgentSDK call #%d: model=%s", self.total_calls, model)

        result_text = ""
        error_text = None
        try:
            # Do NOT return/break/raise from inside the async for loop: the
            # query() generator uses anyio cancel scopes and must be exhausted.
            async for message in query(
                prompt=user_prompt,
                options=ClaudeAgentOptions(
                    system_prompt=system_prompt,
                    model=model,
                    max_turns=1,
                ),
            ):
                if isinstance(message, ResultMessage):
                    if message.is_error:
                        error_text = message.result or "Agent SDK returned an error result"
                        continue
                    result_text = message.result or ""
                    logger.debug(
                        "AgentSDK result: %d chars, cost=$%s",
                        len(result_text),
                        message.total_cost_usd,
                    )
                elif isinstance(message, AssistantMessage):
                    if not result_text:
                        for block in message.content:
                            text = getattr(block, "text", None)
                            if text:
                                result_text += text
        except Exception as e:
            raise CompletionError(f"Agent SDK query failed: {e}") from e

        if error_text is not None:
            raise CompletionError(error_text)

        if not result_text:
            logger.warning("AgentSDK returned no content")

        return result_text

    async def generate_structured_text(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: dict,
    ) -> dict:
        """Ask for JSON matching response_schema and parse it leniently.

        Raises:
            MalformedResponseError: If the reply holds no parseable JSON.
        """
        system_prompt = (
            f"{system_prompt}\n\n"
            "Reply with a single JSON object matching this JSON schema, "
            "with no commentary:\n"
            f"{json.dumps(response_schema, indent=2)}"
        )
        text = await self.chat(system_prompt, user_prompt)
        try:
            return parse_json_response(text)
        except ValueError as e:
            raise MalformedResponseError(str(e), raw_response=text) from e

    async def generate_image(self, prompt: str, aspect_ratio: str) -> Optional[bytes]:
        logger.debug("AgentSDK has no image output; skipping cover request (%s)", aspect_ratio)
        return None
