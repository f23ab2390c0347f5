"""Completion client contract consumed by the generation core."""

from typing import Optional, Protocol, runtime_checkable

from config.settings import Settings, get_settings


@runtime_checkable
class CompletionClient(Protocol):
    """Remote generative-content provider.

    Implementations surface failures as exceptions with human-readable
    messages (CompletionError in the bundled adapters).
    """

    async def generate_structured_text(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: dict,
    ) -> dict:
        """Return the provider's JSON answer, shaped by response_schema."""
        ...

    async def generate_image(self, prompt: str, aspect_ratio: str) -> Optional[bytes]:
        """Return encoded image bytes, or None when nothing was produced."""
        ...


def create_completion_client(settings: Optional[Settings] = None) -> CompletionClient:
    """Build the adapter selected by settings.provider."""
    settings = settings or get_settings()
    if settings.provider == "claude":
        from tools.agent_sdk_client import AgentSDKClient
        return AgentSDKClient(settings)
    from tools.gemini_client import GeminiCompletionClient
    return GeminiCompletionClient(settings)
