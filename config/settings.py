"""Configuration settings loaded from .env file."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from .env file.

    The Gemini key is read from GEMINI_API_KEY or GOOGLE_API_KEY. The Claude
    provider authenticates through the Claude Code CLI and needs no key here.
    """

    # Provider
    provider: Literal["gemini", "claude"] = "gemini"
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "google_api_key"),
    )

    # Models
    llm_model_text: str = "gemini-2.5-flash"         # structure + prose (gemini)
    llm_model_image: str = "gemini-2.5-flash-image"  # cover art (gemini)
    llm_model_claude: str = "claude-sonnet-4-6"      # structure + prose (claude)

    # Retry
    retry_max_attempts: int = 3
    retry_base_delay: float = 1.0  # seconds, doubled per attempt

    # Book shape
    min_chapters: int = 8
    max_chapters: int = 12
    chapter_min_chars: int = 300
    chapter_target_words: str = "600-800"
    cover_aspect_ratio: str = "3:4"
    book_language: str = "en"
    default_author: str = "Anonymous"

    # Paths
    export_dir: Path = Path("./data/exports")
    log_dir: Path = Path("./data/logs")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("retry_max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("retry_max_attempts must be >= 1")
        return v

    @field_validator("retry_base_delay")
    @classmethod
    def validate_base_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("retry_base_delay must be non-negative")
        return v

    @field_validator("min_chapters", "max_chapters")
    @classmethod
    def validate_chapter_counts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Chapter count must be >= 1")
        return v

    @field_validator("chapter_min_chars")
    @classmethod
    def validate_min_chars(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Character count must be non-negative")
        return v

    @field_validator("export_dir", "log_dir")
    @classmethod
    def ensure_parent_dirs(cls, v: Path) -> Path:
        v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @model_validator(mode="after")
    def validate_chapter_range(self) -> "Settings":
        if self.min_chapters > self.max_chapters:
            raise ValueError(
                f"min_chapters ({self.min_chapters}) must not exceed "
                f"max_chapters ({self.max_chapters})"
            )
        return self


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
