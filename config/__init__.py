"""Configuration package: settings, logging, and exceptions."""

from config.exceptions import (
    LuminaError,
    CompletionError,
    ErrorKind,
    GenerationError,
    AuthError,
    QuotaExceededError,
    TransientError,
    MalformedResponseError,
    ContentTooShortError,
    WorkflowError,
    GenerationCancelledError,
    ArchiveError,
)
from config.logging_config import setup_logging
from config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "LuminaError",
    "CompletionError",
    "ErrorKind",
    "GenerationError",
    "AuthError",
    "QuotaExceededError",
    "TransientError",
    "MalformedResponseError",
    "ContentTooShortError",
    "WorkflowError",
    "GenerationCancelledError",
    "ArchiveError",
]
