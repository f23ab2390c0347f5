"""Custom exception hierarchy for the book generation core."""

from enum import Enum
from typing import Optional


class LuminaError(Exception):
    """Base exception for all Lumina errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# ---- Provider Errors ----

class CompletionError(LuminaError):
    """Raw failure surfaced by a completion client adapter."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, details)
        self.status_code = status_code


# ---- Generation Errors ----

class ErrorKind(str, Enum):
    AUTH = "AuthError"
    QUOTA_EXCEEDED = "QuotaExceeded"
    TRANSIENT = "Transient"
    MALFORMED_RESPONSE = "MalformedResponse"
    CONTENT_TOO_SHORT = "ContentTooShort"


class GenerationError(LuminaError):
    """Classified generation failure. Subclasses fix the kind."""

    kind: ErrorKind = ErrorKind.TRANSIENT
    retryable: bool = True


class AuthError(GenerationError):
    """Credentials are missing, invalid, or lack permission."""

    kind = ErrorKind.AUTH
    retryable = False


class QuotaExceededError(GenerationError):
    """Provider quota or rate limit exhausted."""

    kind = ErrorKind.QUOTA_EXCEEDED
    retryable = False


class TransientError(GenerationError):
    """Network or model hiccup worth retrying."""

    kind = ErrorKind.TRANSIENT


class MalformedResponseError(GenerationError):
    """Provider returned structured data of the wrong shape."""

    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, message: str = "Malformed response from provider", raw_response: str = ""):
        details = {"raw_response": raw_response[:200]} if raw_response else {}
        super().__init__(message, details)
        self.raw_response = raw_response


class ContentTooShortError(GenerationError):
    """Generated prose is below the minimum length."""

    kind = ErrorKind.CONTENT_TOO_SHORT

    def __init__(self, actual: int, min_chars: int):
        super().__init__(
            f"Generated prose is {actual} chars, below the minimum of {min_chars}",
            {"actual": actual, "min": min_chars},
        )
        self.actual = actual
        self.min_chars = min_chars


# ---- Workflow Errors ----

class WorkflowError(LuminaError):
    """Base exception for orchestration errors."""


class GenerationCancelledError(WorkflowError):
    """Generation run stopped by a cancellation signal."""

    def __init__(self, chapters_drafted: int, total: int):
        super().__init__(
            "Generation cancelled",
            {"chapters_drafted": chapters_drafted, "total": total},
        )
        self.chapters_drafted = chapters_drafted
        self.total = total


# ---- Export Errors ----

class ArchiveError(LuminaError):
    """Writing the exported archive failed."""
