"""Error classification and bounded exponential-backoff retry."""

import asyncio
import logging
import re
from typing import Awaitable, Callable, Optional, TypeVar

from config.exceptions import (
    AuthError,
    GenerationError,
    QuotaExceededError,
    TransientError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0

_AUTH_STATUS = {401, 403}
_QUOTA_STATUS = {429}

# Fallback heuristics for providers without structured error codes
_AUTH_RE = re.compile(
    r"\bauth(?:entication|enticated|orization|orized)?\b"
    r"|unauthori[sz]ed|unauthenticated|permission|forbidden"
    r"|api[ _-]?key|\b40[13]\b",
    re.IGNORECASE,
)
_QUOTA_RE = re.compile(
    r"quota|\b429\b|rate[ _-]?limit|resource[ _]exhausted|too many requests",
    re.IGNORECASE,
)


def _status_code(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def classify_error(exc: BaseException) -> GenerationError:
    """Map a raw provider failure onto the generation error taxonomy.

    Already-classified errors pass through unchanged. Structured HTTP status
    codes win over message matching.
    """
    if isinstance(exc, GenerationError):
        return exc

    message = str(exc) or exc.__class__.__name__

    code = _status_code(exc)
    if code in _AUTH_STATUS:
        return AuthError(message)
    if code in _QUOTA_STATUS:
        return QuotaExceededError(message)

    if _AUTH_RE.search(message):
        return AuthError(message)
    if _QUOTA_RE.search(message):
        return QuotaExceededError(message)
    return TransientError(message)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    *,
    label: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run operation with up to max_attempts tries.

    Auth and quota failures are raised immediately. Everything else waits
    base_delay * 2**attempt seconds and tries again; after the last attempt
    the classified error is raised.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt.
        max_attempts: Total number of calls allowed.
        base_delay: Delay before the second attempt, in seconds.
        label: Name used in log messages.
        sleep: Awaitable sleep, replaceable in tests.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    for attempt in range(max_attempts):
        try:
            return await operation()
        except Exception as exc:
            error = classify_error(exc)
            cause = None if error is exc else exc

            if not error.retryable:
                logger.error("%s failed with %s (not retried): %s", label, error.kind.value, error)
                raise error from cause

            if attempt + 1 >= max_attempts:
                logger.error(
                    "%s failed after %d attempt(s) (%s): %s",
                    label, max_attempts, error.kind.value, error,
                )
                raise error from cause

            delay = base_delay * (2 ** attempt)
            logger.warning(
                "%s attempt %d/%d failed (%s), retrying in %.1fs: %s",
                label, attempt + 1, max_attempts, error.kind.value, delay, error,
            )
            await sleep(delay)

    raise AssertionError("unreachable")
