"""Text utilities: length checks, paragraph splitting, and file naming."""

import re

_WHITESPACE_RE = re.compile(r"\s+")


def count_total_chars(text: str) -> int:
    """Count characters after trimming surrounding whitespace."""
    return len(text.strip()) if text else 0


def split_into_paragraphs(text: str) -> list[str]:
    """Split prose on newlines; blank segments are dropped."""
    if not text:
        return []
    return [p.strip() for p in text.split("\n") if p.strip()]


def truncate(text: str, limit: int) -> str:
    """Cut text to limit chars, marking the cut with an ellipsis."""
    if not text or len(text) <= limit:
        return text or ""
    return text[:limit] + "... (truncated)"


def underscore_whitespace(text: str) -> str:
    """Replace each whitespace run, leading and trailing included, with one underscore."""
    return _WHITESPACE_RE.sub("_", text)
