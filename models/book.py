"""Book, chapter, and brief data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import uuid


@dataclass(frozen=True)
class GenerationBrief:
    """User-supplied generation parameters."""
    title: str
    genre: str
    tone: str
    audience: str
    premise: str = ""


@dataclass(frozen=True)
class ChapterOutline:
    """Skeletal chapter produced before any prose exists."""
    title: str
    summary: str


@dataclass
class Chapter:
    """A single chapter; content is filled in as drafting progresses."""
    id: str
    title: str
    summary: str
    content: str = ""
    is_generated: bool = False

    @classmethod
    def from_outline(cls, outline: ChapterOutline, chapter_id: str) -> "Chapter":
        return cls(id=chapter_id, title=outline.title, summary=outline.summary)


@dataclass
class Character:
    """Character sketch. Referenced by name only; duplicates are allowed."""
    name: str
    role: str = "supporting"
    description: str = ""


def _new_book_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Book:
    """Aggregate root for a generated book.

    cover_image is a ``data:image/...;base64,`` URI. An outline-only book
    (chapters without prose) is a valid state.
    """
    title: str
    author: str
    genre: str = ""
    tone: str = ""
    audience: str = ""
    chapters: list[Chapter] = field(default_factory=list)
    characters: list[Character] = field(default_factory=list)
    cover_image: Optional[str] = None
    id: str = field(default_factory=_new_book_id)
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def is_complete(self) -> bool:
        return all(ch.content.strip() for ch in self.chapters)

    def summary_text(self) -> str:
        """Chapter summaries joined in reading order."""
        return "\n".join(ch.summary for ch in self.chapters)
