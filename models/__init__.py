"""Models package: book aggregate, progress events, enums, and response schemas."""

from models.book import Book, Chapter, ChapterOutline, Character, GenerationBrief
from models.progress import GenerationOutcome, ProgressEvent
from models.enums import CharacterRole, GenerationStage, OutcomeStatus

__all__ = [
    "Book",
    "Chapter",
    "ChapterOutline",
    "Character",
    "GenerationBrief",
    "GenerationOutcome",
    "ProgressEvent",
    "CharacterRole",
    "GenerationStage",
    "OutcomeStatus",
]
