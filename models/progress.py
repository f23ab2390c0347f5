"""Progress events and terminal outcomes of a generation run."""

from dataclasses import dataclass, field
from typing import Optional

from config.exceptions import GenerationError
from models.book import Book, Chapter
from models.enums import GenerationStage, OutcomeStatus


@dataclass(frozen=True)
class ProgressEvent:
    """Advisory progress update.

    percent never decreases within one run. artifact carries a partial
    result for early display (the cover data URI).
    """
    stage: str
    percent: float
    phase: GenerationStage = GenerationStage.IDLE
    artifact: Optional[str] = None


@dataclass
class GenerationOutcome:
    """Terminal item of an orchestration stream."""
    status: OutcomeStatus
    book: Optional[Book] = None
    error: Optional[GenerationError] = None
    chapters: list[Chapter] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.COMPLETE
