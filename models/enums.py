"""Enumerations for generation status tracking."""

from enum import Enum


class GenerationStage(str, Enum):
    IDLE = "idle"
    OUTLINING = "outlining"
    COVER_GENERATING = "cover_generating"
    DRAFTING = "drafting"
    ASSEMBLING = "assembling"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"


class OutcomeStatus(str, Enum):
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"


class CharacterRole(str, Enum):
    PROTAGONIST = "protagonist"
    ANTAGONIST = "antagonist"
    SUPPORTING = "supporting"
    MINOR = "minor"
