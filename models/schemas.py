"""Boundary schemas for provider responses.

Loosely typed JSON from the completion client is validated here and turned
into strict domain values before it reaches the orchestrator.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config.exceptions import MalformedResponseError
from models.book import ChapterOutline, Character
from models.enums import CharacterRole

logger = logging.getLogger(__name__)


class OutlineEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1)
    summary: str = ""

    @field_validator("title", "summary", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class CharacterSketch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    role: CharacterRole = CharacterRole.SUPPORTING
    description: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v):
        """Unknown or missing roles become supporting."""
        if isinstance(v, str):
            try:
                return CharacterRole(v.strip().lower())
            except ValueError:
                pass
        return CharacterRole.SUPPORTING

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v):
        return "" if v is None else v


class BookStructure(BaseModel):
    """Shape expected from the outlining request.

    Characters are optional extras: sketches that fail validation are
    dropped instead of rejecting an otherwise valid outline.
    """
    model_config = ConfigDict(extra="ignore")

    title: str = ""
    author: str = ""
    chapters: list[OutlineEntry] = Field(min_length=1)
    characters: list[CharacterSketch] = Field(default_factory=list)

    @field_validator("characters", mode="before")
    @classmethod
    def drop_invalid_characters(cls, v):
        if v is None:
            return []
        if not isinstance(v, list):
            logger.warning("Ignoring characters field of type %s", type(v).__name__)
            return []
        kept = []
        for raw in v:
            try:
                kept.append(CharacterSketch.model_validate(raw))
            except ValidationError as e:
                logger.warning("Dropping invalid character sketch %r: %d error(s)", raw, e.error_count())
        return kept

    def outlines(self) -> list[ChapterOutline]:
        return [ChapterOutline(title=c.title, summary=c.summary) for c in self.chapters]

    def character_list(self) -> list[Character]:
        return [Character(name=c.name, role=c.role.value, description=c.description) for c in self.characters]


class ChapterProse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: str


class ReaderAnswer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    answer: str


# JSON schemas handed to the provider alongside each request

BOOK_STRUCTURE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "author": {"type": "string"},
        "chapters": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "summary": {"type": "string"},
                },
                "required": ["title", "summary"],
            },
        },
        "characters": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "role": {"type": "string"},
                    "description": {"type": "string"},
                },
                "required": ["name"],
            },
        },
    },
    "required": ["title", "author", "chapters"],
}

CHAPTER_PROSE_SCHEMA: dict = {
    "type": "object",
    "properties": {"content": {"type": "string"}},
    "required": ["content"],
}

READER_ANSWER_SCHEMA: dict = {
    "type": "object",
    "properties": {"answer": {"type": "string"}},
    "required": ["answer"],
}


def _validate(model: type[BaseModel], data, what: str):
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Expected a JSON object for {what}, got {type(data).__name__}",
            raw_response=repr(data),
        )
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Invalid {what}: {e.error_count()} validation error(s)",
            raw_response=repr(data),
        ) from e


def parse_book_structure(data) -> BookStructure:
    """Validate an outlining response. Raises MalformedResponseError."""
    return _validate(BookStructure, data, "book structure")


def parse_chapter_prose(data) -> str:
    """Validate a drafting response and return the prose."""
    return _validate(ChapterProse, data, "chapter prose").content


def parse_reader_answer(data) -> str:
    return _validate(ReaderAnswer, data, "reader answer").answer
