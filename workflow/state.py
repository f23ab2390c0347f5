"""LangGraph workflow state definition."""

from typing import Optional, TypedDict

from config.exceptions import GenerationError
from models.book import Book, Chapter, Character, GenerationBrief


class BookWorkflowState(TypedDict, total=False):
    """State shared by all nodes of one generation run.

    Fields are grouped logically:
    - Input: brief
    - Structure: book_title, author, characters, chapters
    - Drafting: current_index
    - Progress: percent, events (emitted by the node that just ran), cover_reported
    - Result: book, status
    - Control: error, cancelled, last_node
    """

    # Input
    brief: GenerationBrief

    # Structure
    book_title: str
    author: str
    characters: list[Character]
    chapters: list[Chapter]

    # Drafting
    current_index: int

    # Progress
    percent: float
    events: list  # ProgressEvent items from the latest node only
    cover_reported: bool

    # Result
    book: Book
    status: str

    # Control flow
    error: Optional[GenerationError]
    cancelled: bool
    last_node: str
