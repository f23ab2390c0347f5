"""LangGraph StateGraph: orchestrates outline, cover, drafting, and assembly."""

import asyncio
import dataclasses
import logging
import uuid
from typing import AsyncIterator, Optional, Union

from langgraph.graph import StateGraph, END

from agents.architect_agent import ArchitectAgent
from agents.cover_agent import CoverAgent
from agents.writer_agent import WriterAgent
from config.exceptions import GenerationCancelledError, GenerationError
from config.settings import Settings, get_settings
from models.book import Book, Chapter, GenerationBrief
from models.enums import GenerationStage, OutcomeStatus
from models.progress import GenerationOutcome, ProgressEvent
from tools.completion_client import CompletionClient, create_completion_client
from tools.image_utils import placeholder_cover

from workflow.state import BookWorkflowState
from workflow.conditions import route_after_outline, route_after_draft

logger = logging.getLogger(__name__)

# One step per chapter plus the fixed stages; outlines are expected to be short
_RECURSION_LIMIT = 1000

OUTLINE_DONE_PERCENT = 20.0
DRAFTING_END_PERCENT = 90.0
COMPLETE_PERCENT = 100.0


def drafting_percent(index: int, total: int) -> float:
    """Percent reported once chapter `index` (0-based) of `total` is drafted."""
    if total <= 0:
        return DRAFTING_END_PERCENT
    span = DRAFTING_END_PERCENT - OUTLINE_DONE_PERCENT
    return OUTLINE_DONE_PERCENT + span * (index + 1) / total


# ---------------------------------------------------------------------------
# Per-run resources
# ---------------------------------------------------------------------------

class _GenerationRun:
    """Agents and cover task owned by a single run."""

    def __init__(
        self,
        brief: GenerationBrief,
        client: CompletionClient,
        settings: Settings,
        cancel_event: Optional[asyncio.Event] = None,
    ):
        self.brief = brief
        self.settings = settings
        self.architect = ArchitectAgent(client, settings)
        self.writer = WriterAgent(client, settings)
        self.cover_agent = CoverAgent(client, settings)
        self.cancel_event = cancel_event or asyncio.Event()
        self.cover_task: Optional[asyncio.Task] = None
        self.token = uuid.uuid4().hex[:8]

    # -- cover task ---------------------------------------------------------

    def _fallback_cover(self) -> str:
        b = self.brief
        return placeholder_cover(b.title, b.genre, b.tone)

    def _cover_preview(self, state: BookWorkflowState, percent: float) -> list[ProgressEvent]:
        """Report the cover once, as soon as its task has finished."""
        task = self.cover_task
        if state.get("cover_reported") or task is None or not task.done():
            return []
        if task.cancelled() or task.exception() is not None:
            return []
        return [ProgressEvent(
            "Cover art ready", percent, GenerationStage.COVER_GENERATING, artifact=task.result(),
        )]

    async def _join_cover(self) -> str:
        if self.cover_task is None:
            return self._fallback_cover()
        try:
            return await self.cover_task
        except Exception as e:
            logger.warning("Cover task failed, using placeholder: %s", e)
            return self._fallback_cover()

    def discard_cover(self) -> None:
        if self.cover_task is not None and not self.cover_task.done():
            self.cover_task.cancel()

    # -- nodes --------------------------------------------------------------

    async def start(self, state: BookWorkflowState) -> dict:
        """Launch the cover request alongside outlining."""
        logger.info("Entering node: start")
        b = self.brief
        self.cover_task = asyncio.create_task(
            self.cover_agent.cover_or_placeholder(b.title, b.genre, b.tone),
            name=f"cover-{self.token}",
        )
        return {
            "chapters": [],
            "current_index": 0,
            "percent": 0.0,
            "cover_reported": False,
            "cancelled": False,
            "status": GenerationStage.OUTLINING.value,
            "events": [
                ProgressEvent("Outlining the book", 0.0, GenerationStage.OUTLINING),
                ProgressEvent("Designing cover art", 0.0, GenerationStage.COVER_GENERATING),
            ],
            "last_node": "start",
        }

    async def outline(self, state: BookWorkflowState) -> dict:
        """Generate and validate the chapter outline."""
        logger.info("Entering node: outline")
        try:
            structure = await self.architect.generate_structure(self.brief)
        except GenerationError as e:
            return {"error": e, "events": [], "last_node": "outline"}

        chapters = [
            Chapter.from_outline(o, f"ch-{i}-{self.token}")
            for i, o in enumerate(structure.outlines())
        ]
        events = [ProgressEvent(
            f"Outline ready: {len(chapters)} chapters",
            OUTLINE_DONE_PERCENT,
            GenerationStage.OUTLINING,
        )]
        preview = self._cover_preview(state, OUTLINE_DONE_PERCENT)
        return {
            "book_title": structure.title or self.brief.title,
            "author": structure.author or self.settings.default_author,
            "characters": structure.character_list(),
            "chapters": chapters,
            "percent": OUTLINE_DONE_PERCENT,
            "status": GenerationStage.DRAFTING.value,
            "events": events + preview,
            "cover_reported": bool(preview),
            "last_node": "outline",
        }

    async def draft_chapter(self, state: BookWorkflowState) -> dict:
        """Draft the chapter at current_index, unless cancellation was requested."""
        chapters = state["chapters"]
        index = state.get("current_index", 0)
        total = len(chapters)

        if self.cancel_event.is_set():
            logger.info("Cancellation observed before chapter %d/%d", index + 1, total)
            return {"cancelled": True, "events": [], "last_node": "draft_chapter"}

        logger.info("Entering node: draft_chapter (%d/%d)", index + 1, total)
        chapter = chapters[index]
        previous_summary = chapters[index - 1].summary if index > 0 else None

        try:
            content = await self.writer.write_chapter(
                state.get("book_title", self.brief.title), chapter, previous_summary,
            )
        except GenerationError as e:
            return {"error": e, "events": [], "last_node": "draft_chapter"}

        chapter.content = content
        chapter.is_generated = True

        percent = drafting_percent(index, total)
        events = [ProgressEvent(
            f"Drafted chapter {index + 1} of {total}: {chapter.title}",
            percent,
            GenerationStage.DRAFTING,
        )]
        preview = self._cover_preview(state, percent)
        return {
            "chapters": chapters,
            "current_index": index + 1,
            "percent": percent,
            "events": events + preview,
            "cover_reported": state.get("cover_reported", False) or bool(preview),
            "last_node": "draft_chapter",
        }

    async def assemble(self, state: BookWorkflowState) -> dict:
        """Join the cover and build the finished Book."""
        logger.info("Entering node: assemble")
        events = [ProgressEvent("Assembling the book", DRAFTING_END_PERCENT, GenerationStage.ASSEMBLING)]

        cover = await self._join_cover()
        if not state.get("cover_reported"):
            events.append(ProgressEvent(
                "Cover art ready", DRAFTING_END_PERCENT, GenerationStage.COVER_GENERATING, artifact=cover,
            ))

        b = self.brief
        book = Book(
            title=state.get("book_title", b.title),
            author=state.get("author", self.settings.default_author),
            genre=b.genre,
            tone=b.tone,
            audience=b.audience,
            chapters=list(state.get("chapters", [])),
            characters=list(state.get("characters", [])),
            cover_image=cover,
        )
        events.append(ProgressEvent("Book complete", COMPLETE_PERCENT, GenerationStage.COMPLETE))
        logger.info("Book assembled: '%s', %d chapters", book.title, len(book.chapters))
        return {
            "book": book,
            "percent": COMPLETE_PERCENT,
            "status": GenerationStage.COMPLETE.value,
            "events": events,
            "last_node": "assemble",
        }

    async def handle_error(self, state: BookWorkflowState) -> dict:
        """Terminal failure: stop the cover task and surface the error."""
        error = state.get("error")
        kind = error.kind.value if error is not None else "unknown"
        logger.error("Generation failed in %s (%s): %s", state.get("last_node", "?"), kind, error)
        self.discard_cover()
        return {
            "status": GenerationStage.FAILED.value,
            "events": [ProgressEvent(
                f"Generation failed: {error}", state.get("percent", 0.0), GenerationStage.FAILED,
            )],
        }

    async def cancel(self, state: BookWorkflowState) -> dict:
        """Terminal cancellation at chapter granularity."""
        drafted = state.get("current_index", 0)
        logger.info("Generation cancelled after %d chapter(s)", drafted)
        self.discard_cover()
        return {
            "status": GenerationStage.CANCELLED.value,
            "events": [ProgressEvent(
                f"Generation cancelled after {drafted} chapter(s)",
                state.get("percent", 0.0),
                GenerationStage.CANCELLED,
            )],
        }


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------

def build_graph(run: _GenerationRun):
    """Build and return the compiled LangGraph workflow for one run."""
    graph = StateGraph(BookWorkflowState)

    graph.add_node("start", run.start)
    graph.add_node("outline", run.outline)
    graph.add_node("draft_chapter", run.draft_chapter)
    graph.add_node("assemble", run.assemble)
    graph.add_node("handle_error", run.handle_error)
    graph.add_node("cancel", run.cancel)

    graph.set_entry_point("start")
    graph.add_edge("start", "outline")

    graph.add_conditional_edges(
        "outline",
        route_after_outline,
        {
            "draft_chapter": "draft_chapter",
            "handle_error": "handle_error",
        },
    )

    # Chapter loop: strictly sequential, one node execution per chapter
    graph.add_conditional_edges(
        "draft_chapter",
        route_after_draft,
        {
            "draft_chapter": "draft_chapter",
            "assemble": "assemble",
            "handle_error": "handle_error",
            "cancel": "cancel",
        },
    )

    graph.add_edge("assemble", END)
    graph.add_edge("handle_error", END)
    graph.add_edge("cancel", END)

    return graph.compile()


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def _outcome(state: dict) -> GenerationOutcome:
    status = state.get("status")
    chapters = list(state.get("chapters", []))
    if status == GenerationStage.COMPLETE.value:
        return GenerationOutcome(OutcomeStatus.COMPLETE, book=state["book"], chapters=chapters)
    if status == GenerationStage.CANCELLED.value:
        return GenerationOutcome(OutcomeStatus.CANCELLED, chapters=chapters)
    return GenerationOutcome(OutcomeStatus.FAILED, error=state.get("error"), chapters=chapters)


async def orchestrate(
    brief: GenerationBrief,
    client: Optional[CompletionClient] = None,
    settings: Optional[Settings] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> AsyncIterator[Union[ProgressEvent, GenerationOutcome]]:
    """Run one generation and stream its progress.

    Yields ProgressEvent items with non-decreasing percent, then exactly one
    GenerationOutcome. Nothing is persisted; the caller owns the result,
    including the partially drafted chapters of a failed run.

    Args:
        brief: Generation parameters.
        client: Completion client; built from settings when omitted.
        settings: Settings; the cached instance when omitted.
        cancel_event: Set it to stop before the next chapter starts.
    """
    settings = settings or get_settings()
    client = client or create_completion_client(settings)
    run = _GenerationRun(brief, client, settings, cancel_event)
    app = build_graph(run)

    logger.info("Starting generation: title=%s, genre=%s", brief.title, brief.genre)

    accumulated: dict = {}
    last_percent = 0.0
    try:
        async for event in app.astream({"brief": brief}, config={"recursion_limit": _RECURSION_LIMIT}):
            # Each event is {node_name: state_update_dict}
            for node_name, node_update in event.items():
                if node_name == "__end__" or not isinstance(node_update, dict):
                    continue
                accumulated.update(node_update)
                for progress in node_update.get("events", []):
                    if progress.percent < last_percent:
                        progress = dataclasses.replace(progress, percent=last_percent)
                    last_percent = progress.percent
                    yield progress
    finally:
        run.discard_cover()

    outcome = _outcome(accumulated)
    logger.info("Generation finished: %s", outcome.status.value)
    yield outcome


async def run_generation(
    brief: GenerationBrief,
    client: Optional[CompletionClient] = None,
    settings: Optional[Settings] = None,
    callback=None,
    cancel_event: Optional[asyncio.Event] = None,
) -> Book:
    """Run a generation to completion and return the Book.

    Args:
        callback: Optional ProgressCallback receiving every event.

    Raises:
        GenerationError: The classified error that aborted the run.
        GenerationCancelledError: If cancel_event stopped the run.
    """
    outcome: Optional[GenerationOutcome] = None
    async for item in orchestrate(brief, client, settings, cancel_event):
        if isinstance(item, GenerationOutcome):
            outcome = item
        elif callback is not None:
            callback.on_progress(item)

    if outcome is None:
        raise RuntimeError("Generation ended without an outcome")

    if outcome.status == OutcomeStatus.COMPLETE:
        if callback is not None:
            callback.on_complete(outcome.book)
        return outcome.book

    if outcome.status == OutcomeStatus.CANCELLED:
        drafted = sum(1 for ch in outcome.chapters if ch.is_generated)
        raise GenerationCancelledError(drafted, len(outcome.chapters))

    if callback is not None:
        callback.on_error(outcome.error)
    raise outcome.error


async def regenerate_chapter(
    book: Book,
    index: int,
    client: Optional[CompletionClient] = None,
    settings: Optional[Settings] = None,
) -> Book:
    """Redraft one chapter and return a new Book with it replaced.

    The previous chapter's summary is used as continuity context, exactly as
    during a full run. The input Book is left untouched.

    Raises:
        IndexError: If index is out of range.
        GenerationError: If drafting fails after retries.
    """
    if not 0 <= index < len(book.chapters):
        raise IndexError(f"Chapter index {index} out of range for {len(book.chapters)} chapters")

    settings = settings or get_settings()
    writer = WriterAgent(client or create_completion_client(settings), settings)
    chapter = book.chapters[index]
    previous_summary = book.chapters[index - 1].summary if index > 0 else None

    content = await writer.write_chapter(book.title, chapter, previous_summary)

    chapters = list(book.chapters)
    chapters[index] = dataclasses.replace(chapter, content=content, is_generated=True)
    return dataclasses.replace(book, chapters=chapters)
