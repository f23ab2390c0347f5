"""Conditional routing functions for the LangGraph workflow."""

from workflow.state import BookWorkflowState


def route_after_outline(state: BookWorkflowState) -> str:
    """Route after outlining: abort on error, otherwise start drafting."""
    if state.get("error"):
        return "handle_error"
    return "draft_chapter"


def route_after_draft(state: BookWorkflowState) -> str:
    """Route after a chapter: stop on error or cancel, loop until all are drafted."""
    if state.get("error"):
        return "handle_error"
    if state.get("cancelled", False):
        return "cancel"
    if state.get("current_index", 0) >= len(state.get("chapters", [])):
        return "assemble"
    return "draft_chapter"
