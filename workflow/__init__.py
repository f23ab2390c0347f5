"""Workflow package: LangGraph orchestrator, state, conditions, and callbacks."""

from workflow.graph import build_graph, orchestrate, run_generation, regenerate_chapter
from workflow.state import BookWorkflowState
from workflow.conditions import route_after_outline, route_after_draft
from workflow.callbacks import ProgressCallback, LoggingCallback, RichProgressCallback

__all__ = [
    "build_graph",
    "orchestrate",
    "run_generation",
    "regenerate_chapter",
    "BookWorkflowState",
    "route_after_outline",
    "route_after_draft",
    "ProgressCallback",
    "LoggingCallback",
    "RichProgressCallback",
]
