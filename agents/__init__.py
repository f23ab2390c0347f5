"""Agents package: prompt-level agents used by the generation workflow."""

from agents.base_agent import BaseAgent
from agents.architect_agent import ArchitectAgent
from agents.writer_agent import WriterAgent
from agents.cover_agent import CoverAgent
from agents.reader_agent import ReaderAgent

__all__ = [
    "BaseAgent",
    "ArchitectAgent",
    "WriterAgent",
    "CoverAgent",
    "ReaderAgent",
]
