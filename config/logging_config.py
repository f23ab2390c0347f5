"""Structured logging configuration with file rotation."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Completion adapters; their records are mirrored into llm_calls.log
LLM_LOGGERS = ("tools.gemini_client", "tools.agent_sdk_client")


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(str(path), maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str | Path] = None,
    console_enabled: bool = True,
) -> None:
    """Configure application-wide logging.

    Writes lumina.log at `level` and llm_calls.log with every provider call
    at DEBUG. Calling it again replaces the handlers it installed before.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
        log_dir: Directory for log files. Defaults to ./data/logs.
        console_enabled: Whether to also log to stderr.
    """
    log_dir = Path(log_dir or "./data/logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    root_logger.addHandler(_rotating_handler(log_dir / "lumina.log", level, formatter))

    llm_handler = _rotating_handler(log_dir / "llm_calls.log", logging.DEBUG, formatter)
    for name in LLM_LOGGERS:
        llm_logger = logging.getLogger(name)
        llm_logger.handlers.clear()
        llm_logger.setLevel(logging.DEBUG)
        llm_logger.addHandler(llm_handler)

    logging.getLogger(__name__).debug("Logging initialized: level=%s, dir=%s", level, log_dir)
