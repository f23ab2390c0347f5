"""Export helpers: artifact naming and the final archive write."""

import logging
from pathlib import Path
from typing import Optional

from config.exceptions import ArchiveError
from config.settings import get_settings
from models.book import Book
from publisher.epub_builder import serialize_archive
from tools.text_utils import underscore_whitespace

logger = logging.getLogger(__name__)

EPUB_EXTENSION = ".epub"


def export_filename(title: str) -> str:
    """Book title with whitespace runs replaced by underscores, plus .epub.

    Surrounding whitespace is not trimmed, so " Echo " becomes "_Echo_.epub".
    Path separators are replaced too so the name stays inside the export dir.
    A blank title falls back to "book".
    """
    if not (title or "").strip():
        return f"book{EPUB_EXTENSION}"
    return underscore_whitespace(title.replace("/", " ").replace("\\", " ")) + EPUB_EXTENSION


def write_archive(book: Book, directory: Optional[str | Path] = None, language: Optional[str] = None) -> Path:
    """Serialize book and write it under directory.

    Raises:
        ArchiveError: If the file cannot be written.
    """
    settings = get_settings() if directory is None or language is None else None
    directory = Path(directory) if directory is not None else settings.export_dir
    language = language or settings.book_language

    data = serialize_archive(book, language=language)
    path = directory / export_filename(book.title)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ArchiveError(f"Failed to write {path}: {e}", {"path": str(path)}) from e

    logger.info("EPUB written: %s (%d bytes)", path, len(data))
    return path
