"""Shared pytest fixtures for the lumina test suite."""

import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image


PROSE = (
    "The fog rolled in over the harbour before dawn.\n"
    "Mara counted the bells twice and still came up one short.\n"
)


def make_structure(titles=("Chapter One", "Chapter Two", "Chapter Three"), title="Echo", author="Ada Vale"):
    """Outline payload as a provider would return it."""
    return {
        "title": title,
        "author": author,
        "chapters": [{"title": t, "summary": f"Summary of {t.lower()}."} for t in titles],
        "characters": [{"name": "Mara", "role": "protagonist", "description": "A lighthouse keeper."}],
    }


def png_bytes(size=(4, 4), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Return a Settings instance with paths in tmp_path and no retry delay."""
    from config.settings import Settings
    return Settings(
        _env_file=None,
        provider="gemini",
        export_dir=tmp_path / "exports",
        log_dir=tmp_path / "logs",
        retry_base_delay=0.0,
        chapter_min_chars=20,
        min_chapters=1,
        max_chapters=12,
    )


# ---------------------------------------------------------------------------
# Completion client mocks
# ---------------------------------------------------------------------------

def _responder(structure, prose, answer):
    """Answer each structured request by the schema it carries."""
    def respond(system_prompt, user_prompt, response_schema):
        props = response_schema.get("properties", {})
        if "chapters" in props:
            return structure
        if "content" in props:
            return {"content": prose}
        return {"answer": answer}
    return respond


@pytest.fixture
def make_client():
    """Factory for a scripted CompletionClient built on AsyncMock."""
    def _make(structure=None, prose=PROSE, answer="It was the tide.", image=b"png"):
        client = MagicMock()
        client.generate_structured_text = AsyncMock(
            side_effect=_responder(structure or make_structure(), prose, answer),
        )
        client.generate_image = AsyncMock(return_value=png_bytes() if image == b"png" else image)
        return client
    return _make


@pytest.fixture
def mock_client(make_client):
    """Scripted client with a three-chapter outline and a valid PNG cover."""
    return make_client()


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_book():
    """A fully drafted three-chapter Book with a PNG cover."""
    from models.book import Book, Chapter, Character
    from tools.image_utils import encode_data_uri
    chapters = [
        Chapter(id=f"ch-{i}", title=f"Chapter {i + 1}", summary=f"Summary {i + 1}.",
                content=f"Line one of {i + 1}.\nLine two of {i + 1}.", is_generated=True)
        for i in range(3)
    ]
    return Book(
        title="Echo",
        author="Ada Vale",
        genre="Mystery",
        tone="Suspenseful",
        audience="Adults",
        chapters=chapters,
        characters=[Character("Mara", "protagonist", "A lighthouse keeper.")],
        cover_image=encode_data_uri(png_bytes(), "image/png"),
        id="00000000-0000-4000-8000-000000000001",
    )
