"""CLI entry point: Lumina AI book generator.

Usage:
  lumina generate -t "Echo" -g Mystery      Generate a book and export it as EPUB
  lumina ask -c chapter.txt "Who is Mara?"  Ask a question about a chapter
  lumina --help                             List all commands
"""

import asyncio
import logging
import sys
from pathlib import Path

import click

from cli.theme import (
    get_console,
    app_header,
    command_panel,
    success_panel,
    book_summary_panel,
    chapter_table,
    character_cards,
)
from config.exceptions import GenerationCancelledError, GenerationError, LuminaError
from config.settings import Settings
from config.logging_config import setup_logging
from models.book import GenerationBrief
from workflow.callbacks import RichProgressCallback

console = get_console()
logger = logging.getLogger(__name__)


def _load_settings(provider: str | None) -> Settings:
    return Settings(provider=provider) if provider else Settings()


def _init_logging(verbose: bool):
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    settings = Settings()
    # Progress is drawn by rich; log records go to files only
    setup_logging(level=level, log_dir=settings.log_dir, console_enabled=False)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Lumina: AI-assisted book authoring.

    \b
    Generate a complete illustrated book from a short brief:
      lumina generate -t "Echo" -g Mystery --tone Suspenseful -a Adults
    """
    _init_logging(verbose)


# ---------------------------------------------------------------------------
# generate command
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--title", "-t", required=True, help="Working title of the book")
@click.option("--genre", "-g", required=True, help="Genre (e.g. Mystery, Fantasy, Self-help)")
@click.option("--tone", default="Engaging", show_default=True, help="Overall tone")
@click.option("--audience", "-a", default="General readers", show_default=True, help="Target audience")
@click.option("--premise", "-p", default="", help="Extra context for the outline (optional)")
@click.option("--out", "-o", "out_dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory for the EPUB (defaults to EXPORT_DIR)")
@click.option("--provider", type=click.Choice(["gemini", "claude"]), default=None,
              help="Completion provider (defaults to PROVIDER)")
def generate(title, genre, tone, audience, premise, out_dir, provider):
    """Generate a book from a brief and export it as EPUB.

    Examples:
      lumina generate -t "Echo" -g Mystery
      lumina generate -t "Night Garden" -g Fantasy --tone Whimsical -a Children --provider claude
    """
    from publisher.export import write_archive
    from workflow.graph import run_generation

    settings = _load_settings(provider)
    brief = GenerationBrief(title=title, genre=genre, tone=tone, audience=audience, premise=premise)

    console.print(app_header())
    console.print()
    fields = {
        "Title": title,
        "Genre": genre,
        "Tone": tone,
        "Audience": audience,
        "Provider": settings.provider,
    }
    if premise:
        fields["Premise"] = premise
    console.print(command_panel("New book", fields))
    console.print()

    cb = RichProgressCallback(console=console)
    try:
        cb.start()
        try:
            book = asyncio.run(run_generation(brief, settings=settings, callback=cb))
        finally:
            cb.stop()

        path = write_archive(book, directory=out_dir or settings.export_dir, language=settings.book_language)
    except KeyboardInterrupt:
        console.print("\n[warning]Interrupted[/]")
        sys.exit(130)
    except GenerationCancelledError as e:
        console.print(f"\n[warning]{e}[/]")
        sys.exit(130)
    except GenerationError as e:
        console.print(f"\n[error]Generation failed ({e.kind.value}): {e}[/]")
        sys.exit(1)
    except LuminaError as e:
        console.print(f"\n[error]Export failed: {e}[/]")
        logger.exception("Export failed")
        sys.exit(1)

    console.print()
    console.print(book_summary_panel(book))
    console.print()
    console.print(chapter_table(book.chapters))
    if book.characters:
        console.print()
        console.print(character_cards(book.characters))
    console.print()
    console.print(success_panel("Done", f"  EPUB: [stat.value]{path}[/]"))


# ---------------------------------------------------------------------------
# ask command
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("question")
@click.option("--chapter", "-c", "chapter_file", required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Text file with the chapter being read")
@click.option("--summary", "-s", default="", help="Book context, e.g. the chapter summaries")
@click.option("--provider", type=click.Choice(["gemini", "claude"]), default=None,
              help="Completion provider (defaults to PROVIDER)")
def ask(question, chapter_file, summary, provider):
    """Ask the book a question about the chapter being read.

    Example:
      lumina ask -c chapter3.txt -s "A lighthouse keeper hears voices." "Who is calling?"
    """
    from agents.reader_agent import ReaderAgent

    settings = _load_settings(provider)
    chapter_text = chapter_file.read_text(encoding="utf-8")

    reader = ReaderAgent(settings=settings)
    with console.status("[muted]Consulting the book...[/]"):
        answer = asyncio.run(reader.ask_book(question, chapter_text, summary))
    console.print(f"[accent]{answer}[/]")


if __name__ == "__main__":
    cli()
