"""Unified Rich theme and reusable UI helper functions for the CLI."""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.theme import Theme

BOOK_THEME = Theme({
    "app.title": "bold",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "blue",
    "muted": "dim",
    "accent": "cyan",
    "genre": "bold",
    "stat.label": "dim",
    "stat.value": "bold",
    "chapter.num": "blue",
    "character.name": "bold cyan",
})


def get_console() -> Console:
    """Return a Console instance with the book theme applied."""
    return Console(theme=BOOK_THEME)


def app_header(title: str = "lumina") -> Rule:
    """Return a Rule element for the application header banner."""
    return Rule(title=f"[bold]{title}[/]", style="dim")


def command_panel(title: str, fields: dict[str, str]) -> Panel:
    """Return a Panel displaying command parameters.

    Args:
        title: Panel title (e.g. "New book").
        fields: Ordered dict of label -> value pairs.
    """
    lines = []
    for label, value in fields.items():
        lines.append(f"  [stat.label]{label}:[/] [stat.value]{value}[/]")
    body = "\n".join(lines)
    return Panel(body, title=f"[bold]{title}[/]", box=box.ROUNDED, border_style="dim", padding=(0, 2))


def success_panel(title: str, body: str) -> Panel:
    """Return a green-bordered Panel for success results."""
    return Panel(body, title=f"[success]{title}[/]", box=box.ROUNDED, border_style="green", padding=(0, 2))


def book_summary_panel(book) -> Panel:
    """Return a Panel with the book's headline stats."""
    words = sum(len(ch.content.split()) for ch in book.chapters)
    body = (
        f"  [stat.label]Author:[/] [stat.value]{book.author}[/]  "
        f"[muted]|[/]  [stat.label]Genre:[/] [genre]{book.genre}[/]  "
        f"[muted]|[/]  [stat.label]Chapters:[/] [stat.value]{len(book.chapters)}[/]  "
        f"[muted]|[/]  [stat.label]Words:[/] [stat.value]{words:,}[/]"
    )
    return Panel(body, title=f"[bold]{book.title}[/]", box=box.ROUNDED, border_style="dim", padding=(0, 2))


def chapter_table(chapters: list) -> Table:
    """Build a Rich Table of chapter titles and summaries."""
    table = Table(box=box.ROUNDED, border_style="dim", show_header=True, padding=(0, 1))
    table.add_column("#", style="chapter.num", justify="right")
    table.add_column("Chapter", style="bold")
    table.add_column("Summary")

    for i, ch in enumerate(chapters, 1):
        summary = ch.summary
        if len(summary) > 60:
            summary = summary[:60] + "..."
        table.add_row(str(i), ch.title, summary)
    return table


def character_cards(characters: list) -> Table:
    """Build a Rich Table layout of character information."""
    table = Table(box=box.ROUNDED, border_style="dim", show_header=True, padding=(0, 1))
    table.add_column("Character", style="character.name")
    table.add_column("Role", style="muted")
    table.add_column("Description")

    for c in characters[:8]:
        desc = c.description
        if len(desc) > 40:
            desc = desc[:40] + "..."
        table.add_row(c.name, c.role, desc)

    if len(characters) > 8:
        table.add_row(f"[muted]+{len(characters) - 8} more[/]", "", "")

    return table
