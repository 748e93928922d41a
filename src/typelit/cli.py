"""CLI entry point for the book ingestion tools.

Provides commands:
  - ingest: Fetch books from the catalog, segment them, persist to SQLite
  - process: Run the pipeline on a local plain-text file
  - status: Display database statistics (books, paragraphs, difficulty, topics)
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from typelit.config import load_ingest_config
from typelit.database import Database
from typelit.models import RawBook
from typelit.processing.pipeline import EmptyContentError, process_book

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="typelit - turn public-domain books into typing-practice paragraphs",
    rich_markup_mode="rich",
)
console = Console()

_DIFFICULTY_STYLES = {"easy": "green", "medium": "yellow", "hard": "red"}


@app.callback()
def app_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def ingest(
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", help="Maximum number of books to fetch"),
    ] = None,
    db_path: Annotated[
        Path | None,
        typer.Option("--db", "-d", help="Path to SQLite database file"),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to ingest config JSON"),
    ] = None,
    max_concurrent: Annotated[
        int | None,
        typer.Option("--concurrency", "-n", help="Books processed at once"),
    ] = None,
) -> None:
    """Fetch books from the catalog, segment them, and store the paragraphs."""
    import asyncio

    from typelit.catalog.client import CatalogClient, CatalogError
    from typelit.ingest.orchestrator import IngestOrchestrator
    from typelit.ingest.progress import IngestProgressTracker

    try:
        config = load_ingest_config(config_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] Failed to load config: {e}")
        raise typer.Exit(code=1)

    # CLI flags override config
    if limit is not None:
        config.book_limit = limit
    if db_path is not None:
        config.db_path = str(db_path)
    if max_concurrent is not None:
        config.max_concurrent_books = max_concurrent

    console.print(
        Panel(
            f"Catalog: [bold]{config.catalog_url}[/bold]\n"
            f"Books: {config.book_limit} | Concurrency: {config.max_concurrent_books} | "
            f"Database: {config.db_path}",
            title="Book Ingestion",
        )
    )

    progress = IngestProgressTracker(total_books=config.book_limit)

    async def _run_ingest():
        async with CatalogClient(config) as client:
            orchestrator = IngestOrchestrator(client, db, config, progress)
            with progress:
                return await orchestrator.run(config.book_limit)

    with Database(config.db_path) as db:
        try:
            report = asyncio.run(_run_ingest())
        except CatalogError as e:
            console.print(f"[red]Fatal:[/red] {e}")
            raise typer.Exit(code=1)

    summary_table = Table(title="Ingestion Summary")
    summary_table.add_column("Metric", style="bold")
    summary_table.add_column("Count", justify="right")

    summary_table.add_row("Books fetched", str(report.total))
    summary_table.add_row("Stored", f"[green]{report.succeeded}[/green]")
    summary_table.add_row("Skipped", f"[yellow]{report.skipped}[/yellow]")
    summary_table.add_row("Paragraphs", str(report.paragraphs))

    console.print(Panel(summary_table, title="Ingestion Complete"))


@app.command()
def process(
    file_path: Annotated[
        Path,
        typer.Argument(help="Plain-text book file", exists=True, dir_okay=False),
    ],
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="Book title (defaults to file name)"),
    ] = None,
    authors: Annotated[
        list[str] | None,
        typer.Option("--author", "-a", help="Author name (repeatable)"),
    ] = None,
    subjects: Annotated[
        list[str] | None,
        typer.Option("--subject", "-s", help="Subject tag (repeatable)"),
    ] = None,
    book_id: Annotated[
        int,
        typer.Option("--book-id", help="Numeric book id used for storage"),
    ] = 0,
    db_path: Annotated[
        Path | None,
        typer.Option("--db", "-d", help="Store the result in this SQLite database"),
    ] = None,
) -> None:
    """Run the pipeline on a local text file and show per-chapter results."""
    try:
        raw_text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.warning("UTF-8 decode failed for %s, falling back to latin-1", file_path)
        raw_text = file_path.read_text(encoding="latin-1")

    book = RawBook(
        id=book_id,
        title=title or file_path.stem.replace("_", " ").replace("-", " ").title(),
        authors=authors or [],
        subjects=subjects or [],
    )

    try:
        result = process_book(raw_text, book)
    except EmptyContentError as e:
        console.print(f"[yellow]Skipped:[/yellow] {e}")
        raise typer.Exit(code=1)

    metadata = result.metadata
    difficulty = metadata.dominant_difficulty.value
    console.print(
        Panel(
            f"[bold]{metadata.title}[/bold] by {metadata.author}\n"
            f"Slug: {metadata.slug} | Topic: {metadata.topic} | "
            f"Difficulty: [{_DIFFICULTY_STYLES[difficulty]}]{difficulty}[/]",
            title="Book",
        )
    )

    by_chapter: dict[int, Counter] = {}
    titles: dict[int, str | None] = {}
    for p in result.paragraphs:
        by_chapter.setdefault(p.chapter, Counter())[p.difficulty.value] += 1
        titles.setdefault(p.chapter, p.chapter_title)

    chapter_table = Table(title="Paragraphs by Chapter")
    chapter_table.add_column("Chapter", justify="right", style="bold")
    chapter_table.add_column("Title")
    chapter_table.add_column("Paragraphs", justify="right")
    for level in _DIFFICULTY_STYLES:
        chapter_table.add_column(level.title(), justify="right")

    for chapter in sorted(by_chapter):
        counts = by_chapter[chapter]
        chapter_table.add_row(
            str(chapter),
            titles[chapter] or "",
            str(sum(counts.values())),
            *(str(counts.get(level, 0)) for level in _DIFFICULTY_STYLES),
        )
    console.print(chapter_table)

    histogram = ", ".join(f"{k}s: {v}" for k, v in metadata.duration_histogram.items())
    console.print(
        f"\n[bold]Paragraphs:[/bold] {metadata.total_paragraphs} | "
        f"[bold]Chapters:[/bold] {metadata.total_chapters} | "
        f"[bold]Durations:[/bold] {histogram}"
    )

    if db_path is not None:
        with Database(db_path) as db:
            db.insert_book(metadata)
            db.insert_paragraphs(result.paragraphs)
        console.print(f"[green]Stored in {db_path}[/green]")


@app.command()
def status(
    db_path: Annotated[
        Path,
        typer.Option("--db", "-d", help="Path to SQLite database file"),
    ] = Path("data/books.db"),
) -> None:
    """Display database statistics: books, paragraphs, difficulty and topics."""
    if not db_path.exists():
        console.print(
            f"[yellow]Database not found:[/yellow] {db_path}\n"
            "Run [bold]typelit ingest[/bold] first."
        )
        raise typer.Exit(code=1)

    with Database(db_path) as db:
        book_count = db.get_book_count()
        paragraph_count = db.get_paragraph_count()
        difficulty_counts = db.get_difficulty_counts()
        topic_counts = db.get_topic_counts()

    console.print(Panel(f"Database: [bold]{db_path}[/bold]", title="Library Status"))

    difficulty_table = Table(title="Paragraphs by Difficulty")
    difficulty_table.add_column("Difficulty", style="bold")
    difficulty_table.add_column("Count", justify="right")
    for level, count in sorted(difficulty_counts.items()):
        style = _DIFFICULTY_STYLES.get(level, "")
        difficulty_table.add_row(level, f"[{style}]{count}[/{style}]" if style else str(count))
    console.print(difficulty_table)

    topic_table = Table(title="Books by Topic")
    topic_table.add_column("Topic", style="bold")
    topic_table.add_column("Count", justify="right")
    for topic, count in sorted(topic_counts.items()):
        topic_table.add_row(topic, str(count))
    console.print(topic_table)

    console.print(f"\n[bold]Total books:[/bold] {book_count}")
    console.print(f"[bold]Total paragraphs:[/bold] {paragraph_count}")


if __name__ == "__main__":
    app()
