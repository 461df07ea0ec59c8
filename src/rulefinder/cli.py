"""Command line interface for RuleFinder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import typer
from rich.console import Console
from rich.table import Table

from rulefinder.annotate.phrases import PhraseRegistry, annotate as annotate_text
from rulefinder.annotate.tooltips import TooltipResolver
from rulefinder.config import AppConfig
from rulefinder.index.flattener import find_duplicate_ids, flatten
from rulefinder.index.search import Searcher
from rulefinder.ingestion.content_loader import CONTENT_FILES, load_content
from rulefinder.models import ContentBundle
from rulefinder.utils.files import iter_content_paths


console = Console()
app = typer.Typer(help="RuleFinder - rulebook search and phrase tooltips")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_bundle(config: AppConfig) -> Tuple[Path, ContentBundle]:
    content_dir = config.resolve_content_dir(Path.cwd())
    if not content_dir.is_dir():
        raise typer.BadParameter(f"Content directory not found: {content_dir}")
    return content_dir, load_content(content_dir)


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    content: Path = typer.Option(None, "--content", help="Rulebook content directory"),
    top_k: int = typer.Option(AppConfig().max_results, help="Number of results to display"),
    threshold: float = typer.Option(AppConfig().threshold, help="Accepted dissimilarity (0-1)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Fuzzy-search rules and reference tables."""
    _setup_logging(verbose)
    try:
        config = AppConfig(content_dir=content, threshold=threshold, max_results=top_k)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _, bundle = _load_bundle(config)

    searcher = Searcher(flatten(bundle.sections, bundle.tables), config)
    results = searcher.search(query)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Kind")
    table.add_column("Id")
    table.add_column("Title")
    table.add_column("Preview")

    for result in results:
        record = result.record
        table.add_row(f"{result.score:.4g}", record.kind, record.id, record.title, record.preview())

    console.print(table)


@app.command()
def annotate(
    text: str = typer.Argument(..., help="Prose to annotate"),
    content: Path = typer.Option(None, "--content", help="Rulebook content directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show the tooltip phrases found in a piece of text."""
    _setup_logging(verbose)
    config = AppConfig(content_dir=content)
    _, bundle = _load_bundle(config)

    spans = annotate_text(text, PhraseRegistry(bundle.phrase_rules))
    if not spans:
        console.print("[yellow]No phrases found.[/yellow]")
        return

    resolver = TooltipResolver(bundle.sections, max_chars=config.tooltip_max_chars)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Phrase")
    table.add_column("Tooltip")
    table.add_column("Text")

    for span in spans:
        table.add_row(
            str(span.start_index),
            str(span.end_index),
            span.phrase,
            span.tooltip_id,
            resolver.resolve(span.tooltip_id) or "",
        )

    console.print(table)


@app.command()
def tooltip(
    tooltip_id: str = typer.Argument(..., help="Rule id to resolve"),
    content: Path = typer.Option(None, "--content", help="Rulebook content directory"),
) -> None:
    """Print the tooltip text for a rule id."""
    config = AppConfig(content_dir=content)
    _, bundle = _load_bundle(config)

    text = TooltipResolver(bundle.sections, max_chars=config.tooltip_max_chars).resolve(tooltip_id)
    if text is None:
        console.print(f"[yellow]No tooltip for {tooltip_id!r}.[/yellow]")
        return
    console.print(text, markup=False)


@app.command()
def check(
    content: Path = typer.Option(None, "--content", help="Rulebook content directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Validate content: report records sharing the same id."""
    _setup_logging(verbose)
    content_dir, bundle = _load_bundle(AppConfig(content_dir=content))

    loaded = ", ".join(f"{name}: {count}" for name, count in bundle.sources.items())
    console.print(f"Loaded {loaded}")
    for path in iter_content_paths([content_dir]):
        if path.stem not in CONTENT_FILES:
            console.print(f"[yellow]Ignored[/yellow] {path.name}")
    records = flatten(bundle.sections, bundle.tables)
    console.print(f"Indexed {len(records)} records from [bold]{content_dir}[/bold]")
    duplicates = find_duplicate_ids(records)
    if not duplicates:
        console.print("[green]All record ids are unique.[/green]")
        return

    for record_id, count in sorted(duplicates.items()):
        console.print(f"[red]Duplicate id[/red] {record_id} ({count} records)")
    raise typer.Exit(code=1)
