"""Command line interface for docextract."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from docextract.catalog import load_catalog
from docextract.config import AppConfig, load_config
from docextract.errors import PipelineError
from docextract.export import ExportArtifact
from docextract.extraction.client import build_ade_client
from docextract.extraction.orchestrator import ExtractionOrchestrator
from docextract.extraction.schema import ExtractionRecord
from docextract.models import UploadedDocument
from docextract.utils.files import iter_document_paths


console = Console()
app = typer.Typer(help="docextract - parse documents and extract book metadata with ADE")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_output_dir(output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)


def _record_table(record: ExtractionRecord) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field")
    table.add_column("Value")
    for key, value in record.to_payload().items():
        if isinstance(value, list):
            value = ", ".join(value)
        elif isinstance(value, dict):
            value = ", ".join(str(part) for part in value.values())
        table.add_row(key, str(value))
    return table


async def _run_pipeline(
    orchestrator: ExtractionOrchestrator, document: UploadedDocument, *, full_text: bool
) -> ExportArtifact:
    orchestrator.select_document(document)
    await orchestrator.parse()
    await orchestrator.extract()
    return orchestrator.export(include_full_text=full_text)


async def _run_all(
    config: AppConfig, paths: List[Path], output_dir: Path, *, full_text: bool
) -> int:
    client = build_ade_client(config)
    orchestrator = ExtractionOrchestrator(client, preview_chars=config.preview_chars)
    failed = 0
    try:
        for path in paths:
            console.print(f"Processing [bold]{path}[/bold]...")
            try:
                document = UploadedDocument.from_path(path)
                artifact = await _run_pipeline(orchestrator, document, full_text=full_text)
            except PipelineError as exc:
                failed += 1
                console.print(f"[red]{path.name}: {exc}[/red]")
                continue

            target = output_dir / artifact.filename
            target.write_text(artifact.content, encoding="utf-8")
            console.print(_record_table(orchestrator.record))
            console.print(f"Exported to [bold]{target}[/bold]")
    finally:
        if client is not None:
            await client.aclose()
    return failed


@app.command()
def run(
    inputs: List[Path] = typer.Argument(
        ..., help="PDF/PPTX files or folders containing them.", resolve_path=True
    ),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", help="Where to write exports"),
    full_text: bool = typer.Option(
        True, "--full-text/--no-full-text", help="Append the parsed document to the export"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Parse, extract and export book metadata for each document."""
    _setup_logging(verbose)
    config = load_config()
    if config.configuration_error:
        console.print(f"[red]{config.configuration_error}[/red]")
        raise typer.Exit(code=2)

    paths = list(iter_document_paths(inputs))
    if not paths:
        console.print("[yellow]No PDF or PPTX documents found.[/yellow]")
        return

    _ensure_output_dir(output_dir)
    failed = asyncio.run(_run_all(config, paths, output_dir, full_text=full_text))
    console.print(f"Exported: {len(paths) - failed}, failed: {failed}")
    if failed:
        raise typer.Exit(code=1)


@app.command()
def catalog() -> None:
    """List the demo catalog."""
    books = load_catalog().books
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Authors")
    table.add_column("Year")
    table.add_column("Stock")
    table.add_column("Rating")

    for book in books:
        stock = "Out of Stock" if book.availability.stock == 0 else str(book.availability.stock)
        table.add_row(
            book.id,
            book.title,
            ", ".join(book.authors),
            str(book.published_year),
            stock,
            f"{book.rating.average:.1f}/5.0",
        )

    console.print(table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the web interface."""
    import uvicorn

    from docextract.web.app import create_app

    config = load_config()
    if config.configuration_error:
        console.print(f"[yellow]Warning: {config.configuration_error}[/yellow]")

    console.print(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
