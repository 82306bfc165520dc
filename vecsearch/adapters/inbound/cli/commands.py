"""CLI interface for vecsearch."""

import json
import os

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ....common.exception_handler import format_exception_json, get_exit_code, log_exception
from ....composition.container import open_search_service, open_vector_store
from ....config.logging import get_logger, setup_logging
from ....config.settings import settings
from ....core.domain import (
    Chunk,
    IngestRequest,
    SearchRequest,
    SearchResponse,
    parse_request,
)

app = typer.Typer(
    name="vecsearch",
    help="Chunk markdown, embed it, and run similarity search over pgvector",
    add_completion=False,
)

console = Console()
logger = get_logger("cli")

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"

PREVIEW_CHARS = 200


def handle_cli_error(exc: Exception) -> None:
    """Display an error in structured form.

    In debug mode, shows full JSON error details.
    In normal mode, shows a short message with the error code.
    """
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                escape(json.dumps(error_data, indent=2)),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error_type = error_data["error"]["type"]
    error_msg = error_data["error"]["message"]
    error_code = error_data["error"].get("code", "UNKNOWN")
    location = error_data.get("location", {})

    console.print(f"\n[red]Error \\[{error_code}]:[/] {escape(error_msg)}")
    console.print(f"[dim]Type: {error_type}[/]")

    if location:
        loc_str = (
            f"{location.get('file', '?')}:{location.get('line', '?')} "
            f"in {location.get('method', '?')}"
        )
        console.print(f"[dim]Location: {escape(loc_str)}[/]")

    console.print("[dim]Set DEBUG=true for full details[/]")


def fail(exc: Exception) -> typer.Exit:
    """Log and print ``exc``, then build the matching ``typer.Exit``."""
    log_exception(exc, log=logger)
    handle_cli_error(exc)
    return typer.Exit(get_exit_code(exc))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON"),
) -> None:
    """Configure logging for every command."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
        json_format=json_logs or settings.log_json,
    )


@app.command()
def init() -> None:
    """Enable the vector extension and create the chunk table."""
    try:
        with open_vector_store(settings) as store:
            stats = store.stats()
    except Exception as exc:
        raise fail(exc) from exc

    console.print(
        f"[green]Ready:[/] table [bold]{escape(str(stats.get('name', '?')))}[/] "
        f"({stats['dimension']} dimensions, {stats['count']} chunks)"
    )


@app.command()
def ingest(
    path: str = typer.Argument(..., help="Markdown file to ingest"),
    batch: bool = typer.Option(
        False, "--batch", help="Write all sections with one batched insert"
    ),
) -> None:
    """Chunk a markdown file, embed each section and store it."""
    try:
        request = parse_request(
            IngestRequest, {"path": path, "batch": batch or settings.ingest_batch_insert}
        )
        with open_search_service(settings) as service:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                MofNCompleteColumn(),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Embedding sections", total=None)

                def on_chunk(chunk: Chunk, chunk_id: int | None) -> None:
                    status = "stored" if chunk_id is not None else "failed"
                    progress.update(
                        task, advance=1, description=f"Section {chunk.position + 1} {status}"
                    )

                report = service.ingest_path(request.path, batch=request.batch, on_chunk=on_chunk)
    except Exception as exc:
        raise fail(exc) from exc

    if report.total_chunks == 0:
        console.print(f"[yellow]No sections found in {escape(report.source)}[/]")
        return

    if report.failures:
        table = Table(title="Skipped sections", show_lines=False)
        table.add_column("Section", justify="right")
        table.add_column("Code")
        table.add_column("Reason")
        for failure in report.failures:
            table.add_row(str(failure.position + 1), failure.error_code, failure.message)
        console.print(table)
        console.print(
            f"[yellow]Stored {report.stored_count} of {report.total_chunks} sections "
            f"from {escape(report.source)}[/]"
        )
    else:
        console.print(
            f"[green]Successfully processed all {report.total_chunks} sections "
            f"from {escape(report.source)}[/]"
        )


@app.command()
def search(
    prompt: str = typer.Argument(..., help="Text to search for"),
    limit: int = typer.Option(None, "--limit", "-k", help="Maximum number of matches"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Rank stored sections by similarity to PROMPT."""
    try:
        request = parse_request(
            SearchRequest,
            {"query": prompt, "limit": settings.default_limit if limit is None else limit},
        )
        with open_search_service(settings) as service:
            results = service.search(request.query, request.limit)
    except Exception as exc:
        raise fail(exc) from exc

    response = SearchResponse.from_results(request, results)
    if as_json:
        console.print_json(response.model_dump_json())
        return

    console.print(f'\n[bold]Searching for:[/] "{escape(request.query)}"')
    if not response.hits:
        console.print("[yellow]No stored sections to compare against.[/]")
        return

    for hit in response.hits:
        console.print(
            f"\n[bold cyan]--- Match {hit.rank} (Similarity: {hit.similarity * 100:.2f}%) ---[/]"
        )
        preview = hit.text[:PREVIEW_CHARS]
        if len(hit.text) > PREVIEW_CHARS:
            preview += "..."
        console.print(preview, markup=False, highlight=False)


@app.command()
def status() -> None:
    """Show configuration and the number of stored sections."""
    console.print("[bold]vecsearch status[/]\n")
    console.print(f"Provider:  {settings.embedding_provider} ({escape(settings.embedding_model)})")
    console.print(f"Dimension: {settings.embedding_dimension}")
    console.print(f"Backend:   {settings.vector_backend} (table {escape(settings.vector_table)})")

    if settings.embedding_provider == "openai":
        key = settings.openai_api_key
    else:
        key = settings.google_api_key
    if key:
        console.print("✅ Embedding API key configured")
    else:
        console.print("❌ Embedding API key not set")

    try:
        with open_vector_store(settings) as store:
            count = store.count()
    except Exception as exc:
        raise fail(exc) from exc

    if count == 0:
        console.print("\n[yellow]No sections stored yet. Run 'vecsearch ingest FILE'.[/]")
    else:
        console.print(f"\n[green]Total: {count} stored sections[/]")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete every stored section."""
    try:
        with open_vector_store(settings) as store:
            count = store.count()
            if count == 0:
                console.print("Table is already empty.")
                return
            if not yes:
                typer.confirm(f"This will delete {count} sections. Continue?", abort=True)
            removed = store.clear()
    except typer.Abort:
        raise
    except Exception as exc:
        raise fail(exc) from exc

    console.print(f"[green]Removed {removed} sections[/]")
