"""Command-line interface for the Harbourmaster ingestion service."""

import csv
import json
import re
import shutil
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from harbourmaster.config.logging import configure_logging
from harbourmaster.config.settings import get_settings
from harbourmaster.errors import IngestError, InvalidTransitionError, RecordNotFoundError
from harbourmaster.models import ReviewStatus, Shape
from harbourmaster.pipeline.context import IngestContext, build_context
from harbourmaster.pipeline.orchestrator import ingest_text
from harbourmaster.pipeline.stages import trigger_embedding
from harbourmaster.storage.database import create_db_engine, init_db

app = typer.Typer(
    name="harbourmaster",
    help="Harbourmaster - ingest spoken harbour knowledge into the knowledge base",
    add_completion=False,
)
review_app = typer.Typer(help="Work the human-review queue", add_completion=False)
app.add_typer(review_app, name="review")

console = Console()

BATCH_LOG_COLUMNS = [
    "timestamp",
    "filename",
    "status",
    "table_type",
    "confidence",
    "method",
    "harbour_id",
    "embedding_triggered",
    "error_message",
]

HARBOUR_PREFIX_PATTERN = re.compile(r"^([a-zA-Z]+)_")


def _context(verbose: bool = False) -> IngestContext:
    settings = get_settings()
    configure_logging("DEBUG" if verbose else "WARNING", json_output=False)
    return build_context(settings)


def harbour_hint_from_filename(filename: str) -> Optional[str]:
    """``kioni_mooring_001.txt`` -> ``Kioni``."""
    match = HARBOUR_PREFIX_PATTERN.match(filename)
    if not match:
        return None
    word = match.group(1)
    return word[0].upper() + word[1:]


def _print_error(error: IngestError) -> None:
    console.print(f"[red]{error.category.value}:[/red] {error.message}")
    if error.review_id:
        console.print(f"[yellow]Parked for review:[/yellow] {error.review_id}")
    if error.details:
        console.print_json(json.dumps(error.details, default=str))


# =============================================================================
# Ingestion
# =============================================================================

@app.command()
def ingest(
    transcript: Optional[str] = typer.Argument(None, help="Transcript text (reads --file or stdin when omitted)"),
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        help="Read the transcript from a file",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    harbour: Optional[str] = typer.Option(None, "--harbour", help="Harbour-name hint"),
    row_id: Optional[str] = typer.Option(None, "--row-id", help="External tracking id"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Ingest a single transcript."""
    if transcript is None:
        transcript = file.read_text(encoding="utf-8") if file else sys.stdin.read()

    ctx = _context(verbose)
    try:
        outcome = ingest_text(ctx, transcript, harbour_name=harbour, row_id=row_id)
    except IngestError as e:
        _print_error(e)
        raise typer.Exit(code=1)

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Table", outcome.shape.value)
    table.add_row("Id", outcome.record_id)
    table.add_row("Method", outcome.classification.method.value)
    table.add_row("Confidence", f"{outcome.classification.confidence:.2f}")
    table.add_row("Harbour id", outcome.reference_id or "-")
    table.add_row("Embedded", "yes" if outcome.embedding_triggered else "no")

    console.print(Panel.fit("[bold green]Ingested[/bold green]", border_style="green"))
    console.print(table)
    console.print_json(json.dumps(outcome.cleaned))


@app.command("ingest-dir")
def ingest_dir(
    directory: Path = typer.Argument(..., help="Folder of .txt transcripts", exists=True, file_okay=False),
    log_file: Path = typer.Option(Path("batch_log.csv"), "--log", help="CSV result log (appended)"),
    archive: Optional[Path] = typer.Option(None, "--archive", help="Move processed files here"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Batch-ingest every .txt transcript in a folder."""
    files = sorted(directory.glob("*.txt"))
    if not files:
        console.print(f"[yellow]No .txt transcripts in {directory}[/yellow]")
        return

    ctx = _context(verbose)
    new_log = not log_file.exists()
    if archive is not None:
        archive.mkdir(parents=True, exist_ok=True)

    succeeded = 0
    with open(log_file, "a", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=BATCH_LOG_COLUMNS)
        if new_log:
            writer.writeheader()

        for path in files:
            row = {"timestamp": datetime.now(timezone.utc).isoformat(), "filename": path.name}
            try:
                outcome = ingest_text(
                    ctx,
                    path.read_text(encoding="utf-8"),
                    harbour_name=harbour_hint_from_filename(path.name),
                    row_id=f"batch_{path.name}_{int(time.time() * 1000)}",
                )
            except IngestError as e:
                row.update(status="error", error_message=f"{e.category.value}: {e.message}")
                console.print(f"[red]x[/red] {path.name}: {e.category.value}")
            except (OSError, UnicodeDecodeError) as e:
                row.update(status="error", error_message=f"unreadable_file: {e}")
                console.print(f"[red]x[/red] {path.name}: unreadable_file")
            else:
                succeeded += 1
                row.update(
                    status="success",
                    table_type=outcome.shape.value,
                    confidence=outcome.classification.confidence,
                    method=outcome.classification.method.value,
                    harbour_id=outcome.reference_id or "",
                    embedding_triggered=outcome.embedding_triggered,
                )
                console.print(f"[green]ok[/green] {path.name} -> {outcome.shape.value}")
                if archive is not None:
                    shutil.move(str(path), str(archive / path.name))
            writer.writerow(row)

    console.print(f"\n[bold]{succeeded}/{len(files)}[/bold] transcripts ingested. Log: {log_file}")


@app.command()
def embed(
    shape: Shape = typer.Argument(..., help="Table of the row"),
    record_id: str = typer.Argument(..., help="Row id"),
) -> None:
    """Re-compute the embedding of one stored row."""
    ctx = _context()
    try:
        embedded = trigger_embedding(shape, record_id, ctx.gateway, ctx.embedder, ctx.settings, router=ctx.router)
    except RecordNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if not embedded:
        console.print("[red]No embedding stored[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Embedding stored for[/green] {shape.value}/{record_id}")


# =============================================================================
# Review queue
# =============================================================================

@review_app.command("list")
def review_list(
    status: Optional[ReviewStatus] = typer.Option(None, "--status", help="Filter by status"),
    limit: int = typer.Option(50, "--limit"),
) -> None:
    """List parked transcripts."""
    ctx = _context()
    items = ctx.review_store.list_items(status=status, limit=limit)

    table = Table(title=f"Review queue ({len(items)})")
    table.add_column("Id", style="dim")
    table.add_column("Status")
    table.add_column("Error")
    table.add_column("Transcript")
    for item in items:
        table.add_row(item.id, item.status, item.error_type, item.transcript[:60])
    console.print(table)


@review_app.command("set-status")
def review_set_status(
    item_id: str = typer.Argument(..., help="Review item id"),
    status: ReviewStatus = typer.Argument(..., help="New status"),
) -> None:
    """Move a review item along its lifecycle."""
    ctx = _context()
    try:
        item = ctx.review_store.transition(item_id, status)
    except (RecordNotFoundError, InvalidTransitionError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]{item.id}[/green] is now {item.status}")


# =============================================================================
# Operations
# =============================================================================

@app.command("init-db")
def init_db_command() -> None:
    """Create the database tables."""
    settings = get_settings()
    init_db(create_db_engine(settings.database_url))
    console.print(f"[green]Database ready:[/green] {settings.database_url}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    """Run the HTTP API."""
    from harbourmaster.api.main import main as run_server

    run_server(host=host, port=port)


@app.command()
def info() -> None:
    """Display system information and configuration."""
    from harbourmaster import __version__

    settings = get_settings()

    console.print(
        Panel.fit(
            "[bold blue]Harbourmaster Ingestion Service[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("LLM Model", settings.llm_model_name)
    table.add_row("Embedding Model", settings.embedding_model_name)
    table.add_row("Ollama URL", settings.llm_ollama_base_url)
    table.add_row("Confidence Threshold", str(settings.confidence_threshold))
    table.add_row("Default Tier", settings.default_tier.value)
    table.add_row("Database", settings.database_url)

    console.print(table)


if __name__ == "__main__":
    app()
