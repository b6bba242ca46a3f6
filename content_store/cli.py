"""
Command-line interface for the Content Store.

Uses Typer to expose checks and queries over a content directory. Every
command loads a fresh snapshot, so the CLI doubles as a pre-publish
validation step.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import AppConfig, get_preview_enabled, load_config
from .core.errors import ContentStoreError
from .core.resolver import follow as follow_path
from .core.resolver import resolve as resolve_path
from .core.store import ContentStore, Snapshot, list_published, list_visible
from .core.types import NotFound, Redirect, ResolveContext, ResolvedContent
from .output.index import write_index
from .utils.logging import setup_logging

app = typer.Typer(add_completion=False)
console = Console()

CONTENT_OPTION = typer.Option(None, "--content", "-d", help="Content directory (overrides config).")
CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, help="YAML config file.")
LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Logging level.")


@app.command()
def check(
    content: Path | None = CONTENT_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Load the content directory and report validation results."""
    cfg = _prepare(config, log_level)
    snapshot = _load(cfg, content)
    published = sum(1 for _ in list_published(snapshot))
    console.print(
        "[bold]Content OK[/bold]: "
        f"records={len(snapshot)}, published={published}, "
        f"drafts={len(snapshot) - published}, aliases={len(snapshot.aliases)}"
    )


@app.command("list")
def list_records(
    content: Path | None = CONTENT_OPTION,
    config: Path | None = CONFIG_OPTION,
    preview: bool = typer.Option(False, "--preview", help="Include unpublished records."),
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """List records visible in the selected context, newest first."""
    cfg = _prepare(config, log_level)
    snapshot = _load(cfg, content)
    context = _context(cfg, preview)

    table = Table(title="Preview" if context.is_preview else "Published")
    table.add_column("Date")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("State")
    for record in list_visible(snapshot, context):
        table.add_row(
            record.date.strftime("%Y-%m-%d"),
            escape(record.slug),
            escape(record.title),
            "published" if record.published else "draft",
        )
    console.print(table)


@app.command()
def resolve(
    path: str = typer.Argument(..., help="Request path to resolve."),
    content: Path | None = CONTENT_OPTION,
    config: Path | None = CONFIG_OPTION,
    preview: bool = typer.Option(False, "--preview", help="Resolve as a preview build."),
    follow: bool = typer.Option(False, "--follow", help="Follow redirects to the final content."),
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Show what would be served for PATH."""
    cfg = _prepare(config, log_level)
    snapshot = _load(cfg, content)
    context = _context(cfg, preview)

    if follow:
        outcome = follow_path(snapshot, path, context, max_hops=cfg.resolver.max_redirect_hops)
    else:
        outcome = resolve_path(snapshot, path, context)

    if isinstance(outcome, ResolvedContent):
        console.print(f"[green]200[/green] {escape(outcome.record.url)} ({escape(outcome.record.title)})")
    elif isinstance(outcome, Redirect):
        code = 301 if outcome.permanent else 302
        console.print(f"[yellow]{code}[/yellow] -> {escape(outcome.location)}")
    elif isinstance(outcome, NotFound):
        console.print(f"[red]404[/red] {escape(outcome.path)}")
        raise typer.Exit(code=2)


@app.command()
def index(
    output: Path = typer.Option(Path("out"), "--output", "-o"),
    content: Path | None = CONTENT_OPTION,
    config: Path | None = CONFIG_OPTION,
    preview: bool = typer.Option(False, "--preview", help="Include unpublished records."),
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Write the posts index and redirect map as JSON."""
    cfg = _prepare(config, log_level, log_dir=output)
    snapshot = _load(cfg, content)
    index_path, redirects_path = write_index(snapshot, output, cfg.output, _context(cfg, preview))
    console.print(f"Index written: {index_path}")
    console.print(f"Redirects written: {redirects_path}")


def _prepare(config: Path | None, log_level: str | None, log_dir: Path | None = None) -> AppConfig:
    try:
        cfg = load_config(str(config) if config else None)
    except ContentStoreError as exc:
        console.print(f"[red]Config error[/red]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging, log_dir)
    return cfg


def _load(cfg: AppConfig, content: Path | None) -> Snapshot:
    content_dir = content or Path(cfg.source.content_dir)
    store = ContentStore(content_dir, cfg.source.pattern, cfg.source.encoding)
    try:
        return store.reload()
    except (ContentStoreError, OSError) as exc:
        console.print(f"[red]Load failed[/red]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _context(cfg: AppConfig, preview: bool) -> ResolveContext:
    return ResolveContext(is_preview=preview or get_preview_enabled(cfg.resolver))


if __name__ == "__main__":
    app()
