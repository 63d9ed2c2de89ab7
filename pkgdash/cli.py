"""
pkgdash CLI - import the build summary snapshot and run the dashboard server.
"""

from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .core.config import get_settings
from .core.database import get_db, init_db
from .core.logging import configure_logging
from .domain import importer, repos
from .domain.errors import DashboardError
from .domain.history import flatten

app = typer.Typer(
    name="pkgdash",
    help="Package build status dashboard",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
) -> None:
    settings = get_settings()
    if log_level:
        settings.LOG_LEVEL = log_level
    configure_logging(settings)


@app.command("import")
def import_snapshot(
    path: Optional[Path] = typer.Argument(None, help="Snapshot JSON (defaults to SNAPSHOT_PATH)"),
) -> None:
    """Replace all packages with the records in a JSON snapshot."""
    settings = get_settings()
    source = path or Path(settings.SNAPSHOT_PATH)
    try:
        records = importer.load_snapshot(source)
        init_db()
        with get_db() as session:
            repo = repos.PackageRepo(session)
            count = importer.import_snapshot(repo, records, settings.DEFAULT_COMMENT_AUTHOR)
            page = repo.list(regex=None, page=1, limit=max(count, 1))
            commented = sum(1 for p in page.items if p.latest_comment)
    except DashboardError as e:
        logger.error("Import failed: {}", e.message)
        console.print(f"[red]Import failed:[/red] {e.message}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Import failed")
        console.print(f"[red]Import failed:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Import summary")
    table.add_column("Source")
    table.add_column("Records", justify="right")
    table.add_column("Inserted", justify="right")
    table.add_column("With comments", justify="right")
    table.add_row(str(source), str(len(records)), str(count), str(commented))
    console.print(table)


@app.command("show")
def show(package_name: str = typer.Argument(..., help="Exact package name")) -> None:
    """Print a package's build flags and merged comment history."""
    init_db()
    with get_db() as session:
        repo = repos.PackageRepo(session)
        pkg = repo.find_by_name(package_name)
        if pkg is None:
            console.print(f"[red]No package named {package_name}[/red]")
            raise typer.Exit(1)

    console.print(f"[bold]{pkg.package_name}[/bold]  owner={pkg.owner or '-'}  status={pkg.status or 'Empty'}")
    flags = {
        "BI": pkg.bi_broken, "CI": pkg.ci_broken, "Image": pkg.image_broken,
        "Docker": pkg.docker_broken, "Binary": pkg.binary_broken,
    }
    console.print("  ".join(
        f"{bt}: {'[red]Fail[/red]' if broken else '[green]Pass[/green]'}" for bt, broken in flags.items()
    ))

    console.print("Comment history (newest first):")
    for entry in flatten(pkg.comments):
        stamp = entry.timestamp.isoformat(timespec="milliseconds")
        console.print(f"  {entry.build_type:<7}{stamp}  {entry.user}: {entry.text}", markup=False, highlight=False)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(5000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the dashboard API and UI with uvicorn."""
    import uvicorn

    uvicorn.run("pkgdash.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
