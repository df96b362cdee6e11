"""Command-line interface for quarry."""

import asyncio
import logging
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from quarry.analyzer import analyze_project
from quarry.models import ProjectAnalysis


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
        ],
    )
    # Quiet noisy libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)


app = typer.Typer(
    name="quarry",
    help="Inventory a project's data contracts, APIs, metrics and integrations.",
)


@app.callback()
def main() -> None:
    """Static analysis of a project's source tree."""


def _validate_project_path(path: Path) -> Path:
    if not path.exists():
        raise typer.BadParameter(f"Path does not exist: {path}")
    if not path.is_dir():
        raise typer.BadParameter(f"Path is not a directory: {path}")
    return path.resolve()


def _print_table(
    console: Console, title: str, columns: Sequence[str], rows: Iterable[Sequence[str]]
) -> None:
    rows = list(rows)
    if not rows:
        console.print(f"[dim]No {title.lower()} found[/dim]")
        return

    table = Table(title=title, title_justify="left")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def _render_summary(console: Console, analysis: ProjectAnalysis) -> None:
    """Print one table per inventory."""
    _print_table(
        console,
        "Contracts",
        ("Name", "File", "Types", "Description"),
        (
            (c.name, c.file, ", ".join(c.types), c.description or "")
            for c in analysis.contracts
        ),
    )

    api_rows = []
    for api in analysis.apis:
        if api.endpoints:
            for endpoint in api.endpoints:
                api_rows.append(
                    (api.name, endpoint.method.upper(), endpoint.path, endpoint.description or "")
                )
        else:
            api_rows.append((api.name, "", api.base_url or "", api.authentication or ""))
    _print_table(console, "APIs", ("API", "Method", "Path / Base URL", "Notes"), api_rows)

    _print_table(
        console,
        "Metrics",
        ("Name", "Type", "File", "Category"),
        ((m.name, m.type.value, m.file, m.category or "") for m in analysis.metrics),
    )
    _print_table(
        console,
        "Integrations",
        ("Service", "Type", "Files"),
        ((i.service, i.type.value, ", ".join(i.files)) for i in analysis.integrations),
    )


@app.command()
def analyze(
    project_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the project directory to analyze. Defaults to current directory.",
        ),
    ] = Path("."),
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the full report as JSON.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Analyze a project and print its inventory."""
    _setup_logging(verbose)
    project_path = _validate_project_path(project_path)
    console = Console()

    try:
        analysis = asyncio.run(analyze_project(project_path))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        sys.exit(130)

    if as_json:
        typer.echo(analysis.model_dump_json(indent=2, by_alias=True, exclude_none=True))
        return

    console.print(f"\n[bold]quarry[/bold] - {project_path.name}\n")
    _render_summary(console, analysis)


if __name__ == "__main__":
    app()
