"""CLI entry point: registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="arcsight",
    help="ArcSight - Deterministic Dependency-Cycle Analyzer",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        is_eager=True,
    ),
) -> None:
    """
    Find the import cycles a change introduces, with the line that closed them.
    """
    if version:
        console.print(f"[bold cyan]ArcSight[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .compare import compare as _compare  # noqa: F401, E402
from .dump import dump_envelope as _dump_envelope  # noqa: F401, E402
from .replay import replay as _replay  # noqa: F401, E402
