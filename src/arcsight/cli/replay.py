"""Replay CLI command: run recorded fixtures."""

from pathlib import Path
from typing import Optional

import typer

from ..api import analyze as run
from ..exceptions import ArcSightError
from ..fixtures import fixture_files, load_fixture
from ..logging_config import setup_logging
from . import app
from ._common import console, print_envelope, resolve_config


@app.command(name="replay")
def replay(
    fixture: Path = typer.Argument(
        ...,
        help="Fixture JSON file, or a directory of fixtures",
        exists=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output envelopes as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logs on stderr",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
) -> None:
    """Run one fixture, or every fixture in a directory, and print the envelopes.

    [bold cyan]Examples:[/bold cyan]

      arcsight replay fixtures/two_cycle.json

      arcsight replay fixtures/ --json
    """
    setup_logging(verbose=verbose)

    paths = fixture_files(fixture) if fixture.is_dir() else [fixture]
    if not paths:
        console.print(f"[yellow]No fixtures found in {fixture}[/yellow]")
        raise typer.Exit(1)

    try:
        analyzer_config = resolve_config(config)
        for path in paths:
            envelope = run(load_fixture(path), analyzer_config)
            if not json_output:
                console.print(f"[bold]{path}[/bold]")
            print_envelope(envelope, json_output)
    except ArcSightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
