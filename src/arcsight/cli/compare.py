"""Compare CLI command: check a fixture against its golden envelope."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..api import analyze as run
from ..envelope import canonical_json
from ..exceptions import ArcSightError, SchemaUpgradeFailure
from ..fixtures import load_fixture
from ..schema import upgrade_envelope
from . import app
from ._common import console, resolve_config


@app.command(name="compare")
def compare(
    fixture: Path = typer.Argument(
        ...,
        help="Fixture JSON file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    golden: Path = typer.Option(
        ...,
        "--golden",
        "-g",
        help="Golden envelope JSON",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    update: bool = typer.Option(
        False,
        "--update",
        help="Overwrite the golden file with the current envelope",
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
    """Run a fixture and compare the envelope with a golden envelope.

    Golden envelopes of older schema versions are upgraded before comparing.
    Exits 1 on any difference.
    """
    try:
        envelope = run(load_fixture(fixture), resolve_config(config))
        if update:
            golden.write_text(json.dumps(envelope, indent=2, sort_keys=True) + "\n", encoding="utf-8")
            console.print(f"[green]Updated {golden}[/green]")
            return
        expected = upgrade_envelope(json.loads(golden.read_text(encoding="utf-8")))
    except SchemaUpgradeFailure as e:
        console.print(f"[red]Cannot upgrade golden envelope:[/red] {e}")
        raise typer.Exit(1)
    except (ArcSightError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if canonical_json(envelope) == canonical_json(expected):
        console.print(f"[green]match[/green] {fixture}")
        return

    console.print(f"[red]drift[/red] {fixture}")
    for section in ("version", "identity", "core", "extensions", "meta"):
        if canonical_json(envelope.get(section)) != canonical_json(expected.get(section)):
            console.print(f"  [yellow]{section}[/yellow] differs")
    raise typer.Exit(1)
