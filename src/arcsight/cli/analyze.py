"""Analyze CLI command: run the analyzer over a working tree."""

from pathlib import Path
from typing import List, Optional

import typer

from ..api import analyze as run
from ..attribution import PRDiff, parse_unified_diff
from ..engine import AnalysisRequest
from ..exceptions import ArcSightError
from ..logging_config import setup_logging
from ..snapshot.loader import load_directory
from . import app
from ._common import console, parse_identity, print_envelope, resolve_config


@app.command(name="analyze")
def analyze(
    path: Path = typer.Argument(
        ...,
        help="Head working tree to analyze",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    base: Optional[Path] = typer.Option(
        None,
        "--base",
        "-b",
        help="Base working tree (merge base of the change)",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    diff: Optional[Path] = typer.Option(
        None,
        "--diff",
        "-d",
        help="Unified diff of the change (git diff -U0 -M output)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    identity: Optional[List[str]] = typer.Option(
        None,
        "--identity",
        "-i",
        help="Identity field as key=value (repeatable)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the envelope as JSON",
    ),
    fail_on_cycles: bool = typer.Option(
        False,
        "--fail-on-cycles",
        help="Exit 1 when the envelope reports new cycles",
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
    """Analyze a working tree and print the envelope.

    Without --diff nothing is attributable and the envelope is silent.

    [bold cyan]Examples:[/bold cyan]

      arcsight analyze . --base ../main --diff change.diff

      git diff -U0 -M main > change.diff && arcsight analyze . -d change.diff --json
    """
    logger = setup_logging(verbose=verbose)

    try:
        analyzer_config = resolve_config(config)
        pr_diff = PRDiff()
        if diff is not None:
            pr_diff = parse_unified_diff(diff.read_text(encoding="utf-8", errors="replace"))

        request = AnalysisRequest(
            head=load_directory(path),
            base=load_directory(base) if base is not None else None,
            diff=pr_diff,
            identity=parse_identity(identity),
        )
        envelope = run(request, analyzer_config)
    except typer.BadParameter:
        raise
    except ArcSightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error in analyze")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)

    print_envelope(envelope, json_output)
    if fail_on_cycles and envelope["core"]["cycles"]:
        raise typer.Exit(1)
