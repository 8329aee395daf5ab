"""Dump-envelope CLI command: analyze a git commit against its first parent."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..api import analyze as run
from ..attribution import parse_unified_diff
from ..engine import AnalysisRequest
from ..exceptions import ArcSightError
from ..logging_config import setup_logging
from ..snapshot.loader import EMPTY_TREE, first_parent, git_diff, load_git_revision
from . import app
from ._common import console, resolve_config


@app.command(name="dump-envelope")
def dump_envelope(
    revision: str = typer.Argument(..., help="Commit to analyze (e.g. HEAD, abc123)"),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-r",
        help="Git repository",
        exists=True,
        file_okay=False,
        dir_okay=True,
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
    """Print the envelope for a commit, as if it were a one-commit PR.

    [bold cyan]Examples:[/bold cyan]

      arcsight dump-envelope HEAD

      arcsight dump-envelope abc123 --repo ../web
    """
    setup_logging(verbose=verbose)

    try:
        parent = first_parent(repo, revision)
        head = load_git_revision(repo, revision)
        base = load_git_revision(repo, parent) if parent else None
        diff_text = git_diff(repo, parent or EMPTY_TREE, revision)
        request = AnalysisRequest(
            head=head,
            base=base,
            diff=parse_unified_diff(diff_text),
            identity={"revision": revision, "base": parent},
        )
        envelope = run(request, resolve_config(config))
    except ArcSightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    print(json.dumps(envelope, indent=2, sort_keys=True))
