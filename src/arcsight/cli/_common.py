"""Shared CLI helpers."""

import json
from pathlib import Path
from typing import Any, Mapping, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import AnalyzerConfig, load_config
from ..engine import IdentityValue

console = Console()

_STATUS_STYLES = {
    "success": "bold red",
    "degraded": "yellow",
    "silent": "dim",
    "error": "bold magenta",
}


def resolve_config(config: Optional[Path] = None) -> AnalyzerConfig:
    """Load the analyzer config from an explicit file or ./arcsight.toml."""
    return load_config(config_file=config)


def parse_identity(pairs: Optional[list[str]]) -> dict[str, IdentityValue]:
    """Turn ``key=value`` options into identity fields.

    Integer-looking values become ints; an empty value becomes None.
    """
    identity: dict[str, IdentityValue] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--identity")
        if value == "":
            identity[key] = None
        elif value.lstrip("-").isdigit():
            identity[key] = int(value)
        else:
            identity[key] = value
    return identity


def print_envelope(envelope: Mapping[str, Any], json_output: bool) -> None:
    """Print an envelope as JSON or as a rich summary."""
    if json_output:
        print(json.dumps(envelope, indent=2, sort_keys=True))
        return

    core = envelope["core"]
    status = core["status"]
    style = _STATUS_STYLES.get(status, "")
    console.print()
    console.print(f"[bold cyan]ARCSIGHT[/bold cyan] -- status [{style}]{status}[/{style}]")
    if core.get("error_code"):
        console.print(f"  error code: [yellow]{core['error_code']}[/yellow]")

    stats = core["graph_stats"]
    console.print(
        f"  graph: {stats['node_count']} files, {stats['edge_count']} edges, "
        f"avg fan-out {stats['avg_fan_out']}"
    )
    console.print(f"  signature: [dim]{envelope['meta']['signature']}[/dim]")

    if core["cycles"]:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=True)
        table.add_column("Cycle", min_width=30)
        table.add_column("Len", justify="right")
        table.add_column("Root cause")
        table.add_column("Fingerprint", style="dim")
        for entry in core["cycles"]:
            root = entry["root_cause"]
            table.add_row(
                entry["cycle"],
                str(entry["length"]),
                f"{root['from']}:{root['line']} -> {root['to']}",
                entry.get("fingerprint") or "",
            )
        console.print(table)
    console.print()
