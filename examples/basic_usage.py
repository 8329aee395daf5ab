#!/usr/bin/env python3
"""
Example: Basic usage of ArcSight as a Python library
"""

from pathlib import Path
import subprocess

from arcsight import AnalysisRequest, analyze, parse_unified_diff, render_comment
from arcsight.snapshot.loader import load_directory

# Analyze a working tree against its merge base
head = Path("/path/to/checkout")
base = Path("/path/to/merge-base-checkout")
diff = subprocess.run(
    ["git", "diff", "-U0", "-M", "origin/main", "HEAD"],
    cwd=head, capture_output=True, text=True, check=True,
).stdout

request = AnalysisRequest(
    head=load_directory(head),
    base=load_directory(base),
    diff=parse_unified_diff(diff),
    identity={"repo": "acme/web", "pr": 7},
)
envelope = analyze(request)

# Print new cycles
for entry in envelope["core"]["cycles"]:
    root = entry["root_cause"]
    print(f"{entry['cycle']} (length {entry['length']})")
    print(f"  closed by {root['from']} line {root['line']} importing {root['to']}")

print(f"Status: {envelope['core']['status']}, signature {envelope['meta']['signature']}")

comment = render_comment(envelope)
if comment is not None:
    print(comment)
