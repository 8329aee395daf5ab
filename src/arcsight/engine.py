"""The analysis pipeline.

    canonicalize -> build graph -> gate -> detect cycles -> attribute
    -> rulepacks -> build and sign envelope

Everything runs inside the safety switch guard. A silence trigger or any
failure trips the switch, and the call returns the constant no-signal
envelope for that code instead of partial results. The deadline is checked
at every stage boundary with the injected clock; this module never reads
time itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Union

from .attribution import PRDiff, attribute
from .config import AnalyzerConfig
from .confidence import MonorepoPredicate, confidence_gate, detect_monorepo, evaluate_confidence
from .cycles import Cycle, detect_cycles
from .envelope import build_envelope, sign_envelope, silent_envelope
from .graph import build_graph
from .graph.models import GraphBuildResult
from .logging_config import get_logger
from .rulepacks import Rulepack, RulepackContext, run_rulepacks
from .safety import Clock, Deadline, SafetySwitch
from .snapshot import RawFile, RepoSnapshot, canonicalize, repo_fingerprint

logger = get_logger(__name__)

IdentityValue = Union[str, int, None]


@dataclass(frozen=True)
class AnalysisRequest:
    """One analysis call.

    Attributes:
        head: Files of the PR head revision
        base: Files of the merge base, None when there is no base
        diff: What the PR changed
        identity: Caller identity (repo, PR number, head SHA, ...), copied
            verbatim into the envelope
    """

    head: tuple[RawFile, ...]
    base: Optional[tuple[RawFile, ...]] = None
    diff: PRDiff = field(default_factory=PRDiff)
    identity: Mapping[str, IdentityValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for key, value in self.identity.items():
            if not isinstance(key, str):
                raise ValueError(f"identity keys must be strings, got {key!r}")
            if value is not None and (isinstance(value, bool) or not isinstance(value, (str, int))):
                raise ValueError(f"identity value for {key!r} must be a string, int or None")


def run_analysis(
    request: AnalysisRequest,
    config: AnalyzerConfig,
    clock: Clock,
    *,
    analyzer_version: str,
    rulepacks: Iterable[Rulepack] = (),
    monorepo_predicate: Optional[MonorepoPredicate] = None,
) -> dict[str, Any]:
    """Run the pipeline and return a signed envelope. Never raises."""
    switch = SafetySwitch()
    envelope: Optional[dict[str, Any]] = None

    with switch.guard():
        envelope = _pipeline(
            request,
            config,
            Deadline(clock, config.limits.timeout_seconds),
            switch,
            analyzer_version=analyzer_version,
            rulepacks=tuple(rulepacks),
            monorepo_predicate=monorepo_predicate,
        )

    if switch.is_silent or envelope is None:
        return silent_envelope(
            config,
            request.identity,
            analyzer_version=analyzer_version,
            error_code=switch.error_code,
        )
    return envelope


def _pipeline(
    request: AnalysisRequest,
    config: AnalyzerConfig,
    deadline: Deadline,
    switch: SafetySwitch,
    *,
    analyzer_version: str,
    rulepacks: tuple[Rulepack, ...],
    monorepo_predicate: Optional[MonorepoPredicate],
) -> Optional[dict[str, Any]]:
    # ── Stage 1: Canonicalize ─────────────────────────────────────
    head = canonicalize(request.head)
    base = canonicalize(request.base) if request.base is not None else None
    diff = request.diff.canonicalized()
    deadline.check("canonicalize")
    logger.debug("Canonicalized %d head files", len(head))

    # ── Stage 2: Head graph and confidence gate ───────────────────
    head_build = build_graph(head, config.aliases, config.limits)
    deadline.check("graph")

    def is_monorepo(snapshot: RepoSnapshot) -> bool:
        if monorepo_predicate is not None:
            return monorepo_predicate(snapshot)
        return detect_monorepo(snapshot, config.monorepo)

    report = evaluate_confidence(
        head,
        head_build.alias_stats,
        config.confidence,
        segmentation=head_build.segmentation,
        is_monorepo=is_monorepo,
    )
    code = confidence_gate(report, head_build.alias_stats, config.confidence)
    if code is not None:
        switch.trip(code)
        return None
    deadline.check("confidence")

    # ── Stage 3: Cycles ───────────────────────────────────────────
    head_cycles = _cycles(head_build, config, deadline)
    base_cycles: tuple[Cycle, ...] = ()
    if base is not None:
        base_build = build_graph(base, config.aliases, config.limits)
        deadline.check("base graph")
        base_cycles = _cycles(base_build, config, deadline)
    logger.debug("Cycles: %d in head, %d in base", len(head_cycles), len(base_cycles))

    # ── Stage 4: Attribution ──────────────────────────────────────
    attributed = attribute(base_cycles, head_cycles, diff, head_build.graph)
    deadline.check("attribution")
    logger.debug("Attributed %d new cycle(s)", len(attributed))

    # ── Stage 5: Envelope ─────────────────────────────────────────
    graph_stats = head_build.graph.stats()
    extensions: Mapping[str, Any] = {}
    if attributed and rulepacks:
        extensions = run_rulepacks(rulepacks, RulepackContext(graph_stats, attributed))

    envelope = build_envelope(
        attributed,
        report,
        None,
        config,
        request.identity,
        analyzer_version=analyzer_version,
        graph_stats=graph_stats,
        repo_fingerprint=repo_fingerprint(head),
        extensions=extensions,
    )
    signed = sign_envelope(envelope)
    deadline.check("envelope")
    return signed


def _cycles(build: GraphBuildResult, config: AnalyzerConfig, deadline: Deadline) -> tuple[Cycle, ...]:
    cycles = detect_cycles(
        build.graph,
        max_length=config.limits.max_cycle_length,
        min_length=config.limits.min_cycle_length,
        checkpoint=lambda: deadline.check("cycles"),
    )
    deadline.check("cycles")
    return cycles
