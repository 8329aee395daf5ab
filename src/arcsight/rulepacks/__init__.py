"""Rulepack interface.

A rulepack adds one entry to ``extensions``. It only sees read-only data of
the finished analysis and cannot influence ``core``. A rulepack that raises
contributes ``null``. No rulepacks ship by default.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol

from ..attribution.models import AttributedCycle
from ..envelope.canonical import normalize
from ..graph.models import GraphStats
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RulepackContext:
    """What a rulepack may read."""

    graph_stats: GraphStats
    cycles: tuple[AttributedCycle, ...]


class Rulepack(Protocol):
    name: str

    def run(self, context: RulepackContext) -> Optional[Any]: ...


def run_rulepacks(rulepacks: Iterable[Rulepack], context: RulepackContext) -> dict[str, Any]:
    """Run rulepacks in name order; returns ``{name: output}``.

    Output must be canonically serializable; anything else counts as a
    failure and yields None. Rulepacks sharing a name are not run and
    their entry is None.
    """
    packs = sorted(rulepacks, key=lambda p: p.name)
    names = Counter(p.name for p in packs)
    results: dict[str, Any] = {}
    for pack in packs:
        if names[pack.name] > 1:
            logger.debug("Rulepack name %s is not unique", pack.name)
            results[pack.name] = None
            continue
        try:
            results[pack.name] = normalize(pack.run(context))
        except Exception:
            logger.debug("Rulepack %s failed", pack.name, exc_info=True)
            results[pack.name] = None
    return results


__all__ = ["Rulepack", "RulepackContext", "run_rulepacks"]
