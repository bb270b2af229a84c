from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional

from .errors import ConfigError
from .state import ProfilerState, get_state
from .tree import ScopeNode

UNITS = {"s": 1.0, "ms": 1e3, "us": 1e6, "ns": 1e9}
ROOT_BASES = ("roots", "session")


@dataclass
class NodeMetrics:
    """Derived per-scope figures handed to renderers and sinks."""
    depth: int
    name: str
    path: str
    time_pct: float
    self_pct: float
    frequency: float  # calls per second of parent time
    mean: float
    last: float
    min: float
    max: float
    std: float
    count: int
    unit: str = "ms"

    def to_dict(self) -> dict:
        return asdict(self)


def unit_scale(unit: str) -> float:
    """Multiplier that converts seconds into *unit*."""
    try:
        return UNITS[unit]
    except KeyError:
        raise ConfigError(f"Unknown display unit {unit!r}, expected one of {sorted(UNITS)}") from None


def self_percent(node: ScopeNode) -> float:
    if not node.children:
        return 100.0
    total = node.stats.total
    child_total = node.children_total()
    if total <= 0.0:
        return 100.0 if child_total <= 0.0 else 0.0
    pct = (total - child_total) / total * 100.0
    return min(max(pct, 0.0), 100.0)


def _ratio(value: float, base: float) -> float:
    return value / base if base > 0.0 else 0.0


def report(
    state: Optional[ProfilerState] = None,
    *,
    unit: str = "ms",
    root_base: str = "roots",
) -> List[NodeMetrics]:
    """
    Walk the call tree depth-first and derive per-node metrics.

    Args:
        state (ProfilerState): Tree to report. Defaults to the calling thread's.
        unit (str): Display unit for mean/last/min/max/std ('s', 'ms', 'us', 'ns').
        root_base (str): Reference duration of top-level scopes.
            'roots' - sum of all top-level totals (default).
            'session' - wall time since the state was created or reset.

    Returns:
        list[NodeMetrics] in preorder, children in first-entered order.
        Scopes that never completed are left out.
    """
    if state is None:
        state = get_state()
    scale = unit_scale(unit)
    if root_base not in ROOT_BASES:
        raise ConfigError(f"Unknown root base {root_base!r}, expected one of {ROOT_BASES}")
    state.check_owner()

    if root_base == "roots":
        base = state.root.children_total()
    else:
        base = state.session_time()

    out: List[NodeMetrics] = []
    for depth, path, parent, node in state.root.walk():
        stats = node.stats
        if stats.count == 0:
            continue
        parent_total = base if parent is state.root else parent.stats.total
        out.append(NodeMetrics(
            depth=depth,
            name=node.name,
            path=path,
            time_pct=_ratio(stats.total, parent_total) * 100.0,
            self_pct=self_percent(node),
            frequency=_ratio(stats.count, parent_total),
            mean=stats.mean * scale,
            last=stats.last * scale,
            min=stats.min * scale,
            max=stats.max * scale,
            std=stats.std * scale,
            count=stats.count,
            unit=unit,
        ))
    return out
