"""Plain-text rendering of ``NodeMetrics`` as an indented tree."""
from __future__ import annotations

from typing import Iterable, List, Optional, TextIO

from .errors import SinkError
from .reporter import NodeMetrics, report

INDENT = "  "


def format_line(m: NodeMetrics) -> str:
    # e.g. "render: 96.84% (self 100.00%), 10.07ms/call @ 96.17Hz [min 9.98, max 10.31, std 0.05, n=100]"
    return (f"{INDENT * m.depth}{m.name}: {m.time_pct:3.2f}% (self {m.self_pct:3.2f}%), "
            f"{m.mean:>4.2f}{m.unit}/call @ {m.frequency:.2f}Hz "
            f"[min {m.min:.2f}, max {m.max:.2f}, std {m.std:.2f}, n={m.count}]")


def format_tree(metrics: Iterable[NodeMetrics]) -> str:
    lines = [format_line(m) for m in metrics]
    return "\n".join(lines) + ("\n" if lines else "")


def write(out: TextIO, metrics: Optional[List[NodeMetrics]] = None, **report_kwargs) -> None:
    """
    Render *metrics* (default: a fresh report of the calling thread) to *out*.

    Raises:
        SinkError: writing to or flushing *out* failed.
    """
    if metrics is None:
        metrics = report(**report_kwargs)
    text = format_tree(metrics)
    try:
        out.write(text)
        out.flush()
    except Exception as exc:
        raise SinkError(f"Failed to write profile: {exc}") from exc
