from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from .stats import StatsAccumulator

ROOT_NAME = "<root>"
PATH_SEP = "/"


class ScopeNode:
    """
    One node of the call tree: every measurement of a scope name at one
    ancestry path ends up here.

    Children are kept in a plain dict, so their order is the order in which
    they were first entered and never changes afterwards.
    """

    __slots__ = ("name", "children", "stats", "active_depth")

    def __init__(self, name: str):
        self.name = name
        self.children: Dict[str, ScopeNode] = {}
        self.stats = StatsAccumulator()
        self.active_depth = 0  # open invocations, >1 under recursion

    @property
    def is_active(self) -> bool:
        return self.active_depth > 0

    def child(self, name: str) -> "ScopeNode":
        """Return the child called *name*, appending a new one if missing."""
        node = self.children.get(name)
        if node is None:
            node = ScopeNode(name)
            self.children[name] = node
        return node

    def children_total(self) -> float:
        return sum(c.stats.total for c in self.children.values())

    def walk(self) -> Iterator[Tuple[int, str, "ScopeNode", "ScopeNode"]]:
        """
        Yield ``(depth, path, parent, node)`` for all descendants in preorder.

        Uses an explicit stack, so arbitrarily deep trees do not hit the
        interpreter's recursion limit.
        """
        pending = [(0, "", self, child) for child in reversed(self.children.values())]
        while pending:
            depth, prefix, parent, node = pending.pop()
            path = prefix + node.name
            yield depth, path, parent, node
            pending.extend((depth + 1, path + PATH_SEP, node, child)
                           for child in reversed(node.children.values()))

    def find(self, path: str) -> Optional["ScopeNode"]:
        node = self
        for part in path.split(PATH_SEP):
            node = node.children.get(part)
            if node is None:
                return None
        return node

    def __repr__(self) -> str:
        return (f"ScopeNode({self.name!r}, count={self.stats.count}, "
                f"children={list(self.children)}, active_depth={self.active_depth})")
