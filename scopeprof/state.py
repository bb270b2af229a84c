"""
Per-thread profiler state, scope guards and the thread-indexed registry.

Usage:
    import scopeprof

    for frame in range(num_frames):
        with scopeprof.profile("frame"):
            with scopeprof.profile("physics"):
                step_physics()
            render()

Each thread gets its own ``ProfilerState`` the first time it enters a scope;
trees of different threads are never merged.
"""
from __future__ import annotations

import threading
import time
from typing import Callable, List, Optional

from .errors import CrossThreadError, InvalidScopeName, ScopeStackError
from .tree import PATH_SEP, ROOT_NAME, ScopeNode

Clock = Callable[[], float]


def validate_name(name) -> None:
    """Raise ``InvalidScopeName`` unless *name* is usable as a scope name."""
    if not isinstance(name, str):
        raise InvalidScopeName(f"Scope name must be a string, got {type(name).__name__}")
    if not name.strip():
        raise InvalidScopeName("Scope name must not be empty")
    if PATH_SEP in name:
        raise InvalidScopeName(f"Scope name must not contain '{PATH_SEP}': {name!r}")
    if not name.isprintable():
        raise InvalidScopeName(f"Scope name contains control characters: {name!r}")


class ScopeGuard:
    """
    Handle for one open scope.

    Leaving the ``with`` block (normally, by ``return`` or by an exception)
    records the elapsed time. Outside a ``with`` block call ``exit()``
    explicitly, ideally from a ``finally`` clause.
    """

    __slots__ = ("node", "start_time", "_state", "_slot", "_generation", "_closed")

    def __init__(self, state: "ProfilerState", node: ScopeNode, slot: int, generation: int):
        self.node = node
        self.start_time = 0.0
        self._state = state
        self._slot = slot
        self._generation = generation
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def exit(self) -> float:
        """Close the scope and return the recorded duration in seconds."""
        return self._state._leave(self)

    def __enter__(self) -> "ScopeGuard":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.exit()
        return False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"ScopeGuard({self.node.name!r}, {state})"


class ProfilerState:
    """
    Call tree and active-scope stack of one thread.

    Args:
        clock (callable): Monotonic clock returning seconds. Defaults to
            ``time.perf_counter``.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock: Clock = clock or time.perf_counter
        self.owner = threading.get_ident()
        self.generation = 0
        self.root = ScopeNode(ROOT_NAME)
        self.stack: List[ScopeNode] = []
        self.clock_faults = 0
        self.started_at = self.clock()

    # ---- scope stack ----------------------------------------------------
    def enter(self, name: str) -> ScopeGuard:
        """
        Open scope *name* below the innermost open scope.

        Re-entering the innermost scope's own name (recursion) reuses that
        node instead of growing a child with the same name.
        """
        validate_name(name)
        self.check_owner()

        parent = self.stack[-1] if self.stack else self.root
        if parent is not self.root and parent.name == name:
            node = parent
        else:
            node = parent.child(name)

        node.active_depth += 1
        self.stack.append(node)
        guard = ScopeGuard(self, node, len(self.stack) - 1, self.generation)
        guard.start_time = self.clock()
        return guard

    def _leave(self, guard: ScopeGuard) -> float:
        now = self.clock()
        if guard._closed:
            raise ScopeStackError(f"Scope '{guard.node.name}' was already exited")
        self.check_owner()
        if guard._generation != self.generation:
            # opened before reset(); its node is no longer part of the tree
            guard._closed = True
            return 0.0
        if len(self.stack) != guard._slot + 1 or self.stack[-1] is not guard.node:
            innermost = self.stack[-1].name if self.stack else None
            raise ScopeStackError(
                f"Scope '{guard.node.name}' exited out of order (innermost open scope: {innermost!r})")

        elapsed = now - guard.start_time
        if elapsed < 0.0:
            self.clock_faults += 1
            elapsed = 0.0

        node = self.stack.pop()
        node.stats.update(elapsed)
        node.active_depth -= 1
        guard._closed = True
        return elapsed

    # ---- lifecycle ------------------------------------------------------
    def reset(self) -> None:
        """Drop the whole tree. Guards that are still open become no-ops."""
        self.check_owner()
        for node in self.stack:
            node.active_depth = 0
        self.generation += 1
        self.root = ScopeNode(ROOT_NAME)
        self.stack = []
        self.clock_faults = 0
        self.started_at = self.clock()

    def check_owner(self) -> None:
        if threading.get_ident() != self.owner:
            raise CrossThreadError(
                "ProfilerState is owned by another thread; hand off a snapshot instead")

    # ---- inspection -----------------------------------------------------
    @property
    def depth(self) -> int:
        """Number of currently open scopes."""
        return len(self.stack)

    def current_path(self) -> str:
        return PATH_SEP.join(node.name for node in self.stack)

    def find(self, path: str) -> Optional[ScopeNode]:
        """Look a node up by its '/'-joined path from the root."""
        return self.root.find(path)

    def session_time(self) -> float:
        """Seconds since this state was created or last reset."""
        return max(self.clock() - self.started_at, 0.0)


# ────────────────────────────────────────────────────────────────
# Thread-indexed registry
# ────────────────────────────────────────────────────────────────
_registry = threading.local()


def get_state() -> ProfilerState:
    """Return the calling thread's state, creating it on first use."""
    state = getattr(_registry, "state", None)
    if state is None:
        state = ProfilerState()
        _registry.state = state
    return state


def enter(name: str) -> ScopeGuard:
    """Open scope *name* on the calling thread's profiler."""
    return get_state().enter(name)


profile = enter


def reset(state: Optional[ProfilerState] = None) -> None:
    """Discard the profile of *state* (default: the calling thread's)."""
    (state if state is not None else get_state()).reset()
