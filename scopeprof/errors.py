"""
Exception types raised by the profiler.

Everything derives from ``ProfilerError`` so embedding code can catch the
whole family in one place; each type also subclasses the matching builtin.
"""


class ProfilerError(Exception):
    """Base class for all profiler errors."""


class InvalidScopeName(ProfilerError, ValueError):
    """Scope name is empty, not a string or otherwise malformed."""


class ScopeStackError(ProfilerError, RuntimeError):
    """A guard was closed twice or out of LIFO order."""


class CrossThreadError(ProfilerError, RuntimeError):
    """A per-thread state was used from a thread that does not own it."""


class SinkError(ProfilerError, IOError):
    """An output sink failed to write derived metrics."""


class ConfigError(ProfilerError, ValueError):
    """Invalid profiler setting (unit, root base, ...)."""
