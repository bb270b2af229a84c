"""
Hierarchical scope profiler.

Measures nested, named code regions across repeated invocations and reports
running statistics per node of the call tree.
"""
from .errors import (
    ConfigError,
    CrossThreadError,
    InvalidScopeName,
    ProfilerError,
    ScopeStackError,
    SinkError,
)
from .stats import StatsAccumulator
from .tree import ScopeNode
from .state import ProfilerState, ScopeGuard, enter, get_state, profile, reset
from .reporter import NodeMetrics, report
from .render import format_tree, write

__all__ = [
    # Core
    'StatsAccumulator',
    'ScopeNode',
    'ProfilerState',
    'ScopeGuard',
    'enter',
    'profile',
    'get_state',
    'reset',

    # Reporting
    'NodeMetrics',
    'report',
    'format_tree',
    'write',

    # Errors
    'ProfilerError',
    'InvalidScopeName',
    'ScopeStackError',
    'CrossThreadError',
    'SinkError',
    'ConfigError',
]
