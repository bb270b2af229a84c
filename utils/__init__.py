"""
Utility functions for the project.

This module provides configuration loading, command-line argument
processing and report logging around the scopeprof core.
"""
# Configuration utilities
from .arg_tools import load_config, merge_cli
from .config import load_profiler_env, validate_settings

# Logging utilities
from .logger import ProfileLogger, print_table, to_dataframe

__all__ = [
    # Configuration utilities
    'load_config',
    'merge_cli',
    'load_profiler_env',
    'validate_settings',

    # Logging utilities
    'ProfileLogger',
    'print_table',
    'to_dataframe',
]
