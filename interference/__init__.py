"""
Register Interference Model

Variable lifetimes, the conflict graph built from them, and register table
export for finished colorings.
"""

__version__ = "0.1.0"

from .lifetime import (
    Lifetime,
    LifetimeTable,
    LifetimeError,
    UseBeforeDefError,
    LifetimeOutOfBoundsError,
)
from .conflict_graph import ConflictGraph, GraphNode
from .register_table import RegisterRow, build_register_table, format_register_table

__all__ = [
    'Lifetime',
    'LifetimeTable',
    'LifetimeError',
    'UseBeforeDefError',
    'LifetimeOutOfBoundsError',
    'ConflictGraph',
    'GraphNode',
    'RegisterRow',
    'build_register_table',
    'format_register_table',
]
