"""Derived stat calculation engine.

This package turns a flat map of already-summed base attributes plus per-stat
configuration overrides into the full set of derived combat statistics. It is
pure: no persistence, no network access, and no state shared between calls
other than the immutable stat registry.
"""

from .engine import calculate_derived_stats
from .engine import calculate_derived_stats_detailed
from .engine import get_calculation_order
from .engine import get_dependency_chain
from .engine import get_stats_by_layer

__all__ = [
    "calculate_derived_stats",
    "calculate_derived_stats_detailed",
    "get_calculation_order",
    "get_dependency_chain",
    "get_stats_by_layer",
]
