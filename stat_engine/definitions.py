"""DTOs for stat definitions and evaluation output.

These types are intentionally small and immutable so registries and results
can be shared freely between callers.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .categories import Layer, StatCategory
from .configs import FormulaConfig
from .formatting import Formatter

ComputeFn = Callable[[Mapping[str, float], Mapping[str, float], Any], float]


@dataclass(frozen=True, slots=True)
class DerivedStatDefinition:
    """Describe one registry entry (a base attribute or a derived formula).

    Args:
        id: Globally unique stat key.
        name: Display name.
        category: Display grouping; never used for ordering.
        layer: Evaluation stage. Layer 0 entries are base attributes with no
            compute step.
        description: Tooltip text.
        format: Display formatter for the stat's value.
        is_percent: Whether the value is a percentage.
        compute: Pure function `(values, base_stats, config) -> float`.
        default_config: Formula config used when no override is supplied.
        dependencies: Stat ids the formula reads.
    """

    id: str
    name: str
    category: StatCategory
    layer: Layer
    description: str
    format: Formatter
    is_percent: bool = False
    compute: ComputeFn | None = None
    default_config: FormulaConfig = field(default_factory=FormulaConfig)
    dependencies: tuple[str, ...] = ()

    @property
    def is_base(self) -> bool:
        """Return True for layer-0 (pass-through) entries."""

        return self.layer == Layer.BASE


@dataclass(frozen=True, slots=True)
class StatSource:
    """One contribution to a base attribute, supplied by upstream collaborators.

    Args:
        item_name: Name of the item (or other origin) providing the value.
        slot: Equipment slot the item occupies.
        value: Contributed amount.
        is_percent: Whether `value` is a percentage.
    """

    item_name: str
    slot: str
    value: float
    is_percent: bool = False


@dataclass(frozen=True, slots=True)
class DetailedStat:
    """A display row for one registry entry after evaluation."""

    id: str
    name: str
    value: float
    formatted_value: str
    description: str
    category: StatCategory
    layer: Layer
    dependencies: tuple[str, ...] = ()
    sources: tuple[StatSource, ...] = ()


@dataclass(frozen=True, slots=True)
class DetailedResult:
    """Full evaluation output.

    Args:
        values: Flat map of every base and derived stat value.
        detailed: One row per registry entry, in calculation order.
        by_category: Rows grouped by category.
        by_layer: Rows grouped by layer.
    """

    values: dict[str, float]
    detailed: tuple[DetailedStat, ...]
    by_category: dict[StatCategory, tuple[DetailedStat, ...]]
    by_layer: dict[Layer, tuple[DetailedStat, ...]]
