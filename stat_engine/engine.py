"""Evaluation engine: the single entry point for derived stat calculation.

`calculate_derived_stats` walks the registry's calculation order once. Each
run owns its own state; only the immutable registry is shared between calls,
so concurrent callers never interfere. Nothing is cached between runs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from .categories import Layer, StatCategory
from .configs import ConfigOverrides, resolve_config
from .definitions import DerivedStatDefinition, DetailedResult, DetailedStat, StatSource
from .registry import DEFAULT_REGISTRY, StatRegistry

logger = logging.getLogger(__name__)


def calculate_derived_stats(
    base_stats: Mapping[str, float],
    config_overrides: ConfigOverrides | None = None,
    *,
    registry: StatRegistry = DEFAULT_REGISTRY,
) -> dict[str, float]:
    """Compute every derived stat from base stats and per-stat overrides.

    Args:
        base_stats: Already-summed base attribute totals. Missing attributes
            read as 0.
        config_overrides: Optional `{stat_id: {field: value}}` patches merged
            over each definition's default config for this run only.
        registry: Stat registry to evaluate.

    Returns:
        A new dict holding every input entry plus one value per derived stat.

    Raises:
        ConfigOverrideError: When an override patch is malformed.
    """

    overrides: ConfigOverrides = config_overrides or {}
    _log_unknown_overrides(overrides, registry)

    values: dict[str, Any] = dict(base_stats)
    view = MappingProxyType(values)
    for definition in registry.derived():
        config = resolve_config(definition, overrides)
        if definition.id in overrides:
            registry.check_config_reads(definition, config)
        compute = definition.compute
        assert compute is not None
        values[definition.id] = float(compute(view, base_stats, config))

    logger.debug(
        "Evaluated %d derived stats from %d base entries (%d overrides)",
        len(registry.derived()),
        len(base_stats),
        len(overrides),
    )
    return values


def calculate_derived_stats_detailed(
    base_stats: Mapping[str, float],
    config_overrides: ConfigOverrides | None = None,
    *,
    sources: Mapping[str, Sequence[StatSource]] | None = None,
    registry: StatRegistry = DEFAULT_REGISTRY,
) -> DetailedResult:
    """Compute derived stats and build display rows for every registry entry.

    Args:
        base_stats: Already-summed base attribute totals.
        config_overrides: Optional per-stat config patches.
        sources: Optional per-base-stat contribution breakdown, attached to
            layer-0 rows.
        registry: Stat registry to evaluate.

    Returns:
        DetailedResult with the flat value map, rows in calculation order, and
        the rows grouped by category and by layer.
    """

    values = calculate_derived_stats(base_stats, config_overrides, registry=registry)
    source_map: Mapping[str, Sequence[StatSource]] = sources or {}

    detailed = tuple(
        _detailed_row(definition, values, source_map) for definition in registry.calculation_order()
    )

    by_category: dict[StatCategory, list[DetailedStat]] = {}
    by_layer: dict[Layer, list[DetailedStat]] = {}
    for row in detailed:
        by_category.setdefault(row.category, []).append(row)
        by_layer.setdefault(row.layer, []).append(row)

    return DetailedResult(
        values=values,
        detailed=detailed,
        by_category={category: tuple(rows) for category, rows in by_category.items()},
        by_layer={layer: tuple(rows) for layer, rows in by_layer.items()},
    )


def get_stats_by_layer(
    *, registry: StatRegistry = DEFAULT_REGISTRY
) -> dict[Layer, tuple[DerivedStatDefinition, ...]]:
    """Return registry definitions partitioned by layer."""

    return registry.stats_by_layer()


def get_calculation_order(*, registry: StatRegistry = DEFAULT_REGISTRY) -> tuple[DerivedStatDefinition, ...]:
    """Return registry definitions in evaluation order."""

    return registry.calculation_order()


def get_dependency_chain(stat_id: str, *, registry: StatRegistry = DEFAULT_REGISTRY) -> list[str]:
    """Return the ids that must be evaluated to produce `stat_id`, ending with it."""

    return registry.dependency_chain(stat_id)


def _detailed_row(
    definition: DerivedStatDefinition,
    values: Mapping[str, float],
    sources: Mapping[str, Sequence[StatSource]],
) -> DetailedStat:
    value = float(values.get(definition.id) or 0.0)
    return DetailedStat(
        id=definition.id,
        name=definition.name,
        value=value,
        formatted_value=definition.format(value),
        description=definition.description,
        category=definition.category,
        layer=definition.layer,
        dependencies=definition.dependencies,
        sources=tuple(sources.get(definition.id, ())) if definition.is_base else (),
    )


def _log_unknown_overrides(overrides: ConfigOverrides, registry: StatRegistry) -> None:
    for stat_id in overrides:
        definition = registry.get(stat_id)
        if definition is None or definition.is_base:
            logger.debug("Ignoring config override for non-derived stat %r", stat_id)
