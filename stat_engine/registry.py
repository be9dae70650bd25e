"""Stat registry: the validated, immutable table of stat definitions.

The registry owns evaluation order. Definitions are bucketed by layer and
concatenated in ascending layer order; within a layer, declaration order is
kept. Because that order is fixed, ordering mistakes are authoring defects
and are rejected when the registry is built:

- every id is unique,
- layer-0 entries have no compute step and no dependencies,
- every declared dependency that names a registered derived stat is
  evaluated strictly before the stat that reads it,
- every stat a default config reads is declared as a dependency.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Final

from .base_stats import BASE_STAT_DEFINITIONS
from .categories import Layer, StatCategory
from .configs import FormulaConfig, stat_reads
from .definitions import DerivedStatDefinition
from .derived_stats import DERIVED_STAT_DEFINITIONS
from .errors import ConfigOverrideError, RegistryError


class StatRegistry:
    """Lookup, ordering, and validation helpers for stat definitions."""

    def __init__(self, definitions: Iterable[DerivedStatDefinition]) -> None:
        """Initialize a registry from a collection of definitions.

        Args:
            definitions: Base and derived definitions in declaration order.

        Raises:
            RegistryError: When any construction invariant is violated.
        """

        self._definitions: dict[str, DerivedStatDefinition] = {}
        for definition in definitions:
            _check_definition(definition)
            if definition.id in self._definitions:
                raise RegistryError(f"Duplicate stat id: {definition.id!r}")
            self._definitions[definition.id] = definition

        buckets: dict[Layer, list[DerivedStatDefinition]] = {}
        for definition in self._definitions.values():
            buckets.setdefault(definition.layer, []).append(definition)
        self._by_layer: dict[Layer, tuple[DerivedStatDefinition, ...]] = {
            layer: tuple(buckets[layer]) for layer in sorted(buckets)
        }
        self._order: tuple[DerivedStatDefinition, ...] = tuple(
            definition for bucket in self._by_layer.values() for definition in bucket
        )
        self._position: dict[str, int] = {definition.id: index for index, definition in enumerate(self._order)}

        for definition in self._order:
            self._check_dependencies(definition)

    def __contains__(self, stat_id: object) -> bool:
        return stat_id in self._definitions

    def __iter__(self) -> Iterator[DerivedStatDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def get(self, stat_id: str) -> DerivedStatDefinition | None:
        """Return a definition by id, or None when missing."""

        return self._definitions.get(stat_id)

    def base(self) -> tuple[DerivedStatDefinition, ...]:
        """Return layer-0 definitions in declaration order."""

        return self._by_layer.get(Layer.BASE, ())

    def derived(self) -> tuple[DerivedStatDefinition, ...]:
        """Return all computed definitions in calculation order."""

        return tuple(definition for definition in self._order if not definition.is_base)

    def base_stat_ids(self) -> tuple[str, ...]:
        """Return the ids of all layer-0 definitions."""

        return tuple(definition.id for definition in self.base())

    def by_category(self, category: StatCategory) -> tuple[DerivedStatDefinition, ...]:
        """Return definitions in a display category, in calculation order."""

        return tuple(definition for definition in self._order if definition.category == category)

    def stats_by_layer(self) -> dict[Layer, tuple[DerivedStatDefinition, ...]]:
        """Return definitions partitioned by layer, in ascending layer order.

        Only layers with at least one definition appear. Declaration order is
        preserved within each bucket.
        """

        return dict(self._by_layer)

    def calculation_order(self) -> tuple[DerivedStatDefinition, ...]:
        """Return every definition in evaluation order.

        The sequence is computed once at construction; every call returns the
        same tuple.
        """

        return self._order

    def evaluates_before(self, first: str, second: str) -> bool:
        """Return True when `first` is available by the time `second` is computed.

        Base stats and ids the registry does not know are always available.

        Args:
            first: Stat id being read.
            second: Registered stat id doing the reading.

        Returns:
            Whether reading `first` from `second` respects evaluation order.
        """

        target = self._definitions.get(first)
        if target is None or target.is_base:
            return True
        return self._position[first] < self._position[second]

    def dependency_chain(self, stat_id: str) -> list[str]:
        """Return the ids needed to produce `stat_id`, in evaluation order.

        Base stats and unregistered ids come first, then derived stats by
        calculation order; the chain ends with `stat_id`. Layer-0 and
        unregistered ids return `[stat_id]`.

        Args:
            stat_id: Stat to explain.

        Returns:
            Ordered list of stat ids; no values are computed.
        """

        visited: set[str] = set()
        chain: list[str] = []

        def visit(current: str) -> None:
            if current in visited:
                return
            visited.add(current)
            definition = self._definitions.get(current)
            if definition is not None:
                for dependency in definition.dependencies:
                    visit(dependency)
            chain.append(current)

        visit(stat_id)
        return sorted(chain, key=self._chain_key)

    def check_config_reads(self, definition: DerivedStatDefinition, config: FormulaConfig) -> None:
        """Verify that a resolved config only reads stats evaluated earlier.

        Args:
            definition: Definition the config belongs to.
            config: Resolved (possibly overridden) config.

        Raises:
            ConfigOverrideError: When a `*_stat` field names a stat computed
                at or after `definition`.
        """

        for field_name, stat_id in stat_reads(config).items():
            if stat_id == definition.id or not self.evaluates_before(stat_id, definition.id):
                raise ConfigOverrideError(
                    definition.id,
                    f"{field_name}={stat_id!r} is not evaluated before {definition.id!r}",
                )

    def _chain_key(self, stat_id: str) -> int:
        definition = self._definitions.get(stat_id)
        if definition is None or definition.is_base:
            return -1
        return self._position[stat_id]

    def _check_dependencies(self, definition: DerivedStatDefinition) -> None:
        if definition.is_base:
            return

        for dependency in definition.dependencies:
            if dependency == definition.id:
                raise RegistryError(f"Stat {definition.id!r} depends on itself")
            if not self.evaluates_before(dependency, definition.id):
                target = self._definitions[dependency]
                raise RegistryError(
                    f"Stat {definition.id!r} (layer {int(definition.layer)}) depends on "
                    f"{dependency!r} (layer {int(target.layer)}), which is not evaluated earlier"
                )

        undeclared = set(stat_reads(definition.default_config).values()) - set(definition.dependencies)
        if undeclared:
            raise RegistryError(
                f"Stat {definition.id!r} default config reads undeclared stats: {sorted(undeclared)!r}"
            )


def _check_definition(definition: DerivedStatDefinition) -> None:
    """Validate a single definition in isolation."""

    if not isinstance(definition.layer, Layer):
        raise RegistryError(f"Stat {definition.id!r} has invalid layer={definition.layer!r}; expected Layer.")
    if not isinstance(definition.category, StatCategory):
        raise RegistryError(
            f"Stat {definition.id!r} has invalid category={definition.category!r}; expected StatCategory."
        )
    if definition.is_base:
        if definition.compute is not None or definition.dependencies:
            raise RegistryError(f"Base stat {definition.id!r} must not declare a compute step or dependencies")
    elif definition.compute is None:
        raise RegistryError(f"Derived stat {definition.id!r} has no compute function")


DEFAULT_REGISTRY: Final[StatRegistry] = StatRegistry((*BASE_STAT_DEFINITIONS, *DERIVED_STAT_DEFINITIONS))
