"""Tests for stat registry construction, validation, and ordering."""

from __future__ import annotations

import pytest

from stat_engine.base_stats import BASE_STAT_DEFINITIONS
from stat_engine.categories import Layer, StatCategory
from stat_engine.derived_stats import DERIVED_STAT_DEFINITIONS
from stat_engine.errors import RegistryError
from stat_engine.registry import DEFAULT_REGISTRY, StatRegistry

pytestmark = pytest.mark.unit


def _ids(definitions) -> list[str]:
    return [definition.id for definition in definitions]


def test_default_registry_contains_every_definition() -> None:
    """Default registry holds each base and derived definition exactly once."""

    assert len(DEFAULT_REGISTRY) == len(BASE_STAT_DEFINITIONS) + len(DERIVED_STAT_DEFINITIONS)
    assert "strength" in DEFAULT_REGISTRY
    assert "edpsOffhandBoss" in DEFAULT_REGISTRY
    assert "notAStat" not in DEFAULT_REGISTRY
    assert DEFAULT_REGISTRY.get("notAStat") is None


def test_duplicate_ids_are_rejected(strength_base) -> None:
    """Registering the same id twice raises RegistryError (a ValueError)."""

    with pytest.raises(RegistryError, match="Duplicate stat id"):
        StatRegistry((strength_base, strength_base))
    with pytest.raises(ValueError):
        StatRegistry((strength_base, strength_base))


def test_dependency_on_later_sibling_is_rejected(make_derived) -> None:
    """A same-layer dependency must be declared earlier."""

    reader = make_derived("reader", Layer.PRIMARY_DERIVED, dependencies=("stacks",))
    stacks = make_derived("stacks", Layer.PRIMARY_DERIVED)

    with pytest.raises(RegistryError, match="not evaluated earlier"):
        StatRegistry((reader, stacks))

    registry = StatRegistry((stacks, reader))
    assert _ids(registry.calculation_order()) == ["stacks", "reader"]


def test_dependency_on_higher_layer_is_rejected(make_derived) -> None:
    """A formula cannot read a stat from a later layer, wherever it is declared."""

    late = make_derived("late", Layer.SECONDARY_DERIVED)
    early = make_derived("early", Layer.PRIMARY_DERIVED, dependencies=("late",))

    with pytest.raises(RegistryError):
        StatRegistry((late, early))


def test_self_dependency_is_rejected(make_derived) -> None:
    """A stat cannot read its own value."""

    with pytest.raises(RegistryError, match="depends on itself"):
        StatRegistry((make_derived("loop", Layer.TOTALS, dependencies=("loop",)),))


def test_dependencies_on_base_and_unknown_ids_are_allowed(strength_base, make_derived) -> None:
    """Base stats and ids outside the registry are always readable."""

    registry = StatRegistry(
        (
            strength_base,
            make_derived("fromBase", Layer.TOTALS, dependencies=("strength",)),
            make_derived("fromUnknown", Layer.TOTALS, dependencies=("externalStat",)),
        )
    )

    assert len(registry) == 3


def test_config_reads_must_be_declared(make_derived) -> None:
    """A default config that reads a stat must list it as a dependency."""

    with pytest.raises(RegistryError, match="undeclared"):
        StatRegistry((make_derived("scaler", Layer.PRIMARY_DERIVED, source_stat="totalStrength"),))


def test_base_entries_cannot_compute(strength_base, make_derived) -> None:
    """Layer-0 entries are pass-through only."""

    computed_base = make_derived("oops", Layer.BASE)
    with pytest.raises(RegistryError, match="Base stat"):
        StatRegistry((strength_base, computed_base))


def test_invalid_layer_and_category_are_rejected(make_derived) -> None:
    """Layer and category must use the declared enums."""

    from dataclasses import replace

    good = make_derived("good", Layer.TOTALS)
    with pytest.raises(RegistryError, match="invalid layer"):
        StatRegistry((replace(good, layer=7),))
    with pytest.raises(RegistryError, match="invalid category"):
        StatRegistry((replace(good, category="monogram-buff"),))


def test_derived_entries_require_compute(make_derived) -> None:
    """Derived entries must provide a compute function."""

    from dataclasses import replace

    with pytest.raises(RegistryError, match="no compute"):
        StatRegistry((replace(make_derived("x", Layer.TOTALS), compute=None),))


def test_calculation_order_is_layer_monotonic() -> None:
    """Every definition precedes all definitions in higher layers."""

    order = DEFAULT_REGISTRY.calculation_order()
    layers = [int(definition.layer) for definition in order]

    assert layers == sorted(layers)
    ids = _ids(order)
    assert ids.index("totalStrength") < ids.index("highestAttribute")
    assert ids.index("phasingStacks") < ids.index("bloodlustStacks")


def test_calculation_order_is_stable() -> None:
    """Repeated calls return the same order."""

    assert DEFAULT_REGISTRY.calculation_order() is DEFAULT_REGISTRY.calculation_order()
    assert _ids(StatRegistry(DEFAULT_REGISTRY).calculation_order()) == _ids(DEFAULT_REGISTRY.calculation_order())


def test_stats_by_layer_partitions_order() -> None:
    """Layer buckets concatenate to the calculation order."""

    by_layer = DEFAULT_REGISTRY.stats_by_layer()

    assert list(by_layer) == [
        Layer.BASE,
        Layer.TOTALS,
        Layer.PRIMARY_DERIVED,
        Layer.SECONDARY_DERIVED,
        Layer.TERTIARY_DERIVED,
    ]
    flattened = [definition for bucket in by_layer.values() for definition in bucket]
    assert flattened == list(DEFAULT_REGISTRY.calculation_order())
    assert all(definition.layer == layer for layer, bucket in by_layer.items() for definition in bucket)


def test_declared_dependencies_are_evaluated_first() -> None:
    """Every derived dependency precedes its reader in the default registry."""

    position = {definition.id: index for index, definition in enumerate(DEFAULT_REGISTRY.calculation_order())}
    for definition in DEFAULT_REGISTRY.derived():
        for dependency in definition.dependencies:
            target = DEFAULT_REGISTRY.get(dependency)
            if target is None or target.is_base:
                continue
            assert position[dependency] < position[definition.id], (definition.id, dependency)


def test_base_and_category_lookups() -> None:
    """Lookup helpers filter by layer and category."""

    base_ids = DEFAULT_REGISTRY.base_stat_ids()
    assert "strength" in base_ids
    assert "extraInventorySlots" in base_ids
    assert "swordCritDamage" in base_ids
    assert "totalStrength" not in base_ids
    assert all(not definition.is_base for definition in DEFAULT_REGISTRY.derived())

    totals = _ids(DEFAULT_REGISTRY.by_category(StatCategory.totals))
    assert totals == [
        "totalStrength",
        "totalDexterity",
        "totalWisdom",
        "totalVitality",
        "totalEndurance",
        "totalAgility",
        "totalLuck",
        "totalStamina",
        "totalArmor",
        "totalHealth",
        "totalDamage",
    ]
