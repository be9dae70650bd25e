"""Tests for the modifier effect catalog and override builder."""

from __future__ import annotations

from pathlib import Path

import pytest

from stat_engine import calculate_derived_stats
from stat_engine.errors import ModifierCatalogError
from stat_engine.modifiers import (
    ModifierCatalog,
    ModifierDefinition,
    ModifierEffect,
    build_config_overrides,
    default_modifier_catalog,
    load_modifier_catalog,
    parse_modifier_catalog,
)


def _catalog(**modifiers: dict) -> ModifierCatalog:
    return parse_modifier_catalog({"modifiers": modifiers})


@pytest.mark.integration
def test_packaged_catalog_loads_and_validates() -> None:
    """The packaged catalog parses against the default registry."""

    catalog = default_modifier_catalog()

    assert "DarkEssence" in catalog
    assert "Colossus.Base" in catalog
    assert len(catalog) == len(catalog.modifier_ids())
    assert list(catalog.modifier_ids()) == sorted(catalog.modifier_ids())
    assert default_modifier_catalog() is catalog


@pytest.mark.integration
def test_effect_summary_and_reverse_lookup() -> None:
    """Tooltips and stat-to-modifier lookups read from the catalog."""

    catalog = default_modifier_catalog()

    assert catalog.effect_summary("Bloodlust.MoreLife.Highest") == (
        "Bloodlust Life: 0.1% life per stack per 50 highest attribute"
    )
    assert catalog.effect_summary("DarkEssence") == "Dark Essence"
    assert catalog.effect_summary("NotAModifier") is None
    assert catalog.modifiers_for_stat("critChanceFromEssence") == (
        "BonusCritDamage%ForEssence",
        "GainCritChanceForHighest",
    )
    assert catalog.modifiers_for_stat("strength") == ()


@pytest.mark.integration
def test_essence_modifiers_drive_crit_chain() -> None:
    """Equipped modifier ids become overrides that enable the essence chain."""

    overrides = build_config_overrides(["DarkEssence", "GainCritChanceForHighest"])
    values = calculate_derived_stats({"strength": 1000}, overrides)

    assert overrides["darkEssenceStacks"] == {
        "enabled": True,
        "max_stacks": 500,
        "current_stacks": 500,
        "instance_count": 1,
    }
    assert values["essence"] == 1250
    assert values["critChanceFromEssence"] == 62


@pytest.mark.integration
def test_repeated_modifiers_collapse_into_instance_count() -> None:
    """Repeated ids count instances instead of producing duplicate patches."""

    three = build_config_overrides(["ChanceToSpawnAnotherElite"] * 3)
    five = build_config_overrides(["ChanceToSpawnAnotherElite"] * 5)

    assert three == {"eliteSpawnChance": {"enabled": True, "instance_count": 3}}
    assert calculate_derived_stats({}, three)["eliteSpawnChance"] == 30
    assert calculate_derived_stats({}, five)["eliteSpawnChance"] == 40


@pytest.mark.integration
def test_modifier_can_retarget_a_source_stat() -> None:
    """Bloodlust damage re-points the monogram value at bloodlust stacks."""

    overrides = build_config_overrides(["Bloodlust.Base", "Bloodlust.Damage%PerStack"])
    values = calculate_derived_stats({"strength": 5000}, overrides)

    assert values["monogramValueFromStrength"] == 200


@pytest.mark.integration
def test_multi_effect_and_unknown_modifiers() -> None:
    """A modifier may enable several stats; unknown ids are skipped."""

    overrides = build_config_overrides(["Juggernaut", "NotAModifier", "Colossus.Base"])
    values = calculate_derived_stats({}, overrides)

    assert set(overrides) == {"juggernautMoveSpeed", "juggernautCritChance", "juggernautCritDamage"}
    assert values["juggernautMoveSpeed"] == 40
    assert values["juggernautCritChance"] == 25
    assert values["juggernautCritDamage"] == 2


@pytest.mark.integration
def test_load_catalog_from_file(tmp_path: Path) -> None:
    """A catalog file on disk is loaded and validated."""

    path = tmp_path / "catalog.yml"
    path.write_text(
        "modifiers:\n"
        "  Shroud:\n"
        "    display_name: Shroud\n"
        "    effects:\n"
        "      - stat: shroudStacks\n"
        "        config: {enabled: true, currentStacks: 10}\n",
        encoding="utf-8",
    )

    catalog = load_modifier_catalog(path)
    overrides = build_config_overrides(["Shroud"], catalog=catalog)

    assert catalog.get("Shroud").effects == (
        ModifierEffect(stat_id="shroudStacks", config={"enabled": True, "current_stacks": 10}),
    )
    assert calculate_derived_stats({}, overrides)["shroudDamageBonus"] == 50


@pytest.mark.integration
def test_load_catalog_rejects_non_mapping_file(tmp_path: Path) -> None:
    """A catalog file must hold a mapping."""

    path = tmp_path / "catalog.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ModifierCatalogError, match="mapping at the top level"):
        load_modifier_catalog(path)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("entry", "message"),
    [
        ({"effects": []}, "missing display_name"),
        ({"display_name": "X", "description": 5, "effects": []}, "description must be a string"),
        ({"display_name": "X", "effects": [{"stat": "strength"}]}, "unknown derived stat 'strength'"),
        ({"display_name": "X", "effects": [{"stat": "notAStat"}]}, "unknown derived stat"),
        ({"display_name": "X", "effects": ["phasingStacks"]}, "non-mapping effect"),
        (
            {"display_name": "X", "effects": [{"stat": "phasingStacks", "config": {"stackz": 1}}]},
            "unknown field",
        ),
        (
            {"display_name": "X", "effects": [{"stat": "phasingStacks", "config": {"enabled": "yes"}}]},
            "expects bool",
        ),
        (
            {
                "display_name": "X",
                "effects": [{"stat": "monogramValueFromStrength", "config": {"source_stat": "essence"}}],
            },
            "not evaluated before",
        ),
    ],
)
def test_malformed_entries_are_rejected(entry: dict, message: str) -> None:
    """Catalog entries are validated against the registry when parsed."""

    with pytest.raises(ModifierCatalogError, match=message):
        _catalog(Broken=entry)


@pytest.mark.unit
def test_payload_without_modifiers_is_rejected() -> None:
    """The payload must have a top-level modifiers mapping."""

    with pytest.raises(ModifierCatalogError, match="'modifiers' mapping"):
        parse_modifier_catalog({})


@pytest.mark.unit
def test_duplicate_modifier_ids_are_rejected() -> None:
    """Catalog ids are unique."""

    definition = ModifierDefinition(modifier_id="Dup", display_name="Dup", description=None, effects=())

    with pytest.raises(ModifierCatalogError, match="Duplicate modifier id"):
        ModifierCatalog((definition, definition))


@pytest.mark.unit
def test_instance_counts_sum_across_modifiers() -> None:
    """Different modifiers targeting the same counted stat add their instances."""

    catalog = _catalog(
        SnailsA={"display_name": "A", "effects": [{"stat": "snailSpawnChance"}]},
        SnailsB={"display_name": "B", "effects": [{"stat": "snailSpawnChance"}]},
    )

    overrides = build_config_overrides(["SnailsA", "SnailsB", "SnailsB"], catalog=catalog)

    assert overrides == {"snailSpawnChance": {"enabled": True, "instance_count": 3}}


@pytest.mark.unit
def test_every_override_carries_switch_and_instance_count() -> None:
    """Overrides for formulas without a switch still carry `enabled` and `instance_count`."""

    catalog = _catalog(
        Scaler={
            "display_name": "Scaler",
            "effects": [{"stat": "monogramValueFromStrength", "config": {"ratio": 50}}],
        }
    )

    overrides = build_config_overrides(["Scaler"], catalog=catalog)

    assert overrides == {"monogramValueFromStrength": {"ratio": 50, "enabled": True, "instance_count": 1}}
    assert calculate_derived_stats({"strength": 500}, overrides)["monogramValueFromStrength"] == 10
