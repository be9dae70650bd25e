"""Tests for dependency chain explanations."""

from __future__ import annotations

import pytest

from stat_engine import get_dependency_chain
from stat_engine.registry import DEFAULT_REGISTRY

pytestmark = pytest.mark.unit


def test_per_stack_chain() -> None:
    """A per-stack bonus depends on its stack count only."""

    assert get_dependency_chain("phasingDamageBonus") == ["phasingStacks", "phasingDamageBonus"]


def test_base_and_unknown_ids_return_themselves() -> None:
    """Layer-0 and unregistered ids explain as a single entry."""

    assert get_dependency_chain("strength") == ["strength"]
    assert get_dependency_chain("notAStat") == ["notAStat"]


def test_transitive_chain_is_in_evaluation_order() -> None:
    """Transitive dependencies come first: base stats, then derived by order."""

    assert get_dependency_chain("chainedHealthBonus") == [
        "strength",
        "strengthBonus",
        "totalStrength",
        "monogramValueFromStrength",
        "chainedElementalBonus",
        "chainedHealthBonus",
    ]


def test_deep_chain_has_no_duplicates_and_respects_order() -> None:
    """Shared dependencies appear once and derived entries follow calculation order."""

    chain = get_dependency_chain("edpsOffhandBoss")
    position = {definition.id: index for index, definition in enumerate(DEFAULT_REGISTRY.calculation_order())}

    assert chain[-1] == "edpsOffhandBoss"
    assert len(chain) == len(set(chain))
    assert {"edpsDDNormal", "edpsDDBoss", "edpsFlat", "totalDamage", "damage"} <= set(chain)

    derived = [stat_id for stat_id in chain if stat_id in position and DEFAULT_REGISTRY.get(stat_id).layer > 0]
    assert derived == sorted(derived, key=position.__getitem__)


def test_chain_is_static() -> None:
    """Chains reflect declared dependencies and compute nothing."""

    assert get_dependency_chain("essence") == get_dependency_chain("essence")
    assert "highestAttribute" in get_dependency_chain("critChanceFromEssence")
