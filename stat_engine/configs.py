"""Typed formula configs and override merging.

Every derived stat carries a default config: a frozen dataclass whose class
identifies the formula family (stacks, ratios, interval scaling, ...). Callers
adjust a config for one evaluation run by supplying a partial patch, keyed by
field name, in `config_overrides[stat_id]`.

Patches are validated at merge time:
- keys may use camelCase (as emitted by UI collaborators) or snake_case,
- unknown keys are rejected, except `enabled` and `instance_count`, which
  any override may carry and which families without such a field ignore,
- values must match the field's declared type.

Fields whose name ends in `_stat` name another stat the formula reads.
Ordering of those reads is checked by `StatRegistry.check_config_reads`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any, Final

from .errors import ConfigOverrideError

if TYPE_CHECKING:
    from .definitions import DerivedStatDefinition

ConfigOverrides = Mapping[str, Mapping[str, Any]]

_CAMEL_BOUNDARY: Final = re.compile(r"(?<!^)(?=[A-Z])")

_FIELD_TYPES: Final[dict[str, tuple[type, ...]]] = {
    "bool": (bool,),
    "int": (int,),
    "float": (int, float),
    "str": (str,),
}

# Keys every override may carry (`{enabled: true, ...parameters, instanceCount}`),
# with the type they must have.
ANNOTATION_FIELDS: Final[dict[str, str]] = {
    "enabled": "bool",
    "instance_count": "int",
}


@dataclass(frozen=True, slots=True)
class FormulaConfig:
    """Base class for formula configs; also used for formulas without parameters."""


@dataclass(frozen=True, slots=True)
class ConversionConfig(FormulaConfig):
    """Convert a percentage of one stat into another: floor(source * percentage / 100)."""

    source_stat: str = "totalHealth"
    percentage: float = 1.0


@dataclass(frozen=True, slots=True)
class RatioConfig(FormulaConfig):
    """Gain `base_value` per full `ratio` points of a source stat."""

    source_stat: str = ""
    ratio: float = 1.0
    base_value: float = 1.0


@dataclass(frozen=True, slots=True)
class StackConfig(FormulaConfig):
    """Buff stacks (capped at `max_stacks`), each worth `bonus_per_stack`."""

    enabled: bool = False
    max_stacks: float = 0.0
    current_stacks: float = 0.0
    bonus_per_stack: float = 1.0


@dataclass(frozen=True, slots=True)
class LevelConfig(FormulaConfig):
    """A level supplied by the caller (e.g. paragon level)."""

    enabled: bool = False
    level: float = 0.0


@dataclass(frozen=True, slots=True)
class PerStackConfig(FormulaConfig):
    """Linear bonus per unit of a source stat; gating happens upstream."""

    source_stat: str = ""
    per_stack: float = 1.0


@dataclass(frozen=True, slots=True)
class ScalingConfig(FormulaConfig):
    """Gain `bonus_per_interval` per full `interval` points of a source stat.

    `uptime_estimate` is display metadata for effects that are not always
    active; the formula does not read it.
    """

    enabled: bool = False
    source_stat: str = "highestAttribute"
    interval: float = 50.0
    bonus_per_interval: float = 1.0
    uptime_estimate: float = 1.0


@dataclass(frozen=True, slots=True)
class FlatBonusConfig(FormulaConfig):
    """A fixed value while the effect is enabled."""

    enabled: bool = False
    value: float = 0.0
    drawback: str | None = None


@dataclass(frozen=True, slots=True)
class RateConfig(FormulaConfig):
    """Convert a source stat at a fixed rate (source * rate)."""

    enabled: bool = False
    source_stat: str = ""
    rate: float = 1.0


@dataclass(frozen=True, slots=True)
class ThresholdConfig(FormulaConfig):
    """Bonus per point of a source stat above `threshold`."""

    enabled: bool = False
    source_stat: str = ""
    threshold: float = 0.0
    bonus_per_point: float = 1.0


@dataclass(frozen=True, slots=True)
class InstanceChanceConfig(FormulaConfig):
    """Proc chance scaling with the number of equipped instances."""

    enabled: bool = False
    chance_per_instance: float = 10.0
    max_chance: float | None = None
    instance_count: int = 1


@dataclass(frozen=True, slots=True)
class SlotBonusConfig(FormulaConfig):
    """Bonus per extra inventory slot.

    `extra_slots` of 0 falls back to the `extraInventorySlots` base stat.
    """

    enabled: bool = False
    bonus_per_slot: float = 1.0
    extra_slots: float = 0.0


@dataclass(frozen=True, slots=True)
class EssenceConfig(FormulaConfig):
    """Essence from dark essence stacks, proportional below `threshold_stacks`."""

    multiplier: float = 1.25
    threshold_stacks: float = 500.0


@dataclass(frozen=True, slots=True)
class EssenceCritConfig(FormulaConfig):
    """One percent crit chance per `essence_per_crit` essence."""

    enabled: bool = False
    essence_per_crit: float = 20.0


@dataclass(frozen=True, slots=True)
class OvercritConfig(FormulaConfig):
    """Bonus per percent of crit chance above `crit_threshold`.

    `element_type` labels which element the bonus feeds, for display only;
    the formula does not read it.
    """

    enabled: bool = False
    crit_threshold: float = 100.0
    bonus_per_crit: float = 1.0
    element_type: str | None = None


@dataclass(frozen=True, slots=True)
class StackLifeScalingConfig(FormulaConfig):
    """Life percent per stack per `interval` points of the highest attribute."""

    enabled: bool = False
    life_per_stack: float = 0.1
    interval: float = 50.0


@dataclass(frozen=True, slots=True)
class PotionDamageConfig(FormulaConfig):
    """Damage percent per potion slot while potions are forgone."""

    enabled: bool = False
    damage_per_slot: float = 5.0
    base_potion_slots: float = 3.0
    drawback: str | None = "Cannot use potions"


@dataclass(frozen=True, slots=True)
class PulseConfig(FormulaConfig):
    """Pulse explosion damage: stacks * percent_per_stack% of an element bonus."""

    enabled: bool = False
    percent_per_stack: float = 3.0
    max_stacks: float = 100.0
    current_stacks: float = 100.0
    element_stat: str = ""
    mine_stat: str = ""


@dataclass(frozen=True, slots=True)
class LifeConversionConfig(FormulaConfig):
    """Flat damage from a percentage of buffed total life."""

    enabled: bool = False
    life_percent: float = 1.0


@dataclass(frozen=True, slots=True)
class StanceConfig(FormulaConfig):
    """Stance selection; None picks the highest stance value."""

    stance: str | None = None


@dataclass(frozen=True, slots=True)
class WeaponAbilityConfig(FormulaConfig):
    """Weapon ability damage multiplier (primary 2.0, secondary 4.0)."""

    primary_base: float = 2.0
    secondary_base: float = 4.0
    use_secondary: bool = False
    wad_bonus: float = 0.0


@dataclass(frozen=True, slots=True)
class EnchantConfig(FormulaConfig):
    """Independent enchantment multipliers supplied manually (decimal)."""

    class_weapon_bonus: float = 0.0


@dataclass(frozen=True, slots=True)
class AbilityDamageConfig(FormulaConfig):
    """Offhand ability damage plus skill tree affinity (decimals)."""

    ability_damage: float = 1.0
    affinity_damage: float = 0.0


def normalize_key(key: str) -> str:
    """Convert a camelCase override key to the snake_case field name.

    Args:
        key: Override key, e.g. "maxStacks" or "max_stacks".

    Returns:
        The snake_case field name.
    """

    return _CAMEL_BOUNDARY.sub("_", key).lower()


def stat_reads(config: FormulaConfig) -> dict[str, str]:
    """Return `{field_name: stat_id}` for every stat-naming field with a value."""

    reads: dict[str, str] = {}
    for f in fields(config):
        if not f.name.endswith("_stat"):
            continue
        value = getattr(config, f.name)
        if isinstance(value, str) and value:
            reads[f.name] = value
    return reads


def apply_patch(stat_id: str, config: FormulaConfig, patch: Mapping[str, Any]) -> FormulaConfig:
    """Return `config` with `patch` merged over it.

    Args:
        stat_id: Stat the config belongs to (for error messages).
        config: Base config.
        patch: Partial field mapping; camelCase or snake_case keys.

    Returns:
        A new config instance; `config` is left untouched.

    Raises:
        ConfigOverrideError: When a key is unknown, given twice, or a value has
            the wrong type.
    """

    declared = {f.name: f for f in fields(config)}
    seen: set[str] = set()
    changes: dict[str, Any] = {}
    for raw_key, value in patch.items():
        if not isinstance(raw_key, str):
            raise ConfigOverrideError(stat_id, f"override keys must be strings, got {raw_key!r}")
        name = normalize_key(raw_key)
        if name in seen:
            raise ConfigOverrideError(stat_id, f"field {name!r} given more than once")
        seen.add(name)

        field_def = declared.get(name)
        if field_def is None:
            annotation = ANNOTATION_FIELDS.get(name)
            if annotation is None:
                allowed = ", ".join(sorted(declared)) or "none"
                raise ConfigOverrideError(
                    stat_id,
                    f"unknown field {raw_key!r} for {type(config).__name__} (allowed: {allowed})",
                )
            # Accepted on every override; ignored by families that do not declare it.
            _check_value(stat_id, name, annotation, value)
            continue
        _check_value(stat_id, name, str(field_def.type), value)
        changes[name] = value

    if not changes:
        return config
    return replace(config, **changes)


def resolve_config(definition: DerivedStatDefinition, overrides: ConfigOverrides | None) -> FormulaConfig:
    """Resolve the effective config for one definition in one evaluation run.

    Override fields win per key; unspecified fields fall through to the
    definition's default config. An override given as a config instance of
    the same family replaces the default wholesale.

    Args:
        definition: Stat definition being evaluated.
        overrides: Per-stat override mapping, or None.

    Returns:
        The config to pass to the definition's compute function.

    Raises:
        ConfigOverrideError: When the override is malformed.
    """

    default = definition.default_config
    if not overrides or definition.id not in overrides:
        return default

    patch = overrides[definition.id]
    if isinstance(patch, FormulaConfig):
        if type(patch) is not type(default):
            raise ConfigOverrideError(
                definition.id,
                f"expected {type(default).__name__}, got {type(patch).__name__}",
            )
        return patch
    if not isinstance(patch, Mapping):
        raise ConfigOverrideError(definition.id, f"override must be a mapping, got {type(patch).__name__}")
    return apply_patch(definition.id, default, patch)


def _check_value(stat_id: str, name: str, annotation: str, value: Any) -> None:
    """Raise ConfigOverrideError when `value` does not match `annotation`."""

    base, _, tail = annotation.partition(" | ")
    if value is None:
        if tail == "None":
            return
        raise ConfigOverrideError(stat_id, f"field {name!r} may not be None")

    accepted = _FIELD_TYPES[base]
    if isinstance(value, bool) and bool not in accepted:
        raise ConfigOverrideError(stat_id, f"field {name!r} expects {base}, got bool")
    if not isinstance(value, accepted):
        raise ConfigOverrideError(stat_id, f"field {name!r} expects {base}, got {type(value).__name__}")
