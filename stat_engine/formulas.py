"""Pure compute functions for derived stats.

Every function here has the signature `(values, base_stats, config) -> float`
where `values` is the read-only run state (base stats plus every derived stat
evaluated so far). Missing stats read as 0. Conditional (modifier) formulas
return 0 while their config is disabled; dependents then reach 0 through
propagation only.

Percent-style stats are whole percentage points (50 means 50%). eDPS buckets
are multipliers (1.5 means 150%).
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from .base_stats import STANCES
from .configs import (
    AbilityDamageConfig,
    ConversionConfig,
    EnchantConfig,
    EssenceConfig,
    EssenceCritConfig,
    FlatBonusConfig,
    FormulaConfig,
    InstanceChanceConfig,
    LevelConfig,
    LifeConversionConfig,
    OvercritConfig,
    PerStackConfig,
    PotionDamageConfig,
    PulseConfig,
    RateConfig,
    RatioConfig,
    ScalingConfig,
    SlotBonusConfig,
    StackConfig,
    StackLifeScalingConfig,
    StanceConfig,
    ThresholdConfig,
    WeaponAbilityConfig,
)
from .definitions import ComputeFn

Values = Mapping[str, float]

# Damage% sources that share the additive CHD + DB + SD bucket.
ADDITIVE_DAMAGE_SOURCES = (
    "phasingDamageBonus",
    "shroudDamageBonus",
    "bloodlustDrawBloodBonus",
    "highestStatDamageBonus",
    "damagePercentForStat2",
    "colossusDamageBonus",
    "damageNoPotionBonus",
    "invSlotDamageBonus",
)

FLAT_DAMAGE_SOURCES = (
    "totalDamage",
    "damageFromHealth",
    "flatDamageMonogramBonus",
    "noEnergyDamageBonus",
    "paragonDamageBonus",
)

ELEMENT_SOURCES = (
    "fireDamageBonus",
    "arcaneDamageBonus",
    "lightningDamageBonus",
    "elementFromCritChance",
    "arcaneMineBonus",
    "fireMineBonus",
    "lightningMineBonus",
)


def _stat(values: Values, key: str) -> float:
    """Read a stat from the run state; missing or empty entries read as 0."""

    value = values.get(key)
    return float(value) if value else 0.0


def _per_interval(source: float, interval: float, bonus: float) -> float:
    """Return floor(source / interval) * bonus; non-positive intervals yield 0."""

    if interval <= 0:
        return 0.0
    return math.floor(source / interval) * bonus


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def total_of(base_id: str, bonus_id: str) -> ComputeFn:
    """Return a compute function for floor(base * (1 + bonus% / 100))."""

    def _compute(values: Values, base_stats: Values, config: FormulaConfig) -> float:
        base = _stat(values, base_id)
        bonus = _stat(values, bonus_id)
        return math.floor(base * (1 + bonus / 100))

    return _compute


def highest_of(*stat_ids: str) -> ComputeFn:
    """Return a compute function for the max of the given stats (0 when all missing)."""

    def _compute(values: Values, base_stats: Values, config: FormulaConfig) -> float:
        return max((_stat(values, stat_id) for stat_id in stat_ids), default=0.0)

    return _compute


def sum_of(*stat_ids: str) -> ComputeFn:
    """Return a compute function for floor(sum of the given stats)."""

    def _compute(values: Values, base_stats: Values, config: FormulaConfig) -> float:
        return math.floor(sum(_stat(values, stat_id) for stat_id in stat_ids))

    return _compute


# ---------------------------------------------------------------------------
# Generic formula families
# ---------------------------------------------------------------------------


def conversion(values: Values, base_stats: Values, config: ConversionConfig) -> float:
    return math.floor(_stat(values, config.source_stat) * config.percentage / 100)


def ratio(values: Values, base_stats: Values, config: RatioConfig) -> float:
    return _per_interval(_stat(values, config.source_stat), config.ratio, config.base_value)


def stacks(values: Values, base_stats: Values, config: StackConfig) -> float:
    if not config.enabled:
        return 0.0
    return min(config.current_stacks, config.max_stacks) * config.bonus_per_stack


def level(values: Values, base_stats: Values, config: LevelConfig) -> float:
    return config.level if config.enabled else 0.0


def per_stack(values: Values, base_stats: Values, config: PerStackConfig) -> float:
    return _stat(values, config.source_stat) * config.per_stack


def interval_scaling(values: Values, base_stats: Values, config: ScalingConfig) -> float:
    if not config.enabled:
        return 0.0
    return _per_interval(_stat(values, config.source_stat), config.interval, config.bonus_per_interval)


def flat_bonus(values: Values, base_stats: Values, config: FlatBonusConfig) -> float:
    return config.value if config.enabled else 0.0


def rate(values: Values, base_stats: Values, config: RateConfig) -> float:
    if not config.enabled:
        return 0.0
    return _stat(values, config.source_stat) * config.rate


def threshold_excess(values: Values, base_stats: Values, config: ThresholdConfig) -> float:
    if not config.enabled:
        return 0.0
    excess = max(0.0, _stat(values, config.source_stat) - config.threshold)
    return excess * config.bonus_per_point


def instance_chance(values: Values, base_stats: Values, config: InstanceChanceConfig) -> float:
    """Chance per equipped instance, capped at `max_chance` when set."""

    if not config.enabled:
        return 0.0
    instances = config.instance_count or 1
    chance = instances * config.chance_per_instance
    if config.max_chance is not None:
        chance = min(chance, config.max_chance)
    return chance


def slot_bonus(values: Values, base_stats: Values, config: SlotBonusConfig) -> float:
    if not config.enabled:
        return 0.0
    slots = config.extra_slots or _stat(values, "extraInventorySlots")
    return slots * config.bonus_per_slot


# ---------------------------------------------------------------------------
# Modifier chains
# ---------------------------------------------------------------------------


def essence(values: Values, base_stats: Values, config: EssenceConfig) -> float:
    """Essence from dark essence stacks.

    Below `threshold_stacks` the effect is proportional to the stack count;
    at or above it, essence is highestAttribute * multiplier.
    """

    stack_count = _stat(values, "darkEssenceStacks")
    highest = _stat(values, "highestAttribute")
    if config.threshold_stacks > 0 and stack_count < config.threshold_stacks:
        return math.floor(stack_count / config.threshold_stacks * highest * config.multiplier)
    return math.floor(highest * config.multiplier)


def essence_crit(values: Values, base_stats: Values, config: EssenceCritConfig) -> float:
    if not config.enabled:
        return 0.0
    return _per_interval(_stat(values, "essence"), config.essence_per_crit, 1.0)


def overcrit(values: Values, base_stats: Values, config: OvercritConfig) -> float:
    """Bonus per percent of total crit chance above the threshold."""

    if not config.enabled:
        return 0.0
    total_crit = _stat(values, "critChance") + _stat(values, "critChanceFromEssence")
    return max(0.0, total_crit - config.crit_threshold) * config.bonus_per_crit


def stack_life_scaling(values: Values, base_stats: Values, config: StackLifeScalingConfig) -> float:
    if not config.enabled or config.interval <= 0:
        return 0.0
    stack_count = _stat(values, "lifeBuffStacks")
    highest = _stat(values, "highestAttribute")
    return stack_count * config.life_per_stack * (highest / config.interval)


def potion_damage(values: Values, base_stats: Values, config: PotionDamageConfig) -> float:
    if not config.enabled:
        return 0.0
    slots = config.base_potion_slots + _stat(values, "potionSlotsFromAttributes")
    return slots * config.damage_per_slot


def pulse(values: Values, base_stats: Values, config: PulseConfig) -> float:
    """Pulse proc damage: stacks * percent_per_stack% of the combined element bonus."""

    if not config.enabled:
        return 0.0
    stack_count = min(config.current_stacks, config.max_stacks)
    element_bonus = _stat(values, config.element_stat) + _stat(values, config.mine_stat)
    return stack_count * (config.percent_per_stack / 100) * element_bonus


def life_to_damage(values: Values, base_stats: Values, config: LifeConversionConfig) -> float:
    """Flat damage from a percentage of total life after life% buffs."""

    if not config.enabled:
        return 0.0
    life_bonus = _stat(values, "lifeBuffBonus") + _stat(values, "lifeFromElement")
    total_life = math.floor(_stat(values, "totalHealth") * (1 + life_bonus / 100))
    return math.floor(total_life * config.life_percent / 100)


# ---------------------------------------------------------------------------
# eDPS buckets
# ---------------------------------------------------------------------------


def _stance_value(values: Values, suffix: str, stance: str | None) -> float:
    """Return the selected stance's stat, or the highest stance when none is selected."""

    if stance in STANCES:
        return _stat(values, f"{stance}{suffix}")
    return max(0.0, *(_stat(values, f"{name}{suffix}") for name in STANCES))


def edps_additive_multi(values: Values, base_stats: Values, config: StanceConfig) -> float:
    """CHD + DB + SD bucket plus additive monogram damage%, as a ratio."""

    total = (
        _stat(values, "critDamage")
        + _stat(values, "damageBonus")
        + _stance_value(values, "Damage", config.stance)
        + sum(_stat(values, stat_id) for stat_id in ADDITIVE_DAMAGE_SOURCES)
    )
    return total / 100


def edps_stance_crit(values: Values, base_stats: Values, config: StanceConfig) -> float:
    bonus = (
        _stance_value(values, "CritDamage", config.stance)
        + _stat(values, "bloodlustCritDamageBonus")
        + _stat(values, "critDamageFromArmor")
    )
    return 1 + bonus / 100


def edps_weapon_ability(values: Values, base_stats: Values, config: WeaponAbilityConfig) -> float:
    base = config.secondary_base if config.use_secondary else config.primary_base
    return base + config.wad_bonus


def edps_enchant_multi(values: Values, base_stats: Values, config: EnchantConfig) -> float:
    """Independent multipliers: class weapon, distance procs, shroud flat damage%.

    The two distance procs are mutually exclusive; only the larger applies.
    """

    multi = 1.0
    if config.class_weapon_bonus:
        multi *= 1 + config.class_weapon_bonus
    distance = max(_stat(values, "distanceProcsDamageBonus"), _stat(values, "distanceProcsNearDamageBonus"))
    if distance:
        multi *= 1 + distance / 100
    shroud_flat = _stat(values, "shroudFlatDamageBonus")
    if shroud_flat:
        multi *= 1 + shroud_flat / 100
    return multi


def edps_boss(values: Values, base_stats: Values, config: FormulaConfig) -> float:
    return 1 + (_stat(values, "bossBonus") + _stat(values, "phasingBossDamageBonus")) / 100


def edps_elemental(values: Values, base_stats: Values, config: FormulaConfig) -> float:
    return 1 + sum(_stat(values, stat_id) for stat_id in ELEMENT_SOURCES) / 100


def edps_ability(values: Values, base_stats: Values, config: AbilityDamageConfig) -> float:
    return config.ability_damage + config.affinity_damage


def product_of(first: str, *multipliers: str) -> ComputeFn:
    """Return a compute function for floor(first * m1 * m2 ...).

    A zero or missing multiplier counts as 1 so an absent bucket never erases
    the result.
    """

    def _compute(values: Values, base_stats: Values, config: FormulaConfig) -> float:
        result = _stat(values, first)
        for stat_id in multipliers:
            result *= _stat(values, stat_id) or 1.0
        return math.floor(result)

    return _compute
