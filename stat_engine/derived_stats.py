"""Derived stat formula table.

Entries are grouped by layer and evaluated in declaration order within a
layer. A formula may only read base stats, stats in a lower layer, or stats
declared earlier in its own layer; `StatRegistry` enforces this against each
entry's declared `dependencies` when the registry is built.

Modifier ("monogram") formulas ship disabled. Callers enable them per run via
config overrides, usually produced by `stat_engine.modifiers`.
"""

from __future__ import annotations

from typing import Final

from . import formatting, formulas
from .base_stats import ATTRIBUTES, STANCES
from .categories import Layer, StatCategory
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
from .definitions import ComputeFn, DerivedStatDefinition
from .formatting import Formatter

_T = Layer.TOTALS
_L2 = Layer.PRIMARY_DERIVED
_L3 = Layer.SECONDARY_DERIVED
_L4 = Layer.TERTIARY_DERIVED

_BUFF = StatCategory.monogram_buff
_DISPLAY = StatCategory.monogram_display
_CHAIN = StatCategory.monogram_chain

_SIGNED_PERCENT_1DP: Final[Formatter] = formatting.percent(decimals=1, signed=True)


def _define(
    stat_id: str,
    name: str,
    category: StatCategory,
    layer: Layer,
    compute: ComputeFn,
    *,
    fmt: Formatter,
    description: str,
    config: FormulaConfig | None = None,
    dependencies: tuple[str, ...] = (),
    is_percent: bool = False,
) -> DerivedStatDefinition:
    return DerivedStatDefinition(
        id=stat_id,
        name=name,
        category=category,
        layer=layer,
        description=description,
        format=fmt,
        is_percent=is_percent,
        compute=compute,
        default_config=config if config is not None else FormulaConfig(),
        dependencies=dependencies,
    )


def _stacks(stat_id: str, name: str, max_stacks: int, description: str) -> DerivedStatDefinition:
    # Stack counts default to the cap for theorycrafting.
    return _define(
        stat_id,
        name,
        _BUFF,
        _L2,
        formulas.stacks,
        fmt=formatting.INTEGER,
        description=description,
        config=StackConfig(max_stacks=max_stacks, current_stacks=max_stacks),
    )


def _per_stack(
    stat_id: str,
    name: str,
    source_stat: str,
    amount: float,
    description: str,
    *,
    fmt: Formatter = formatting.SIGNED_PERCENT,
    is_percent: bool = True,
) -> DerivedStatDefinition:
    return _define(
        stat_id,
        name,
        _BUFF,
        _L3,
        formulas.per_stack,
        fmt=fmt,
        description=description,
        config=PerStackConfig(source_stat=source_stat, per_stack=amount),
        dependencies=(source_stat,),
        is_percent=is_percent,
    )


def _flat(
    stat_id: str,
    name: str,
    value: float,
    description: str,
    *,
    category: StatCategory = _BUFF,
    fmt: Formatter = formatting.SIGNED_PERCENT,
    drawback: str | None = None,
    is_percent: bool = True,
) -> DerivedStatDefinition:
    return _define(
        stat_id,
        name,
        category,
        _L2,
        formulas.flat_bonus,
        fmt=fmt,
        description=description,
        config=FlatBonusConfig(value=value, drawback=drawback),
        is_percent=is_percent,
    )


def _mine(element: str) -> DerivedStatDefinition:
    label = element.capitalize()
    return _define(
        f"{element}MineBonus",
        f"Mine {label}%",
        _BUFF,
        _L2,
        formulas.stacks,
        fmt=formatting.SIGNED_PERCENT,
        description=f"{label} bonus from exploding mines (5% per stack, 20 max)",
        config=StackConfig(max_stacks=20, current_stacks=20, bonus_per_stack=5),
        is_percent=True,
    )


def _pulse(element: str) -> DerivedStatDefinition:
    label = element.capitalize()
    element_stat = f"{element}DamageBonus"
    mine_stat = f"{element}MineBonus"
    return _define(
        f"pulse{label}Damage",
        f"Pulse {label} Damage",
        _BUFF,
        _L3,
        formulas.pulse,
        fmt=formatting.PERCENT,
        description=f"Pulse {element} proc damage (3% of {element} bonus per stack, 100 max)",
        config=PulseConfig(element_stat=element_stat, mine_stat=mine_stat),
        dependencies=(element_stat, mine_stat),
        is_percent=True,
    )


_TOTAL_TARGETS: Final[tuple[str, ...]] = (*ATTRIBUTES, "armor", "health", "damage")

_TOTALS: Final[tuple[DerivedStatDefinition, ...]] = tuple(
    _define(
        f"total{stat.capitalize()}",
        f"Total {stat.capitalize()}",
        StatCategory.totals,
        _T,
        formulas.total_of(stat, f"{stat}Bonus"),
        fmt=formatting.INTEGER,
        description=f"{stat.capitalize()} after bonuses applied",
        dependencies=(stat, f"{stat}Bonus"),
    )
    for stat in _TOTAL_TARGETS
)

_TOTAL_ATTRIBUTES: Final[tuple[str, ...]] = tuple(f"total{attribute.capitalize()}" for attribute in ATTRIBUTES)

_STANCE_DAMAGE: Final[tuple[str, ...]] = tuple(f"{stance}Damage" for stance in STANCES)
_STANCE_CRIT_DAMAGE: Final[tuple[str, ...]] = tuple(f"{stance}CritDamage" for stance in STANCES)


DERIVED_STAT_DEFINITIONS: Final[tuple[DerivedStatDefinition, ...]] = (
    # -----------------------------------------------------------------------
    # Layer 1: totals
    # -----------------------------------------------------------------------
    *_TOTALS,
    _define(
        "highestAttribute",
        "Highest Attribute",
        StatCategory.utility,
        _T,
        formulas.highest_of(*_TOTAL_ATTRIBUTES),
        fmt=formatting.INTEGER,
        description="The highest primary attribute value",
        dependencies=_TOTAL_ATTRIBUTES,
    ),
    # -----------------------------------------------------------------------
    # Layer 2: buff stacks first, so overrides may point other layer-2
    # formulas at them.
    # -----------------------------------------------------------------------
    _stacks("phasingStacks", "Phasing Stacks", 50, "Current Phasing buff stacks (max 50)"),
    _stacks("bloodlustStacks", "Bloodlust Stacks", 100, "Current Bloodlust buff stacks (max 100)"),
    _stacks("darkEssenceStacks", "Dark Essence Stacks", 500, "Current Dark Essence buff stacks (max 500)"),
    _stacks("lifeBuffStacks", "Life Buff Stacks", 100, "Life buff stacks from amulet monogram (max 100)"),
    _stacks("shroudStacks", "Shroud Stacks", 50, "Current Shroud buff stacks (max 50)"),
    _define(
        "paragonLevel",
        "Paragon Level",
        _BUFF,
        _L2,
        formulas.level,
        fmt=formatting.INTEGER,
        description="Paragon level (from stance XP, 3500 per level)",
        config=LevelConfig(),
    ),
    _define(
        "damageFromHealth",
        "Damage from Health",
        StatCategory.conversion,
        _L2,
        formulas.conversion,
        fmt=formatting.SIGNED,
        description="Flat damage gained from percentage of total health",
        config=ConversionConfig(source_stat="totalHealth", percentage=1),
        dependencies=("totalHealth",),
    ),
    _define(
        "monogramValueFromStrength",
        "Monogram Value (STR)",
        StatCategory.monogram,
        _L2,
        formulas.ratio,
        fmt=formatting.INTEGER,
        description="Bonus value from monogram based on strength",
        config=RatioConfig(source_stat="totalStrength", ratio=100, base_value=1),
        dependencies=("totalStrength",),
    ),
    _define(
        "potionSlotsFromAttributes",
        "Potion Slots (Stats)",
        StatCategory.utility_derived,
        _L2,
        formulas.ratio,
        fmt=formatting.INTEGER,
        description="Additional potion slots from highest attribute (1 per 50)",
        config=RatioConfig(source_stat="highestAttribute", ratio=50, base_value=1),
        dependencies=("highestAttribute",),
    ),
    _define(
        "damageCircleLifeBonus",
        "Circle Life%",
        _BUFF,
        _L2,
        formulas.interval_scaling,
        fmt=formatting.SIGNED_PERCENT,
        description="Life bonus from Damage Circle (2% per 50 highest attribute)",
        config=ScalingConfig(source_stat="highestAttribute", interval=50, bonus_per_interval=2),
        dependencies=("highestAttribute",),
        is_percent=True,
    ),
    _flat(
        "distanceProcsDamageBonus",
        "Distance Damage%",
        50,
        "Distance proc damage (50%, own multiplier, exclusive with Near)",
    ),
    _flat(
        "distanceProcsNearDamageBonus",
        "Near Distance Damage%",
        50,
        "Near distance proc damage (50%, own multiplier, exclusive with Far)",
    ),
    _define(
        "eliteAttackSpeedBonus",
        "Elite AS%",
        _BUFF,
        _L2,
        formulas.stacks,
        fmt=formatting.SIGNED_PERCENT,
        description="Attack speed from elite kills (assume capped stacks)",
        config=StackConfig(max_stacks=10, current_stacks=10, bonus_per_stack=3),
        is_percent=True,
    ),
    _define(
        "eliteEnergyBonus",
        "Elite Energy",
        _BUFF,
        _L2,
        formulas.stacks,
        fmt=formatting.SIGNED,
        description="Energy from elite kills (assume capped stacks)",
        config=StackConfig(max_stacks=10, current_stacks=10, bonus_per_stack=10),
    ),
    _flat("extraLifestealBonus", "Extra Lifesteal%", 10, "Extra lifesteal bonus (10%)"),
    _flat(
        "flatDamageMonogramBonus",
        "Flat Damage (Monogram)",
        300,
        "+300 flat damage (drawback: incoming damage deals 50% HP)",
        fmt=formatting.SIGNED,
        drawback="Incoming damage deals 50% of max HP",
        is_percent=False,
    ),
    _flat(
        "noEnergyDamageBonus",
        "No Energy Damage",
        300,
        "+300 flat damage (drawback: sets energy to 0)",
        fmt=formatting.SIGNED,
        drawback="Sets energy to 0",
        is_percent=False,
    ),
    _define(
        "highestStatDamageBonus",
        "Highest Stat Damage%",
        _BUFF,
        _L2,
        formulas.interval_scaling,
        fmt=formatting.SIGNED_PERCENT,
        description="Damage bonus from highest stat (1% per 50)",
        config=ScalingConfig(source_stat="highestAttribute", interval=50, bonus_per_interval=1),
        dependencies=("highestAttribute",),
        is_percent=True,
    ),
    _define(
        "eliteSpawnChance",
        "Elite Spawn%",
        _DISPLAY,
        _L2,
        formulas.instance_chance,
        fmt=formatting.PERCENT,
        description="Chance to spawn another elite on kill (10% per instance, cap 40%)",
        config=InstanceChanceConfig(chance_per_instance=10, max_chance=40),
        is_percent=True,
    ),
    _define(
        "containerSpawnChance",
        "Container Spawn%",
        _DISPLAY,
        _L2,
        formulas.instance_chance,
        fmt=formatting.PERCENT,
        description="Chance to spawn container on elite kill (10% per instance, cap 100%)",
        config=InstanceChanceConfig(chance_per_instance=10, max_chance=100),
        is_percent=True,
    ),
    _define(
        "critDamageFromArmor",
        "Crit Damage (Armor)",
        _BUFF,
        _L2,
        formulas.interval_scaling,
        fmt=formatting.SIGNED_PERCENT,
        description="Crit damage bonus from armor (1% per 500 armor)",
        config=ScalingConfig(source_stat="totalArmor", interval=500, bonus_per_interval=1),
        dependencies=("totalArmor",),
        is_percent=True,
    ),
    _define(
        "energyDamageBonus",
        "Energy Damage",
        _BUFF,
        _L2,
        formulas.threshold_excess,
        fmt=formatting.SIGNED,
        description="Flat damage from energy over 100 (2 per energy)",
        config=ThresholdConfig(source_stat="energy", threshold=100, bonus_per_point=2),
        dependencies=("energy",),
    ),
    _define(
        "invSlotBossDamageBonus",
        "Boss Damage (Inv)",
        _BUFF,
        _L2,
        formulas.slot_bonus,
        fmt=formatting.SIGNED_PERCENT,
        description="Boss damage from extra inventory slots (1% per slot)",
        config=SlotBonusConfig(bonus_per_slot=1),
        dependencies=("extraInventorySlots",),
        is_percent=True,
    ),
    _define(
        "invSlotCritDamageBonus",
        "Crit Damage (Inv)",
        _BUFF,
        _L2,
        formulas.slot_bonus,
        fmt=formatting.SIGNED_PERCENT,
        description="Crit damage from extra inventory slots (5% per slot)",
        config=SlotBonusConfig(bonus_per_slot=5),
        dependencies=("extraInventorySlots",),
        is_percent=True,
    ),
    _flat("juggernautMoveSpeed", "Juggernaut MS%", 40, "Movement speed from Juggernaut (40%, single instance)"),
    _flat("juggernautCritChance", "Juggernaut Crit%", 25, "Crit chance from Juggernaut (25%, single instance)"),
    _flat(
        "juggernautCritDamage",
        "Juggernaut Crit Dmg",
        2,
        "Crit damage multiplier from Juggernaut (2x, single instance)",
        fmt=formatting.multiplier(),
        is_percent=False,
    ),
    _define(
        "snailSpawnChance",
        "Snail Spawn%",
        _DISPLAY,
        _L2,
        formulas.instance_chance,
        fmt=formatting.PERCENT,
        description="Chance to spawn snails (10% per instance)",
        config=InstanceChanceConfig(chance_per_instance=10),
        is_percent=True,
    ),
    _flat(
        "lifestealToEnergySteal",
        "Energy Steal",
        1,
        "Converts lifesteal to energy steal (drawback)",
        category=_DISPLAY,
        fmt=formatting.active_flag,
        is_percent=False,
    ),
    _flat(
        "colossusDoubleAttackSpeed",
        "Colossus 2x IAS",
        2,
        "Double attack speed during Colossus",
        category=_DISPLAY,
        fmt=formatting.multiplier_or_inactive(),
        is_percent=False,
    ),
    _define(
        "critChanceFromEnergyRegen",
        "Crit% (Energy Regen)",
        _BUFF,
        _L2,
        formulas.rate,
        fmt=formatting.SIGNED_PERCENT,
        description="Crit chance from energy regen (1:1 ratio)",
        config=RateConfig(source_stat="energyRegen", rate=1),
        dependencies=("energyRegen",),
        is_percent=True,
    ),
    _define(
        "damagePercentForStat2",
        "Stat Damage% II",
        _BUFF,
        _L2,
        formulas.interval_scaling,
        fmt=formatting.SIGNED_PERCENT,
        description="Damage% from highest stat (1% per 50)",
        config=ScalingConfig(source_stat="highestAttribute", interval=50, bonus_per_interval=1),
        dependencies=("highestAttribute",),
        is_percent=True,
    ),
    _mine("arcane"),
    _mine("fire"),
    _mine("lightning"),
    _define(
        "chargedSecondaryDamageBonus",
        "Charged Secondary%",
        _BUFF,
        _L2,
        formulas.interval_scaling,
        fmt=formatting.SIGNED_PERCENT,
        description="Charged secondary damage from highest stat (100% per 100 stat)",
        config=ScalingConfig(
            source_stat="highestAttribute",
            interval=100,
            bonus_per_interval=100,
            uptime_estimate=0.5,
        ),
        dependencies=("highestAttribute",),
        is_percent=True,
    ),
    _flat(
        "shroudMaxStacksMultiplier",
        "Shroud First-Hit",
        2,
        "2x damage on first hit (light to dark shroud transition)",
        category=_DISPLAY,
        fmt=formatting.multiplier_or_inactive(),
        is_percent=False,
    ),
    _flat(
        "doubleBuffLength",
        "Double Buff Length",
        1,
        "Doubles buff durations",
        category=_DISPLAY,
        fmt=formatting.active_flag,
        is_percent=False,
    ),
    _flat("colossusDamageBonus", "Colossus Damage%", 70, "70% damage while Colossus is active"),
    _define(
        "invSlotDamageBonus",
        "Damage% (Inv Slot)",
        _BUFF,
        _L2,
        formulas.slot_bonus,
        fmt=formatting.SIGNED_PERCENT,
        description="Damage% per bonus inventory slot (2% per slot)",
        config=SlotBonusConfig(bonus_per_slot=2),
        dependencies=("extraInventorySlots",),
        is_percent=True,
    ),
    # -----------------------------------------------------------------------
    # Layer 3
    # -----------------------------------------------------------------------
    _define(
        "finalDamage",
        "Final Damage",
        StatCategory.final,
        _L3,
        formulas.sum_of("totalDamage", "damageFromHealth"),
        fmt=formatting.INTEGER,
        description="Total damage from all sources combined",
        dependencies=("totalDamage", "damageFromHealth"),
    ),
    _define(
        "chainedElementalBonus",
        "Elemental Bonus (Chain)",
        StatCategory.chained,
        _L3,
        formulas.ratio,
        fmt=formatting.SIGNED_PERCENT,
        description="Elemental damage bonus from chained calculation",
        config=RatioConfig(source_stat="monogramValueFromStrength", ratio=1, base_value=2),
        dependencies=("monogramValueFromStrength",),
        is_percent=True,
    ),
    _define(
        "statBonusFromPotions",
        "Damage% (Potions)",
        StatCategory.chained,
        _L3,
        formulas.ratio,
        fmt=formatting.SIGNED,
        description="Bonus to stats from potion slots",
        config=RatioConfig(source_stat="potionSlotsFromAttributes", ratio=1, base_value=5),
        dependencies=("potionSlotsFromAttributes",),
    ),
    _per_stack(
        "phasingDamageBonus",
        "Phasing Damage%",
        "phasingStacks",
        1,
        "Damage bonus from Phasing stacks (1% per stack)",
    ),
    _per_stack(
        "phasingBossDamageBonus",
        "Phasing Boss Damage%",
        "phasingStacks",
        0.5,
        "Boss damage bonus from Phasing stacks (0.5% per stack)",
        fmt=_SIGNED_PERCENT_1DP,
    ),
    _per_stack(
        "bloodlustCritDamageBonus",
        "Bloodlust Crit Damage%",
        "bloodlustStacks",
        5,
        "Critical damage bonus from Bloodlust stacks (5% per stack)",
    ),
    _per_stack(
        "bloodlustAttackSpeedBonus",
        "Bloodlust Attack Speed%",
        "bloodlustStacks",
        3,
        "Attack speed bonus from Bloodlust stacks (3% per stack)",
    ),
    _per_stack(
        "bloodlustMoveSpeedBonus",
        "Bloodlust Move Speed%",
        "bloodlustStacks",
        1,
        "Movement speed bonus from Bloodlust stacks (1% per stack)",
    ),
    _define(
        "essence",
        "Essence",
        _BUFF,
        _L3,
        formulas.essence,
        fmt=formatting.INTEGER,
        description="Essence value from Dark Essence (highest attribute x 1.25 at 500 stacks)",
        config=EssenceConfig(),
        dependencies=("darkEssenceStacks", "highestAttribute"),
    ),
    _per_stack(
        "lifeBuffBonus",
        "Life Buff Bonus%",
        "lifeBuffStacks",
        1,
        "Life bonus from Life buff stacks (1% per stack)",
    ),
    _define(
        "bloodlustLifeBonus",
        "Bloodlust Life%",
        _BUFF,
        _L3,
        formulas.stack_life_scaling,
        fmt=formatting.SIGNED_PERCENT,
        description="Life bonus from Bloodlust stacks scaling with highest attribute",
        config=StackLifeScalingConfig(),
        dependencies=("lifeBuffStacks", "highestAttribute"),
        is_percent=True,
    ),
    _per_stack(
        "shroudLifeBonus",
        "Shroud Life%",
        "shroudStacks",
        3,
        "Life bonus from Shroud stacks (3% per stack, 150% at max)",
    ),
    _per_stack(
        "paragonArmorBonus",
        "Paragon Armor",
        "paragonLevel",
        15,
        "Flat armor from Paragon level (15 per level)",
        fmt=formatting.SIGNED,
        is_percent=False,
    ),
    _per_stack(
        "paragonDamageBonus",
        "Paragon Damage",
        "paragonLevel",
        2,
        "Flat damage from Paragon level (2 per level)",
        fmt=formatting.SIGNED,
        is_percent=False,
    ),
    _per_stack(
        "paragonHpBonus",
        "Paragon HP",
        "paragonLevel",
        10,
        "Flat HP from Paragon level (10 per level)",
        fmt=formatting.SIGNED,
        is_percent=False,
    ),
    _per_stack(
        "shroudDamageBonus",
        "Shroud Damage%",
        "shroudStacks",
        5,
        "Damage bonus from Shroud stacks (5% per stack, 250% at max)",
    ),
    _per_stack(
        "shroudFlatDamageBonus",
        "Shroud Flat Damage%",
        "shroudStacks",
        1,
        "Flat damage bonus from Shroud stacks (1% per stack, separate multiplier)",
    ),
    _per_stack(
        "bloodlustDrawBloodBonus",
        "Draw Blood Damage%",
        "bloodlustStacks",
        1,
        "Damage bonus from Draw Blood (1% per bloodlust stack)",
    ),
    _define(
        "damageNoPotionBonus",
        "No Potion Damage%",
        _BUFF,
        _L3,
        formulas.potion_damage,
        fmt=formatting.SIGNED_PERCENT,
        description="Damage% per potion slot (5% per slot, cannot use potions)",
        config=PotionDamageConfig(),
        dependencies=("potionSlotsFromAttributes",),
        is_percent=True,
    ),
    _pulse("arcane"),
    _pulse("fire"),
    _pulse("lightning"),
    # -----------------------------------------------------------------------
    # Layer 4: chains
    # -----------------------------------------------------------------------
    _define(
        "chainedHealthBonus",
        "Health Bonus (Chain)",
        StatCategory.chained,
        _L4,
        formulas.ratio,
        fmt=formatting.SIGNED,
        description="Health bonus from chained elemental calculation",
        config=RatioConfig(source_stat="chainedElementalBonus", ratio=5, base_value=10),
        dependencies=("chainedElementalBonus",),
    ),
    _define(
        "critChanceFromEssence",
        "Crit Chance (Essence)",
        _CHAIN,
        _L4,
        formulas.essence_crit,
        fmt=formatting.SIGNED_PERCENT,
        description="Critical chance from Essence (1% per 20 essence)",
        config=EssenceCritConfig(),
        dependencies=("essence",),
        is_percent=True,
    ),
    _define(
        "elementFromCritChance",
        "Element% (Crit)",
        _CHAIN,
        _L4,
        formulas.overcrit,
        fmt=formatting.SIGNED_PERCENT,
        description="Elemental damage from crit over 100% (3% per 1% crit)",
        config=OvercritConfig(bonus_per_crit=3, element_type="fire"),
        dependencies=("critChance", "critChanceFromEssence"),
        is_percent=True,
    ),
    _define(
        "lifeBonusFromCritChance",
        "Life% (Crit)",
        _CHAIN,
        _L4,
        formulas.overcrit,
        fmt=formatting.SIGNED_PERCENT,
        description="Life bonus from crit over 100% (1% life per 1% overcrit)",
        config=OvercritConfig(bonus_per_crit=1),
        dependencies=("critChance", "critChanceFromEssence"),
        is_percent=True,
    ),
    _define(
        "lifeFromElement",
        "Life% (Element)",
        _CHAIN,
        _L4,
        formulas.interval_scaling,
        fmt=formatting.SIGNED_PERCENT,
        description="Life bonus from elemental damage (2% per 30% element)",
        config=ScalingConfig(source_stat="elementFromCritChance", interval=30, bonus_per_interval=2),
        dependencies=("elementFromCritChance",),
        is_percent=True,
    ),
    _define(
        "damageFromLife",
        "Damage (Life)",
        _CHAIN,
        _L4,
        formulas.life_to_damage,
        fmt=formatting.SIGNED,
        description="Flat damage from total life (1% of life)",
        config=LifeConversionConfig(),
        dependencies=("totalHealth", "lifeBuffBonus", "lifeFromElement"),
    ),
    # -----------------------------------------------------------------------
    # Layer 4: eDPS buckets, then results
    #   Normal:  FLAT x (CHD + DB + SD) x SCHD x WAD x EMulti = DD
    #   Boss:    DD x BD
    #   Offhand: DD x (AD + AFFIN) x ED
    # -----------------------------------------------------------------------
    _define(
        "edpsFlat",
        "FLAT (Base Damage)",
        StatCategory.edps,
        _L4,
        formulas.sum_of(*formulas.FLAT_DAMAGE_SOURCES),
        fmt=formatting.INTEGER,
        description="Total flat damage: gear damage + health conversion + monogram flat bonuses",
        dependencies=formulas.FLAT_DAMAGE_SOURCES,
    ),
    _define(
        "edpsAdditiveMulti",
        "CHD + DB + SD",
        StatCategory.edps,
        _L4,
        formulas.edps_additive_multi,
        fmt=formatting.RATIO_PERCENT,
        description="Additive bucket: Crit Damage + Damage Bonus% + Stance Damage% + monogram damage%",
        config=StanceConfig(),
        dependencies=("critDamage", "damageBonus", *_STANCE_DAMAGE, *formulas.ADDITIVE_DAMAGE_SOURCES),
    ),
    _define(
        "edpsSCHD",
        "SCHD (Stance Crit)",
        StatCategory.edps,
        _L4,
        formulas.edps_stance_crit,
        fmt=formatting.RATIO_PERCENT,
        description="Stance Crit Hit Damage multiplier",
        config=StanceConfig(),
        dependencies=(*_STANCE_CRIT_DAMAGE, "bloodlustCritDamageBonus", "critDamageFromArmor"),
    ),
    _define(
        "edpsWAD",
        "WAD (Ability Damage)",
        StatCategory.edps,
        _L4,
        formulas.edps_weapon_ability,
        fmt=formatting.RATIO_PERCENT,
        description="Weapon Ability Damage: primary 200%, Q/R 400% + monogram bonuses",
        config=WeaponAbilityConfig(),
    ),
    _define(
        "edpsEMulti",
        "EMulti (Enchant)",
        StatCategory.edps,
        _L4,
        formulas.edps_enchant_multi,
        fmt=formatting.RATIO_PERCENT,
        description="Independent multipliers: class weapon, distance procs, shroud flat%",
        config=EnchantConfig(),
        dependencies=("distanceProcsDamageBonus", "distanceProcsNearDamageBonus", "shroudFlatDamageBonus"),
    ),
    _define(
        "edpsBD",
        "BD (Boss Damage)",
        StatCategory.edps,
        _L4,
        formulas.edps_boss,
        fmt=formatting.RATIO_PERCENT,
        description="Boss/Elite damage multiplier",
        dependencies=("bossBonus", "phasingBossDamageBonus"),
    ),
    _define(
        "edpsED",
        "ED (Elemental)",
        StatCategory.edps,
        _L4,
        formulas.edps_elemental,
        fmt=formatting.RATIO_PERCENT,
        description="Elemental damage multiplier (all sources additive)",
        dependencies=formulas.ELEMENT_SOURCES,
    ),
    _define(
        "edpsAD",
        "AD + Affinity",
        StatCategory.edps,
        _L4,
        formulas.edps_ability,
        fmt=formatting.RATIO_PERCENT,
        description="Offhand ability damage + skill tree affinity",
        config=AbilityDamageConfig(),
    ),
    _define(
        "edpsDDNormal",
        "Hit Damage (Normal)",
        StatCategory.edps_result,
        _L4,
        formulas.product_of("edpsFlat", "edpsAdditiveMulti", "edpsSCHD", "edpsWAD", "edpsEMulti"),
        fmt=formatting.thousands,
        description="FLAT x (CHD + DB + SD) x SCHD x WAD x EMulti",
        dependencies=("edpsFlat", "edpsAdditiveMulti", "edpsSCHD", "edpsWAD", "edpsEMulti"),
    ),
    _define(
        "edpsDDBoss",
        "Hit Damage (Boss)",
        StatCategory.edps_result,
        _L4,
        formulas.product_of("edpsDDNormal", "edpsBD"),
        fmt=formatting.thousands,
        description="Hit Damage x Boss Damage%",
        dependencies=("edpsDDNormal", "edpsBD"),
    ),
    _define(
        "edpsOffhandNormal",
        "Offhand Damage (Normal)",
        StatCategory.edps_result,
        _L4,
        formulas.product_of("edpsDDNormal", "edpsAD", "edpsED"),
        fmt=formatting.thousands,
        description="DD x (AD + Affinity) x Elemental Damage",
        dependencies=("edpsDDNormal", "edpsAD", "edpsED"),
    ),
    _define(
        "edpsOffhandBoss",
        "Offhand Damage (Boss)",
        StatCategory.edps_result,
        _L4,
        formulas.product_of("edpsDDBoss", "edpsAD", "edpsED"),
        fmt=formatting.thousands,
        description="Boss DD x (AD + Affinity) x Elemental Damage",
        dependencies=("edpsDDBoss", "edpsAD", "edpsED"),
    ),
)
