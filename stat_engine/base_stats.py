"""Layer-0 base attribute definitions.

Base stats are already-summed totals supplied by upstream collaborators
(gear, character sheet). They pass through evaluation unchanged; the entries
here exist for display metadata and for `base_stat_ids()`.

Percent-style base stats are whole percentage points (50 means 50%).
"""

from __future__ import annotations

from typing import Final

from . import formatting
from .categories import Layer, StatCategory
from .definitions import DerivedStatDefinition
from .formatting import Formatter

ATTRIBUTES: Final[tuple[str, ...]] = (
    "strength",
    "dexterity",
    "wisdom",
    "vitality",
    "endurance",
    "agility",
    "luck",
    "stamina",
)

STANCES: Final[tuple[str, ...]] = (
    "magery",
    "maul",
    "archery",
    "unarmed",
    "sword",
    "spear",
    "scythe",
    "twohand",
)

_STANCE_LABELS: Final[dict[str, str]] = {
    "magery": "Magery",
    "maul": "Mauls",
    "archery": "Archery",
    "unarmed": "Unarmed",
    "sword": "Sword",
    "spear": "Spear",
    "scythe": "Scythes",
    "twohand": "Axes",
}

_PERCENT_1DP: Final[Formatter] = formatting.percent(decimals=1)
_MULTIPLIER_2DP: Final[Formatter] = formatting.multiplier(decimals=2, prefix=True)


def _base(
    stat_id: str,
    name: str,
    category: StatCategory,
    fmt: Formatter,
    *,
    description: str | None = None,
    is_percent: bool = False,
) -> DerivedStatDefinition:
    return DerivedStatDefinition(
        id=stat_id,
        name=name,
        category=category,
        layer=Layer.BASE,
        description=description or name,
        format=fmt,
        is_percent=is_percent,
    )


def _attribute_definitions() -> list[DerivedStatDefinition]:
    rows: list[DerivedStatDefinition] = []
    for attribute in ATTRIBUTES:
        label = attribute.capitalize()
        rows.append(_base(attribute, label, StatCategory.attributes, formatting.SIGNED))
        rows.append(
            _base(
                f"{attribute}Bonus",
                f"{label} Bonus",
                StatCategory.attributes,
                formatting.SIGNED_PERCENT,
                is_percent=True,
            )
        )
    return rows


def _stance_definitions() -> list[DerivedStatDefinition]:
    rows: list[DerivedStatDefinition] = []
    for stance in STANCES:
        label = _STANCE_LABELS[stance]
        rows.extend(
            (
                _base(
                    f"{stance}Damage",
                    f"{label} Damage",
                    StatCategory.stance,
                    formatting.SIGNED_PERCENT,
                    is_percent=True,
                ),
                _base(
                    f"{stance}CritDamage",
                    f"{label} Critical Damage",
                    StatCategory.stance,
                    formatting.SIGNED_PERCENT,
                    is_percent=True,
                ),
                _base(
                    f"{stance}CritChance",
                    f"{label} Critical Chance",
                    StatCategory.stance,
                    _PERCENT_1DP,
                    is_percent=True,
                ),
            )
        )
    return rows


BASE_STAT_DEFINITIONS: Final[tuple[DerivedStatDefinition, ...]] = (
    *_attribute_definitions(),
    # Offense
    _base("damage", "Damage", StatCategory.offense, formatting.SIGNED),
    _base("damageBonus", "Damage Bonus", StatCategory.offense, formatting.SIGNED_PERCENT, is_percent=True),
    _base("critChance", "Critical Chance", StatCategory.offense, _PERCENT_1DP, is_percent=True),
    _base("critDamage", "Critical Damage", StatCategory.offense, formatting.SIGNED_PERCENT, is_percent=True),
    _base("attackSpeed", "Attack Speed", StatCategory.offense, formatting.SIGNED_PERCENT, is_percent=True),
    _base(
        "bossBonus",
        "Boss Damage Bonus",
        StatCategory.offense,
        formatting.SIGNED_PERCENT,
        is_percent=True,
    ),
    *_stance_definitions(),
    # Defense
    _base("armor", "Armor", StatCategory.defense, formatting.INTEGER),
    _base("armorBonus", "Armor Bonus", StatCategory.defense, _PERCENT_1DP, is_percent=True),
    _base("health", "Health", StatCategory.defense, formatting.SIGNED),
    _base(
        "healthBonus",
        "Health Bonus",
        StatCategory.defense,
        formatting.SIGNED_PERCENT,
        description="Maximum health bonus",
        is_percent=True,
    ),
    _base(
        "healthRegen",
        "Health Regen",
        StatCategory.defense,
        formatting.per_second(),
        description="Health regeneration per second",
    ),
    _base(
        "blockChance",
        "Block Chance",
        StatCategory.defense,
        _PERCENT_1DP,
        description="Chance to block attacks",
        is_percent=True,
    ),
    _base(
        "damageReduction",
        "Damage Reduction",
        StatCategory.resistances,
        formatting.PERCENT,
        description="Resistance to damage (<= 50%)",
        is_percent=True,
    ),
    # Elemental
    _base("fireDamageBonus", "Fire Damage", StatCategory.elemental, _PERCENT_1DP, is_percent=True),
    _base("arcaneDamageBonus", "Arcane Damage", StatCategory.elemental, _PERCENT_1DP, is_percent=True),
    _base("lightningDamageBonus", "Lightning Damage", StatCategory.elemental, _PERCENT_1DP, is_percent=True),
    # Utility
    _base("xpBonus", "XP Bonus", StatCategory.utility, formatting.percent(decimals=1, signed=True), is_percent=True),
    _base("energy", "Energy", StatCategory.utility, formatting.SIGNED),
    _base("energyRegen", "Energy Regen", StatCategory.utility, formatting.per_second()),
    _base(
        "extraInventorySlots",
        "Extra Inventory Slots",
        StatCategory.utility,
        formatting.INTEGER,
        description="Bonus inventory slots from skill tree, cards and similar sources",
    ),
    # Abilities
    _base(
        "chainLightningDamage",
        "Chain Lightning Damage",
        StatCategory.abilities,
        _MULTIPLIER_2DP,
        description="Chain Lightning damage multiplier",
    ),
    _base(
        "fieryTotemDamage",
        "Fiery Totem Damage",
        StatCategory.abilities,
        _MULTIPLIER_2DP,
        description="Fiery Totem damage multiplier",
    ),
    _base(
        "dragonFlameDamage",
        "Dragon Flame Damage",
        StatCategory.abilities,
        _MULTIPLIER_2DP,
        description="Dragon Flame damage multiplier",
    ),
    _base(
        "enemyDeathDamage",
        "Enemy Death Damage",
        StatCategory.abilities,
        _MULTIPLIER_2DP,
        description="Enemy Death damage multiplier",
    ),
)
