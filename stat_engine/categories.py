"""Shared stat category and layer definitions.

StatCategory is a presentation grouping only; it never influences evaluation
order. Layer is the evaluation stage that bounds which stats a formula may
read.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class StatCategory(StrEnum):
    """Display grouping for a stat.

    Values are stable identifiers used by UI sections.
    """

    attributes = "attributes"
    totals = "totals"
    offense = "offense"
    stance = "stance"
    defense = "defense"
    resistances = "resistances"
    elemental = "elemental"
    abilities = "abilities"
    utility = "utility"
    monogram = "monogram"
    monogram_buff = "monogram-buff"
    monogram_display = "monogram-display"
    monogram_chain = "monogram-chain"
    conversion = "conversion"
    final = "final"
    edps = "edps"
    edps_result = "edps-result"
    utility_derived = "utility-derived"
    chained = "chained"


class Layer(IntEnum):
    """Evaluation stage of a stat definition.

    A formula may read base stats, stats in a strictly lower layer, or stats
    declared earlier in its own layer.
    """

    BASE = 0
    TOTALS = 1
    PRIMARY_DERIVED = 2
    SECONDARY_DERIVED = 3
    TERTIARY_DERIVED = 4
