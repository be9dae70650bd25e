#!/usr/bin/env python3
"""Evaluate a character sheet and explain one or more derived stats.

This is a developer-facing script for checking formula changes. It reads a
YAML (or JSON) input file:

    base_stats: {strength: 1000, strengthBonus: 50}
    modifiers: [DarkEssence, GainCritChanceForHighest]
    config_overrides: {phasingStacks: {enabled: true, currentStacks: 25}}

and prints a JSON report with the requested stats' values, formatted values,
and dependency chains.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from stat_engine import calculate_derived_stats_detailed, get_dependency_chain
from stat_engine.configs import normalize_key
from stat_engine.errors import StatEngineError
from stat_engine.modifiers import build_config_overrides, load_modifier_catalog


def build_report(payload: dict[str, Any], stat_ids: list[str], *, catalog_path: str | None = None) -> dict[str, Any]:
    """Evaluate an input payload and return a JSON-serializable report.

    Args:
        payload: Decoded input file.
        stat_ids: Stats to explain; all derived stats when empty.
        catalog_path: Optional modifier catalog path.

    Returns:
        A dictionary with `stats` (one entry per explained stat) and the
        `config_overrides` that were applied.
    """

    base_stats = payload.get("base_stats") or {}
    overrides: dict[str, dict[str, Any]] = {}
    modifiers = payload.get("modifiers") or []
    if modifiers:
        overrides.update(build_config_overrides(modifiers, catalog=load_modifier_catalog(catalog_path)))
    for stat_id, patch in (payload.get("config_overrides") or {}).items():
        overrides.setdefault(stat_id, {}).update({normalize_key(key): value for key, value in patch.items()})

    result = calculate_derived_stats_detailed(base_stats, overrides)
    rows = {row.id: row for row in result.detailed}
    selected = stat_ids or [row.id for row in result.detailed if int(row.layer) > 0]

    stats: dict[str, Any] = {}
    for stat_id in selected:
        row = rows.get(stat_id)
        stats[stat_id] = {
            "value": result.values.get(stat_id, 0.0),
            "formatted_value": row.formatted_value if row is not None else None,
            "layer": int(row.layer) if row is not None else None,
            "dependency_chain": get_dependency_chain(stat_id),
        }
    return {"config_overrides": overrides, "stats": stats}


def main() -> int:
    """Run the evaluator and print a JSON report."""

    parser = argparse.ArgumentParser(description="Evaluate derived stats for a character sheet.")
    parser.add_argument("input", help="Path to a YAML or JSON file with base_stats / modifiers / config_overrides.")
    parser.add_argument("--stat", action="append", default=[], help="Derived stat id to explain (repeatable).")
    parser.add_argument("--catalog", default=None, help="Path to a modifier catalog YAML file.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    payload = yaml.safe_load(Path(args.input).read_text(encoding="utf-8")) or {}
    try:
        report = build_report(payload, args.stat, catalog_path=args.catalog)
    except StatEngineError as exc:
        print(json.dumps({"error": str(exc)}, indent=2))
        return 1

    print(json.dumps(report, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
