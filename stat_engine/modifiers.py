"""Modifier effect catalog and config override builder.

Gear modifiers ("monograms") do not change base stats. Instead each one
enables or re-parameterizes one or more derived-stat formulas. The mapping
lives in a YAML catalog (`data/modifier_effects.yml` by default):

    modifiers:
      Bloodlust.Base:
        display_name: Bloodlust
        description: optional tooltip text
        effects:
          - stat: bloodlustStacks
            config: {enabled: true, max_stacks: 100, current_stacks: 100}

`build_config_overrides` turns the list of equipped modifier ids into the
`config_overrides` mapping accepted by the evaluation engine.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from .configs import apply_patch, normalize_key
from .errors import ConfigOverrideError, ModifierCatalogError
from .registry import DEFAULT_REGISTRY, StatRegistry

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_RESOURCE = "modifier_effects.yml"


@dataclass(frozen=True, slots=True)
class ModifierEffect:
    """One derived-stat override applied by a modifier.

    Args:
        stat_id: Derived stat whose config is patched.
        config: Partial config patch, keys normalized to snake_case.
    """

    stat_id: str
    config: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class ModifierDefinition:
    """Catalog entry for one modifier id."""

    modifier_id: str
    display_name: str
    description: str | None
    effects: tuple[ModifierEffect, ...]


class ModifierCatalog:
    """Lookup helpers for modifier effect definitions."""

    def __init__(self, definitions: Iterable[ModifierDefinition]) -> None:
        """Initialize a catalog, rejecting duplicate modifier ids."""

        self._definitions: dict[str, ModifierDefinition] = {}
        for definition in definitions:
            if definition.modifier_id in self._definitions:
                raise ModifierCatalogError(f"Duplicate modifier id: {definition.modifier_id!r}")
            self._definitions[definition.modifier_id] = definition

    def __contains__(self, modifier_id: object) -> bool:
        return modifier_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def get(self, modifier_id: str) -> ModifierDefinition | None:
        """Return a modifier definition, or None when missing."""

        return self._definitions.get(modifier_id)

    def modifier_ids(self) -> tuple[str, ...]:
        """Return all modifier ids in a stable order."""

        return tuple(sorted(self._definitions))

    def effect_summary(self, modifier_id: str) -> str | None:
        """Return short tooltip text for a modifier.

        Args:
            modifier_id: Modifier id as found in save data.

        Returns:
            "Display Name: description", just the display name when there is
            no description, or None for unknown ids.
        """

        definition = self._definitions.get(modifier_id)
        if definition is None:
            return None
        if definition.description:
            return f"{definition.display_name}: {definition.description}"
        return definition.display_name

    def modifiers_for_stat(self, stat_id: str) -> tuple[str, ...]:
        """Return the ids of modifiers with at least one effect on `stat_id`."""

        return tuple(
            definition.modifier_id
            for definition in self._definitions.values()
            if any(effect.stat_id == stat_id for effect in definition.effects)
        )


def parse_modifier_catalog(
    payload: Mapping[str, Any], *, registry: StatRegistry = DEFAULT_REGISTRY
) -> ModifierCatalog:
    """Build a catalog from a decoded YAML/JSON payload.

    Args:
        payload: Mapping with a top-level `modifiers` mapping.
        registry: Registry used to validate effect targets and config patches.

    Returns:
        A validated ModifierCatalog.

    Raises:
        ModifierCatalogError: When an entry is malformed, targets an unknown
            or base stat, or carries a config patch its formula rejects.
    """

    modifiers = payload.get("modifiers")
    if not isinstance(modifiers, Mapping):
        raise ModifierCatalogError("Catalog payload must contain a 'modifiers' mapping.")

    definitions: list[ModifierDefinition] = []
    for modifier_id, entry in modifiers.items():
        if not isinstance(entry, Mapping):
            raise ModifierCatalogError(f"Modifier {modifier_id!r} must be a mapping.")
        display_name = entry.get("display_name")
        if not isinstance(display_name, str) or not display_name:
            raise ModifierCatalogError(f"Modifier {modifier_id!r} is missing display_name.")
        description = entry.get("description")
        if description is not None and not isinstance(description, str):
            raise ModifierCatalogError(f"Modifier {modifier_id!r} description must be a string.")

        effects = tuple(
            _parse_effect(str(modifier_id), raw_effect, registry) for raw_effect in entry.get("effects") or ()
        )
        definitions.append(
            ModifierDefinition(
                modifier_id=str(modifier_id),
                display_name=display_name,
                description=description,
                effects=effects,
            )
        )
    return ModifierCatalog(definitions)


def load_modifier_catalog(
    path: str | Path | None = None, *, registry: StatRegistry = DEFAULT_REGISTRY
) -> ModifierCatalog:
    """Load a modifier catalog from YAML.

    Args:
        path: Catalog file. When None, the packaged default catalog is used.
        registry: Registry used to validate effect targets.

    Returns:
        A validated ModifierCatalog.
    """

    if path is None:
        resource = resources.files("stat_engine").joinpath("data").joinpath(DEFAULT_CATALOG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    else:
        raw = Path(path).read_text(encoding="utf-8")
    payload = yaml.safe_load(raw) or {}
    if not isinstance(payload, Mapping):
        raise ModifierCatalogError("Catalog file must contain a mapping at the top level.")
    return parse_modifier_catalog(payload, registry=registry)


@cache
def default_modifier_catalog() -> ModifierCatalog:
    """Return the packaged catalog, loaded once per process."""

    return load_modifier_catalog()


def build_config_overrides(
    active_modifier_ids: Iterable[str],
    *,
    catalog: ModifierCatalog | None = None,
    registry: StatRegistry = DEFAULT_REGISTRY,
) -> dict[str, dict[str, Any]]:
    """Translate equipped modifier ids into evaluation config overrides.

    Repeated ids (the same modifier on several items) collapse to a single
    set of overrides. Every override is shaped
    `{enabled: True, ...parameters, instance_count}`, where `instance_count`
    is the number of equipped instances summed across every modifier that
    targets the same stat. Formulas without a switch or an instance count
    ignore those keys.

    Args:
        active_modifier_ids: Modifier ids from equipped items, repeats allowed.
        catalog: Catalog to consult; defaults to the packaged catalog.
        registry: Registry the overrides are meant for.

    Returns:
        `{stat_id: {field: value}}` suitable for `calculate_derived_stats`.
    """

    catalog = catalog if catalog is not None else default_modifier_catalog()
    counts = Counter(active_modifier_ids)

    overrides: dict[str, dict[str, Any]] = {}
    for modifier_id, count in counts.items():
        definition = catalog.get(modifier_id)
        if definition is None:
            logger.debug("Skipping unknown modifier id %r", modifier_id)
            continue
        for effect in definition.effects:
            target = registry.get(effect.stat_id)
            if target is None:
                logger.debug("Skipping effect of %r on unregistered stat %r", modifier_id, effect.stat_id)
                continue
            override = overrides.setdefault(effect.stat_id, {})
            override.update(effect.config)
            override["enabled"] = True
            override["instance_count"] = override.get("instance_count", 0) + count
    return overrides


def _parse_effect(modifier_id: str, raw_effect: Any, registry: StatRegistry) -> ModifierEffect:
    if not isinstance(raw_effect, Mapping):
        raise ModifierCatalogError(f"Modifier {modifier_id!r} has a non-mapping effect: {raw_effect!r}")
    stat_id = raw_effect.get("stat")
    definition = registry.get(stat_id) if isinstance(stat_id, str) else None
    if definition is None or definition.is_base:
        raise ModifierCatalogError(f"Modifier {modifier_id!r} targets unknown derived stat {stat_id!r}")

    config = raw_effect.get("config") or {}
    if not isinstance(config, Mapping):
        raise ModifierCatalogError(f"Modifier {modifier_id!r} effect on {stat_id!r} has a non-mapping config")
    try:
        resolved = apply_patch(definition.id, definition.default_config, config)
        registry.check_config_reads(definition, resolved)
    except ConfigOverrideError as exc:
        raise ModifierCatalogError(f"Modifier {modifier_id!r}: {exc}") from exc
    return ModifierEffect(
        stat_id=definition.id,
        config={normalize_key(str(key)): value for key, value in config.items()},
    )
