"""Pytest fixtures shared across stat engine tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from stat_engine.categories import Layer, StatCategory
from stat_engine.configs import FormulaConfig, PerStackConfig, RatioConfig, StackConfig
from stat_engine.definitions import ComputeFn, DerivedStatDefinition
from stat_engine.formatting import INTEGER
from stat_engine.formulas import per_stack, ratio, stacks


@pytest.fixture
def strength_base() -> DerivedStatDefinition:
    """Return a minimal base-layer strength definition."""

    return DerivedStatDefinition(
        id="strength",
        name="Strength",
        category=StatCategory.attributes,
        layer=Layer.BASE,
        description="Strength",
        format=INTEGER,
    )


@pytest.fixture
def make_derived():
    """Return a factory for small derived definitions used by registry tests."""

    def _make(
        stat_id: str,
        layer: Layer,
        *,
        dependencies: tuple[str, ...] = (),
        source_stat: str | None = None,
    ) -> DerivedStatDefinition:
        compute: ComputeFn
        config: FormulaConfig
        if source_stat is not None:
            compute = ratio
            config = RatioConfig(source_stat=source_stat, ratio=1, base_value=1)
        elif dependencies:
            compute = per_stack
            config = PerStackConfig(source_stat=dependencies[0], per_stack=1)
        else:
            compute = stacks
            config = StackConfig(enabled=True, max_stacks=10, current_stacks=10)
        return DerivedStatDefinition(
            id=stat_id,
            name=stat_id,
            category=StatCategory.monogram_buff,
            layer=layer,
            description=stat_id,
            format=INTEGER,
            compute=compute,
            default_config=config,
            dependencies=dependencies,
        )

    return _make


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no file, packaged-data, or script IO.
    - `integration`: tests that read files or run developer scripts.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
