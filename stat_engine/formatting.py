"""Display formatters for stat values.

Formatters are plain callables `(float) -> str` attached to each stat
definition. They are presentation-only: the engine never reads formatted
strings back, and formatting never changes the stored numeric value.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

Formatter = Callable[[float], str]


def flat(*, decimals: int = 0, signed: bool = False) -> Formatter:
    """Return a formatter for plain numbers (e.g. "120" or "+120").

    Args:
        decimals: Number of digits after the decimal point.
        signed: When True, non-negative values are prefixed with "+".

    Returns:
        Formatter callable.
    """

    sign = "+" if signed else ""

    def _format(value: float) -> str:
        return f"{value:{sign}.{decimals}f}"

    return _format


def percent(*, decimals: int = 0, signed: bool = False) -> Formatter:
    """Return a formatter for percentage-point values (50 -> "50%")."""

    sign = "+" if signed else ""

    def _format(value: float) -> str:
        return f"{value:{sign}.{decimals}f}%"

    return _format


def ratio_percent(*, decimals: int = 0) -> Formatter:
    """Return a formatter for multiplier ratios shown as percent (1.5 -> "150%")."""

    def _format(value: float) -> str:
        return f"{value * 100:.{decimals}f}%"

    return _format


def multiplier(*, decimals: int = 0, prefix: bool = False) -> Formatter:
    """Return a formatter for multipliers.

    Args:
        decimals: Number of digits after the decimal point.
        prefix: When True the "x" leads the number ("x1.25"); otherwise it
            trails it ("2x").

    Returns:
        Formatter callable.
    """

    def _format(value: float) -> str:
        number = f"{value:.{decimals}f}"
        return f"x{number}" if prefix else f"{number}x"

    return _format


def multiplier_or_inactive(*, decimals: int = 0) -> Formatter:
    """Return a multiplier formatter that renders zero as "Inactive"."""

    active = multiplier(decimals=decimals)

    def _format(value: float) -> str:
        return active(value) if value > 0 else "Inactive"

    return _format


def per_second(*, decimals: int = 1) -> Formatter:
    """Return a formatter for signed per-second rates ("+1.5/s")."""

    def _format(value: float) -> str:
        return f"{value:+.{decimals}f}/s"

    return _format


def active_flag(value: float) -> str:
    """Render a display flag as "Active" / "Inactive"."""

    return "Active" if value > 0 else "Inactive"


def thousands(value: float) -> str:
    """Render a large whole number with thousands separators."""

    return f"{value:,.0f}"


INTEGER: Final[Formatter] = flat()
SIGNED: Final[Formatter] = flat(signed=True)
PERCENT: Final[Formatter] = percent()
SIGNED_PERCENT: Final[Formatter] = percent(signed=True)
RATIO_PERCENT: Final[Formatter] = ratio_percent()
