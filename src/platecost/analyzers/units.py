"""
Unit Conversion Table — resolve factors between measurement units.

Resolution order for ``resolve(from_unit, to_unit, item_id)``:

1. identical units → 1
2. item-specific custom conversion
3. generic custom conversion
4. built-in table (mass, volume, count)

Custom conversions are indexed in both directions: storing A→B with factor f
also makes B→A resolvable as 1/f, unless an explicit B→A was stored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from platecost.models.catalog import UnitConversion

logger = logging.getLogger("platecost.analyzers.units")


# quantity_in_to = quantity_in_from × factor
BUILTIN_CONVERSIONS: dict[str, dict[str, float]] = {
    # Mass
    "kg": {"g": 1000, "lb": 2.20462, "oz": 35.274},
    "g": {"kg": 0.001, "oz": 0.035274},
    "lb": {"kg": 0.453592, "g": 453.592, "oz": 16},
    "oz": {"g": 28.3495, "kg": 0.02835, "lb": 0.0625},
    # Volume
    "l": {"ml": 1000, "gal": 0.264172},
    "ml": {"l": 0.001},
    "gal": {"l": 3.78541},
    # Count
    "dozen": {"unit": 12},
    "unit": {"dozen": 1 / 12},
}


def normalize_unit(unit: str) -> str:
    """Units compare case-insensitively, ignoring surrounding whitespace."""
    return unit.strip().lower()


class UnitConversionTable:
    """Built-in and business-defined unit conversions.

    Usage::

        table = UnitConversionTable([
            UnitConversion(from_unit="box", to_unit="unit", factor=24),
            UnitConversion(from_unit="bunch", to_unit="g", factor=150, item_id="parsley"),
        ])
        table.resolve("kg", "g")            # 1000.0
        table.resolve("unit", "box")        # 1/24, derived inverse
        table.resolve("bunch", "g", "mint") # None
    """

    def __init__(self, conversions: Iterable[UnitConversion] = ()) -> None:
        self._conversions: dict[str, UnitConversion] = {}
        self._explicit: dict[tuple[str | None, str, str], float] = {}
        self._derived: dict[tuple[str | None, str, str], float] = {}
        for conversion in conversions:
            self.add(conversion)

    @property
    def conversions(self) -> list[UnitConversion]:
        return list(self._conversions.values())

    def add(self, conversion: UnitConversion) -> UnitConversion:
        """Add or replace a custom conversion."""
        self._conversions[conversion.id] = conversion
        self._reindex()
        return conversion

    def remove(self, conversion_id: str) -> bool:
        """Remove a custom conversion. Returns False if it did not exist."""
        if self._conversions.pop(conversion_id, None) is None:
            return False
        self._reindex()
        return True

    def _reindex(self) -> None:
        self._explicit.clear()
        self._derived.clear()
        for conv in self._conversions.values():
            src = normalize_unit(conv.from_unit)
            dst = normalize_unit(conv.to_unit)
            self._explicit[(conv.item_id, src, dst)] = conv.factor
            self._derived[(conv.item_id, dst, src)] = 1 / conv.factor

    def _lookup(self, item_id: str | None, src: str, dst: str) -> float | None:
        key = (item_id, src, dst)
        if key in self._explicit:
            return self._explicit[key]
        return self._derived.get(key)

    def resolve(self, from_unit: str, to_unit: str, item_id: str | None = None) -> float | None:
        """Factor converting ``from_unit`` into ``to_unit``, or None if unknown."""
        src = normalize_unit(from_unit)
        dst = normalize_unit(to_unit)
        if src == dst:
            return 1.0

        if item_id is not None:
            factor = self._lookup(item_id, src, dst)
            if factor is not None:
                return factor

        factor = self._lookup(None, src, dst)
        if factor is not None:
            return factor

        builtin = BUILTIN_CONVERSIONS.get(src, {}).get(dst)
        if builtin is not None:
            return float(builtin)
        reverse = BUILTIN_CONVERSIONS.get(dst, {}).get(src)
        if reverse is not None:
            return 1 / reverse

        return None

    def convert(
        self, quantity: float, from_unit: str, to_unit: str, item_id: str | None = None
    ) -> float | None:
        """Convert a quantity, or None if no conversion is known."""
        factor = self.resolve(from_unit, to_unit, item_id)
        if factor is None:
            return None
        return quantity * factor

    def factor_or_default(
        self, from_unit: str, to_unit: str, item_id: str | None = None
    ) -> tuple[float, bool]:
        """Best-effort factor: ``(factor, True)`` or ``(1.0, False)`` when unresolved."""
        factor = self.resolve(from_unit, to_unit, item_id)
        if factor is None:
            logger.warning(
                "No unit conversion from %s to %s (item=%s); using factor 1",
                from_unit,
                to_unit,
                item_id,
            )
            return 1.0, False
        return factor, True
