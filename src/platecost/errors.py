"""
Error types raised by the costing engine and the catalog.

Degradations (unresolved units, stale ingredient references) are not errors;
they are reported as ``CostWarning`` entries on the breakdown instead.
"""

from __future__ import annotations


class PlateCostError(Exception):
    """Base class for all PlateCost errors."""


class MissingReferenceError(PlateCostError, ValueError):
    """A referenced priced item, recipe, staff member or menu item does not exist."""

    def __init__(self, kind: str, ref_id: str) -> None:
        self.kind = kind
        self.ref_id = ref_id
        super().__init__(f"{kind} {ref_id!r} not found")


class CyclicRecipeError(PlateCostError):
    """A sub-recipe chain loops back to one of its ancestors."""

    def __init__(self, path: list[str]) -> None:
        self.path = list(path)
        super().__init__("Circular recipe reference detected: " + " -> ".join(self.path))


class ReferenceInUseError(PlateCostError, ValueError):
    """An entity cannot be deleted because other records still reference it."""


class InsufficientStockError(PlateCostError, ValueError):
    """A sale would drive an item's stock below zero."""

    def __init__(self, item_id: str, available: float, required: float) -> None:
        self.item_id = item_id
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient stock for {item_id!r}: {available:g} available, {required:g} required"
        )
