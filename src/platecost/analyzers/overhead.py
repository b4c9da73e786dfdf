"""
Overhead Allocator — spread monthly overheads over dishes.

Variable overhead is divided by dishes produced, fixed overhead by dishes
sold; each per-dish figure is 0 when its volume is 0. The batch allocation is
the per-dish figure times the recipe's servings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from platecost.models.catalog import BusinessSettings, OverheadType
from platecost.models.recipe import Recipe

if TYPE_CHECKING:
    from platecost.catalog import Catalog


@dataclass
class OverheadAllocation:
    """Overhead allocated to one batch."""

    variable: float = 0.0
    fixed: float = 0.0

    @property
    def total(self) -> float:
        return self.variable + self.fixed


class OverheadAllocator:
    """Allocate fixed and variable overhead pools to recipes."""

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def totals(self) -> dict[OverheadType, float]:
        """Monthly cost of each overhead pool."""
        pools = {OverheadType.FIXED: 0.0, OverheadType.VARIABLE: 0.0}
        for overhead in self.catalog.overheads():
            pools[overhead.type] += overhead.monthly_cost
        return pools

    def per_dish(self, settings: BusinessSettings) -> OverheadAllocation:
        pools = self.totals()
        variable = (
            pools[OverheadType.VARIABLE] / settings.total_dishes_produced
            if settings.total_dishes_produced > 0
            else 0.0
        )
        fixed = (
            pools[OverheadType.FIXED] / settings.total_dishes_sold
            if settings.total_dishes_sold > 0
            else 0.0
        )
        return OverheadAllocation(variable=variable, fixed=fixed)

    def allocate(self, recipe: Recipe, settings: BusinessSettings) -> OverheadAllocation:
        per_dish = self.per_dish(settings)
        return OverheadAllocation(
            variable=per_dish.variable * recipe.servings,
            fixed=per_dish.fixed * recipe.servings,
        )
