"""
Labour Cost Resolver — hourly labour rate and labour cost per batch.

All strategies reduce to ``hourly_rate × labour_minutes / 60``:

- blended: total monthly salary of all staff / business working hours
- custom: the recipe's own salary / (its days × its hours), each defaulting
  to the business settings when unset
- staff: the assigned member's salary / business working hours

A zero denominator yields a rate of 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from platecost.models.catalog import BusinessSettings
from platecost.models.recipe import CustomLabour, Recipe, StaffAssignedLabour

if TYPE_CHECKING:
    from platecost.catalog import Catalog

logger = logging.getLogger("platecost.analyzers.labour")


def _rate(monthly_salary: float, days: float, hours: float) -> float:
    working_hours = days * hours
    if working_hours <= 0:
        return 0.0
    return monthly_salary / working_hours


@dataclass
class LabourRate:
    """Resolved hourly rate and, when degraded, the reason."""

    hourly_rate: float
    method: str
    warning: str | None = None


class LabourCostResolver:
    """Compute labour cost for a recipe batch."""

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def hourly_rate(self, recipe: Recipe, settings: BusinessSettings) -> LabourRate:
        strategy = recipe.labour

        if isinstance(strategy, CustomLabour):
            days = strategy.working_days or settings.working_days_per_month
            hours = strategy.working_hours or settings.hours_per_day
            return LabourRate(_rate(strategy.salary, days, hours), strategy.method)

        if isinstance(strategy, StaffAssignedLabour):
            member = self.catalog.get_staff_member(strategy.staff_id)
            if member is None:
                message = (
                    f"Recipe {recipe.name!r} is assigned to unknown staff member "
                    f"{strategy.staff_id!r}; labour costed at 0"
                )
                logger.warning(message)
                return LabourRate(0.0, strategy.method, message)
            return LabourRate(
                _rate(member.monthly_salary, settings.working_days_per_month, settings.hours_per_day),
                strategy.method,
            )

        # Blended
        total_salary = sum(s.monthly_salary for s in self.catalog.staff_members())
        return LabourRate(
            _rate(total_salary, settings.working_days_per_month, settings.hours_per_day),
            strategy.method,
        )

    def compute(self, recipe: Recipe, settings: BusinessSettings) -> float:
        """Labour cost of one batch."""
        return self.compute_with_rate(recipe, settings)[0]

    def compute_with_rate(
        self, recipe: Recipe, settings: BusinessSettings
    ) -> tuple[float, LabourRate]:
        rate = self.hourly_rate(recipe, settings)
        return rate.hourly_rate * recipe.labour_minutes / 60, rate
