"""
Catalog data models — priced items, unit conversions, staff, overheads, settings.

These are the records a business maintains and the costing engine reads.
"""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, Field


def new_id() -> str:
    """Generate a new opaque record identifier."""
    return uuid.uuid4().hex


class ItemCategory(str, Enum):
    """Categories for purchasable items."""

    PRODUCE = "Produce"
    MEAT = "Meat"
    DAIRY = "Dairy"
    PANTRY = "Pantry"
    BAKERY = "Bakery"
    BEVERAGES = "Beverages"
    SEAFOOD = "Seafood"


class PricedItem(BaseModel):
    """A purchasable item with a unit cost and a usable yield.

    ``yield_percentage`` is the usable fraction after trim/prep loss; a yield of
    50 doubles the true cost of every usable unit.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    category: ItemCategory = ItemCategory.PANTRY
    unit: str = Field(min_length=1, description="Unit of measure, e.g. kg, L, unit")
    unit_cost: float = Field(ge=0, description="Currency per unit")
    yield_percentage: float = Field(default=100.0, gt=0, le=100)
    quantity_on_hand: float = Field(default=0.0, ge=0)
    low_stock_threshold: float = Field(default=0.0, ge=0)
    supplier_id: str | None = None

    @property
    def true_unit_cost(self) -> float:
        """Unit cost adjusted for yield loss."""
        return self.unit_cost / (self.yield_percentage / 100)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity_on_hand <= self.low_stock_threshold

    @property
    def stock_value(self) -> float:
        return self.quantity_on_hand * self.unit_cost


class UnitConversion(BaseModel):
    """quantity in ``to_unit`` = quantity in ``from_unit`` × ``factor``."""

    id: str = Field(default_factory=new_id)
    from_unit: str = Field(min_length=1)
    to_unit: str = Field(min_length=1)
    factor: float = Field(gt=0)
    item_id: str | None = Field(default=None, description="Restrict to one priced item")


class StaffMember(BaseModel):
    """A member of staff and their monthly salary."""

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    monthly_salary: float = Field(ge=0)


class OverheadType(str, Enum):
    """Overhead cost pools."""

    FIXED = "Fixed"
    VARIABLE = "Variable"


class Overhead(BaseModel):
    """A monthly overhead cost (rent, gas, electricity, ...)."""

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    type: OverheadType
    monthly_cost: float = Field(ge=0)


class BusinessSettings(BaseModel):
    """Business-wide figures used by labour and overhead allocation.

    Passed explicitly to every cost computation.
    """

    working_days_per_month: float = Field(default=22, ge=0)
    hours_per_day: float = Field(default=8, ge=0)
    total_dishes_produced: float = Field(default=0, ge=0, description="Dishes produced per month")
    total_dishes_sold: float = Field(default=0, ge=0, description="Dishes sold per month")
    food_cost_target_pct: float = Field(default=30.0, ge=0, le=100)

    @property
    def monthly_working_hours(self) -> float:
        return self.working_days_per_month * self.hours_per_day
