"""
Menu and sales models.

Sale lines freeze price and cost "at time" of sale so later cost changes do
not rewrite history.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from platecost.models.catalog import new_id


class MenuItem(BaseModel):
    """A dish on the menu, backed by a recipe."""

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    recipe_id: str
    sale_price: float = Field(ge=0)
    sales_count: int = Field(default=0, ge=0)


class SaleLine(BaseModel):
    """A requested line of a sale."""

    menu_item_id: str
    quantity: int = Field(gt=0)


class SaleItem(BaseModel):
    """A recorded line of a sale."""

    menu_item_id: str
    quantity: int
    sale_price_at_time: float
    cost_at_time: float

    @property
    def revenue(self) -> float:
        return self.sale_price_at_time * self.quantity

    @property
    def cost(self) -> float:
        return self.cost_at_time * self.quantity


class Sale(BaseModel):
    """A completed sale."""

    id: str = Field(default_factory=new_id)
    sale_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    items: list[SaleItem] = Field(default_factory=list)
    total_revenue: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0
    warnings: list[str] = Field(default_factory=list)
