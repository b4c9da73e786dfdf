"""
Recipe data models — recipes, ingredient lines and labour strategies.

Ingredient lines and labour strategies are tagged unions so each variant
carries exactly the fields it needs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from platecost.models.catalog import new_id


class ItemIngredient(BaseModel):
    """A quantity of a priced item, per full batch of the parent recipe."""

    type: Literal["item"] = "item"
    item_id: str
    quantity: float = Field(ge=0)
    unit: str = Field(min_length=1)
    yield_percentage: float | None = Field(
        default=None, gt=0, le=100, description="Overrides the item's own yield"
    )


class RecipeIngredient(BaseModel):
    """A quantity of another recipe's output, per full batch of the parent recipe."""

    type: Literal["recipe"] = "recipe"
    item_id: str = Field(description="Id of the sub-recipe")
    quantity: float = Field(ge=0)
    unit: str = Field(min_length=1)
    yield_percentage: float | None = Field(default=None, gt=0, le=100)


Ingredient = Annotated[Union[ItemIngredient, RecipeIngredient], Field(discriminator="type")]


class BlendedLabour(BaseModel):
    """Average hourly cost of all staff."""

    method: Literal["blended"] = "blended"


class CustomLabour(BaseModel):
    """Manually entered salary; days/hours default to the business settings."""

    method: Literal["custom"] = "custom"
    salary: float = Field(ge=0)
    working_days: float | None = Field(default=None, ge=0)
    working_hours: float | None = Field(default=None, ge=0)


class StaffAssignedLabour(BaseModel):
    """Hourly cost of one assigned staff member."""

    method: Literal["staff"] = "staff"
    staff_id: str


LabourStrategy = Annotated[
    Union[BlendedLabour, CustomLabour, StaffAssignedLabour], Field(discriminator="method")
]


class CostSnapshot(BaseModel):
    """A point in a recipe's cost history."""

    date: datetime
    cost: float


class Recipe(BaseModel):
    """A recipe: an ordered ingredient list producing ``servings`` portions.

    Production-batch recipes (a sauce, a filling) also set ``production_yield``
    and ``production_unit`` so other recipes can consume them by weight/volume.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    category: str = "Uncategorized"
    ingredients: list[Ingredient] = Field(default_factory=list)
    servings: int = Field(default=1, ge=0)
    production_yield: float | None = Field(default=None, gt=0)
    production_unit: str | None = None
    instructions: list[str] = Field(default_factory=list)

    labour_minutes: float = Field(default=0, ge=0)
    labour: LabourStrategy = Field(default_factory=BlendedLabour)
    packaging_cost_per_serving: float = Field(default=0, ge=0)
    wastage_factor: float = Field(default=0, ge=0, description="Extra raw material %, e.g. spills")

    target_sale_price_per_serving: float | None = Field(default=None, ge=0)
    cost_history: list[CostSnapshot] = Field(default_factory=list)

    @property
    def batch_size(self) -> float:
        """Output units of one batch, as seen by recipes that consume this one."""
        if self.production_yield:
            return self.production_yield
        return float(self.servings)

    @property
    def sub_recipe_ids(self) -> list[str]:
        return [i.item_id for i in self.ingredients if i.type == "recipe"]
