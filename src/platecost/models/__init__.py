"""PlateCost data models."""

from platecost.models.catalog import (
    BusinessSettings,
    ItemCategory,
    Overhead,
    OverheadType,
    PricedItem,
    StaffMember,
    UnitConversion,
)
from platecost.models.recipe import (
    BlendedLabour,
    CostSnapshot,
    CustomLabour,
    Ingredient,
    ItemIngredient,
    Recipe,
    RecipeIngredient,
    StaffAssignedLabour,
)
from platecost.models.sales import MenuItem, Sale, SaleItem, SaleLine

__all__ = [
    "BusinessSettings",
    "ItemCategory",
    "Overhead",
    "OverheadType",
    "PricedItem",
    "StaffMember",
    "UnitConversion",
    "BlendedLabour",
    "CostSnapshot",
    "CustomLabour",
    "Ingredient",
    "ItemIngredient",
    "Recipe",
    "RecipeIngredient",
    "StaffAssignedLabour",
    "MenuItem",
    "Sale",
    "SaleItem",
    "SaleLine",
]
