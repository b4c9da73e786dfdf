"""
Costing Engine — total cost, cost per serving and full breakdown of a recipe.

Raw material cost per ingredient line:

- priced item: ``unit_cost / (yield / 100) × quantity × conversion_factor``,
  where the conversion goes from the line's unit to the item's unit and the
  yield is the line override, else the item's yield.
- sub-recipe: ``total_cost(sub) / batch_size(sub) × quantity × conversion_factor``,
  converting into the sub-recipe's production unit when it defines one.

``total_cost = raw × (1 + wastage%) + labour + packaging + overhead``. Labour,
packaging and overhead are batch amounts, each applied once.

Stale references and unknown unit pairs degrade to a best-effort total and are
reported in ``CostBreakdown.warnings``; a sub-recipe loop raises
``CyclicRecipeError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from platecost.analyzers.labour import LabourCostResolver
from platecost.analyzers.overhead import OverheadAllocator
from platecost.errors import CyclicRecipeError
from platecost.models.catalog import BusinessSettings
from platecost.models.recipe import ItemIngredient, Recipe, RecipeIngredient

if TYPE_CHECKING:
    from platecost.catalog import Catalog

logger = logging.getLogger("platecost.analyzers.costing")


class WarningKind(str, Enum):
    """Kinds of data-quality degradation."""

    MISSING_REFERENCE = "missing_reference"
    UNIT_CONVERSION = "unit_conversion"
    SUB_RECIPE = "sub_recipe"
    LABOUR = "labour"


@dataclass
class CostWarning:
    """A non-fatal problem met while costing a recipe."""

    kind: WarningKind
    message: str
    recipe_id: str | None = None
    ingredient_id: str | None = None


@dataclass
class LineCost:
    """Cost of one ingredient line for a full batch."""

    ingredient_id: str
    name: str
    kind: str  # "item" or "recipe"
    quantity: float
    unit: str
    conversion_factor: float
    yield_percentage: float
    unit_cost: float  # per unit of the item / production unit, yield adjusted
    cost: float


@dataclass
class CostBreakdown:
    """Complete cost structure of one recipe batch.

    Every field is always populated; an unknown recipe gives all zeros.
    """

    recipe_id: str | None = None
    recipe_name: str = ""
    servings: int = 0
    raw_material_cost: float = 0.0
    adjusted_raw_material_cost: float = 0.0
    labour_cost: float = 0.0
    hourly_labour_rate: float = 0.0
    packaging_cost: float = 0.0
    variable_overhead_cost: float = 0.0
    fixed_overhead_cost: float = 0.0
    total_cost: float = 0.0
    cost_per_serving: float = 0.0
    suggested_price: float = 0.0
    lines: list[LineCost] = field(default_factory=list)
    warnings: list[CostWarning] = field(default_factory=list)

    @property
    def overhead_cost(self) -> float:
        return self.variable_overhead_cost + self.fixed_overhead_cost

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def food_cost_pct(self, sale_price: float) -> float | None:
        """Cost per serving as a percentage of a sale price."""
        if sale_price <= 0:
            return None
        return self.cost_per_serving / sale_price * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "recipe_id": self.recipe_id,
            "recipe_name": self.recipe_name,
            "servings": self.servings,
            "raw_material_cost": self.raw_material_cost,
            "adjusted_raw_material_cost": self.adjusted_raw_material_cost,
            "labour_cost": self.labour_cost,
            "packaging_cost": self.packaging_cost,
            "variable_overhead_cost": self.variable_overhead_cost,
            "fixed_overhead_cost": self.fixed_overhead_cost,
            "overhead_cost": self.overhead_cost,
            "total_cost": self.total_cost,
            "cost_per_serving": self.cost_per_serving,
            "suggested_price": self.suggested_price,
            "warnings": [w.message for w in self.warnings],
        }


class CostingEngine:
    """Compute recipe costs against a catalog snapshot.

    Usage::

        engine = CostingEngine(catalog)
        breakdown = engine.calculate_cost_breakdown(recipe, settings)
        breakdown.cost_per_serving
        breakdown.warnings  # unresolved units, stale references, ...

    Computations are pure: nothing in the catalog is modified.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self.labour = LabourCostResolver(catalog)
        self.overhead = OverheadAllocator(catalog)

    def calculate_cost_breakdown(
        self, recipe: Recipe | None, settings: BusinessSettings
    ) -> CostBreakdown:
        """Full cost breakdown of one batch of ``recipe``."""
        if recipe is None:
            return CostBreakdown()
        return self._breakdown(recipe, settings, [], {})

    def calculate_recipe_cost(self, recipe: Recipe | None, settings: BusinessSettings) -> float:
        """Total batch cost only."""
        return self.calculate_cost_breakdown(recipe, settings).total_cost

    def _breakdown(
        self,
        recipe: Recipe,
        settings: BusinessSettings,
        path: list[str],
        cache: dict[str, CostBreakdown],
    ) -> CostBreakdown:
        if recipe.id in path:
            cycle = path[path.index(recipe.id):] + [recipe.id]
            logger.error("Circular dependency detected: %s", " -> ".join(cycle))
            raise CyclicRecipeError(cycle)
        if recipe.id in cache:
            return cache[recipe.id]

        lines: list[LineCost] = []
        warnings: list[CostWarning] = []

        path.append(recipe.id)
        try:
            for ingredient in recipe.ingredients:
                if isinstance(ingredient, ItemIngredient):
                    line = self._item_line(recipe, ingredient, warnings)
                else:
                    line = self._sub_recipe_line(recipe, ingredient, settings, path, cache, warnings)
                if line is not None:
                    lines.append(line)
        finally:
            path.pop()

        raw = sum(line.cost for line in lines)
        adjusted = raw * (1 + recipe.wastage_factor / 100)

        labour_cost, rate = self.labour.compute_with_rate(recipe, settings)
        if rate.warning:
            warnings.append(CostWarning(WarningKind.LABOUR, rate.warning, recipe_id=recipe.id))

        packaging = recipe.packaging_cost_per_serving * recipe.servings
        overhead = self.overhead.allocate(recipe, settings)

        total = adjusted + labour_cost + packaging + overhead.total
        per_serving = total / recipe.servings if recipe.servings > 0 else 0.0
        target = settings.food_cost_target_pct
        suggested = per_serving / (target / 100) if target > 0 else 0.0

        breakdown = CostBreakdown(
            recipe_id=recipe.id,
            recipe_name=recipe.name,
            servings=recipe.servings,
            raw_material_cost=raw,
            adjusted_raw_material_cost=adjusted,
            labour_cost=labour_cost,
            hourly_labour_rate=rate.hourly_rate,
            packaging_cost=packaging,
            variable_overhead_cost=overhead.variable,
            fixed_overhead_cost=overhead.fixed,
            total_cost=total,
            cost_per_serving=per_serving,
            suggested_price=suggested,
            lines=lines,
            warnings=warnings,
        )
        logger.debug(
            "Costed %s: raw=%.4f labour=%.4f packaging=%.4f overhead=%.4f total=%.4f",
            recipe.name,
            raw,
            labour_cost,
            packaging,
            overhead.total,
            total,
        )
        cache[recipe.id] = breakdown
        return breakdown

    def _item_line(
        self, recipe: Recipe, ingredient: ItemIngredient, warnings: list[CostWarning]
    ) -> LineCost | None:
        item = self.catalog.get_priced_item(ingredient.item_id)
        if item is None:
            message = f"Recipe {recipe.name!r} references missing item {ingredient.item_id!r}"
            logger.warning(message)
            warnings.append(
                CostWarning(WarningKind.MISSING_REFERENCE, message, recipe.id, ingredient.item_id)
            )
            return None

        factor, resolved = self.catalog.units.factor_or_default(ingredient.unit, item.unit, item.id)
        if not resolved:
            warnings.append(
                CostWarning(
                    WarningKind.UNIT_CONVERSION,
                    f"No conversion from {ingredient.unit} to {item.unit} for {item.name!r}",
                    recipe.id,
                    item.id,
                )
            )

        yield_pct = ingredient.yield_percentage or item.yield_percentage or 100.0
        unit_cost = item.unit_cost / (yield_pct / 100)
        return LineCost(
            ingredient_id=item.id,
            name=item.name,
            kind="item",
            quantity=ingredient.quantity,
            unit=ingredient.unit,
            conversion_factor=factor,
            yield_percentage=yield_pct,
            unit_cost=unit_cost,
            cost=unit_cost * ingredient.quantity * factor,
        )

    def _sub_recipe_line(
        self,
        recipe: Recipe,
        ingredient: RecipeIngredient,
        settings: BusinessSettings,
        path: list[str],
        cache: dict[str, CostBreakdown],
        warnings: list[CostWarning],
    ) -> LineCost | None:
        sub = self.catalog.get_recipe(ingredient.item_id)
        if sub is None:
            message = f"Recipe {recipe.name!r} references missing sub-recipe {ingredient.item_id!r}"
            logger.warning(message)
            warnings.append(
                CostWarning(WarningKind.MISSING_REFERENCE, message, recipe.id, ingredient.item_id)
            )
            return None

        sub_breakdown = self._breakdown(sub, settings, path, cache)
        for warning in sub_breakdown.warnings:
            if warning not in warnings:
                warnings.append(warning)

        batch_size = sub.batch_size
        if batch_size <= 0:
            message = f"Sub-recipe {sub.name!r} has no production yield or servings; costed at 0"
            logger.warning(message)
            warnings.append(CostWarning(WarningKind.SUB_RECIPE, message, recipe.id, sub.id))
            return None

        factor = 1.0
        target_unit = sub.production_unit or ingredient.unit
        if sub.production_unit:
            factor, resolved = self.catalog.units.factor_or_default(
                ingredient.unit, sub.production_unit
            )
            if not resolved:
                warnings.append(
                    CostWarning(
                        WarningKind.UNIT_CONVERSION,
                        f"No conversion from {ingredient.unit} to {sub.production_unit} "
                        f"for sub-recipe {sub.name!r}",
                        recipe.id,
                        sub.id,
                    )
                )

        yield_pct = ingredient.yield_percentage or 100.0
        unit_cost = sub_breakdown.total_cost / batch_size / (yield_pct / 100)
        logger.debug("Sub-recipe %s: %.4f per %s", sub.name, unit_cost, target_unit)
        return LineCost(
            ingredient_id=sub.id,
            name=sub.name,
            kind="recipe",
            quantity=ingredient.quantity,
            unit=ingredient.unit,
            conversion_factor=factor,
            yield_percentage=yield_pct,
            unit_cost=unit_cost,
            cost=unit_cost * ingredient.quantity * factor,
        )
