"""
Recipe Graph — traversal of recipes that use other recipes as ingredients.

Every traversal carries the ids on the current path, so a sub-recipe loop is
reported as ``CyclicRecipeError`` instead of recursing forever.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from platecost.errors import CyclicRecipeError
from platecost.models.recipe import Recipe

if TYPE_CHECKING:
    from platecost.catalog import Catalog

logger = logging.getLogger("platecost.analyzers.recipe_graph")


@dataclass
class StockDraw:
    """Quantity of a priced item drawn from stock, in the recipe line's unit."""

    item_id: str
    quantity: float
    unit: str


class RecipeGraph:
    """Sub-recipe relationships over a catalog's recipes."""

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def find_cycle(self, recipe: Recipe) -> list[str] | None:
        """Return the looping id path (first id repeated at the end), or None."""
        return self._find_cycle(recipe, [])

    def _find_cycle(self, recipe: Recipe, path: list[str]) -> list[str] | None:
        if recipe.id in path:
            return path[path.index(recipe.id):] + [recipe.id]
        path.append(recipe.id)
        try:
            for sub_id in recipe.sub_recipe_ids:
                sub = self.catalog.get_recipe(sub_id)
                if sub is None:
                    continue
                cycle = self._find_cycle(sub, path)
                if cycle:
                    return cycle
        finally:
            path.pop()
        return None

    def assert_acyclic(self, recipe: Recipe) -> None:
        cycle = self.find_cycle(recipe)
        if cycle:
            raise CyclicRecipeError(cycle)

    def dependents(self, recipe_id: str) -> list[Recipe]:
        """Recipes that use ``recipe_id`` directly as a sub-recipe."""
        return [r for r in self.catalog.list_recipes() if recipe_id in r.sub_recipe_ids]

    def expand_to_items(self, recipe: Recipe, batches: float) -> list[StockDraw]:
        """Flatten ``batches`` of a recipe into priced-item quantities.

        Sub-recipe lines are converted into the sub-recipe's production unit and
        expanded proportionally to its batch size. Unknown references are skipped.
        """
        draws: list[StockDraw] = []
        self._expand(recipe, batches, [], draws)
        return draws

    def _expand(
        self, recipe: Recipe, batches: float, path: list[str], draws: list[StockDraw]
    ) -> None:
        if recipe.id in path:
            raise CyclicRecipeError(path[path.index(recipe.id):] + [recipe.id])
        path.append(recipe.id)
        for ingredient in recipe.ingredients:
            quantity = ingredient.quantity * batches
            if ingredient.type == "item":
                draws.append(StockDraw(ingredient.item_id, quantity, ingredient.unit))
                continue

            sub = self.catalog.get_recipe(ingredient.item_id)
            if sub is None:
                logger.warning(
                    "Recipe %s references missing sub-recipe %s", recipe.id, ingredient.item_id
                )
                continue
            if sub.batch_size <= 0:
                logger.warning("Sub-recipe %s has no batch size; stock not drawn", sub.id)
                continue
            factor = 1.0
            if sub.production_unit:
                factor, _ = self.catalog.units.factor_or_default(
                    ingredient.unit, sub.production_unit
                )
            self._expand(sub, quantity * factor / sub.batch_size, path, draws)
        path.pop()
