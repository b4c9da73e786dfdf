"""
PlateCost — main entry point.

The Kitchen class wires configuration, the business catalog and the costing
analyzers together and exposes the operations a host application calls.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from platecost.analyzers.costing import CostBreakdown, CostingEngine
from platecost.analyzers.menu_engineering import (
    MenuClass,
    MenuEngineeringClassifier,
    MenuEngineeringResult,
)
from platecost.analyzers.sales import SaleRecorder
from platecost.catalog import InMemoryCatalog
from platecost.config import PlateCostConfig
from platecost.errors import MissingReferenceError
from platecost.models.catalog import BusinessSettings, new_id
from platecost.models.recipe import CostSnapshot, Recipe
from platecost.models.sales import MenuItem, Sale, SaleLine

logger = logging.getLogger("platecost")

# Cost changes at or below this amount do not add a history point.
COST_HISTORY_TOLERANCE = 0.01


@dataclass
class Kitchen:
    """Costing facade for one business.

    Usage::

        from platecost import Kitchen

        kitchen = Kitchen.from_config("platecost.yaml")
        breakdown = kitchen.calculate_recipe_cost_breakdown("bolognese")
        kitchen.record_sale([{"menu_item_id": "spag-bol", "quantity": 3}])
    """

    config: PlateCostConfig = field(default_factory=PlateCostConfig)
    catalog: InMemoryCatalog = field(default_factory=InMemoryCatalog)
    engine: CostingEngine = field(init=False, repr=False)
    _recorder: SaleRecorder = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.engine = CostingEngine(self.catalog)
        self._recorder = SaleRecorder(self.catalog, self.engine, self.config.oversell_policy)

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> Kitchen:
        """Create a Kitchen from a config file; loads ``data_file`` when set."""
        config = PlateCostConfig.load(config_path, **overrides)
        catalog = InMemoryCatalog()
        if config.data_file:
            catalog = InMemoryCatalog.from_yaml(config.data_file)
            logger.info("Loaded business data from %s", config.data_file)
        return cls(config=config, catalog=catalog)

    @property
    def settings(self) -> BusinessSettings:
        return self.config.business

    def _recipe(self, recipe: Recipe | str | None) -> Recipe | None:
        if isinstance(recipe, str):
            return self.catalog.get_recipe(recipe)
        return recipe

    # ------------------------------------------------------------------
    # Costing
    # ------------------------------------------------------------------

    def calculate_recipe_cost_breakdown(
        self, recipe: Recipe | str | None, settings: BusinessSettings | None = None
    ) -> CostBreakdown:
        """Cost breakdown of a recipe (or recipe id); zeros if it is unknown."""
        return self.engine.calculate_cost_breakdown(self._recipe(recipe), settings or self.settings)

    def calculate_recipe_cost(
        self, recipe: Recipe | str | None, settings: BusinessSettings | None = None
    ) -> float:
        return self.calculate_recipe_cost_breakdown(recipe, settings).total_cost

    def resolve_unit_conversion(
        self, from_unit: str, to_unit: str, item_id: str | None = None
    ) -> float | None:
        return self.catalog.units.resolve(from_unit, to_unit, item_id)

    # ------------------------------------------------------------------
    # Menu
    # ------------------------------------------------------------------

    def _costs_per_serving(
        self, menu_items: Sequence[MenuItem], settings: BusinessSettings
    ) -> dict[str, float]:
        costs: dict[str, float] = {}
        for item in menu_items:
            if item.recipe_id not in costs:
                recipe = self.catalog.get_recipe(item.recipe_id)
                costs[item.recipe_id] = self.engine.calculate_cost_breakdown(
                    recipe, settings
                ).cost_per_serving
        return costs

    def analyze_menu(
        self,
        menu_items: Sequence[MenuItem] | None = None,
        settings: BusinessSettings | None = None,
    ) -> MenuEngineeringResult:
        items = list(self.catalog.menu_items.values()) if menu_items is None else list(menu_items)
        costs = self._costs_per_serving(items, settings or self.settings)
        return MenuEngineeringClassifier.analyze(items, costs)

    def classify_menu_items(
        self,
        menu_items: Sequence[MenuItem] | None = None,
        settings: BusinessSettings | None = None,
    ) -> dict[str, MenuClass]:
        """Menu engineering quadrant per menu item id."""
        return self.analyze_menu(menu_items, settings).classifications

    # ------------------------------------------------------------------
    # State-changing operations
    # ------------------------------------------------------------------

    def record_sale(
        self,
        lines: Sequence[SaleLine | dict[str, Any]],
        settings: BusinessSettings | None = None,
    ) -> Sale:
        return self._recorder.record_sale(lines, settings or self.settings)

    def record_cost_history(
        self,
        recipe_id: str,
        settings: BusinessSettings | None = None,
        now: datetime | None = None,
    ) -> list[CostSnapshot]:
        """Append the current total cost unless it matches the last recorded point."""
        recipe = self.catalog.get_recipe(recipe_id)
        if recipe is None:
            raise MissingReferenceError("Recipe", recipe_id)

        total = self.calculate_recipe_cost(recipe, settings)
        last = recipe.cost_history[-1] if recipe.cost_history else None
        if last is None or abs(last.cost - total) > COST_HISTORY_TOLERANCE:
            recipe.cost_history.append(
                CostSnapshot(date=now or datetime.now(timezone.utc), cost=total)
            )
            logger.debug("Recorded cost %.4f for recipe %s", total, recipe.name)
        return recipe.cost_history

    def duplicate_recipe(
        self,
        recipe_id: str,
        include_history: bool = False,
        settings: BusinessSettings | None = None,
    ) -> Recipe:
        """Copy a recipe as "<name> (Copy)".

        The copy keeps the original's history, or starts one with the current cost.
        """
        original = self.catalog.get_recipe(recipe_id)
        if original is None:
            raise MissingReferenceError("Recipe", recipe_id)

        if include_history:
            history = [s.model_copy() for s in original.cost_history]
        else:
            total = self.calculate_recipe_cost(original, settings)
            history = [CostSnapshot(date=datetime.now(timezone.utc), cost=total)]

        duplicate = original.model_copy(
            deep=True,
            update={"id": new_id(), "name": f"{original.name} (Copy)", "cost_history": history},
        )
        return self.catalog.add_recipe(duplicate)
