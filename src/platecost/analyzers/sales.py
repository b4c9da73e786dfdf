"""
Sale Recorder — freeze cost at time of sale and draw ingredients from stock.

A sale is all-or-nothing: every line is priced and every stock draw computed
and checked before anything is mutated, and the whole sale is applied under a
lock so concurrent sales cannot lose stock updates.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from platecost.analyzers.costing import CostBreakdown, CostingEngine
from platecost.analyzers.recipe_graph import RecipeGraph
from platecost.errors import InsufficientStockError, MissingReferenceError
from platecost.models.catalog import BusinessSettings
from platecost.models.sales import Sale, SaleItem, SaleLine

if TYPE_CHECKING:
    from platecost.catalog import InMemoryCatalog

logger = logging.getLogger("platecost.analyzers.sales")

# Floating-point slack when comparing required stock with stock on hand.
_STOCK_EPSILON = 1e-9


class OversellPolicy(str, Enum):
    """What to do when a sale needs more stock than is on hand."""

    REJECT = "reject"  # raise InsufficientStockError, apply nothing
    CLAMP = "clamp"  # floor stock at zero and flag the sale


class SaleRecorder:
    """Record sales against a catalog.

    Usage::

        recorder = SaleRecorder(catalog, CostingEngine(catalog))
        sale = recorder.record_sale([{"menu_item_id": "burger", "quantity": 2}], settings)
        sale.total_profit
    """

    def __init__(
        self,
        catalog: InMemoryCatalog,
        engine: CostingEngine,
        policy: OversellPolicy = OversellPolicy.REJECT,
    ) -> None:
        self.catalog = catalog
        self.engine = engine
        self.policy = policy
        self.graph = RecipeGraph(catalog)
        self._lock = threading.Lock()

    def record_sale(
        self,
        lines: Sequence[SaleLine | dict[str, Any]],
        settings: BusinessSettings,
        sale_date: datetime | None = None,
    ) -> Sale:
        """Record a sale and update stock and sales counts."""
        sale_lines = [
            line if isinstance(line, SaleLine) else SaleLine.model_validate(line) for line in lines
        ]

        with self._lock:
            warnings: list[str] = []
            items: list[SaleItem] = []
            costs: dict[str, CostBreakdown] = {}
            required: dict[str, float] = defaultdict(float)

            for line in sale_lines:
                menu_item = self.catalog.get_menu_item(line.menu_item_id)
                if menu_item is None:
                    raise MissingReferenceError("Menu item", line.menu_item_id)
                recipe = self.catalog.get_recipe(menu_item.recipe_id)
                if recipe is None:
                    raise MissingReferenceError("Recipe", menu_item.recipe_id)

                if recipe.id not in costs:
                    costs[recipe.id] = self.engine.calculate_cost_breakdown(recipe, settings)
                breakdown = costs[recipe.id]
                warnings.extend(w.message for w in breakdown.warnings)

                items.append(
                    SaleItem(
                        menu_item_id=menu_item.id,
                        quantity=line.quantity,
                        sale_price_at_time=menu_item.sale_price,
                        cost_at_time=breakdown.cost_per_serving,
                    )
                )

                if recipe.servings <= 0:
                    message = f"Recipe {recipe.name!r} has no servings; stock not drawn"
                    logger.warning(message)
                    warnings.append(message)
                    continue

                batches = line.quantity / recipe.servings
                for draw in self.graph.expand_to_items(recipe, batches):
                    item = self.catalog.get_priced_item(draw.item_id)
                    if item is None:
                        continue
                    factor, resolved = self.catalog.units.factor_or_default(
                        draw.unit, item.unit, item.id
                    )
                    if not resolved:
                        warnings.append(
                            f"No conversion from {draw.unit} to {item.unit} for {item.name!r}"
                        )
                    required[item.id] += draw.quantity * factor

            for item_id, quantity in required.items():
                item = self.catalog.get_priced_item(item_id)
                if quantity <= item.quantity_on_hand + _STOCK_EPSILON:
                    continue
                if self.policy == OversellPolicy.REJECT:
                    raise InsufficientStockError(item_id, item.quantity_on_hand, quantity)
                message = (
                    f"Stock of {item.name!r} clamped at 0: "
                    f"{item.quantity_on_hand:g} {item.unit} on hand, {quantity:g} required"
                )
                logger.warning(message)
                warnings.append(message)

            # Everything validated; apply.
            for item_id, quantity in required.items():
                item = self.catalog.get_priced_item(item_id)
                item.quantity_on_hand = max(0.0, item.quantity_on_hand - quantity)
            for sale_item in items:
                self.catalog.menu_items[sale_item.menu_item_id].sales_count += sale_item.quantity

            total_revenue = sum(i.revenue for i in items)
            total_cost = sum(i.cost for i in items)
            sale = Sale(
                items=items,
                total_revenue=total_revenue,
                total_cost=total_cost,
                total_profit=total_revenue - total_cost,
                warnings=list(dict.fromkeys(warnings)),
            )
            if sale_date is not None:
                sale.sale_date = sale_date
            self.catalog.sales.append(sale)

        logger.info(
            "Recorded sale %s: %d line(s), revenue=%.2f cost=%.2f",
            sale.id,
            len(items),
            total_revenue,
            total_cost,
        )
        return sale
