"""
Menu Engineering — profitability and popularity quadrants for menu items.

Each item's profit (sale price − cost per serving) and popularity (sales
count) are compared with the menu-wide means:

- Stars: profit ≥ average, popularity ≥ average → keep & promote
- Plowhorses: profit < average, popularity ≥ average → raise price or cut cost
- Puzzles: profit ≥ average, popularity < average → reposition, promote
- Dogs: below average on both → remove or rework

Values equal to an average count as meeting it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

from platecost.models.sales import MenuItem

logger = logging.getLogger("platecost.analyzers.menu_engineering")


class MenuClass(str, Enum):
    """Menu engineering quadrant."""

    STAR = "star"
    PLOWHORSE = "plowhorse"
    PUZZLE = "puzzle"
    DOG = "dog"


RECOMMENDATIONS: dict[MenuClass, str] = {
    MenuClass.STAR: (
        "Feature prominently on menu. Train servers to recommend. "
        "Maintain quality and portion consistency."
    ),
    MenuClass.PLOWHORSE: (
        "Popular but low margin. Options: raise price slightly, reduce portion, "
        "or source cheaper ingredients without affecting quality."
    ),
    MenuClass.PUZZLE: (
        "High margin but low sales. Increase visibility: better menu placement, "
        "server upsell training, or rename to be more appealing."
    ),
    MenuClass.DOG: (
        "Consider removing from menu. Low profit and low popularity. "
        "If keeping: raise price, reduce cost, or reposition entirely."
    ),
}


@dataclass
class MenuItemPerformance:
    """A menu item with its cost, profit and quadrant."""

    menu_item_id: str
    name: str
    sale_price: float
    cost_per_serving: float
    sales_count: int
    classification: MenuClass = MenuClass.DOG
    recommendation: str = ""

    @property
    def profit(self) -> float:
        return self.sale_price - self.cost_per_serving

    @property
    def food_cost_pct(self) -> float:
        if self.sale_price <= 0:
            return 0.0
        return self.cost_per_serving / self.sale_price * 100

    @property
    def total_profit(self) -> float:
        return self.profit * self.sales_count


@dataclass
class MenuEngineeringResult:
    """Classification of a whole menu."""

    items: list[MenuItemPerformance] = field(default_factory=list)
    average_profit: float = 0.0
    average_popularity: float = 0.0
    total_revenue: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0

    stars: list[MenuItemPerformance] = field(default_factory=list)
    plowhorses: list[MenuItemPerformance] = field(default_factory=list)
    puzzles: list[MenuItemPerformance] = field(default_factory=list)
    dogs: list[MenuItemPerformance] = field(default_factory=list)

    explanation: str = ""

    @property
    def classifications(self) -> dict[str, MenuClass]:
        return {i.menu_item_id: i.classification for i in self.items}

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def overall_food_cost_pct(self) -> float:
        if self.total_revenue <= 0:
            return 0.0
        return self.total_cost / self.total_revenue * 100


def _meets(value: float, average: float) -> bool:
    # A mean of identical values can land one ulp away from them.
    return math.isclose(value, average, rel_tol=1e-9, abs_tol=1e-9)


def classify_item(
    profit: float, popularity: float, average_profit: float, average_popularity: float
) -> MenuClass:
    """Quadrant for one item given the menu averages."""
    profitable = profit >= average_profit or _meets(profit, average_profit)
    popular = popularity >= average_popularity or _meets(popularity, average_popularity)
    if profitable and popular:
        return MenuClass.STAR
    if popular:
        return MenuClass.PLOWHORSE
    if profitable:
        return MenuClass.PUZZLE
    return MenuClass.DOG


class MenuEngineeringClassifier:
    """Classify menu items against menu-wide averages."""

    @classmethod
    def analyze(
        cls,
        menu_items: Sequence[MenuItem],
        cost_per_serving: Mapping[str, float],
    ) -> MenuEngineeringResult:
        """
        Analyze and classify a menu.

        Args:
            menu_items: Items on the menu.
            cost_per_serving: Cost per serving keyed by recipe id. Items whose
                recipe is absent are costed at 0.

        Returns:
            MenuEngineeringResult with per-item quadrants and recommendations.
        """
        if not menu_items:
            return MenuEngineeringResult(explanation="No menu items provided for analysis.")

        performances = []
        for item in menu_items:
            cost = cost_per_serving.get(item.recipe_id)
            if cost is None:
                logger.warning("No cost for recipe %s of menu item %s", item.recipe_id, item.name)
                cost = 0.0
            performances.append(
                MenuItemPerformance(
                    menu_item_id=item.id,
                    name=item.name,
                    sale_price=item.sale_price,
                    cost_per_serving=cost,
                    sales_count=item.sales_count,
                )
            )

        count = len(performances)
        average_profit = sum(p.profit for p in performances) / count
        average_popularity = sum(p.sales_count for p in performances) / count

        result = MenuEngineeringResult(
            items=performances,
            average_profit=average_profit,
            average_popularity=average_popularity,
        )
        buckets = {
            MenuClass.STAR: result.stars,
            MenuClass.PLOWHORSE: result.plowhorses,
            MenuClass.PUZZLE: result.puzzles,
            MenuClass.DOG: result.dogs,
        }
        for perf in performances:
            perf.classification = classify_item(
                perf.profit, perf.sales_count, average_profit, average_popularity
            )
            perf.recommendation = RECOMMENDATIONS[perf.classification]
            buckets[perf.classification].append(perf)
            result.total_revenue += perf.sale_price * perf.sales_count
            result.total_cost += perf.cost_per_serving * perf.sales_count
            result.total_profit += perf.total_profit

        result.stars.sort(key=lambda x: x.total_profit, reverse=True)
        result.plowhorses.sort(key=lambda x: x.sales_count, reverse=True)
        result.puzzles.sort(key=lambda x: x.profit, reverse=True)
        result.dogs.sort(key=lambda x: x.total_profit)
        result.explanation = cls._generate_summary(result)
        return result

    @classmethod
    def classify(
        cls,
        menu_items: Sequence[MenuItem],
        cost_per_serving: Mapping[str, float],
    ) -> dict[str, MenuClass]:
        """Quadrant of each menu item, keyed by menu item id."""
        return cls.analyze(menu_items, cost_per_serving).classifications

    @staticmethod
    def _generate_summary(result: MenuEngineeringResult) -> str:
        total = result.total_items
        parts = [
            f"Menu Analysis: {total} items analyzed.",
            f"Stars: {len(result.stars)}, Plowhorses: {len(result.plowhorses)}, "
            f"Puzzles: {len(result.puzzles)}, Dogs: {len(result.dogs)}.",
            f"Average profit {result.average_profit:.2f}, "
            f"average popularity {result.average_popularity:.1f}.",
        ]
        if total and len(result.dogs) / total > 0.3:
            parts.append("Over 30% of the menu is underperforming; consider simplifying it.")
        return " ".join(parts)
