"""Tests for the Markdown costing sheet exporter."""

from datetime import datetime, timezone

import pytest

from platecost.analyzers.costing import CostingEngine
from platecost.catalog import InMemoryCatalog
from platecost.exporters.markdown import render_costing_sheet
from platecost.models.catalog import BusinessSettings, PricedItem
from platecost.models.recipe import ItemIngredient, Recipe


@pytest.fixture
def catalog() -> InMemoryCatalog:
    catalog = InMemoryCatalog()
    catalog.add_priced_item(PricedItem(id="lamb", name="Lamb Shoulder", unit="kg", unit_cost=14, yield_percentage=70))
    return catalog


class TestMarkdownExporter:
    def test_basic_render(self, catalog: InMemoryCatalog) -> None:
        recipe = Recipe(
            name="Slow Roast Lamb",
            category="Mains",
            servings=4,
            ingredients=[ItemIngredient(item_id="lamb", quantity=1.4, unit="kg")],
            instructions=["Season", "Roast for 4 hours"],
            target_sale_price_per_serving=24,
        )
        breakdown = CostingEngine(catalog).calculate_cost_breakdown(recipe, BusinessSettings())
        md = render_costing_sheet(
            recipe, breakdown, "GBP", generated_at=datetime(2024, 3, 1, tzinfo=timezone.utc)
        )
        assert md.startswith("# Costing Sheet — Slow Roast Lamb")
        assert "Lamb Shoulder" in md
        assert "| **Total** | **28.00 GBP** |" in md
        assert "**Cost per serving:** 7.00 GBP" in md
        assert "(29.2% food cost)" in md
        assert "2. Roast for 4 hours" in md
        assert "2024-03-01" in md
        assert "PlateCost" in md
        assert "Warnings" not in md

    def test_render_with_warnings(self, catalog: InMemoryCatalog) -> None:
        recipe = Recipe(
            name="Mystery Stew",
            ingredients=[
                ItemIngredient(item_id="lamb", quantity=2, unit="cup"),
                ItemIngredient(item_id="ghost", quantity=1, unit="kg"),
            ],
        )
        breakdown = CostingEngine(catalog).calculate_cost_breakdown(recipe, BusinessSettings())
        md = render_costing_sheet(recipe, breakdown)
        assert "## ⚠️ Warnings" in md
        assert "ghost" in md
        assert "No conversion from cup to kg" in md

    def test_empty_recipe(self) -> None:
        recipe = Recipe(name="Water")
        breakdown = CostingEngine(InMemoryCatalog()).calculate_cost_breakdown(recipe, BusinessSettings())
        md = render_costing_sheet(recipe, breakdown)
        assert "_No costed ingredients._" in md
        assert "Method" not in md
