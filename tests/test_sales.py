"""Tests for sale recording and stock consumption."""

import threading
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from platecost.analyzers.costing import CostingEngine
from platecost.analyzers.sales import OversellPolicy, SaleRecorder
from platecost.catalog import InMemoryCatalog
from platecost.errors import InsufficientStockError, MissingReferenceError
from platecost.models.catalog import BusinessSettings, PricedItem
from platecost.models.recipe import ItemIngredient, Recipe, RecipeIngredient
from platecost.models.sales import MenuItem, SaleLine


@pytest.fixture
def settings() -> BusinessSettings:
    return BusinessSettings()


@pytest.fixture
def catalog() -> InMemoryCatalog:
    catalog = InMemoryCatalog()
    catalog.add_priced_item(
        PricedItem(id="beef", name="Beef Mince", unit="kg", unit_cost=10, quantity_on_hand=5)
    )
    catalog.add_priced_item(
        PricedItem(id="bun", name="Brioche Bun", unit="unit", unit_cost=0.5, quantity_on_hand=10)
    )
    catalog.add_recipe(
        Recipe(
            id="burger",
            name="Burger",
            servings=1,
            ingredients=[
                ItemIngredient(item_id="beef", quantity=150, unit="g"),
                ItemIngredient(item_id="bun", quantity=1, unit="unit"),
            ],
        )
    )
    catalog.add_menu_item(MenuItem(id="burger", name="Burger", recipe_id="burger", sale_price=8))
    return catalog


def recorder(catalog: InMemoryCatalog, policy: OversellPolicy = OversellPolicy.REJECT) -> SaleRecorder:
    return SaleRecorder(catalog, CostingEngine(catalog), policy)


class TestRecordSale:
    def test_totals_and_frozen_cost(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        sale = recorder(catalog).record_sale([{"menu_item_id": "burger", "quantity": 2}], settings)
        assert sale.items[0].cost_at_time == pytest.approx(2.0)
        assert sale.items[0].sale_price_at_time == 8
        assert sale.total_revenue == pytest.approx(16)
        assert sale.total_cost == pytest.approx(4)
        assert sale.total_profit == pytest.approx(12)
        assert catalog.sales == [sale]

    def test_stock_drawn_in_item_units(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        recorder(catalog).record_sale([SaleLine(menu_item_id="burger", quantity=2)], settings)
        assert catalog.items["beef"].quantity_on_hand == pytest.approx(4.7)
        assert catalog.items["bun"].quantity_on_hand == pytest.approx(8)
        assert catalog.menu_items["burger"].sales_count == 2

    def test_later_price_change_does_not_rewrite_sale(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        sale = recorder(catalog).record_sale([{"menu_item_id": "burger", "quantity": 1}], settings)
        catalog.items["beef"].unit_cost = 100
        catalog.menu_items["burger"].sale_price = 20
        assert sale.items[0].cost_at_time == pytest.approx(2.0)
        assert sale.total_revenue == pytest.approx(8)

    def test_sale_date(self, catalog: InMemoryCatalog, settings: BusinessSettings) -> None:
        when = datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        sale = recorder(catalog).record_sale(
            [{"menu_item_id": "burger", "quantity": 1}], settings, sale_date=when
        )
        assert sale.sale_date == when

    def test_quantity_must_be_positive(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        with pytest.raises(ValidationError):
            recorder(catalog).record_sale([{"menu_item_id": "burger", "quantity": 0}], settings)


class TestAtomicity:
    def test_reject_oversell(self, catalog: InMemoryCatalog, settings: BusinessSettings) -> None:
        with pytest.raises(InsufficientStockError) as exc_info:
            recorder(catalog).record_sale([{"menu_item_id": "burger", "quantity": 20}], settings)
        assert exc_info.value.item_id in {"beef", "bun"}
        assert catalog.items["beef"].quantity_on_hand == 5
        assert catalog.items["bun"].quantity_on_hand == 10
        assert catalog.menu_items["burger"].sales_count == 0
        assert catalog.sales == []

    def test_unknown_menu_item_applies_nothing(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        lines = [
            {"menu_item_id": "burger", "quantity": 1},
            {"menu_item_id": "ghost", "quantity": 1},
        ]
        with pytest.raises(MissingReferenceError):
            recorder(catalog).record_sale(lines, settings)
        assert catalog.items["bun"].quantity_on_hand == 10
        assert catalog.menu_items["burger"].sales_count == 0
        assert catalog.sales == []

    def test_lines_are_checked_together(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        # 6 + 6 buns exceed the 10 on hand although each line alone fits.
        lines = [
            {"menu_item_id": "burger", "quantity": 6},
            {"menu_item_id": "burger", "quantity": 6},
        ]
        with pytest.raises(InsufficientStockError):
            recorder(catalog).record_sale(lines, settings)
        assert catalog.items["bun"].quantity_on_hand == 10

    def test_clamp_policy(self, catalog: InMemoryCatalog, settings: BusinessSettings) -> None:
        sale = recorder(catalog, OversellPolicy.CLAMP).record_sale(
            [{"menu_item_id": "burger", "quantity": 12}], settings
        )
        assert catalog.items["bun"].quantity_on_hand == 0
        assert catalog.items["beef"].quantity_on_hand == pytest.approx(3.2)
        assert catalog.menu_items["burger"].sales_count == 12
        assert any("Brioche Bun" in w for w in sale.warnings)

    def test_concurrent_sales_do_not_lose_updates(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        sales_recorder = recorder(catalog)
        errors: list[Exception] = []

        def sell() -> None:
            try:
                sales_recorder.record_sale([{"menu_item_id": "burger", "quantity": 1}], settings)
            except InsufficientStockError as e:
                errors.append(e)

        threads = [threading.Thread(target=sell) for _ in range(12)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == 2
        assert catalog.items["bun"].quantity_on_hand == pytest.approx(0)
        assert catalog.menu_items["burger"].sales_count == 10
        assert len(catalog.sales) == 10


class TestSubRecipeConsumption:
    def test_sub_recipe_draws_underlying_items(self, settings: BusinessSettings) -> None:
        catalog = InMemoryCatalog()
        catalog.add_priced_item(
            PricedItem(id="tomato", name="Tomatoes", unit="kg", unit_cost=3, quantity_on_hand=10)
        )
        catalog.add_priced_item(
            PricedItem(id="pasta", name="Spaghetti", unit="kg", unit_cost=2, quantity_on_hand=10)
        )
        catalog.add_recipe(
            Recipe(
                id="sauce",
                name="Sauce",
                production_yield=4,
                production_unit="kg",
                ingredients=[ItemIngredient(item_id="tomato", quantity=2, unit="kg")],
            )
        )
        catalog.add_recipe(
            Recipe(
                id="spag",
                name="Spaghetti Pomodoro",
                servings=2,
                ingredients=[
                    RecipeIngredient(item_id="sauce", quantity=1, unit="kg"),
                    ItemIngredient(item_id="pasta", quantity=200, unit="g"),
                ],
            )
        )
        catalog.add_menu_item(MenuItem(id="spag", name="Spaghetti", recipe_id="spag", sale_price=12))

        recorder(catalog).record_sale([{"menu_item_id": "spag", "quantity": 2}], settings)

        # Two servings = one batch = 1 kg sauce = a quarter of a sauce batch.
        assert catalog.items["tomato"].quantity_on_hand == pytest.approx(9.5)
        assert catalog.items["pasta"].quantity_on_hand == pytest.approx(9.8)

    def test_recipe_without_servings_draws_nothing(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        catalog.recipes["burger"].servings = 0
        sale = recorder(catalog).record_sale([{"menu_item_id": "burger", "quantity": 1}], settings)
        assert catalog.items["bun"].quantity_on_hand == 10
        assert sale.warnings
