"""Tests for labour and overhead allocation."""

import pytest

from platecost.analyzers.labour import LabourCostResolver
from platecost.analyzers.overhead import OverheadAllocator
from platecost.catalog import InMemoryCatalog
from platecost.models.catalog import BusinessSettings, Overhead, OverheadType, StaffMember
from platecost.models.recipe import (
    BlendedLabour,
    CustomLabour,
    Recipe,
    StaffAssignedLabour,
)


@pytest.fixture
def settings() -> BusinessSettings:
    return BusinessSettings(working_days_per_month=22, hours_per_day=8)


@pytest.fixture
def catalog() -> InMemoryCatalog:
    catalog = InMemoryCatalog()
    catalog.add_staff_member(StaffMember(id="chef", name="Chef", monthly_salary=3520))
    catalog.add_staff_member(StaffMember(id="porter", name="Porter", monthly_salary=2480))
    return catalog


class TestLabourCost:
    def test_blended(self, catalog: InMemoryCatalog, settings: BusinessSettings) -> None:
        resolver = LabourCostResolver(catalog)
        recipe = Recipe(name="Soup", labour_minutes=30)
        rate = resolver.hourly_rate(recipe, settings)
        assert rate.method == "blended"
        assert rate.hourly_rate == pytest.approx(6000 / 176)
        assert resolver.compute(recipe, settings) == pytest.approx(17.05, abs=0.01)

    def test_blended_without_staff(self, settings: BusinessSettings) -> None:
        resolver = LabourCostResolver(InMemoryCatalog())
        assert resolver.compute(Recipe(name="Soup", labour_minutes=30), settings) == 0

    def test_custom(self, catalog: InMemoryCatalog, settings: BusinessSettings) -> None:
        recipe = Recipe(
            name="Bread",
            labour_minutes=60,
            labour=CustomLabour(salary=4000, working_days=20, working_hours=8),
        )
        assert LabourCostResolver(catalog).compute(recipe, settings) == pytest.approx(25)

    def test_custom_defaults_to_business_settings(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        recipe = Recipe(name="Bread", labour_minutes=60, labour=CustomLabour(salary=4400))
        assert LabourCostResolver(catalog).compute(recipe, settings) == pytest.approx(25)

    def test_staff_assigned(self, catalog: InMemoryCatalog, settings: BusinessSettings) -> None:
        recipe = Recipe(
            name="Terrine", labour_minutes=90, labour=StaffAssignedLabour(staff_id="chef")
        )
        resolver = LabourCostResolver(catalog)
        assert resolver.hourly_rate(recipe, settings).hourly_rate == pytest.approx(20)
        assert resolver.compute(recipe, settings) == pytest.approx(30)

    def test_unknown_staff_member(
        self, catalog: InMemoryCatalog, settings: BusinessSettings
    ) -> None:
        recipe = Recipe(
            name="Terrine", labour_minutes=90, labour=StaffAssignedLabour(staff_id="gone")
        )
        cost, rate = LabourCostResolver(catalog).compute_with_rate(recipe, settings)
        assert cost == 0
        assert rate.warning is not None
        assert "gone" in rate.warning

    @pytest.mark.parametrize("days,hours", [(0, 8), (22, 0), (0, 0)])
    def test_zero_working_hours(
        self, catalog: InMemoryCatalog, days: float, hours: float
    ) -> None:
        settings = BusinessSettings(working_days_per_month=days, hours_per_day=hours)
        recipe = Recipe(name="Soup", labour_minutes=30)
        assert LabourCostResolver(catalog).compute(recipe, settings) == 0

    def test_strategy_parsed_from_dict(self) -> None:
        recipe = Recipe.model_validate(
            {"name": "Bread", "labour": {"method": "custom", "salary": 100}}
        )
        assert isinstance(recipe.labour, CustomLabour)
        assert isinstance(Recipe(name="Soup").labour, BlendedLabour)


class TestOverheadAllocation:
    @pytest.fixture
    def allocator(self) -> OverheadAllocator:
        catalog = InMemoryCatalog()
        catalog.add_overhead(Overhead(name="Rent", type=OverheadType.FIXED, monthly_cost=3000))
        catalog.add_overhead(Overhead(name="Insurance", type=OverheadType.FIXED, monthly_cost=1000))
        catalog.add_overhead(Overhead(name="Gas", type=OverheadType.VARIABLE, monthly_cost=600))
        return OverheadAllocator(catalog)

    def test_totals(self, allocator: OverheadAllocator) -> None:
        totals = allocator.totals()
        assert totals[OverheadType.FIXED] == 4000
        assert totals[OverheadType.VARIABLE] == 600

    def test_per_dish(self, allocator: OverheadAllocator) -> None:
        settings = BusinessSettings(total_dishes_produced=1200, total_dishes_sold=1000)
        per_dish = allocator.per_dish(settings)
        assert per_dish.variable == pytest.approx(0.5)
        assert per_dish.fixed == pytest.approx(4)

    def test_zero_volumes(self, allocator: OverheadAllocator) -> None:
        per_dish = allocator.per_dish(BusinessSettings())
        assert per_dish.variable == 0
        assert per_dish.fixed == 0

    def test_allocate_scales_with_servings(self, allocator: OverheadAllocator) -> None:
        settings = BusinessSettings(total_dishes_produced=1200, total_dishes_sold=1000)
        allocation = allocator.allocate(Recipe(name="Stew", servings=10), settings)
        assert allocation.variable == pytest.approx(5)
        assert allocation.fixed == pytest.approx(40)
        assert allocation.total == pytest.approx(45)
