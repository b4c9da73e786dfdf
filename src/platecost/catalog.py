"""
Catalog — the in-memory data scope of one business.

The costing engine only reads through the ``Catalog`` interface. ``InMemoryCatalog``
adds the management operations (with referential guards) and YAML loading.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from platecost.analyzers.recipe_graph import RecipeGraph
from platecost.analyzers.units import UnitConversionTable
from platecost.errors import CyclicRecipeError, MissingReferenceError, ReferenceInUseError
from platecost.models.catalog import Overhead, PricedItem, StaffMember, UnitConversion, new_id
from platecost.models.recipe import Recipe
from platecost.models.sales import MenuItem, Sale

logger = logging.getLogger("platecost.catalog")


class RecipeCategory(BaseModel):
    """A managed recipe category name."""

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)


class CatalogData(BaseModel):
    """Serialized shape of a business dataset (YAML/JSON)."""

    items: list[PricedItem] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    conversions: list[UnitConversion] = Field(default_factory=list)
    staff: list[StaffMember] = Field(default_factory=list)
    overheads: list[Overhead] = Field(default_factory=list)
    menu_items: list[MenuItem] = Field(default_factory=list)
    categories: list[RecipeCategory] = Field(default_factory=list)
    sales: list[Sale] = Field(default_factory=list)


class Catalog(ABC):
    """Read interface consumed by the costing engine.

    To back the engine with another store, subclass this and implement the
    lookups; everything must already be materialized in memory.
    """

    units: UnitConversionTable

    @abstractmethod
    def get_priced_item(self, item_id: str) -> PricedItem | None:
        ...

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Recipe | None:
        ...

    @abstractmethod
    def list_recipes(self) -> list[Recipe]:
        ...

    @abstractmethod
    def get_staff_member(self, staff_id: str) -> StaffMember | None:
        ...

    @abstractmethod
    def staff_members(self) -> list[StaffMember]:
        ...

    @abstractmethod
    def overheads(self) -> list[Overhead]:
        ...


class InMemoryCatalog(Catalog):
    """Dict-backed catalog for a single business.

    Usage::

        catalog = InMemoryCatalog.from_yaml("kitchen.yaml")
        catalog.add_priced_item(PricedItem(id="flour", name="Flour", unit="kg", unit_cost=1.2))
    """

    def __init__(self) -> None:
        self.items: dict[str, PricedItem] = {}
        self.recipes: dict[str, Recipe] = {}
        self.staff: dict[str, StaffMember] = {}
        self._overheads: dict[str, Overhead] = {}
        self.menu_items: dict[str, MenuItem] = {}
        self.categories: dict[str, RecipeCategory] = {}
        self.sales: list[Sale] = []
        self.units = UnitConversionTable()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InMemoryCatalog:
        """Build a catalog from a plain dict (validated by pydantic)."""
        parsed = CatalogData.model_validate(data)
        catalog = cls()
        for item in parsed.items:
            catalog.items[item.id] = item
        for conversion in parsed.conversions:
            catalog.units.add(conversion)
        for member in parsed.staff:
            catalog.staff[member.id] = member
        for overhead in parsed.overheads:
            catalog._overheads[overhead.id] = overhead
        for category in parsed.categories:
            catalog.categories[category.id] = category
        # Recipes may reference each other in any order; check cycles once all are present.
        for recipe in parsed.recipes:
            catalog.recipes[recipe.id] = recipe
            catalog.add_category(recipe.category)
        for recipe in parsed.recipes:
            catalog._graph().assert_acyclic(recipe)
        for menu_item in parsed.menu_items:
            catalog.menu_items[menu_item.id] = menu_item
        catalog.sales.extend(parsed.sales)
        logger.debug(
            "Loaded catalog: %d items, %d recipes, %d menu items",
            len(catalog.items),
            len(catalog.recipes),
            len(catalog.menu_items),
        )
        return catalog

    @classmethod
    def from_yaml(cls, path: str | Path) -> InMemoryCatalog:
        """Load a business dataset from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the catalog (inverse of ``from_dict``)."""
        return CatalogData(
            items=list(self.items.values()),
            recipes=list(self.recipes.values()),
            conversions=self.units.conversions,
            staff=list(self.staff.values()),
            overheads=list(self._overheads.values()),
            menu_items=list(self.menu_items.values()),
            categories=list(self.categories.values()),
            sales=list(self.sales),
        ).model_dump(mode="json")

    def _graph(self) -> RecipeGraph:
        return RecipeGraph(self)

    # ------------------------------------------------------------------
    # Catalog interface
    # ------------------------------------------------------------------

    def get_priced_item(self, item_id: str) -> PricedItem | None:
        return self.items.get(item_id)

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        return self.recipes.get(recipe_id)

    def list_recipes(self) -> list[Recipe]:
        return list(self.recipes.values())

    def get_staff_member(self, staff_id: str) -> StaffMember | None:
        return self.staff.get(staff_id)

    def get_menu_item(self, menu_item_id: str) -> MenuItem | None:
        return self.menu_items.get(menu_item_id)

    def staff_members(self) -> list[StaffMember]:
        return list(self.staff.values())

    def overheads(self) -> list[Overhead]:
        return list(self._overheads.values())

    # ------------------------------------------------------------------
    # Priced items
    # ------------------------------------------------------------------

    def add_priced_item(self, item: PricedItem) -> PricedItem:
        self.items[item.id] = item
        return item

    def update_priced_item(self, item: PricedItem) -> PricedItem:
        if item.id not in self.items:
            raise MissingReferenceError("Priced item", item.id)
        self.items[item.id] = item
        return item

    def _recipes_using_item(self, item_id: str) -> list[Recipe]:
        return [
            r
            for r in self.recipes.values()
            if any(i.type == "item" and i.item_id == item_id for i in r.ingredients)
        ]

    def delete_priced_item(self, item_id: str) -> None:
        """Delete an item; blocked while any recipe uses it."""
        users = self._recipes_using_item(item_id)
        if users:
            names = ", ".join(r.name for r in users)
            raise ReferenceInUseError(
                f"Cannot delete item {item_id!r}: it is used in recipe(s) {names}"
            )
        if self.items.pop(item_id, None) is None:
            raise MissingReferenceError("Priced item", item_id)

    def bulk_delete_priced_items(self, item_ids: list[str]) -> dict[str, Any]:
        """Delete the unreferenced items; report names of the ones still in use."""
        deleted = 0
        failed: list[str] = []
        for item_id in item_ids:
            item = self.items.get(item_id)
            if item is None:
                continue
            if self._recipes_using_item(item_id):
                if item.name not in failed:
                    failed.append(item.name)
                continue
            del self.items[item_id]
            deleted += 1
        return {"deleted_count": deleted, "failed_items": failed}

    # ------------------------------------------------------------------
    # Recipes
    # ------------------------------------------------------------------

    def add_recipe(self, recipe: Recipe) -> Recipe:
        """Add a recipe; raises CyclicRecipeError if it would close a sub-recipe loop."""
        previous = self.recipes.get(recipe.id)
        self.recipes[recipe.id] = recipe
        try:
            self._graph().assert_acyclic(recipe)
        except CyclicRecipeError:
            if previous is None:
                del self.recipes[recipe.id]
            else:
                self.recipes[recipe.id] = previous
            raise
        self.add_category(recipe.category)
        return recipe

    def update_recipe(self, recipe: Recipe) -> Recipe:
        if recipe.id not in self.recipes:
            raise MissingReferenceError("Recipe", recipe.id)
        return self.add_recipe(recipe)

    def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe; blocked while another recipe uses it as a sub-recipe."""
        if recipe_id not in self.recipes:
            raise MissingReferenceError("Recipe", recipe_id)
        dependents = self._graph().dependents(recipe_id)
        if dependents:
            names = ", ".join(r.name for r in dependents)
            raise ReferenceInUseError(
                f"Cannot delete recipe {recipe_id!r}: it is a sub-recipe of {names}"
            )
        del self.recipes[recipe_id]

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def add_category(self, name: str) -> RecipeCategory | None:
        """Add a category unless one with the same name (any case) exists."""
        if not name:
            return None
        for category in self.categories.values():
            if category.name.lower() == name.lower():
                return category
        category = RecipeCategory(name=name)
        self.categories[category.id] = category
        return category

    def delete_category(self, category_id: str) -> None:
        category = self.categories.get(category_id)
        if category is None:
            raise MissingReferenceError("Category", category_id)
        if any(r.category.lower() == category.name.lower() for r in self.recipes.values()):
            raise ReferenceInUseError(
                f"Cannot delete category {category.name!r}: it is used in one or more recipes"
            )
        del self.categories[category_id]

    # ------------------------------------------------------------------
    # Conversions, staff, overheads, menu
    # ------------------------------------------------------------------

    def add_conversion(self, conversion: UnitConversion) -> UnitConversion:
        return self.units.add(conversion)

    def delete_conversion(self, conversion_id: str) -> None:
        if not self.units.remove(conversion_id):
            raise MissingReferenceError("Unit conversion", conversion_id)

    def add_staff_member(self, member: StaffMember) -> StaffMember:
        self.staff[member.id] = member
        return member

    def delete_staff_member(self, staff_id: str) -> None:
        users = [
            r.name
            for r in self.recipes.values()
            if r.labour.method == "staff" and r.labour.staff_id == staff_id
        ]
        if users:
            raise ReferenceInUseError(
                f"Cannot delete staff member {staff_id!r}: assigned to {', '.join(users)}"
            )
        if self.staff.pop(staff_id, None) is None:
            raise MissingReferenceError("Staff member", staff_id)

    def add_overhead(self, overhead: Overhead) -> Overhead:
        self._overheads[overhead.id] = overhead
        return overhead

    def delete_overhead(self, overhead_id: str) -> None:
        if self._overheads.pop(overhead_id, None) is None:
            raise MissingReferenceError("Overhead", overhead_id)

    def add_menu_item(self, menu_item: MenuItem) -> MenuItem:
        if menu_item.recipe_id not in self.recipes:
            raise MissingReferenceError("Recipe", menu_item.recipe_id)
        self.menu_items[menu_item.id] = menu_item
        return menu_item

    def delete_menu_item(self, menu_item_id: str) -> None:
        if self.menu_items.pop(menu_item_id, None) is None:
            raise MissingReferenceError("Menu item", menu_item_id)
