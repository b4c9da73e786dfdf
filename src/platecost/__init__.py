"""
PlateCost — recipe costing for restaurants.

Cost recipes from priced items and sub-recipes, allocate labour and overhead,
and classify the menu.
"""

__version__ = "0.1.0"
__all__ = ["Kitchen"]

from platecost.kitchen import Kitchen  # noqa: E402
