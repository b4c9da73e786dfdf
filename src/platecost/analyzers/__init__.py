"""
PlateCost analyzers — pure costing computations.

Everything here reads a catalog snapshot plus explicit business settings;
only ``SaleRecorder`` mutates state.
"""

from platecost.analyzers.costing import (
    CostBreakdown,
    CostingEngine,
    CostWarning,
    LineCost,
    WarningKind,
)
from platecost.analyzers.labour import LabourCostResolver, LabourRate
from platecost.analyzers.menu_engineering import (
    MenuClass,
    MenuEngineeringClassifier,
    MenuEngineeringResult,
    MenuItemPerformance,
)
from platecost.analyzers.overhead import OverheadAllocation, OverheadAllocator
from platecost.analyzers.recipe_graph import RecipeGraph, StockDraw
from platecost.analyzers.sales import OversellPolicy, SaleRecorder
from platecost.analyzers.units import UnitConversionTable

__all__ = [
    "CostBreakdown",
    "CostingEngine",
    "CostWarning",
    "LineCost",
    "WarningKind",
    "LabourCostResolver",
    "LabourRate",
    "MenuClass",
    "MenuEngineeringClassifier",
    "MenuEngineeringResult",
    "MenuItemPerformance",
    "OverheadAllocation",
    "OverheadAllocator",
    "RecipeGraph",
    "StockDraw",
    "OversellPolicy",
    "SaleRecorder",
    "UnitConversionTable",
]
