"""Exporters package — render costing results for people."""
from platecost.exporters.markdown import render_costing_sheet

__all__ = ["render_costing_sheet"]
