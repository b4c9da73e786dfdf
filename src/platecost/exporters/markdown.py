"""
Markdown costing sheet exporter.

Renders a recipe's cost breakdown as a printable sheet for the kitchen or
the accountant.
"""

from __future__ import annotations

from datetime import datetime, timezone

from platecost.analyzers.costing import CostBreakdown
from platecost.models.recipe import Recipe


def _money(value: float, currency: str) -> str:
    return f"{value:,.2f} {currency}"


def render_costing_sheet(
    recipe: Recipe,
    breakdown: CostBreakdown,
    currency: str = "USD",
    generated_at: datetime | None = None,
) -> str:
    """Render a recipe costing sheet as Markdown."""
    generated_at = generated_at or datetime.now(timezone.utc)
    lines: list[str] = []

    lines.append(f"# Costing Sheet — {recipe.name}")
    lines.append("")
    lines.append(f"*Category: {recipe.category} | Servings: {recipe.servings}*")
    if recipe.production_yield and recipe.production_unit:
        lines.append(f"*Batch yield: {recipe.production_yield:g} {recipe.production_unit}*")
    lines.append(f"*Generated: {generated_at.strftime('%Y-%m-%d %H:%M UTC')}*")
    lines.append("")

    lines.append("## Ingredients")
    lines.append("")
    if breakdown.lines:
        lines.append("| Ingredient | Quantity | Yield | Unit Cost | Cost |")
        lines.append("|------------|----------|-------|-----------|------|")
        for line in breakdown.lines:
            name = f"{line.name} *(sub-recipe)*" if line.kind == "recipe" else line.name
            lines.append(
                f"| {name} | {line.quantity:g} {line.unit} | {line.yield_percentage:g}% "
                f"| {_money(line.unit_cost, currency)} | {_money(line.cost, currency)} |"
            )
    else:
        lines.append("_No costed ingredients._")
    lines.append("")

    lines.append("## Cost Summary")
    lines.append("")
    lines.append("| Component | Batch Cost |")
    lines.append("|-----------|------------|")
    lines.append(f"| Raw materials | {_money(breakdown.raw_material_cost, currency)} |")
    if recipe.wastage_factor:
        lines.append(
            f"| Raw materials incl. {recipe.wastage_factor:g}% wastage "
            f"| {_money(breakdown.adjusted_raw_material_cost, currency)} |"
        )
    lines.append(f"| Labour | {_money(breakdown.labour_cost, currency)} |")
    lines.append(f"| Packaging | {_money(breakdown.packaging_cost, currency)} |")
    lines.append(f"| Variable overhead | {_money(breakdown.variable_overhead_cost, currency)} |")
    lines.append(f"| Fixed overhead | {_money(breakdown.fixed_overhead_cost, currency)} |")
    lines.append(f"| **Total** | **{_money(breakdown.total_cost, currency)}** |")
    lines.append("")
    lines.append(f"**Cost per serving:** {_money(breakdown.cost_per_serving, currency)}")
    lines.append("")
    lines.append(f"**Suggested sale price:** {_money(breakdown.suggested_price, currency)}")
    if recipe.target_sale_price_per_serving:
        lines.append("")
        target = f"**Target sale price:** {_money(recipe.target_sale_price_per_serving, currency)}"
        pct = breakdown.food_cost_pct(recipe.target_sale_price_per_serving)
        if pct is not None:
            target += f" ({pct:.1f}% food cost)"
        lines.append(target)
    lines.append("")

    if breakdown.warnings:
        lines.append("## ⚠️ Warnings")
        lines.append("")
        for warning in breakdown.warnings:
            lines.append(f"- {warning.message}")
        lines.append("")

    if recipe.instructions:
        lines.append("## Method")
        lines.append("")
        for i, step in enumerate(recipe.instructions, 1):
            lines.append(f"{i}. {step}")
        lines.append("")

    lines.append("---")
    lines.append("*Generated by PlateCost*")
    return "\n".join(lines)
