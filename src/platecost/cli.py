"""
PlateCost CLI — command-line interface.

Usage:
    platecost cost --data kitchen.yaml --recipe bolognese
    platecost menu --data kitchen.yaml
    platecost convert 2.5 kg g
    platecost sell --data kitchen.yaml --line spag-bol:3 --save
    platecost sheet --data kitchen.yaml --recipe bolognese -o bolognese.md
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from platecost import __version__
from platecost.errors import PlateCostError

app = typer.Typer(
    name="platecost",
    help="🍽️ PlateCost — recipe costing for restaurants",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]PlateCost[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log data-quality warnings and costing details",
    ),
) -> None:
    """🍽️ PlateCost — know what every plate costs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_kitchen(config: str | None, data: str | None):  # noqa: ANN202
    from platecost.kitchen import Kitchen

    overrides = {"data_file": data} if data else {}
    try:
        return Kitchen.from_config(config, **overrides)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e
    except (PlateCostError, ValidationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


ConfigOption = typer.Option(None, "--config", "-c", help="Path to config file")
DataOption = typer.Option(None, "--data", "-d", help="Path to YAML business dataset")


@app.command()
def cost(
    recipe: str = typer.Option(..., "--recipe", "-r", help="Recipe id"),
    config: str = ConfigOption,
    data: str = DataOption,
) -> None:
    """Show the cost breakdown of a recipe."""
    kitchen = _load_kitchen(config, data)
    target = kitchen.catalog.get_recipe(recipe)
    if target is None:
        console.print(f"[red]Error: recipe {recipe!r} not found[/red]")
        raise typer.Exit(1)

    try:
        breakdown = kitchen.calculate_recipe_cost_breakdown(target)
    except PlateCostError as e:
        console.print(f"[red]Cannot cost recipe: {e}[/red]")
        raise typer.Exit(1) from e

    currency = kitchen.config.currency
    console.print(Panel.fit(f"[bold blue]{target.name}[/bold blue]", subtitle=f"{target.servings} servings"))

    lines = Table(title="Ingredients")
    lines.add_column("Ingredient", style="bold")
    lines.add_column("Quantity", justify="right")
    lines.add_column("Yield", justify="right")
    lines.add_column("Cost", justify="right")
    for line in breakdown.lines:
        lines.add_row(
            line.name,
            f"{line.quantity:g} {line.unit}",
            f"{line.yield_percentage:g}%",
            f"{line.cost:,.2f}",
        )
    console.print(lines)

    table = Table(title=f"Cost Breakdown ({currency})", show_lines=True)
    table.add_column("Component", style="bold")
    table.add_column("Batch", justify="right")
    table.add_row("Raw materials", f"{breakdown.raw_material_cost:,.2f}")
    table.add_row("Raw materials + wastage", f"{breakdown.adjusted_raw_material_cost:,.2f}")
    table.add_row("Labour", f"{breakdown.labour_cost:,.2f}")
    table.add_row("Packaging", f"{breakdown.packaging_cost:,.2f}")
    table.add_row("Overhead", f"{breakdown.overhead_cost:,.2f}")
    table.add_row("[bold]Total[/bold]", f"[bold]{breakdown.total_cost:,.2f}[/bold]")
    table.add_row("Cost per serving", f"{breakdown.cost_per_serving:,.2f}")
    table.add_row("Suggested price", f"{breakdown.suggested_price:,.2f}")
    console.print(table)
    _print_warnings([w.message for w in breakdown.warnings])


@app.command()
def menu(
    config: str = ConfigOption,
    data: str = DataOption,
) -> None:
    """Classify menu items into Stars, Plowhorses, Puzzles and Dogs."""
    kitchen = _load_kitchen(config, data)
    try:
        result = kitchen.analyze_menu()
    except PlateCostError as e:
        console.print(f"[red]Cannot analyze menu: {e}[/red]")
        raise typer.Exit(1) from e

    colors = {"star": "green", "plowhorse": "yellow", "puzzle": "blue", "dog": "red"}
    table = Table(title="Menu Engineering", show_lines=True)
    table.add_column("Item", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Profit", justify="right")
    table.add_column("Sold", justify="right")
    table.add_column("Class")
    for item in result.items:
        color = colors[item.classification.value]
        table.add_row(
            item.name,
            f"{item.sale_price:,.2f}",
            f"{item.cost_per_serving:,.2f}",
            f"{item.profit:,.2f}",
            str(item.sales_count),
            f"[{color}]{item.classification.value.upper()}[/{color}]",
        )
    console.print(table)
    console.print(f"[dim]{result.explanation}[/dim]")


@app.command()
def convert(
    quantity: float = typer.Argument(..., help="Quantity to convert"),
    from_unit: str = typer.Argument(..., help="Source unit"),
    to_unit: str = typer.Argument(..., help="Target unit"),
    item: str = typer.Option(None, "--item", help="Priced item id for item-specific conversions"),
    config: str = ConfigOption,
    data: str = DataOption,
) -> None:
    """Convert a quantity between units."""
    kitchen = _load_kitchen(config, data)
    factor = kitchen.resolve_unit_conversion(from_unit, to_unit, item)
    if factor is None:
        console.print(f"[red]No conversion from {from_unit} to {to_unit}[/red]")
        raise typer.Exit(1)
    console.print(f"{quantity:g} {from_unit} = [bold]{quantity * factor:g} {to_unit}[/bold]")


@app.command()
def sell(
    line: list[str] = typer.Option(..., "--line", "-l", help="MENU_ITEM_ID:QUANTITY, repeatable"),
    save: bool = typer.Option(False, "--save", help="Write updated stock back to the dataset"),
    config: str = ConfigOption,
    data: str = DataOption,
) -> None:
    """Record a sale, drawing ingredients from stock."""
    kitchen = _load_kitchen(config, data)
    lines = []
    for raw in line:
        menu_item_id, _, qty = raw.rpartition(":")
        if not menu_item_id or not qty.isdigit() or int(qty) <= 0:
            console.print(f"[red]Error: invalid line {raw!r}, expected ID:QUANTITY[/red]")
            raise typer.Exit(1)
        lines.append({"menu_item_id": menu_item_id, "quantity": int(qty)})

    try:
        sale = kitchen.record_sale(lines)
    except (PlateCostError, ValidationError) as e:
        console.print(f"[red]Sale rejected: {e}[/red]")
        raise typer.Exit(1) from e

    currency = kitchen.config.currency
    table = Table(title="Sale Recorded")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Revenue", f"{sale.total_revenue:,.2f} {currency}")
    table.add_row("Cost", f"{sale.total_cost:,.2f} {currency}")
    table.add_row("Profit", f"{sale.total_profit:,.2f} {currency}")
    console.print(table)
    _print_warnings(sale.warnings)

    if save:
        path = Path(kitchen.config.data_file or "kitchen.yaml")
        path.write_text(yaml.safe_dump(kitchen.catalog.to_dict(), sort_keys=False))
        console.print(f"[green]✓[/green] Dataset saved to [bold]{path}[/bold]")


@app.command()
def sheet(
    recipe: str = typer.Option(..., "--recipe", "-r", help="Recipe id"),
    output: str = typer.Option("costing_sheet.md", "--output", "-o", help="Output file path"),
    config: str = ConfigOption,
    data: str = DataOption,
) -> None:
    """Export a Markdown costing sheet for a recipe."""
    from platecost.exporters.markdown import render_costing_sheet

    kitchen = _load_kitchen(config, data)
    target = kitchen.catalog.get_recipe(recipe)
    if target is None:
        console.print(f"[red]Error: recipe {recipe!r} not found[/red]")
        raise typer.Exit(1)
    try:
        breakdown = kitchen.calculate_recipe_cost_breakdown(target)
    except PlateCostError as e:
        console.print(f"[red]Cannot cost recipe: {e}[/red]")
        raise typer.Exit(1) from e

    path = Path(output)
    path.write_text(render_costing_sheet(target, breakdown, kitchen.config.currency))
    console.print(f"[green]✓[/green] Costing sheet saved to [bold]{path}[/bold]")


def _print_warnings(warnings: list[str]) -> None:
    if not warnings:
        return
    console.print(f"[yellow]⚠️ {len(warnings)} data-quality warning(s):[/yellow]")
    for message in warnings:
        console.print(f"  • {message}")


if __name__ == "__main__":
    app()
