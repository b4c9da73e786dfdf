"""
Example: cost a bistro menu and record a service.

Run from the repository root:
    python examples/bistro/run_costing.py

Or via CLI:
    platecost cost --config examples/bistro/platecost.yaml --recipe bolognese
"""

from pathlib import Path

from platecost import Kitchen

SCRIPT_DIR = Path(__file__).parent.resolve()


def main() -> None:
    kitchen = Kitchen.from_config(
        str(SCRIPT_DIR / "platecost.yaml"),
        data_file=str(SCRIPT_DIR / "kitchen.yaml"),
    )
    currency = kitchen.config.currency

    print("=== Recipe costs ===")
    for recipe in kitchen.catalog.recipes.values():
        breakdown = kitchen.calculate_recipe_cost_breakdown(recipe)
        print(
            f"{recipe.name:<24} batch {breakdown.total_cost:8.2f} {currency}"
            f"  per serving {breakdown.cost_per_serving:6.2f}"
            f"  suggested {breakdown.suggested_price:6.2f}"
        )
        for warning in breakdown.warnings:
            print(f"    ! {warning.message}")

    print("\n=== Menu engineering ===")
    result = kitchen.analyze_menu()
    for item in result.items:
        print(f"{item.name:<24} {item.classification.value.upper():<10} profit {item.profit:6.2f}")
    print(result.explanation)

    print("\n=== Service ===")
    sale = kitchen.record_sale(
        [
            {"menu_item_id": "spag-bol", "quantity": 6},
            {"menu_item_id": "salmon", "quantity": 3},
        ]
    )
    print(f"Revenue {sale.total_revenue:.2f}, cost {sale.total_cost:.2f}, profit {sale.total_profit:.2f}")
    for item in kitchen.catalog.items.values():
        flag = "  LOW" if item.is_low_stock else ""
        print(f"  {item.name:<20} {item.quantity_on_hand:8.3f} {item.unit}{flag}")


if __name__ == "__main__":
    main()
