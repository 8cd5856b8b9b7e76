"""CLI commands for inventory management."""

from __future__ import annotations

import click

from ims.domain.exceptions import DomainException
from ims.domain.model.inventory import SUGGESTED_CATEGORIES, InventoryItem


def _print_items(items: list[InventoryItem]) -> None:
    click.echo(
        f"{'ID':<22} {'Name':<20} {'Category':<10} {'Qty':>8} {'Unit':<6} "
        f"{'Price':>12} {'Threshold':>9}"
    )
    click.echo("-" * 93)
    for item in items:
        flag = "  LOW" if item.is_low_stock else ""
        click.echo(
            f"{item.id:<22} {item.name:<20} {item.category:<10} {item.quantity:>8} "
            f"{item.unit:<6} {str(item.unit_price):>12} {item.threshold:>9}{flag}"
        )


@click.command("list")
@click.option("--search", default=None, help="Filter by product name or category.")
@click.option("--category", default=None, help="Only show this category.")
@click.pass_obj
def inventory_list(services, search: str | None, category: str | None) -> None:
    """List inventory items, most recently updated first."""
    items = services.inventory.list()
    if search:
        needle = search.lower()
        items = [i for i in items if needle in i.name.lower() or needle in i.category.lower()]
    if category:
        items = [i for i in items if i.category.lower() == category.lower()]

    if not items:
        click.echo("No inventory items found.")
        return
    _print_items(items)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option(
    "--category",
    required=True,
    help=f"Category (e.g. {', '.join(SUGGESTED_CATEGORIES)}).",
)
@click.option("--quantity", required=True, type=int, help="Quantity in stock.")
@click.option("--unit", required=True, help="Unit label, e.g. kg.")
@click.option("--price", required=True, help="Unit price (e.g. 75.00).")
@click.option("--threshold", required=True, type=int, help="Low-stock threshold.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def inventory_add(
    services,
    name: str,
    category: str,
    quantity: int,
    unit: str,
    price: str,
    threshold: int,
    notes: str | None,
) -> None:
    """Add a new item to the inventory."""
    try:
        item = services.inventory.add(
            {
                "name": name,
                "category": category,
                "quantity": quantity,
                "unit": unit,
                "unit_price": price,
                "threshold": threshold,
                "notes": notes,
            }
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item.id} '{item.name}' added ({item.quantity} {item.unit} at {item.unit_price})")


@click.command("update")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--name", default=None)
@click.option("--category", default=None)
@click.option("--quantity", default=None, type=int)
@click.option("--unit", default=None)
@click.option("--price", default=None, help="New unit price.")
@click.option("--threshold", default=None, type=int)
@click.option("--notes", default=None)
@click.pass_obj
def inventory_update(services, item_id: str, price: str | None, **fields) -> None:
    """Edit fields of an existing item."""
    changes = {k: v for k, v in fields.items() if v is not None}
    if price is not None:
        changes["unit_price"] = price
    if not changes:
        raise click.ClickException("Nothing to update; pass at least one field option.")

    try:
        item = services.inventory.update(item_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item.id} '{item.name}' updated.")


@click.command("remove")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.pass_obj
def inventory_remove(services, item_id: str) -> None:
    """Delete an item from the inventory."""
    try:
        services.inventory.remove(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item_id} removed.")


@click.command("low-stock")
@click.pass_obj
def inventory_low_stock(services) -> None:
    """Show items at or below their threshold."""
    items = services.low_stock.get()
    if not items:
        click.echo("No items are low on stock.")
        return
    _print_items(items)
