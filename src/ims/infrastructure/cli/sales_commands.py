"""CLI commands for sales."""

from __future__ import annotations

import click

from ims.application.dto import SaleLineDTO
from ims.domain.exceptions import DomainException


def _print_lines(lines: list[SaleLineDTO]) -> None:
    click.echo(f"  {'Date':<21} {'Product':<20} {'Qty':>6} {'Price':>12} {'Total':>14}")
    click.echo(f"  {'-'*77}")
    for line in lines:
        click.echo(
            f"  {line.date:<21} {line.product_name:<20} {line.quantity:>6} "
            f"{line.unit_price:>12} {line.total_amount:>14}"
        )


@click.command("list")
@click.option("--search", default=None, help="Filter by product name.")
@click.pass_obj
def sales_list(services, search: str | None) -> None:
    """List recorded sales, newest first."""
    sales = services.sales.list()
    if search:
        sales = [s for s in sales if search.lower() in s.product_name.lower()]

    if not sales:
        click.echo("No sales found.")
        return
    _print_lines([SaleLineDTO.from_transaction(s) for s in sales])


@click.command("record")
@click.option("--product-id", required=True, help="Inventory item ID.")
@click.option("--quantity", required=True, type=int, help="Units sold.")
@click.pass_obj
def sales_record(services, product_id: str, quantity: int) -> None:
    """Record a sale (reduces inventory quantity)."""
    try:
        result = services.record_sale.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    sale = result.transaction
    click.echo(
        f"Sale {sale.id} recorded: {sale.quantity} x {sale.product_name} "
        f"at {sale.unit_price} = {sale.total_amount}"
    )
    click.echo(f"Remaining stock: {result.new_quantity}")


@click.command("receipt")
@click.option("--id", "transaction_ids", multiple=True, help="Sale ID (repeatable). Default: all sales.")
@click.pass_obj
def sales_receipt(services, transaction_ids: tuple[str, ...]) -> None:
    """Print a receipt with the fixed-rate surcharge."""
    try:
        receipt = services.receipt.handle(list(transaction_ids) or None)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_lines(receipt.lines)
    click.echo(f"  {'-'*77}")
    click.echo(f"  {'Subtotal':<50} {receipt.subtotal:>27}")
    click.echo(f"  {'GST (' + receipt.tax_rate + ')':<50} {receipt.tax:>27}")
    click.echo(f"  {'Total':<50} {receipt.total:>27}")
