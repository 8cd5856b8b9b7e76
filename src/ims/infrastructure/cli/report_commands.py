"""CLI commands for read-only reports."""

from __future__ import annotations

import click

from ims.application.reports import REPORT_PERIODS
from ims.domain.exceptions import DomainException


@click.command("dashboard")
@click.pass_obj
def report_dashboard(services) -> None:
    """Show inventory and sales totals."""
    summary = services.dashboard.handle()

    click.echo(f"Products:         {summary.total_products}")
    click.echo(f"Inventory value:  {summary.total_inventory_value}")
    click.echo(f"Total sales:      {summary.total_sales}")
    click.echo(f"Low stock items:  {len(summary.low_stock_items)}")
    for item in summary.low_stock_items:
        click.echo(f"  - {item.name}: {item.quantity} {item.unit} (threshold {item.threshold})")

    click.echo()
    click.echo("Stock by category:")
    for category, quantity in sorted(summary.stock_by_category.items()):
        click.echo(f"  {category:<20} {quantity:>10}")

    click.echo()
    click.echo("Sales, last 7 days:")
    for day in summary.daily_sales:
        click.echo(f"  {day.day:%a %Y-%m-%d}  {day.amount:>14}")

    if summary.recent_sales:
        click.echo()
        click.echo("Recent sales:")
        for line in summary.recent_sales:
            click.echo(f"  {line.date}  {line.product_name:<20} {line.quantity:>6} {line.total_amount:>14}")


@click.command("sales")
@click.option(
    "--period",
    type=click.Choice(list(REPORT_PERIODS)),
    default="7days",
    show_default=True,
    help="Reporting window.",
)
@click.pass_obj
def report_sales(services, period: str) -> None:
    """Sales totals, top products and category revenue for a period."""
    try:
        dto = services.sales_report.handle(period)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales report {dto.start} .. {dto.end}")
    click.echo(f"  Revenue:             {dto.total_sales}")
    click.echo(f"  Units sold:          {dto.total_items}")
    click.echo(f"  Average order value: {dto.average_order_value}")

    if dto.top_products:
        click.echo()
        click.echo(f"  {'Top products':<20} {'Units':>8} {'Value':>14}")
        for product in dto.top_products:
            click.echo(f"  {product.product_name:<20} {product.quantity:>8} {product.value:>14}")

    if dto.revenue_by_category:
        click.echo()
        click.echo("  Revenue by category:")
        for category, amount in sorted(dto.revenue_by_category.items()):
            click.echo(f"    {category:<18} {amount:>14}")
