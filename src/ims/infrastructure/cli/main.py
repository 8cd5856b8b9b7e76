import logging
from pathlib import Path

import click

from ims.application.dto import LowStockAlert
from ims.domain.exceptions import DomainException
from ims.infrastructure.bootstrap import build_services
from ims.infrastructure.cli.inventory_commands import (
    inventory_add,
    inventory_list,
    inventory_low_stock,
    inventory_remove,
    inventory_update,
)
from ims.infrastructure.cli.report_commands import report_dashboard, report_sales
from ims.infrastructure.cli.sales_commands import sales_list, sales_receipt, sales_record
from ims.infrastructure.config import ConfigError, Settings

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def _echo_alert(alert: LowStockAlert) -> None:
    click.secho(f"Low stock alert: {alert.message}", fg="yellow", err=True)


@click.group()
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Read settings from this .env file.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging.")
@click.pass_context
def cli(ctx: click.Context, env_file: Path | None, verbose: bool) -> None:
    """IMS — Inventory & Sales Tracking"""
    try:
        settings = Settings.from_env(env_file)
    except ConfigError as exc:
        raise click.ClickException(str(exc))

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format=LOG_FORMAT,
    )

    try:
        services = build_services(settings, on_low_stock=_echo_alert)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    for repo in (services.inventory, services.sales):
        if repo.last_error is not None:
            click.secho(f"Warning: {repo.last_error}", fg="yellow", err=True)
    ctx.obj = services
    ctx.call_on_close(services.close)


@cli.group()
def inventory() -> None:
    """Manage inventory items."""


@cli.group()
def sales() -> None:
    """Record and list sales."""


@cli.group()
def report() -> None:
    """Read-only summaries."""


@cli.command("seed")
@click.pass_obj
def seed(services) -> None:
    """Fill empty collections with sample data."""
    result = services.seed.handle()
    for name, seeded in (("inventory", result.inventory_seeded), ("sales", result.sales_seeded)):
        if seeded:
            click.echo(f"Seeded {name} with sample data.")
        else:
            click.echo(f"{name.capitalize()} already has data; left untouched.")


# Register subcommands
inventory.add_command(inventory_add)
inventory.add_command(inventory_list)
inventory.add_command(inventory_low_stock)
inventory.add_command(inventory_remove)
inventory.add_command(inventory_update)
sales.add_command(sales_list)
sales.add_command(sales_receipt)
sales.add_command(sales_record)
report.add_command(report_dashboard)
report.add_command(report_sales)
