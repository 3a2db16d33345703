import click

from pizzeria.infrastructure.bootstrap import log_level
from pizzeria.infrastructure.cli.kitchen_commands import (
    kitchen_complete,
    kitchen_current,
    kitchen_pick,
)
from pizzeria.infrastructure.cli.purchase_commands import (
    purchase_add,
    purchase_confirm,
    purchase_list,
    purchase_show,
)
from pizzeria.infrastructure.log_config import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log lifecycle events to stderr.")
def cli(verbose: bool) -> None:
    """Pizzeria purchase lifecycle"""
    configure_logging("INFO" if verbose else log_level())


@cli.group()
def purchase() -> None:
    """Customer-side purchase commands."""


@cli.group()
def kitchen() -> None:
    """Kitchen-side preparation commands."""


# Register subcommands
purchase.add_command(purchase_add)
purchase.add_command(purchase_confirm)
purchase.add_command(purchase_list)
purchase.add_command(purchase_show)
kitchen.add_command(kitchen_complete)
kitchen.add_command(kitchen_current)
kitchen.add_command(kitchen_pick)
