"""CLI commands for kitchen staff."""

from __future__ import annotations

import click

from pizzeria.application.dto import to_dto
from pizzeria.application.show_purchase import ShowPurchaseHandler
from pizzeria.domain.exceptions import DomainException
from pizzeria.domain.model.customer import PIZZA_MAKER, Customer
from pizzeria.infrastructure.bootstrap import purchase_lifecycle, purchase_repository
from pizzeria.infrastructure.cli.display import display_purchase


def _staff(staff_id: int, name: str) -> Customer:
    return Customer(id=staff_id, name=name, roles=frozenset({PIZZA_MAKER}))


@click.command("pick")
@click.option("--staff-id", required=True, type=int, help="Pizza maker ID.")
@click.option("--staff-name", default="", help="Pizza maker name.")
def kitchen_pick(staff_id: int, staff_name: str) -> None:
    """Pick the oldest placed purchase for preparation."""
    try:
        purchase = purchase_lifecycle().pick_next(_staff(staff_id, staff_name))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if purchase is None:
        click.echo("No purchase waiting.")
        return

    click.echo(f"Purchase #{purchase.id} is now being prepared by #{staff_id}.")
    display_purchase(to_dto(purchase))


@click.command("complete")
@click.option("--id", "purchase_id", required=True, type=int, help="Purchase ID to serve.")
def kitchen_complete(purchase_id: int) -> None:
    """Serve an ongoing purchase and compute its amount."""
    try:
        purchase_lifecycle().complete(purchase_id)
        dto = ShowPurchaseHandler(purchase_repo=purchase_repository()).handle(purchase_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase #{purchase_id} served.")
    display_purchase(dto)


@click.command("current")
@click.option("--staff-id", required=True, type=int, help="Pizza maker ID.")
def kitchen_current(staff_id: int) -> None:
    """Show what a pizza maker is currently preparing."""
    purchases = purchase_lifecycle().ongoing_for(_staff(staff_id, ""))

    if not purchases:
        click.echo(f"#{staff_id} is not preparing anything.")
        return

    for purchase in purchases:
        display_purchase(to_dto(purchase))
        click.echo()
