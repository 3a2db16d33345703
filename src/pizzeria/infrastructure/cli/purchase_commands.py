"""CLI commands for the customer side of a purchase."""

from __future__ import annotations

import click

from pizzeria.application.dto import to_dto
from pizzeria.application.list_purchases import ListPurchasesHandler
from pizzeria.application.show_purchase import ShowPurchaseHandler
from pizzeria.domain.exceptions import DomainException
from pizzeria.domain.model.customer import CUSTOMER, Customer
from pizzeria.domain.model.pizza import Pizza
from pizzeria.infrastructure.bootstrap import purchase_lifecycle, purchase_repository
from pizzeria.infrastructure.cli.display import display_purchase


def _customer(customer_id: int, name: str, email: str) -> Customer:
    return Customer(id=customer_id, name=name, email=email, roles=frozenset({CUSTOMER}))


def _parse_toppings(raw: str | None) -> list[str]:
    """Parse 'tomato,mozzarella' into a topping list."""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


@click.command("add")
@click.option("--customer-id", required=True, type=int, help="Customer ID.")
@click.option("--customer-name", required=True, help="Customer name.")
@click.option("--email", default="", help="Customer email.")
@click.option("--name", "pizza_name", required=True, help="Pizza name.")
@click.option("--price", required=True, help="Pizza price (e.g. 12.89).")
@click.option("--toppings", default=None, help="Toppings as 'tomato,mozzarella'.")
def purchase_add(
    customer_id: int,
    customer_name: str,
    email: str,
    pizza_name: str,
    price: str,
    toppings: str | None,
) -> None:
    """Add a pizza to the customer's draft purchase."""
    customer = _customer(customer_id, customer_name, email)

    try:
        pizza = Pizza.of(pizza_name, price, _parse_toppings(toppings))
        purchase = purchase_lifecycle().add_pizza(customer, pizza)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Added {pizza.name} ({pizza.price}) to purchase #{purchase.id}  "
        f"(state={purchase.state.value}, pizzas={len(purchase.pizzas)})"
    )


@click.command("confirm")
@click.option("--customer-id", required=True, type=int, help="Customer ID.")
@click.option("--customer-name", required=True, help="Customer name.")
@click.option("--email", default="", help="Customer email.")
def purchase_confirm(customer_id: int, customer_name: str, email: str) -> None:
    """Confirm the customer's draft purchase."""
    customer = _customer(customer_id, customer_name, email)

    try:
        purchase = purchase_lifecycle().confirm(customer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase #{purchase.id} placed, waiting for the kitchen.")
    display_purchase(to_dto(purchase))


@click.command("show")
@click.option("--id", "purchase_id", required=True, type=int, help="Purchase ID to display.")
def purchase_show(purchase_id: int) -> None:
    """Show details of an existing purchase."""
    handler = ShowPurchaseHandler(purchase_repo=purchase_repository())

    try:
        dto = handler.handle(purchase_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_purchase(dto)


@click.command("list")
@click.option("--state", default=None, help="Only purchases in this state.")
def purchase_list(state: str | None) -> None:
    """List purchases, oldest first."""
    handler = ListPurchasesHandler(purchase_repo=purchase_repository())

    try:
        dtos = handler.handle(state)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dtos:
        click.echo("No purchases found.")
        return

    click.echo(f"{'ID':<6} {'Customer':<10} {'State':<10} {'Pizzas':>6} {'Amount':>10}")
    click.echo("-" * 46)
    for dto in dtos:
        amount = dto.amount or "-"
        click.echo(
            f"{dto.id:<6} {dto.customer_id:<10} {dto.state:<10} {len(dto.pizzas):>6} {amount:>10}"
        )
