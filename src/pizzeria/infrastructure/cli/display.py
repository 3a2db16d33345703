"""Shared formatting for displaying purchases."""

from __future__ import annotations

import click

from pizzeria.application.dto import PurchaseDTO


def display_purchase(dto: PurchaseDTO) -> None:
    click.echo(f"Purchase #{dto.id}  (state={dto.state})")
    click.echo(f"Customer: #{dto.customer_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.worker_id is not None:
        click.echo(f"Prepared by: #{dto.worker_id}")
    click.echo()

    click.echo(f"  {'Pizza':<20} {'Toppings':<30} {'Price':>10}")
    click.echo(f"  {'-'*62}")
    for pizza in dto.pizzas:
        toppings = ", ".join(pizza.toppings)
        click.echo(f"  {pizza.name:<20} {toppings:<30} {pizza.price:>10}")
    click.echo(f"  {'-'*62}")
    click.echo(f"  {'Subtotal':<51} {dto.subtotal:>10}")
    for rebate in dto.rebates:
        click.echo(f"  {'Rebate (' + rebate.rule + ')':<51} {'-' + rebate.amount:>10}")
    if dto.amount is not None:
        click.echo(f"  {'Amount':<51} {dto.amount:>10}")
