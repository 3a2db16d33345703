"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from pizzeria.domain.model.purchase import Purchase
from pizzeria.domain.service.pricing import PriceBreakdown

_TIME_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class PizzaDTO:
    """Output: a single pizza as displayed to the user."""

    name: str
    price: str  # formatted, e.g. "$12.89"
    toppings: list[str]


@dataclass(frozen=True)
class RebateDTO:

    rule: str
    amount: str


@dataclass(frozen=True)
class PurchaseDTO:
    """Output: a complete purchase as displayed to the user."""

    id: int
    customer_id: int
    state: str
    pizzas: list[PizzaDTO]
    subtotal: str
    amount: str | None  # only once served
    created_at: str
    worker_id: int | None
    rebates: list[RebateDTO]


def to_dto(purchase: Purchase, breakdown: PriceBreakdown | None = None) -> PurchaseDTO:
    return PurchaseDTO(
        id=purchase.id,  # type: ignore[arg-type]
        customer_id=purchase.customer_id,
        state=purchase.state.value,
        pizzas=[
            PizzaDTO(name=p.name, price=str(p.price), toppings=list(p.toppings))
            for p in purchase.pizzas
        ],
        subtotal=str(purchase.subtotal),
        amount=str(purchase.amount) if purchase.amount is not None else None,
        created_at=purchase.created_at.strftime(_TIME_FORMAT),
        worker_id=purchase.worker_id,
        rebates=[
            RebateDTO(rule=name, amount=str(amount))
            for name, amount in (breakdown.rebates if breakdown else ())
        ],
    )
