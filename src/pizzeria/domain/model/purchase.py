"""Purchase aggregate, the core of the domain.

A Purchase is an aggregate root that owns its pizzas and walks the
lifecycle DRAFT -> PLACED -> ONGOING -> SERVED.  Transitions only go
forward; every illegal move raises ValidationError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from pizzeria.domain.exceptions import ValidationError
from pizzeria.domain.model.pizza import Pizza
from pizzeria.domain.model.value_objects import Money


class PurchaseState(Enum):
    DRAFT = "DRAFT"
    PLACED = "PLACED"
    ONGOING = "ONGOING"
    SERVED = "SERVED"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Purchase:
    """Aggregate root for pizza purchases.

    Use ``Purchase.open()`` for new carts.  The ``__init__`` stays plain so
    the repository can reconstitute persisted purchases without
    re-validating.
    """

    id: int | None
    customer_id: int
    pizzas: list[Pizza] = field(default_factory=list)
    state: PurchaseState = PurchaseState.DRAFT
    amount: Money | None = None  # computed at completion only
    created_at: datetime = field(default_factory=_utcnow)
    placed_at: datetime | None = None
    started_at: datetime | None = None
    served_at: datetime | None = None
    worker_id: int | None = None

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def open(customer_id: int) -> Purchase:
        """Start an empty draft purchase for a customer."""
        return Purchase(id=None, customer_id=customer_id)

    # --- Cart mutation --------------------------------------------------------

    def add_pizza(self, pizza: Pizza) -> None:
        if self.state != PurchaseState.DRAFT:
            raise ValidationError(
                f"Cannot add pizzas to purchase in {self.state.value} state"
            )
        self.pizzas.append(pizza)

    # --- State transitions ----------------------------------------------------

    def place(self) -> None:
        """Transition DRAFT -> PLACED.  Pizzas are frozen from here on.

        The only precondition is the state; a draft without pizzas is
        placed like any other and served at $0.00.
        """
        self._expect(PurchaseState.DRAFT, "place")
        self.state = PurchaseState.PLACED
        self.placed_at = _utcnow()

    def start_preparation(self, worker_id: int) -> None:
        """Transition PLACED -> ONGOING, recording who picked it up."""
        self._expect(PurchaseState.PLACED, "start preparing")
        self.state = PurchaseState.ONGOING
        self.worker_id = worker_id
        self.started_at = _utcnow()

    def serve(self, amount: Money) -> None:
        """Transition ONGOING -> SERVED with the final, rebated amount."""
        self._expect(PurchaseState.ONGOING, "serve")
        self.amount = amount
        self.state = PurchaseState.SERVED
        self.served_at = _utcnow()

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        """Sum of pizza prices before any rebate."""
        result = Money.zero()
        for pizza in self.pizzas:
            result = result + pizza.price
        return result

    # --- Internal helpers -----------------------------------------------------

    def _expect(self, expected: PurchaseState, action: str) -> None:
        if self.state != expected:
            raise ValidationError(
                f"Cannot {action} purchase: current state is {self.state.value}, "
                f"expected {expected.value}"
            )
