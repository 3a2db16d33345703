"""Pizza, the line item of a purchase."""

from __future__ import annotations

from dataclasses import dataclass

from pizzeria.domain.exceptions import ValidationError
from pizzeria.domain.model.value_objects import Money


@dataclass(frozen=True)
class Pizza:
    """A priced pizza with an ordered set of toppings.

    Frozen: once attached to a purchase the pizza itself never changes,
    only the purchase around it does.
    """

    id: int | None
    name: str
    price: Money
    toppings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Pizza name is required")
        if not isinstance(self.price, Money):
            raise ValidationError(
                f"Pizza price must be Money, got {type(self.price).__name__}"
            )
        # Ordered set: keep first occurrence of each topping
        object.__setattr__(self, "toppings", tuple(dict.fromkeys(self.toppings)))

    def has_topping(self, topping: str) -> bool:
        """Exact, case-sensitive topping match."""
        return topping in self.toppings

    @staticmethod
    def of(
        name: str,
        price: str | float | int,
        toppings: list[str] | tuple[str, ...] = (),
        pizza_id: int | None = None,
    ) -> Pizza:
        """Build a pizza from loosely-typed input (CLI, fixtures)."""
        return Pizza(
            id=pizza_id,
            name=name.strip(),
            price=Money.of(price),
            toppings=tuple(t.strip() for t in toppings if t.strip()),
        )
