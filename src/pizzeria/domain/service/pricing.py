"""Domain service: Pricing.

Turns the pizzas of a purchase into the amount the customer pays.  Each
promotional rule computes a rebate against the same base total; rebates
add up and the result never goes below zero.

Everything is done in Decimal and only the final total is quantized to
cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence

from pizzeria.domain.model.pizza import Pizza
from pizzeria.domain.model.value_objects import Money

PINEAPPLE = "pineapple"
PINEAPPLE_REBATE = Decimal("1.00")
GROUP_SIZE = 3


class RebateRule(Protocol):

    name: str

    def rebate(self, pizzas: Sequence[Pizza]) -> Decimal:
        """Amount to take off the base total (zero when the rule does not apply)."""


class PineappleRebate:
    """Flat rebate once a purchase contains any pineapple pizza.

    Applied at most once, however many pizzas carry the topping.
    """

    name = "pineapple"

    def __init__(self, topping: str = PINEAPPLE, amount: Decimal = PINEAPPLE_REBATE) -> None:
        self._topping = topping
        self._amount = amount

    def rebate(self, pizzas: Sequence[Pizza]) -> Decimal:
        if any(p.has_topping(self._topping) for p in pizzas):
            return self._amount
        return Decimal("0")


class CheapestOfGroupFree:
    """Every complete group of N consecutive pizzas gets its cheapest one free.

    Pizzas are grouped in the order they were added.  A trailing group
    shorter than N earns nothing.  On equal prices the earliest pizza in
    the group is the free one, which only matters for reporting since the
    rebate is the same.
    """

    name = "every-third-free"

    def __init__(self, group_size: int = GROUP_SIZE) -> None:
        self._group_size = group_size

    def rebate(self, pizzas: Sequence[Pizza]) -> Decimal:
        return sum(
            (p.price.amount for p in self.free_pizzas(pizzas)), Decimal("0")
        )

    def free_pizzas(self, pizzas: Sequence[Pizza]) -> list[Pizza]:
        free: list[Pizza] = []
        complete = len(pizzas) - len(pizzas) % self._group_size
        for start in range(0, complete, self._group_size):
            group = pizzas[start:start + self._group_size]
            # min() keeps the first of equal elements
            free.append(min(group, key=lambda p: p.price.amount))
        return free


DEFAULT_RULES: tuple[RebateRule, ...] = (PineappleRebate(), CheapestOfGroupFree())


@dataclass(frozen=True)
class PriceBreakdown:
    """Base total, the rebate each rule granted, and what is left to pay."""

    base: Money
    rebates: tuple[tuple[str, Money], ...]
    total: Money


class PricingService:
    """Totals a list of pizzas after applying each rebate rule to the same base."""

    def __init__(self, rules: Sequence[RebateRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    def price(self, pizzas: Sequence[Pizza]) -> Money:
        """Final amount for *pizzas* after all rebates."""
        return self.describe(pizzas).total

    def describe(self, pizzas: Sequence[Pizza]) -> PriceBreakdown:
        base = Decimal("0")
        for pizza in pizzas:
            base += pizza.price.amount

        rebates: list[tuple[str, Money]] = []
        remaining = base
        for rule in self._rules:
            amount = rule.rebate(pizzas)
            if amount > 0:
                rebates.append((rule.name, Money(amount).rounded()))
                remaining -= amount

        return PriceBreakdown(
            base=Money(base).rounded(),
            rebates=tuple(rebates),
            total=Money(max(remaining, Decimal("0"))).rounded(),
        )
