"""Customer: the identity attached to every lifecycle call.

Customers are resolved by the authentication collaborator and handed to
the core as explicit values.  Kitchen staff are modelled the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, field

PIZZA_MAKER = "PIZZA_MAKER"
CUSTOMER = "CUSTOMER"


@dataclass(frozen=True)
class Customer:

    id: int
    name: str
    email: str = ""
    roles: frozenset[str] = field(default_factory=frozenset)
