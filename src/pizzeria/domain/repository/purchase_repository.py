"""Abstract repository for the Purchase aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from pizzeria.domain.model.purchase import Purchase, PurchaseState


class PurchaseRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique purchase ID."""

    @abstractmethod
    def find_by_id(self, purchase_id: int) -> Purchase | None:
        """Return a purchase by its ID, or None if not found."""

    @abstractmethod
    def find_all_by_state_and_customer(
        self, state: PurchaseState, customer_id: int
    ) -> list[Purchase]:
        """Return every purchase of a customer currently in *state*."""

    @abstractmethod
    def find_first_by_state(self, state: PurchaseState) -> Purchase | None:
        """Return the oldest purchase in *state* (by created_at, then id)."""

    @abstractmethod
    def find_all_by_state(self, state: PurchaseState) -> list[Purchase]:
        """Return every purchase in *state*, oldest first."""

    @abstractmethod
    def list_all(self) -> list[Purchase]:
        """Return every purchase, oldest first."""

    @abstractmethod
    def save(self, purchase: Purchase) -> Purchase:
        """Persist a new or updated purchase and return it.

        New purchases (``id is None``) get an ID assigned.
        """

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the store exclusively for a read-then-save sequence.

        Stores shared between processes override this; a store owned by a
        single process relies on the caller's own locks.
        """
        yield
