"""Application service: the purchase lifecycle.

Owns every transition of a purchase and the locks that keep them
consistent under concurrent callers:

- customer paths (``add_pizza``, ``confirm``) are serialized per customer,
  so a customer never races themselves while different customers proceed
  in parallel;
- kitchen paths (``pick_next``, ``complete``, ``ongoing_for``) share one
  lock that covers the repository and the preparation tracker together,
  which makes "read the oldest PLACED purchase and flip it to ONGOING"
  atomic.  Two pizza makers never get the same purchase.

Each of those critical sections also holds the repository's
``exclusive()`` section, which extends the guarantee to other lifecycles
and other processes sharing the same store.

Repository errors propagate unchanged.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager

import structlog

from pizzeria.domain.exceptions import (
    InvariantViolationError,
    PurchaseNotFoundError,
    TooManyOrdersError,
    ValidationError,
)
from pizzeria.domain.model.customer import Customer
from pizzeria.domain.model.pizza import Pizza
from pizzeria.domain.model.purchase import Purchase, PurchaseState
from pizzeria.domain.repository.purchase_repository import PurchaseRepository
from pizzeria.domain.service.preparation_tracker import PreparationTracker
from pizzeria.domain.service.pricing import PricingService

logger = structlog.get_logger(__name__)


class KeyedLock:
    """One lock per key, created on first use and dropped once no caller
    holds or waits for it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks: dict[Hashable, list] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


class PurchaseLifecycle:
    """Moves purchases from draft to served for customers and kitchen staff."""

    def __init__(
        self,
        purchase_repo: PurchaseRepository,
        pricing: PricingService | None = None,
        tracker: PreparationTracker | None = None,
    ) -> None:
        self._purchase_repo = purchase_repo
        self._pricing = pricing or PricingService()
        self._tracker = tracker if tracker is not None else PreparationTracker()
        self._customer_locks = KeyedLock()
        self._kitchen_lock = threading.Lock()

    @property
    def tracker(self) -> PreparationTracker:
        return self._tracker

    # --- Customer side --------------------------------------------------------

    def add_pizza(self, customer: Customer, pizza: Pizza) -> Purchase:
        """Append *pizza* to the customer's draft, opening one if needed."""
        with self._customer_locks.hold(customer.id), self._purchase_repo.exclusive():
            drafts = self._purchase_repo.find_all_by_state_and_customer(
                PurchaseState.DRAFT, customer.id
            )
            if len(drafts) > 1:
                logger.error(
                    "Multiple draft purchases found",
                    customer_id=customer.id,
                    purchase_ids=[d.id for d in drafts],
                )
                raise InvariantViolationError(
                    f"Customer #{customer.id} has {len(drafts)} draft purchases, expected at most one"
                )

            if drafts:
                purchase = drafts[0]
            else:
                purchase = Purchase.open(customer.id)

            purchase.add_pizza(pizza)
            saved = self._purchase_repo.save(purchase)

        logger.info(
            "Pizza added to draft",
            purchase_id=saved.id,
            customer_id=customer.id,
            pizza=pizza.name,
            pizza_count=len(saved.pizzas),
        )
        return saved

    def confirm(self, customer: Customer) -> Purchase:
        """Turn the customer's draft into a placed purchase."""
        with self._customer_locks.hold(customer.id), self._purchase_repo.exclusive():
            drafts = self._purchase_repo.find_all_by_state_and_customer(
                PurchaseState.DRAFT, customer.id
            )
            if len(drafts) > 1:
                logger.error(
                    "Multiple draft purchases found on confirm",
                    customer_id=customer.id,
                    purchase_ids=[d.id for d in drafts],
                )
                raise TooManyOrdersError(
                    f"Customer #{customer.id} has {len(drafts)} draft purchases, expected exactly one"
                )
            if not drafts:
                raise PurchaseNotFoundError(
                    f"Customer #{customer.id} has no draft purchase to confirm"
                )

            placed = self._purchase_repo.find_all_by_state_and_customer(
                PurchaseState.PLACED, customer.id
            )
            if len(placed) > 1:
                logger.error(
                    "Multiple placed purchases found",
                    customer_id=customer.id,
                    purchase_ids=[p.id for p in placed],
                )
                raise InvariantViolationError(
                    f"Customer #{customer.id} has {len(placed)} placed purchases, expected at most one"
                )
            if placed:
                raise ValidationError(
                    f"Customer #{customer.id} already has purchase #{placed[0].id} "
                    f"waiting for the kitchen"
                )

            purchase = drafts[0]
            purchase.place()
            saved = self._purchase_repo.save(purchase)

        logger.info("Purchase placed", purchase_id=saved.id, customer_id=customer.id)
        return saved

    # --- Kitchen side ---------------------------------------------------------

    def pick_next(self, staff: Customer) -> Purchase | None:
        """Hand the oldest placed purchase to *staff*.

        Returns None when nothing is waiting; that is an empty queue,
        not an error.
        """
        with self._kitchen_lock, self._purchase_repo.exclusive():
            purchase = self._purchase_repo.find_first_by_state(PurchaseState.PLACED)
            if purchase is None:
                logger.info("No placed purchase available", staff_id=staff.id)
                return None

            purchase.start_preparation(staff.id)
            saved = self._purchase_repo.save(purchase)
            self._tracker.register(staff.id, saved)

        logger.info(
            "Purchase picked for preparation",
            purchase_id=saved.id,
            customer_id=saved.customer_id,
            staff_id=staff.id,
            tracked=len(self._tracker),
        )
        return saved

    def complete(self, purchase_id: int) -> Purchase:
        """Price an ongoing purchase and mark it served."""
        with self._kitchen_lock, self._purchase_repo.exclusive():
            purchase = self._purchase_repo.find_by_id(purchase_id)
            if purchase is None:
                raise PurchaseNotFoundError(f"Purchase #{purchase_id} not found")
            if purchase.state != PurchaseState.ONGOING:
                raise PurchaseNotFoundError(
                    f"No ongoing purchase #{purchase_id} "
                    f"(current state is {purchase.state.value})"
                )

            if purchase_id not in self._tracker:
                logger.info(
                    "Completing untracked purchase",
                    purchase_id=purchase_id,
                    staff_id=purchase.worker_id,
                )

            amount = self._pricing.price(purchase.pizzas)
            purchase.serve(amount)
            saved = self._purchase_repo.save(purchase)
            self._tracker.discard(purchase_id)

        logger.info(
            "Purchase served",
            purchase_id=saved.id,
            customer_id=saved.customer_id,
            staff_id=saved.worker_id,
            amount=str(amount),
        )
        return saved

    def ongoing_for(self, staff: Customer) -> list[Purchase]:
        """Purchases *staff* is currently preparing.

        Tracked entries are checked against the repository first and stale
        ones dropped.  A staff member with nothing tracked (for instance
        after a restart) is looked up in the repository and re-tracked.
        """
        with self._kitchen_lock, self._purchase_repo.exclusive():
            current: list[Purchase] = []
            for tracked in self._tracker.for_staff(staff.id):
                fresh = self._purchase_repo.find_by_id(tracked.id)  # type: ignore[arg-type]
                if fresh is None or fresh.state != PurchaseState.ONGOING:
                    logger.warning(
                        "Discarding stale tracker entry",
                        purchase_id=tracked.id,
                        staff_id=staff.id,
                        store_state=fresh.state.value if fresh else None,
                    )
                    self._tracker.discard(tracked.id)  # type: ignore[arg-type]
                    continue
                self._tracker.register(staff.id, fresh)
                current.append(fresh)

            if current:
                return current

            for purchase in self._purchase_repo.find_all_by_state(PurchaseState.ONGOING):
                if purchase.worker_id == staff.id:
                    self._tracker.register(staff.id, purchase)
                    current.append(purchase)
            return current
