"""Integration tests for serving a purchase."""

import pytest

from pizzeria.application.purchase_lifecycle import PurchaseLifecycle
from pizzeria.domain.exceptions import PurchaseNotFoundError
from pizzeria.domain.model.customer import Customer
from pizzeria.domain.model.pizza import Pizza
from pizzeria.domain.model.purchase import Purchase, PurchaseState
from pizzeria.domain.model.value_objects import Money
from tests.fakes import FakePurchaseRepository

LUIGI = Customer(id=7, name="Luigi")


def _picked(*pizzas: Pizza) -> tuple[PurchaseLifecycle, FakePurchaseRepository, int]:
    """Helper: a lifecycle whose single purchase has been picked by Luigi."""
    repo = FakePurchaseRepository([
        Purchase(
            id=None,
            customer_id=666,
            pizzas=list(pizzas),
            state=PurchaseState.PLACED,
        )
    ])
    lifecycle = PurchaseLifecycle(repo)
    purchase = lifecycle.pick_next(LUIGI)
    repo.save_calls.clear()
    return lifecycle, repo, purchase.id


class TestCompleteAmounts:

    def test_without_any_offer(self):
        lifecycle, _, pid = _picked(
            Pizza.of("Margherita", "10.05", ["tomato", "mozzarella"]),
            Pizza.of("Ham", "12.87", ["pepperoni", "mozzarella"]),
        )
        assert lifecycle.complete(pid).amount == Money.of("22.92")

    def test_with_pineapple_offer(self):
        lifecycle, _, pid = _picked(
            Pizza.of("Margherita", "10.00", ["tomato", "mozzarella"]),
            Pizza.of("Ham-Pineapple", "12.89", ["pepperoni", "pineapple", "mozzarella"]),
        )
        assert lifecycle.complete(pid).amount == Money.of("21.89")

    def test_with_buy_three_cheapest_free_offer(self):
        lifecycle, _, pid = _picked(
            Pizza.of("Margherita", "10.00", ["tomato", "mozzarella"]),
            Pizza.of("Ham", "12.89", ["pepperoni", "mozzarella"]),
            Pizza.of("Cheese", "14.99", ["Parmigiano", "mozzarella", "Cheddar"]),
        )
        assert lifecycle.complete(pid).amount == Money.of("27.88")


class TestCompleteTransition:

    def test_complete_changes_state_and_persists(self):
        lifecycle, repo, pid = _picked(Pizza.of("Margherita", "10.00"))

        purchase = lifecycle.complete(pid)

        assert purchase.state == PurchaseState.SERVED
        assert purchase.served_at is not None
        assert len(repo.save_calls) == 1
        assert repo.find_by_id(pid).state == PurchaseState.SERVED

    def test_complete_removes_from_tracker(self):
        lifecycle, _, pid = _picked(Pizza.of("Margherita", "10.00"))
        assert pid in lifecycle.tracker

        lifecycle.complete(pid)

        assert pid not in lifecycle.tracker
        assert lifecycle.tracker.for_staff(LUIGI.id) == []

    def test_pizzas_are_not_changed(self):
        one = Pizza.of("Margherita", "10.00", ["tomato"])
        two = Pizza.of("Ham", "12.89", ["pepperoni"])
        lifecycle, _, pid = _picked(one, two)

        assert lifecycle.complete(pid).pizzas == [one, two]

    def test_complete_works_with_a_cold_tracker(self):
        repo = FakePurchaseRepository([
            Purchase(
                id=None,
                customer_id=666,
                pizzas=[Pizza.of("Margherita", "10.00")],
                state=PurchaseState.ONGOING,
                worker_id=LUIGI.id,
            )
        ])
        lifecycle = PurchaseLifecycle(repo)

        assert lifecycle.complete(1).state == PurchaseState.SERVED


class TestCompleteValidation:

    def test_unknown_purchase_rejected(self):
        lifecycle = PurchaseLifecycle(FakePurchaseRepository())

        with pytest.raises(PurchaseNotFoundError, match="not found"):
            lifecycle.complete(999)

    def test_completing_twice_rejected(self):
        lifecycle, repo, pid = _picked(Pizza.of("Margherita", "10.00"))
        lifecycle.complete(pid)
        repo.save_calls.clear()

        with pytest.raises(PurchaseNotFoundError, match="No ongoing purchase"):
            lifecycle.complete(pid)
        assert repo.save_calls == []

    def test_placed_purchase_cannot_be_completed(self):
        repo = FakePurchaseRepository([
            Purchase(
                id=None,
                customer_id=666,
                pizzas=[Pizza.of("Margherita", "10.00")],
                state=PurchaseState.PLACED,
            )
        ])
        lifecycle = PurchaseLifecycle(repo)

        with pytest.raises(PurchaseNotFoundError, match="PLACED"):
            lifecycle.complete(1)
        assert repo.find_by_id(1).amount is None
