"""Unit tests for the in-preparation tracker."""

import threading

import pytest

from pizzeria.domain.model.pizza import Pizza
from pizzeria.domain.model.purchase import Purchase
from pizzeria.domain.service.preparation_tracker import PreparationTracker


def _purchase(purchase_id: int) -> Purchase:
    return Purchase(id=purchase_id, customer_id=100 + purchase_id, pizzas=[Pizza.of("Margherita", "10")])


class TestPreparationTracker:

    def test_starts_empty(self):
        tracker = PreparationTracker()
        assert len(tracker) == 0
        assert tracker.for_staff(7) == []

    def test_register_and_lookup(self):
        tracker = PreparationTracker()
        p = _purchase(1)
        tracker.register(staff_id=7, purchase=p)

        assert 1 in tracker
        assert tracker.for_staff(7) == [p]
        assert tracker.for_staff(8) == []

    def test_staff_can_prepare_several_purchases(self):
        tracker = PreparationTracker()
        tracker.register(7, _purchase(1))
        tracker.register(7, _purchase(2))
        assert [p.id for p in tracker.for_staff(7)] == [1, 2]

    def test_register_again_replaces_entry(self):
        tracker = PreparationTracker()
        tracker.register(7, _purchase(1))
        fresh = _purchase(1)
        tracker.register(7, fresh)

        assert len(tracker) == 1
        assert tracker.for_staff(7)[0] is fresh

    def test_discard(self):
        tracker = PreparationTracker()
        p = _purchase(1)
        tracker.register(7, p)

        assert tracker.discard(1) is p
        assert 1 not in tracker
        assert tracker.for_staff(7) == []
        assert tracker.discard(1) is None

    def test_unsaved_purchase_rejected(self):
        with pytest.raises(ValueError, match="persisted"):
            PreparationTracker().register(7, Purchase.open(customer_id=1))

    def test_concurrent_registration(self):
        tracker = PreparationTracker()

        def worker(staff_id: int) -> None:
            for i in range(50):
                tracker.register(staff_id, _purchase(staff_id * 1000 + i))

        threads = [threading.Thread(target=worker, args=(s,)) for s in range(1, 9)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(tracker) == 400
        assert all(len(tracker.for_staff(s)) == 50 for s in range(1, 9))
