"""Domain service: In-Preparation Tracker.

An in-memory index of the purchases currently being prepared, kept so
"what is this pizza maker working on" can be answered without a store
query on every step.

The tracker is a derived view.  It is never persisted, starts empty,
and loses to the repository whenever the two disagree; callers
reconcile against the store before trusting an entry.
"""

from __future__ import annotations

import threading

from pizzeria.domain.model.purchase import Purchase


class PreparationTracker:

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._purchases: dict[int, Purchase] = {}
        self._staff_of: dict[int, int] = {}  # purchase id -> staff id

    def register(self, staff_id: int, purchase: Purchase) -> None:
        """Record that *staff_id* is preparing *purchase*."""
        if purchase.id is None:
            raise ValueError("Only persisted purchases can be tracked")
        with self._lock:
            self._purchases[purchase.id] = purchase
            self._staff_of[purchase.id] = staff_id

    def discard(self, purchase_id: int) -> Purchase | None:
        """Forget a purchase.  Returns the dropped entry, if any."""
        with self._lock:
            self._staff_of.pop(purchase_id, None)
            return self._purchases.pop(purchase_id, None)

    def for_staff(self, staff_id: int) -> list[Purchase]:
        """Purchases tracked for one staff member, in pick order."""
        with self._lock:
            return [
                self._purchases[pid]
                for pid, sid in self._staff_of.items()
                if sid == staff_id
            ]

    def __contains__(self, purchase_id: object) -> bool:
        with self._lock:
            return purchase_id in self._purchases

    def __len__(self) -> int:
        with self._lock:
            return len(self._purchases)
