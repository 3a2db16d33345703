"""JSON-file-backed implementation of PurchaseRepository.

Every call re-reads the file, so separate processes (one CLI invocation
per command) see each other's writes.  Reads and writes hold a thread
lock and an OS file lock next to the data file, and ``exclusive()`` holds
both across a whole read-then-save sequence.  Writes go to a temporary
file that replaces the data file, so a reader never sees half a document.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from filelock import FileLock

from pizzeria.domain.model.pizza import Pizza
from pizzeria.domain.model.purchase import Purchase, PurchaseState
from pizzeria.domain.model.value_objects import Money
from pizzeria.domain.repository.purchase_repository import PurchaseRepository


class JsonPurchaseRepository(PurchaseRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._file_lock = FileLock(f"{file_path}.lock")
        self._ensure_file()

    # --- PurchaseRepository interface -----------------------------------------

    def next_id(self) -> int:
        purchases = self._load_locked()
        if not purchases:
            return 1
        return max(p["id"] for p in purchases) + 1

    def find_by_id(self, purchase_id: int) -> Purchase | None:
        for raw in self._load_locked():
            if raw["id"] == purchase_id:
                return self._to_domain(raw)
        return None

    def find_all_by_state_and_customer(
        self, state: PurchaseState, customer_id: int
    ) -> list[Purchase]:
        return [
            p for p in self.find_all_by_state(state) if p.customer_id == customer_id
        ]

    def find_first_by_state(self, state: PurchaseState) -> Purchase | None:
        matching = self.find_all_by_state(state)
        return matching[0] if matching else None

    def find_all_by_state(self, state: PurchaseState) -> list[Purchase]:
        return [p for p in self.list_all() if p.state == state]

    def list_all(self) -> list[Purchase]:
        purchases = [self._to_domain(raw) for raw in self._load_locked()]
        return sorted(purchases, key=lambda p: (p.created_at, p.id))

    def save(self, purchase: Purchase) -> Purchase:
        with self.exclusive():
            purchases = self._load_raw()

            if purchase.id is None:
                purchase.id = max((p["id"] for p in purchases), default=0) + 1

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(purchases):
                if raw["id"] == purchase.id:
                    purchases[i] = self._to_raw(purchase)
                    replaced = True
                    break
            if not replaced:
                purchases.append(self._to_raw(purchase))

            self._persist_raw(purchases)
        return purchase

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        # Both locks are reentrant, so loads and saves nest inside.
        with self._lock, self._file_lock:
            yield

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(purchase: Purchase) -> dict:
        return {
            "id": purchase.id,
            "customer_id": purchase.customer_id,
            "state": purchase.state.value,
            "amount": str(purchase.amount.amount) if purchase.amount is not None else None,
            "currency": purchase.amount.currency if purchase.amount is not None else None,
            "worker_id": purchase.worker_id,
            "created_at": purchase.created_at.isoformat(),
            "placed_at": _iso(purchase.placed_at),
            "started_at": _iso(purchase.started_at),
            "served_at": _iso(purchase.served_at),
            "pizzas": [
                {
                    "id": pizza.id,
                    "name": pizza.name,
                    "price": str(pizza.price.amount),
                    "currency": pizza.price.currency,
                    "toppings": list(pizza.toppings),
                }
                for pizza in purchase.pizzas
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Purchase:
        pizzas = [
            Pizza(
                id=p.get("id"),
                name=p["name"],
                price=Money(Decimal(p["price"]), p.get("currency", "USD")),
                toppings=tuple(p.get("toppings", [])),
            )
            for p in raw["pizzas"]
        ]
        amount = None
        if raw.get("amount") is not None:
            amount = Money(Decimal(raw["amount"]), raw.get("currency") or "USD")
        return Purchase(
            id=raw["id"],
            customer_id=raw["customer_id"],
            pizzas=pizzas,
            state=PurchaseState(raw["state"]),
            amount=amount,
            created_at=datetime.fromisoformat(raw["created_at"]),
            placed_at=_from_iso(raw.get("placed_at")),
            started_at=_from_iso(raw.get("started_at")),
            served_at=_from_iso(raw.get("served_at")),
            worker_id=raw.get("worker_id"),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_locked(self) -> list[dict]:
        with self.exclusive():
            return self._load_raw()

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, purchases: list[dict]) -> None:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._file_path.parent,
            prefix=f".{self._file_path.name}.",
            delete=False,
        ) as tmp:
            tmp.write(json.dumps(purchases, indent=2) + "\n")
        os.replace(tmp.name, self._file_path)

    def _ensure_file(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with self.exclusive():
            if not self._file_path.exists():
                self._persist_raw([])


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
