"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Repositories and lifecycles are built once per data file and process, so
every caller in a process shares the same locks and preparation tracker.
"""

from __future__ import annotations

import os
from functools import cache
from pathlib import Path

from pizzeria.application.purchase_lifecycle import PurchaseLifecycle
from pizzeria.infrastructure.persistence.json_purchase_repository import (
    JsonPurchaseRepository,
)

DATA_DIR_ENV = "PIZZERIA_DATA_DIR"
LOG_LEVEL_ENV = "PIZZERIA_LOG_LEVEL"

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else _DEFAULT_DATA_DIR


def log_level() -> str:
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def purchase_repository() -> JsonPurchaseRepository:
    return _repository_at(_store_path())


def purchase_lifecycle() -> PurchaseLifecycle:
    return _lifecycle_at(_store_path())


def _store_path() -> Path:
    return (data_dir() / "purchases.json").resolve()


@cache
def _repository_at(path: Path) -> JsonPurchaseRepository:
    return JsonPurchaseRepository(path)


@cache
def _lifecycle_at(path: Path) -> PurchaseLifecycle:
    return PurchaseLifecycle(purchase_repo=_repository_at(path))
