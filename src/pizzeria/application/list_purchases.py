"""Application service: List Purchases use case (query)."""

from __future__ import annotations

from pizzeria.application.dto import PurchaseDTO, to_dto
from pizzeria.domain.exceptions import ValidationError
from pizzeria.domain.model.purchase import PurchaseState
from pizzeria.domain.repository.purchase_repository import PurchaseRepository


class ListPurchasesHandler:

    def __init__(self, purchase_repo: PurchaseRepository) -> None:
        self._purchase_repo = purchase_repo

    def handle(self, state: str | None = None) -> list[PurchaseDTO]:
        """List purchases, oldest first, optionally filtered by state name."""
        if state is None:
            purchases = self._purchase_repo.list_all()
        else:
            try:
                wanted = PurchaseState(state.upper())
            except ValueError:
                valid = ", ".join(s.value for s in PurchaseState)
                raise ValidationError(
                    f"Unknown state '{state}'. Expected one of: {valid}"
                )
            purchases = self._purchase_repo.find_all_by_state(wanted)
        return [to_dto(p) for p in purchases]
