"""Application service: Show Purchase use case (query)."""

from __future__ import annotations

from pizzeria.application.dto import PurchaseDTO, to_dto
from pizzeria.domain.exceptions import PurchaseNotFoundError
from pizzeria.domain.model.purchase import PurchaseState
from pizzeria.domain.repository.purchase_repository import PurchaseRepository
from pizzeria.domain.service.pricing import PricingService


class ShowPurchaseHandler:

    def __init__(
        self,
        purchase_repo: PurchaseRepository,
        pricing: PricingService | None = None,
    ) -> None:
        self._purchase_repo = purchase_repo
        self._pricing = pricing or PricingService()

    def handle(self, purchase_id: int) -> PurchaseDTO:
        purchase = self._purchase_repo.find_by_id(purchase_id)
        if purchase is None:
            raise PurchaseNotFoundError(f"Purchase #{purchase_id} not found")

        # Rebates are only final once the purchase has been served
        breakdown = None
        if purchase.state == PurchaseState.SERVED:
            breakdown = self._pricing.describe(purchase.pizzas)
        return to_dto(purchase, breakdown)
