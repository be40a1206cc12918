"""Catalog API HTTP client for the loan endpoints"""

from typing import Any, Dict, List, Tuple
from pydantic import ValidationError
from circulation_desk.domain.exceptions import InvalidInputError
from circulation_desk.domain.models import CheckinResult, CheckoutResult, Loan, NotificationSummary, RenewResult
from circulation_desk.infrastructure.clients.base import ApiClient
from circulation_desk.infrastructure.clients.schemas import (
    CheckinResponse,
    CheckoutRequest,
    CheckoutResponse,
    LoanListResponse,
    NotificationSummaryResponse,
    RenewResponse,
)


class CatalogClient(ApiClient):
    """Client for the lending catalog's loan endpoints"""

    async def list_my_loans(self, page: int = 1, limit: int = 10) -> Tuple[List[Loan], int]:
        """
        Fetch one page of the requesting user's checked-out books.

        Returns:
            (loans, total) where total counts all pages
        """
        data = await self._request(
            "GET",
            "/books/my-checkouts",
            endpoint="my_checkouts",
            fallback_message="Failed to fetch checkouts",
            params={"page": page, "limit": limit},
        )
        parsed = self._parse(LoanListResponse, data)
        return [book.to_domain() for book in parsed.books], parsed.total

    async def get_notifications(self) -> NotificationSummary:
        data = await self._request(
            "GET",
            "/books/my-checkouts/notifications",
            endpoint="notifications",
            fallback_message="Failed to fetch notifications",
        )
        return self._parse(NotificationSummaryResponse, data).to_domain()

    async def checkin(self, book_id: str) -> CheckinResult:
        data = await self._request(
            "POST",
            f"/books/{book_id}/checkin",
            endpoint="checkin",
            fallback_message="Failed to check in book",
        )
        return self._parse(CheckinResponse, data).to_domain()

    async def extend_checkout(self, book_id: str, extend_days: int = 7) -> RenewResult:
        data = await self._request(
            "POST",
            f"/books/{book_id}/extend-checkout",
            endpoint="extend_checkout",
            fallback_message="Failed to renew loan",
            params={"extend_days": extend_days},
        )
        return self._parse(RenewResponse, data).to_domain()

    async def checkout(self, book_id: str, checkout_days: int = 14) -> CheckoutResult:
        try:
            body = CheckoutRequest(checkout_days=checkout_days)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid checkout_days: {checkout_days}") from e

        data = await self._request(
            "POST",
            f"/books/{book_id}/checkout",
            endpoint="checkout",
            fallback_message="Failed to checkout book",
            json=body.model_dump(),
        )
        return self._parse(CheckoutResponse, data).to_domain()

    async def check_health(self) -> Dict[str, Any]:
        """Unauthenticated API health check"""
        return await self._request(
            "GET",
            "/health",
            endpoint="health",
            fallback_message="API health check failed",
            authenticated=False,
        )
