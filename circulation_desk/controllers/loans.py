"""Loan lifecycle controller - checkout, checkin and renewal with list consistency"""

import logging
import math
from datetime import datetime
from typing import Awaitable, Callable, FrozenSet, List

from circulation_desk.config import settings
from circulation_desk.controllers.feedback import Feedback
from circulation_desk.domain.due_dates import classify_loans
from circulation_desk.domain.exceptions import CirculationError, InvalidInputError
from circulation_desk.domain.models import CheckinResult, CheckoutResult, ClassifiedLoan, LoanPage, RenewResult
from circulation_desk.infrastructure.clients.catalog import CatalogClient
from circulation_desk.infrastructure.observability.logging import log_loan_operation
from circulation_desk.infrastructure.observability.metrics import duplicate_request_counter, record_loan_operation
from circulation_desk.utils.date_utils import utc_now


class LoanLifecycleController:
    """
    Mediates every state-changing loan operation for the "my loans" view.

    Operations never raise CirculationError: failures are stored as the
    single current error string and the operation returns None. Caller
    misuse (page or day counts below 1) raises InvalidInputError before
    any request is sent.

    Per-id guard: an id is added to the checkin (or renewal) pending set
    before the network call and removed afterwards on every path, so at
    most one checkin and one renewal per id is in flight. The two sets are
    independent; nothing stops one id being mid-checkin and mid-renewal.
    """

    def __init__(
        self,
        client: CatalogClient,
        page_size: int | None = None,
        clock: Callable[[], datetime] = utc_now,
        success_seconds: float | None = None,
        checkout_success_seconds: float | None = None,
    ):
        self.client = client
        self.clock = clock
        self.page = 1
        self.page_size = page_size or settings.loans_page_size
        self.loans: List[ClassifiedLoan] = []
        self.total_count = 0
        self.loading = False
        self.checkout_success_seconds = (
            settings.checkout_success_message_seconds if checkout_success_seconds is None else checkout_success_seconds
        )
        self.feedback = Feedback(settings.success_message_seconds if success_seconds is None else success_seconds)
        self._pending_checkins: FrozenSet[str] = frozenset()
        self._pending_renewals: FrozenSet[str] = frozenset()
        self._closed = False

    @property
    def error(self) -> str:
        return self.feedback.error

    @property
    def success_message(self) -> str:
        return self.feedback.success_message

    @property
    def pending_checkins(self) -> FrozenSet[str]:
        return self._pending_checkins

    @property
    def pending_renewals(self) -> FrozenSet[str]:
        return self._pending_renewals

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    def clear_error(self) -> None:
        self.feedback.clear_error()

    def close(self) -> None:
        """Tear down the owning view; late completions no longer touch view state"""
        self._closed = True
        self.feedback.close()

    async def fetch_my_loans(self, page: int | None = None, page_size: int | None = None) -> LoanPage | None:
        """
        Fetch and classify one page of the user's loans.

        All items are classified against a single `now` taken when the
        response arrives. Items without a due date are not on loan and are
        dropped before classification.
        """
        page = page or self.page
        page_size = page_size or self.page_size

        self.loading = True
        try:
            loans, total = await self.client.list_my_loans(page, page_size)
        except CirculationError as e:
            logging.error(f"Fetching loans failed: {e}", extra={"operation": "fetch_loans", "page": page})
            self._fail(str(e))
            return None
        finally:
            if not self._closed:
                self.loading = False

        skipped = [loan.id for loan in loans if loan.due_date is None]
        if skipped:
            logging.warning("Ignoring books without a due date", extra={"book_ids": skipped})

        now = self.clock()
        items = classify_loans((loan for loan in loans if loan.due_date is not None), now)
        result = LoanPage(items=items, total_count=total)

        if not self._closed:
            self.loans = items
            self.total_count = total
            self.page = page
            self.page_size = page_size
            self.feedback.clear_error()

        return result

    async def go_to_page(self, page: int) -> LoanPage | None:
        if page < 1:
            raise InvalidInputError(f"Page must be >= 1, got {page}")
        return await self.fetch_my_loans(page=page)

    async def checkin(self, loan_id: str, title: str | None = None) -> CheckinResult | None:
        """
        Return a book, then refetch the loan list.

        A second call for an id already being checked in is ignored.
        """
        if loan_id in self._pending_checkins:
            duplicate_request_counter.labels(operation="checkin").inc()
            logging.warning("Checkin already in flight", extra={"loan_id": loan_id})
            return None

        title = title or self._title_for(loan_id)
        self._pending_checkins = self._pending_checkins | {loan_id}
        try:
            result = await self.client.checkin(loan_id)
        except CirculationError as e:
            record_loan_operation("checkin", succeeded=False)
            logging.error(f"Checkin failed: {e}", extra={"loan_id": loan_id})
            self._fail(str(e))
            return None
        finally:
            self._pending_checkins = self._pending_checkins - {loan_id}

        record_loan_operation("checkin", succeeded=True)
        log_loan_operation("checkin", loan_id, "success", was_overdue=result.was_overdue, days_overdue=result.days_overdue)

        message = f'Successfully checked in "{title}"'
        if result.was_overdue:
            message += f" (was {result.days_overdue} days overdue)"
        self._succeed(message)

        if not self._closed:
            await self.fetch_my_loans()
        return result

    async def renew(self, loan_id: str, extend_days: int | None = None, title: str | None = None) -> RenewResult | None:
        """
        Extend a loan's due date, then refetch the loan list.

        A second call for an id already being renewed is ignored.
        Raises InvalidInputError when extend_days is below 1.
        """
        extend_days = _require_days("extend_days", settings.default_extend_days if extend_days is None else extend_days)
        if loan_id in self._pending_renewals:
            duplicate_request_counter.labels(operation="renew").inc()
            logging.warning("Renewal already in flight", extra={"loan_id": loan_id})
            return None

        title = title or self._title_for(loan_id)
        self._pending_renewals = self._pending_renewals | {loan_id}
        try:
            result = await self.client.extend_checkout(loan_id, extend_days)
        except CirculationError as e:
            record_loan_operation("renew", succeeded=False)
            logging.error(f"Renewal failed: {e}", extra={"loan_id": loan_id, "extend_days": extend_days})
            self._fail(str(e))
            return None
        finally:
            self._pending_renewals = self._pending_renewals - {loan_id}

        record_loan_operation("renew", succeeded=True)
        log_loan_operation("renew", loan_id, "success", extend_days=extend_days)

        self._succeed(f'Renewed "{title}" for {extend_days} additional days. {result.message}')

        if not self._closed:
            await self.fetch_my_loans()
        return result

    async def checkout(
        self,
        book_id: str,
        checkout_days: int | None = None,
        refresh: Callable[[], Awaitable[object]] | None = None,
    ) -> CheckoutResult | None:
        """
        Borrow a book, then run the invoking view's refresh.

        Args:
            refresh: Coroutine function refreshing the view that triggered the
                checkout (defaults to this controller's loan list)

        Raises:
            InvalidInputError: checkout_days is below 1
        """
        checkout_days = _require_days(
            "checkout_days", settings.default_checkout_days if checkout_days is None else checkout_days
        )
        try:
            result = await self.client.checkout(book_id, checkout_days)
        except CirculationError as e:
            record_loan_operation("checkout", succeeded=False)
            logging.error(f"Checkout failed: {e}", extra={"loan_id": book_id})
            self._fail(str(e))
            return None

        record_loan_operation("checkout", succeeded=True)
        log_loan_operation("checkout", book_id, "success", checkout_days=checkout_days)

        if not self._closed:
            self.feedback.clear_error()
        self._succeed(f'Successfully checked out "{result.book_title or "book"}"!', self.checkout_success_seconds)

        if not self._closed:
            await (refresh or self.fetch_my_loans)()
        return result

    def _title_for(self, loan_id: str) -> str:
        return next((loan.title for loan in self.loans if loan.id == loan_id), "book")

    def _fail(self, message: str) -> None:
        if not self._closed:
            self.feedback.fail(message)

    def _succeed(self, message: str, seconds: float | None = None) -> None:
        if not self._closed:
            self.feedback.succeed(message, seconds)


def _require_days(name: str, days: int) -> int:
    if days < 1:
        raise InvalidInputError(f"{name} must be >= 1, got {days}")
    return days
