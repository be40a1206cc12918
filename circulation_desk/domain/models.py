"""Domain models - pure Python dataclasses representing circulation entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Tuple


class BookStatus(str, Enum):
    """Circulation status of a catalog item"""

    AVAILABLE = "available"
    CHECKED_OUT = "checked_out"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


STATUS_LABELS = {
    BookStatus.AVAILABLE: "Available",
    BookStatus.CHECKED_OUT: "On Loan",
    BookStatus.RESERVED: "Reserved",
    BookStatus.MAINTENANCE: "Maintenance",
}


def badge_label(status: BookStatus) -> str:
    """Human readable badge text for a book status"""
    return STATUS_LABELS[status]


@dataclass
class Loan:
    """Book checked out by the requesting user"""

    id: str
    title: str
    author: str
    due_date: datetime | None  # None means not currently checked out
    checked_out_at: datetime | None = None
    status: BookStatus = BookStatus.CHECKED_OUT


DUE_SOON_DAYS = 3


@dataclass(frozen=True)
class Classification:
    """Derived due-date fields, recomputed on every pass"""

    is_overdue: bool
    days_overdue: int
    days_until_due: int

    @property
    def is_due_soon(self) -> bool:
        return not self.is_overdue and self.days_until_due <= DUE_SOON_DAYS


@dataclass
class ClassifiedLoan:
    """Loan annotated with its classification against one instant"""

    loan: Loan
    classification: Classification

    @property
    def id(self) -> str:
        return self.loan.id

    @property
    def title(self) -> str:
        return self.loan.title

    @property
    def is_overdue(self) -> bool:
        return self.classification.is_overdue

    @property
    def days_overdue(self) -> int:
        return self.classification.days_overdue

    @property
    def days_until_due(self) -> int:
        return self.classification.days_until_due

    @property
    def is_due_soon(self) -> bool:
        return self.classification.is_due_soon


@dataclass
class LoanPage:
    """One page of the user's loans"""

    items: List[ClassifiedLoan]
    total_count: int


@dataclass
class OverdueBook:
    """Overdue entry in a notification summary"""

    id: str
    title: str
    author: str
    due_date: datetime
    days_overdue: int


@dataclass
class DueSoonBook:
    """Due-soon entry in a notification summary"""

    id: str
    title: str
    author: str
    due_date: datetime
    days_until_due: int


@dataclass(frozen=True)
class NotificationSummary:
    """Aggregate loan notifications for badge display, replaced wholesale on every poll"""

    total_checkouts: int
    overdue_count: int
    due_soon_count: int
    overdue_books: Tuple[OverdueBook, ...] = field(default_factory=tuple)
    due_soon_books: Tuple[DueSoonBook, ...] = field(default_factory=tuple)

    @property
    def has_notifications(self) -> bool:
        return self.overdue_count + self.due_soon_count > 0


def badge_count(summary: NotificationSummary | None) -> int:
    """Number shown on the notification badge"""
    if summary is None or not summary.has_notifications:
        return 0
    return summary.overdue_count + summary.due_soon_count


@dataclass
class CheckinResult:
    """Outcome of returning a book"""

    was_overdue: bool
    days_overdue: int


@dataclass
class RenewResult:
    """Outcome of extending a loan"""

    message: str


@dataclass
class CheckoutResult:
    """Outcome of borrowing a book"""

    book_title: str | None


@dataclass
class Document:
    """Uploaded document in the user's document store"""

    id: str
    file_name: str
    original_name: str
    file_size: int
    mime_type: str
    upload_status: str
    created_at: datetime | None = None


@dataclass
class DocumentPage:
    """One page of the user's documents"""

    documents: List[Document]
    total: int
    page: int
    limit: int
