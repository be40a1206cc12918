"""Pydantic schemas for catalog API request/response payloads"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from circulation_desk.domain.models import (
    BookStatus,
    CheckinResult,
    CheckoutResult,
    Document,
    DocumentPage,
    DueSoonBook,
    Loan,
    NotificationSummary,
    OverdueBook,
    RenewResult,
)
from circulation_desk.utils.date_utils import ensure_utc


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_utc(value) if value is not None else None


class LoanSchema(BaseModel):
    """Book record as returned by GET /books/my-checkouts"""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    author: str
    status: BookStatus = BookStatus.CHECKED_OUT
    due_date: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None

    def to_domain(self) -> Loan:
        return Loan(
            id=self.id,
            title=self.title,
            author=self.author,
            due_date=_utc(self.due_date),
            checked_out_at=_utc(self.checked_out_at),
            status=self.status,
        )


class LoanListResponse(BaseModel):
    """Response for GET /books/my-checkouts"""

    books: List[LoanSchema]
    total: int


class OverdueBookSchema(BaseModel):
    id: str
    title: str
    author: str
    due_date: datetime
    days_overdue: int


class DueSoonBookSchema(BaseModel):
    id: str
    title: str
    author: str
    due_date: datetime
    days_until_due: int


class NotificationSummaryResponse(BaseModel):
    """Response for GET /books/my-checkouts/notifications"""

    total_checkouts: int
    overdue_count: int
    due_soon_count: int
    overdue_books: List[OverdueBookSchema] = Field(default_factory=list)
    due_soon_books: List[DueSoonBookSchema] = Field(default_factory=list)
    has_notifications: bool = False

    def to_domain(self) -> NotificationSummary:
        return NotificationSummary(
            total_checkouts=self.total_checkouts,
            overdue_count=self.overdue_count,
            due_soon_count=self.due_soon_count,
            overdue_books=tuple(
                OverdueBook(b.id, b.title, b.author, ensure_utc(b.due_date), b.days_overdue)
                for b in self.overdue_books
            ),
            due_soon_books=tuple(
                DueSoonBook(b.id, b.title, b.author, ensure_utc(b.due_date), b.days_until_due)
                for b in self.due_soon_books
            ),
        )


class CheckinResponse(BaseModel):
    """Response for POST /books/{id}/checkin"""

    was_overdue: bool = False
    days_overdue: int = 0

    def to_domain(self) -> CheckinResult:
        return CheckinResult(was_overdue=self.was_overdue, days_overdue=self.days_overdue)


class RenewResponse(BaseModel):
    """Response for POST /books/{id}/extend-checkout"""

    message: str = ""

    def to_domain(self) -> RenewResult:
        return RenewResult(message=self.message)


class CheckoutRequest(BaseModel):
    """Request body for POST /books/{id}/checkout"""

    checkout_days: int = Field(14, gt=0)


class CheckoutResponse(BaseModel):
    """Response for POST /books/{id}/checkout"""

    book_title: Optional[str] = None

    def to_domain(self) -> CheckoutResult:
        return CheckoutResult(book_title=self.book_title)


class DocumentSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    file_name: str
    original_name: str
    file_size: int
    mime_type: str
    upload_status: str
    created_at: Optional[datetime] = None

    def to_domain(self) -> Document:
        return Document(
            id=self.id,
            file_name=self.file_name,
            original_name=self.original_name,
            file_size=self.file_size,
            mime_type=self.mime_type,
            upload_status=self.upload_status,
            created_at=_utc(self.created_at),
        )


class DocumentListResponse(BaseModel):
    """Response for GET /documents"""

    documents: List[DocumentSchema]
    total: int
    page: int
    limit: int

    def to_domain(self) -> DocumentPage:
        return DocumentPage(
            documents=[doc.to_domain() for doc in self.documents],
            total=self.total,
            page=self.page,
            limit=self.limit,
        )


class BulkDeleteRequest(BaseModel):
    """Request body for POST /documents/bulk-delete"""

    document_ids: List[str] = Field(..., min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted_count: int
