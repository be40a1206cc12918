"""In-memory mock of the catalog API for local development and integration tests"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from fastapi import FastAPI, Header, HTTPException, Query

from circulation_desk.domain.due_dates import classify
from circulation_desk.infrastructure.clients.schemas import BulkDeleteRequest, CheckoutRequest


@dataclass
class BookRecord:
    id: str
    title: str
    author: str
    status: str = "available"
    checked_out_by: Optional[str] = None
    checked_out_at: Optional[datetime] = None
    due_date: Optional[datetime] = None

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "status": self.status,
            "checked_out_by": self.checked_out_by,
            "checked_out_at": self.checked_out_at.isoformat() if self.checked_out_at else None,
            "due_date": self.due_date.isoformat() if self.due_date else None,
        }


@dataclass
class DocumentRecord:
    id: str
    owner: str
    original_name: str
    file_size: int = 1024
    mime_type: str = "application/pdf"
    upload_status: str = "completed"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "file_name": f"{self.id}_{self.original_name}",
            "original_name": self.original_name,
            "file_size": self.file_size,
            "mime_type": self.mime_type,
            "upload_status": self.upload_status,
            "created_at": self.created_at.isoformat(),
        }


class CatalogStore:
    """Books and documents keyed by id; the bearer token doubles as the user id"""

    def __init__(self):
        self.books: Dict[str, BookRecord] = {}
        self.documents: Dict[str, DocumentRecord] = {}

    def add_book(self, title: str, author: str, book_id: str | None = None) -> BookRecord:
        book = BookRecord(id=book_id or str(uuid.uuid4()), title=title, author=author)
        self.books[book.id] = book
        return book

    def lend(self, book_id: str, user_id: str, due_date: datetime) -> BookRecord:
        book = self.books[book_id]
        book.status = "checked_out"
        book.checked_out_by = user_id
        book.checked_out_at = datetime.now(timezone.utc)
        book.due_date = due_date
        return book

    def add_document(self, owner: str, original_name: str, document_id: str | None = None) -> DocumentRecord:
        document = DocumentRecord(id=document_id or str(uuid.uuid4()), owner=owner, original_name=original_name)
        self.documents[document.id] = document
        return document

    def loans_of(self, user_id: str) -> List[BookRecord]:
        return sorted(
            (b for b in self.books.values() if b.checked_out_by == user_id),
            key=lambda b: b.due_date or datetime.max.replace(tzinfo=timezone.utc),
        )


def _page(items: list, page: int, limit: int) -> list:
    start = (page - 1) * limit
    return items[start:start + limit]


def create_app(store: CatalogStore | None = None) -> FastAPI:
    store = store or CatalogStore()
    app = FastAPI(title="Mock Catalog Server", version="1.0.0")
    app.state.store = store

    def current_user(authorization: Optional[str]) -> str:
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Not authenticated")
        return authorization[len("Bearer "):]

    def owned_book(book_id: str) -> BookRecord:
        if book_id not in store.books:
            raise HTTPException(status_code=404, detail="Book not found")
        return store.books[book_id]

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/books/my-checkouts")
    def my_checkouts(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        authorization: Optional[str] = Header(None),
    ):
        loans = store.loans_of(current_user(authorization))
        return {"books": [b.to_json() for b in _page(loans, page, limit)], "total": len(loans)}

    @app.get("/books/my-checkouts/notifications")
    def notifications(authorization: Optional[str] = Header(None)):
        loans = store.loans_of(current_user(authorization))
        now = datetime.now(timezone.utc)
        overdue, due_soon = [], []
        for book in loans:
            status = classify(book.due_date, now)
            entry = {"id": book.id, "title": book.title, "author": book.author, "due_date": book.due_date.isoformat()}
            if status.is_overdue:
                overdue.append({**entry, "days_overdue": status.days_overdue})
            elif status.is_due_soon:
                due_soon.append({**entry, "days_until_due": status.days_until_due})
        return {
            "total_checkouts": len(loans),
            "overdue_count": len(overdue),
            "due_soon_count": len(due_soon),
            "overdue_books": overdue,
            "due_soon_books": due_soon,
            "has_notifications": bool(overdue or due_soon),
        }

    @app.post("/books/{book_id}/checkout")
    def checkout(book_id: str, body: CheckoutRequest, authorization: Optional[str] = Header(None)):
        user_id = current_user(authorization)
        book = owned_book(book_id)
        if book.status != "available":
            raise HTTPException(status_code=400, detail="Book is not available for checkout")
        store.lend(book_id, user_id, datetime.now(timezone.utc) + timedelta(days=body.checkout_days))
        return {"book_title": book.title}

    @app.post("/books/{book_id}/checkin")
    def checkin(book_id: str, authorization: Optional[str] = Header(None)):
        user_id = current_user(authorization)
        book = owned_book(book_id)
        if book.checked_out_by != user_id:
            raise HTTPException(status_code=400, detail="Book is not checked out by you")
        status = classify(book.due_date, datetime.now(timezone.utc))
        book.status, book.checked_out_by, book.checked_out_at, book.due_date = "available", None, None, None
        return {"was_overdue": status.is_overdue, "days_overdue": status.days_overdue}

    @app.post("/books/{book_id}/extend-checkout")
    def extend_checkout(
        book_id: str,
        extend_days: int = Query(7, ge=1, le=30),
        authorization: Optional[str] = Header(None),
    ):
        user_id = current_user(authorization)
        book = owned_book(book_id)
        if book.checked_out_by != user_id:
            raise HTTPException(status_code=400, detail="Book is not checked out by you")
        book.due_date = book.due_date + timedelta(days=extend_days)
        return {"message": f"New due date: {book.due_date.date().isoformat()}"}

    @app.get("/documents")
    def list_documents(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        file_type: Optional[str] = None,
        authorization: Optional[str] = Header(None),
    ):
        user_id = current_user(authorization)
        documents = [d for d in store.documents.values() if d.owner == user_id]
        if file_type:
            documents = [d for d in documents if d.original_name.lower().endswith(f".{file_type.lower()}")]
        return {
            "documents": [d.to_json() for d in _page(documents, page, limit)],
            "total": len(documents),
            "page": page,
            "limit": limit,
        }

    @app.delete("/documents/{document_id}")
    def delete_document(document_id: str, authorization: Optional[str] = Header(None)):
        user_id = current_user(authorization)
        document = store.documents.get(document_id)
        if document is None or document.owner != user_id:
            raise HTTPException(status_code=404, detail="Document not found")
        del store.documents[document_id]
        return {"message": "Document deleted"}

    @app.post("/documents/bulk-delete")
    def bulk_delete(body: BulkDeleteRequest, authorization: Optional[str] = Header(None)):
        user_id = current_user(authorization)
        owned = [i for i in body.document_ids if i in store.documents and store.documents[i].owner == user_id]
        for document_id in owned:
            del store.documents[document_id]
        return {"deleted_count": len(owned)}

    return app


app = create_app()
