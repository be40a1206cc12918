"""Pytest fixtures for testing"""

import pytest
import httpx
from datetime import datetime, timedelta, timezone
from typing import Callable, List

from circulation_desk.infrastructure.auth.session import StaticSessionProvider, Token
from circulation_desk.infrastructure.clients.catalog import CatalogClient
from circulation_desk.infrastructure.clients.documents import DocumentClient
from mocks.catalog_server.main import CatalogStore, create_app


BASE_URL = "http://testserver"
READER = "reader-1"


@pytest.fixture
def now() -> datetime:
    """Reference instant shared by the mock server data and the controllers' clock"""
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def session() -> StaticSessionProvider:
    """Signed-in session; the token value is the mock server's user id"""
    return StaticSessionProvider(Token(access_token=READER, expires_at=datetime.now(timezone.utc) + timedelta(hours=1)))


@pytest.fixture
def store(now: datetime) -> CatalogStore:
    """Catalog with one overdue, one due-soon and one comfortable loan"""
    store = CatalogStore()
    store.add_book("Dune", "Frank Herbert", book_id="book-overdue")
    store.add_book("Emma", "Jane Austen", book_id="book-due-soon")
    store.add_book("Ulysses", "James Joyce", book_id="book-later")
    store.add_book("Middlemarch", "George Eliot", book_id="book-available")
    store.lend("book-overdue", READER, now - timedelta(days=2))
    store.lend("book-due-soon", READER, now + timedelta(days=2))
    store.lend("book-later", READER, now + timedelta(days=10))
    return store


@pytest.fixture
def transport(store: CatalogStore) -> httpx.ASGITransport:
    """In-process transport to the mock catalog server"""
    return httpx.ASGITransport(app=create_app(store))


@pytest.fixture
def catalog_client(session: StaticSessionProvider, transport: httpx.ASGITransport) -> CatalogClient:
    return CatalogClient(session, base_url=BASE_URL, transport=transport)


@pytest.fixture
def document_client(session: StaticSessionProvider, transport: httpx.ASGITransport) -> DocumentClient:
    return DocumentClient(session, base_url=BASE_URL, transport=transport)


class RecordingHandler:
    """httpx.MockTransport handler that records requests and answers from a route table"""

    def __init__(self, routes: dict[str, Callable[[httpx.Request], httpx.Response]]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes[f"{request.method} {request.url.path}"](request)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


@pytest.fixture
def recording_client(session: StaticSessionProvider) -> Callable[[dict], tuple[CatalogClient, RecordingHandler]]:
    """Factory for a CatalogClient backed by a RecordingHandler"""

    def make(routes: dict) -> tuple[CatalogClient, RecordingHandler]:
        handler = RecordingHandler(routes)
        client = CatalogClient(session, base_url=BASE_URL, transport=httpx.MockTransport(handler))
        return client, handler

    return make
