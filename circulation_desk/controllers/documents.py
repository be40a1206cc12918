"""Document library controller - listing, single delete and bulk delete"""

import logging
import math
from typing import FrozenSet, List

from circulation_desk.config import settings
from circulation_desk.controllers.feedback import Feedback
from circulation_desk.domain.exceptions import CirculationError
from circulation_desk.domain.models import Document, DocumentPage
from circulation_desk.domain.selection import SelectionCoordinator
from circulation_desk.infrastructure.clients.documents import DocumentClient


class DocumentLibraryController:
    """Owns the visible document list and the selection used for bulk delete"""

    def __init__(self, client: DocumentClient, page_size: int | None = None):
        self.client = client
        self.page = 1
        self.page_size = page_size or settings.documents_page_size
        self.file_type = "all"
        self.documents: List[Document] = []
        self.total = 0
        self.loading = False
        self.deleting = False
        self.selection = SelectionCoordinator()
        self.feedback = Feedback(settings.success_message_seconds)
        self._closed = False

    @property
    def error(self) -> str:
        return self.feedback.error

    @property
    def selected(self) -> FrozenSet[str]:
        return self.selection.selected

    @property
    def visible_ids(self) -> List[str]:
        return [doc.id for doc in self.documents]

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def all_selected(self) -> bool:
        return self.selection.is_fully_selected(self.visible_ids)

    def close(self) -> None:
        """Tear down the owning view; late completions no longer touch view state"""
        self._closed = True
        self.feedback.close()

    def toggle(self, document_id: str) -> FrozenSet[str]:
        return self.selection.toggle(document_id)

    def toggle_all(self) -> FrozenSet[str]:
        """Select every visible document, or clear when all are already selected"""
        if self.all_selected:
            return self.selection.clear()
        return self.selection.select_all(self.visible_ids)

    async def fetch_documents(self, page: int | None = None, file_type: str | None = None) -> DocumentPage | None:
        page = page or self.page
        file_type = file_type or self.file_type

        self.loading = True
        try:
            result = await self.client.list_documents(page, self.page_size, file_type)
        except CirculationError as e:
            logging.error(f"Fetching documents failed: {e}", extra={"page": page})
            self._fail(str(e))
            return None
        finally:
            if not self._closed:
                self.loading = False

        if self._closed:
            return result

        self.documents = result.documents
        self.total = result.total
        self.page = page
        self.file_type = file_type
        self.feedback.clear_error()

        # Selection must not outlive the documents it refers to
        self.selection.prune(self.visible_ids)
        return result

    async def delete(self, document_id: str) -> bool:
        self.deleting = True
        try:
            await self.client.delete_document(document_id)
        except CirculationError as e:
            logging.error(f"Deleting document failed: {e}", extra={"document_id": document_id})
            self._fail(str(e))
            return False
        finally:
            if not self._closed:
                self.deleting = False

        logging.info("Document deleted", extra={"document_id": document_id})
        if not self._closed:
            self.selection.discard(document_id)
            await self.fetch_documents()
        return True

    async def bulk_delete(self) -> int:
        """Delete every selected document; returns the number deleted"""
        document_ids = sorted(self.selection.selected)
        if not document_ids:
            return 0

        self.deleting = True
        try:
            deleted = await self.client.bulk_delete_documents(document_ids)
        except CirculationError as e:
            logging.error(f"Bulk delete failed: {e}", extra={"document_count": len(document_ids)})
            self._fail(str(e))
            return 0
        finally:
            if not self._closed:
                self.deleting = False

        logging.info("Documents deleted", extra={"document_count": deleted})
        if not self._closed:
            self.selection.clear()
            self.feedback.clear_error()
            await self.fetch_documents()
        return deleted

    def _fail(self, message: str) -> None:
        if not self._closed:
            self.feedback.fail(message)
