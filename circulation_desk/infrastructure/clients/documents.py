"""Document store HTTP client"""

from typing import List
from circulation_desk.domain.models import DocumentPage
from circulation_desk.infrastructure.clients.base import ApiClient
from circulation_desk.infrastructure.clients.schemas import BulkDeleteRequest, BulkDeleteResponse, DocumentListResponse


class DocumentClient(ApiClient):
    """Client for listing and deleting the user's uploaded documents"""

    async def list_documents(self, page: int = 1, limit: int = 10, file_type: str | None = None) -> DocumentPage:
        params = {"page": page, "limit": limit}
        if file_type and file_type != "all":
            params["file_type"] = file_type

        data = await self._request(
            "GET",
            "/documents",
            endpoint="documents",
            fallback_message="Failed to fetch documents",
            params=params,
        )
        return self._parse(DocumentListResponse, data).to_domain()

    async def delete_document(self, document_id: str) -> None:
        await self._request(
            "DELETE",
            f"/documents/{document_id}",
            endpoint="delete_document",
            fallback_message="Failed to delete document",
        )

    async def bulk_delete_documents(self, document_ids: List[str]) -> int:
        """Delete several documents in one call, returning the deleted count"""
        data = await self._request(
            "POST",
            "/documents/bulk-delete",
            endpoint="bulk_delete_documents",
            fallback_message="Failed to delete documents",
            json=BulkDeleteRequest(document_ids=document_ids).model_dump(),
        )
        if isinstance(data, dict) and "deleted_count" in data:
            return self._parse(BulkDeleteResponse, data).deleted_count
        return len(document_ids)
