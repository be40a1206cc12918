"""Shared HTTP plumbing for catalog API clients"""

from typing import Any, Dict, Type, TypeVar
import httpx
from pydantic import BaseModel, ValidationError

from circulation_desk.config import get_api_url, settings
from circulation_desk.domain.exceptions import InvalidResponseError, NotAuthenticatedError, RemoteError
from circulation_desk.infrastructure.auth.session import SessionProvider
from circulation_desk.infrastructure.observability.metrics import api_request_histogram

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def extract_error_detail(response: httpx.Response, fallback: str) -> str:
    """Use the JSON body's `detail` string when present, else the operation's fallback"""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and isinstance(body.get("detail"), str) and body["detail"]:
        return body["detail"]
    return fallback


class ApiClient:
    """Base client: bearer auth from the session provider, one httpx client per call"""

    def __init__(
        self,
        session: SessionProvider,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.session = session
        self.base_url = base_url or get_api_url()
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _auth_headers(self) -> Dict[str, str]:
        token = self.session.get_active_token()
        if token is None:
            raise NotAuthenticatedError()
        return {"Authorization": f"Bearer {token.access_token}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def _request(
        self,
        method: str,
        path: str,
        endpoint: str,
        fallback_message: str,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> Any:
        """
        Issue one request and return the decoded JSON body.

        Transport failures and HTTP error statuses both surface as RemoteError
        carrying a single user-facing message.

        Raises:
            NotAuthenticatedError: No active session (no request is sent)
            RemoteError: Non-2xx status, timeout or connection failure
            InvalidResponseError: 2xx response whose body is not JSON
        """
        headers = self._auth_headers() if authenticated else {}

        async with self._client() as client:
            try:
                with api_request_histogram.labels(endpoint=endpoint).time():
                    response = await client.request(method, path, headers=headers, **kwargs)
                response.raise_for_status()
                return response.json() if response.content else {}

            except httpx.HTTPStatusError as e:
                raise RemoteError(
                    extract_error_detail(e.response, fallback_message),
                    status=e.response.status_code,
                ) from e
            except httpx.TimeoutException as e:
                raise RemoteError(f"Catalog API timeout after {self.timeout}s") from e
            except httpx.RequestError as e:
                raise RemoteError(fallback_message) from e
            except ValueError as e:
                raise InvalidResponseError(f"Invalid response from catalog API: {e}", status=response.status_code) from e

    @staticmethod
    def _parse(schema: Type[SchemaT], data: Any) -> SchemaT:
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise InvalidResponseError(f"Invalid response from catalog API: {e.error_count()} field error(s)") from e
