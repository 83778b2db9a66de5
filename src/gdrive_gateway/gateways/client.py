"""Authenticated HTTP access to Google REST APIs.

GoogleApiClient pairs a CredentialSource with a shared httpx.AsyncClient.
Each call asks the source for a live credential, sends exactly one request,
and turns any failure into RemoteApiError. Nothing is retried.
"""

import logging
from typing import Any

import httpx

from gdrive_gateway.auth.credential_manager import CredentialSource
from gdrive_gateway.errors import RemoteApiError, Unauthenticated

logger = logging.getLogger(__name__)

# Google API base URLs
DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_BASE = "https://www.googleapis.com/upload/drive/v3"
DOCS_API_BASE = "https://docs.googleapis.com/v1"
SHEETS_API_BASE = "https://sheets.googleapis.com/v4"


def _upstream_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a Google error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        # OAuth-style errors: {"error": "invalid_grant", "error_description": "..."}
        return payload.get("error_description") or error
    return response.text or response.reason_phrase


def decode_json(response: httpx.Response) -> dict[str, Any]:
    """Parse a successful response body, treating non-JSON as an upstream failure."""
    if response.status_code == 204:
        return {}
    try:
        result: dict[str, Any] = response.json()
    except ValueError as e:
        raise RemoteApiError(
            "Invalid JSON in Google API response",
            upstream_status=response.status_code,
        ) from e
    return result


class GoogleApiClient:
    """Authenticated request helper shared by the Drive, Docs and Sheets gateways.

    Attributes:
        credentials: Source of live OAuth credentials.
    """

    def __init__(
        self,
        credentials: CredentialSource,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Source of live OAuth credentials.
            http_client: Pre-built httpx client. Created lazily if not provided.
        """
        self.credentials = credentials
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create shared HTTP client with connection pooling.

        Returns:
            Shared httpx.AsyncClient instance.
        """
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                timeout=httpx.Timeout(60.0, connect=10.0),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_access_token(self) -> str:
        """Get a live access token.

        Raises:
            Unauthenticated: If no credential is stored or refresh failed.
        """
        token = await self.credentials.load_credential()
        if token is None:
            raise Unauthenticated()
        return token.access_token

    async def request_raw(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make an authenticated request and return the raw response.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Full URL to request.
            params: Optional query parameters.
            json_data: Optional JSON body.
            content: Optional raw body.
            headers: Optional additional headers.

        Returns:
            The successful httpx.Response.

        Raises:
            Unauthenticated: If no credential is available.
            RemoteApiError: If the request fails or Google returns an error status.
        """
        access_token = await self._get_access_token()
        client = await self._get_http_client()

        request_headers = {"Authorization": f"Bearer {access_token}"}
        if headers:
            request_headers.update(headers)

        try:
            response = await client.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                content=content,
                headers=request_headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = _upstream_message(e.response)
            logger.error(f"Google API {method} {url} failed with {status}: {message}")
            raise RemoteApiError(message, upstream_status=status) from e
        except httpx.HTTPError as e:
            logger.error(f"Google API {method} {url} failed: {e}")
            raise RemoteApiError(str(e) or type(e).__name__) from e

        return response

    async def request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated JSON request to Google APIs.

        Returns:
            JSON response as a dictionary (empty for bodiless responses).

        Raises:
            Unauthenticated: If no credential is available.
            RemoteApiError: If the request fails.
        """
        response = await self.request_raw(method, url, params=params, json_data=json_data)
        return decode_json(response)
