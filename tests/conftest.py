"""Shared pytest fixtures for gdrive-gateway tests.

This module provides reusable fixtures for credentials, token storage,
and a mocked httpx transport for the Google API gateways.
"""

import json
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from gdrive_gateway.auth.credential_manager import GOOGLE_SCOPES, CredentialManager
from gdrive_gateway.auth.models import OAuthToken, StoredToken, TokenMetadata
from gdrive_gateway.auth.token_storage import TokenStorage
from gdrive_gateway.gateways.client import GoogleApiClient

# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def valid_token() -> OAuthToken:
    """Create a valid, non-expired OAuth token."""
    return OAuthToken(
        access_token="test_access_token_abc123",
        refresh_token="test_refresh_token_xyz789",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        scopes=list(GOOGLE_SCOPES),
        token_type="Bearer",
    )


@pytest.fixture
def expired_token() -> OAuthToken:
    """Create an expired OAuth token."""
    return OAuthToken(
        access_token="expired_access_token",
        refresh_token="test_refresh_token",
        expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        scopes=["https://www.googleapis.com/auth/drive"],
        token_type="Bearer",
    )


@pytest.fixture
def expiring_token() -> OAuthToken:
    """Create a token that expires inside the refresh window."""
    return OAuthToken(
        access_token="expiring_access_token",
        refresh_token="test_refresh_token",
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=30),
        scopes=list(GOOGLE_SCOPES),
    )


@pytest.fixture
def token_metadata() -> TokenMetadata:
    """Create token metadata for testing."""
    return TokenMetadata(
        service_name="user",
        provider="google",
        created_at=datetime.now(timezone.utc) - timedelta(days=1),
    )


@pytest.fixture
def stored_token(valid_token: OAuthToken, token_metadata: TokenMetadata) -> StoredToken:
    """Create a complete stored token for testing."""
    return StoredToken(version=1, metadata=token_metadata, token=valid_token)


# =============================================================================
# Token Storage Fixtures
# =============================================================================


@pytest.fixture
def temp_token_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for token storage tests."""
    token_dir = tmp_path / "credentials"
    token_dir.mkdir(parents=True, mode=0o700)
    return token_dir


@pytest.fixture
def temp_token_path(temp_token_dir: Path) -> Path:
    """Get the path for a temporary tokens.json file."""
    return temp_token_dir / "tokens.json"


@pytest.fixture
def token_storage(temp_token_path: Path) -> TokenStorage:
    """Create a TokenStorage instance with temporary storage."""
    return TokenStorage(token_path=temp_token_path)


# =============================================================================
# Credential Manager Fixtures
# =============================================================================


@pytest.fixture
def client_secrets_file(temp_token_dir: Path) -> Path:
    """Write a Google Cloud Console style client-secret file."""
    path = temp_token_dir / "credentials.json"
    path.write_text(
        json.dumps(
            {
                "web": {
                    "client_id": "test-client-id.apps.googleusercontent.com",
                    "client_secret": "test-client-secret",  # pragma: allowlist secret
                    "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                    "token_uri": "https://oauth2.googleapis.com/token",
                    "redirect_uris": ["http://localhost:8080/api/auth/callback"],
                }
            }
        )
    )
    return path


@pytest.fixture
def credential_manager(client_secrets_file: Path, token_storage: TokenStorage) -> CredentialManager:
    """Create a CredentialManager with temporary secrets and storage."""
    return CredentialManager(
        credentials_file=client_secrets_file,
        redirect_uri="http://localhost:8080/api/auth/callback",
        storage=token_storage,
    )


@pytest.fixture
def mock_google_credentials() -> MagicMock:
    """Create a mock Google OAuth2 Credentials object."""
    mock_creds = MagicMock()
    mock_creds.token = "refreshed_access_token"
    mock_creds.refresh_token = "test_refresh_token"
    mock_creds.expiry = datetime.now(timezone.utc) + timedelta(hours=1)
    return mock_creds


# =============================================================================
# Google API Mocks
# =============================================================================


def create_mock_response(
    json_data: dict[str, Any] | None = None,
    status_code: int = 200,
    content: bytes = b"",
) -> MagicMock:
    """Create a mock httpx Response object.

    Non-2xx status codes make raise_for_status() raise HTTPStatusError.
    """
    mock_response = MagicMock(spec=httpx.Response)
    mock_response.status_code = status_code
    mock_response.json.return_value = json_data if json_data is not None else {}
    mock_response.content = content
    mock_response.text = json.dumps(json_data) if json_data is not None else ""
    mock_response.reason_phrase = ""

    if status_code >= 400:
        mock_response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError(
                f"HTTP {status_code}", request=MagicMock(), response=mock_response
            )
        )
    else:
        mock_response.raise_for_status = MagicMock()
    return mock_response


@pytest.fixture
def mock_response() -> Callable[..., MagicMock]:
    """Factory for mock httpx responses."""
    return create_mock_response


@pytest.fixture
def credential_source(valid_token: OAuthToken) -> MagicMock:
    """A credential source that always hands out a valid token."""
    source = MagicMock()
    source.load_credential = AsyncMock(return_value=valid_token)
    return source


@pytest.fixture
def mock_http_client() -> MagicMock:
    """An httpx.AsyncClient stand-in whose request() is awaitable."""
    client = MagicMock(spec=httpx.AsyncClient)
    client.request = AsyncMock(return_value=create_mock_response({}))
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def api_client(credential_source: MagicMock, mock_http_client: MagicMock) -> GoogleApiClient:
    """GoogleApiClient wired to the mocked credential source and transport."""
    return GoogleApiClient(credential_source, http_client=mock_http_client)


# =============================================================================
# CLI Test Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
