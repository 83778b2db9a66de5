"""OAuth2 credential manager for the Drive/Docs/Sheets gateway.

Owns the authorization-code flow against Google using google-auth-oauthlib
and keeps a single cached credential for the process, refreshing it with
google-auth when it is about to expire.

The client-secret file is the JSON downloaded from the Google Cloud Console
(a "web" or "installed" client). Tokens are persisted with TokenStorage under
the fixed user identifier "user".
"""

import asyncio
import json
import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Protocol

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from gdrive_gateway.auth.models import OAuthToken, StoredToken, TokenMetadata, TokenStatus
from gdrive_gateway.auth.token_storage import TokenStorage
from gdrive_gateway.config import Settings
from gdrive_gateway.errors import (
    ConfigurationError,
    GatewayError,
    TokenExchangeError,
    TokenRefreshError,
)

# Google may echo granted scopes in a different order than requested
os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")

logger = logging.getLogger(__name__)

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/documents",
]

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Single-user gateway: every credential is stored under this key
USER_ID = "user"


class CredentialSource(Protocol):
    """Anything that can hand out a live credential."""

    async def load_credential(self) -> OAuthToken | None:
        """Return a non-expired credential, or None if never authenticated."""
        ...


class CredentialManager:
    """OAuth credential manager for the gateway.

    Handles consent URL construction, code exchange, token persistence,
    refresh-on-expiry and logout. Concurrent refreshes are not serialized;
    the last write to the token store wins.

    Attributes:
        credentials_file: Path to the OAuth client-secret JSON.
        redirect_uri: Redirect URI registered for the OAuth client.
        storage: Token storage instance for persisting credentials.
        scopes: OAuth scopes requested on consent.

    Example:
        ```python
        manager = CredentialManager(Path("credentials/credentials.json"), redirect_uri)

        url = manager.authorization_url()
        # ... user consents, Google redirects with ?code=...
        await manager.exchange_code(code)

        token = await manager.load_credential()
        ```
    """

    def __init__(
        self,
        credentials_file: Path,
        redirect_uri: str,
        storage: TokenStorage | None = None,
        scopes: list[str] | None = None,
    ) -> None:
        """Initialize the credential manager.

        Args:
            credentials_file: OAuth client-secret JSON file.
            redirect_uri: Redirect URI for the authorization-code flow.
            storage: Token storage instance. Creates default if not provided.
            scopes: Scopes to request. Uses GOOGLE_SCOPES if not provided.
        """
        self.credentials_file = Path(credentials_file)
        self.redirect_uri = redirect_uri
        self.storage = storage or TokenStorage()
        self.scopes = list(scopes) if scopes else list(GOOGLE_SCOPES)
        self._cached: OAuthToken | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialManager":
        """Create a manager from application settings."""
        return cls(
            credentials_file=settings.credentials_file,
            redirect_uri=settings.redirect_uri,
            storage=TokenStorage(token_path=settings.tokens_file),
        )

    @property
    def token_path(self) -> Path:
        """Path to the tokens.json file."""
        return self.storage.token_path

    # =========================================================================
    # Client configuration
    # =========================================================================

    def _load_client_config(self) -> dict[str, Any]:
        """Read the OAuth client-secret file.

        Raises:
            ConfigurationError: If the file is missing, unreadable, or malformed.
        """
        if not self.credentials_file.exists():
            raise ConfigurationError(
                f"credentials.json not found at: {self.credentials_file.resolve()}. "
                "Download it from Google Cloud Console and place it there."
            )

        try:
            with open(self.credentials_file) as f:
                client_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Could not read client secrets from {self.credentials_file}: {e}"
            ) from e

        if not isinstance(client_config, dict) or not (
            "web" in client_config or "installed" in client_config
        ):
            raise ConfigurationError(
                f"{self.credentials_file} must contain a 'web' or 'installed' OAuth client"
            )
        return client_config

    def _client_info(self) -> dict[str, Any]:
        """Return the 'web' or 'installed' section of the client config."""
        client_config = self._load_client_config()
        return client_config.get("web") or client_config["installed"]

    def _build_flow(self) -> Flow:
        """Create an authorization-code Flow for the configured client.

        PKCE is disabled because the consent URL and the code exchange happen
        in separate requests with separate Flow instances.
        """
        client_config = self._load_client_config()
        try:
            return Flow.from_client_config(
                client_config,
                scopes=self.scopes,
                redirect_uri=self.redirect_uri,
                autogenerate_code_verifier=False,
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid OAuth client configuration: {e}") from e

    # =========================================================================
    # Token conversion
    # =========================================================================

    def _credentials_to_token(self, credentials: Credentials, scopes: list[str]) -> OAuthToken:
        """Convert google-auth Credentials to OAuthToken.

        Args:
            credentials: Google OAuth2 credentials.
            scopes: List of granted scopes.

        Returns:
            OAuthToken with all credential data.
        """
        if credentials.expiry:
            expires_at = credentials.expiry
            # google-auth reports naive UTC datetimes
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
        else:
            expires_at = datetime.now(timezone.utc) + timedelta(hours=1)

        return OAuthToken(  # nosec B106 - "Bearer" is OAuth token type, not a password
            access_token=credentials.token,
            refresh_token=credentials.refresh_token,
            expires_at=expires_at,
            scopes=scopes,
            token_type="Bearer",
        )

    def _token_to_credentials(self, token: OAuthToken) -> Credentials:
        """Convert OAuthToken to refreshable google-auth Credentials.

        Raises:
            ConfigurationError: If the client-secret file cannot be read.
        """
        client_info = self._client_info()
        return Credentials(  # nosec B106 - token_uri is public Google OAuth endpoint
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=client_info.get("token_uri", GOOGLE_TOKEN_URI),
            client_id=client_info.get("client_id"),
            client_secret=client_info.get("client_secret"),
            scopes=token.scopes,
        )

    # =========================================================================
    # Authorization-code flow
    # =========================================================================

    def authorization_url(self) -> str:
        """Build the Google OAuth2 consent-screen URL.

        Returns:
            URL the browser should be sent to.

        Raises:
            ConfigurationError: If the client-secret file is missing or invalid.
        """
        flow = self._build_flow()
        auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
        return auth_url

    def _fetch_token(self, flow: Flow, code: str) -> Credentials:
        """Exchange the code at the token endpoint (blocking)."""
        flow.fetch_token(code=code)
        return flow.credentials

    async def exchange_code(self, code: str) -> None:
        """Exchange an authorization code for tokens and persist them.

        Args:
            code: Authorization code from the OAuth callback.

        Raises:
            ConfigurationError: If the client-secret file is missing or invalid.
            TokenExchangeError: If Google rejects the code or the request fails.
        """
        flow = self._build_flow()

        loop = asyncio.get_running_loop()
        try:
            credentials = await loop.run_in_executor(None, self._fetch_token, flow, code)
        except Exception as e:
            logger.error(f"Token exchange failed: {e}")
            raise TokenExchangeError(f"Token exchange failed: {e}") from e

        token = self._credentials_to_token(credentials, self.scopes)
        metadata = TokenMetadata(service_name=USER_ID, provider="google")
        self.storage.store(USER_ID, token, metadata)

        # Force the next load to re-read the store
        self._cached = None
        logger.info("Tokens saved successfully.")

    # =========================================================================
    # Credential lifecycle
    # =========================================================================

    async def _refresh(self, stored: StoredToken) -> OAuthToken:
        """Refresh an expiring token and persist the result.

        Raises:
            TokenRefreshError: If there is no refresh token or Google rejects it.
        """
        if not stored.token.refresh_token:
            raise TokenRefreshError(
                "Access token expired and no refresh token is stored. Please re-authenticate."
            )

        logger.info("Access token expired or expiring soon, refreshing...")
        credentials = self._token_to_credentials(stored.token)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, credentials.refresh, Request())
        except GoogleAuthError as e:
            logger.warning(f"Token refresh failed: {e}")
            raise TokenRefreshError(f"Token refresh failed: {e}") from e

        new_token = self._credentials_to_token(credentials, stored.token.scopes)
        stored.metadata.last_refreshed = datetime.now(timezone.utc)
        self.storage.store(USER_ID, new_token, stored.metadata)
        return new_token

    async def load_credential(self) -> OAuthToken | None:
        """Return a live credential, refreshing it if it expires within 60 seconds.

        Returns:
            The cached or freshly loaded token, or None if never authenticated.

        Raises:
            TokenRefreshError: If an expiring token cannot be refreshed.
        """
        if self._cached is not None and not self._cached.is_expired():
            return self._cached

        stored = self.storage.retrieve(USER_ID)
        if stored is None:
            self._cached = None
            return None

        token = stored.token
        if token.is_expired():
            token = await self._refresh(stored)

        self._cached = token
        return token

    async def is_authenticated(self) -> bool:
        """Check whether a usable credential exists.

        Returns:
            True if load_credential() returns a credential without raising.
        """
        try:
            return await self.load_credential() is not None
        except GatewayError as e:
            logger.debug(f"Authentication check failed: {e}")
            return False

    def logout(self) -> None:
        """Drop the cached credential and delete the stored tokens.

        Safe to call when nothing is stored.
        """
        self._cached = None
        try:
            self.storage.delete(USER_ID)
            logger.info("Tokens cleared.")
        except OSError as e:
            logger.warning(f"Could not clear token files: {e}")

    def get_status(self) -> tuple[TokenStatus, StoredToken | None]:
        """Get the status of the stored token.

        Returns:
            Tuple of (TokenStatus, StoredToken or None).
        """
        status = self.storage.get_status(USER_ID)
        stored = self.storage.retrieve(USER_ID) if status != TokenStatus.MISSING else None
        return (status, stored)
