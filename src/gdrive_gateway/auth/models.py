"""Pydantic models for stored OAuth credentials."""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field

# Access tokens expiring within this window are refreshed before use
REFRESH_BUFFER_SECONDS = 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenStatus(str, Enum):
    """State of the stored credential."""

    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"
    INVALID = "invalid"


class OAuthToken(BaseModel):
    """OAuth2 access/refresh token pair with its expiry.

    Attributes:
        access_token: Bearer token sent to Google APIs.
        refresh_token: Long-lived token used to obtain new access tokens.
        expires_at: Timezone-aware expiry of the access token.
        scopes: Granted OAuth scopes.
        token_type: Token type, always "Bearer" for Google.
    """

    access_token: str
    refresh_token: str | None = None
    expires_at: datetime
    scopes: list[str] = Field(default_factory=list)
    token_type: str = "Bearer"

    def expires_in(self) -> float:
        """Seconds until the access token expires (negative once expired)."""
        return (self.expires_at - _utcnow()).total_seconds()

    def is_expired(self, buffer_seconds: int = REFRESH_BUFFER_SECONDS) -> bool:
        """Check whether the token is expired or expires within the buffer.

        Args:
            buffer_seconds: Treat the token as expired this many seconds early.

        Returns:
            True if the token should be refreshed before use.
        """
        return _utcnow() + timedelta(seconds=buffer_seconds) >= self.expires_at


class TokenMetadata(BaseModel):
    """Bookkeeping stored next to a token."""

    service_name: str
    provider: str = "google"
    created_at: datetime = Field(default_factory=_utcnow)
    last_refreshed: datetime | None = None


class StoredToken(BaseModel):
    """Versioned envelope persisted in the token store."""

    version: int = 1
    metadata: TokenMetadata
    token: OAuthToken
