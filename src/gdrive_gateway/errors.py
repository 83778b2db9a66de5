"""Error kinds raised by the credential manager and the Google gateways.

Every error carries an ``ErrorKind`` and the HTTP status code the REST layer
answers with, so the boundary can map failures without inspecting messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a gateway failure."""

    CONFIGURATION = "configuration"
    UNAUTHENTICATED = "unauthenticated"
    TOKEN_EXCHANGE = "token_exchange"
    REMOTE_API = "remote_api"
    VALIDATION = "validation"


class GatewayError(Exception):
    """Base class for all gdrive-gateway errors."""

    kind: ErrorKind = ErrorKind.REMOTE_API
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(GatewayError):
    """The OAuth client-secret file is missing, unreadable, or malformed."""

    kind = ErrorKind.CONFIGURATION
    status_code = 500


class Unauthenticated(GatewayError):
    """No usable credential is available."""

    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401

    def __init__(
        self, message: str = "Not authenticated. Please complete OAuth2 flow first."
    ) -> None:
        super().__init__(message)


class TokenRefreshError(Unauthenticated):
    """A stored credential could not be refreshed."""


class TokenExchangeError(GatewayError):
    """An authorization code could not be exchanged for tokens."""

    kind = ErrorKind.TOKEN_EXCHANGE
    status_code = 500


class RemoteApiError(GatewayError):
    """A Google API call failed.

    Attributes:
        upstream_status: HTTP status returned by Google, or None when the
            request never produced a response.
    """

    kind = ErrorKind.REMOTE_API
    status_code = 500

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status

    def __str__(self) -> str:
        if self.upstream_status is None:
            return self.message
        return f"{self.upstream_status}: {self.message}"


class ValidationError(GatewayError):
    """A required request field is missing or malformed."""

    kind = ErrorKind.VALIDATION
    status_code = 400
