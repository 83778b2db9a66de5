"""JSON token store for the gateway's OAuth credential.

Tokens are kept in a single JSON file (default: ./credentials/tokens.json)
mapping a user identifier to a versioned StoredToken envelope. There is no
encryption and no file locking; the last writer wins.
"""

import json
import logging
from pathlib import Path

from gdrive_gateway.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)
from gdrive_gateway.config import DEFAULT_TOKENS_FILE

logger = logging.getLogger(__name__)


class TokenStorage:
    """Simple JSON-based storage for OAuth tokens.

    Attributes:
        token_path: Path to the tokens.json file.

    Example:
        ```python
        storage = TokenStorage(Path("credentials/tokens.json"))

        token = OAuthToken(
            access_token="abc123",
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )
        storage.store("user", token, TokenMetadata(service_name="user"))

        stored = storage.retrieve("user")
        ```
    """

    def __init__(self, token_path: Path | None = None) -> None:
        """Initialize token storage.

        Args:
            token_path: Path for tokens.json. Defaults to ./credentials/tokens.json.
        """
        self.token_path = Path(token_path) if token_path else Path(DEFAULT_TOKENS_FILE)
        self._ensure_credentials_dir()

    def _ensure_credentials_dir(self) -> None:
        """Create the credentials directory owner-only if it does not exist yet.

        An existing directory keeps its permissions; only the token file itself
        is restricted.
        """
        creds_dir = self.token_path.parent
        if not creds_dir.exists():
            creds_dir.mkdir(parents=True, mode=0o700)

    def _load_tokens(self) -> dict[str, dict]:
        """Load all tokens from the JSON file.

        Returns:
            Dictionary mapping user identifiers to token data.
        """
        if not self.token_path.exists():
            return {}

        try:
            with open(self.token_path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read token store {self.token_path}: {e}")
            return {}

        return data if isinstance(data, dict) else {}

    def _save_tokens(self, tokens: dict[str, dict]) -> None:
        """Write all tokens to the JSON file with owner-only permissions."""
        self._ensure_credentials_dir()

        with open(self.token_path, "w") as f:
            json.dump(tokens, f, indent=2, default=str)

        self.token_path.chmod(0o600)

    def store(self, key: str, token: OAuthToken, metadata: TokenMetadata) -> None:
        """Store (or replace) the token for a user.

        Args:
            key: User identifier.
            token: OAuth token data to store.
            metadata: Token metadata.
        """
        stored_token = StoredToken(version=1, metadata=metadata, token=token)

        tokens = self._load_tokens()
        tokens[key] = json.loads(stored_token.model_dump_json())
        self._save_tokens(tokens)

    def retrieve(self, key: str) -> StoredToken | None:
        """Retrieve a stored token.

        Args:
            key: User identifier.

        Returns:
            StoredToken if present and well-formed, None otherwise.
        """
        tokens = self._load_tokens()

        if key not in tokens:
            return None

        try:
            return StoredToken.model_validate(tokens[key])
        except (ValueError, KeyError):
            logger.warning(f"Stored token for '{key}' is corrupted")
            return None

    def delete(self, key: str) -> bool:
        """Delete a stored token, removing the file once it is empty.

        Args:
            key: User identifier.

        Returns:
            True if a token was deleted, False if none existed.
        """
        tokens = self._load_tokens()

        if key not in tokens:
            return False

        del tokens[key]
        if tokens:
            self._save_tokens(tokens)
        else:
            self.clear_all()
        return True

    def list_keys(self) -> list[str]:
        """List all user identifiers with stored tokens."""
        return sorted(self._load_tokens().keys())

    def get_status(self, key: str) -> TokenStatus:
        """Get the status of a stored token.

        Args:
            key: User identifier.

        Returns:
            TokenStatus indicating the token's current state.
        """
        stored = self.retrieve(key)

        if stored is None:
            if key in self._load_tokens():
                return TokenStatus.INVALID
            return TokenStatus.MISSING

        if stored.token.is_expired():
            return TokenStatus.EXPIRED

        return TokenStatus.VALID

    def clear_all(self) -> None:
        """Delete all stored tokens by removing the token file."""
        if self.token_path.exists():
            self.token_path.unlink()
