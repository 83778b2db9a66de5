"""OAuth authentication for the Drive/Docs/Sheets gateway.

Quick Start:
    ```python
    from gdrive_gateway.auth import CredentialManager
    from gdrive_gateway.config import load_settings

    manager = CredentialManager.from_settings(load_settings())

    # Send the user here, then exchange the code Google redirects back with
    print(manager.authorization_url())
    await manager.exchange_code(code)

    # Live credential for API calls
    token = await manager.load_credential()
    ```
"""

from gdrive_gateway.auth.credential_manager import (
    GOOGLE_SCOPES,
    USER_ID,
    CredentialManager,
    CredentialSource,
)
from gdrive_gateway.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)
from gdrive_gateway.auth.token_storage import TokenStorage

__all__ = [
    "CredentialManager",
    "CredentialSource",
    "TokenStorage",
    "OAuthToken",
    "StoredToken",
    "TokenMetadata",
    "TokenStatus",
    "GOOGLE_SCOPES",
    "USER_ID",
]
