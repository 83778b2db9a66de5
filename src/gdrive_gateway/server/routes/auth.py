"""OAuth2 endpoints: consent URL, callback, status and logout."""

import logging
from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from gdrive_gateway.auth.credential_manager import CredentialManager
from gdrive_gateway.config import Settings
from gdrive_gateway.errors import GatewayError
from gdrive_gateway.server.dependencies import get_credential_manager, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _frontend_redirect(frontend_url: str, **params: str) -> RedirectResponse:
    separator = "&" if "?" in frontend_url else "?"
    return RedirectResponse(f"{frontend_url}{separator}{urlencode(params)}", status_code=302)


@router.get("/url")
async def get_auth_url(
    manager: CredentialManager = Depends(get_credential_manager),
) -> dict[str, Any]:
    """Return the Google consent URL the browser should be sent to."""
    return {"authUrl": manager.authorization_url()}


@router.get("/callback")
async def handle_callback(
    code: str | None = None,
    error: str | None = None,
    manager: CredentialManager = Depends(get_credential_manager),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """Receive the authorization code, store tokens, and bounce back to the frontend."""
    if error:
        logger.warning(f"OAuth2 error: {error}")
        return _frontend_redirect(settings.frontend_url, auth="error", reason=error)

    if not code or not code.strip():
        return _frontend_redirect(settings.frontend_url, auth="error", reason="no_code")

    try:
        await manager.exchange_code(code)
    except GatewayError as e:
        logger.error(f"Token exchange failed: {e}")
        return _frontend_redirect(
            settings.frontend_url, auth="error", reason="token_exchange_failed"
        )

    logger.info("OAuth2 tokens saved successfully.")
    return _frontend_redirect(settings.frontend_url, auth="success")


@router.get("/status")
async def get_status(
    manager: CredentialManager = Depends(get_credential_manager),
) -> dict[str, Any]:
    """Report whether a usable credential exists."""
    authenticated = await manager.is_authenticated()
    return {
        "authenticated": authenticated,
        "message": "Authenticated with Google" if authenticated else "Not authenticated",
    }


@router.post("/logout")
async def logout(
    manager: CredentialManager = Depends(get_credential_manager),
) -> dict[str, Any]:
    """Delete stored tokens."""
    manager.logout()
    return {"message": "Logged out successfully"}
