"""FastAPI application factory for the Drive/Docs/Sheets gateway."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gdrive_gateway.__version__ import __version__
from gdrive_gateway.auth.credential_manager import CredentialManager
from gdrive_gateway.config import Settings, load_settings
from gdrive_gateway.gateways import DocsGateway, DriveGateway, GoogleApiClient, SheetsGateway
from gdrive_gateway.server.handlers import register_exception_handlers
from gdrive_gateway.server.routes import auth, docs, drive, sheets

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(f"gdrive-gateway {__version__} starting")
    yield
    api_client: GoogleApiClient | None = getattr(app.state, "api_client", None)
    if api_client is not None:
        await api_client.close()
    logger.info("gdrive-gateway stopped")


def create_app(
    settings: Settings | None = None,
    credential_manager: CredentialManager | None = None,
    drive_gateway: DriveGateway | None = None,
    docs_gateway: DocsGateway | None = None,
    sheets_gateway: SheetsGateway | None = None,
) -> FastAPI:
    """Build the application and wire its collaborators.

    Anything not passed in is constructed from settings, so tests can swap
    individual gateways for mocks.

    Args:
        settings: Loaded settings. Read from YAML/environment if omitted.
        credential_manager: OAuth credential cache and token store.
        drive_gateway: Drive gateway.
        docs_gateway: Docs gateway.
        sheets_gateway: Sheets gateway.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or load_settings()
    credential_manager = credential_manager or CredentialManager.from_settings(settings)

    api_client = GoogleApiClient(credential_manager)

    app = FastAPI(title="gdrive-gateway", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.credential_manager = credential_manager
    app.state.api_client = api_client
    app.state.drive = drive_gateway or DriveGateway(api_client, settings.root_folder_id)
    app.state.docs = docs_gateway or DocsGateway(api_client)
    app.state.sheets = sheets_gateway or SheetsGateway(api_client)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
        max_age=3600,
    )

    app.include_router(auth.router)
    app.include_router(drive.router)
    app.include_router(docs.router)
    app.include_router(sheets.router)

    return app
