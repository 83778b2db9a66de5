"""FastAPI dependencies resolving the objects built by create_app()."""

from fastapi import Request

from gdrive_gateway.auth.credential_manager import CredentialManager
from gdrive_gateway.config import Settings
from gdrive_gateway.gateways.docs import DocsGateway
from gdrive_gateway.gateways.drive import DriveGateway
from gdrive_gateway.gateways.sheets import SheetsGateway


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_credential_manager(request: Request) -> CredentialManager:
    return request.app.state.credential_manager


def get_drive_gateway(request: Request) -> DriveGateway:
    return request.app.state.drive


def get_docs_gateway(request: Request) -> DocsGateway:
    return request.app.state.docs


def get_sheets_gateway(request: Request) -> SheetsGateway:
    return request.app.state.sheets
