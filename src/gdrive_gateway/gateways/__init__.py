"""Gateways over the Google Drive, Docs, and Sheets REST APIs."""

from gdrive_gateway.gateways.client import GoogleApiClient
from gdrive_gateway.gateways.docs import DocsGateway, extract_plain_text, find_append_index
from gdrive_gateway.gateways.drive import DriveGateway, build_list_query
from gdrive_gateway.gateways.sheets import SheetsGateway

__all__ = [
    "GoogleApiClient",
    "DriveGateway",
    "DocsGateway",
    "SheetsGateway",
    "build_list_query",
    "extract_plain_text",
    "find_append_index",
]
