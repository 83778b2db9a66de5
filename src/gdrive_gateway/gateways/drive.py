"""Google Drive gateway: list, inspect, download, upload, trash and delete files."""

import json
import logging
import secrets
from typing import Any

from gdrive_gateway.gateways.client import (
    DRIVE_API_BASE,
    DRIVE_UPLOAD_BASE,
    GoogleApiClient,
    decode_json,
)
from gdrive_gateway.models import FileListing, FileRecord

logger = logging.getLogger(__name__)

FILE_FIELDS = (
    "id,name,mimeType,size,createdTime,modifiedTime,"
    "webViewLink,webContentLink,parents,trashed"
)
LIST_ORDER = "folder,modifiedTime desc"
DEFAULT_PAGE_SIZE = 100


def escape_query_value(value: str) -> str:
    """Escape single quotes for use inside a Drive query string literal."""
    return value.replace("'", "\\'")


def build_list_query(folder_id: str | None = None, name_filter: str | None = None) -> str:
    """Build the Drive `q` filter for a listing.

    Args:
        folder_id: Restrict to direct children of this folder.
        name_filter: Case-sensitive substring the name must contain.

    Returns:
        Filter string, always excluding trashed files.
    """
    query = "trashed = false"
    if folder_id:
        query += f" and '{folder_id}' in parents"
    if name_filter and name_filter.strip():
        query += f" and name contains '{escape_query_value(name_filter)}'"
    return query


class DriveGateway:
    """Pass-through to the Drive v3 API scoped to an optional root folder.

    Attributes:
        api: Authenticated Google API client.
        root_folder_id: Default folder for listing and upload, or None.
    """

    def __init__(self, api: GoogleApiClient, root_folder_id: str | None = None) -> None:
        self.api = api
        self.root_folder_id = (root_folder_id or "").strip() or None

    def resolve_folder(self, folder_id: str | None) -> str | None:
        """Explicit folder, else the configured root, else no restriction."""
        if folder_id and folder_id.strip():
            return folder_id.strip()
        return self.root_folder_id

    async def list_files(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_token: str | None = None,
        name_filter: str | None = None,
        folder_id: str | None = None,
    ) -> FileListing:
        """List non-trashed files, folders first then most recently modified.

        Args:
            page_size: Maximum number of files to return.
            page_token: Token from a previous page.
            name_filter: Substring the file name must contain.
            folder_id: Folder to list. Defaults to the root folder.

        Returns:
            The page of files and the token for the next page, if any.
        """
        target_folder = self.resolve_folder(folder_id)

        params: dict[str, Any] = {
            "q": build_list_query(target_folder, name_filter),
            "pageSize": page_size,
            "fields": f"nextPageToken,files({FILE_FIELDS})",
            "orderBy": LIST_ORDER,
        }
        if page_token and page_token.strip():
            params["pageToken"] = page_token

        response = await self.api.request("GET", f"{DRIVE_API_BASE}/files", params=params)

        files = [FileRecord.from_api(item) for item in response.get("files", [])]
        return FileListing(files=files, next_page_token=response.get("nextPageToken"))

    async def get_file(self, file_id: str) -> FileRecord:
        """Fetch metadata for a single file."""
        response = await self.api.request(
            "GET", f"{DRIVE_API_BASE}/files/{file_id}", params={"fields": FILE_FIELDS}
        )
        return FileRecord.from_api(response)

    async def download_file(self, file_id: str) -> bytes:
        """Download a file's full content into memory."""
        response = await self.api.request_raw(
            "GET", f"{DRIVE_API_BASE}/files/{file_id}", params={"alt": "media"}
        )
        return response.content

    async def upload_file(
        self,
        content: bytes,
        original_name: str,
        content_type: str | None = None,
        folder_id: str | None = None,
    ) -> FileRecord:
        """Upload a file with a multipart request.

        Args:
            content: File bytes.
            original_name: Name to give the file in Drive.
            content_type: MIME type of the content.
            folder_id: Destination folder. Defaults to the root folder.

        Returns:
            Metadata of the created file.
        """
        mime_type = content_type or "application/octet-stream"
        target_folder = self.resolve_folder(folder_id)

        metadata: dict[str, Any] = {"name": original_name}
        if target_folder:
            metadata["parents"] = [target_folder]

        boundary = f"gdrive_gateway_{secrets.token_hex(16)}"
        body = b"\r\n".join(
            [
                f"--{boundary}".encode(),
                b"Content-Type: application/json; charset=UTF-8",
                b"",
                json.dumps(metadata).encode("utf-8"),
                f"--{boundary}".encode(),
                f"Content-Type: {mime_type}".encode(),
                b"",
                content,
                f"--{boundary}--".encode(),
            ]
        )

        response = await self.api.request_raw(
            "POST",
            f"{DRIVE_UPLOAD_BASE}/files",
            params={"uploadType": "multipart", "fields": FILE_FIELDS},
            content=body,
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
        )
        uploaded = FileRecord.from_api(decode_json(response))

        logger.info(f"Uploaded file: {uploaded.name} ({uploaded.id})")
        return uploaded

    async def trash_file(self, file_id: str) -> None:
        """Move a file to the trash (soft delete)."""
        await self.api.request(
            "PATCH", f"{DRIVE_API_BASE}/files/{file_id}", json_data={"trashed": True}
        )
        logger.info(f"File {file_id} moved to trash.")

    async def delete_file_permanently(self, file_id: str) -> None:
        """Permanently delete a file, bypassing the trash."""
        await self.api.request_raw("DELETE", f"{DRIVE_API_BASE}/files/{file_id}")
        logger.info(f"File {file_id} permanently deleted.")
