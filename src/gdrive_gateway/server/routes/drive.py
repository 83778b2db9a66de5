"""Drive endpoints."""

import logging
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response

from gdrive_gateway.errors import GatewayError
from gdrive_gateway.gateways.drive import DEFAULT_PAGE_SIZE, DriveGateway
from gdrive_gateway.models import FileRecord
from gdrive_gateway.server.dependencies import get_drive_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/drive", tags=["drive"])


def content_disposition(filename: str) -> str:
    """Build an attachment header that survives non-ASCII file names."""
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    header = f'attachment; filename="{ascii_name}"'
    if ascii_name != filename:
        header += f"; filename*=UTF-8''{quote(filename)}"
    return header


@router.get("/root")
async def get_root_folder(drive: DriveGateway = Depends(get_drive_gateway)) -> dict[str, Any]:
    """Return the configured root folder and, when reachable, its metadata."""
    root_id = drive.root_folder_id
    if not root_id:
        return {"rootFolderId": None, "message": "No root folder configured"}

    try:
        folder = await drive.get_file(root_id)
    except GatewayError as e:
        logger.warning(f"Could not fetch root folder {root_id}: {e}")
        return {"rootFolderId": root_id}

    return {"rootFolderId": root_id, "folder": folder}


@router.get("/files")
async def list_files(
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize", ge=1, le=1000),
    page_token: str | None = Query(None, alias="pageToken"),
    query: str | None = None,
    folder_id: str | None = Query(None, alias="folderId"),
    drive: DriveGateway = Depends(get_drive_gateway),
) -> dict[str, Any]:
    """List files in a folder, defaulting to the root folder."""
    listing = await drive.list_files(page_size, page_token, query, folder_id)
    return {
        "files": listing.files,
        "count": len(listing.files),
        "folderId": drive.resolve_folder(folder_id),
        "nextPageToken": listing.next_page_token,
    }


@router.get("/files/{file_id}")
async def get_file(file_id: str, drive: DriveGateway = Depends(get_drive_gateway)) -> FileRecord:
    """Return metadata for one file."""
    return await drive.get_file(file_id)


@router.get("/files/{file_id}/download")
async def download_file(file_id: str, drive: DriveGateway = Depends(get_drive_gateway)) -> Response:
    """Return the file's bytes as an attachment."""
    meta = await drive.get_file(file_id)
    content = await drive.download_file(file_id)
    return Response(
        content=content,
        media_type="application/octet-stream",
        headers={"Content-Disposition": content_disposition(meta.name or file_id)},
    )


@router.post("/upload")
async def upload_file(
    file: UploadFile = File(...),
    folder_id: str | None = Form(None, alias="folderId"),
    drive: DriveGateway = Depends(get_drive_gateway),
) -> FileRecord:
    """Upload a multipart file into a folder, defaulting to the root folder."""
    content = await file.read()
    return await drive.upload_file(
        content,
        file.filename or "untitled",
        file.content_type,
        folder_id,
    )


@router.delete("/delete/{file_id}")
async def delete_file(
    file_id: str,
    permanent: bool = False,
    drive: DriveGateway = Depends(get_drive_gateway),
) -> dict[str, Any]:
    """Trash a file, or delete it for good with ?permanent=true."""
    if permanent:
        await drive.delete_file_permanently(file_id)
    else:
        await drive.trash_file(file_id)

    return {
        "message": "File permanently deleted" if permanent else "File moved to trash",
        "fileId": file_id,
    }
