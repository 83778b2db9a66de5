"""Docs endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from gdrive_gateway.errors import ValidationError
from gdrive_gateway.gateways.docs import DocsGateway
from gdrive_gateway.server.dependencies import get_docs_gateway

router = APIRouter(prefix="/api/docs", tags=["docs"])

DEFAULT_TITLE = "Untitled Document"


class CreateDocumentBody(BaseModel):
    title: str | None = None


class AppendTextBody(BaseModel):
    text: str | None = None


class ReplaceTextBody(BaseModel):
    search: str | None = None
    replacement: str | None = None


@router.post("/create")
async def create_document(
    body: CreateDocumentBody,
    docs: DocsGateway = Depends(get_docs_gateway),
) -> dict[str, Any]:
    """Create a new document."""
    document = await docs.create_document(body.title or DEFAULT_TITLE)
    return {
        "documentId": document.document_id,
        "title": document.title,
        "message": "Document created successfully",
    }


@router.get("/{document_id}")
async def get_document(
    document_id: str,
    docs: DocsGateway = Depends(get_docs_gateway),
) -> dict[str, Any]:
    """Return the document's metadata and extracted plain text."""
    document = await docs.get_document(document_id)
    return {
        "documentId": document.document_id,
        "title": document.title,
        "plainText": document.plain_text,
        "revisionId": document.revision_id,
    }


@router.post("/{document_id}/append")
async def append_text(
    document_id: str,
    body: AppendTextBody,
    docs: DocsGateway = Depends(get_docs_gateway),
) -> dict[str, Any]:
    """Append a paragraph of text to the end of the document."""
    if not body.text or not body.text.strip():
        raise ValidationError("text field is required")

    replies = await docs.append_text(document_id, body.text)
    return {
        "documentId": document_id,
        "message": "Text appended successfully",
        "replies": replies,
    }


@router.put("/{document_id}/replace")
async def replace_text(
    document_id: str,
    body: ReplaceTextBody,
    docs: DocsGateway = Depends(get_docs_gateway),
) -> dict[str, Any]:
    """Replace all occurrences of a string, ignoring case."""
    if not body.search or body.replacement is None:
        raise ValidationError("search and replacement fields are required")

    await docs.replace_text(document_id, body.search, body.replacement)
    return {"documentId": document_id, "message": "Text replaced successfully"}
