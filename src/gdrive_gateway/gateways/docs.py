"""Google Docs gateway: read text, create, append and find/replace."""

import logging
from typing import Any

from gdrive_gateway.gateways.client import DOCS_API_BASE, GoogleApiClient
from gdrive_gateway.models import DocumentContent

logger = logging.getLogger(__name__)


def extract_plain_text(document: dict[str, Any]) -> str:
    """Concatenate every paragraph text run of a document body, in order.

    Tables, section breaks and other structural elements are skipped.

    Args:
        document: A Docs API document resource.

    Returns:
        Plain text content, or "" when the body has no content.
    """
    content = (document.get("body") or {}).get("content") or []

    text_parts = []
    for element in content:
        paragraph = element.get("paragraph")
        if not paragraph:
            continue
        for para_element in paragraph.get("elements", []):
            text_run = para_element.get("textRun")
            if text_run and text_run.get("content") is not None:
                text_parts.append(text_run["content"])

    return "".join(text_parts)


def find_append_index(document: dict[str, Any]) -> int:
    """Return the index just before the body's trailing newline.

    A document always ends with a newline that cannot be inserted after,
    so new text goes one position before the last element's end index.
    An empty body yields 1.
    """
    content = (document.get("body") or {}).get("content") or []
    if not content:
        return 1

    end_index = content[-1].get("endIndex", 1)
    return max(1, end_index - 1)


class DocsGateway:
    """Pass-through to the Docs v1 API."""

    def __init__(self, api: GoogleApiClient) -> None:
        self.api = api

    async def _batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        return await self.api.request(
            "POST",
            f"{DOCS_API_BASE}/documents/{document_id}:batchUpdate",
            json_data={"requests": requests},
        )

    async def get_document(self, document_id: str) -> DocumentContent:
        """Fetch a document and extract its plain text."""
        document = await self.api.request("GET", f"{DOCS_API_BASE}/documents/{document_id}")
        return DocumentContent(
            document_id=document.get("documentId", document_id),
            title=document.get("title"),
            revision_id=document.get("revisionId") or "",
            plain_text=extract_plain_text(document),
        )

    async def create_document(self, title: str) -> DocumentContent:
        """Create an empty document with the given title."""
        created = await self.api.request(
            "POST", f"{DOCS_API_BASE}/documents", json_data={"title": title}
        )
        logger.info(f"Created document: {created.get('title')} ({created.get('documentId')})")
        return DocumentContent(
            document_id=created.get("documentId"),
            title=created.get("title", title),
            revision_id=created.get("revisionId") or "",
        )

    async def append_text(self, document_id: str, text: str) -> int:
        """Append text as a new final paragraph.

        Args:
            document_id: Target document.
            text: Text to append; it is preceded by a newline.

        Returns:
            Number of replies in the batch update response.
        """
        document = await self.api.request(
            "GET",
            f"{DOCS_API_BASE}/documents/{document_id}",
            params={"fields": "body.content"},
        )
        insert_index = find_append_index(document)

        response = await self._batch_update(
            document_id,
            [
                {
                    "insertText": {
                        "location": {"index": insert_index},
                        "text": "\n" + text,
                    }
                }
            ],
        )

        logger.info(f"Appended text to document {document_id}")
        return len(response.get("replies", []))

    async def replace_text(self, document_id: str, search: str, replacement: str) -> int:
        """Replace every case-insensitive occurrence of `search`.

        Returns:
            Number of occurrences changed, as reported by the API.
        """
        response = await self._batch_update(
            document_id,
            [
                {
                    "replaceAllText": {
                        "containsText": {"text": search, "matchCase": False},
                        "replaceText": replacement,
                    }
                }
            ],
        )

        replies = response.get("replies") or [{}]
        changed = (replies[0].get("replaceAllText") or {}).get("occurrencesChanged", 0)
        logger.info(f"Replaced {changed} occurrence(s) in document {document_id}")
        return changed
