"""Flattened JSON projections of Drive, Docs, and Sheets API payloads.

All models serialize with camelCase keys to match the REST surface.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileRecord(_ApiModel):
    """Metadata for a single Drive file."""

    id: str | None = None
    name: str | None = None
    mime_type: str | None = None
    size: str = "0"
    created_time: str | None = None
    modified_time: str | None = None
    web_view_link: str | None = None
    web_content_link: str | None = None
    parents: str | None = None
    trashed: bool = False

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "FileRecord":
        """Build a record from a Drive v3 file resource."""
        size = item.get("size")
        parents = item.get("parents")
        return cls(
            id=item.get("id"),
            name=item.get("name"),
            mime_type=item.get("mimeType"),
            size=str(size) if size is not None else "0",
            created_time=item.get("createdTime"),
            modified_time=item.get("modifiedTime"),
            web_view_link=item.get("webViewLink"),
            web_content_link=item.get("webContentLink"),
            parents=",".join(parents) if parents else None,
            trashed=bool(item.get("trashed", False)),
        )


class FileListing(_ApiModel):
    """One page of a Drive listing."""

    files: list[FileRecord] = Field(default_factory=list)
    next_page_token: str | None = None


class DocumentContent(_ApiModel):
    """A document's identity plus its extracted plain text."""

    document_id: str | None = None
    title: str | None = None
    revision_id: str = ""
    plain_text: str = ""


class SheetInfo(_ApiModel):
    """One tab of a spreadsheet."""

    sheet_id: int | None = None
    title: str = ""
    index: int = 0


class SpreadsheetInfo(_ApiModel):
    """Spreadsheet title and its tabs."""

    spreadsheet_id: str | None = None
    title: str = ""
    sheets: list[SheetInfo] = Field(default_factory=list)


class ValueRange(_ApiModel):
    """Cell values for an A1 range; rows may be jagged."""

    range: str
    values: list[list[Any]] = Field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.values)


class UpdateValuesResult(_ApiModel):
    """Outcome of writing a range."""

    updated_range: str | None = None
    updated_rows: int = 0
    updated_columns: int = 0
    updated_cells: int = 0


class AppendValuesResult(_ApiModel):
    """Outcome of appending rows below existing data."""

    spreadsheet_id: str | None = None
    table_range: str = ""
    updated_range: str | None = None
    updated_rows: int = 0
    updated_cells: int = 0
