"""Google Sheets gateway: metadata and value-range reads and writes."""

import logging
from typing import Any
from urllib.parse import quote

from gdrive_gateway.gateways.client import SHEETS_API_BASE, GoogleApiClient
from gdrive_gateway.models import (
    AppendValuesResult,
    SheetInfo,
    SpreadsheetInfo,
    UpdateValuesResult,
    ValueRange,
)

logger = logging.getLogger(__name__)

# Values are parsed as if typed into the UI: "1" becomes a number, "=A1" a formula
VALUE_INPUT_OPTION = "USER_ENTERED"


class SheetsGateway:
    """Pass-through to the Sheets v4 API."""

    def __init__(self, api: GoogleApiClient) -> None:
        self.api = api

    def _values_url(self, spreadsheet_id: str, a1_range: str, suffix: str = "") -> str:
        encoded_range = quote(a1_range, safe="!:")
        return f"{SHEETS_API_BASE}/spreadsheets/{spreadsheet_id}/values/{encoded_range}{suffix}"

    async def get_spreadsheet(self, spreadsheet_id: str) -> SpreadsheetInfo:
        """Fetch the spreadsheet title and its sheets."""
        response = await self.api.request(
            "GET",
            f"{SHEETS_API_BASE}/spreadsheets/{spreadsheet_id}",
            params={"fields": "spreadsheetId,properties,sheets.properties"},
        )

        sheets = []
        for sheet in response.get("sheets", []):
            props = sheet.get("properties", {})
            sheets.append(
                SheetInfo(
                    sheet_id=props.get("sheetId"),
                    title=props.get("title", ""),
                    index=props.get("index", 0),
                )
            )

        return SpreadsheetInfo(
            spreadsheet_id=response.get("spreadsheetId", spreadsheet_id),
            title=response.get("properties", {}).get("title", ""),
            sheets=sheets,
        )

    async def read_values(self, spreadsheet_id: str, a1_range: str) -> ValueRange:
        """Read the values of an A1 range."""
        response = await self.api.request("GET", self._values_url(spreadsheet_id, a1_range))
        value_range = ValueRange(
            range=response.get("range", a1_range),
            values=response.get("values", []),
        )
        logger.info(f"Read {value_range.row_count} rows from {a1_range}")
        return value_range

    async def write_values(
        self, spreadsheet_id: str, a1_range: str, values: list[list[Any]]
    ) -> UpdateValuesResult:
        """Overwrite the values of an A1 range."""
        response = await self.api.request(
            "PUT",
            self._values_url(spreadsheet_id, a1_range),
            params={"valueInputOption": VALUE_INPUT_OPTION},
            json_data={"range": a1_range, "values": values},
        )
        result = UpdateValuesResult(
            updated_range=response.get("updatedRange", a1_range),
            updated_rows=response.get("updatedRows", 0),
            updated_columns=response.get("updatedColumns", 0),
            updated_cells=response.get("updatedCells", 0),
        )
        logger.info(f"Updated {result.updated_cells} cells in {a1_range}")
        return result

    async def append_values(
        self, spreadsheet_id: str, a1_range: str, values: list[list[Any]]
    ) -> AppendValuesResult:
        """Insert rows after the last row with data in the range's table."""
        response = await self.api.request(
            "POST",
            self._values_url(spreadsheet_id, a1_range, ":append"),
            params={"valueInputOption": VALUE_INPUT_OPTION, "insertDataOption": "INSERT_ROWS"},
            json_data={"values": values},
        )
        updates = response.get("updates", {})
        logger.info(f"Appended rows to {a1_range}")
        return AppendValuesResult(
            spreadsheet_id=response.get("spreadsheetId", spreadsheet_id),
            table_range=response.get("tableRange") or "",
            updated_range=updates.get("updatedRange"),
            updated_rows=updates.get("updatedRows", 0),
            updated_cells=updates.get("updatedCells", 0),
        )

    async def clear_values(self, spreadsheet_id: str, a1_range: str) -> str:
        """Blank the values of a range, keeping formatting and validation.

        Returns:
            The range that was cleared.
        """
        response = await self.api.request(
            "POST", self._values_url(spreadsheet_id, a1_range, ":clear"), json_data={}
        )
        logger.info(f"Cleared range {a1_range}")
        return response.get("clearedRange") or a1_range
