"""Sheets endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from gdrive_gateway.errors import ValidationError
from gdrive_gateway.gateways.sheets import SheetsGateway
from gdrive_gateway.models import SpreadsheetInfo
from gdrive_gateway.server.dependencies import get_sheets_gateway

router = APIRouter(prefix="/api/sheets", tags=["sheets"])

DEFAULT_RANGE = "Sheet1"


class ValuesBody(BaseModel):
    range: str | None = None
    values: list[list[Any]] | None = None

    def require(self) -> tuple[str, list[list[Any]]]:
        if not self.range or self.values is None:
            raise ValidationError("range and values are required")
        return self.range, self.values


@router.get("/{spreadsheet_id}")
async def get_spreadsheet(
    spreadsheet_id: str,
    sheets: SheetsGateway = Depends(get_sheets_gateway),
) -> SpreadsheetInfo:
    """Return the spreadsheet title and its sheets."""
    return await sheets.get_spreadsheet(spreadsheet_id)


@router.get("/{spreadsheet_id}/values")
async def get_values(
    spreadsheet_id: str,
    a1_range: str = Query(DEFAULT_RANGE, alias="range"),
    sheets: SheetsGateway = Depends(get_sheets_gateway),
) -> dict[str, Any]:
    """Read cell values from an A1 range."""
    value_range = await sheets.read_values(spreadsheet_id, a1_range)
    return {
        "range": value_range.range,
        "values": value_range.values,
        "rowCount": value_range.row_count,
    }


@router.put("/{spreadsheet_id}/values")
async def write_values(
    spreadsheet_id: str,
    body: ValuesBody,
    sheets: SheetsGateway = Depends(get_sheets_gateway),
) -> dict[str, Any]:
    """Overwrite a range; values are parsed as user input."""
    a1_range, values = body.require()
    result = await sheets.write_values(spreadsheet_id, a1_range, values)
    return {
        "updatedRange": result.updated_range,
        "updatedRows": result.updated_rows,
        "updatedColumns": result.updated_columns,
        "updatedCells": result.updated_cells,
    }


@router.post("/{spreadsheet_id}/values")
async def append_values(
    spreadsheet_id: str,
    body: ValuesBody,
    sheets: SheetsGateway = Depends(get_sheets_gateway),
) -> dict[str, Any]:
    """Append rows after the last data row of the range."""
    a1_range, values = body.require()
    result = await sheets.append_values(spreadsheet_id, a1_range, values)
    return {
        "spreadsheetId": result.spreadsheet_id,
        "tableRange": result.table_range,
        "updates": {
            "updatedRange": result.updated_range,
            "updatedRows": result.updated_rows,
            "updatedCells": result.updated_cells,
        },
    }


@router.delete("/{spreadsheet_id}/values")
async def clear_values(
    spreadsheet_id: str,
    a1_range: str = Query(..., alias="range"),
    sheets: SheetsGateway = Depends(get_sheets_gateway),
) -> dict[str, Any]:
    """Clear the values (not formatting) of a range."""
    cleared = await sheets.clear_values(spreadsheet_id, a1_range)
    return {"clearedRange": cleared}
