"""Unit tests for the Sheets gateway."""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from gdrive_gateway.gateways.client import SHEETS_API_BASE, GoogleApiClient
from gdrive_gateway.gateways.sheets import SheetsGateway


@pytest.fixture
def sheets(api_client: GoogleApiClient) -> SheetsGateway:
    return SheetsGateway(api_client)


VALUES_URL = f"{SHEETS_API_BASE}/spreadsheets/sheet1/values"


@pytest.mark.unit
class TestSpreadsheetMetadata:
    """Tests for get_spreadsheet()."""

    @pytest.mark.asyncio
    async def test_should_list_sheets(
        self, sheets: SheetsGateway, mock_http_client: MagicMock, mock_response: Callable
    ) -> None:
        mock_http_client.request.return_value = mock_response(
            {
                "spreadsheetId": "sheet1",
                "properties": {"title": "Budget"},
                "sheets": [
                    {"properties": {"sheetId": 0, "title": "Sheet1", "index": 0}},
                    {"properties": {"sheetId": 77, "title": "Q2", "index": 1}},
                ],
            }
        )

        info = await sheets.get_spreadsheet("sheet1")

        assert info.title == "Budget"
        assert [(s.sheet_id, s.title, s.index) for s in info.sheets] == [
            (0, "Sheet1", 0),
            (77, "Q2", 1),
        ]
        assert info.model_dump(by_alias=True)["spreadsheetId"] == "sheet1"


@pytest.mark.unit
class TestValues:
    """Tests for reading and writing value ranges."""

    @pytest.mark.asyncio
    async def test_should_read_jagged_rows(
        self, sheets: SheetsGateway, mock_http_client: MagicMock, mock_response: Callable
    ) -> None:
        mock_http_client.request.return_value = mock_response(
            {"range": "Sheet1!A1:C3", "values": [["a", "b", "c"], ["d"]]}
        )

        value_range = await sheets.read_values("sheet1", "Sheet1!A1:C3")

        assert mock_http_client.request.call_args.kwargs["url"] == f"{VALUES_URL}/Sheet1!A1:C3"
        assert value_range.values == [["a", "b", "c"], ["d"]]
        assert value_range.row_count == 2

    @pytest.mark.asyncio
    async def test_should_return_no_rows_for_empty_range(
        self, sheets: SheetsGateway, mock_http_client: MagicMock, mock_response: Callable
    ) -> None:
        mock_http_client.request.return_value = mock_response({"range": "Sheet1!A1:Z1000"})

        value_range = await sheets.read_values("sheet1", "Sheet1")

        assert value_range.values == []
        assert value_range.row_count == 0

    @pytest.mark.asyncio
    async def test_should_encode_sheet_names_with_spaces(
        self, sheets: SheetsGateway, mock_http_client: MagicMock, mock_response: Callable
    ) -> None:
        mock_http_client.request.return_value = mock_response({"range": "x"})

        await sheets.read_values("sheet1", "My Sheet!A1:B2")

        assert mock_http_client.request.call_args.kwargs["url"] == f"{VALUES_URL}/My%20Sheet!A1:B2"

    @pytest.mark.asyncio
    async def test_should_write_as_user_entered(
        self, sheets: SheetsGateway, mock_http_client: MagicMock, mock_response: Callable
    ) -> None:
        mock_http_client.request.return_value = mock_response(
            {
                "updatedRange": "Sheet1!A1:B2",
                "updatedRows": 2,
                "updatedColumns": 2,
                "updatedCells": 4,
            }
        )

        result = await sheets.write_values("sheet1", "Sheet1!A1:B2", [[1, "=A1*2"], ["x", "y"]])

        kwargs = mock_http_client.request.call_args.kwargs
        assert kwargs["method"] == "PUT"
        assert kwargs["params"] == {"valueInputOption": "USER_ENTERED"}
        assert kwargs["json"] == {"range": "Sheet1!A1:B2", "values": [[1, "=A1*2"], ["x", "y"]]}
        assert result.updated_cells == 4
        assert result.updated_columns == 2

    @pytest.mark.asyncio
    async def test_should_append_by_inserting_rows(
        self, sheets: SheetsGateway, mock_http_client: MagicMock, mock_response: Callable
    ) -> None:
        mock_http_client.request.return_value = mock_response(
            {
                "spreadsheetId": "sheet1",
                "tableRange": "Sheet1!A1:B3",
                "updates": {"updatedRange": "Sheet1!A4:B4", "updatedRows": 1, "updatedCells": 2},
            }
        )

        result = await sheets.append_values("sheet1", "Sheet1!A:B", [["new", "row"]])

        kwargs = mock_http_client.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{VALUES_URL}/Sheet1!A:B:append"
        assert kwargs["params"] == {
            "valueInputOption": "USER_ENTERED",
            "insertDataOption": "INSERT_ROWS",
        }
        assert result.table_range == "Sheet1!A1:B3"
        assert result.updated_range == "Sheet1!A4:B4"
        assert result.updated_rows == 1

    @pytest.mark.asyncio
    async def test_should_clear_range(
        self, sheets: SheetsGateway, mock_http_client: MagicMock, mock_response: Callable
    ) -> None:
        mock_http_client.request.return_value = mock_response(
            {"spreadsheetId": "sheet1", "clearedRange": "Sheet1!A1:B2"}
        )

        cleared = await sheets.clear_values("sheet1", "Sheet1!A1:B2")

        kwargs = mock_http_client.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{VALUES_URL}/Sheet1!A1:B2:clear"
        assert cleared == "Sheet1!A1:B2"
