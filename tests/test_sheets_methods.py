import pytest
from structlog.testing import capture_logs

from formbridge.adapters.sheets_methods import (
    FileCreateMethod,
    FileInfoMethod,
    FileListMethod,
    GetStructureMethod,
    RowsAppendMethod,
    RowsBulkUpdateMethod,
    RowsDeleteMethod,
    RowsGetMethod,
    RowsUpdateMethod,
)
from formbridge.adapters.sheets_methods.base import column_letter, quote_sheet_title, row_keys
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.errors import InvalidMethodRequest, QuerySyntaxError


def make_config(**form_data):
    base = {"spreadsheetId": "sid", "sheetTitle": "Sheet1"}
    base.update(form_data)
    return MethodConfig.from_form_data(base)


@pytest.mark.parametrize("index,letters", [(0, "A"), (25, "Z"), (26, "AA"), (701, "ZZ"), (702, "AAA")])
def test_column_letter(index, letters):
    assert column_letter(index) == letters


def test_sheet_titles_are_quoted():
    assert quote_sheet_title("Bob's sheet") == "'Bob''s sheet'"


def test_blank_and_repeated_headers_fall_back_to_column_letters():
    assert row_keys(["name", "", "name"], 4) == ["name", "B", "name_C", "D"]


def test_fetch_range_without_limit_reads_to_the_last_column(settings):
    method = RowsGetMethod(settings)
    config = make_config(tableHeaderIndex="3")

    assert method.cells_range(config) == "'Sheet1'!A3:ZZZ"
    request = method.build_execution_request(config)
    assert request.method == "GET"
    assert request.url == "https://sheets.test/v4/spreadsheets/sid/values/%27Sheet1%27%21A3%3AZZZ"


def test_fetch_range_with_offset_and_limit(settings):
    config = make_config(rowOffset="2", rowLimit="5")
    assert RowsGetMethod(settings).cells_range(config) == "'Sheet1'!1:8"


def test_fetched_rows_are_keyed_by_header(settings):
    body = {"values": [["name", "", "name"], ["Ada", "x", "y"], ["Bob"]]}
    rows = RowsGetMethod(settings).transform_execution_response(body, make_config())

    assert rows == [
        {"name": "Ada", "B": "x", "name_C": "y", "rowIndex": 0},
        {"name": "Bob", "B": "", "name_C": "", "rowIndex": 1},
    ]


def test_rows_without_header_use_column_letters(settings):
    body = {"values": [["a", "b"], ["c"]]}
    rows = RowsGetMethod(settings).transform_execution_response(body, make_config(firstRowIsHeader="false"))

    assert rows == [{"A": "a", "B": "b", "rowIndex": 0}, {"A": "c", "B": "", "rowIndex": 1}]


def test_offset_is_applied_to_row_index(settings):
    body = {"values": [["name"], ["a"], ["b"], ["c"]]}
    rows = RowsGetMethod(settings).transform_execution_response(body, make_config(rowOffset="1", rowLimit="1"))
    assert rows == [{"name": "b", "rowIndex": 1}]


def test_fetch_validation(settings):
    with pytest.raises(InvalidMethodRequest):
        RowsGetMethod(settings).validate_execution_request(make_config(sheetTitle=""))
    with pytest.raises(InvalidMethodRequest):
        RowsGetMethod(settings).validate_execution_request(make_config(tableHeaderIndex="0"))
    with pytest.raises(InvalidMethodRequest):
        RowsGetMethod(settings).validate_execution_request(make_config(rowLimit="0"))


def test_append_to_empty_sheet_writes_header_first(settings):
    config = make_config(rowObject='{"name": "Ada", "age": 36}')
    request = RowsAppendMethod(settings).build_execution_request(config, [])

    assert request.method == "POST"
    assert request.url.endswith("/values/%27Sheet1%27%21A1:append")
    assert request.params == {"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"}
    assert request.body["values"] == [["name", "age"], ["Ada", 36]]


def test_append_aligns_values_with_existing_header(settings):
    config = make_config(rowObject='{"age": 36, "name": "Ada"}')
    request = RowsAppendMethod(settings).build_execution_request(config, ["name", "email", "age"])
    assert request.body["values"] == [["Ada", "", 36]]


def test_append_rejects_bad_row_objects(settings):
    method = RowsAppendMethod(settings)
    with pytest.raises(InvalidMethodRequest):
        method.validate_execution_request(make_config(rowObject="[1]"))
    with pytest.raises(QuerySyntaxError):
        method.validate_execution_request(make_config(rowObject="{nope"))


def test_update_sends_null_for_missing_cells(settings):
    config = make_config(rowObject='{"age": 31}', rowIndex="2")
    request = RowsUpdateMethod(settings).build_execution_request(config, ["name", "age"])

    assert request.method == "PUT"
    assert request.body == {"range": "'Sheet1'!A4:B4", "majorDimension": "ROWS", "values": [[None, 31]]}


def test_update_takes_row_index_from_row_object(settings):
    config = make_config(rowObject='{"rowIndex": "0", "name": "Ada"}')
    request = RowsUpdateMethod(settings).build_execution_request(config, ["name"])
    assert request.body["range"] == "'Sheet1'!A2:A2"


def test_bulk_update_requires_row_index(settings):
    config = make_config(rowObjects='[{"name": "Ada"}]')
    with pytest.raises(InvalidMethodRequest):
        RowsBulkUpdateMethod(settings).validate_execution_request(config)


def test_bulk_update_builds_one_range_per_row(settings):
    config = make_config(rowObjects='[{"rowIndex": 0, "name": "Ada"}, {"rowIndex": 3, "name": "Bob"}]')
    request = RowsBulkUpdateMethod(settings).build_execution_request(config, ["name"])

    assert request.url == "https://sheets.test/v4/spreadsheets/sid/values:batchUpdate"
    assert [item["range"] for item in request.body["data"]] == ["'Sheet1'!A2:A2", "'Sheet1'!A5:A5"]


def test_delete_row_targets_the_data_row(settings):
    config = make_config(rowIndex="0", tableHeaderIndex="2")
    request = RowsDeleteMethod(settings).build_execution_request(config, 77)

    dimension = request.body["requests"][0]["deleteDimension"]["range"]
    assert dimension == {"sheetId": 77, "dimension": "ROWS", "startIndex": 2, "endIndex": 3}


def test_structure_returns_trimmed_header(settings):
    body = {"values": [[" name ", "age", "", ""]]}
    method = GetStructureMethod(settings)

    assert method.transform_execution_response(body, make_config())["columns"] == ["name", "age"]
    assert method.transform_trigger_response(body, make_config()) == [
        {"label": "name", "value": "name"},
        {"label": "age", "value": "age"},
    ]


def test_create_spreadsheet_seeds_rows(settings):
    config = MethodConfig.from_form_data(
        {"spreadsheetName": "Report", "rowObjects": '[{"a": 1, "b": "x"}, {"b": "y", "c": true}]'}
    )
    request = FileCreateMethod(settings).build_execution_request(config)

    row_data = request.body["sheets"][0]["data"][0]["rowData"]
    assert request.url == "https://sheets.test/v4/spreadsheets"
    assert request.body["properties"] == {"title": "Report"}
    assert row_data[0]["values"][2] == {"userEnteredValue": {"stringValue": "c"}}
    assert row_data[1]["values"] == [
        {"userEnteredValue": {"numberValue": 1}},
        {"userEnteredValue": {"stringValue": "x"}},
        {},
    ]
    assert row_data[2]["values"][2] == {"userEnteredValue": {"boolValue": True}}


def test_spreadsheet_selector_lists_names_and_urls(settings):
    body = {"files": [{"id": "1", "name": "Budget"}]}
    options = FileListMethod(settings).transform_trigger_response(body, make_config())
    assert options == [{"label": "Budget", "value": "https://docs.google.com/spreadsheets/d/1/edit"}]


def test_sheet_selector_lists_sheet_titles(settings):
    body = {"sheets": [{"properties": {"sheetId": 0, "title": "Sheet1"}}, {"properties": {"sheetId": 5, "title": "Q2"}}]}
    options = FileInfoMethod(settings).transform_trigger_response(body, make_config())
    assert options == [{"label": "Sheet1", "value": "Sheet1"}, {"label": "Q2", "value": "Q2"}]


def test_file_list_reads_one_page_and_warns_when_truncated(settings):
    method = FileListMethod(settings)
    request = method.build_execution_request(make_config())
    assert request.params["pageSize"] == "1000"
    assert request.params["fields"].startswith("nextPageToken,")

    body = {"files": [{"id": "1", "name": "Budget"}], "nextPageToken": "next"}
    with capture_logs() as logs:
        files = method.transform_execution_response(body, make_config())

    assert [item["name"] for item in files] == ["Budget"]
    (entry,) = [log for log in logs if log["event"] == "files.truncated"]
    assert entry["returned"] == 1
    assert entry["page_size"] == 1000


def test_file_list_tolerates_null_files(settings):
    assert FileListMethod(settings).transform_execution_response({"files": None}, make_config()) == []
