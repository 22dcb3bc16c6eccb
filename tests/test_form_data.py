import pytest

from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.errors import ConfigurationTypeError
from formbridge.core.form_data import get_value, is_present, set_value

PADDED_NUMBERS = [
    ("2 ", 2),
    (" 22 ", 22),
    ("  200", 200),
    ("  \t 2  ", 2),
    ("7 \n", 7),
    (" \n\n 72 \n\n", 72),
    ("\t\n 24 ", 24),
    ("\t\n 444 \t\n", 444),
    ("\n\n\n\n 7878 ", 7878),
    ("7 \n\n\n\n\n", 7),
    ("\n\n\n 1 \n\n\n\n ", 1),
]


@pytest.mark.parametrize("raw,expected", PADDED_NUMBERS)
def test_padded_numeric_fields_are_trimmed(raw, expected):
    config = MethodConfig.from_form_data(
        {"range": raw, "tableHeaderIndex": raw, "rowIndex": raw}
    )

    assert config.spreadsheet_range == str(expected)
    assert config.table_header_index == expected
    assert config.row_index == expected


def test_dotted_path_walks_nested_maps():
    form_data = {"find": {"query": "  {\"a\": 1} "}}
    assert get_value(form_data, "find.query") == '{"a": 1}'


def test_literal_dotted_key_wins():
    form_data = {"find.query": "literal", "find": {"query": "nested"}}
    assert get_value(form_data, "find.query") == "literal"


def test_blank_string_is_absent():
    assert get_value({"limit": "   "}, "limit", int, 10) == 10
    assert not is_present({"limit": "   "}, "limit")
    assert not is_present({"rows": []}, "rows")
    assert is_present({"flag": False}, "flag")


def test_bool_accepts_text():
    assert get_value({"flag": " TRUE "}, "flag", bool) is True
    assert get_value({"flag": "false"}, "flag", bool) is False


def test_bool_is_not_an_integer():
    with pytest.raises(ConfigurationTypeError):
        get_value({"limit": True}, "limit", int)


def test_non_numeric_integer_field_is_a_type_error():
    with pytest.raises(ConfigurationTypeError) as excinfo:
        get_value({"rowIndex": "two"}, "rowIndex", int)
    assert excinfo.value.field == "rowIndex"


def test_set_value_creates_intermediate_maps():
    form_data = {}
    set_value(form_data, "updateMany.limit", "ALL")
    assert form_data == {"updateMany": {"limit": "ALL"}}


def test_method_config_collects_every_type_error():
    with pytest.raises(ConfigurationTypeError) as excinfo:
        MethodConfig.from_form_data({"rowIndex": "x", "rowLimit": "y"})
    assert [error.field for error in excinfo.value.errors] == ["rowIndex", "rowLimit"]


def test_spreadsheet_id_is_extracted_from_url():
    config = MethodConfig.from_form_data(
        {"spreadsheetUrl": "https://docs.google.com/spreadsheets/d/abc-123_X/edit#gid=0"}
    )
    assert config.spreadsheet_id == "abc-123_X"


def test_decoded_row_object_is_kept_as_json_text():
    config = MethodConfig.from_form_data({"rowObject": {"name": "Ada"}})
    assert config.row_object == '{"name": "Ada"}'
