import pytest

from formbridge.adapters.extended_json import MAX_DEPTH, parse_extended_json, parse_safely
from formbridge.core.errors import QuerySyntaxError


def test_shell_syntax_is_accepted():
    value = parse_extended_json("{ age: { $gt: 3 }, 'name': 'Ada', tags: ['a', 'b',], }")
    assert value == {"age": {"$gt": 3}, "name": "Ada", "tags": ["a", "b"]}


def test_constructors_render_as_canonical_extended_json():
    value = parse_extended_json(
        '{"_id": ObjectId("5F0C4B6E1C9D440000A1B2C3"), '
        '"at": ISODate("2024-01-02T03:04:05Z"), '
        '"big": NumberLong(9007199254740993), '
        '"small": NumberInt("42"), '
        '"price": NumberDecimal("9.99")}'
    )
    assert value == {
        "_id": {"$oid": "5f0c4b6e1c9d440000a1b2c3"},
        "at": {"$date": "2024-01-02T03:04:05Z"},
        "big": {"$numberLong": "9007199254740993"},
        "small": 42,
        "price": {"$numberDecimal": "9.99"},
    }


@pytest.mark.parametrize(
    "text",
    [
        '{"_id": ObjectId("not-hex")}',
        '{"a": 1',
        '{"a": 1} trailing',
        '{"a": undefined}',
        '{"a": NumberInt(3000000000)}',
        '{"at": ISODate("yesterday")}',
    ],
)
def test_invalid_text_raises_query_syntax_error(text):
    with pytest.raises(QuerySyntaxError) as excinfo:
        parse_extended_json(text, field="Query")
    assert excinfo.value.field == "Query"
    assert excinfo.value.code == "PLUGIN_EXECUTE_ARGUMENT_ERROR"


def test_nesting_is_capped():
    text = "[" * (MAX_DEPTH + 1) + "]" * (MAX_DEPTH + 1)
    with pytest.raises(QuerySyntaxError) as excinfo:
        parse_extended_json(text)
    assert "nested too deeply" in excinfo.value.reason


def test_parse_safely_requires_a_document():
    with pytest.raises(QuerySyntaxError):
        parse_safely("Sort", "[1, 2]")


def test_surrogate_pair_escapes_combine():
    assert parse_extended_json('{"a": "\\ud83d\\ude00"}') == {"a": "😀"}
    assert parse_extended_json("'x\\uD834\\uDD1Ey'") == "x\U0001d11ey"


@pytest.mark.parametrize(
    "text,reason",
    [
        ('"\\ud83d"', "unpaired high surrogate"),
        ('"\\ud83dx"', "unpaired high surrogate"),
        ('"\\ud83d\\u0041"', "unpaired high surrogate"),
        ('"\\ude00"', "unpaired low surrogate"),
    ],
)
def test_lone_surrogates_are_rejected(text, reason):
    with pytest.raises(QuerySyntaxError) as info:
        parse_extended_json(text)
    assert info.value.reason == reason
