import pytest

from formbridge.core.domain.models import DataType, Param
from formbridge.core.errors import SmartSubstitutionError
from formbridge.core.services.substitution import (
    extract_bindings_in_order,
    is_smart_substitution_enabled,
    smart_substitute,
    substitute_text,
)


def test_bindings_keep_left_to_right_order_with_duplicates():
    text = '{"a": {{ x }}, "b": "{{y}}", "c": {{ x }}}'
    assert extract_bindings_in_order(text) == ["x", "y", "x"]


def test_values_are_rendered_by_detected_type():
    text = '{"n": {{ n }}, "name": {{ name }}, "quoted": "{{ name }}", "obj": {{ obj }}, "none": {{ none }}}'
    params = [
        Param(key="n", value="42"),
        Param(key="name", value='Ada "the first"'),
        Param(key="obj", value='{"k": [1, 2]}'),
        Param(key="none", value="null"),
    ]

    result, bound = substitute_text(text, params)

    assert result == (
        '{"n": 42, "name": "Ada \\"the first\\"", "quoted": "Ada \\"the first\\"", '
        '"obj": {"k": [1, 2]}, "none": null}'
    )
    assert [b.data_type for b in bound] == [
        DataType.INTEGER,
        DataType.STRING,
        DataType.STRING,
        DataType.JSON_OBJECT,
        DataType.NULL,
    ]


def test_first_matching_param_wins_and_keys_are_trimmed():
    result, _ = substitute_text("[{{a}}]", [Param(key=" a ", value="1"), Param(key="a", value="2")])
    assert result == "[1]"


def test_missing_binding_value_raises():
    with pytest.raises(SmartSubstitutionError) as excinfo:
        substitute_text('{"a": {{ missing }}}', [])
    assert excinfo.value.binding == "missing"


def test_smart_substitute_updates_only_listed_fields():
    form_data = {
        "rowObject": '{"name": "{{ who }}"}',
        "sheetTitle": "{{ who }}",
    }
    bound = smart_substitute(form_data, ("rowObject",), [Param(key="who", value="Ada")])

    assert form_data["rowObject"] == '{"name": "Ada"}'
    assert form_data["sheetTitle"] == "{{ who }}"
    assert len(bound) == 1


def test_dotted_fields_are_substituted_in_place():
    form_data = {"find": {"query": '{"age": {{ age }}}'}}
    smart_substitute(form_data, ("find.query",), [Param(key="age", value="30")])
    assert form_data == {"find": {"query": '{"age": 30}'}}


@pytest.mark.parametrize(
    "value,expected",
    [(None, True), (True, True), (False, False), ("false", False), ("TRUE", True), ("nope", False)],
)
def test_smart_substitution_flag(value, expected):
    form_data = {} if value is None else {"smartSubstitution": value}
    assert is_smart_substitution_enabled(form_data) is expected
