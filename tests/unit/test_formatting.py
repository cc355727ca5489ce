"""Unit tests for response normalization and error rendering."""

import json

from core.formatting import format_response, handle_error


def test_none_is_no_data():
    assert format_response(None) == "No data returned"


def test_empty_containers_are_no_data():
    assert format_response({}) == "No data returned"
    assert format_response([]) == "No data returned"
    assert format_response("") == "No data returned"


def test_booleans_use_fixed_messages():
    assert format_response(True) == "Success"
    assert format_response(False) == "Operation failed"


def test_numbers_render_as_count():
    assert format_response(3) == "Count: 3"
    assert format_response(0) == "Count: 0"
    assert format_response(2.5) == "Count: 2.5"


def test_whole_float_renders_without_decimal():
    assert format_response(5.0) == "Count: 5"


def test_structured_result_is_pretty_json_in_original_order():
    data = {"zeta": 1, "alpha": {"nested": [1, 2]}, "mid": "x"}

    text = format_response(data)

    assert text == json.dumps(data, indent=2)
    assert text.index('"zeta"') < text.index('"alpha"') < text.index('"mid"')


def test_structured_result_is_deterministic():
    data = [{"id": "a", "tags": ["x"]}, {"id": "b", "tags": []}]

    assert format_response(data) == format_response(data)


def test_non_ascii_kept_readable():
    assert "Zoë" in format_response({"name": "Zoë"})


def test_handle_error_uses_message():
    assert handle_error(ValueError("bad thing")) == "Error: bad thing"


def test_handle_error_falls_back_to_type_name():
    assert handle_error(RuntimeError()) == "Error: RuntimeError"
