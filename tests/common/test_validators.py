import pytest

from attendance_hub.common.validators import json_object, optional_text, require_min_length
from attendance_hub.core.exceptions import ValidationError


def test_optional_text_strips_and_defaults():
    assert optional_text("  hi  ", "note") == "hi"
    assert optional_text("   ", "note") is None
    assert optional_text(None, "note", "Main Office") == "Main Office"
    assert optional_text("", "note", "Main Office") == "Main Office"


@pytest.mark.parametrize("value", [5, 1.5, True, ["a"], {"a": 1}])
def test_optional_text_rejects_non_strings(value):
    with pytest.raises(ValidationError, match="note must be a string"):
        optional_text(value, "note")


def test_require_min_length_rejects_non_strings():
    with pytest.raises(ValidationError, match="Password must be a string"):
        require_min_length(12345678, "Password", 8)
    assert require_min_length("12345678", "Password", 8) == "12345678"


def test_json_object():
    assert json_object(None) == {}
    assert json_object({"a": 1}) == {"a": 1}
    with pytest.raises(ValidationError, match="Request body must be a JSON object"):
        json_object([{"a": 1}])
