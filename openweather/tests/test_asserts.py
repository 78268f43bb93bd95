import pytest

from openweather.asserts import (
    require_exists,
    require_in_range,
    require_instance_of,
    require_json,
    require_number,
    require_string,
    require_url,
)
from openweather.errors import RangeViolation, TypeMismatch, ValidationError


def test_require_exists():
    require_exists(0, "missing")
    require_exists("", "missing")
    with pytest.raises(TypeMismatch, match="^Value None is missing$"):
        require_exists(None, "Value @ is missing")


@pytest.mark.parametrize("value", ["5", None, True, [1], {"a": 1}])
def test_require_number_rejects_non_numbers(value):
    with pytest.raises(TypeMismatch):
        require_number(value, "not a number: @")


@pytest.mark.parametrize("value", [0, -3, 2.5, float("inf")])
def test_require_number_accepts_numbers(value):
    require_number(value, "not a number: @")


def test_require_string():
    require_string("London", "bad name")
    with pytest.raises(TypeMismatch, match="^bad name 10$"):
        require_string(10, "bad name @")


@pytest.mark.parametrize("value", [1, 2, 3, 1.0, 2.999])
def test_require_in_range_inclusive_bounds(value):
    require_in_range(value, 1, 3, "@ not in [@1,@2]")


@pytest.mark.parametrize("value", [0, 0.999, 3.001, 100, -5])
def test_require_in_range_violation(value):
    with pytest.raises(RangeViolation):
        require_in_range(value, 1, 3, "@ not in [@1,@2]")


def test_require_in_range_message_template():
    with pytest.raises(RangeViolation) as exc:
        require_in_range(5, 1, 3, "@ not in [@1,@2]")
    assert str(exc.value) == "5 not in [1,3]"
    assert exc.value.message == "5 not in [1,3]"
    assert exc.value.kind == "range_violation"


def test_require_in_range_non_number_is_type_mismatch():
    with pytest.raises(TypeMismatch) as exc:
        require_in_range("2", 1, 3, "@ not in [@1,@2]")
    assert str(exc.value) == "2 not in [1,3]"


def test_bounds_substituted_before_value():
    # the value itself contains placeholder tokens
    with pytest.raises(TypeMismatch) as exc:
        require_in_range("@1", 1, 3, "@ outside @1..@2")
    assert str(exc.value) == "@1 outside 1..3"


def test_validation_errors_are_builtin_compatible():
    with pytest.raises(TypeError):
        require_number("x", "m")
    with pytest.raises(ValueError):
        require_in_range(10, 1, 3, "m")
    with pytest.raises(ValidationError):
        require_string(None, "m")


@pytest.mark.parametrize(
    "url",
    [
        "http://example.com/path",
        "https://api.openweathermap.org/data/2.5/weather?q=London",
        "example.com",
        "http://localhost.local:8080/x",
    ],
)
def test_require_url_accepts(url):
    require_url(url, "URL is invalid.")


@pytest.mark.parametrize("url", ["not a url", "", "http://localhost", 42, None])
def test_require_url_rejects(url):
    with pytest.raises(TypeMismatch, match="URL is invalid."):
        require_url(url, "URL is invalid.")


def test_require_json_accepts_objects_and_arrays():
    text = '{"a":1}'
    assert require_json(text, "bad json") == {"a": 1}
    assert text == '{"a":1}'
    assert require_json("[1, 2]", "bad json") == [1, 2]


@pytest.mark.parametrize("text", ["not json", "null", "1", '"str"', "true", None, ""])
def test_require_json_rejects(text):
    with pytest.raises(TypeMismatch):
        require_json(text, "bad json: @")


class _Base:
    pass


class _Child(_Base):
    pass


def test_require_instance_of():
    require_instance_of(_Child(), _Base, "wrong type")
    require_instance_of(3, (int, str), "wrong type")
    with pytest.raises(TypeMismatch):
        require_instance_of(None, _Base, "wrong type")
    with pytest.raises(TypeMismatch, match="^wrong type: 3$"):
        require_instance_of(3, _Base, "wrong type: @")
