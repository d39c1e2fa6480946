import math
from types import MappingProxyType

import pytest

from convflow.errors import UnknownMethodError, UsageError
from convflow.runtime.values import (
    METHODS,
    Kind,
    Right,
    call_method,
    float_literal,
    from_json,
    int_literal,
    method_names,
    null_literal,
    string_literal,
)


def test_registries_are_read_only():
    assert isinstance(METHODS, MappingProxyType)
    assert set(METHODS) == set(Kind)
    with pytest.raises(TypeError):
        METHODS[Kind.INT]["evil"] = None  # type: ignore[index]


def test_int_methods_return_int_and_read_right():
    result, right = call_method(int_literal(-4), "abs")
    assert right is Right.READ
    assert result.kind is Kind.INT and result.value == 4
    assert call_method(int_literal(10), "sqrt")[0].value == 3
    assert call_method(int_literal(2), "pow", [int_literal(10)])[0].value == 1024
    assert call_method(int_literal(2), "pow", [float_literal(3.0)])[0].value == 8
    assert call_method(int_literal(7), "to_float")[0].kind is Kind.FLOAT
    assert call_method(int_literal(7), "type_of")[0].value == "int"
    assert call_method(int_literal(7), "to_string")[0].value == "7"


def test_float_methods_keep_float():
    assert call_method(float_literal(2.5), "round")[0].value == 3.0
    assert call_method(float_literal(-2.5), "round")[0].value == -3.0
    assert call_method(float_literal(2.7), "floor")[0].kind is Kind.FLOAT
    assert call_method(float_literal(2.7), "to_int")[0].value == 2
    assert call_method(float_literal(4.0), "pow", [float_literal(0.5)])[0].value == 2.0


def test_numeric_usage_errors_cite_signature():
    with pytest.raises(UsageError) as exc:
        call_method(int_literal(2), "pow")
    assert "pow(Primitive<Int || Float>)" in str(exc.value)
    with pytest.raises(UsageError):
        call_method(int_literal(2), "pow", [string_literal("3")])
    with pytest.raises(UsageError):
        call_method(int_literal(2), "pow", [int_literal(-1)])
    with pytest.raises(UsageError):
        call_method(int_literal(-9), "sqrt")
    with pytest.raises(UsageError):
        call_method(int_literal(1), "abs", [int_literal(1)])


def test_unknown_method_names_kind():
    with pytest.raises(UnknownMethodError) as exc:
        call_method(int_literal(1), "to_uppercase")
    assert "Int" in str(exc.value)
    with pytest.raises(UnknownMethodError):
        call_method(null_literal(), "length")


def test_string_methods():
    text = string_literal("  Hello World ")
    assert call_method(text, "trim")[0].value == "Hello World"
    assert call_method(text, "to_uppercase")[0].value == "  HELLO WORLD "
    assert call_method(text, "contains", [string_literal("World")])[0].value is True
    assert call_method(string_literal("12"), "to_int")[0].value == 12
    assert call_method(string_literal("abc"), "is_number")[0].value is False
    parts = call_method(string_literal("a,b"), "split", [string_literal(",")])[0]
    assert parts.to_json() == ["a", "b"]
    with pytest.raises(UsageError):
        call_method(string_literal("abc"), "to_int")


def test_write_methods_return_new_values():
    items = from_json([1, 2])
    pushed, right = call_method(items, "push", [int_literal(3)])
    assert right is Right.WRITE
    assert pushed.to_json() == [1, 2, 3]
    assert items.to_json() == [1, 2]
    assert call_method(items, "pop")[0].to_json() == [1]
    assert call_method(items, "insert_at", [int_literal(0), int_literal(0)])[0].to_json() == [0, 1, 2]
    assert call_method(items, "remove_at", [int_literal(1)])[0].to_json() == [1]
    with pytest.raises(UsageError):
        call_method(items, "remove_at", [int_literal(5)])
    with pytest.raises(UsageError):
        call_method(from_json([]), "pop")


def test_array_read_methods():
    items = from_json(["a", "b"])
    assert call_method(items, "length")[0].value == 2
    assert call_method(items, "join", [string_literal("-")])[0].value == "a-b"
    assert call_method(items, "index_of", [string_literal("b")])[0].value == 1
    assert call_method(items, "index_of", [string_literal("z")])[0].kind is Kind.NULL


def test_object_methods():
    user = from_json({"name": "Ada"}).with_content_type("user")
    assert call_method(user, "get", [string_literal("name")])[0].value == "Ada"
    assert call_method(user, "get", [string_literal("age")])[0].kind is Kind.NULL
    assert call_method(user, "keys")[0].to_json() == ["name"]
    inserted, right = call_method(user, "insert", [string_literal("age"), int_literal(36)])
    assert right is Right.WRITE
    assert inserted.to_json() == {"name": "Ada", "age": 36}
    assert inserted.content_type == "user"
    assert call_method(user, "remove", [string_literal("name")])[0].to_json() == {}


def test_method_names_lists_registry():
    assert "to_uppercase" in method_names(Kind.STRING)
    assert method_names(Kind.NULL) == ["is_number", "to_string", "type_of"]


@pytest.mark.parametrize("name", ["abs", "floor", "ceil", "round", "sqrt", "to_int"])
def test_int_methods_are_exact_for_large_values(name):
    big = 2**60 + 1
    expected = math.isqrt(big) if name == "sqrt" else big
    result = call_method(int_literal(big), name)[0]
    assert result.kind is Kind.INT
    assert result.value == expected
    assert call_method(int_literal(-big), "abs")[0].value == big


@pytest.mark.parametrize("name", ["floor", "ceil", "round", "to_int"])
@pytest.mark.parametrize("number", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_floats_raise_usage_errors(name, number):
    with pytest.raises(UsageError):
        call_method(float_literal(number), name)


def test_out_of_range_numbers_raise_usage_errors():
    huge = int_literal(10**400)
    with pytest.raises(UsageError):
        call_method(int_literal(2), "pow", [float_literal(float("inf"))])
    with pytest.raises(UsageError):
        call_method(int_literal(2), "pow", [float_literal(float("nan"))])
    with pytest.raises(UsageError):
        call_method(float_literal(float("inf")), "cos")
    with pytest.raises(UsageError):
        call_method(huge, "sin")
    with pytest.raises(UsageError):
        call_method(huge, "to_float")
    assert call_method(huge, "abs")[0].value == 10**400
