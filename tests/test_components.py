import pytest

from convflow.components import ComponentSchema, generate_component, merge_values
from convflow.errors import (
    CircularDependencyError,
    MissingRequiredFieldError,
    TypeMismatchError,
    UsageError,
)
from convflow.runtime.values import Kind, from_json


def test_fields_fold_defaults_then_additions():
    header = {
        "_primary": "title",
        "title": {"type": "String", "default_value": [{"$_set": "Hello"}], "add_value": [{"$_set": " world"}]},
        "count": {"type": "Number", "default_value": [{"$_set": 2}, {"$_set": 3}], "add_value": [{"$_set": 1.5}]},
        "flags": {"type": "Bool", "default_value": [{"$_set": False}], "add_value": [{"$_set": True}]},
        "items": {"type": "Array", "default_value": [{"$_set": [1]}], "add_value": [{"$_set": [2, 3]}]},
        "meta": {"type": "Object", "default_value": [{"$_set": {"a": 1, "b": 1}}], "add_value": [{"$_set": {"b": 2}}]},
        "nothing": {"type": "Null"},
    }
    component = generate_component("Card", header)
    assert component.kind is Kind.OBJECT
    assert component.content_type == "Card"
    assert component.to_json() == {
        "title": "Hello world",
        "count": 6.5,
        "flags": True,
        "items": [1, 2, 3],
        "meta": {"a": 1, "b": 2},
        "nothing": None,
    }


def test_primary_key_is_not_a_field():
    component = generate_component("Question", {"_primary": "title", "title": {"type": "String"}})
    assert set(component.value) == {"title"}
    assert component.value["title"].value == ""


def test_integer_sums_stay_int():
    header = {"n": {"type": "Number", "default_value": [{"$_set": 2}], "add_value": [{"$_set": 3}]}}
    value = generate_component("Counter", header).value["n"]
    assert value.kind is Kind.INT
    assert value.value == 5


def test_fetch_reads_other_fields():
    header = {
        "title": {"type": "String", "default_value": [{"$_set": "Hi"}]},
        "subtitle": {"type": "String", "default_value": [{"$_get": "title", "$_set": "!"}]},
        "ghost": {"type": "Null", "default_value": [{"$_get": "unknown"}]},
    }
    component = generate_component("Card", header)
    assert component.value["subtitle"].value == "Hi!"
    assert component.value["ghost"].kind is Kind.NULL


def test_self_reference_is_circular():
    header = {"a": {"type": "String", "default_value": [{"$_get": "a"}]}}
    with pytest.raises(CircularDependencyError):
        generate_component("Loop", header)


def test_mutual_reference_is_circular():
    header = {
        "a": {"type": "String", "default_value": [{"$_get": "b"}]},
        "b": {"type": "String", "add_value": [{"$_get": "a"}]},
    }
    with pytest.raises(CircularDependencyError):
        generate_component("Loop", header)


def test_shared_dependency_within_one_field_is_circular():
    header = {
        "base": {"type": "String", "default_value": [{"$_set": "x"}]},
        "twice": {"type": "String", "default_value": [{"$_get": "base"}], "add_value": [{"$_get": "base"}]},
    }
    with pytest.raises(CircularDependencyError):
        generate_component("Diamond", header)


def test_required_field_without_parameters():
    header = {"title": {"type": "String", "required": True}}
    with pytest.raises(MissingRequiredFieldError):
        generate_component("Card", header)
    with pytest.raises(MissingRequiredFieldError):
        generate_component("Card", header, params=from_json({"title": "given"}))


def test_rule_value_must_match_field_type():
    header = {"title": {"type": "String", "default_value": [{"$_set": 3}]}}
    with pytest.raises(TypeMismatchError):
        generate_component("Card", header)


@pytest.mark.parametrize(
    "header",
    [
        {"title": {"type": "Text"}},
        {"title": {"default_value": []}},
        {"title": {"type": "String", "default_value": [{}]}},
        {"title": {"type": "String", "default_value": [{"$_unknown": 1}]}},
    ],
)
def test_invalid_schema_is_a_usage_error(header):
    with pytest.raises(UsageError):
        generate_component("Card", header)


def test_schema_accepts_extra_field_keys():
    schema = ComponentSchema.parse({"_primary": "t", "t": {"type": "String", "description": "shown"}})
    assert schema.primary == "t"
    assert list(schema.specs) == ["t"]


def test_merge_values_by_kind():
    assert merge_values(None, None) is None
    assert merge_values(False, True) is True
    assert merge_values(1, 2) == 3
    assert merge_values("a", "b") == "ab"
    assert merge_values([1], [2]) == [1, 2]
    assert merge_values({"a": 1}, {"a": 2, "b": 3}) == {"a": 2, "b": 3}
    with pytest.raises(TypeMismatchError):
        merge_values(True, 1)
    with pytest.raises(TypeMismatchError):
        merge_values([], {})
