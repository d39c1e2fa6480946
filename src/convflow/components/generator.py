"""
Generic component generation.

A component header declares, per field, a structural type and two ordered
rule lists (``default_value`` then ``add_value``). Each list folds into the
type's zero value; the two folds are then merged into the field's value.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Set, Union

from ..ast_nodes import Span
from ..errors import CircularDependencyError, MissingRequiredFieldError, TypeMismatchError
from ..runtime.values import Literal, from_json, object_literal
from .schema import ComponentSchema, ComponentType, FieldSpec, Rule

__all__ = ["generate_component", "merge_values", "zero_value"]

log = logging.getLogger(__name__)

_ZERO_VALUES = {
    ComponentType.NULL: None,
    ComponentType.BOOL: False,
    ComponentType.NUMBER: 0,
    ComponentType.STRING: "",
}


def zero_value(component_type: ComponentType) -> Any:
    if component_type is ComponentType.ARRAY:
        return []
    if component_type is ComponentType.OBJECT:
        return {}
    return _ZERO_VALUES[component_type]


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def merge_values(left: Any, right: Any, span: Optional[Span] = None) -> Any:
    """
    Kind-directed merge of two JSON-like values.

    bool -> or, number -> sum, string/array -> concatenation,
    object -> shallow merge with right keys winning, null + null -> null.
    """
    left_type, right_type = _json_type(left), _json_type(right)
    if left_type != right_type:
        raise TypeMismatchError.at(f"cannot merge {left_type} with {right_type} in a component", span)
    if left_type == "null":
        return None
    if left_type == "bool":
        return left or right
    if left_type in ("number", "string"):
        return left + right
    if left_type == "array":
        return [*left, *right]
    if left_type == "object":
        merged = dict(left)
        merged.update(right)
        return merged
    raise TypeMismatchError.at(f"{left_type} values cannot be merged in a component", span)


class _Resolution:
    """State for resolving one top-level field."""

    def __init__(self, schema: ComponentSchema, span: Optional[Span]) -> None:
        self.schema = schema
        self.span = span
        self.visited: Set[str] = set()

    def resolve(self, key: str) -> Any:
        if key in self.visited:
            raise CircularDependencyError.at(f"circular dependency on component field '{key}'", self.span)
        self.visited.add(key)
        field_spec = self.schema.specs.get(key)
        if field_spec is None:
            return None
        if field_spec.required:
            # Named parameters are not bound yet, so a required field never has one.
            raise MissingRequiredFieldError.at(f"component field '{key}' is required but no parameter was given", self.span)
        defaults = self._fold(field_spec, field_spec.default_value)
        additions = self._fold(field_spec, field_spec.add_value)
        return merge_values(defaults, additions, self.span)

    def _fold(self, field_spec: FieldSpec, rules: list[Rule]) -> Any:
        result = zero_value(field_spec.type)
        for rule in rules:
            if rule.fetch is not None:
                result = merge_values(result, self.resolve(rule.fetch), self.span)
            if rule.has_value:
                result = merge_values(result, rule.value, self.span)
        return result


def generate_component(
    name: str,
    schema: Union[ComponentSchema, Mapping[str, Any]],
    params: Optional[Literal] = None,
    span: Optional[Span] = None,
) -> Literal:
    """Build an object literal named ``name`` from a component header."""
    if not isinstance(schema, ComponentSchema):
        schema = ComponentSchema.parse(schema)
    if params is not None:
        log.debug("Component %s: named parameters are not bound; ignoring %r", name, params)
    fields = {}
    for key in schema.specs:
        fields[key] = from_json(_Resolution(schema, span).resolve(key), span)
    log.debug("Generated component %s with fields %s", name, list(fields))
    return object_literal(fields, span, content_type=name)
