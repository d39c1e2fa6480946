"""
Runtime literal values.

A literal is a closed tagged union over ``Kind``. Literals are immutable: every
operation on them returns a new literal.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from ...ast_nodes import Span
from ...errors import TypeMismatchError

if TYPE_CHECKING:  # pragma: no cover
    from ...flows.models import Message


class Kind(str, Enum):
    INT = "int"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"

    @property
    def label(self) -> str:
        return self.name.title()


ORDERED_KINDS = frozenset({Kind.INT, Kind.FLOAT, Kind.STRING, Kind.BOOLEAN})


@dataclass(frozen=True, eq=False)
class Literal:
    """A runtime value with an advisory content type and a source position."""

    content_type: str
    kind: Kind
    value: Any
    span: Optional[Span] = None

    def with_content_type(self, content_type: str) -> "Literal":
        return replace(self, content_type=content_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return equals(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Literal({self.kind.value}, {self.to_json()!r})"

    def to_string(self) -> str:
        kind = self.kind
        if kind is Kind.STRING:
            return self.value
        if kind is Kind.BOOLEAN:
            return "true" if self.value else "false"
        if kind is Kind.NULL:
            return "null"
        if kind in (Kind.INT, Kind.FLOAT):
            return repr(self.value)
        return json.dumps(self.to_json(), ensure_ascii=False)

    def to_json(self) -> Any:
        kind = self.kind
        if kind is Kind.ARRAY:
            return [item.to_json() for item in self.value]
        if kind is Kind.OBJECT:
            return {key: item.to_json() for key, item in self.value.items()}
        return self.value

    def truthy(self) -> bool:
        """
        Boolean coercion used by conditions:

        int/float  -> strictly positive
        boolean    -> itself
        string, array, object -> non-empty
        null       -> false
        """
        kind = self.kind
        if kind in (Kind.INT, Kind.FLOAT):
            return self.value > 0
        if kind is Kind.BOOLEAN:
            return bool(self.value)
        if kind is Kind.NULL:
            return False
        return len(self.value) > 0

    def to_message(self) -> "Message":
        from ...flows.models import Message

        if self.kind is Kind.OBJECT:
            return Message(content_type=self.content_type, content=self.to_json())
        return Message(content_type="text", content={"text": self.to_string()})


def int_literal(value: int, span: Optional[Span] = None, content_type: str = "int") -> Literal:
    return Literal(content_type, Kind.INT, int(value), span)


def float_literal(value: float, span: Optional[Span] = None, content_type: str = "float") -> Literal:
    return Literal(content_type, Kind.FLOAT, float(value), span)


def bool_literal(value: bool, span: Optional[Span] = None, content_type: str = "boolean") -> Literal:
    return Literal(content_type, Kind.BOOLEAN, bool(value), span)


def string_literal(value: str, span: Optional[Span] = None, content_type: str = "string") -> Literal:
    return Literal(content_type, Kind.STRING, str(value), span)


def array_literal(items: Iterable[Literal], span: Optional[Span] = None, content_type: str = "array") -> Literal:
    return Literal(content_type, Kind.ARRAY, tuple(items), span)


def object_literal(
    fields: Mapping[str, Literal], span: Optional[Span] = None, content_type: str = "object"
) -> Literal:
    return Literal(content_type, Kind.OBJECT, MappingProxyType(dict(fields)), span)


def null_literal(span: Optional[Span] = None, content_type: str = "null") -> Literal:
    return Literal(content_type, Kind.NULL, None, span)


def from_json(value: Any, span: Optional[Span] = None) -> Literal:
    """Convert a JSON-like Python value into a literal."""
    if isinstance(value, Literal):
        return value
    if value is None:
        return null_literal(span)
    # bool is a subclass of int; check it first.
    if isinstance(value, bool):
        return bool_literal(value, span)
    if isinstance(value, int):
        return int_literal(value, span)
    if isinstance(value, float):
        return float_literal(value, span)
    if isinstance(value, str):
        return string_literal(value, span)
    if isinstance(value, (list, tuple)):
        return array_literal([from_json(item, span) for item in value], span)
    if isinstance(value, Mapping):
        return object_literal({str(key): from_json(item, span) for key, item in value.items()}, span)
    raise TypeMismatchError.at(f"cannot convert {type(value).__name__} to a literal", span)


def equals(left: Literal, right: Literal) -> bool:
    if left.kind is not right.kind:
        return False
    kind = left.kind
    if kind is Kind.ARRAY:
        if len(left.value) != len(right.value):
            return False
        return all(equals(a, b) for a, b in zip(left.value, right.value))
    if kind is Kind.OBJECT:
        if left.value.keys() != right.value.keys():
            return False
        return all(equals(item, right.value[key]) for key, item in left.value.items())
    return left.value == right.value


def compare(left: Literal, right: Literal) -> Optional[int]:
    """
    Partial ordering: -1, 0 or 1, or None when the values are incomparable.

    Mismatched kinds are always incomparable. Arrays, objects and null only
    order against an equal value of the same kind.
    """
    if left.kind is not right.kind:
        return None
    if left.kind not in ORDERED_KINDS:
        return 0 if equals(left, right) else None
    a, b = left.value, right.value
    if left.kind is Kind.FLOAT and (math.isnan(a) or math.isnan(b)):
        return None
    if a < b:
        return -1
    if a > b:
        return 1
    return 0
