"""
Per-kind method registries.

Each kind owns a fixed table ``name -> (implementation, right)`` built once at
import time and exposed read-only. WRITE methods return the updated container
as a new literal; callers decide whether a mutation is allowed in their
context.
"""

from __future__ import annotations

import math
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence, Tuple

from ...ast_nodes import Span
from ...errors import UnknownMethodError, UsageError
from .literal import (
    Kind,
    Literal,
    array_literal,
    bool_literal,
    equals,
    float_literal,
    int_literal,
    null_literal,
    object_literal,
    string_literal,
)

__all__ = ["Right", "METHODS", "call_method", "method_names"]


class Right(str, Enum):
    READ = "read"
    WRITE = "write"


Method = Callable[[Literal, Sequence[Literal], Optional[Span]], Literal]


def check_usage(args: Sequence[Literal], expected: int, usage: str, span: Optional[Span]) -> None:
    if len(args) != expected:
        raise UsageError.at(f"usage: {usage}", span)


def _expect(arg: Literal, kinds: Tuple[Kind, ...], usage: str, span: Optional[Span]) -> Literal:
    if arg.kind not in kinds:
        names = " || ".join(kind.label for kind in kinds)
        raise UsageError.at(f"usage: {usage}; parameter must be of type {names}", span)
    return arg


def _index(arg: Literal, length: int, usage: str, span: Optional[Span], *, allow_end: bool = False) -> int:
    _expect(arg, (Kind.INT,), usage, span)
    limit = length if allow_end else length - 1
    if arg.value < 0 or arg.value > limit:
        raise UsageError.at(f"usage: {usage}; index {arg.value} is out of bounds", span)
    return arg.value


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


# shared ----------------------------------------------------------------------


def _type_of(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "type_of()", span)
    return string_literal(value.kind.value, span)


def _to_string(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "to_string()", span)
    return string_literal(value.to_string(), span)


def _constant_is_number(result: bool) -> Method:
    def is_number(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
        check_usage(args, 0, "is_number()", span)
        return bool_literal(result, span)

    return is_number


def _length(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "length()", span)
    return int_literal(len(value.value), span)


def _is_empty(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "is_empty()", span)
    return bool_literal(len(value.value) == 0, span)


def _clear(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "clear()", span)
    if value.kind is Kind.ARRAY:
        return array_literal((), span, content_type=value.content_type)
    return object_literal({}, span, content_type=value.content_type)


# numbers ---------------------------------------------------------------------


def _unary_math(name: str, fn: Callable[[float], float], on_int: Optional[Callable[[int], int]] = None) -> Method:
    # on_int keeps Int results exact; without it the value goes through float.
    def apply(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
        check_usage(args, 0, f"{name}()", span)
        if value.kind is Kind.INT and on_int is not None:
            return int_literal(on_int(value.value), span)
        try:
            result = fn(float(value.value))
            if value.kind is Kind.INT:
                return int_literal(int(result), span)
            return float_literal(result, span)
        except (OverflowError, ValueError) as exc:
            raise UsageError.at(f"usage: {name}(); {exc}", span) from exc

    apply.__name__ = name
    return apply


def _sqrt(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "sqrt()", span)
    if value.value < 0:
        raise UsageError.at("usage: sqrt() is only defined for non-negative numbers", span)
    if value.kind is Kind.INT:
        return int_literal(math.isqrt(value.value), span)
    return float_literal(math.sqrt(value.value), span)


def _pow(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    usage = "pow(Primitive<Int || Float>)"
    check_usage(args, 1, usage, span)
    exponent = _expect(args[0], (Kind.INT, Kind.FLOAT), usage, span)
    if value.kind is Kind.INT:
        try:
            power = int(exponent.value)
        except (OverflowError, ValueError) as exc:
            raise UsageError.at(f"usage: {usage}; {exc}", span) from exc
        if power < 0:
            raise UsageError.at(f"usage: {usage}; exponent must be non-negative for Int", span)
        return int_literal(value.value**power, span)
    try:
        return float_literal(math.pow(value.value, exponent.value), span)
    except (OverflowError, ValueError) as exc:
        raise UsageError.at(f"usage: {usage}; {exc}", span) from exc


def _to_int(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "to_int()", span)
    if value.kind is Kind.STRING:
        try:
            return int_literal(int(float(value.value.strip())), span)
        except (ValueError, OverflowError):
            raise UsageError.at(f"usage: to_int(); '{value.value}' is not a number", span) from None
    try:
        return int_literal(int(value.value), span)
    except (ValueError, OverflowError) as exc:
        raise UsageError.at(f"usage: to_int(); {exc}", span) from exc


def _to_float(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "to_float()", span)
    if value.kind is Kind.STRING:
        try:
            return float_literal(float(value.value.strip()), span)
        except ValueError:
            raise UsageError.at(f"usage: to_float(); '{value.value}' is not a number", span) from None
    try:
        return float_literal(float(value.value), span)
    except OverflowError as exc:
        raise UsageError.at(f"usage: to_float(); {exc}", span) from exc


def _number_methods() -> dict[str, Tuple[Method, Right]]:
    return {
        "type_of": (_type_of, Right.READ),
        "to_string": (_to_string, Right.READ),
        "abs": (_unary_math("abs", abs, abs), Right.READ),
        "cos": (_unary_math("cos", math.cos), Right.READ),
        "pow": (_pow, Right.READ),
        "floor": (_unary_math("floor", math.floor, int), Right.READ),
        "ceil": (_unary_math("ceil", math.ceil, int), Right.READ),
        "round": (_unary_math("round", _round_half_away, int), Right.READ),
        "sin": (_unary_math("sin", math.sin), Right.READ),
        "sqrt": (_sqrt, Right.READ),
        "tan": (_unary_math("tan", math.tan), Right.READ),
        "is_number": (_constant_is_number(True), Right.READ),
        "to_int": (_to_int, Right.READ),
        "to_float": (_to_float, Right.READ),
    }


# strings ---------------------------------------------------------------------


def _string_is_number(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "is_number()", span)
    try:
        float(value.value.strip())
    except ValueError:
        return bool_literal(False, span)
    return bool_literal(True, span)


def _string_transform(name: str, fn: Callable[[str], str]) -> Method:
    def apply(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
        check_usage(args, 0, f"{name}()", span)
        return string_literal(fn(value.value), span)

    apply.__name__ = name
    return apply


def _string_predicate(name: str, fn: Callable[[str, str], bool]) -> Method:
    usage = f"{name}(Primitive<String>)"

    def apply(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
        check_usage(args, 1, usage, span)
        needle = _expect(args[0], (Kind.STRING,), usage, span)
        return bool_literal(fn(value.value, needle.value), span)

    apply.__name__ = name
    return apply


def _split(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    usage = "split(Primitive<String>)"
    check_usage(args, 1, usage, span)
    separator = _expect(args[0], (Kind.STRING,), usage, span).value
    if not separator:
        raise UsageError.at(f"usage: {usage}; separator must not be empty", span)
    return array_literal([string_literal(part, span) for part in value.value.split(separator)], span)


def _string_append(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    usage = "append(Primitive<String>)"
    check_usage(args, 1, usage, span)
    suffix = _expect(args[0], (Kind.STRING,), usage, span)
    return string_literal(value.value + suffix.value, span, content_type=value.content_type)


def _string_methods() -> dict[str, Tuple[Method, Right]]:
    return {
        "type_of": (_type_of, Right.READ),
        "to_string": (_to_string, Right.READ),
        "length": (_length, Right.READ),
        "is_number": (_string_is_number, Right.READ),
        "to_int": (_to_int, Right.READ),
        "to_float": (_to_float, Right.READ),
        "to_uppercase": (_string_transform("to_uppercase", str.upper), Right.READ),
        "to_lowercase": (_string_transform("to_lowercase", str.lower), Right.READ),
        "trim": (_string_transform("trim", str.strip), Right.READ),
        "contains": (_string_predicate("contains", lambda s, n: n in s), Right.READ),
        "starts_with": (_string_predicate("starts_with", str.startswith), Right.READ),
        "ends_with": (_string_predicate("ends_with", str.endswith), Right.READ),
        "split": (_split, Right.READ),
        "append": (_string_append, Right.WRITE),
    }


# arrays ----------------------------------------------------------------------


def _array_contains(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 1, "contains(Primitive<T>)", span)
    return bool_literal(any(equals(item, args[0]) for item in value.value), span)


def _index_of(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 1, "index_of(Primitive<T>)", span)
    for position, item in enumerate(value.value):
        if equals(item, args[0]):
            return int_literal(position, span)
    return null_literal(span)


def _join(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    usage = "join(Primitive<String>)"
    check_usage(args, 1, usage, span)
    separator = _expect(args[0], (Kind.STRING,), usage, span).value
    return string_literal(separator.join(item.to_string() for item in value.value), span)


def _push(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 1, "push(Primitive<T>)", span)
    return array_literal(value.value + (args[0],), span, content_type=value.content_type)


def _pop(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "pop()", span)
    if not value.value:
        raise UsageError.at("usage: pop() cannot be applied to an empty array", span)
    return array_literal(value.value[:-1], span, content_type=value.content_type)


def _insert_at(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    usage = "insert_at(Primitive<Int>, Primitive<T>)"
    check_usage(args, 2, usage, span)
    position = _index(args[0], len(value.value), usage, span, allow_end=True)
    items = list(value.value)
    items.insert(position, args[1])
    return array_literal(items, span, content_type=value.content_type)


def _remove_at(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    usage = "remove_at(Primitive<Int>)"
    check_usage(args, 1, usage, span)
    position = _index(args[0], len(value.value), usage, span)
    items = list(value.value)
    del items[position]
    return array_literal(items, span, content_type=value.content_type)


def _array_methods() -> dict[str, Tuple[Method, Right]]:
    return {
        "type_of": (_type_of, Right.READ),
        "to_string": (_to_string, Right.READ),
        "length": (_length, Right.READ),
        "is_empty": (_is_empty, Right.READ),
        "contains": (_array_contains, Right.READ),
        "index_of": (_index_of, Right.READ),
        "join": (_join, Right.READ),
        "push": (_push, Right.WRITE),
        "pop": (_pop, Right.WRITE),
        "insert_at": (_insert_at, Right.WRITE),
        "remove_at": (_remove_at, Right.WRITE),
        "clear": (_clear, Right.WRITE),
    }


# objects ---------------------------------------------------------------------


def _key(args: Sequence[Literal], expected: int, usage: str, span: Optional[Span]) -> str:
    check_usage(args, expected, usage, span)
    return _expect(args[0], (Kind.STRING,), usage, span).value


def _object_contains(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    return bool_literal(_key(args, 1, "contains(Primitive<String>)", span) in value.value, span)


def _keys(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "keys()", span)
    return array_literal([string_literal(key, span) for key in value.value], span)


def _values(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    check_usage(args, 0, "values()", span)
    return array_literal(list(value.value.values()), span)


def _object_get(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    key = _key(args, 1, "get(Primitive<String>)", span)
    found = value.value.get(key)
    return found if found is not None else null_literal(span)


def _object_insert(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    key = _key(args, 2, "insert(Primitive<String>, Primitive<T>)", span)
    fields = dict(value.value)
    fields[key] = args[1]
    return object_literal(fields, span, content_type=value.content_type)


def _object_remove(value: Literal, args: Sequence[Literal], span: Optional[Span]) -> Literal:
    key = _key(args, 1, "remove(Primitive<String>)", span)
    fields = dict(value.value)
    fields.pop(key, None)
    return object_literal(fields, span, content_type=value.content_type)


def _object_methods() -> dict[str, Tuple[Method, Right]]:
    return {
        "type_of": (_type_of, Right.READ),
        "to_string": (_to_string, Right.READ),
        "length": (_length, Right.READ),
        "is_empty": (_is_empty, Right.READ),
        "contains": (_object_contains, Right.READ),
        "keys": (_keys, Right.READ),
        "values": (_values, Right.READ),
        "get": (_object_get, Right.READ),
        "insert": (_object_insert, Right.WRITE),
        "remove": (_object_remove, Right.WRITE),
        "clear": (_clear, Right.WRITE),
    }


# registry ----------------------------------------------------------------------


def _build_registries() -> Mapping[Kind, Mapping[str, Tuple[Method, Right]]]:
    boolean = {
        "type_of": (_type_of, Right.READ),
        "to_string": (_to_string, Right.READ),
        "is_number": (_constant_is_number(False), Right.READ),
        "to_int": (_to_int, Right.READ),
    }
    null = {
        "type_of": (_type_of, Right.READ),
        "to_string": (_to_string, Right.READ),
        "is_number": (_constant_is_number(False), Right.READ),
    }
    tables = {
        Kind.INT: _number_methods(),
        Kind.FLOAT: _number_methods(),
        Kind.BOOLEAN: boolean,
        Kind.STRING: _string_methods(),
        Kind.ARRAY: _array_methods(),
        Kind.OBJECT: _object_methods(),
        Kind.NULL: null,
    }
    return MappingProxyType({kind: MappingProxyType(table) for kind, table in tables.items()})


METHODS = _build_registries()


def method_names(kind: Kind) -> list[str]:
    return sorted(METHODS[kind])


def call_method(
    value: Literal, name: str, args: Sequence[Literal] = (), span: Optional[Span] = None
) -> Tuple[Literal, Right]:
    """Dispatch ``name`` on ``value``; returns the result and the method's access right."""
    entry = METHODS[value.kind].get(name)
    if entry is None:
        raise UnknownMethodError.at(f"unknown method '{name}' for type {value.kind.label}", span)
    method, right = entry
    return method(value, list(args), span), right
