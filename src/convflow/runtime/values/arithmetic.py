from __future__ import annotations

import math
from enum import Enum
from types import MappingProxyType
from typing import Callable, Optional

from ...ast_nodes import Span
from ...errors import DivisionByZeroError, TypeMismatchError, UsageError
from .literal import (
    Kind,
    Literal,
    array_literal,
    bool_literal,
    float_literal,
    int_literal,
    object_literal,
    string_literal,
)

__all__ = ["BinaryOperator", "binary_op"]


class BinaryOperator(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    REM = "%"
    BITAND = "&"
    BITOR = "|"


Operation = Callable[[Literal, Literal, Optional[Span]], Literal]


def _check_divisor(divisor: Literal, op: BinaryOperator, span: Optional[Span]) -> None:
    if divisor.value == 0:
        raise DivisionByZeroError.at(f"cannot apply '{op.value}' with a zero divisor", span)


def _true_div(left: Literal, right: Literal, span: Optional[Span]) -> float:
    try:
        return left.value / right.value
    except OverflowError as exc:
        raise UsageError.at(f"cannot apply '/': {exc}", span) from exc


def _truncated_rem(dividend: int, divisor: int) -> int:
    # Sign follows the dividend, not Python's floor semantics.
    result = abs(dividend) % abs(divisor)
    return -result if dividend < 0 else result


def _int_div(left: Literal, right: Literal, span: Optional[Span]) -> Literal:
    _check_divisor(right, BinaryOperator.DIV, span)
    if left.value % right.value != 0:
        return float_literal(_true_div(left, right, span), span)
    return int_literal(left.value // right.value, span)


def _int_rem(left: Literal, right: Literal, span: Optional[Span]) -> Literal:
    _check_divisor(right, BinaryOperator.REM, span)
    return int_literal(_truncated_rem(left.value, right.value), span)


def _float_div(left: Literal, right: Literal, span: Optional[Span]) -> Literal:
    _check_divisor(right, BinaryOperator.DIV, span)
    return float_literal(_true_div(left, right, span), span)


def _float_rem(left: Literal, right: Literal, span: Optional[Span]) -> Literal:
    _check_divisor(right, BinaryOperator.REM, span)
    try:
        return float_literal(math.fmod(left.value, right.value), span)
    except ValueError as exc:
        raise UsageError.at(f"cannot apply '%': {exc}", span) from exc


def _object_merge(left: Literal, right: Literal, span: Optional[Span]) -> Literal:
    merged = dict(left.value)
    merged.update(right.value)
    return object_literal(merged, span)


_OPERATIONS: "MappingProxyType[tuple[Kind, BinaryOperator], Operation]" = MappingProxyType(
    {
        (Kind.INT, BinaryOperator.ADD): lambda l, r, s: int_literal(l.value + r.value, s),
        (Kind.INT, BinaryOperator.SUB): lambda l, r, s: int_literal(l.value - r.value, s),
        (Kind.INT, BinaryOperator.MUL): lambda l, r, s: int_literal(l.value * r.value, s),
        (Kind.INT, BinaryOperator.DIV): _int_div,
        (Kind.INT, BinaryOperator.REM): _int_rem,
        (Kind.INT, BinaryOperator.BITAND): lambda l, r, s: int_literal(l.value & r.value, s),
        (Kind.INT, BinaryOperator.BITOR): lambda l, r, s: int_literal(l.value | r.value, s),
        (Kind.FLOAT, BinaryOperator.ADD): lambda l, r, s: float_literal(l.value + r.value, s),
        (Kind.FLOAT, BinaryOperator.SUB): lambda l, r, s: float_literal(l.value - r.value, s),
        (Kind.FLOAT, BinaryOperator.MUL): lambda l, r, s: float_literal(l.value * r.value, s),
        (Kind.FLOAT, BinaryOperator.DIV): _float_div,
        (Kind.FLOAT, BinaryOperator.REM): _float_rem,
        (Kind.BOOLEAN, BinaryOperator.BITAND): lambda l, r, s: bool_literal(l.value and r.value, s),
        (Kind.BOOLEAN, BinaryOperator.BITOR): lambda l, r, s: bool_literal(l.value or r.value, s),
        (Kind.STRING, BinaryOperator.ADD): lambda l, r, s: string_literal(l.value + r.value, s),
        (Kind.ARRAY, BinaryOperator.ADD): lambda l, r, s: array_literal(l.value + r.value, s),
        (Kind.OBJECT, BinaryOperator.ADD): _object_merge,
    }
)


def binary_op(op: BinaryOperator | str, left: Literal, right: Literal, span: Optional[Span] = None) -> Literal:
    """
    Apply ``op`` to two literals of the same kind.

    Cross-kind operands and unsupported (kind, operator) pairs raise
    TypeMismatchError naming the operator.
    """
    operator = BinaryOperator(op)
    if span is None:
        span = left.span
    if left.kind is not right.kind:
        raise TypeMismatchError.at(
            f"'{operator.value}' is not defined between {left.kind.label} and {right.kind.label}", span
        )
    operation = _OPERATIONS.get((left.kind, operator))
    if operation is None:
        raise TypeMismatchError.at(f"'{operator.value}' is not supported for {left.kind.label}", span)
    return operation(left, right, span)
