"""
Runtime value system: literals, arithmetic and per-kind methods.
"""

from .arithmetic import BinaryOperator, binary_op
from .literal import (
    Kind,
    Literal,
    array_literal,
    bool_literal,
    compare,
    equals,
    float_literal,
    from_json,
    int_literal,
    null_literal,
    object_literal,
    string_literal,
)
from .methods import METHODS, Right, call_method, method_names

__all__ = [
    "BinaryOperator",
    "Kind",
    "Literal",
    "METHODS",
    "Right",
    "array_literal",
    "binary_op",
    "bool_literal",
    "call_method",
    "compare",
    "equals",
    "float_literal",
    "from_json",
    "int_literal",
    "method_names",
    "null_literal",
    "object_literal",
    "string_literal",
]
