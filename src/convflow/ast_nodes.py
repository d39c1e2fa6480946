"""
Statement and expression tree nodes consumed by the convflow runtime.

The tree is produced by an external parser; the runtime only reads it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Union

if TYPE_CHECKING:  # pragma: no cover
    from .runtime.values import Literal


@dataclass(frozen=True)
class Span:
    """Location span for diagnostics."""

    line: int
    column: int


class Infix(str, Enum):
    EQUAL = "=="
    GREATER_THAN = ">"
    GREATER_THAN_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_EQUAL = "<="
    AND = "&&"
    OR = "||"

    @property
    def is_logical(self) -> bool:
        return self in (Infix.AND, Infix.OR)


@dataclass(frozen=True)
class LiteralExpr:
    """A literal value written in the script."""

    value: "Literal"
    span: Optional[Span] = None


@dataclass(frozen=True)
class Identifier:
    name: str
    span: Optional[Span] = None


@dataclass(frozen=True)
class FunctionCall:
    """name(args...), only meaningful as the tail of a builder path."""

    name: str
    args: List["Expr"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass(frozen=True)
class BuilderExpr:
    """Chained access such as memory.get("x") or name.to_uppercase()."""

    target: "Expr"
    call: "Expr"
    span: Optional[Span] = None


@dataclass(frozen=True)
class InterpolatedString:
    """Ordered parts concatenated as text, e.g. "Hello {{name}}"."""

    parts: List["Expr"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass(frozen=True)
class InfixExpr:
    op: Infix
    left: "Expr"
    right: "Expr"
    span: Optional[Span] = None


@dataclass(frozen=True)
class Action:
    """Builtin action call such as Text("hi") or Button("ok")."""

    builtin: str
    args: List["Expr"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass(frozen=True)
class Empty:
    span: Optional[Span] = None


@dataclass(frozen=True)
class Block:
    statements: List["Statement"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass(frozen=True)
class Reserved:
    """Reserved keyword statement: say, retry, ask, respond."""

    keyword: str
    arg: Union["Expr", Block]
    span: Optional[Span] = None


@dataclass(frozen=True)
class IfStmt:
    cond: "Expr"
    consequence: Block
    span: Optional[Span] = None


@dataclass(frozen=True)
class GotoStmt:
    """goto <step>, optionally into another flow."""

    step: Optional[str] = None
    flow: Optional[str] = None
    span: Optional[Span] = None


@dataclass(frozen=True)
class RememberStmt:
    name: str
    value: "Expr"
    span: Optional[Span] = None


Expr = Union[LiteralExpr, Identifier, FunctionCall, BuilderExpr, InterpolatedString, InfixExpr, Action, Empty]
Statement = Union[Reserved, IfStmt, GotoStmt, RememberStmt]

RESERVED_KEYWORDS = frozenset({"say", "retry", "ask", "respond"})
