from __future__ import annotations

from typing import Optional

from ... import ast_nodes
from ...errors import UnresolvedVariableError, UsageError
from ...runtime.memory import SCOPE_ALIASES, Event, Memory
from ...runtime.values import Kind, Literal, Right, call_method, string_literal

__all__ = ["ExpressionResolver", "is_value_expr"]

VALUE_EXPRS = (ast_nodes.LiteralExpr, ast_nodes.Identifier, ast_nodes.BuilderExpr, ast_nodes.InterpolatedString)


def is_value_expr(expr: object) -> bool:
    """True for the expression shapes that reduce to a single literal."""
    return isinstance(expr, VALUE_EXPRS)


class ExpressionResolver:
    """Reduces value expressions to literals against one turn's memory and event."""

    def __init__(self, memory: Memory, event: Optional[Event] = None, *, allow_write: bool = True) -> None:
        self.memory = memory
        self.event = event
        self.allow_write = allow_write

    def read_only(self) -> "ExpressionResolver":
        return ExpressionResolver(self.memory, self.event, allow_write=False)

    def resolve(self, expr: ast_nodes.Expr) -> Literal:
        if isinstance(expr, ast_nodes.LiteralExpr):
            return expr.value
        if isinstance(expr, ast_nodes.Identifier):
            return self.memory.resolve_identifier(expr.name, self.event, expr.span)
        if isinstance(expr, ast_nodes.BuilderExpr):
            return self._resolve_builder(expr)
        if isinstance(expr, ast_nodes.InterpolatedString):
            text = "".join(self.resolve(part).to_string() for part in expr.parts)
            return string_literal(text, expr.span)
        raise UnresolvedVariableError.at(
            f"{type(expr).__name__} is not a value; expected a literal, identifier, builder path or interpolated string",
            getattr(expr, "span", None),
        )

    def _resolve_builder(self, expr: ast_nodes.BuilderExpr) -> Literal:
        """
        Resolve ``target.call(args)``.

        A target naming a scope (``past``, ``memory``, ``metadata``) is a memory
        lookup with ``get``/``first`` and one string key. Any other target is
        resolved as a value first, which reads metadata before current and past,
        and the call is dispatched to that value's method table.
        """
        call = expr.call
        if not isinstance(call, ast_nodes.FunctionCall):
            raise UnresolvedVariableError.at("a builder path must end with a function call", expr.span)
        target = expr.target
        if isinstance(target, ast_nodes.Identifier) and target.name in SCOPE_ALIASES:
            if len(call.args) != 1:
                raise UnresolvedVariableError.at(f"{target.name}.{call.name} expects exactly one key", expr.span)
            key = self.resolve(call.args[0])
            if key.kind is not Kind.STRING:
                raise UnresolvedVariableError.at(
                    f"{target.name}.{call.name} expects a string key, got {key.kind.label}", expr.span
                )
            return self.memory.resolve_builder(target.name, call.name, key.value, expr.span)
        value = self.resolve(target)
        args = [self.resolve(arg) for arg in call.args]
        result, right = call_method(value, call.name, args, call.span or expr.span)
        if right is Right.WRITE and not self.allow_write:
            raise UsageError.at(f"'{call.name}' modifies its value and cannot be used here", expr.span)
        return result
