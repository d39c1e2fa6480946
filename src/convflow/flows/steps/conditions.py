from __future__ import annotations

import logging

from ... import ast_nodes
from ...ast_nodes import Infix
from ...errors import ConvflowError, MalformedBlockError
from ...runtime.values import Literal, compare, equals
from .expressions import ExpressionResolver, is_value_expr

__all__ = ["ConditionEvaluator"]

log = logging.getLogger(__name__)


class ConditionEvaluator:
    """
    Reduces an if-condition to a boolean.

    The evaluator never raises: any resolution failure or unsupported shape
    makes the whole condition false. Conditions are read-only, so value
    methods that modify their target also fail the condition.
    """

    def __init__(self, resolver: ExpressionResolver) -> None:
        self.resolver = resolver.read_only()

    def evaluate(self, expr: ast_nodes.Expr) -> bool:
        try:
            return self._evaluate_root(expr)
        except ConvflowError as exc:
            log.debug("Condition evaluated to false: %s", exc)
            return False
        except Exception as exc:  # malformed trees from a host parser
            log.debug("Condition evaluated to false on unexpected %s: %s", type(exc).__name__, exc)
            return False

    def _evaluate_root(self, expr: ast_nodes.Expr) -> bool:
        if isinstance(expr, ast_nodes.InfixExpr):
            return self._evaluate_infix(Infix(expr.op), expr.left, expr.right)
        if isinstance(expr, ast_nodes.LiteralExpr):
            return True
        if isinstance(expr, (ast_nodes.Identifier, ast_nodes.BuilderExpr)):
            self.resolver.resolve(expr)
            return True
        raise MalformedBlockError.at(f"{type(expr).__name__} cannot be used as a condition", getattr(expr, "span", None))

    def _evaluate_infix(self, op: Infix, left: ast_nodes.Expr, right: ast_nodes.Expr) -> bool:
        left_is_infix = isinstance(left, ast_nodes.InfixExpr)
        right_is_infix = isinstance(right, ast_nodes.InfixExpr)
        if left_is_infix and right_is_infix:
            return self._compare_bools(
                op,
                self._evaluate_infix(Infix(left.op), left.left, left.right),
                self._evaluate_infix(Infix(right.op), right.left, right.right),
            )
        if left_is_infix or right_is_infix:
            infix, operand = (left, right) if left_is_infix else (right, left)
            return self._evaluate_mixed(op, infix, operand)
        if is_value_expr(left) and is_value_expr(right):
            return self._compare_literals(op, self.resolver.resolve(left), self.resolver.resolve(right))
        raise MalformedBlockError.at(
            f"cannot compare {type(left).__name__} with {type(right).__name__}", getattr(left, "span", None)
        )

    def _evaluate_mixed(self, op: Infix, infix: ast_nodes.InfixExpr, operand: ast_nodes.Expr) -> bool:
        # The plain operand only has to resolve. Under `or` the infix side is
        # not evaluated at all and the result is true.
        if not is_value_expr(operand):
            raise MalformedBlockError.at(f"{type(operand).__name__} is not a value", getattr(operand, "span", None))
        self.resolver.resolve(operand)
        if op is Infix.AND:
            return self._evaluate_infix(Infix(infix.op), infix.left, infix.right)
        if op is Infix.OR:
            return True
        raise MalformedBlockError.at(f"'{op.value}' between a condition and a value needs && or ||", infix.span)

    @staticmethod
    def _compare_literals(op: Infix, left: Literal, right: Literal) -> bool:
        if op.is_logical:
            return True
        if op is Infix.EQUAL:
            return equals(left, right)
        ordering = compare(left, right)
        if ordering is None:
            return False
        if op is Infix.GREATER_THAN:
            return ordering > 0
        if op is Infix.GREATER_THAN_EQUAL:
            return ordering >= 0
        if op is Infix.LESS_THAN:
            return ordering < 0
        return ordering <= 0

    @staticmethod
    def _compare_bools(op: Infix, left: bool, right: bool) -> bool:
        if op is Infix.AND:
            return left and right
        if op is Infix.OR:
            return left or right
        if op is Infix.EQUAL:
            return left == right
        if op is Infix.GREATER_THAN:
            return left and not right
        if op is Infix.GREATER_THAN_EQUAL:
            return left >= right
        if op is Infix.LESS_THAN:
            return not left and right
        return left <= right
