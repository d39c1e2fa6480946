"""
Block interpreter: runs one step's statements for one turn.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from .. import ast_nodes
from ..config import ConvflowConfig, load_config
from ..errors import MalformedBlockError
from ..observability.logging_utils import redact_event
from ..runtime.memory import Event, Memory
from .builtins import BuiltinResolver, BuiltinResult, DefaultBuiltinResolver
from .models import Accumulator, Message, merge_accumulators
from .steps.conditions import ConditionEvaluator
from .steps.expressions import ExpressionResolver, is_value_expr

__all__ = ["BlockInterpreter", "interpret_block"]

log = logging.getLogger(__name__)

Statements = Union[ast_nodes.Block, Sequence[ast_nodes.Statement]]


class BlockInterpreter:
    """
    Walks a statement sequence and accumulates its effects.

    Interpretation is all-or-nothing: a failing statement raises and no
    partial accumulator is returned. ``ask`` (no event), ``respond`` (event)
    and ``goto`` stop the block they appear in.
    """

    def __init__(
        self,
        memory: Memory,
        event: Optional[Event] = None,
        *,
        resolver: Optional[BuiltinResolver] = None,
        config: Optional[ConvflowConfig] = None,
    ) -> None:
        self.memory = memory
        self.event = event
        self.config = config or load_config()
        self.builtins = resolver or DefaultBuiltinResolver(seed=self.config.one_of_seed)
        self.expressions = ExpressionResolver(memory, event)
        self.conditions = ConditionEvaluator(self.expressions)

    def interpret(self, statements: Statements) -> Accumulator:
        if log.isEnabledFor(logging.DEBUG):
            log.debug(
                "Interpreting block (event=%s)",
                redact_event(self.event.to_dict()) if self.event is not None else None,
            )
        return self._interpret(self._statements_of(statements, None), depth=0)

    def _interpret(self, statements: Sequence[ast_nodes.Statement], depth: int) -> Accumulator:
        if depth > self.config.max_block_depth:
            raise MalformedBlockError(f"blocks are nested deeper than {self.config.max_block_depth} levels")
        root = Accumulator()
        for statement in statements:
            if root.halted_by_transfer:
                log.debug("Halting block at depth %d: transfer to step=%s flow=%s", depth, root.next_step, root.next_flow)
                break
            if isinstance(statement, ast_nodes.Reserved):
                keyword = statement.keyword
                if keyword in ("ask", "respond"):
                    # ask runs while waiting for input, respond once input arrived.
                    if (keyword == "ask") == (self.event is None):
                        nested = self._interpret(self._statements_of(statement.arg, statement), depth + 1)
                        log.debug("Halting block at depth %d after %s", depth, keyword)
                        return merge_accumulators(root, nested)
                    log.debug("Skipping %s at depth %d", keyword, depth)
                    continue
                if keyword in ("say", "retry"):
                    self._add_result(root, self._match_action(statement.arg))
                    continue
                raise MalformedBlockError.at(f"'{keyword}' is not a reserved keyword", statement.span)
            if isinstance(statement, ast_nodes.IfStmt):
                if self.conditions.evaluate(statement.cond):
                    nested = self._interpret(self._statements_of(statement.consequence, statement), depth + 1)
                    root = merge_accumulators(root, nested)
                continue
            if isinstance(statement, ast_nodes.GotoStmt):
                if not statement.step and not statement.flow:
                    raise MalformedBlockError.at("goto needs a step or a flow", statement.span)
                root.next_step = statement.step or root.next_step
                root.next_flow = statement.flow or root.next_flow
                continue
            if isinstance(statement, ast_nodes.RememberStmt):
                if not is_value_expr(statement.value):
                    raise MalformedBlockError.at(f"cannot remember {type(statement.value).__name__}", statement.span)
                root.add_memory_write(statement.name, self.expressions.resolve(statement.value))
                continue
            raise MalformedBlockError.at(
                f"{type(statement).__name__} is not allowed here; a block must start with a reserved keyword",
                getattr(statement, "span", None),
            )
        return root

    def _statements_of(
        self, block: object, owner: Optional[ast_nodes.Statement]
    ) -> Sequence[ast_nodes.Statement]:
        if isinstance(block, ast_nodes.Block):
            return block.statements
        if isinstance(block, (list, tuple)):
            return block
        raise MalformedBlockError.at(
            f"expected a block of statements, got {type(block).__name__}", getattr(owner, "span", None)
        )

    def _match_action(self, action: ast_nodes.Expr) -> BuiltinResult:
        if isinstance(action, ast_nodes.Action):
            args = [self.expressions.resolve(arg) for arg in action.args]
            return self.builtins.resolve(action.builtin, args, action.span)
        if isinstance(action, ast_nodes.Empty):
            return None
        if is_value_expr(action):
            return self.expressions.resolve(action).to_message()
        raise MalformedBlockError.at(f"{type(action).__name__} is not a valid action", getattr(action, "span", None))

    @staticmethod
    def _add_result(root: Accumulator, result: BuiltinResult) -> None:
        if result is None:
            return
        if isinstance(result, Message):
            root.add_message(result)
            return
        for message in result:
            root.add_message(message)


def interpret_block(
    statements: Statements,
    memory: Memory,
    event: Optional[Event] = None,
    *,
    resolver: Optional[BuiltinResolver] = None,
    config: Optional[ConvflowConfig] = None,
) -> Accumulator:
    """Interpret one step's statements for one turn."""
    return BlockInterpreter(memory, event, resolver=resolver, config=config).interpret(statements)
