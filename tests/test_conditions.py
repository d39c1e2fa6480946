import pytest

from convflow import ast_nodes
from convflow.ast_nodes import Infix
from convflow.flows.steps import ConditionEvaluator, ExpressionResolver
from convflow.runtime.memory import Event, Memory
from convflow.runtime.values import from_json


def _lit(value) -> ast_nodes.LiteralExpr:
    return ast_nodes.LiteralExpr(from_json(value))


def _var(name: str) -> ast_nodes.Identifier:
    return ast_nodes.Identifier(name)


def _infix(op: Infix, left, right) -> ast_nodes.InfixExpr:
    return ast_nodes.InfixExpr(op, left, right)


def _evaluate(expr, memory: Memory | None = None, event: Event | None = None) -> bool:
    resolver = ExpressionResolver(memory or Memory.from_json(metadata={"age": 20, "name": "Ada"}), event)
    return ConditionEvaluator(resolver).evaluate(expr)


@pytest.mark.parametrize(
    "op, left, right, expected",
    [
        (Infix.EQUAL, 1, 1, True),
        (Infix.EQUAL, 1, 1.0, False),
        (Infix.GREATER_THAN, 2, 1, True),
        (Infix.GREATER_THAN_EQUAL, 1, 1, True),
        (Infix.LESS_THAN, "a", "b", True),
        (Infix.LESS_THAN_EQUAL, 2.5, 2.0, False),
        (Infix.GREATER_THAN, 1, "0", False),
        (Infix.LESS_THAN, [1], [2], False),
        (Infix.LESS_THAN_EQUAL, None, None, True),
    ],
)
def test_leaf_comparisons(op, left, right, expected):
    assert _evaluate(_infix(op, _lit(left), _lit(right))) is expected


def test_logical_operator_between_values_is_true():
    assert _evaluate(_infix(Infix.AND, _lit(False), _lit(False))) is True
    assert _evaluate(_infix(Infix.OR, _lit(0), _lit(""))) is True


def test_lone_value_is_true_when_it_resolves():
    assert _evaluate(_lit(False)) is True
    assert _evaluate(_var("age")) is True
    assert _evaluate(_var("missing")) is False


def test_identifiers_resolve_from_memory():
    assert _evaluate(_infix(Infix.GREATER_THAN_EQUAL, _var("age"), _lit(18))) is True
    assert _evaluate(_infix(Infix.EQUAL, _var("name"), _lit("Grace"))) is False


def test_event_comparison():
    cond = _infix(Infix.EQUAL, _var("event"), _lit("yes"))
    assert _evaluate(cond, event=Event("text", {"text": "yes"})) is True
    assert _evaluate(cond) is False


def test_logical_combinations_of_conditions():
    adult = _infix(Infix.GREATER_THAN_EQUAL, _var("age"), _lit(18))
    senior = _infix(Infix.GREATER_THAN_EQUAL, _var("age"), _lit(65))
    assert _evaluate(_infix(Infix.AND, adult, senior)) is False
    assert _evaluate(_infix(Infix.OR, adult, senior)) is True
    assert _evaluate(_infix(Infix.EQUAL, senior, senior)) is True
    assert _evaluate(_infix(Infix.GREATER_THAN, adult, senior)) is True
    assert _evaluate(_infix(Infix.LESS_THAN, adult, senior)) is False


def test_and_with_plain_operand_uses_condition():
    adult = _infix(Infix.GREATER_THAN_EQUAL, _var("age"), _lit(18))
    minor = _infix(Infix.LESS_THAN, _var("age"), _lit(18))
    assert _evaluate(_infix(Infix.AND, _var("name"), adult)) is True
    assert _evaluate(_infix(Infix.AND, minor, _var("name"))) is False
    assert _evaluate(_infix(Infix.AND, _var("missing"), adult)) is False


def test_or_with_plain_operand_is_true_without_checking_condition():
    failing = _infix(Infix.EQUAL, _var("missing"), _lit(1))
    assert _evaluate(_infix(Infix.OR, _var("name"), failing)) is True
    assert _evaluate(_infix(Infix.OR, failing, _lit(False))) is True
    assert _evaluate(_infix(Infix.OR, _var("missing"), failing)) is False


def test_comparison_between_condition_and_value_is_false():
    adult = _infix(Infix.GREATER_THAN_EQUAL, _var("age"), _lit(18))
    assert _evaluate(_infix(Infix.EQUAL, adult, _lit(True))) is False


def test_failures_inside_condition_are_false():
    assert _evaluate(_infix(Infix.EQUAL, _var("missing"), _lit(1))) is False
    bad_method = ast_nodes.BuilderExpr(_var("age"), ast_nodes.FunctionCall("to_uppercase"))
    assert _evaluate(_infix(Infix.EQUAL, bad_method, _lit("20"))) is False
    assert _evaluate(ast_nodes.Action("Text", [_lit("x")])) is False
    assert _evaluate(_infix(Infix.EQUAL, ast_nodes.Empty(), _lit(1))) is False
    assert _evaluate(None) is False


def test_read_methods_are_allowed():
    length = ast_nodes.BuilderExpr(_var("name"), ast_nodes.FunctionCall("length"))
    assert _evaluate(_infix(Infix.EQUAL, length, _lit(3))) is True


def test_write_methods_make_condition_false():
    memory = Memory.from_json(metadata={"items": [1]})
    pushed = ast_nodes.BuilderExpr(_var("items"), ast_nodes.FunctionCall("push", [_lit(2)]))
    assert _evaluate(_infix(Infix.EQUAL, pushed, _lit([1, 2])), memory) is False
    assert memory.get("metadata", "items").to_json() == [1]


def test_scope_builders_in_conditions():
    memory = Memory.from_json(past={"plan": "pro"})
    memory.remember("plan", from_json("free"))
    past_plan = ast_nodes.BuilderExpr(_var("past"), ast_nodes.FunctionCall("get", [_lit("plan")]))
    current_plan = ast_nodes.BuilderExpr(_var("memory"), ast_nodes.FunctionCall("get", [_lit("plan")]))
    assert _evaluate(_infix(Infix.EQUAL, past_plan, _lit("pro")), memory) is True
    assert _evaluate(_infix(Infix.EQUAL, current_plan, _lit("free")), memory) is True
