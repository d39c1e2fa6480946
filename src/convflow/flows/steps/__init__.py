from .conditions import ConditionEvaluator
from .expressions import ExpressionResolver, is_value_expr

__all__ = ["ConditionEvaluator", "ExpressionResolver", "is_value_expr"]
