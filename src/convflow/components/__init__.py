"""
Schema-driven generation of composite component objects.
"""

from .generator import generate_component, merge_values, zero_value
from .schema import ComponentSchema, ComponentType, FieldSpec, Rule

__all__ = [
    "ComponentSchema",
    "ComponentType",
    "FieldSpec",
    "Rule",
    "generate_component",
    "merge_values",
    "zero_value",
]
