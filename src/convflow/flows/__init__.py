"""
Flows subsystem for convflow: block interpretation and its results.
"""

from .builtins import BUILTIN_NAMES, BuiltinResolver, DefaultBuiltinResolver
from .engine import BlockInterpreter, interpret_block
from .models import Accumulator, Message, merge_accumulators

__all__ = [
    "Accumulator",
    "BUILTIN_NAMES",
    "BlockInterpreter",
    "BuiltinResolver",
    "DefaultBuiltinResolver",
    "Message",
    "interpret_block",
    "merge_accumulators",
]
