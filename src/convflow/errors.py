"""
Error types for the convflow runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    TYPE_MISMATCH = "type_mismatch"
    DIVISION_BY_ZERO = "division_by_zero"
    UNKNOWN_METHOD = "unknown_method"
    USAGE = "usage"
    UNRESOLVED_VARIABLE = "unresolved_variable"
    MALFORMED_BLOCK = "malformed_block"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    MISSING_REQUIRED_FIELD = "missing_required_field"


@dataclass
class ConvflowError(Exception):
    """Base error with optional location metadata."""

    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    kind = ErrorKind.USAGE
    code = "CF-0000"

    @classmethod
    def at(cls, message: str, span: Any = None) -> "ConvflowError":
        """Build an error positioned at ``span`` (anything with line/column)."""
        if span is None:
            return cls(message)
        return cls(message, line=getattr(span, "line", None), column=getattr(span, "column", None))

    def __str__(self) -> str:  # pragma: no cover - trivial
        location = ""
        if self.line is not None:
            location = f" (line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
            location += ")"
        return f"{self.code}: {self.message}{location}"

    def to_diagnostic(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "kind": self.kind.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "severity": "error",
        }


class TypeMismatchError(ConvflowError):
    """Operation applied to values of incompatible kinds."""

    kind = ErrorKind.TYPE_MISMATCH
    code = "CF-1001"


class DivisionByZeroError(ConvflowError):
    kind = ErrorKind.DIVISION_BY_ZERO
    code = "CF-1002"


class UnknownMethodError(ConvflowError):
    """Method or builtin name not registered for the target."""

    kind = ErrorKind.UNKNOWN_METHOD
    code = "CF-1003"


class UsageError(ConvflowError):
    """Wrong arity or argument kind passed to a value method."""

    kind = ErrorKind.USAGE
    code = "CF-1004"


class UnresolvedVariableError(ConvflowError):
    """Identifier, builder path or event lookup failed."""

    kind = ErrorKind.UNRESOLVED_VARIABLE
    code = "CF-2001"


class MalformedBlockError(ConvflowError):
    """Statement shape not accepted at block level."""

    kind = ErrorKind.MALFORMED_BLOCK
    code = "CF-3001"


class CircularDependencyError(ConvflowError):
    kind = ErrorKind.CIRCULAR_DEPENDENCY
    code = "CF-4001"


class MissingRequiredFieldError(ConvflowError):
    kind = ErrorKind.MISSING_REQUIRED_FIELD
    code = "CF-4002"
