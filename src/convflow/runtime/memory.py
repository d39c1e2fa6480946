"""
Layered conversation memory.

Three append-only scopes map a key to the ordered history of values written
under it. ``metadata`` and ``past`` are read-only inside the runtime; ``current``
receives values written by ``remember`` during the turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from ..ast_nodes import Span
from ..errors import UnresolvedVariableError
from .values import Literal, from_json, string_literal

log = logging.getLogger(__name__)

EVENT_IDENTIFIER = "event"


class Scope(str, Enum):
    METADATA = "metadata"
    CURRENT = "current"
    PAST = "past"


# Script prefixes for builder paths such as memory.get("x").
SCOPE_ALIASES: Mapping[str, Scope] = MappingProxyType(
    {
        "metadata": Scope.METADATA,
        "memory": Scope.CURRENT,
        "past": Scope.PAST,
    }
)

LOOKUP_ORDER = (Scope.METADATA, Scope.CURRENT, Scope.PAST)

BUILDER_FUNCTIONS = frozenset({"get", "first"})


@dataclass(frozen=True)
class Event:
    """The user input that triggered the turn."""

    content_type: str
    content: Any = None

    def text(self) -> Optional[str]:
        if self.content_type != "text":
            return None
        if isinstance(self.content, str):
            return self.content
        if isinstance(self.content, Mapping):
            value = self.content.get("text")
            return value if isinstance(value, str) else None
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"content_type": self.content_type, "content": self.content}


@dataclass
class Memory:
    metadata: Dict[str, List[Literal]] = field(default_factory=dict)
    current: Dict[str, List[Literal]] = field(default_factory=dict)
    past: Dict[str, List[Literal]] = field(default_factory=dict)

    @classmethod
    def from_json(
        cls,
        metadata: Mapping[str, Any] | None = None,
        current: Mapping[str, Any] | None = None,
        past: Mapping[str, Any] | None = None,
    ) -> "Memory":
        """Build a snapshot where every JSON value becomes a single entry."""

        def _scope(values: Mapping[str, Any] | None) -> Dict[str, List[Literal]]:
            return {str(key): [from_json(value)] for key, value in (values or {}).items()}

        return cls(metadata=_scope(metadata), current=_scope(current), past=_scope(past))

    def scope(self, scope: Scope | str) -> Dict[str, List[Literal]]:
        scope = Scope(scope)
        if scope is Scope.METADATA:
            return self.metadata
        if scope is Scope.CURRENT:
            return self.current
        return self.past

    def has(self, scope: Scope | str, key: str) -> bool:
        return bool(self.scope(scope).get(key))

    def get(self, scope: Scope | str, key: str) -> Optional[Literal]:
        """Last value written under ``key``."""
        history = self.scope(scope).get(key)
        return history[-1] if history else None

    def first(self, scope: Scope | str, key: str) -> Optional[Literal]:
        """Earliest value written under ``key``."""
        history = self.scope(scope).get(key)
        return history[0] if history else None

    def history(self, scope: Scope | str, key: str) -> List[Literal]:
        return list(self.scope(scope).get(key, []))

    def remember(self, key: str, value: Literal) -> None:
        self.current.setdefault(key, []).append(value)

    def remember_all(self, writes: Mapping[str, Literal]) -> None:
        """Append a batch of writes, e.g. an accumulator's memory_writes."""
        for key, value in writes.items():
            self.remember(key, value)

    def lookup(self, name: str) -> Optional[Literal]:
        for scope in LOOKUP_ORDER:
            value = self.get(scope, name)
            if value is not None:
                return value
        return None

    def resolve_identifier(self, name: str, event: Optional[Event] = None, span: Optional[Span] = None) -> Literal:
        """
        Resolve a bare identifier.

        ``event`` resolves against the incoming event's text; other names are
        looked up in metadata, then current, then past.
        """
        if name == EVENT_IDENTIFIER:
            return event_literal(event, span)
        value = self.lookup(name)
        if value is None:
            raise UnresolvedVariableError.at(f"unknown variable '{name}' in memory", span)
        return value

    def resolve_builder(self, scope_name: str, function: str, key: str, span: Optional[Span] = None) -> Literal:
        """Resolve ``<scope_name>.<function>("<key>")``."""
        scope = SCOPE_ALIASES.get(scope_name)
        if scope is None:
            raise UnresolvedVariableError.at(f"'{scope_name}' is not a memory scope", span)
        if function == "get":
            value = self.get(scope, key)
        elif function == "first":
            value = self.first(scope, key)
        else:
            raise UnresolvedVariableError.at(
                f"unknown memory action '{scope_name}.{function}'; expected one of {sorted(BUILDER_FUNCTIONS)}", span
            )
        if value is None:
            raise UnresolvedVariableError.at(f"'{key}' is not in {scope_name}", span)
        return value


def event_literal(event: Optional[Event], span: Optional[Span] = None) -> Literal:
    if event is None:
        raise UnresolvedVariableError.at("no event was received for this turn", span)
    text = event.text()
    if text is None:
        log.debug("Event content type %r is not interpretable by the runtime", event.content_type)
        raise UnresolvedVariableError.at(f"event content type '{event.content_type}' is not supported", span)
    return string_literal(text, span, content_type="text")
