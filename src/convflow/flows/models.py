"""
Flow runtime models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:  # pragma: no cover
    from ..runtime.values import Literal


@dataclass(frozen=True)
class Message:
    """One unit of outbound conversational output."""

    content_type: str
    content: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"content_type": self.content_type, "content": self.content}


@dataclass
class Accumulator:
    """Effects produced by interpreting one block."""

    messages: List[Message] = field(default_factory=list)
    memory_writes: Dict[str, "Literal"] = field(default_factory=dict)
    next_step: Optional[str] = None
    next_flow: Optional[str] = None

    @property
    def halted_by_transfer(self) -> bool:
        return bool(self.next_step or self.next_flow)

    def add_message(self, message: Message) -> None:
        self.messages.append(message)

    def add_memory_write(self, name: str, value: "Literal") -> None:
        self.memory_writes[name] = value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messages": [message.to_dict() for message in self.messages],
            "memory_writes": {name: value.to_json() for name, value in self.memory_writes.items()},
            "next_step": self.next_step,
            "next_flow": self.next_flow,
        }


def merge_accumulators(left: Accumulator, right: Accumulator) -> Accumulator:
    """
    Combine two accumulators into a new one.

    Messages concatenate in order, memory writes union with the right side
    winning on shared names, and next_step/next_flow take the right value
    when it is set.
    """
    writes = dict(left.memory_writes)
    writes.update(right.memory_writes)
    return Accumulator(
        messages=[*left.messages, *right.messages],
        memory_writes=writes,
        next_step=right.next_step or left.next_step,
        next_flow=right.next_flow or left.next_flow,
    )
