"""
Builtin actions: the outbound message producers a script can call with say.

Hosts plug their own rendering through ``BuiltinResolver``; the default
resolver below gives every builtin a plain JSON shape.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Union

from ..ast_nodes import Span
from ..errors import UnknownMethodError, UsageError
from ..runtime.values import Kind, Literal
from .models import Message

__all__ = ["BUILTIN_NAMES", "BuiltinResult", "BuiltinResolver", "DefaultBuiltinResolver"]

BUILTIN_NAMES = ("Typing", "Wait", "Text", "Url", "Image", "OneOf", "Button")

BuiltinResult = Union[Message, List[Message], None]


class BuiltinResolver(Protocol):
    def resolve(self, name: str, args: Sequence[Literal], span: Optional[Span] = None) -> BuiltinResult:
        ...


def _require(args: Sequence[Literal], minimum: int, maximum: Optional[int], usage: str, span: Optional[Span]) -> None:
    if len(args) < minimum or (maximum is not None and len(args) > maximum):
        raise UsageError.at(f"usage: {usage}", span)


def _string_arg(arg: Literal, usage: str, span: Optional[Span]) -> str:
    if arg.kind is not Kind.STRING:
        raise UsageError.at(f"usage: {usage}; expected a string, got {arg.kind.label}", span)
    return arg.value


class DefaultBuiltinResolver:
    """Renders the seven builtin actions as simple JSON messages."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> None:
        self.rng = rng or random.Random(seed)
        self._handlers: Dict[str, Callable[[Sequence[Literal], Optional[Span]], BuiltinResult]] = {
            "Typing": self._duration("typing"),
            "Wait": self._duration("wait"),
            "Text": self._text,
            "Url": self._url,
            "Image": self._image,
            "OneOf": self._one_of,
            "Button": self._button,
        }

    def resolve(self, name: str, args: Sequence[Literal], span: Optional[Span] = None) -> BuiltinResult:
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownMethodError.at(f"no builtin named '{name}'", span)
        return handler(list(args), span)

    def _duration(self, content_type: str) -> Callable[[Sequence[Literal], Optional[Span]], BuiltinResult]:
        usage = f"{content_type.title()}(Primitive<Int || Float>)"

        def render(args: Sequence[Literal], span: Optional[Span]) -> BuiltinResult:
            _require(args, 1, 1, usage, span)
            if args[0].kind not in (Kind.INT, Kind.FLOAT):
                raise UsageError.at(f"usage: {usage}", span)
            return Message(content_type=content_type, content={"duration": args[0].value})

        return render

    def _text(self, args: Sequence[Literal], span: Optional[Span]) -> BuiltinResult:
        _require(args, 1, 1, "Text(Primitive<T>)", span)
        return Message(content_type="text", content={"text": args[0].to_string()})

    def _url(self, args: Sequence[Literal], span: Optional[Span]) -> BuiltinResult:
        usage = "Url(Primitive<String>, text?, title?)"
        _require(args, 1, 3, usage, span)
        values = [_string_arg(arg, usage, span) for arg in args]
        url = values[0]
        text = values[1] if len(values) > 1 else url
        title = values[2] if len(values) > 2 else text
        return Message(content_type="url", content={"url": url, "text": text, "title": title})

    def _image(self, args: Sequence[Literal], span: Optional[Span]) -> BuiltinResult:
        usage = "Image(Primitive<String>)"
        _require(args, 1, 1, usage, span)
        return Message(content_type="image", content={"url": _string_arg(args[0], usage, span)})

    def _one_of(self, args: Sequence[Literal], span: Optional[Span]) -> BuiltinResult:
        _require(args, 1, None, "OneOf(Primitive<T>, ...)", span)
        choice = self.rng.choice(list(args))
        return Message(content_type="text", content={"text": choice.to_string()})

    def _button(self, args: Sequence[Literal], span: Optional[Span]) -> BuiltinResult:
        usage = "Button(Primitive<String>, accepts...)"
        _require(args, 1, None, usage, span)
        title = _string_arg(args[0], usage, span)
        accepts = [title, *(arg.to_string() for arg in args[1:])]
        return Message(
            content_type="button",
            content={"title": title, "buttons": [{"title": title, "payload": title, "accepts": accepts}]},
        )
