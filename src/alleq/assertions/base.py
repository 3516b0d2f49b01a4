"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


class Deferred:
    """A value produced on demand by a zero-argument callable.

    Comparators resolve a Deferred only when they reach it, so values past the
    first mismatch are never produced.
    """

    __slots__ = ("producer",)

    def __init__(self, producer: Callable[[], Any]) -> None:
        if not callable(producer):
            raise TypeError(f"Deferred expects a callable, got {type(producer).__name__}")
        self.producer = producer

    def __repr__(self) -> str:
        return f"Deferred({self.producer!r})"


def defer(producer: Callable[[], Any]) -> Deferred:
    return Deferred(producer)


def resolve(value: Any) -> Any:
    if isinstance(value, Deferred):
        return value.producer()
    return value


class Message:
    """A custom failure message, formatted only when rendered.

    The template follows ``str.format`` syntax; positional and keyword
    arguments are captured as given and never touched on the success path.
    """

    __slots__ = ("template", "args", "kwargs")

    def __init__(self, template: str, *args: Any, **kwargs: Any) -> None:
        self.template = template
        self.args = args
        self.kwargs = kwargs

    def render(self) -> str:
        return self.template.format(*self.args, **self.kwargs)

    def __repr__(self) -> str:
        return f"Message({self.template!r})"


MessageSource = str | Message | Callable[[], str] | None


def render_message(source: MessageSource) -> str | None:
    """Turn a message source into text, invoking any producer exactly once."""
    if source is None:
        return None
    if isinstance(source, str):
        return source
    if isinstance(source, Message):
        return source.render()
    if callable(source):
        return str(source())
    raise TypeError(
        f"Unsupported message type '{type(source).__name__}': "
        "expected str, Message or a zero-argument callable"
    )


@dataclass(frozen=True)
class Mismatch:
    """First disagreement found by a comparator.

    Attributes:
        position: 1-based index of the mismatched value; the anchor is 0.
        left: The anchor value.
        right: The value that did not compare equal to the anchor.
    """

    position: int
    left: Any
    right: Any
