"""Error kinds raised by alleq."""

from __future__ import annotations

from typing import Any


class EqualityAssertionError(AssertionError):
    """Raised when an equality assertion finds a value that differs from the anchor.

    Attributes:
        position: 1-based index of the first value that differed from the
            anchor (the anchor itself is position 0).
        left: The anchor value.
        right: The mismatched value.
        message: The rendered custom message, or None when none was given.
    """

    def __init__(
        self,
        diagnostic: str,
        *,
        position: int,
        left: Any,
        right: Any,
        message: str | None = None,
    ) -> None:
        super().__init__(diagnostic)
        self.position = position
        self.left = left
        self.right = right
        self.message = message


class InvocationSyntaxError(SyntaxError):
    """Raised when an invocation is malformed, before anything is evaluated."""

    def __init__(self, msg: str, source: str) -> None:
        super().__init__(f"{msg}: {source!r}")
        self.source = source
