"""Diagnostic rendering and the fatal failure path."""

from __future__ import annotations

import logging
from typing import Any, NoReturn

from alleq.assertions.base import MessageSource, render_message
from alleq.errors import EqualityAssertionError

logger = logging.getLogger("alleq.assertions")


def format_failure(
    position: int, left: Any, right: Any, message: str | None = None
) -> str:
    """Render the diagnostic for a mismatch at ``position``.

    The ``0:`` label is padded by the width of the position so both labels
    end in the same column::

        equality assertion failed at position 0 and 12
          0: `1`,
         12: `0`
    """
    index = str(position)
    pad = " " * len(index)
    text = (
        f"equality assertion failed at position 0 and {index}\n"
        f"{pad}0: `{left!r}`,\n"
        f" {index}: `{right!r}`"
    )
    if message is not None:
        text = f"{text}: {message}"
    return text


def fail(
    position: int, left: Any, right: Any, msg: MessageSource = None
) -> NoReturn:
    """Render the diagnostic and raise EqualityAssertionError.

    The diagnostic is logged at DEBUG; the raised error carries it.
    """
    message = render_message(msg)
    diagnostic = format_failure(position, left, right, message)
    logger.debug(diagnostic)
    raise EqualityAssertionError(
        diagnostic, position=position, left=left, right=right, message=message
    )
