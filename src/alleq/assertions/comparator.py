"""Star-topology comparison of a tail of values against an anchor."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from alleq.assertions.base import Mismatch, resolve

logger = logging.getLogger("alleq.assertions")


def find_mismatch(anchor: Any, tail: Iterable[Any]) -> Mismatch | None:
    """Return the first tail value that is not equal to the anchor, if any.

    The anchor is resolved once. Each tail value is resolved right before its
    comparison and compared exactly once, as ``anchor == value``; nothing after
    the first mismatch is resolved or compared.
    """
    left = resolve(anchor)
    position = 0
    for item in tail:
        position += 1
        right = resolve(item)
        if not left == right:
            logger.debug(f"Mismatch at position {position} after {position} comparisons")
            return Mismatch(position=position, left=left, right=right)
    logger.debug(f"All {position + 1} values equal after {position} comparisons")
    return None
