"""Public equality assertions."""

from __future__ import annotations

import logging
from typing import Any

from alleq.assertions.base import MessageSource, resolve
from alleq.assertions.comparator import find_mismatch
from alleq.assertions.reporter import fail
from alleq.config import debug_assertions_enabled

logger = logging.getLogger("alleq.assertions")


def assert_eq(left: Any, right: Any, msg: MessageSource = None) -> None:
    """Assert that two values are equal.

    On mismatch the diagnostic reports positions 0 and 1, exactly as
    ``assert_all_eq`` would for the same two values.
    """
    left_val = resolve(left)
    right_val = resolve(right)
    if not left_val == right_val:
        fail(1, left_val, right_val, msg)


def _check_arity(values: tuple[Any, ...]) -> None:
    if len(values) < 2:
        raise TypeError(
            f"assert_all_eq() requires at least 2 values, got {len(values)}"
        )


def assert_all_eq(*values: Any, msg: MessageSource = None) -> None:
    """Assert that every value is equal to the first one.

    Each value after the first is compared once against the first, in order,
    and checking stops at the first mismatch. Values wrapped with
    :func:`~alleq.assertions.base.defer` are produced only when reached.

    ``msg`` is appended to the diagnostic on failure. It may be a plain
    string, a :class:`~alleq.assertions.base.Message` or a zero-argument
    callable; neither of the latter two is evaluated unless the assertion
    fails.

    Raises:
        EqualityAssertionError: if some value differs from the first.
        TypeError: if fewer than two values are given.
    """
    _check_arity(values)
    if len(values) == 2:
        logger.debug("Dispatching 2 values to assert_eq")
        assert_eq(values[0], values[1], msg)
        return

    logger.debug(f"Comparing {len(values)} values against the anchor")
    mismatch = find_mismatch(values[0], values[1:])
    if mismatch is not None:
        fail(mismatch.position, mismatch.left, mismatch.right, msg)


def debug_assert_all_eq(*values: Any, msg: MessageSource = None) -> None:
    """Like :func:`assert_all_eq`, but only when debug assertions are enabled.

    When disabled nothing is resolved, compared or rendered. Pass values
    through :func:`~alleq.assertions.base.defer` to also skip computing them.
    """
    _check_arity(values)
    if debug_assertions_enabled():
        assert_all_eq(*values, msg=msg)
