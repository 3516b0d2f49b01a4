"""Variadic equality assertions."""

from alleq.assertions.base import Deferred, Message, Mismatch, defer, render_message, resolve
from alleq.assertions.comparator import find_mismatch
from alleq.assertions.eq import assert_all_eq, assert_eq, debug_assert_all_eq
from alleq.assertions.reporter import fail, format_failure

__all__ = [
    "Deferred",
    "Message",
    "Mismatch",
    "assert_all_eq",
    "assert_eq",
    "debug_assert_all_eq",
    "defer",
    "fail",
    "find_mismatch",
    "format_failure",
    "render_message",
    "resolve",
]
