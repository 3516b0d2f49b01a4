"""Variadic equality assertions with positional diagnostics."""

from alleq.assertions import (
    Deferred,
    Message,
    assert_all_eq,
    assert_eq,
    debug_assert_all_eq,
    defer,
)
from alleq.errors import EqualityAssertionError, InvocationSyntaxError
from alleq.grammar import Invocation, check, debug_check, parse_invocation

__all__ = [
    "Deferred",
    "EqualityAssertionError",
    "Invocation",
    "InvocationSyntaxError",
    "Message",
    "assert_all_eq",
    "assert_eq",
    "check",
    "debug_assert_all_eq",
    "debug_check",
    "defer",
    "parse_invocation",
]
