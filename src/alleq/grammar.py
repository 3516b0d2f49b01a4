"""Textual invocation grammar for equality assertions.

An invocation is written as source text::

    e0, e1, ..., en[,][;][ template, arg0, arg1, ...]

The value list must hold at least two expressions. A single top-level ``;``
separates it from an optional custom message, whose first expression is a
``str.format`` template and whose remaining expressions (positional, ``*``,
``name=`` or ``**``) are its arguments. The four trailing-separator variants
``a, b``, ``a, b,``, ``a, b;`` and ``a, b,;`` all mean the same thing.

Parsing never evaluates anything. Binding an invocation to a namespace turns
every expression into a :class:`~alleq.assertions.base.Deferred`, and the
message into a producer that formats only when called.
"""

from __future__ import annotations

import ast
import functools
import io
import logging
import sys
import tokenize
from dataclasses import dataclass, field
from types import CodeType
from typing import Any, Callable

from alleq.assertions.base import Deferred, Message
from alleq.assertions.eq import assert_all_eq
from alleq.config import debug_assertions_enabled
from alleq.errors import InvocationSyntaxError

logger = logging.getLogger("alleq.grammar")

_CALLEE = "_"
_OPEN = frozenset("([{")
_CLOSE = frozenset(")]}")


def _split_sections(source: str) -> tuple[str, str | None]:
    """Split ``source`` at its single top-level ``;``, if any."""
    # Wrapping in brackets lets the value list span lines freely.
    text = f"({source}\n)"
    line_starts = [0]
    for line in text.split("\n"):
        line_starts.append(line_starts[-1] + len(line) + 1)

    depth = 0
    closed_at = -1
    semicolons: list[int] = []
    try:
        for tok in tokenize.generate_tokens(io.StringIO(text).readline):
            if tok.type != tokenize.OP:
                continue
            offset = line_starts[tok.start[0] - 1] + tok.start[1]
            if tok.string in _OPEN:
                depth += 1
            elif tok.string in _CLOSE:
                depth -= 1
                if depth == 0:
                    closed_at = offset
                    break
            elif tok.string == ";" and depth == 1:
                # Offsets in the wrapped text are one past the source's.
                semicolons.append(offset - 1)
    except (tokenize.TokenError, SyntaxError) as exc:
        raise InvocationSyntaxError("malformed invocation", source) from exc

    if closed_at != len(text) - 1:
        raise InvocationSyntaxError("unbalanced brackets", source)
    if len(semicolons) > 1:
        raise InvocationSyntaxError("only one ';' may separate the message", source)
    if not semicolons:
        return source, None
    split = semicolons[0]
    return source[:split], source[split + 1 :]


def _parse_section(section: str, source: str) -> ast.Call:
    try:
        tree = ast.parse(f"{_CALLEE}({section}\n)", mode="eval")
    except SyntaxError as exc:
        raise InvocationSyntaxError(f"invalid expression ({exc.msg})", source) from exc

    call = tree.body
    if not (
        isinstance(call, ast.Call)
        and isinstance(call.func, ast.Name)
        and call.func.id == _CALLEE
    ):
        raise InvocationSyntaxError("unbalanced brackets", source)
    return call


def _thunk(node: ast.expr) -> ast.Lambda:
    return ast.Lambda(
        args=ast.arguments(
            posonlyargs=[],
            args=[],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=node,
    )


def _compile(values: list[ast.expr], message: ast.Call | None) -> CodeType:
    """Compile to an expression yielding ``(value_thunks, message_thunk)``."""
    producers = ast.Tuple(elts=[_thunk(v) for v in values], ctx=ast.Load())
    if message is None:
        message_node: ast.expr = ast.Constant(value=None)
    else:
        template, *args = message.args
        parts = ast.Tuple(
            elts=[
                template,
                ast.Tuple(elts=list(args), ctx=ast.Load()),
                ast.Dict(
                    keys=[
                        ast.Constant(value=kw.arg) if kw.arg is not None else None
                        for kw in message.keywords
                    ],
                    values=[kw.value for kw in message.keywords],
                ),
            ],
            ctx=ast.Load(),
        )
        message_node = _thunk(parts)

    tree = ast.Expression(
        body=ast.Tuple(elts=[producers, message_node], ctx=ast.Load())
    )
    ast.fix_missing_locations(tree)
    return compile(tree, "<alleq invocation>", "eval")


@dataclass(frozen=True)
class Invocation:
    """A parsed, normalized invocation.

    Attributes:
        source: The text as written.
        expressions: Normalized source of each value expression.
        template: Normalized source of the message template, if any.
        message_args: Normalized source of each message argument.
    """

    source: str = field(compare=False)
    expressions: tuple[str, ...]
    template: str | None = None
    message_args: tuple[str, ...] = ()
    code: CodeType | None = field(default=None, repr=False, compare=False)

    @property
    def arity(self) -> int:
        return len(self.expressions)

    @property
    def has_message(self) -> bool:
        return self.template is not None

    @property
    def dispatch(self) -> str:
        return "two-value" if self.arity == 2 else "n-ary"

    @property
    def canonical(self) -> str:
        text = ", ".join(self.expressions)
        if self.template is not None:
            text = f"{text}; {', '.join((self.template, *self.message_args))}"
        return text

    def bind(
        self, namespace: dict[str, Any]
    ) -> tuple[list[Deferred], Callable[[], str] | None]:
        """Bind to ``namespace`` without evaluating any expression."""
        producers, message_parts = eval(self.code, namespace)
        values = [Deferred(p) for p in producers]
        if message_parts is None:
            return values, None

        def produce() -> str:
            template, args, kwargs = message_parts()
            return Message(template, *args, **kwargs).render()

        return values, produce

    def run(self, namespace: dict[str, Any]) -> None:
        values, message = self.bind(namespace)
        logger.debug(f"Running {self.dispatch} invocation: {self.canonical}")
        assert_all_eq(*values, msg=message)


@functools.lru_cache(maxsize=256)
def parse_invocation(source: str) -> Invocation:
    """Parse and normalize ``source``.

    Raises:
        InvocationSyntaxError: if the invocation is malformed.
    """
    head, tail = _split_sections(source)

    values = _parse_section(head, source)
    if values.keywords:
        raise InvocationSyntaxError("keyword arguments are not values", source)
    if any(isinstance(arg, ast.Starred) for arg in values.args):
        raise InvocationSyntaxError("starred expressions are not values", source)
    if len(values.args) < 2:
        raise InvocationSyntaxError(
            f"at least 2 expressions are required, got {len(values.args)}", source
        )

    message: ast.Call | None = None
    if tail is not None:
        message = _parse_section(tail, source)
        if not message.args and not message.keywords:
            # A bare trailing ';' carries no message.
            message = None
        elif not message.args or isinstance(message.args[0], ast.Starred):
            raise InvocationSyntaxError("message requires a template first", source)

    expressions = tuple(ast.unparse(arg) for arg in values.args)
    template = None
    message_args: tuple[str, ...] = ()
    if message is not None:
        template = ast.unparse(message.args[0])
        message_args = tuple(ast.unparse(arg) for arg in message.args[1:]) + tuple(
            f"{kw.arg}={ast.unparse(kw.value)}"
            if kw.arg is not None
            else f"**{ast.unparse(kw.value)}"
            for kw in message.keywords
        )

    return Invocation(
        source=source,
        expressions=expressions,
        template=template,
        message_args=message_args,
        code=_compile(values.args, message),
    )


def _namespace(
    globals: dict[str, Any] | None, locals: dict[str, Any] | None
) -> dict[str, Any]:
    if globals is None:
        frame = sys._getframe(2)
        globals = frame.f_globals
        if locals is None:
            locals = frame.f_locals
    # Deferred bodies only see globals, so locals are folded in.
    return {**globals, **(locals or {})}


def check(
    source: str,
    globals: dict[str, Any] | None = None,
    locals: dict[str, Any] | None = None,
) -> None:
    """Assert that all expressions of ``source`` are equal.

    Expressions are evaluated in ``globals``/``locals``, defaulting to the
    caller's namespace as the builtin :func:`eval` does.
    """
    invocation = parse_invocation(source)
    invocation.run(_namespace(globals, locals))


def debug_check(
    source: str,
    globals: dict[str, Any] | None = None,
    locals: dict[str, Any] | None = None,
) -> None:
    """Like :func:`check`, but only evaluates when debug assertions are enabled.

    A malformed ``source`` is rejected either way.
    """
    invocation = parse_invocation(source)
    if not debug_assertions_enabled():
        logger.debug(f"Debug assertions disabled, skipping: {invocation.canonical}")
        return
    invocation.run(_namespace(globals, locals))
