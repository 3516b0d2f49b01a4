from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="alleq", help="Assert that several expressions are all equal")

EXIT_MISMATCH = 1
EXIT_SYNTAX = 2
EXIT_ERROR = 3


def _apply_config(config: str | None) -> None:
    import yaml
    from pydantic import ValidationError

    from alleq.config import configure, load_config

    if config is None:
        return
    config_path = Path(config)
    if not config_path.exists():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(EXIT_SYNTAX)
    try:
        configure(load_config(config_path))
    except (ValidationError, yaml.YAMLError) as e:
        typer.echo(f"Error: invalid config file {config}: {e}", err=True)
        raise typer.Exit(EXIT_ERROR)


def _build_namespace(defines: list[str]) -> dict:
    namespace: dict = {}
    for item in defines:
        name, sep, expr = item.partition("=")
        name = name.strip()
        if not sep or not name.isidentifier():
            typer.echo(f"Error: --define expects NAME=EXPR, got {item!r}", err=True)
            raise typer.Exit(EXIT_SYNTAX)
        try:
            namespace[name] = eval(expr, namespace)
        except Exception as e:
            typer.echo(f"Error: --define {name} failed: {e!r}", err=True)
            raise typer.Exit(EXIT_ERROR)
    return namespace


@app.command()
def check(
    invocation: str = typer.Argument(
        help="Expressions to compare, e.g. \"3, 2 + 1, 1 + 1 + 1; 'sum {}', 3\""
    ),
    define: list[str] | None = typer.Option(
        None, "--define", "-D", help="Bind NAME=EXPR before evaluating (repeatable)"
    ),
    debug_only: bool = typer.Option(
        False, "--debug-only", help="Skip evaluation when debug assertions are disabled"
    ),
    config: str | None = typer.Option(None, help="Path to an alleq YAML config"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    log_file: str | None = typer.Option(None, help="Append debug output to this file"),
):
    """Check that every expression equals the first one."""
    from alleq.config import debug_assertions_enabled
    from alleq.errors import EqualityAssertionError, InvocationSyntaxError
    from alleq.grammar import debug_check, check as run_check, parse_invocation
    from alleq.verbose import setup_logger

    if verbose or log_file:
        setup_logger(Path(log_file) if log_file else None, verbose=verbose)
    _apply_config(config)

    try:
        parsed = parse_invocation(invocation)
    except InvocationSyntaxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_SYNTAX)

    if debug_only and not debug_assertions_enabled():
        debug_check(invocation, {})
        typer.echo("skipped: debug assertions are disabled")
        return

    namespace = _build_namespace(define or [])

    try:
        run_check(invocation, namespace)
    except EqualityAssertionError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXIT_MISMATCH)
    except Exception as e:
        typer.echo(f"Error: evaluation failed: {e!r}", err=True)
        raise typer.Exit(EXIT_ERROR)

    typer.echo(f"ok: {parsed.arity} values are equal")


@app.command()
def parse(
    invocation: str = typer.Argument(help="Invocation text to parse"),
):
    """Show how an invocation is normalized and dispatched."""
    from alleq.errors import InvocationSyntaxError
    from alleq.grammar import parse_invocation

    try:
        parsed = parse_invocation(invocation)
    except InvocationSyntaxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_SYNTAX)

    typer.echo(f"canonical: {parsed.canonical}")
    typer.echo(f"arity: {parsed.arity}")
    typer.echo(f"dispatch: {parsed.dispatch}")
    typer.echo(f"message: {'yes' if parsed.has_message else 'no'}")


@app.command("config")
def show_config(
    config: str | None = typer.Option(None, help="Path to an alleq YAML config"),
):
    """Print the resolved configuration as JSON."""
    from alleq.config import get_config

    _apply_config(config)
    typer.echo(get_config().model_dump_json(indent=2))
