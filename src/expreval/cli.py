"""
expreval command line.

Commands:
- eval: evaluate an expression against --var assignments
- tokens: show the token stream of an expression
- ast: show how an expression is parsed
"""

from __future__ import annotations

import json
import logging
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from expreval._version import get_version
from expreval.coercion import ResultType
from expreval.config import EvaluatorOptions
from expreval.errors import ExpressionError, VariableNotFoundError
from expreval.evaluator import evaluate
from expreval.expressions import format_number
from expreval.library import library_functions
from expreval.parser import parse_expr
from expreval.tokenizer import tokenize

app = typer.Typer(
    help="Tokenize, parse and evaluate expressions.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"expreval {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log parsing and evaluation details"),
) -> None:
    """expreval CLI main callback for global options."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _parse_assignments(assignments: list[str]) -> dict[str, Any]:
    """Turn ``#name=value`` items into a variable table.

    Values are decoded as JSON when possible (numbers, booleans, arrays) and
    kept as plain strings otherwise.
    """
    values: dict[str, Any] = {}
    for item in assignments:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or len(name) < 2 or name[0] not in "#$":
            raise typer.BadParameter(
                f"Expected #name=value or $name=value, got {item!r}", param_hint="--var"
            )
        try:
            values[name] = json.loads(raw)
        except json.JSONDecodeError:
            values[name] = raw
    return values


def _display(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def _fail(error: ExpressionError) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {type(error).__name__}", highlight=False)
    err_console.print(str(error), markup=False, highlight=False)
    return typer.Exit(code=1)


@app.command("eval")
def eval_command(
    expression: str = typer.Argument(..., help="Expression to evaluate"),
    var: list[str] | None = typer.Option(
        None, "--var", "-v", help="Variable assignment, e.g. -v '#count=3' (repeatable)"
    ),
    library: bool = typer.Option(
        False, "--library", "-l", help="Enable the built-in math functions"
    ),
    result_type: ResultType = typer.Option(
        ResultType.ANY, "--as", "-t", case_sensitive=False, help="Coerce the result to this type"
    ),
    allow_trailing: bool = typer.Option(
        False,
        "--allow-trailing",
        help="Ignore tokens after a complete expression (also EXPREVAL_ALLOW_TRAILING_TOKENS)",
    ),
) -> None:
    """Evaluate an expression and print the result."""
    values = _parse_assignments(var or [])

    def variables(name: str) -> Any:
        if name not in values:
            raise VariableNotFoundError(name)
        return values[name]

    options = EvaluatorOptions.from_env()
    if allow_trailing:
        options = EvaluatorOptions(allow_trailing_tokens=True)
    try:
        result = evaluate(
            expression,
            variables,
            library_functions if library else None,
            result_type=result_type,
            options=options,
        )
    except ExpressionError as e:
        raise _fail(e) from e

    console.print(_display(result), markup=False, highlight=False)


@app.command("tokens")
def tokens_command(
    expression: str = typer.Argument(..., help="Expression to tokenize"),
) -> None:
    """Show the token stream of an expression."""
    try:
        tokens = tokenize(expression)
    except ExpressionError as e:
        raise _fail(e) from e

    table = Table(title="Tokens")
    table.add_column("Pos", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Text")
    table.add_column("Value")
    for tok in tokens:
        table.add_row(str(tok.pos), tok.kind.value, escape(tok.text), escape(_display(tok.value)))
    console.print(table)


@app.command("ast")
def ast_command(
    expression: str = typer.Argument(..., help="Expression to parse"),
) -> None:
    """Show the parsed expression with explicit grouping."""
    try:
        expr = parse_expr(expression)
    except ExpressionError as e:
        raise _fail(e) from e

    console.print(str(expr), markup=False, highlight=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
