"""The `calc` command: evaluate expressions given as arguments, or prompt for them.

Malformed input is reported and never fatal: the interactive loop just asks for
the next line.
"""
import logging
import sys
from typing import Annotated, List, Optional

import typer

from evaluator import evaluate
from lexer import LexError, lex
from parser import MalformedExpression, canonicalize_num, parse, unparse

log = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)


def process(line, show_ast=False):
    """Evaluate one line of input and return the text to print.

    >>> process("2 ^ (1 + 1 + 1)"), process("2^3^2", show_ast=True)
    ('8', '2^3^2')
    """
    ast = parse(lex(line))
    log.debug("%r parsed as %r", line, ast)
    return unparse(ast) if show_ast else canonicalize_num(evaluate(ast))


def run_repl(stdin, stdout, stderr, prompt="> ", show_ast=False):
    """Read-evaluate-print until `stdin` is exhausted; return the number of failed lines."""
    failures = 0
    while True:
        stdout.write(prompt)
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write("\n")
            return failures
        if not line.strip():
            continue
        try:
            print(process(line, show_ast), file=stdout)
        except (LexError, MalformedExpression) as e:
            failures += 1
            print(f"Could not parse expression! {e}", file=stderr)


@app.command()
def main(
    expressions: Annotated[
        Optional[List[str]],
        typer.Argument(help="Expressions to evaluate; prompt interactively if none"),
    ] = None,
    show_ast: Annotated[
        bool, typer.Option("--ast", help="Print the parsed structure instead of the value")
    ] = False,
    prompt: Annotated[
        str, typer.Option("--prompt", envvar="CALC_PROMPT", help="Interactive prompt")
    ] = "> ",
    debug: Annotated[bool, typer.Option("--debug", envvar="DEBUG", help="Log at DEBUG level")] = False,
) -> None:
    """Evaluate arithmetic over + - * / ^ and parentheses."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not expressions:
        run_repl(sys.stdin, sys.stdout, sys.stderr, prompt, show_ast)
        return
    failures = 0
    for expr in expressions:
        try:
            typer.echo(process(expr, show_ast))
        except (LexError, MalformedExpression) as e:
            failures += 1
            typer.echo(f"Could not parse expression! {e}", err=True)
    if failures:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
