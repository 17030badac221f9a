"""
kparse - Kaleidoscope Parser Command-Line Interface
===================================================

This module implements the command-line interface for the Kaleidoscope
front end. It runs a parse session over a file or standard input and
reports each definition, extern, and top-level expression as it is
parsed.

Usage Examples
--------------
Parse a file:
    $ kparse program.ks

Interactive session:
    $ kparse
    ready> def add(a b) a+b
    Parsed a function definition.
    ready> add(1, 2);
    Parsed a top-level expr

Print the parsed trees:
    $ kparse --ast program.ks

Dump tokens:
    $ echo "1+2*3" | kparse --tokens

Progress and error lines go to stderr; --ast and --tokens output goes to
stdout.
"""

from dataclasses import replace
from pathlib import Path
from typing import Optional, TextIO
import logging
import sys

import click

from kscope import __version__
from kscope.frontend.config import ParserConfig
from kscope.frontend.lexer import Lexer
from kscope.frontend.parser import Parser
from kscope.frontend.driver import ASTConsumer, TopLevelDriver, SessionSummary, DEFAULT_PROMPT
from kscope.frontend.ast import ASTPrinter, Function, Prototype
from kscope.cli.errors import ExitCode, handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


class PrintingConsumer(ASTConsumer):
    """Writes each parsed entity to stdout as soon as it arrives."""

    def __init__(self):
        self.printer = ASTPrinter()

    def _show(self, node: Function | Prototype) -> None:
        click.echo(self.printer.print(node))

    def handle_definition(self, function: Function) -> None:
        self._show(function)

    def handle_extern(self, prototype: Prototype) -> None:
        self._show(prototype)

    def handle_top_level_expr(self, function: Function) -> None:
        self._show(function)


def run_session(
    stream: TextIO,
    name: str,
    config: ParserConfig,
    show_ast: bool,
    prompt: Optional[str],
) -> SessionSummary:
    """Run one parse session over `stream`."""
    parser = Parser(stream, config, filename=name)
    consumer = PrintingConsumer() if show_ast else None
    driver = TopLevelDriver(parser, consumer, prompt=prompt)
    return driver.run()


def dump_tokens(stream: TextIO, name: str) -> None:
    """Print every token of `stream`, through EOF."""
    for token in Lexer(stream, name).tokenize():
        click.echo(repr(token))


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print each parsed entity as a tree",
)
@click.option(
    "--prompt/--no-prompt",
    default=None,
    help="Show a 'ready> ' prompt before each entity "
         "(default: on when reading from a terminal)",
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Deepest expression nesting accepted "
         "(default: $KSCOPE_MAX_NESTING_DEPTH or 100)",
)
@click.option(
    "--fail-on-error",
    is_flag=True,
    help="Exit with status 1 if any entity failed to parse",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="kparse")
def main(
    input_file: Optional[Path],
    tokens: bool,
    ast: bool,
    prompt: Optional[bool],
    max_depth: Optional[int],
    fail_on_error: bool,
    verbose: bool,
) -> None:
    """
    Parse Kaleidoscope source into syntax trees.

    INPUT_FILE is the source file to parse; standard input is read when
    it is omitted.

    Malformed definitions, externs, and expressions are reported and
    skipped; parsing always continues to the end of the input.

    \b
    Examples:
        kparse program.ks            # Report what was parsed
        kparse --ast program.ks      # Also print the trees
        kparse --tokens program.ks   # Print tokens only
        kparse                       # Interactive session
    """
    setup_logging(verbose)

    try:
        config = ParserConfig.from_env()
        if max_depth is not None:
            config = replace(config, max_nesting_depth=max_depth)

        if prompt is None:
            prompt = input_file is None and sys.stdin.isatty()
        prompt_text = DEFAULT_PROMPT if prompt else None

        if input_file is not None:
            with input_file.open(encoding="utf-8") as stream:
                if tokens:
                    dump_tokens(stream, str(input_file))
                    return
                summary = run_session(stream, str(input_file), config, ast, prompt_text)
        else:
            if tokens:
                dump_tokens(sys.stdin, "<stdin>")
                return
            summary = run_session(sys.stdin, "<stdin>", config, ast, prompt_text)

        if verbose:
            click.echo(f"Parsed: {summary}", err=True)

        if fail_on_error and not summary.success:
            click.echo(summary.errors.report(), err=True)
            sys.exit(ExitCode.BUILD_ERROR)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
