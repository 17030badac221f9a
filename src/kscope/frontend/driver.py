"""
Top-Level Driver
================

The driver owns the read loop of a parse session. It looks at the
current token, routes the input to the definition, extern, or
top-level expression parser, hands each completed entity to an AST
consumer, and writes a progress line to its diagnostic sink.

Dispatch
--------
| Current token | Action                                     |
|---------------|--------------------------------------------|
| EOF           | stop                                       |
| ';'           | consume and continue                       |
| def           | parse a definition                         |
| extern        | parse an extern                            |
| anything else | parse a top-level expression               |

Error Recovery
--------------
A failed entity never ends the session. The driver writes
"Error: <message>" to the sink, records the error, skips exactly one
token, and resumes dispatch. This does not always realign with the next
well-formed entity: a few tokens after the error may be misread.

Example Usage
-------------
>>> from kscope.frontend.driver import parse_program
>>> consumer = parse_program("def f(x) x*2; extern sin(a); f(3)")
>>> [fn.name for fn in consumer.definitions]
['f']
"""

from dataclasses import dataclass, field
from typing import Optional, TextIO, Union
import logging
import sys

from kscope.frontend.source import CharSource
from kscope.frontend.lexer import TokenType
from kscope.frontend.config import ParserConfig
from kscope.frontend.parser import Parser
from kscope.frontend.ast import Function, Prototype
from kscope.frontend.errors import ErrorCollector, FrontendError


logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "ready> "


# =============================================================================
# AST Consumers
# =============================================================================

class ASTConsumer:
    """
    Receiver for the entities a parse session produces.

    This is the hand-off point to a backend. Subclasses override the
    handle_* methods they need; the defaults do nothing.
    """

    def handle_definition(self, function: Function) -> None:
        pass

    def handle_extern(self, prototype: Prototype) -> None:
        pass

    def handle_top_level_expr(self, function: Function) -> None:
        pass


class CollectingConsumer(ASTConsumer):
    """
    Consumer that keeps every entity it receives, in arrival order.

    Attributes:
        definitions: Functions from 'def'
        externs: Prototypes from 'extern'
        top_level: Anonymous functions wrapping bare expressions
        entities: All of the above, interleaved in input order
        summary: Session summary, when filled by parse_program
    """

    def __init__(self):
        self.definitions: list[Function] = []
        self.externs: list[Prototype] = []
        self.top_level: list[Function] = []
        self.entities: list[Union[Function, Prototype]] = []

        # Set by parse_program once the session ends
        self.summary: Optional["SessionSummary"] = None

    def handle_definition(self, function: Function) -> None:
        self.definitions.append(function)
        self.entities.append(function)

    def handle_extern(self, prototype: Prototype) -> None:
        self.externs.append(prototype)
        self.entities.append(prototype)

    def handle_top_level_expr(self, function: Function) -> None:
        self.top_level.append(function)
        self.entities.append(function)


# =============================================================================
# Session Summary
# =============================================================================

@dataclass
class SessionSummary:
    """
    Counts and errors of a finished parse session.

    Attributes:
        definitions: Number of definitions parsed
        externs: Number of externs parsed
        top_level_exprs: Number of top-level expressions parsed
        errors: Every error the session recovered from
    """
    definitions: int = 0
    externs: int = 0
    top_level_exprs: int = 0
    errors: ErrorCollector = field(default_factory=ErrorCollector)

    @property
    def error_count(self) -> int:
        return self.errors.error_count()

    @property
    def success(self) -> bool:
        return not self.errors.has_errors()

    def __str__(self) -> str:
        return (
            f"{self.definitions} definitions, {self.externs} externs, "
            f"{self.top_level_exprs} top-level exprs, {self.error_count} errors"
        )


# =============================================================================
# Driver
# =============================================================================

class TopLevelDriver:
    """
    Runs a parse session to end of input.

    Attributes:
        parser: The parser the session pulls entities from
        consumer: Receiver of parsed entities
        diagnostics: Text stream for progress and error lines
        prompt: Written to diagnostics before each dispatch, if set
    """

    def __init__(
        self,
        parser: Parser,
        consumer: Optional[ASTConsumer] = None,
        diagnostics: Optional[TextIO] = None,
        prompt: Optional[str] = None,
    ):
        self.parser = parser
        self.consumer = consumer or ASTConsumer()
        self.diagnostics = diagnostics if diagnostics is not None else sys.stderr
        self.prompt = prompt
        self.summary = SessionSummary()

    def run(self) -> SessionSummary:
        """
        Dispatch top-level entities until end of input.

        Returns:
            SessionSummary for this run
        """
        self.summary = SessionSummary()

        if self.parser.current is None:
            self.parser.next_token()

        while True:
            if self.prompt:
                self._write(self.prompt, newline=False)

            token = self.parser.current
            if token.type == TokenType.EOF:
                break

            if token.is_char(";"):
                # Ignore top-level semicolons
                self.parser.next_token()
            elif token.type == TokenType.DEF:
                self.handle_definition()
            elif token.type == TokenType.EXTERN:
                self.handle_extern()
            else:
                self.handle_top_level_expression()

        logger.info("session finished: %s", self.summary)
        return self.summary

    # =========================================================================
    # Entity Handlers
    # =========================================================================

    def handle_definition(self) -> None:
        result = self.parser.parse_definition()
        if result.ok:
            logger.debug("definition %s", result.value.name)
            self.summary.definitions += 1
            self._write("Parsed a function definition.")
            self.consumer.handle_definition(result.value)
        else:
            self._recover(result.error)

    def handle_extern(self) -> None:
        result = self.parser.parse_extern()
        if result.ok:
            logger.debug("extern %s", result.value.name)
            self.summary.externs += 1
            self._write("Parsed an extern")
            self.consumer.handle_extern(result.value)
        else:
            self._recover(result.error)

    def handle_top_level_expression(self) -> None:
        result = self.parser.parse_top_level_expr()
        if result.ok:
            logger.debug("top-level expression")
            self.summary.top_level_exprs += 1
            self._write("Parsed a top-level expr")
            self.consumer.handle_top_level_expr(result.value)
        else:
            self._recover(result.error)

    def _recover(self, error: FrontendError) -> None:
        """Report a failed entity and skip one token."""
        self.summary.errors.add(error)
        self._write(f"Error: {error.message}")
        logger.debug("recovering from %s", error)
        self.parser.next_token()

    def _write(self, text: str, newline: bool = True) -> None:
        self.diagnostics.write(text + ("\n" if newline else ""))
        self.diagnostics.flush()


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_program(
    source: Union[str, TextIO, CharSource],
    config: Optional[ParserConfig] = None,
    diagnostics: Optional[TextIO] = None,
    filename: Optional[str] = None,
) -> CollectingConsumer:
    """
    Parse a whole program and collect its entities.

    Diagnostics go to `diagnostics` (default: stderr). The session
    summary is stored on the returned consumer as `summary`.

    Args:
        source: Program text, a text stream, or a CharSource
        config: Parser configuration
        diagnostics: Text stream for progress and error lines
        filename: Source name for error locations

    Returns:
        CollectingConsumer holding every parsed entity
    """
    consumer = CollectingConsumer()
    driver = TopLevelDriver(Parser(source, config, filename), consumer, diagnostics)
    consumer.summary = driver.run()
    return consumer
