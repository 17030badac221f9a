"""
Kaleidoscope Recursive Descent Parser
=====================================

This module implements the parser for the Kaleidoscope language. It
pulls tokens from the lexer one at a time (a single token of lookahead,
no backtracking) and builds AST nodes.

Grammar (Informal EBNF)
-----------------------
program      ::= (definition | external | toplevelexpr | ';')*
definition   ::= 'def' prototype expression
external     ::= 'extern' prototype
prototype    ::= identifier '(' identifier* ')'
toplevelexpr ::= expression
expression   ::= primary (binop primary)*
primary      ::= identifier
               | identifier '(' (expression (',' expression)*)? ')'
               | number
               | '(' expression ')'

Binary Operators
----------------
Binary expressions are parsed by precedence climbing over the table in
ParserConfig (by default '<' 10, '+' 20, '-' 20, '*' 40). Operators of
equal precedence associate to the left; a tighter operator to the right
of an operand takes that operand as its own left side.

Error Handling
--------------
The private _parse_* methods raise KscopeSyntaxError subclasses, which
abort the whole construct being parsed. The public parse_* methods
convert that into a ParseResult, so callers always get either a
complete tree or a diagnostic, never a partial tree.

Example Usage
-------------
>>> from kscope.frontend.parser import Parser
>>> parser = Parser("1 + 2 * 3")
>>> result = parser.parse_expression()
>>> result.value
BinaryExpr(op='+', lhs=NumberExpr(value=1.0), rhs=BinaryExpr(op='*', ...))
"""

from typing import Callable, Optional, TextIO, TypeVar, Union
import logging

from kscope.frontend.source import CharSource
from kscope.frontend.lexer import Lexer, Token, TokenType
from kscope.frontend.config import ParserConfig
from kscope.frontend.result import ParseResult
from kscope.frontend.ast import (
    Expression,
    NumberExpr,
    VariableExpr,
    BinaryExpr,
    CallExpr,
    Prototype,
    Function,
)
from kscope.frontend.errors import (
    KscopeSyntaxError,
    UnexpectedTokenError,
    MissingTokenError,
    NestingDepthError,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Parser:
    """
    Recursive descent parser for Kaleidoscope.

    The parser holds exactly one current token. Every parse operation
    starts at the current token and leaves the current token one past
    the last token it consumed.

    Attributes:
        lexer: The token source
        config: Operator table and limits
        current: The current (lookahead) token, None before the first read
    """

    def __init__(
        self,
        source: Union[Lexer, str, TextIO, CharSource],
        config: Optional[ParserConfig] = None,
        filename: Optional[str] = None,
    ):
        """
        Initialize the parser.

        Args:
            source: A Lexer, or anything a Lexer can read from
            config: Parser configuration (defaults to ParserConfig())
            filename: Source name for error locations when building a Lexer
        """
        self.lexer = source if isinstance(source, Lexer) else Lexer(source, filename)
        self.config = config or ParserConfig()
        self.current: Optional[Token] = None

        # Current expression nesting, checked against config.max_nesting_depth
        self._depth = 0

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def next_token(self) -> Token:
        """Read the next token from the lexer and make it current."""
        self.current = self.lexer.next_token()
        return self.current

    def at_end(self) -> bool:
        """Return True if the current token is EOF."""
        return self.current is not None and self.current.type == TokenType.EOF

    def _token_precedence(self) -> int:
        """Precedence of the current token, -1 if it is not a binary operator."""
        if self.current.type != TokenType.CHAR:
            return -1
        return self.config.precedence_of(self.current.value)

    def _missing(self, message: str) -> MissingTokenError:
        return MissingTokenError(message, self.current.describe(), self.current.location)

    def _attempt(self, parse: Callable[..., T], *args) -> ParseResult[T]:
        """Run a raising parse method and wrap its outcome in a ParseResult."""
        if self.current is None:
            self.next_token()
        try:
            return ParseResult.success(parse(*args))
        except KscopeSyntaxError as e:
            logger.debug("parse failed: %s", e)
            return ParseResult.failure(e)
        except RecursionError:
            # max_nesting_depth set above what the interpreter stack allows
            error = NestingDepthError(self.config.max_nesting_depth, self.current.location)
            logger.debug("parse failed: %s", error)
            return ParseResult.failure(error)

    # =========================================================================
    # Public Parse Operations
    # =========================================================================

    def parse_expression(self) -> ParseResult[Expression]:
        """expression ::= primary binoprhs"""
        return self._attempt(self._parse_expression)

    def parse_primary(self) -> ParseResult[Expression]:
        """primary ::= identifierexpr | numberexpr | parenexpr"""
        return self._attempt(self._parse_primary)

    def parse_identifier_expr(self) -> ParseResult[Expression]:
        """identifierexpr ::= identifier | identifier '(' expression* ')'"""
        return self._attempt(self._parse_identifier_expr)

    def parse_paren_expr(self) -> ParseResult[Expression]:
        """parenexpr ::= '(' expression ')'"""
        return self._attempt(self._parse_paren_expr)

    def parse_bin_op_rhs(self, min_precedence: int, lhs: Expression) -> ParseResult[Expression]:
        """binoprhs ::= (binop primary)*, for operators binding at least min_precedence"""
        return self._attempt(self._parse_bin_op_rhs, min_precedence, lhs)

    def parse_prototype(self) -> ParseResult[Prototype]:
        """prototype ::= identifier '(' identifier* ')'"""
        return self._attempt(self._parse_prototype)

    def parse_definition(self) -> ParseResult[Function]:
        """definition ::= 'def' prototype expression"""
        return self._attempt(self._parse_definition)

    def parse_extern(self) -> ParseResult[Prototype]:
        """external ::= 'extern' prototype"""
        return self._attempt(self._parse_extern)

    def parse_top_level_expr(self) -> ParseResult[Function]:
        """toplevelexpr ::= expression, wrapped in an anonymous function"""
        return self._attempt(self._parse_top_level_expr)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        self._depth += 1
        try:
            if self._depth > self.config.max_nesting_depth:
                raise NestingDepthError(self.config.max_nesting_depth, self.current.location)
            lhs = self._parse_primary()
            return self._parse_bin_op_rhs(0, lhs)
        finally:
            self._depth -= 1

    def _parse_primary(self) -> Expression:
        token = self.current

        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier_expr()

        if token.type == TokenType.NUMBER:
            self.next_token()  # consume the number
            return NumberExpr(token.value, location=token.location)

        if token.is_char("("):
            return self._parse_paren_expr()

        raise UnexpectedTokenError(token.describe(), token.location)

    def _parse_paren_expr(self) -> Expression:
        self.next_token()  # eat (
        expr = self._parse_expression()

        if not self.current.is_char(")"):
            raise self._missing("expected ')'")
        self.next_token()  # eat )
        return expr

    def _parse_identifier_expr(self) -> Expression:
        name_token = self.current
        self.next_token()  # eat identifier

        # Simple variable reference
        if not self.current.is_char("("):
            return VariableExpr(name_token.value, location=name_token.location)

        # Call
        self.next_token()  # eat (
        args = []
        if not self.current.is_char(")"):
            while True:
                args.append(self._parse_expression())

                if self.current.is_char(")"):
                    break
                if not self.current.is_char(","):
                    raise self._missing("Expected ')' or ',' in argument list")
                self.next_token()

        self.next_token()  # eat )
        return CallExpr(name_token.value, args, location=name_token.location)

    def _parse_bin_op_rhs(self, min_precedence: int, lhs: Expression) -> Expression:
        """
        Precedence climbing loop.

        Consumes (operator, primary) pairs for as long as the operator binds
        at least as tightly as min_precedence. A token outside the operator
        table has precedence -1 and so always ends the loop.
        """
        while True:
            token_prec = self._token_precedence()
            if token_prec < min_precedence:
                return lhs

            op_token = self.current
            self.next_token()  # eat binop

            rhs = self._parse_primary()

            # If the next operator binds tighter, let it take rhs as its lhs
            next_prec = self._token_precedence()
            if token_prec < next_prec:
                rhs = self._parse_bin_op_rhs(token_prec + 1, rhs)

            lhs = BinaryExpr(op_token.value, lhs, rhs, location=op_token.location)

    # =========================================================================
    # Declaration Parsing
    # =========================================================================

    def _parse_prototype(self) -> Prototype:
        if self.current.type != TokenType.IDENTIFIER:
            raise self._missing("Expected function name in prototype")

        name_token = self.current
        self.next_token()

        if not self.current.is_char("("):
            raise self._missing("Expected '(' in prototype")

        arg_names = []
        while self.next_token().type == TokenType.IDENTIFIER:
            arg_names.append(self.current.value)

        if not self.current.is_char(")"):
            raise self._missing("Expected ')' in prototype")
        self.next_token()  # eat )

        return Prototype(name_token.value, arg_names, location=name_token.location)

    def _parse_definition(self) -> Function:
        """Parse a definition; the current token is the 'def' keyword."""
        def_token = self.current
        self.next_token()  # eat def
        proto = self._parse_prototype()
        body = self._parse_expression()
        return Function(proto, body, location=def_token.location)

    def _parse_extern(self) -> Prototype:
        """Parse an extern; the current token is the 'extern' keyword."""
        self.next_token()  # eat extern
        return self._parse_prototype()

    def _parse_top_level_expr(self) -> Function:
        start = self.current.location
        body = self._parse_expression()
        proto = Prototype(
            self.config.anonymous_function_name,
            [],
            anonymous=True,
            location=start,
        )
        return Function(proto, body, location=start)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_expression_source(
    source: str,
    config: Optional[ParserConfig] = None,
    filename: str = "<input>",
) -> ParseResult[Expression]:
    """
    Parse a single expression from source text.

    Trailing input after the expression is left unread.

    Args:
        source: The expression text
        config: Parser configuration
        filename: Source name for error locations

    Returns:
        ParseResult holding the expression or the syntax error
    """
    return Parser(source, config, filename).parse_expression()
