"""
Kaleidoscope Front End
======================

This package turns Kaleidoscope source text into abstract syntax trees
ready for a compiler backend. It provides:

- A lexer pulling characters one at a time from any character source
- A recursive descent parser with precedence climbing for binary operators
- A top-level driver that routes definitions, externs, and bare
  expressions to the parser and recovers from malformed input

Pipeline
--------
    Characters → Lexer → Parser → Top-Level Driver → AST consumer

Usage
-----
>>> from kscope.frontend import Parser
>>> Parser("foo(1, 2)").parse_expression().value
CallExpr(callee='foo', args=[NumberExpr(value=1.0), NumberExpr(value=2.0)])

>>> from kscope.frontend import parse_program
>>> program = parse_program("def add(a b) a+b; add(1, 2)")
Parsed a function definition.
Parsed a top-level expr

Language
--------
- Only type: double precision floating point
- Binary operators: < + - *
- Function definitions (def), declarations (extern), calls
- Comments start with # and run to end of line
"""

from kscope.frontend.source import CharSource, StringSource, StreamSource, as_char_source
from kscope.frontend.lexer import Lexer, Token, TokenType, KEYWORDS, tokenize
from kscope.frontend.config import ParserConfig, DEFAULT_PRECEDENCE
from kscope.frontend.result import ParseResult
from kscope.frontend.parser import Parser, parse_expression_source
from kscope.frontend.driver import (
    ASTConsumer,
    CollectingConsumer,
    SessionSummary,
    TopLevelDriver,
    parse_program,
)
from kscope.frontend.errors import (
    FrontendError,
    KscopeSyntaxError,
    UnexpectedTokenError,
    MissingTokenError,
    NestingDepthError,
    ErrorCollector,
)
from kscope.frontend.ast import (
    ASTNode,
    Expression,
    NumberExpr,
    VariableExpr,
    BinaryExpr,
    CallExpr,
    Prototype,
    Function,
    ASTVisitor,
    ASTPrinter,
    format_expression,
)

__all__ = [
    # Sources
    "CharSource",
    "StringSource",
    "StreamSource",
    "as_char_source",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "KEYWORDS",
    "tokenize",
    # Parser
    "ParserConfig",
    "DEFAULT_PRECEDENCE",
    "ParseResult",
    "Parser",
    "parse_expression_source",
    # Driver
    "ASTConsumer",
    "CollectingConsumer",
    "SessionSummary",
    "TopLevelDriver",
    "parse_program",
    # Errors
    "FrontendError",
    "KscopeSyntaxError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "NestingDepthError",
    "ErrorCollector",
    # AST Nodes
    "ASTNode",
    "Expression",
    "NumberExpr",
    "VariableExpr",
    "BinaryExpr",
    "CallExpr",
    "Prototype",
    "Function",
    "ASTVisitor",
    "ASTPrinter",
    "format_expression",
]
