"""
kscope - Front End for the Kaleidoscope Toy Language
====================================================

This package converts Kaleidoscope source into abstract syntax trees for
a downstream compiler. It does not execute, optimize, or generate code.

Main Components
---------------
- **frontend**: lexer, parser, AST, and top-level driver
- **cli**: the ``kparse`` command-line tool

Quick Start
-----------
Parse a program:
    >>> from kscope import parse_program
    >>> program = parse_program("def double(x) x*2; double(21)")
    >>> program.definitions[0].proto
    Prototype(name='double', args=['x'])

Parse one expression:
    >>> from kscope import Parser
    >>> Parser("1 - 2 - 3").parse_expression().ok
    True

Or use the command-line tool:
    $ kparse program.ks
    $ kparse --ast program.ks
    $ echo "1+2*3" | kparse --tokens
"""

__version__ = "1.0.0"
__author__ = "kscope contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from kscope.errors import KscopeError, ConfigError, SourceLocation
from kscope.frontend import (
    Lexer,
    Token,
    TokenType,
    Parser,
    ParserConfig,
    ParseResult,
    TopLevelDriver,
    ASTConsumer,
    CollectingConsumer,
    parse_program,
    KscopeSyntaxError,
    NumberExpr,
    VariableExpr,
    BinaryExpr,
    CallExpr,
    Prototype,
    Function,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Exception hierarchy
    "KscopeError",
    "ConfigError",
    "KscopeSyntaxError",
    "SourceLocation",
    # Front end
    "Lexer",
    "Token",
    "TokenType",
    "Parser",
    "ParserConfig",
    "ParseResult",
    "TopLevelDriver",
    "ASTConsumer",
    "CollectingConsumer",
    "parse_program",
    # AST
    "NumberExpr",
    "VariableExpr",
    "BinaryExpr",
    "CallExpr",
    "Prototype",
    "Function",
]
