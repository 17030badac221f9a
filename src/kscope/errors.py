"""
kscope Error Hierarchy
======================

This module defines the root of the exception hierarchy for kscope.
All exceptions inherit from KscopeError, allowing callers to catch all
package errors with a single except clause if desired.

Exception Hierarchy
-------------------
KscopeError (base)
├── ConfigError - invalid parser configuration
└── FrontendError (kscope.frontend.errors)
    └── KscopeSyntaxError - lexer and parser syntax errors
        ├── UnexpectedTokenError - token cannot start or continue a construct
        ├── MissingTokenError - required token not found
        └── NestingDepthError - expression nested too deeply

Design Philosophy
-----------------
Each syntax error captures source location information (filename, line,
column) when it is known. Formatted messages look like:

    filename:line:column: error: description
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class KscopeError(Exception):
    """
    Base exception for all kscope errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch every kscope error with a single except clause:

        try:
            parse_program(text)
        except KscopeError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    Tokens and AST nodes carry one of these so that diagnostics can point
    at the offending input. The frozen design keeps locations immutable.

    Attributes:
        filename: Name of the source (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigError(KscopeError):
    """
    Invalid parser configuration.

    Raised when a ParserConfig is built with values the parser cannot work
    with, for example a multi-character operator in the precedence table or
    a non-positive precedence.
    """
    pass
