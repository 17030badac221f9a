"""
Front End Error Hierarchy
=========================

This module defines the exceptions raised while parsing Kaleidoscope.
All of them inherit from FrontendError, which itself inherits from the
package-wide KscopeError.

Exception Hierarchy
-------------------
FrontendError (base for all front end errors)
└── KscopeSyntaxError - parser syntax errors
    ├── UnexpectedTokenError - token cannot start an expression
    ├── MissingTokenError - required token (like ')') not found
    └── NestingDepthError - expression nested deeper than allowed

Error Message Format
--------------------
str(error) gives the full report:

    calc.ks:3:7: error: expected ')'
    hint: every '(' needs a matching ')'

while error.message holds just the description ("expected ')'"), which
is what the top-level driver writes to its diagnostic sink.
"""

from typing import List, Optional

from kscope.errors import KscopeError, SourceLocation


# =============================================================================
# Base Front End Exception
# =============================================================================

class FrontendError(KscopeError):
    """
    Base exception for all front end errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location and hint."""
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Syntax Errors
# =============================================================================

class KscopeSyntaxError(FrontendError):
    """
    Syntax error in Kaleidoscope source.

    Raised when the parser meets input that does not fit the grammar,
    for example a missing ')' or a prototype without a name.
    """
    pass


class UnexpectedTokenError(KscopeSyntaxError):
    """
    Token that cannot start an expression.

    Raised by primary-expression parsing when the current token is not an
    identifier, a number, or '('.
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
    ):
        self.found = found
        super().__init__(
            "unknown token when expecting an expression",
            location=location,
            hint=f"found '{found}'",
        )


class MissingTokenError(KscopeSyntaxError):
    """
    Required token is missing.

    The message is the parser's own description of what was expected,
    such as "expected ')'" or "Expected '(' in prototype".
    """

    def __init__(
        self,
        message: str,
        found: str,
        location: Optional[SourceLocation] = None,
    ):
        self.found = found
        super().__init__(message, location=location, hint=f"found '{found}'")


class NestingDepthError(KscopeSyntaxError):
    """
    Expression nested deeper than the configured limit.

    Raised instead of letting deeply nested input exhaust the Python
    call stack.
    """

    def __init__(
        self,
        limit: int,
        location: Optional[SourceLocation] = None,
    ):
        self.limit = limit
        super().__init__(
            "expression nesting too deep",
            location=location,
            hint=f"at most {limit} nested expressions are allowed",
        )


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects the errors of one parse session for batch reporting.

    The top-level driver keeps going after a malformed entity; every
    failure lands here so that callers can report them all at the end.

    Example:
        collector = ErrorCollector()
        collector.add(error)
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: List[FrontendError] = []

    def add(self, error: FrontendError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")  # Blank line between errors

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
