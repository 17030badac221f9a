"""
Kaleidoscope Lexer (Tokenizer)
==============================

This module implements the lexer for the Kaleidoscope expression
language. It pulls characters one at a time from a character source and
produces tokens on demand, one per call to ``next_token()``.

Token Categories
----------------
- Keywords: def, extern
- Identifiers: [a-zA-Z][a-zA-Z0-9]*
- Numbers: [0-9.]+ (floating point)
- Characters: any other single character (operators, parentheses,
  comma, semicolon, unrecognized bytes)

Comments
--------
- Single-line: # comment

Number Literals
---------------
Numbers are read leniently. The lexeme is every run of digits and dots,
and its value is the longest leading valid decimal prefix, the same way
C's ``strtod`` reads it:

| Lexeme  | Value |
|---------|-------|
| 42      | 42.0  |
| 1.5     | 1.5   |
| .5      | 0.5   |
| 1.2.3   | 1.2   |
| .       | 0.0   |

Malformed lexemes are logged as warnings but are never rejected.

Example Usage
-------------
>>> from kscope.frontend.lexer import Lexer
>>> lexer = Lexer("def add(a b) a+b")
>>> for token in lexer.tokenize():
...     print(token)
Token(DEF, 'def', 1:1)
Token(IDENTIFIER, 'add', 1:5)
Token(CHAR, '(', 1:8)
Token(IDENTIFIER, 'a', 1:9)
Token(IDENTIFIER, 'b', 1:11)
Token(CHAR, ')', 1:12)
Token(IDENTIFIER, 'a', 1:14)
Token(CHAR, '+', 1:15)
Token(IDENTIFIER, 'b', 1:16)
Token(EOF, 1:17)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, TextIO, Union
import logging
import string

from kscope.errors import SourceLocation
from kscope.frontend.source import CharSource, END_OF_INPUT, as_char_source


logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the Kaleidoscope language.

    Keywords are distinguished from identifiers to simplify parsing.
    Everything the lexer does not recognize comes back as CHAR, carrying
    the raw character as its value.
    """

    EOF = auto()            # End of input

    # === Commands ===
    DEF = auto()            # def
    EXTERN = auto()         # extern

    # === Primary ===
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Floating point literals

    # === Fallback ===
    CHAR = auto()           # Any other single character


# Map keyword strings to their token types
KEYWORDS: dict[str, TokenType] = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from Kaleidoscope source.

    Attributes:
        type: The TokenType classification
        value: Identifier/keyword text, float for numbers, the raw
               character for CHAR, None for EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source
    """
    type: TokenType
    value: str | float | None
    line: int = 1
    column: int = 1
    filename: str = "<input>"

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_char(self, char: str) -> bool:
        """Return True if this is the single-character token `char`."""
        return self.type == TokenType.CHAR and self.value == char

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        return str(self.value)


# =============================================================================
# Number Parsing
# =============================================================================

def parse_number_text(text: str) -> float:
    """
    Convert a run of digits and dots to a float, leniently.

    Only the longest leading valid decimal prefix is used: everything
    from the second '.' onwards is ignored, and a lexeme with no digits
    before that point reads as 0.0.

    Args:
        text: The lexeme, made only of digits and '.'

    Returns:
        The best-effort numeric value
    """
    second_dot = text.find(".", text.find(".") + 1) if "." in text else -1
    head = text if second_dot == -1 else text[:second_dot]
    if head in ("", "."):
        return 0.0
    return float(head)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Kaleidoscope source, one token per call.

    The lexer owns all of its state: the lookahead character, the text of
    the last identifier, and the value of the last number. Independent
    lexers never share state, so any number of them can run side by side.

    Usage:
        lexer = Lexer(source_text)
        token = lexer.next_token()

    Attributes:
        last_char: The lookahead character (END_OF_INPUT once exhausted)
        identifier_str: Text of the most recent identifier or keyword
        num_val: Value of the most recent number
        filename: Name of the source (for token locations)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits

    # Characters that make up a number literal
    NUMBER_CHARS = string.digits + "."

    WHITESPACE = string.whitespace

    def __init__(
        self,
        source: Union[str, TextIO, CharSource],
        filename: Optional[str] = None,
    ):
        """
        Initialize the lexer.

        Args:
            source: Source text, a readable text stream, or a CharSource
            filename: Name of the source for token locations (defaults to
                      the source's own name)
        """
        self._source = as_char_source(source, filename)
        self.filename = self._source.name

        self.last_char = " "
        self.identifier_str = ""
        self.num_val = 0.0

        # Position of last_char; the initial blank sits before column 1
        self._line = 1
        self._column = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens until end of input.

        Yields:
            Token objects, ending with a single EOF token
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    # =========================================================================
    # Character Access
    # =========================================================================

    def _read_char(self) -> str:
        """Replace the lookahead with the next source character."""
        if self.last_char == "\n":
            self._line += 1
            self._column = 0
        self.last_char = self._source.read()
        self._column += 1
        return self.last_char

    def _make_token(
        self,
        token_type: TokenType,
        value: str | float | None,
        line: int,
        column: int,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def next_token(self) -> Token:
        """
        Produce the next token from the source.

        Never raises: anything unrecognized comes back as a CHAR token,
        and once input is exhausted every call returns EOF.

        Returns:
            The next Token
        """
        while True:
            # Skip any whitespace
            while self.last_char and self.last_char in self.WHITESPACE:
                self._read_char()

            if self.last_char != "#":
                break

            # Comment until end of line
            while self.last_char not in (END_OF_INPUT, "\n", "\r"):
                self._read_char()
            if self.last_char == END_OF_INPUT:
                break

        line, column = self._line, self._column
        char = self.last_char

        if char and char in self.IDENT_START:
            token = self._scan_identifier(line, column)
        elif char and char in self.NUMBER_CHARS:
            token = self._scan_number(line, column)
        elif char == END_OF_INPUT:
            # Don't consume end of input
            token = self._make_token(TokenType.EOF, None, line, column)
        else:
            self._read_char()
            token = self._make_token(TokenType.CHAR, char, line, column)

        logger.debug("token %r", token)
        return token

    def _scan_identifier(self, line: int, column: int) -> Token:
        """
        Scan an identifier or keyword.

        Identifiers start with an ASCII letter and continue with ASCII
        letters and digits. Keywords are distinguished by checking the
        completed text against the keyword table.
        """
        chars = [self.last_char]
        while self._read_char() and self.last_char in self.IDENT_CHARS:
            chars.append(self.last_char)

        self.identifier_str = "".join(chars)
        token_type = KEYWORDS.get(self.identifier_str, TokenType.IDENTIFIER)
        return self._make_token(token_type, self.identifier_str, line, column)

    def _scan_number(self, line: int, column: int) -> Token:
        """Scan a number literal: a run of digits and dots."""
        chars = [self.last_char]
        while self._read_char() and self.last_char in self.NUMBER_CHARS:
            chars.append(self.last_char)

        text = "".join(chars)
        self.num_val = parse_number_text(text)
        if text.count(".") > 1 or not any(c.isdigit() for c in text):
            logger.warning(
                "%s:%d:%d: malformed number '%s' read as %r",
                self.filename, line, column, text, self.num_val,
            )
        return self._make_token(TokenType.NUMBER, self.num_val, line, column)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: Union[str, TextIO, CharSource], filename: Optional[str] = None) -> list[Token]:
    """
    Tokenize a whole source into a list ending with EOF.

    Args:
        source: Source text, a readable text stream, or a CharSource
        filename: Name of the source for token locations

    Returns:
        List of tokens, the last of which is EOF
    """
    return list(Lexer(source, filename).tokenize())
