"""
Character Sources
=================

The lexer pulls its input one character at a time from a character
source. A source returns the empty string once input is exhausted, and
keeps returning it on every later read.

Two adapters are provided:

- StringSource: reads from an in-memory string
- StreamSource: reads from any text stream (a file, ``sys.stdin``, an
  ``io.StringIO``); each read blocks until the stream yields data

>>> source = as_char_source("def f(x) x")
>>> source.read()
'd'
"""

from typing import TextIO, Union


END_OF_INPUT = ""


class CharSource:
    """
    Base class for pull-based character sources.

    Subclasses implement read(), returning a single character, or
    END_OF_INPUT when there is nothing left to read.
    """

    name: str = "<input>"

    def read(self) -> str:
        raise NotImplementedError


class StringSource(CharSource):
    """Character source over an in-memory string."""

    def __init__(self, text: str, name: str = "<input>"):
        self.text = text
        self.name = name
        self._pos = 0

    def read(self) -> str:
        if self._pos >= len(self.text):
            return END_OF_INPUT
        char = self.text[self._pos]
        self._pos += 1
        return char


class StreamSource(CharSource):
    """
    Character source over a text stream.

    Reads exactly one character per call so that interactive input is
    tokenized as soon as it arrives, without waiting for more data than
    the lexer actually needs.
    """

    def __init__(self, stream: TextIO, name: str | None = None):
        self.stream = stream
        self.name = name or getattr(stream, "name", None) or "<stream>"
        self._exhausted = False

    def read(self) -> str:
        if self._exhausted:
            return END_OF_INPUT
        char = self.stream.read(1)
        if not char:
            self._exhausted = True
            return END_OF_INPUT
        return char


def as_char_source(
    source: Union[str, TextIO, CharSource],
    name: str | None = None,
) -> CharSource:
    """
    Adapt a string, text stream, or existing source to a CharSource.

    Args:
        source: Text to tokenize, a readable text stream, or a CharSource
        name: Optional source name used in error locations

    Returns:
        A CharSource reading from the given input
    """
    if isinstance(source, CharSource):
        if name is not None:
            source.name = name
        return source
    if isinstance(source, str):
        return StringSource(source, name or "<input>")
    if hasattr(source, "read"):
        return StreamSource(source, name)
    raise TypeError(f"cannot read characters from {type(source).__name__}")
