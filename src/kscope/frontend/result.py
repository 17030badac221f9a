"""
Parse Results
=============

Every public parser operation returns a ParseResult rather than a bare
node. A result is either a success carrying the parsed value, or a
failure carrying the syntax error that stopped the parse; it is never
both, and a failure never carries a partial tree.

>>> result = parser.parse_expression()
>>> if result.ok:
...     use(result.value)
... else:
...     print(result.error.message)
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from kscope.frontend.errors import FrontendError


T = TypeVar("T")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """
    Outcome of a parse operation.

    Attributes:
        value: The parsed node (None on failure)
        error: The error that aborted the parse (None on success)
    """
    value: Optional[T] = None
    error: Optional[FrontendError] = None

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: FrontendError) -> "ParseResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        """The diagnostic message of a failure, None on success."""
        return self.error.message if self.error is not None else None

    def unwrap(self) -> T:
        """
        Return the parsed value, raising the stored error on failure.

        Raises:
            FrontendError: If this result is a failure
        """
        if self.error is not None:
            raise self.error
        return self.value
