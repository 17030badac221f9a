"""
Parser Configuration
====================

ParserConfig holds everything the parser needs to know that is not part
of the input: the binary operator precedence table, the name given to
anonymous top-level functions, and the nesting limit that guards the
recursive descent against stack exhaustion.

Configurations are immutable. A parser receives one at construction and
never changes it, so several parsers with different operator sets can
run side by side.

Configuration can come from:
- Default values (defined here)
- Environment variables (ParserConfig.from_env)
- Command-line options (kparse)

Default Operator Precedence
---------------------------
| Operator | Precedence |
|----------|------------|
| <        | 10         |
| + -      | 20         |
| *        | 40         |

Higher binds tighter. Operators missing from the table are not binary
operators at all.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping
import os

from kscope.errors import ConfigError


DEFAULT_PRECEDENCE: Mapping[str, int] = MappingProxyType({
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,   # highest
})

ANONYMOUS_FUNCTION_NAME = "__anon_expr"

# Three or four Python frames per nesting level keeps this well inside
# the interpreter's default recursion limit.
DEFAULT_MAX_NESTING_DEPTH = 100


@dataclass(frozen=True)
class ParserConfig:
    """
    Immutable parser configuration.

    Attributes:
        precedence: Read-only map of operator character to precedence
        anonymous_function_name: Prototype name for top-level expressions
        max_nesting_depth: Deepest expression nesting accepted
    """

    # mappingproxy is unhashable, so the table is left out of __hash__
    precedence: Mapping[str, int] = field(
        default_factory=lambda: DEFAULT_PRECEDENCE, hash=False
    )
    anonymous_function_name: str = ANONYMOUS_FUNCTION_NAME
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH

    def __post_init__(self):
        table = dict(self.precedence)
        for op, prec in table.items():
            if not isinstance(op, str) or len(op) != 1:
                raise ConfigError(f"operator must be a single character, got {op!r}")
            if not isinstance(prec, int) or isinstance(prec, bool) or prec <= 0:
                raise ConfigError(f"precedence of {op!r} must be a positive integer, got {prec!r}")
        if self.max_nesting_depth < 1:
            raise ConfigError(f"max_nesting_depth must be at least 1, got {self.max_nesting_depth}")
        if not self.anonymous_function_name:
            raise ConfigError("anonymous_function_name must not be empty")

        # Freeze a private copy so later changes to the caller's dict
        # cannot leak into the parser.
        object.__setattr__(self, "precedence", MappingProxyType(table))

    # ═══════════════════════════════════════════════════════════════════════════
    # LOOKUP
    # ═══════════════════════════════════════════════════════════════════════════

    def precedence_of(self, op: str) -> int:
        """Return the precedence of `op`, or -1 if it is not a binary operator."""
        return self.precedence.get(op, -1)

    # ═══════════════════════════════════════════════════════════════════════════
    # DERIVED CONFIGURATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    def with_precedence(self, precedence: Mapping[str, int]) -> "ParserConfig":
        """Return a copy using `precedence` as the whole operator table."""
        return replace(self, precedence=precedence)

    def with_operator(self, op: str, precedence: int) -> "ParserConfig":
        """Return a copy with `op` added to (or changed in) the operator table."""
        table = dict(self.precedence)
        table[op] = precedence
        return replace(self, precedence=table)

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "ParserConfig":
        """
        Create a ParserConfig from environment variables.

        Environment variables (all optional):
            KSCOPE_MAX_NESTING_DEPTH: Nesting limit (positive integer)
            KSCOPE_ANON_NAME: Name for anonymous top-level functions

        Invalid values are ignored and the default is kept.

        Returns:
            ParserConfig with values from environment variables
        """
        options = {}

        if depth := os.environ.get("KSCOPE_MAX_NESTING_DEPTH"):
            try:
                value = int(depth)
            except ValueError:
                value = 0
            if value > 0:
                options["max_nesting_depth"] = value

        if anon_name := os.environ.get("KSCOPE_ANON_NAME"):
            options["anonymous_function_name"] = anon_name

        return cls(**options)
