"""
Kaleidoscope Abstract Syntax Tree (AST) Definitions
===================================================

This module defines the AST node types built by the Kaleidoscope parser
and handed to the backend.

Node Hierarchy
--------------
ASTNode (base)
├── Expressions
│   ├── NumberExpr - floating point literal
│   ├── VariableExpr - reference to a named value
│   ├── BinaryExpr - binary operator applied to two operands
│   └── CallExpr - call of a named function with arguments
├── Prototype - function name and parameter names
└── Function - prototype plus a single expression body

Design Notes
------------
- All nodes are dataclasses for clean representation
- Each node may carry its source location; locations are keyword-only
  and do not take part in equality, so trees compare structurally
- Composite nodes own their children; trees are acyclic
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from kscope.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts (optional)
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )


@dataclass
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class NumberExpr(Expression):
    """
    Numeric literal, like "1.0".

    Attributes:
        value: The literal value
    """
    value: float


@dataclass
class VariableExpr(Expression):
    """
    Reference to a variable, like "a".

    The name is resolved by consumers of the tree, never by the parser.

    Attributes:
        name: The variable name
    """
    name: str


@dataclass
class BinaryExpr(Expression):
    """
    Binary operator expression (lhs op rhs).

    Attributes:
        op: The operator character
        lhs: Left operand
        rhs: Right operand
    """
    op: str
    lhs: Expression
    rhs: Expression


@dataclass
class CallExpr(Expression):
    """
    Function call expression.

    Attributes:
        callee: Name of the function being called
        args: Argument expressions, in call order
    """
    callee: str
    args: list[Expression] = field(default_factory=list)


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass
class Prototype(ASTNode):
    """
    Function prototype: a name and its parameter names.

    This captures everything needed to declare a function, but not its
    body. Parameter names are kept as written; duplicates are allowed.

    Attributes:
        name: Function name
        args: Parameter names, in order
        anonymous: True for the prototype synthesized around a bare
                   top-level expression
    """
    name: str
    args: list[str] = field(default_factory=list)
    anonymous: bool = field(default=False, compare=False, repr=False)

    @property
    def arity(self) -> int:
        return len(self.args)

    @property
    def is_anonymous(self) -> bool:
        return self.anonymous


@dataclass
class Function(ASTNode):
    """
    Function definition: a prototype and its body expression.

    Attributes:
        proto: The function's prototype
        body: The single expression forming the body
    """
    proto: Prototype
    body: Expression

    @property
    def name(self) -> str:
        return self.proto.name

    @property
    def is_anonymous(self) -> bool:
        return self.proto.is_anonymous


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; the rest fall through to generic_visit, which walks children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_CallExpr(self, node):
                self.calls += 1
                self.generic_visit(node)
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the visit_* method for this node's class."""
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit every child node."""
        if isinstance(node, BinaryExpr):
            self.visit(node.lhs)
            self.visit(node.rhs)
        elif isinstance(node, CallExpr):
            for arg in node.args:
                self.visit(arg)
        elif isinstance(node, Function):
            self.visit(node.proto)
            self.visit(node.body)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces an indented, human-readable view of a tree.

    Usage:
        printer = ASTPrinter()
        print(printer.print(function))

    Output for "def f(x) x*2":
        Function: f(x)
          Binary '*'
            Variable x
            Number 2.0
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the tree rooted at `node` and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _nested(self, *nodes: ASTNode) -> None:
        self.indent_level += 1
        for node in nodes:
            self.visit(node)
        self.indent_level -= 1

    def visit_Function(self, node: Function):
        label = "Anonymous function" if node.is_anonymous else "Function"
        self._emit(f"{label}: {node.name}({', '.join(node.proto.args)})")
        self._nested(node.body)

    def visit_Prototype(self, node: Prototype):
        self._emit(f"Extern: {node.name}({', '.join(node.args)})")

    def visit_NumberExpr(self, node: NumberExpr):
        self._emit(f"Number {node.value!r}")

    def visit_VariableExpr(self, node: VariableExpr):
        self._emit(f"Variable {node.name}")

    def visit_BinaryExpr(self, node: BinaryExpr):
        self._emit(f"Binary {node.op!r}")
        self._nested(node.lhs, node.rhs)

    def visit_CallExpr(self, node: CallExpr):
        self._emit(f"Call {node.callee} ({len(node.args)} args)")
        self._nested(*node.args)


def format_expression(expr: Expression) -> str:
    """
    Render an expression as fully parenthesized source text.

    >>> format_expression(BinaryExpr("+", NumberExpr(1.0), VariableExpr("x")))
    '(1.0 + x)'
    """
    if isinstance(expr, NumberExpr):
        return repr(expr.value)
    if isinstance(expr, VariableExpr):
        return expr.name
    if isinstance(expr, BinaryExpr):
        return f"({format_expression(expr.lhs)} {expr.op} {format_expression(expr.rhs)})"
    if isinstance(expr, CallExpr):
        args = ", ".join(format_expression(a) for a in expr.args)
        return f"{expr.callee}({args})"
    return f"<{type(expr).__name__}>"
