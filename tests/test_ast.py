"""
AST Test Suite
==============

Tests for AST node behavior, the visitor base class, and the pretty
printer used by `kparse --ast`.
"""

from kscope.errors import SourceLocation
from kscope.frontend.parser import Parser
from kscope.frontend.ast import (
    ASTPrinter,
    ASTVisitor,
    BinaryExpr,
    CallExpr,
    Function,
    NumberExpr,
    Prototype,
    VariableExpr,
    format_expression,
)


class TestNodes:
    """Test node equality and helpers."""

    def test_location_excluded_from_equality(self):
        here = SourceLocation("a.ks", 1, 1)
        there = SourceLocation("b.ks", 9, 9)
        assert NumberExpr(1.0, location=here) == NumberExpr(1.0, location=there)

    def test_location_excluded_from_repr(self):
        node = VariableExpr("x", location=SourceLocation("a.ks", 1, 1))
        assert repr(node) == "VariableExpr(name='x')"

    def test_prototype_arity(self):
        assert Prototype("f", ["a", "b"]).arity == 2
        assert Prototype("g").arity == 0

    def test_function_name(self):
        function = Function(Prototype("f", ["x"]), VariableExpr("x"))
        assert function.name == "f"
        assert not function.is_anonymous

    def test_anonymous_flag_excluded_from_equality(self):
        assert Prototype("f", anonymous=True) == Prototype("f")

    def test_format_expression(self):
        tree = BinaryExpr(
            "<",
            CallExpr("f", [VariableExpr("a"), NumberExpr(2.0)]),
            NumberExpr(0.5),
        )
        assert format_expression(tree) == "(f(a, 2.0) < 0.5)"


class TestVisitor:
    """Test the visitor base class."""

    def test_generic_visit_reaches_every_node(self):
        class Counter(ASTVisitor):
            def __init__(self):
                self.variables = []
                self.calls = 0

            def visit_VariableExpr(self, node):
                self.variables.append(node.name)

            def visit_CallExpr(self, node):
                self.calls += 1
                self.generic_visit(node)

        function = Parser("def f(x y) g(x, h(y)) + x").parse_definition().unwrap()
        counter = Counter()
        counter.visit(function)
        assert counter.variables == ["x", "y", "x"]
        assert counter.calls == 2

    def test_visit_returns_method_result(self):
        class Evaluator(ASTVisitor):
            def visit_NumberExpr(self, node):
                return node.value

            def visit_BinaryExpr(self, node):
                lhs, rhs = self.visit(node.lhs), self.visit(node.rhs)
                return {"+": lhs + rhs, "-": lhs - rhs, "*": lhs * rhs}[node.op]

        tree = Parser("1+2*3-4").parse_expression().unwrap()
        assert Evaluator().visit(tree) == 3.0


class TestPrinter:
    """Test the pretty printer."""

    def test_definition(self):
        function = Parser("def f(x) x*2").parse_definition().unwrap()
        assert ASTPrinter().print(function) == (
            "Function: f(x)\n"
            "  Binary '*'\n"
            "    Variable x\n"
            "    Number 2.0"
        )

    def test_extern(self):
        proto = Parser("extern atan2(y x)").parse_extern().unwrap()
        assert ASTPrinter().print(proto) == "Extern: atan2(y, x)"

    def test_top_level_call(self):
        function = Parser("add(1, 2)").parse_top_level_expr().unwrap()
        assert ASTPrinter().print(function) == (
            "Anonymous function: __anon_expr()\n"
            "  Call add (2 args)\n"
            "    Number 1.0\n"
            "    Number 2.0"
        )

    def test_printer_is_reusable(self):
        printer = ASTPrinter()
        first = printer.print(NumberExpr(1.0))
        second = printer.print(NumberExpr(1.0))
        assert first == second == "Number 1.0"
