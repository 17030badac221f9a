"""
Kaleidoscope Parser Test Suite
==============================

Tests for the recursive descent parser: expression structure produced
by precedence climbing, calls and parentheses, prototypes, definitions,
externs, and anonymous top-level functions, plus the diagnostics and
ParseResult values returned for malformed input.

Test Organization
-----------------
- TestPrecedence: binary operator grouping and associativity
- TestPrimaries: numbers, variables, calls, parentheses
- TestExpressionErrors: malformed expressions
- TestOperatorTables: custom precedence configurations
- TestNestingLimit: the nesting depth guard
- TestPublicOperations: the individual parse_* entry points
- TestPrototypes: prototype parsing and its errors
- TestDeclarations: definitions, externs, top-level expressions
- TestResults: ParseResult behavior and error locations
"""

import pytest
from kscope.errors import SourceLocation
from kscope.frontend.config import ParserConfig
from kscope.frontend.lexer import Lexer, TokenType
from kscope.frontend.parser import Parser, parse_expression_source
from kscope.frontend.result import ParseResult
from kscope.frontend.ast import (
    NumberExpr,
    VariableExpr,
    BinaryExpr,
    CallExpr,
    Prototype,
    Function,
    format_expression,
)
from kscope.frontend.errors import (
    KscopeSyntaxError,
    UnexpectedTokenError,
    MissingTokenError,
    NestingDepthError,
)


def expr(source: str, config: ParserConfig = None):
    """Parse an expression and return its tree, failing the test on error."""
    result = Parser(source, config).parse_expression()
    assert result.ok, result.message
    return result.value


def grouped(source: str, config: ParserConfig = None) -> str:
    return format_expression(expr(source, config))


def grouped_result(parser: Parser) -> str:
    return format_expression(parser.parse_expression().unwrap())


# =============================================================================
# Precedence Tests
# =============================================================================

class TestPrecedence:
    """Test binary operator grouping."""

    def test_multiplication_binds_tighter(self):
        assert expr("1+2*3") == BinaryExpr(
            "+",
            NumberExpr(1.0),
            BinaryExpr("*", NumberExpr(2.0), NumberExpr(3.0)),
        )

    def test_subtraction_is_left_associative(self):
        assert expr("1-2-3") == BinaryExpr(
            "-",
            BinaryExpr("-", NumberExpr(1.0), NumberExpr(2.0)),
            NumberExpr(3.0),
        )

    def test_tighter_operator_first(self):
        assert grouped("1*2+3") == "((1.0 * 2.0) + 3.0)"

    def test_comparison_binds_loosest(self):
        assert grouped("a<b+c") == "(a < (b + c))"
        assert grouped("a*b<c") == "((a * b) < c)"

    def test_mixed_levels(self):
        assert grouped("1+2*3-4") == "((1.0 + (2.0 * 3.0)) - 4.0)"

    def test_addition_and_subtraction_share_level(self):
        assert grouped("a+b-c+d") == "(((a + b) - c) + d)"

    def test_all_levels(self):
        assert grouped("a<b+c*d-e") == "(a < ((b + (c * d)) - e))"

    def test_multiplication_chain(self):
        assert grouped("a*b*c") == "((a * b) * c)"

    def test_parentheses_override_precedence(self):
        assert grouped("(1+2)*3") == "((1.0 + 2.0) * 3.0)"

    def test_whitespace_and_comments_ignored(self):
        assert grouped("1 +  # plus\n 2") == "(1.0 + 2.0)"


# =============================================================================
# Primary Expression Tests
# =============================================================================

class TestPrimaries:
    """Test primary expressions."""

    def test_number(self):
        assert expr("42") == NumberExpr(42.0)

    def test_variable(self):
        assert expr("x") == VariableExpr("x")

    def test_call_with_arguments(self):
        assert expr("foo(1, 2)") == CallExpr(
            "foo", [NumberExpr(1.0), NumberExpr(2.0)]
        )

    def test_call_without_arguments(self):
        assert expr("foo()") == CallExpr("foo", [])

    def test_call_with_expression_arguments(self):
        assert expr("f(a+1, b*2)") == CallExpr("f", [
            BinaryExpr("+", VariableExpr("a"), NumberExpr(1.0)),
            BinaryExpr("*", VariableExpr("b"), NumberExpr(2.0)),
        ])

    def test_nested_calls(self):
        assert expr("f(g(x), 2)") == CallExpr("f", [
            CallExpr("g", [VariableExpr("x")]),
            NumberExpr(2.0),
        ])

    def test_call_in_binary_expression(self):
        assert grouped("f(1)*2+g()") == "((f(1.0) * 2.0) + g())"

    def test_parenthesized(self):
        assert expr("(x)") == VariableExpr("x")
        assert expr("((((1))))") == NumberExpr(1.0)

    def test_keyword_is_not_a_primary(self):
        result = Parser("def").parse_expression()
        assert isinstance(result.error, UnexpectedTokenError)

    def test_current_token_after_expression(self):
        """The parser stops one token past the expression."""
        parser = Parser("foo(1) ; x")
        assert parser.parse_expression().ok
        assert parser.current.is_char(";")

    def test_unknown_operator_ends_expression(self):
        parser = Parser("1 / 2")
        assert parser.parse_expression().value == NumberExpr(1.0)
        assert parser.current.is_char("/")

    def test_juxtaposed_expressions(self):
        """Two expressions in a row parse as two separate expressions."""
        parser = Parser("1 2")
        assert parser.parse_expression().value == NumberExpr(1.0)
        assert parser.parse_expression().value == NumberExpr(2.0)
        assert parser.at_end()


# =============================================================================
# Expression Error Tests
# =============================================================================

class TestExpressionErrors:
    """Test diagnostics for malformed expressions."""

    def test_unclosed_paren(self):
        result = Parser("(1+2").parse_expression()
        assert not result.ok
        assert result.value is None
        assert isinstance(result.error, MissingTokenError)
        assert result.message == "expected ')'"
        assert result.error.location == SourceLocation("<input>", 1, 5)
        assert result.error.found == "end of input"

    def test_missing_argument_separator(self):
        result = Parser("foo(1 2)").parse_expression()
        assert result.message == "Expected ')' or ',' in argument list"
        assert result.error.location.column == 7

    def test_unclosed_call(self):
        result = Parser("foo(1,").parse_expression()
        assert isinstance(result.error, UnexpectedTokenError)

    def test_unexpected_token(self):
        result = Parser(")").parse_expression()
        assert isinstance(result.error, UnexpectedTokenError)
        assert result.message == "unknown token when expecting an expression"
        assert result.error.found == ")"

    def test_missing_right_operand(self):
        result = Parser("1 +").parse_expression()
        assert isinstance(result.error, UnexpectedTokenError)
        assert result.error.found == "end of input"

    def test_empty_input(self):
        result = Parser("").parse_expression()
        assert isinstance(result.error, UnexpectedTokenError)

    def test_errors_are_syntax_errors(self):
        for source in ["(1", ")", "f(1 2)", "1 *"]:
            error = Parser(source).parse_expression().error
            assert isinstance(error, KscopeSyntaxError)

    def test_failure_returns_no_partial_tree(self):
        """An error deep inside a call discards the whole expression."""
        result = Parser("1 + f(2, (3 * 4)").parse_expression()
        assert not result.ok
        assert result.value is None

    def test_error_message_format(self):
        error = Parser("(1+2", filename="calc.ks").parse_expression().error
        assert str(error) == "calc.ks:1:5: error: expected ')'\nhint: found 'end of input'"


# =============================================================================
# Operator Table Tests
# =============================================================================

class TestOperatorTables:
    """Test parsing with non-default precedence tables."""

    def test_added_operator(self):
        config = ParserConfig().with_operator("/", 40)
        assert grouped("8/2*3", config) == "((8.0 / 2.0) * 3.0)"
        assert grouped("1+8/2", config) == "(1.0 + (8.0 / 2.0))"

    def test_reordered_table(self):
        config = ParserConfig().with_precedence({"+": 10, "*": 5})
        assert grouped("1*2+3", config) == "(1.0 * (2.0 + 3.0))"

    def test_removed_operator_ends_expression(self):
        config = ParserConfig().with_precedence({"+": 10})
        parser = Parser("1-2", config)
        assert parser.parse_expression().value == NumberExpr(1.0)
        assert parser.current.is_char("-")

    def test_parsers_with_different_tables(self):
        """Two parsers with different tables do not affect each other."""
        custom = Parser("a%b", ParserConfig().with_operator("%", 40))
        default = Parser("a%b")
        assert custom.parse_expression().value == BinaryExpr(
            "%", VariableExpr("a"), VariableExpr("b")
        )
        assert default.parse_expression().value == VariableExpr("a")


# =============================================================================
# Nesting Limit Tests
# =============================================================================

class TestNestingLimit:
    """Test the expression nesting guard."""

    def test_within_limit(self):
        config = ParserConfig(max_nesting_depth=3)
        assert expr("((1))", config) == NumberExpr(1.0)

    def test_over_limit(self):
        config = ParserConfig(max_nesting_depth=3)
        result = Parser("(((1)))", config).parse_expression()
        assert isinstance(result.error, NestingDepthError)
        assert result.message == "expression nesting too deep"
        assert result.error.limit == 3

    def test_call_arguments_count_as_nesting(self):
        config = ParserConfig(max_nesting_depth=2)
        assert expr("f(1)", config) == CallExpr("f", [NumberExpr(1.0)])
        result = Parser("f(g(1))", config).parse_expression()
        assert isinstance(result.error, NestingDepthError)

    def test_pathological_input_fails_cleanly(self):
        source = "(" * 1000 + "1" + ")" * 1000
        result = Parser(source).parse_expression()
        assert isinstance(result.error, NestingDepthError)

    def test_limit_above_interpreter_stack(self):
        """A limit too large for the Python stack still yields a ParseResult."""
        config = ParserConfig(max_nesting_depth=100000)
        source = "(" * 2000 + "1" + ")" * 2000
        parser = Parser(source, config)
        result = parser.parse_expression()
        assert isinstance(result.error, NestingDepthError)
        assert result.error.limit == 100000
        assert parser._depth == 0

    def test_moderate_nesting_accepted(self):
        source = "(" * 50 + "1" + ")" * 50
        assert expr(source) == NumberExpr(1.0)

    def test_depth_resets_after_failure(self):
        config = ParserConfig(max_nesting_depth=3)
        parser = Parser("(((1))) ; ((2))", config)
        assert not parser.parse_expression().ok
        while not parser.current.is_char(";"):
            parser.next_token()
        parser.next_token()
        assert parser.parse_expression().value == NumberExpr(2.0)

    def test_long_flat_expression(self):
        """Long operator chains are not nesting."""
        source = "+".join(["1"] * 500)
        assert Parser(source, ParserConfig(max_nesting_depth=2)).parse_expression().ok


# =============================================================================
# Individual Parse Operation Tests
# =============================================================================

class TestPublicOperations:
    """Test the parse_* entry points other than parse_expression."""

    def test_parse_primary_stops_before_operator(self):
        parser = Parser("x + 1")
        assert parser.parse_primary().value == VariableExpr("x")
        assert parser.current.is_char("+")

    def test_parse_bin_op_rhs(self):
        parser = Parser("+ 2 * 3")
        result = parser.parse_bin_op_rhs(0, NumberExpr(1.0))
        assert format_expression(result.value) == "(1.0 + (2.0 * 3.0))"

    def test_parse_bin_op_rhs_below_minimum(self):
        parser = Parser("+ 2")
        result = parser.parse_bin_op_rhs(30, VariableExpr("a"))
        assert result.value == VariableExpr("a")
        assert parser.current.is_char("+")

    def test_parse_paren_expr(self):
        assert Parser("(a*b)").parse_paren_expr().value == BinaryExpr(
            "*", VariableExpr("a"), VariableExpr("b")
        )

    def test_parse_identifier_expr(self):
        assert Parser("f(1)").parse_identifier_expr().value == CallExpr(
            "f", [NumberExpr(1.0)]
        )
        assert Parser("f").parse_identifier_expr().value == VariableExpr("f")

    def test_successive_expressions(self):
        parser = Parser("1+2 ; 3*4")
        assert grouped_result(parser) == "(1.0 + 2.0)"
        parser.next_token()  # skip ;
        assert grouped_result(parser) == "(3.0 * 4.0)"
        assert parser.at_end()

    def test_parser_over_existing_lexer(self):
        lexer = Lexer("a+b", "expr.ks")
        parser = Parser(lexer)
        assert parser.lexer is lexer
        assert parser.parse_expression().value.location.filename == "expr.ks"

    def test_parse_expression_source(self):
        result = parse_expression_source("a*b")
        assert result.value == BinaryExpr("*", VariableExpr("a"), VariableExpr("b"))

    def test_current_is_none_until_first_parse(self):
        parser = Parser("1")
        assert parser.current is None
        assert not parser.at_end()
        parser.parse_expression()
        assert parser.current.type == TokenType.EOF


# =============================================================================
# Prototype Tests
# =============================================================================

class TestPrototypes:
    """Test prototype parsing."""

    def test_prototype_with_arguments(self):
        proto = Parser("foo(a b c)").parse_prototype().value
        assert proto == Prototype("foo", ["a", "b", "c"])
        assert proto.arity == 3

    def test_prototype_without_arguments(self):
        assert Parser("foo()").parse_prototype().value == Prototype("foo", [])

    def test_duplicate_argument_names_kept(self):
        assert Parser("f(x x)").parse_prototype().value.args == ["x", "x"]

    def test_missing_name(self):
        result = Parser("(x)").parse_prototype()
        assert result.message == "Expected function name in prototype"

    def test_missing_open_paren(self):
        result = Parser("foo x").parse_prototype()
        assert result.message == "Expected '(' in prototype"

    def test_comma_separated_arguments_rejected(self):
        result = Parser("foo(a, b)").parse_prototype()
        assert result.message == "Expected ')' in prototype"
        assert result.error.found == ","

    def test_unclosed_prototype(self):
        result = Parser("foo(a b").parse_prototype()
        assert result.message == "Expected ')' in prototype"

    def test_prototype_location(self):
        proto = Parser("  foo(x)").parse_prototype().value
        assert proto.location == SourceLocation("<input>", 1, 3)


# =============================================================================
# Declaration Tests
# =============================================================================

class TestDeclarations:
    """Test definitions, externs, and top-level expressions."""

    def test_definition(self):
        function = Parser("def foo(x y) x+y").parse_definition().value
        assert function == Function(
            Prototype("foo", ["x", "y"]),
            BinaryExpr("+", VariableExpr("x"), VariableExpr("y")),
        )
        assert function.name == "foo"
        assert not function.is_anonymous

    def test_definition_location(self):
        function = Parser("def f(x) x").parse_definition().value
        assert function.location == SourceLocation("<input>", 1, 1)

    def test_definition_with_bad_prototype(self):
        result = Parser("def 1").parse_definition()
        assert result.message == "Expected function name in prototype"

    def test_definition_with_bad_body(self):
        result = Parser("def f(x) )").parse_definition()
        assert isinstance(result.error, UnexpectedTokenError)

    def test_extern(self):
        proto = Parser("extern sin(x)").parse_extern().value
        assert proto == Prototype("sin", ["x"])
        assert not proto.is_anonymous

    def test_extern_without_name(self):
        result = Parser("extern 1").parse_extern()
        assert result.message == "Expected function name in prototype"

    def test_top_level_expression(self):
        function = Parser("1+2").parse_top_level_expr().value
        assert function.name == "__anon_expr"
        assert function.proto.args == []
        assert function.is_anonymous
        assert function.body == BinaryExpr("+", NumberExpr(1.0), NumberExpr(2.0))

    def test_top_level_name_from_config(self):
        config = ParserConfig(anonymous_function_name="__toplevel")
        function = Parser("x", config).parse_top_level_expr().value
        assert function.name == "__toplevel"

    def test_top_level_error(self):
        result = Parser("(1").parse_top_level_expr()
        assert result.message == "expected ')'"


# =============================================================================
# ParseResult and Location Tests
# =============================================================================

class TestResults:
    """Test ParseResult values and node locations."""

    def test_unwrap_success(self):
        assert Parser("x").parse_expression().unwrap() == VariableExpr("x")

    def test_unwrap_failure_raises(self):
        with pytest.raises(MissingTokenError):
            Parser("(x").parse_expression().unwrap()

    def test_success_and_failure_constructors(self):
        ok = ParseResult.success(NumberExpr(1.0))
        assert ok.ok and ok.error is None and ok.message is None
        error = MissingTokenError("expected ')'", "end of input")
        failed = ParseResult.failure(error)
        assert not failed.ok
        assert failed.value is None
        assert failed.message == "expected ')'"

    def test_node_locations(self):
        tree = expr("1 +\n  foo")
        assert tree.location == SourceLocation("<input>", 1, 3)
        assert tree.lhs.location == SourceLocation("<input>", 1, 1)
        assert tree.rhs.location == SourceLocation("<input>", 2, 3)

    def test_error_filename(self):
        error = Parser("(", filename="t.ks").parse_expression().error
        assert error.location == SourceLocation("t.ks", 1, 2)

    def test_locations_do_not_affect_equality(self):
        assert expr("  x") == expr("x")

    def test_reparsing_is_deterministic(self):
        source = "f(a, b*(c-1)) < g(2)"
        assert expr(source) == expr(source)
