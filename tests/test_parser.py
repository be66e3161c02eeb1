"""
Test suite for the Ember parser.

Tests cover:
- Operator precedence and associativity
- Calls, assignment, literals and unary minus
- if / def blocks, including nested blocks that close together
- Fail-fast error reporting with error kinds
- AST equality, visitors and the text dump

Author: xwest
"""

import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from ember.lexer import Lexer, LexerConfig, tokenize
from ember.parser import (
    Parser, parse, parse_string, parse_file, ParseError, ParseErrorKind, dump_ast,
    Program, ExpressionStatement, IfStatement, FunctionDefinitionStatement,
    Literal, Identifier, UnaryExpression, BinaryExpression,
    FunctionCallExpression, AssignmentExpression, Operator
)
from ember.parser.ast_nodes import ASTVisitor
from ember.lexer.tokens import TokenType


def body(source: str):
    return parse_string(source).body


def expr(source: str):
    statements = body(source)
    assert len(statements) == 1, statements
    return statements[0].expression


def num(value):
    return Literal(value, "integer")


def name(value):
    return Identifier(value)


def binary(left, operator, right):
    return BinaryExpression(left, operator, right)


class TestExpressions(unittest.TestCase):
    """Precedence, associativity and primary expressions."""

    def test_multiplication_binds_tighter_than_addition(self):
        self.assertEqual(
            expr("1 + 2 * 3"),
            binary(num(1), Operator.ADD, binary(num(2), Operator.MULTIPLY, num(3)))
        )

    def test_parentheses_override_precedence(self):
        self.assertEqual(
            expr("(1 + 2) * 3"),
            binary(binary(num(1), Operator.ADD, num(2)), Operator.MULTIPLY, num(3))
        )

    def test_subtraction_is_left_associative(self):
        self.assertEqual(
            expr("8 - 3 - 2"),
            binary(binary(num(8), Operator.SUBTRACT, num(3)), Operator.SUBTRACT, num(2))
        )

    def test_exponent_shares_the_multiplicative_level(self):
        self.assertEqual(
            expr("2 ** 3 ** 2"),
            binary(binary(num(2), Operator.EXPONENT, num(3)), Operator.EXPONENT, num(2))
        )
        self.assertEqual(
            expr("2 * 3 ** 2"),
            binary(binary(num(2), Operator.MULTIPLY, num(3)), Operator.EXPONENT, num(2))
        )

    def test_modulus(self):
        self.assertEqual(
            expr("1 + 10 % 3"),
            binary(num(1), Operator.ADD, binary(num(10), Operator.MODULUS, num(3)))
        )

    def test_logical_over_comparison(self):
        self.assertEqual(
            expr("a < b and c >= d"),
            binary(
                binary(name("a"), Operator.LESS_THAN, name("b")),
                Operator.AND,
                binary(name("c"), Operator.GREATER_THAN_OR_EQUAL, name("d"))
            )
        )

    def test_equality_sits_at_the_logical_level(self):
        self.assertEqual(
            expr("a < b == c"),
            binary(binary(name("a"), Operator.LESS_THAN, name("b")), Operator.EQUALITY, name("c"))
        )
        self.assertEqual(
            expr("a != b + 1"),
            binary(name("a"), Operator.NOT_EQUALS, binary(name("b"), Operator.ADD, num(1)))
        )

    def test_or_is_left_associative_with_and(self):
        self.assertEqual(
            expr("a or b and c"),
            binary(binary(name("a"), Operator.OR, name("b")), Operator.AND, name("c"))
        )

    def test_unary_minus(self):
        self.assertEqual(
            expr("-x * 2"),
            binary(UnaryExpression(name("x"), Operator.SUBTRACT), Operator.MULTIPLY, num(2))
        )
        self.assertEqual(expr("--1"), UnaryExpression(UnaryExpression(num(1), Operator.SUBTRACT), Operator.SUBTRACT))

    def test_literal_kinds(self):
        self.assertEqual(expr("42"), Literal(42, "integer"))
        self.assertEqual(expr("2.5"), Literal(2.5, "float"))
        self.assertEqual(expr("'hi'"), Literal("hi", "string"))
        self.assertEqual(expr("True"), Literal(True, "boolean"))
        self.assertEqual(expr("None"), Literal(None, "none"))

    def test_bare_identifier(self):
        self.assertEqual(expr("x"), name("x"))

    def test_call_with_arguments(self):
        self.assertEqual(
            expr("foo(1, 2)"),
            FunctionCallExpression(name("foo"), [num(1), num(2)])
        )

    def test_call_without_arguments(self):
        self.assertEqual(expr("foo()"), FunctionCallExpression(name("foo"), []))

    def test_nested_call_arguments(self):
        self.assertEqual(
            expr("f(g(1), a + b)"),
            FunctionCallExpression(name("f"), [
                FunctionCallExpression(name("g"), [num(1)]),
                binary(name("a"), Operator.ADD, name("b")),
            ])
        )

    def test_call_result_in_arithmetic(self):
        self.assertEqual(
            expr("f(1) + 2"),
            binary(FunctionCallExpression(name("f"), [num(1)]), Operator.ADD, num(2))
        )

    def test_assignment(self):
        self.assertEqual(expr("x = 5"), AssignmentExpression(name("x"), num(5)))
        self.assertEqual(
            expr("x = 1 + 2"),
            AssignmentExpression(name("x"), binary(num(1), Operator.ADD, num(2)))
        )

    def test_chained_assignment_nests_to_the_right(self):
        self.assertEqual(
            expr("x = y = 1"),
            AssignmentExpression(name("x"), AssignmentExpression(name("y"), num(1)))
        )

    def test_value_may_continue_on_next_line(self):
        self.assertEqual(expr("x =\n    5\n"), AssignmentExpression(name("x"), num(5)))

    def test_statements_after_continuation_line(self):
        self.assertEqual(body("x =\n    5\ny = 2\n"), [
            ExpressionStatement(AssignmentExpression(name("x"), num(5))),
            ExpressionStatement(AssignmentExpression(name("y"), num(2))),
        ])

    def test_continuation_line_inside_block(self):
        source = (
            "def f():\n"
            "    x =\n"
            "        5\n"
            "    y = 2\n"
            "z\n"
        )
        statements = body(source)
        self.assertEqual(len(statements), 2)
        self.assertEqual(statements[0].body, [
            ExpressionStatement(AssignmentExpression(name("x"), num(5))),
            ExpressionStatement(AssignmentExpression(name("y"), num(2))),
        ])
        self.assertEqual(statements[1], ExpressionStatement(name("z")))

    def test_continuation_line_closing_its_block(self):
        statements = body("def f():\n    x =\n        5\ny\n")
        self.assertEqual(len(statements), 2)
        self.assertEqual(statements[0].body, [ExpressionStatement(AssignmentExpression(name("x"), num(5)))])
        self.assertEqual(statements[1], ExpressionStatement(name("y")))

    def test_continuation_spans_a_single_line(self):
        with self.assertRaises(ParseError) as ctx:
            parse_string("x =\n    5\n    6\n")
        self.assertEqual(ctx.exception.kind, ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(ctx.exception.token.type, TokenType.INTEGER)


class TestStatements(unittest.TestCase):
    """Statement sequencing and blocks."""

    def test_statements_on_separate_lines(self):
        statements = body("x = 1\ny = 2\n\n\nz = 3")
        self.assertEqual(len(statements), 3)
        self.assertTrue(all(isinstance(s, ExpressionStatement) for s in statements))

    def test_semicolon_separates_statements(self):
        self.assertEqual(body("x = 1; y = 2"), [
            ExpressionStatement(AssignmentExpression(name("x"), num(1))),
            ExpressionStatement(AssignmentExpression(name("y"), num(2))),
        ])

    def test_comments_are_ignored(self):
        statements = body("x = 1  # set x\n# whole line\ny = 2\n")
        self.assertEqual(len(statements), 2)

    def test_kept_comments_do_not_reach_the_grammar(self):
        source = "def f():\n    x = 1  # c\n    # note\n\n    y\n# end\nz\n"
        expected = parse_string(source)
        self.assertEqual(len(expected.body), 2)
        self.assertEqual(parse_string(source, config=LexerConfig(keep_comments=True)), expected)
        self.assertEqual(Parser(Lexer(source).tokenize()).parse(), expected)

    def test_empty_program(self):
        self.assertEqual(parse_string(""), Program([]))
        self.assertEqual(parse_string("\n\n# only a comment\n"), Program([]))

    def test_if_block(self):
        statements = body("if (a > b):\n    x = 1\n    y = 2\n")
        self.assertEqual(statements, [
            IfStatement(
                ExpressionStatement(binary(name("a"), Operator.GREATER_THAN, name("b"))),
                [
                    ExpressionStatement(AssignmentExpression(name("x"), num(1))),
                    ExpressionStatement(AssignmentExpression(name("y"), num(2))),
                ]
            )
        ])

    def test_if_block_followed_by_statement(self):
        statements = body("if (a):\n    x = 1\ny = 2\n")
        self.assertEqual(len(statements), 2)
        self.assertIsInstance(statements[0], IfStatement)
        self.assertEqual(len(statements[0].body), 1)
        self.assertEqual(statements[1], ExpressionStatement(AssignmentExpression(name("y"), num(2))))

    def test_blank_lines_inside_block(self):
        statements = body("if (a):\n    x\n\n    # note\n    y\n")
        self.assertEqual(len(statements), 1)
        self.assertEqual(statements[0].body, [ExpressionStatement(name("x")), ExpressionStatement(name("y"))])

    def test_function_without_parameters(self):
        statements = body("def f():\n    x = 1\n")
        self.assertEqual(statements, [
            FunctionDefinitionStatement(
                name("f"), [], [ExpressionStatement(AssignmentExpression(name("x"), num(1)))]
            )
        ])

    def test_function_parameters(self):
        function = body("def add(a, b):\n    a + b\n")[0]
        self.assertEqual(function.id, name("add"))
        self.assertEqual(function.params, [name("a"), name("b")])
        self.assertEqual(function.body, [ExpressionStatement(binary(name("a"), Operator.ADD, name("b")))])

    def test_nested_blocks_closing_together(self):
        source = (
            "def f(a):\n"
            "    if (a > 1):\n"
            "        x = 1\n"
            "y = 2\n"
        )
        statements = body(source)
        self.assertEqual(len(statements), 2)
        function = statements[0]
        self.assertIsInstance(function, FunctionDefinitionStatement)
        self.assertEqual(len(function.body), 1)
        self.assertIsInstance(function.body[0], IfStatement)
        self.assertEqual(function.body[0].body, [ExpressionStatement(AssignmentExpression(name("x"), num(1)))])
        self.assertEqual(statements[1], ExpressionStatement(AssignmentExpression(name("y"), num(2))))

    def test_statement_after_inner_block_stays_in_outer_block(self):
        source = (
            "def f(a):\n"
            "    if (a):\n"
            "        x = 1\n"
            "    y = 2\n"
            "z = 3\n"
        )
        statements = body(source)
        self.assertEqual(len(statements), 2)
        function = statements[0]
        self.assertEqual(len(function.body), 2)
        self.assertIsInstance(function.body[0], IfStatement)
        self.assertEqual(function.body[1], ExpressionStatement(AssignmentExpression(name("y"), num(2))))
        self.assertEqual(statements[1], ExpressionStatement(AssignmentExpression(name("z"), num(3))))

    def test_end_of_input_closes_open_blocks(self):
        statements = body("def f():\n    if (a):\n        g()")
        self.assertEqual(len(statements), 1)
        inner = statements[0].body[0]
        self.assertEqual(inner.body, [ExpressionStatement(FunctionCallExpression(name("g"), []))])

    def test_parse_accepts_token_list(self):
        self.assertEqual(parse(tokenize("x = 1")), parse_string("x = 1"))

    def test_parse_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "prog.em")
            with open(path, "w", encoding="utf-8") as f:
                f.write("def f(a):\n    a * 2\nf(3)\n")
            program = parse_file(path)
        self.assertEqual(len(program.body), 2)
        self.assertEqual(program.body[1].span.start.filename, path)


class TestParseErrors(unittest.TestCase):
    """The first syntax error aborts the parse."""

    def assertParseError(self, source, kind):
        with self.assertRaises(ParseError) as ctx:
            parse_string(source)
        self.assertEqual(ctx.exception.kind, kind)
        return ctx.exception

    def test_unclosed_parenthesis_at_end_of_input(self):
        error = self.assertParseError("(1 + 2", ParseErrorKind.UNTERMINATED_CONSTRUCT)
        self.assertEqual(error.code, "P002")
        self.assertEqual(error.token.type, TokenType.EOF)

    def test_unclosed_parenthesis_before_newline(self):
        error = self.assertParseError("(1 + 2\nx", ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(error.token.type, TokenType.NEWLINE)
        self.assertEqual(error.code, "P001")

    def test_missing_function_name(self):
        error = self.assertParseError("def (a):\n    x\n", ParseErrorKind.MISSING_IDENTIFIER)
        self.assertEqual(error.code, "P003")

    def test_invalid_parameter(self):
        error = self.assertParseError("def f(a, 1):\n    x\n", ParseErrorKind.INVALID_PARAMETER)
        self.assertEqual(error.token.type, TokenType.INTEGER)
        self.assertEqual(error.code, "P005")

    def test_unclosed_parameter_list(self):
        self.assertParseError("def f(a, b", ParseErrorKind.UNTERMINATED_CONSTRUCT)

    def test_if_requires_parentheses(self):
        error = self.assertParseError("if a > b:\n    x\n", ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(error.token.type, TokenType.IDENTIFIER)

    def test_if_requires_colon(self):
        error = self.assertParseError("if (a)\n    x\n", ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(error.token.type, TokenType.NEWLINE)

    def test_block_must_be_indented(self):
        error = self.assertParseError("if (a):\nx = 1\n", ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(error.token.type, TokenType.IDENTIFIER)

    def test_block_must_start_on_new_line(self):
        self.assertParseError("def f(): x\n", ParseErrorKind.UNEXPECTED_TOKEN)

    def test_floor_division_is_not_supported(self):
        error = self.assertParseError("a // b", ParseErrorKind.INVALID_OPERATOR)
        self.assertEqual(error.code, "P004")

    def test_membership_and_identity_are_not_supported(self):
        self.assertParseError("a in b", ParseErrorKind.INVALID_OPERATOR)
        self.assertParseError("a is None", ParseErrorKind.INVALID_OPERATOR)

    def test_missing_comma_between_arguments(self):
        self.assertParseError("foo(1 2)", ParseErrorKind.UNEXPECTED_TOKEN)

    def test_missing_operand(self):
        error = self.assertParseError("x = 1\ny = )", ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(error.token.type, TokenType.RIGHT_PAREN)
        self.assertEqual((error.location.line, error.location.column), (2, 5))

    def test_compound_statement_cannot_continue_an_expression(self):
        error = self.assertParseError("x =\nif (a):\n    y\n", ParseErrorKind.UNEXPECTED_TOKEN)
        self.assertEqual(error.token.type, TokenType.IF)

    def test_keyword_without_grammar_rule(self):
        self.assertParseError("return x", ParseErrorKind.UNEXPECTED_TOKEN)

    def test_moderate_nesting_parses(self):
        self.assertEqual(expr("(" * 40 + "1" + ")" * 40), num(1))

    def test_deep_parentheses(self):
        error = self.assertParseError("(" * 300 + "1" + ")" * 300, ParseErrorKind.NESTING_TOO_DEEP)
        self.assertEqual(error.code, "P006")
        self.assertEqual(error.location.line, 1)

    def test_long_unary_chain(self):
        self.assertParseError("-" * 2000 + "x", ParseErrorKind.NESTING_TOO_DEEP)

    def test_long_assignment_chain(self):
        source = " = ".join(f"v{i}" for i in range(500)) + " = 1"
        self.assertParseError(source, ParseErrorKind.NESTING_TOO_DEEP)

    def test_deeply_nested_blocks(self):
        lines = [f"{'    ' * level}if (a):" for level in range(100)]
        lines.append("    " * 100 + "x")
        self.assertParseError("\n".join(lines) + "\n", ParseErrorKind.NESTING_TOO_DEEP)

    def test_error_message_carries_code(self):
        with self.assertRaises(ParseError) as ctx:
            parse_string("foo(1 2)")
        self.assertIn("[P001]", str(ctx.exception))


class TestAST(unittest.TestCase):
    """Node equality, spans, visitors and dumps."""

    def test_equality_ignores_spans(self):
        first = parse_string("x = 1 + 2", filename="a.em")
        second = parse_string("x   =   1+2", filename="b.em")
        self.assertEqual(first, second)
        self.assertNotEqual(first.body[0].span, second.body[0].span)

    def test_different_trees_are_not_equal(self):
        self.assertNotEqual(parse_string("x = 1"), parse_string("x = 2"))
        self.assertNotEqual(num(1), Literal(1.0, "float"))
        self.assertNotEqual(num(1), name("x"))

    def test_statement_spans(self):
        statements = body("x = 1\ny = foo(2)")
        self.assertEqual(statements[1].span.start.line, 2)
        self.assertEqual(statements[1].span.start.column, 1)
        self.assertEqual(statements[1].span.end.column, 10)

    def test_children_in_source_order(self):
        statement = body("if (a):\n    x\n    y\n")[0]
        children = statement.children()
        self.assertEqual(len(children), 3)
        self.assertIsInstance(children[0], ExpressionStatement)
        self.assertEqual(children[0].expression, name("a"))

    def test_visitor_dispatch(self):
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_Identifier(self, node):
                self.names.append(node.name)

        collector = NameCollector()
        parse_string("def f(a):\n    g(a, b)\n").accept(collector)
        self.assertEqual(collector.names, ["f", "a", "g", "a", "b"])

    def test_dump(self):
        self.assertEqual(
            dump_ast(parse_string("x = 1 + 2")),
            "Program\n"
            "  ExpressionStatement\n"
            "    AssignmentExpression x\n"
            "      BinaryExpression +\n"
            "        Literal(integer) 1\n"
            "        Literal(integer) 2"
        )

    def test_dump_function(self):
        text = dump_ast(parse_string("def f(a, b):\n    g('s')\n"))
        self.assertIn("FunctionDefinitionStatement f(a, b)", text)
        self.assertIn("FunctionCallExpression g", text)
        self.assertIn("Literal(string) 's'", text)

    def test_parser_can_be_rerun(self):
        parser = Parser(tokenize("x\ny\n"))
        self.assertEqual(parser.parse(), parser.parse())


if __name__ == '__main__':
    unittest.main()
