import dataclasses

import pytest

from lox.ast import (
    Assign, Binary, Block, ExpressionStmt, Grouping, Literal, PrintStmt,
    Unary, VarDecl, Variable,
)
from lox.errors import ErrorReporter
from lox.parser import Parser, parse_program
from lox.scanner import Scanner
from lox.tokens import TokenType as T


def parse_expr(source):
    reporter = ErrorReporter()
    tokens = Scanner(source, reporter).scan_tokens()
    return Parser(tokens, reporter).parse_expression(), reporter


def errors(reporter):
    return [(d.line, d.where, d.message) for d in reporter.diagnostics]


def test_multiplication_binds_tighter_than_addition():
    expr, reporter = parse_expr('1 + 2 * 3')
    assert not reporter.diagnostics
    assert isinstance(expr, Binary)
    assert expr.operator.type == T.PLUS
    assert expr.left == Literal(1.0)
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.type == T.STAR


def test_binary_tiers_are_left_associative():
    for source, op in [('8 - 4 - 2', T.MINUS), ('8 / 4 * 2', T.STAR),
                       ('1 < 2 == true != false', T.BANG_EQUAL)]:
        expr, _ = parse_expr(source)
        assert expr.operator.type == op
        assert isinstance(expr.left, Binary)
        assert not isinstance(expr.right, Binary)


def test_unary_is_right_recursive():
    expr, _ = parse_expr('!!true')
    assert isinstance(expr, Unary)
    assert isinstance(expr.right, Unary)
    assert expr.right.right == Literal(True)


def test_unary_binds_tighter_than_binary():
    expr, _ = parse_expr('-2 * 3')
    assert isinstance(expr, Binary)
    assert isinstance(expr.left, Unary)


def test_grouping_and_primaries():
    expr, _ = parse_expr('(nil)')
    assert expr == Grouping(Literal(None))
    expr, _ = parse_expr('"text"')
    assert expr == Literal('text')
    expr, _ = parse_expr('name')
    assert isinstance(expr, Variable)
    assert expr.name.lexeme == 'name'


def test_assignment_is_right_associative():
    expr, reporter = parse_expr('a = b = 1')
    assert not reporter.diagnostics
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'a'
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == 'b'
    assert expr.value.value == Literal(1.0)


def test_invalid_assignment_target_is_reported_without_panic():
    statements, reporter = parse_program('1 = 2; print 3;')
    assert errors(reporter) == [(1, "at '='", 'Invalid assignment target.')]
    assert [type(s) for s in statements] == [ExpressionStmt, PrintStmt]


def test_missing_closing_paren():
    _, reporter = parse_program('print (1 + 2;')
    assert errors(reporter) == [(1, "at ';'", "Expect ')' after expression.")]


def test_missing_expression_at_end_of_input():
    _, reporter = parse_program('print')
    assert errors(reporter) == [(1, 'at end', 'Expect expression.')]
    assert str(reporter.diagnostics[0]) == '[line 1] Error at end: Expect expression.'


def test_missing_semicolons():
    _, reporter = parse_program('print 1')
    assert errors(reporter) == [(1, 'at end', "Expect ';' after value.")]
    _, reporter = parse_program('1 + 2')
    assert errors(reporter) == [(1, 'at end', "Expect ';' after expression.")]
    _, reporter = parse_program('var a = 1')
    assert errors(reporter) == [(1, 'at end', "Expect ';' after variable declaration.")]


def test_var_declarations():
    statements, reporter = parse_program('var a; var b = a;')
    assert not reporter.diagnostics
    first, second = statements
    assert isinstance(first, VarDecl)
    assert first.initializer is None
    assert second.name.lexeme == 'b'
    assert isinstance(second.initializer, Variable)


def test_var_requires_a_name():
    statements, reporter = parse_program('var 1 = 2;')
    assert errors(reporter) == [(1, "at '1'", 'Expect variable name.')]
    assert statements == []


def test_blocks_nest():
    statements, reporter = parse_program('{ var a = 1; { print a; } }')
    assert not reporter.diagnostics
    (outer,) = statements
    assert isinstance(outer, Block)
    assert isinstance(outer.statements, tuple)
    assert isinstance(outer.statements[0], VarDecl)
    assert isinstance(outer.statements[1], Block)


def test_unclosed_block():
    _, reporter = parse_program('{ print 1;')
    assert errors(reporter) == [(1, 'at end', "Expect '}' after block.")]


def test_error_inside_block_keeps_the_rest_of_the_block():
    statements, reporter = parse_program('{ print ; print 1; }')
    assert errors(reporter) == [(1, "at ';'", 'Expect expression.')]
    (block,) = statements
    assert block == Block((PrintStmt(Literal(1.0)),))


def test_synchronize_skips_to_the_next_statement():
    statements, reporter = parse_program('print 1 +; print 2;')
    assert errors(reporter) == [(1, "at ';'", 'Expect expression.')]
    assert statements == [PrintStmt(Literal(2.0))]


def test_synchronize_stops_before_statement_keyword():
    statements, reporter = parse_program('1 + + var x = 1; print x;')
    assert errors(reporter) == [(1, "at '+'", 'Expect expression.')]
    assert [type(s) for s in statements] == [VarDecl, PrintStmt]


def test_no_errors_reported_after_synchronization_point():
    source = (
        'var = 1;\n'
        'print 2;\n'
        'var ok = 3;\n'
        '{ print ok; }\n'
    )
    statements, reporter = parse_program(source)
    assert [d.line for d in reporter.diagnostics] == [1]
    assert len(statements) == 3


def test_each_bad_statement_reports_once():
    _, reporter = parse_program('print ;\nprint 1;\nprint );\n')
    assert [(d.line, d.message) for d in reporter.diagnostics] == [
        (1, 'Expect expression.'),
        (3, 'Expect expression.'),
    ]


def test_nodes_are_immutable():
    statements, _ = parse_program('print 1;')
    with pytest.raises(dataclasses.FrozenInstanceError):
        statements[0].expression = Literal(2.0)
