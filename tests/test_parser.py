import pytest

from salami.ast import (
    Block, BooleanLiteral, CallExpression, ExitStatement, FunctionLiteral,
    FunctionStatement, Identifier, IfExpression, InfixExpression,
    IntegerLiteral, ReturnStatement, VarStatement,
)
from salami.errors import ParseError
from salami.lexer import Lexer
from salami.parser import Parser, parse_program


def parse(source):
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors


def parse_expr(source):
    program, errors = parse(source)
    assert errors == []
    assert len(program.statements) == 1
    return program.statements[0]


def test_integer_literal():
    assert parse_expr('12345') == IntegerLiteral(12345)


def test_boolean_literals():
    assert parse_expr('true') == BooleanLiteral(True)
    assert parse_expr('false') == BooleanLiteral(False)


@pytest.mark.parametrize('source, expected', [
    ('1 + 2 * 3', '(1 + (2 * 3))'),
    ('1 * 2 + 3', '((1 * 2) + 3)'),
    ('1 + 2 > 1', '((1 + 2) > 1)'),
    ('a < b * c', '(a < (b * c))'),
    ('a - b - c', '((a - b) - c)'),
    ('a / b / c', '((a / b) / c)'),
    ('(1 + 2) * 3', '((1 + 2) * 3)'),
    ('-a * b', '((0 - a) * b)'),
    ('3 - -2', '(3 - (0 - 2))'),
    ('add(1, 2 * 3)', 'add(1, (2 * 3))'),
    ('a + add(b) * c', '(a + (add(b) * c))'),
    ('make(1)(2)', 'make(1)(2)'),
])
def test_operator_precedence(source, expected):
    assert str(parse_expr(source)) == expected


def test_var_statement():
    stmt = parse_expr('var answer = 6 * 7;')
    assert stmt == VarStatement(
        Identifier('answer'),
        InfixExpression('*', IntegerLiteral(6), IntegerLiteral(7)),
    )


def test_exit_and_return_statements():
    program, errors = parse('exit 3; return x')
    assert errors == []
    assert program.statements == [ExitStatement(IntegerLiteral(3)), ReturnStatement(Identifier('x'))]


def test_semicolons_are_optional():
    program, errors = parse('var a = 1 var b = 2\na')
    assert errors == []
    assert [type(s) for s in program.statements] == [VarStatement, VarStatement, Identifier]


def test_stray_semicolons_are_ignored():
    program, errors = parse(';; 1;;')
    assert errors == []
    assert program.statements == [IntegerLiteral(1)]


def test_if_else_expression():
    stmt = parse_expr('if (x < y) { x } else { y }')
    assert stmt == IfExpression(
        InfixExpression('<', Identifier('x'), Identifier('y')),
        Block([Identifier('x')]),
        Block([Identifier('y')]),
    )


def test_if_without_else():
    stmt = parse_expr('if (true) { var a = 1; }')
    assert isinstance(stmt, IfExpression)
    assert stmt.alternative is None


def test_if_used_as_value():
    stmt = parse_expr('var a = if (c) { 1 } else { 2 };')
    assert isinstance(stmt.value, IfExpression)


def test_function_statement():
    stmt = parse_expr('func add(a, b) { a + b }')
    assert stmt == FunctionStatement(
        Identifier('add'),
        [Identifier('a'), Identifier('b')],
        Block([InfixExpression('+', Identifier('a'), Identifier('b'))]),
    )


@pytest.mark.parametrize('source, params', [
    ('func() { 1 }', []),
    ('func(x) { 1 }', ['x']),
    ('func(x, y, z) { 1 }', ['x', 'y', 'z']),
])
def test_function_literal_parameters(source, params):
    literal = parse_expr(source)
    assert isinstance(literal, FunctionLiteral)
    assert [p.name for p in literal.parameters] == params


def test_call_expression():
    call = parse_expr('add(1, 2 * 3, f(4))')
    assert isinstance(call, CallExpression)
    assert call.callee == Identifier('add')
    assert len(call.arguments) == 3
    assert call.arguments[2] == CallExpression(Identifier('f'), [IntegerLiteral(4)])


def test_malformed_if_does_not_stop_parsing():
    program, errors = parse('if (x { 1 }\nvar y = 2;')
    assert len(errors) >= 1
    assert errors[0].startswith('expected next token to be ), got { instead')
    assert any(isinstance(s, VarStatement) and s.name.name == 'y' for s in program.statements)


def test_unterminated_block_is_an_error():
    program, errors = parse('func f() { 1')
    assert any('expected next token to be }, got EOF instead' in e for e in errors)
    assert program.statements == []


def test_unknown_statement_starter_is_an_error():
    _, errors = parse(') var x = 1;')
    assert errors == ['no prefix parse function for ) found (line 1, column 1)']


def test_illegal_character_is_reported():
    _, errors = parse('var x = @;')
    assert any("illegal character '@'" in e for e in errors)


def test_integer_out_of_range():
    _, errors = parse('9223372036854775808')
    assert errors[0].startswith('could not parse "9223372036854775808" as integer')


def test_largest_integer_literal():
    assert parse_expr('9223372036854775807') == IntegerLiteral(9223372036854775807)


def test_missing_assign_in_var():
    _, errors = parse('var x 5;')
    assert errors[0].startswith('expected next token to be =, got INT instead')


def test_parse_program_raises_with_all_errors():
    with pytest.raises(ParseError) as excinfo:
        parse_program('var = 1; var y 2;')
    assert len(excinfo.value.errors) >= 2


def test_program_renders_back_to_source():
    program = parse_program('var x = 1 + 2; if (x > 2) { exit x; } x')
    assert str(program) == 'var x = (1 + 2); if ((x > 2)) { exit x; } x; '


def test_if_statement_does_not_absorb_negation_on_next_line():
    program, errors = parse('if (true) { 1 }\n-2')
    assert errors == []
    assert len(program.statements) == 2
    assert isinstance(program.statements[0], IfExpression)
    assert program.statements[1] == InfixExpression('-', IntegerLiteral(0), IntegerLiteral(2))


def test_if_statement_does_not_absorb_group_on_next_line():
    program, errors = parse('var f = 1;\nif (true) { 1 }\n(2)')
    assert errors == []
    assert len(program.statements) == 3
    assert isinstance(program.statements[1], IfExpression)
    assert program.statements[2] == IntegerLiteral(2)


def test_if_as_var_initializer_still_takes_operators():
    stmt = parse_expr('var x = if (true) { 1 } else { 2 } + 3;')
    assert isinstance(stmt.value, InfixExpression)
    assert isinstance(stmt.value.left, IfExpression)
