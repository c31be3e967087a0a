import pytest

from plink.ast import (
    ArrayLiteral, ArrayPop, ArrayPush, ArrayWrite, Assign, Binary, Call,
    ExpressionStatement, FalseLiteral, FunctionLiteral, Identifier, If,
    NumberLiteral, Return, TrueLiteral, Unary, While,
)
from plink.errors import ParseError, Position
from plink.lexer import TokenTag, tokenize
from plink.parser import parse_program, significant_tokens


def parse_expr(source):
    program = parse_program(source)
    assert len(program.body) == 1
    stmt = program.body[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.value


def test_significant_tokens_drop_newlines_and_comments():
    tokens = significant_tokens(tokenize('// hi\n+ 1\n 2\n'))
    assert [t.tag for t in tokens] == [TokenTag.PLUS, TokenTag.NUMBER, TokenTag.NUMBER]


def test_binary_prefix_operand_order():
    expr = parse_expr('- 10 3')
    assert isinstance(expr, Binary)
    assert expr.op == '-'
    assert expr.left.value == 10.0
    assert expr.right.value == 3.0
    assert expr.pos == Position(1, 1)


def test_nested_prefix_expression():
    # + (* 2 3) (neg 4)
    expr = parse_expr('+ * 2 3 neg 4')
    assert expr.op == '+'
    assert isinstance(expr.left, Binary) and expr.left.op == '*'
    assert isinstance(expr.right, Unary) and expr.right.op == 'neg'
    assert expr.right.operand.value == 4.0


@pytest.mark.parametrize('op', ['not', 'neg', 'void', '#'])
def test_unary_operators(op):
    expr = parse_expr(f'{op} x')
    assert isinstance(expr, Unary)
    assert expr.op == op
    assert isinstance(expr.operand, Identifier)


@pytest.mark.parametrize('op', ['+', '-', '*', '/', '%', 'and', 'or', 'xor', '<', '>', '<=', '>=', '==', '!=', '@'])
def test_binary_operators(op):
    expr = parse_expr(f'{op} a b')
    assert isinstance(expr, Binary)
    assert expr.op == op
    assert expr.left.name == 'a'
    assert expr.right.name == 'b'


def test_literals():
    assert isinstance(parse_expr('true'), TrueLiteral)
    assert isinstance(parse_expr('false'), FalseLiteral)
    assert isinstance(parse_expr('1.5'), NumberLiteral)
    arr = parse_expr('[1 + 1 1, x]')
    assert isinstance(arr, ArrayLiteral)
    assert len(arr.values) == 3
    assert isinstance(arr.values[1], Binary)
    assert parse_expr('[]').values == []


def test_function_literal():
    fn = parse_expr('fn (a, b c)\n  return + a b\nend')
    assert isinstance(fn, FunctionLiteral)
    assert fn.params == ['a', 'b', 'c']
    assert len(fn.body) == 1
    assert isinstance(fn.body[0], Return)


def test_postfix_call_chain():
    expr = parse_expr('f(1)(2 3)')
    assert isinstance(expr, Call)
    assert [a.value for a in expr.args] == [2.0, 3.0]
    assert isinstance(expr.callee, Call)
    assert expr.callee.callee.name == 'f'
    assert expr.pos == Position(1, 5)


def test_call_binds_to_innermost_operand():
    # + 1 (f 2) rather than (+ 1 f)(2)
    expr = parse_expr('+ 1 f(2)')
    assert isinstance(expr, Binary)
    assert isinstance(expr.right, Call)


def test_assignment_and_array_statements():
    program = parse_program('= x 5\n= @ x 0 7\npush x 1\npop x\n')
    assign, write, push, pop = program.body
    assert isinstance(assign, Assign) and assign.name == 'x'
    assert isinstance(write, ArrayWrite) and write.name == 'x'
    assert write.index.value == 0.0 and write.value.value == 7.0
    assert isinstance(push, ArrayPush) and push.value.value == 1.0
    assert isinstance(pop, ArrayPop) and pop.name == 'x'
    assert pop.pos == Position(4, 1)


def test_if_elif_else():
    program = parse_program('if a 1 elif b 2 3 elif c else 4 end')
    stmt = program.body[0]
    assert isinstance(stmt, If)
    assert len(stmt.branches) == 3
    assert [len(b.body) for b in stmt.branches] == [1, 2, 0]
    assert len(stmt.else_body) == 1


def test_if_without_else():
    stmt = parse_program('if a\n  1\nend\n2').body[0]
    assert isinstance(stmt, If)
    assert stmt.else_body == []


def test_while():
    program = parse_program('while < i 3\n  = i + i 1\nend')
    stmt = program.body[0]
    assert isinstance(stmt, While)
    assert isinstance(stmt.condition, Binary)
    assert isinstance(stmt.body[0], Assign)


def test_nested_blocks_match_their_own_end():
    program = parse_program('while a if b return 1 end = a false end x')
    assert len(program.body) == 2
    loop = program.body[0]
    assert isinstance(loop.body[0], If)
    assert isinstance(loop.body[1], Assign)


@pytest.mark.parametrize('source, position', [
    ('end', Position(1, 1)),
    (')', Position(1, 1)),
    ('= 5 5', Position(1, 3)),
    ('push 1 2', Position(1, 6)),
    ('if true 1', Position(1, 1)),
    ('while true\n  1', Position(1, 1)),
    ('fn (a 1) end', Position(1, 7)),
    ('fn (a a) end', Position(1, 7)),
    ('+ 1', Position(1, 1)),
    ('[1 2', Position(1, 1)),
    ('f(1', Position(1, 2)),
    ('if true else 1 elif false end', Position(1, 16)),
])
def test_parse_errors(source, position):
    with pytest.raises(ParseError) as excinfo:
        parse_program(source)
    assert excinfo.value.position == position
    assert excinfo.value.kind == 'SyntaxError'


def test_unrecognized_statement_message():
    with pytest.raises(ParseError) as excinfo:
        parse_program('= a 1\nelse')
    assert 'unrecognized statement' in excinfo.value.message
    assert excinfo.value.position == Position(2, 1)


def test_statement_positions():
    program = parse_program('\n\n  push a 1')
    assert program.body[0].pos == Position(3, 3)


def test_deeply_nested_prefix_operators_parse():
    expr = parse_expr('neg ' * 400 + '1')
    depth = 0
    while isinstance(expr, Unary):
        expr = expr.operand
        depth += 1
    assert depth == 400
    assert expr.value == 1.0


def test_nesting_beyond_host_stack_is_a_parse_error():
    with pytest.raises(ParseError) as excinfo:
        parse_program('= x ' + 'neg ' * 50000 + '1\n')
    assert excinfo.value.kind == 'SyntaxError'
    assert 'nested too deeply' in excinfo.value.message
    assert excinfo.value.position.line == 1
