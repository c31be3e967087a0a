import json

import pytest

from plink.ast import ArrayWrite, Call, FunctionLiteral, If, Program
from plink.ast_json import ast_from_obj, ast_to_obj
from plink.errors import BoundsError, Position
from plink.interpreter import Interpreter
from plink.parser import parse_program


SOURCE = """\
= a [1 2 3]
= f fn (xs n)
  if > n 2 return true elif false else pop xs end
  while false end
  push xs neg n
  = @ xs 0 % n 2
  void n
  return xor not true true
end
f(a 1)
a
@ a # a
"""


def test_json_round_trip_preserves_tree():
    program = parse_program(SOURCE)
    obj = ast_to_obj(program)
    restored = ast_from_obj(json.loads(json.dumps(obj)))
    assert isinstance(restored, Program)
    assert restored == program


def test_positions_are_line_col_pairs():
    obj = ast_to_obj(parse_program('\n  push a 1'))
    assert obj['body'][0]['pos'] == [2, 3]
    restored = ast_from_obj(obj)
    assert restored.body[0].pos == Position(2, 3)


def test_restored_ast_runs(capsys):
    restored = ast_from_obj(json.loads(json.dumps(ast_to_obj(parse_program(SOURCE)))))
    fn = restored.body[1].value
    assert isinstance(fn, FunctionLiteral)
    assert isinstance(fn.body[0], If)
    assert isinstance(fn.body[3], ArrayWrite)
    assert isinstance(restored.body[2].value, Call)
    interp = Interpreter()
    with pytest.raises(BoundsError) as excinfo:
        interp.run(restored)
    assert excinfo.value.position == Position(12, 5)
    assert capsys.readouterr().out == "true\n[1 2 -1]\n"


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({'type': 'Bogus', 'pos': [1, 1]})
    with pytest.raises(TypeError):
        ast_to_obj(object())
