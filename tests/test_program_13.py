from pathlib import Path

from plink.interpreter import Interpreter
from plink.parser import parse_program


def test_program_13_higher_order(capsys):
    with open(Path(__file__).parent.parent / 'examples' / 'program_13.plink', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['[1 4 9 16]', '[-1 -2 -3]']
