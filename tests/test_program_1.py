from pathlib import Path

from plink.interpreter import Interpreter
from plink.parser import parse_program


def test_program_1_prefix_arithmetic(capsys):
    with open(Path(__file__).parent.parent / 'examples' / 'program_1.plink', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # % is a floored modulo: -1 mod 3 is 2, not -1
    assert out_lines == ['7', '2', '10', '0.25', '15', '1e+06']
