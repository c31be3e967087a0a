from pathlib import Path

from plink.interpreter import Interpreter
from plink.parser import parse_program


def test_program_4_short_circuit(capsys):
    with open(Path(__file__).parent.parent / 'examples' / 'program_4.plink', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # The push inside note() only happens when the right operand is evaluated
    assert out_lines == ['true', '0', 'false', '0', 'true', '1', 'true', '2']
