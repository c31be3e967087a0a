# Plink language package
# This package provides a lexer, parser and tree-walking interpreter for the Plink language.
from .errors import PlinkError, Position
from .interpreter import run_program, Interpreter
from .parser import parse_program

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'PlinkError',
    'Position',
]
