from typing import NamedTuple


class Position(NamedTuple):
    """Line/column of the token that introduced a token or AST node (1-based)."""
    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.col}"


class PlinkError(Exception):
    """Base exception for every error raised while lexing, parsing or running Plink code."""
    kind = 'Error'

    def __init__(self, message: str, position: Position):
        super().__init__(f"{position}: {message}")
        self.message = message
        self.position = position

    def format(self, prefix: str) -> str:
        return f"{prefix}:{self.position.line}:{self.position.col}: {self.message}"


class LexicalError(PlinkError):
    kind = 'LexicalError'


class ParseError(PlinkError):
    kind = 'SyntaxError'


class RuntimeTypeError(PlinkError):
    kind = 'TypeError'


class UnboundNameError(PlinkError):
    kind = 'NameError'


class BoundsError(PlinkError):
    kind = 'BoundsError'


class ArityError(PlinkError):
    kind = 'ArityError'


class CallDepthError(PlinkError):
    kind = 'RecursionError'


class InternalError(PlinkError):
    kind = 'InternalError'
