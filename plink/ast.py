"""Abstract Syntax Tree (AST) definitions for the Plink language.

Two families of nodes exist: expressions, which evaluate to a runtime
value, and statements, which are executed for their effect. Every node
records the position of the token that introduced it so that runtime
errors can point back into the source. Nodes are built once by the
parser and never modified afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .errors import Position


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


class Expression(Node):
    pass


class Statement(Node):
    pass


@dataclass
class Program(Node):
    body: List[Statement]


# Expressions

@dataclass
class FalseLiteral(Expression):
    pos: Position


@dataclass
class TrueLiteral(Expression):
    pos: Position


@dataclass
class NumberLiteral(Expression):
    value: float
    pos: Position


@dataclass
class ArrayLiteral(Expression):
    values: List[Expression]
    pos: Position


@dataclass
class FunctionLiteral(Expression):
    params: List[str]
    body: List[Statement]
    pos: Position


@dataclass
class Identifier(Expression):
    name: str
    pos: Position


@dataclass
class Unary(Expression):
    op: str  # 'not', 'neg', 'void' or '#'
    operand: Expression
    pos: Position


@dataclass
class Binary(Expression):
    op: str
    left: Expression
    right: Expression
    pos: Position


@dataclass
class Call(Expression):
    callee: Expression
    args: List[Expression]
    pos: Position


# Statements

@dataclass
class Branch:
    condition: Expression
    body: List[Statement]


@dataclass
class If(Statement):
    branches: List[Branch]
    else_body: List[Statement]
    pos: Position


@dataclass
class While(Statement):
    condition: Expression
    body: List[Statement]
    pos: Position


@dataclass
class Assign(Statement):
    name: str
    value: Expression
    pos: Position


@dataclass
class ArrayWrite(Statement):
    name: str
    index: Expression
    value: Expression
    pos: Position


@dataclass
class ArrayPush(Statement):
    name: str
    value: Expression
    pos: Position


@dataclass
class ArrayPop(Statement):
    name: str
    pos: Position


@dataclass
class Return(Statement):
    value: Expression
    pos: Position


@dataclass
class ExpressionStatement(Statement):
    value: Expression
    pos: Position
