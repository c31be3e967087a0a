"""Tree-walking interpreter for the Plink language.

The interpreter executes a parsed `Program` statement by statement
against a persistent global `Scope`. Expressions are evaluated directly
from the AST; every type rule is checked at the operation that needs it
and a violation raises a `PlinkError` positioned at the offending node.

`return` does not use exceptions. `execute` returns either `None`
(carry on with the next statement) or a `ReturnSignal`; every block
runner stops at the first signal and hands it upwards unchanged, and
only a function call consumes it. A signal that reaches the top level
ends the run with a notice on stderr.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from .ast import (
    Program, Expression, Statement, FalseLiteral, TrueLiteral, NumberLiteral,
    ArrayLiteral, FunctionLiteral, Identifier, Unary, Binary, Call,
    If, While, Assign, ArrayWrite, ArrayPush, ArrayPop, Return,
    ExpressionStatement,
)
from .environment import Scope
from .errors import (
    ArityError, BoundsError, CallDepthError, InternalError, Position, RuntimeTypeError,
    UnboundNameError,
)
from .parser import parse_program
from .types import VOID, ArrayVal, FunctionVal, format_number, to_string, type_name


TOP_LEVEL_RETURN_NOTICE = 'Returned from top-level code.'

# Python frames used per nested Plink call, for sizing the recursion limit
FRAMES_PER_CALL = 100


@dataclass
class ReturnSignal:
    """Produced by a `return` statement and carried outwards until a call consumes it."""
    value: Any


def divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def floored_mod(a: float, b: float) -> float:
    """Modulo whose result takes the sign of the divisor: `% neg 1 3` is 2."""
    if b == 0.0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    return math.fmod(math.fmod(a, b) + b, b)


class Interpreter:
    """Core interpreter that executes a Plink AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', max_call_depth: int = 256):
        self.global_env = Scope()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        self.max_call_depth = max_call_depth
        self.call_depth = 0

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, *exc_info):
        self.close()

    # Public API
    def run(self, program: Union[Program, Sequence[Statement]]) -> Optional[ReturnSignal]:
        """Execute the statements of `program` in the global scope.

        The first error raises and leaves any output already printed and
        any mutation already applied in place. Returns the stray
        `ReturnSignal` if a top-level `return` stopped the run.
        """
        statements = program.body if isinstance(program, Program) else program
        needed = self.max_call_depth * FRAMES_PER_CALL + 100
        if sys.getrecursionlimit() < needed:
            sys.setrecursionlimit(needed)
        for stmt in statements:
            if self.debug_level >= 1:
                self.debug(f"{stmt.pos}: {type(stmt).__name__}")
            try:
                signal = self.execute(stmt, self.global_env)
            except RecursionError:
                raise CallDepthError('expression nested too deeply', stmt.pos) from None
            if signal is not None:
                print(TOP_LEVEL_RETURN_NOTICE, file=sys.stderr)
                return signal
        return None

    def execute_block(self, statements: List[Statement], env: Scope) -> Optional[ReturnSignal]:
        for stmt in statements:
            signal = self.execute(stmt, env)
            # propagate return signals
            if signal is not None:
                return signal
        return None

    def execute(self, node: Statement, env: Scope) -> Optional[ReturnSignal]:
        if isinstance(node, ExpressionStatement):
            value = self.evaluate(node.value, env)
            if value is not VOID:
                print(to_string(value))
            return None
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {value!r}")
            return None
        if isinstance(node, If):
            for branch in node.branches:
                cond = self.evaluate(branch.condition, env)
                truthy = self.condition_value(cond, branch.condition, 'condition is not a boolean and not a number')
                if self.debug_level >= 3:
                    self.debug(f"if condition {cond!r} -> {truthy}")
                if truthy:
                    return self.execute_block(branch.body, env)
            return self.execute_block(node.else_body, env)
        if isinstance(node, While):
            while True:
                cond = self.evaluate(node.condition, env)
                truthy = self.condition_value(cond, node.condition, 'loop condition is not a boolean and not a number')
                if self.debug_level >= 3:
                    self.debug(f"while condition {cond!r} -> {truthy}")
                if not truthy:
                    return None
                signal = self.execute_block(node.body, env)
                if signal is not None:
                    return signal
        if isinstance(node, ArrayWrite):
            array = self.lookup_array(node.name, env, node.pos)
            index = self.evaluate(node.index, env)
            if not isinstance(index, float):
                raise RuntimeTypeError(f'array index is not a number (got {type_name(index)})', node.index.pos)
            i = self.array_index(array, index, node.index.pos)
            value = self.evaluate(node.value, env)
            if not isinstance(value, float):
                raise RuntimeTypeError(f'value written to array is not a number (got {type_name(value)})', node.value.pos)
            array.items[i] = value
            if self.debug_level >= 2:
                self.debug(f"write {node.name}[{i}] = {format_number(value)}")
            return None
        if isinstance(node, ArrayPush):
            array = self.lookup_array(node.name, env, node.pos)
            value = self.evaluate(node.value, env)
            if not isinstance(value, float):
                raise RuntimeTypeError(f'value pushed is not a number (got {type_name(value)})', node.value.pos)
            array.items.append(value)
            if self.debug_level >= 2:
                self.debug(f"push {node.name} {format_number(value)}")
            return None
        if isinstance(node, ArrayPop):
            array = self.lookup_array(node.name, env, node.pos)
            if not array.items:
                raise BoundsError(f'cannot pop from empty array {node.name}', node.pos)
            array.items.pop()
            if self.debug_level >= 2:
                self.debug(f"pop {node.name}")
            return None
        if isinstance(node, Return):
            return ReturnSignal(self.evaluate(node.value, env))
        raise InternalError(f"Internal error: unrecognized statement {type(node).__name__}", node.pos)

    def evaluate(self, node: Expression, env: Scope) -> Any:
        if isinstance(node, NumberLiteral):
            return node.value
        if isinstance(node, Identifier):
            return env.get(node.name)
        if isinstance(node, TrueLiteral):
            return True
        if isinstance(node, FalseLiteral):
            return False
        if isinstance(node, Binary):
            return self.evaluate_binary(node, env)
        if isinstance(node, Unary):
            return self.evaluate_unary(node, env)
        if isinstance(node, Call):
            func = self.evaluate(node.callee, env)
            if not isinstance(func, FunctionVal):
                raise RuntimeTypeError(f'call on a non-function value (got {type_name(func)})', node.callee.pos)
            if len(node.args) != len(func.params):
                raise ArityError(
                    f'provided {len(node.args)} argument(s) for function that takes {len(func.params)}',
                    node.pos,
                )
            args = [self.evaluate(arg, env) for arg in node.args]
            return self.call_function(func, args, node.pos)
        if isinstance(node, ArrayLiteral):
            items: List[float] = []
            for element in node.values:
                value = self.evaluate(element, env)
                if not isinstance(value, float):
                    raise RuntimeTypeError(f'array initializer is not a number (got {type_name(value)})', element.pos)
                items.append(value)
            return ArrayVal(items)
        if isinstance(node, FunctionLiteral):
            # The body is never mutated, so every evaluation can share it
            return FunctionVal(list(node.params), node.body)
        raise InternalError(f"Internal error: unrecognized expression {type(node).__name__}", node.pos)

    def evaluate_unary(self, node: Unary, env: Scope) -> Any:
        operand = self.evaluate(node.operand, env)
        if node.op == 'void':
            # evaluated for its side effects only
            return VOID
        if node.op == 'not':
            if not isinstance(operand, bool):
                raise RuntimeTypeError(f'logical not of non-boolean value (got {type_name(operand)})', node.operand.pos)
            return not operand
        if node.op == 'neg':
            if not isinstance(operand, float):
                raise RuntimeTypeError(f'negation of non-number value (got {type_name(operand)})', node.operand.pos)
            return -operand
        if node.op == '#':
            if not isinstance(operand, ArrayVal):
                raise RuntimeTypeError(f'array length of non-array value (got {type_name(operand)})', node.operand.pos)
            return float(len(operand.items))
        raise InternalError(f"Internal error: unrecognized unary operator {node.op!r}", node.pos)

    def evaluate_binary(self, node: Binary, env: Scope) -> Any:
        op = node.op
        left = self.evaluate(node.left, env)
        if op in ('and', 'or', 'xor'):
            if not isinstance(left, bool):
                raise RuntimeTypeError(f'logical operand is not a boolean (got {type_name(left)})', node.left.pos)
            # Short-circuit: the right operand is not evaluated at all
            if op == 'and' and not left:
                return False
            if op == 'or' and left:
                return True
            right = self.evaluate(node.right, env)
            if not isinstance(right, bool):
                raise RuntimeTypeError(f'logical operand is not a boolean (got {type_name(right)})', node.right.pos)
            if op == 'xor':
                return left != right
            return right
        if op == '@':
            if not isinstance(left, ArrayVal):
                raise RuntimeTypeError(f'array read operand is not an array (got {type_name(left)})', node.left.pos)
            index = self.evaluate(node.right, env)
            if not isinstance(index, float):
                raise RuntimeTypeError(f'array index is not a number (got {type_name(index)})', node.right.pos)
            return left.items[self.array_index(left, index, node.right.pos)]
        if not isinstance(left, float):
            raise RuntimeTypeError(f'operand of {op!r} is not a number (got {type_name(left)})', node.left.pos)
        right = self.evaluate(node.right, env)
        if not isinstance(right, float):
            raise RuntimeTypeError(f'operand of {op!r} is not a number (got {type_name(right)})', node.right.pos)
        return self.apply_binary_op(op, left, right, node.pos)

    def apply_binary_op(self, op: str, a: float, b: float, pos: Position) -> Any:
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            return divide(a, b)
        if op == '%':
            return floored_mod(a, b)
        if op == '<':
            return a < b
        if op == '>':
            return a > b
        if op == '<=':
            return a <= b
        if op == '>=':
            return a >= b
        if op == '==':
            return a == b
        if op == '!=':
            return a != b
        raise InternalError(f"Internal error: unrecognized binary operator {op!r}", pos)

    def call_function(self, func: FunctionVal, args: List[Any], pos: Position) -> Any:
        if self.call_depth >= self.max_call_depth:
            raise CallDepthError(f'maximum call depth of {self.max_call_depth} exceeded', pos)
        # No closures: the callee sees its arguments and nothing else
        call_env = Scope()
        for name, arg in zip(func.params, args):
            call_env.set(name, arg)
        if self.debug_level >= 1:
            self.debug(f"{pos}: call {func!r} with {args!r}")
        self.call_depth += 1
        try:
            signal = self.execute_block(func.body, call_env)
        except RecursionError:
            # operands nested deeper than the host stack allows
            raise CallDepthError(
                f'expressions nested too deeply at call depth {self.call_depth}', pos,
            ) from None
        finally:
            self.call_depth -= 1
        if signal is None:
            return VOID
        return signal.value

    def condition_value(self, value: Any, node: Expression, message: str) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, float):
            return value != 0.0
        raise RuntimeTypeError(f'{message} (got {type_name(value)})', node.pos)

    def lookup_array(self, name: str, env: Scope, pos: Position) -> ArrayVal:
        if name not in env:
            raise UnboundNameError(f'no array named {name}', pos)
        value = env.get(name)
        if not isinstance(value, ArrayVal):
            raise UnboundNameError(f'{name} is not an array (got {type_name(value)})', pos)
        return value

    def array_index(self, array: ArrayVal, index: float, pos: Position) -> int:
        """Truncate `index` toward zero and check it against the array bounds."""
        length = len(array.items)
        if not math.isfinite(index):
            raise BoundsError(f'array index {format_number(index)} out of bounds (array length is {length})', pos)
        i = int(index)
        if i < 0 or i >= length:
            raise BoundsError(f'array index {i} out of bounds (array length is {length})', pos)
        return i


def run_program(source: str, debug_level: int = 0) -> Optional[ReturnSignal]:
    """Convenience function to parse and run a Plink program from source string."""
    ast_program = parse_program(source)
    with Interpreter(debug_level=debug_level) as interpreter:
        return interpreter.run(ast_program)
