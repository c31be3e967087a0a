"""Runtime values of the Plink interpreter.

Plink has five kinds of values:

* Void   - the singleton `VOID`, the result of reading an unbound name;
* Bool   - a Python `bool`;
* Number - a Python `float` (all numbers are doubles);
* Array  - an `ArrayVal` wrapping a list of floats;
* Function - a `FunctionVal` holding parameter names and a body.

Bool, Number and Void are immutable, so handing out the stored object
gives copy semantics. Arrays and functions are shared by reference: two
bindings holding the same `ArrayVal` observe each other's pushes, pops
and element writes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from .ast import Statement


class VoidVal:
    """Marker type for the Plink `Void` value. Use the `VOID` singleton."""
    def __repr__(self) -> str:
        return 'Void'


VOID = VoidVal()


@dataclass(eq=False)
class ArrayVal:
    """A shared, mutable sequence of numbers."""
    items: List[float]

    def __repr__(self) -> str:
        return f"Array({self.items!r})"


@dataclass(eq=False)
class FunctionVal:
    """A function value. Calls run `body` in a scope holding only `params`."""
    params: List[str]
    body: List[Statement]

    def __repr__(self) -> str:
        return f"<fn ({' '.join(self.params)})>"


def type_name(value: Any) -> str:
    """Return the Plink type name of a runtime value."""
    if isinstance(value, VoidVal):
        return 'Void'
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, ArrayVal):
        return 'Array'
    if isinstance(value, FunctionVal):
        return 'Function'
    return type(value).__name__


def format_number(value: float) -> str:
    """Format a number the way C's `%g` does: six significant digits, no trailing zeros."""
    return f"{value:g}"


def to_string(value: Any) -> str:
    """Convert a value to the text printed by an expression statement.

    Void has no textual form and yields an empty string; callers skip
    printing it altogether.
    """
    if isinstance(value, VoidVal):
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, ArrayVal):
        return '[' + ' '.join(format_number(item) for item in value.items) + ']'
    if isinstance(value, FunctionVal):
        return 'fn (' + ' '.join(value.params) + ')'
    return str(value)
