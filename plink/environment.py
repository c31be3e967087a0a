from typing import Any, Dict

from plink.types import VOID, VoidVal


class Scope:
    """A flat mapping from variable names to values.

    There is no parent link: a function call gets a brand new Scope holding
    only its arguments, so function bodies cannot see globals or the
    caller's bindings. Binding a name to Void removes it.
    """
    def __init__(self):
        self.values: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str) -> Any:
        # Unbound names read as Void, never as an error
        return self.values.get(name, VOID)

    def set(self, name: str, value: Any):
        if isinstance(value, VoidVal):
            self.void(name)
        else:
            self.values[name] = value

    def void(self, name: str):
        self.values.pop(name, None)
