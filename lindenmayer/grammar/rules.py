"""
Production rules.

A symbol with no rule keeps the identity production A -> A.
"""
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

# (symbol, index of the symbol in the buffer, buffer) -> successor or None
ContextSensitiveCallback = Callable[[str, int, str], Optional[str]]
# (module name, module params) -> successor or None
ParametricCallback = Callable[[str, Sequence[str]], Optional[str]]


@dataclass(frozen=True)
class GenericRule:
    """Exact-string replacement."""

    predecessor: str
    successor: str

    def apply(self, symbols: str) -> Optional[str]:
        if symbols == self.predecessor:
            return self.successor
        return None


@dataclass(frozen=True)
class ContextSensitiveRule:
    callback: ContextSensitiveCallback

    def apply(self, symbol: str, index: int, buffer: str) -> Optional[str]:
        return self.callback(symbol, index, buffer)


@dataclass(frozen=True)
class ParametricRule:
    callback: ParametricCallback

    def apply(self, symbol: str, params: Sequence[str]) -> Optional[str]:
        return self.callback(symbol, params)


def context_rule(
    left: Optional[str], right: Optional[str], successor: str
) -> ContextSensitiveCallback:
    """Callback for `left < X > right -> successor`. None matches any neighbor."""

    def callback(symbol: str, index: int, buffer: str) -> Optional[str]:
        if left is not None and (index == 0 or buffer[index - 1] != left):
            return None
        if right is not None and (index + 1 >= len(buffer) or buffer[index + 1] != right):
            return None
        return successor

    return callback
