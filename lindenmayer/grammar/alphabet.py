"""Symbols, alphabets and the mapping from characters to symbols."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from ..errors import GrammarError


@dataclass(frozen=True)
class Variable:
    """Replaceable symbol; may trigger actions."""

    char: str

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True)
class Constant:
    """Never replaced, may still trigger actions."""

    char: str

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True)
class Module:
    """Parametric symbol, e.g. a(1,2,3)."""

    char: str
    params: Tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.params:
            return self.char
        return f"{self.char}({','.join(self.params)})"


Symbol = Union[Variable, Constant, Module]


class SymbolDefiner(ABC):
    @abstractmethod
    def into_symbol(self, char: str) -> Symbol:
        """Return the symbol for `char`, raising GrammarError when it has none."""

    def into_module(self, char: str, params: Sequence[str]) -> Module:
        # the head must be a defined symbol itself
        self.into_symbol(char)
        return Module(char, tuple(params))


VARIABLE_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZf01")
CONSTANT_CHARS = frozenset("∧\\/|&+-[]")


class DefaultSymbolDefiner(SymbolDefiner):
    """
    A-Z, f, 0 and 1 are variables.
    ∧ \\ / | & + - [ ] are constants.
    Any other character is an error.
    """

    def into_symbol(self, char: str) -> Symbol:
        if char in VARIABLE_CHARS:
            return Variable(char)
        if char in CONSTANT_CHARS:
            return Constant(char)
        raise GrammarError(f"unsupported character '{char}'")


@dataclass
class MappingSymbolDefiner(SymbolDefiner):
    """Alphabet from explicit character sets. Module heads map to `Module`."""

    variables: Iterable[str] = ""
    constants: Iterable[str] = ""
    modules: Iterable[str] = ""

    def __post_init__(self):
        self.variables = frozenset(self.variables)
        self.constants = frozenset(self.constants)
        self.modules = frozenset(self.modules)

    def into_symbol(self, char: str) -> Symbol:
        if char in self.variables:
            return Variable(char)
        if char in self.constants:
            return Constant(char)
        if char in self.modules:
            return Module(char)
        raise GrammarError(f"unsupported character '{char}'")


@dataclass
class Alphabet:
    symbols: List[Symbol] = field(default_factory=list)
    generation: int = 0

    @classmethod
    def from_string(cls, text: str, generation: int, definer: SymbolDefiner) -> "Alphabet":
        alphabet = cls(generation=generation)
        i = 0
        while i < len(text):
            char = text[i]
            if i + 1 < len(text) and text[i + 1] == "(":
                end = text.find(")", i + 2)
                if end == -1:
                    raise GrammarError(f"unterminated parameter list for module '{char}'")
                inner = text[i + 2:end]
                params = inner.split(",") if inner else []
                alphabet.symbols.append(definer.into_module(char, params))
                i = end + 1
                continue
            alphabet.symbols.append(definer.into_symbol(char))
            i += 1
        return alphabet

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.symbols)
