"""AST produced by the parser. A strict tree of frozen dataclasses."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union


class BinOpKind(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    REM = "%"
    BIT_XOR = "^"
    BIT_AND = "&"
    BIT_OR = "|"
    LT = "<"
    LE = "<="
    NE = "!="
    GE = ">="
    GT = ">"


@dataclass(frozen=True)
class NumberParam:
    value: float


@dataclass(frozen=True)
class ConstantParam:
    name: str


@dataclass(frozen=True)
class NoneParam:
    pass


@dataclass(frozen=True)
class BinaryExpr:
    op: BinOpKind
    left: "ActionParam"
    right: "ActionParam"

    def __str__(self) -> str:
        return f"({_param_str(self.left)}{self.op.value}{_param_str(self.right)})"


@dataclass(frozen=True)
class RandomExpr:
    low: float
    high: float

    def __str__(self) -> str:
        return f"{self.low:g}..{self.high:g}"


ExprKind = Union[BinaryExpr, RandomExpr]


@dataclass(frozen=True)
class ExpressionParam:
    expr: ExprKind


ActionParam = Union[NumberParam, ConstantParam, ExpressionParam, NoneParam]


def _param_str(param: ActionParam) -> str:
    if isinstance(param, NumberParam):
        return f"{param.value:g}"
    if isinstance(param, ConstantParam):
        return param.name
    if isinstance(param, ExpressionParam):
        return str(param.expr)
    return ""


@dataclass(frozen=True)
class Action:
    name: str
    params: List[ActionParam] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.name}({', '.join(_param_str(p) for p in self.params)})"


@dataclass(frozen=True)
class Axiom:
    symbols: str


@dataclass(frozen=True)
class DefineVariable:
    # `let` statements are parsed but carry nothing yet
    pass


@dataclass(frozen=True)
class Replace:
    predecessor: str
    successor: str


@dataclass(frozen=True)
class Interpret:
    trigger: str
    action: Action


Statement = Union[Axiom, DefineVariable, Replace, Interpret]


@dataclass
class Item:
    name: str
    statements: List[Statement] = field(default_factory=list)
