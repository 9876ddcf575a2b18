import operator as op
from typing import List, Optional

import numpy as np

from ..dsl.nodes import (
    ActionParam,
    BinaryExpr,
    BinOpKind,
    ConstantParam,
    ExpressionParam,
    NoneParam,
    NumberParam,
    RandomExpr,
)
from ..errors import EvaluationError

OPS = {
    BinOpKind.ADD: op.add,
    BinOpKind.SUB: op.sub,
    BinOpKind.MUL: op.mul,
    BinOpKind.DIV: op.truediv,
}


class ParamsResolver:
    """Evaluates the parameters of one action.

    `Random` ranges draw a new sample on every evaluation.
    """

    def __init__(
        self,
        params: List[ActionParam],
        action_name: str = "",
        rng: Optional[np.random.Generator] = None,
    ):
        self.params = list(params)
        self.action_name = action_name
        self.rng = rng

    @classmethod
    def from_string(cls, params: str, action_name: str = "", rng=None) -> "ParamsResolver":
        """Build from comma-separated values such as module arguments ("1,2.5,x")."""
        resolved: List[ActionParam] = []
        for raw in params.split(",") if params else []:
            try:
                resolved.append(NumberParam(float(raw)))
            except ValueError:
                resolved.append(ConstantParam(raw.strip()))
        return cls(resolved, action_name, rng)

    def __len__(self) -> int:
        return len(self.params)

    def get(self, index: int) -> Optional[float]:
        if index >= len(self.params):
            return None
        return self._eval(self.params[index])

    def require(self, index: int) -> float:
        value = self.get(index)
        if value is None:
            raise EvaluationError(
                f"action '{self.action_name}' requires parameter {index}, none given"
            )
        return value

    def _eval(self, param: ActionParam) -> Optional[float]:
        if isinstance(param, NumberParam):
            return param.value
        if isinstance(param, ConstantParam):
            raise EvaluationError(
                f"constant '{param.name}' in action '{self.action_name}': "
                "constants/variables are not supported yet"
            )
        if isinstance(param, NoneParam):
            return None
        if isinstance(param, ExpressionParam):
            return self._eval_expr(param.expr)
        raise EvaluationError(f"bad parameter {param!r}")

    def _eval_expr(self, expr) -> Optional[float]:
        if isinstance(expr, BinaryExpr):
            if expr.op not in OPS:
                raise EvaluationError(
                    f"binary operation '{expr.op.value}' is not supported yet "
                    f"as parameter of action '{self.action_name}'"
                )
            lh = self._eval(expr.left)
            rh = self._eval(expr.right)
            if lh is None or rh is None:
                return None
            try:
                return float(OPS[expr.op](lh, rh))
            except ZeroDivisionError:
                raise EvaluationError(
                    f"division by zero in parameter of action '{self.action_name}'"
                ) from None
        if isinstance(expr, RandomExpr):
            if self.rng is None:
                raise EvaluationError(
                    f"random range in action '{self.action_name}' needs a random generator"
                )
            return float(self.rng.uniform(expr.low, expr.high))
        raise EvaluationError(f"bad expression {expr!r}")
