"""
Common actions reused by most L-systems: moving, rotating and transform
stacking. Angles are in radians.
"""
from typing import Optional

from ..geometry.turtle import ExecuteContext, Segment
from ..grammar.alphabet import Symbol
from .params import ParamsResolver
from .registry import ActionResolver, LSystemAction


class DrawForward(LSystemAction):
    """Moves forward and records the travelled segment."""

    name = "DrawForward"

    def __init__(self, trigger: Symbol, length: float):
        super().__init__(trigger)
        self.length = length

    @classmethod
    def from_params(cls, trigger: Symbol, params: ParamsResolver) -> Optional["DrawForward"]:
        return cls(trigger, params.require(0))

    def execute(self, symbol: Symbol, context: ExecuteContext) -> None:
        start = context.turtle.origin.copy()
        context.turtle.forward(self.length)
        context.elements.append(Segment(start, context.turtle.origin.copy()))


class MoveForward(DrawForward):
    """Moves forward without drawing."""

    name = "MoveForward"

    def execute(self, symbol: Symbol, context: ExecuteContext) -> None:
        context.turtle.forward(self.length)


class _Rotate(LSystemAction):
    def __init__(self, trigger: Symbol, angle: float):
        super().__init__(trigger)
        self.angle = angle

    @classmethod
    def from_params(cls, trigger: Symbol, params: ParamsResolver):
        return cls(trigger, params.require(0))


class RotateXAction(_Rotate):
    name = "RotateXAction"

    def execute(self, symbol: Symbol, context: ExecuteContext) -> None:
        context.turtle.rotate_x(self.angle)


class RotateYAction(_Rotate):
    name = "RotateYAction"

    def execute(self, symbol: Symbol, context: ExecuteContext) -> None:
        context.turtle.rotate_y(self.angle)


class RotateZAction(_Rotate):
    name = "RotateZAction"

    def execute(self, symbol: Symbol, context: ExecuteContext) -> None:
        context.turtle.rotate_z(self.angle)


class PushTransform(LSystemAction):
    """Saves the current turtle; usually bound to `[`."""

    name = "PushTransform"

    @classmethod
    def from_params(cls, trigger: Symbol, params: ParamsResolver) -> "PushTransform":
        return cls(trigger)

    def execute(self, symbol: Symbol, context: ExecuteContext) -> None:
        context.transform_stack.push(context.turtle)


class PopTransform(LSystemAction):
    """Restores the last saved turtle; usually bound to `]`."""

    name = "PopTransform"

    @classmethod
    def from_params(cls, trigger: Symbol, params: ParamsResolver) -> "PopTransform":
        return cls(trigger)

    def execute(self, symbol: Symbol, context: ExecuteContext) -> None:
        context.turtle = context.transform_stack.pop()


DEFAULT_ACTIONS = (
    DrawForward,
    MoveForward,
    RotateXAction,
    RotateYAction,
    RotateZAction,
    PushTransform,
    PopTransform,
)


def register_default_actions(resolver: ActionResolver) -> ActionResolver:
    for action_type in DEFAULT_ACTIONS:
        resolver.register(action_type)
    return resolver
