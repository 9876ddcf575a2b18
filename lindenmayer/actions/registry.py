"""
Action plug-ins and the registry that resolves them.

An action type only has to implement `from_params` and `execute`; the registry
keys factories by (action name, trigger char) and never needs to know the
concrete types.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Dict, Optional, Tuple, Type

import numpy as np

from ..dsl.nodes import Action
from ..geometry.turtle import ExecuteContext
from ..grammar.alphabet import Module, Symbol
from .params import ParamsResolver

logger = logging.getLogger(__name__)

ActionFactory = Callable[[Symbol, Action, Optional[np.random.Generator]], Optional["LSystemAction"]]


class LSystemAction(ABC):
    name: ClassVar[str]

    def __init__(self, trigger: Symbol):
        self._trigger = trigger

    @property
    def trigger(self) -> Symbol:
        return self._trigger

    @classmethod
    @abstractmethod
    def from_params(cls, trigger: Symbol, params: ParamsResolver) -> Optional["LSystemAction"]:
        """Build the action, or return None when the parameters don't fit it."""

    @abstractmethod
    def execute(self, symbol: Symbol, context: ExecuteContext) -> None:
        ...


class ActionResolver:
    def __init__(self):
        # trigger None matches any symbol
        self.actions: Dict[Tuple[str, Optional[str]], ActionFactory] = {}

    def register(self, action_type: Type[LSystemAction], *triggers: str) -> None:
        def factory(trigger: Symbol, action: Action, rng=None) -> Optional[LSystemAction]:
            if not action.params and isinstance(trigger, Module) and trigger.params:
                # a bare binding takes the module arguments, e.g. `a(2)` with DrawForward()
                params = ParamsResolver.from_string(",".join(trigger.params), action_type.name, rng)
            else:
                params = ParamsResolver(action.params, action_type.name, rng)
            return action_type.from_params(trigger, params)

        for trigger in triggers or (None,):
            self.actions[(action_type.name, trigger)] = factory

    def resolve(
        self,
        trigger: Symbol,
        action: Action,
        rng: Optional[np.random.Generator] = None,
    ) -> Optional[LSystemAction]:
        factory = self.actions.get((action.name, trigger.char)) or self.actions.get(
            (action.name, None)
        )
        if factory is None:
            logger.debug("no action registered for %s on '%s'", action.name, trigger.char)
            return None
        return factory(trigger, action, rng)
