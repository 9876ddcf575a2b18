from typing import Dict, Optional, Tuple

from ..actions.registry import ActionResolver
from ..geometry.turtle import DEFAULT_SEED, ExecuteContext, Turtle
from .alphabet import Alphabet
from .lsystem import LSystem


class LSystemFactory:
    """Memoizes alphabets per (lsystem, generations) and runs per (lsystem, generations, seed).

    Entries are keyed on the LSystem instance, so systems sharing a name never collide.
    """

    def __init__(self, resolver: ActionResolver):
        self.resolver = resolver
        self.alphabets: Dict[Tuple[LSystem, int], Alphabet] = {}
        self.contexts: Dict[Tuple[LSystem, int, int], ExecuteContext] = {}

    def generate(self, lsystem: LSystem, generations: int) -> Alphabet:
        key = (lsystem, generations)
        if key not in self.alphabets:
            self.alphabets[key] = lsystem.generate(generations)
        return self.alphabets[key]

    def render(
        self,
        lsystem: LSystem,
        generations: int,
        turtle: Optional[Turtle] = None,
        seed: int = DEFAULT_SEED,
    ) -> ExecuteContext:
        # the starting turtle is not part of the key
        key = (lsystem, generations, seed)
        if key not in self.contexts:
            alphabet = self.generate(lsystem, generations)
            self.contexts[key] = lsystem.run(self.resolver, alphabet, turtle, seed)
        return self.contexts[key]

    def clear(self) -> None:
        self.alphabets.clear()
        self.contexts.clear()
