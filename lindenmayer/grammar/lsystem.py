"""
L-system: axiom, production rules and interpret bindings.

Expansion is recursive per symbol. Each matched symbol is re-expanded right
away for the remaining generations, so context-sensitive rules only see the
buffer of the call they are in, never a synchronized snapshot of the whole
generation. For context-free rule sets this is the same as classic parallel
rewriting.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..actions.registry import ActionResolver
from ..dsl.nodes import Action, Axiom, Interpret, Item, Replace
from ..errors import GrammarError, ParseError
from ..geometry.turtle import DEFAULT_SEED, ExecuteContext, Turtle
from .alphabet import Alphabet, DefaultSymbolDefiner, SymbolDefiner
from .rules import (
    ContextSensitiveCallback,
    ContextSensitiveRule,
    GenericRule,
    ParametricCallback,
    ParametricRule,
)

logger = logging.getLogger(__name__)

MAX_GENERATIONS = 255


class LSystem:
    def __init__(self, axiom: str, definer: Optional[SymbolDefiner] = None, name: str = ""):
        self.name = name
        self.axiom = axiom
        self.definer = definer or DefaultSymbolDefiner()
        self.generic_rules: Dict[str, GenericRule] = {}
        self.context_sensitive_rules: Dict[str, ContextSensitiveRule] = {}
        self.parametric_rules: Dict[str, ParametricRule] = {}
        self.action_rules: List[Tuple[str, Action]] = []

    @classmethod
    def from_item(cls, item: Item, definer: Optional[SymbolDefiner] = None) -> "LSystem":
        axiom = next((s.symbols for s in item.statements if isinstance(s, Axiom)), None)
        if axiom is None:
            raise ParseError(f"no axiom statement found in lsystem '{item.name}'")

        lsystem = cls(axiom, definer, item.name)
        for statement in item.statements:
            if isinstance(statement, Replace):
                lsystem.add_generic_rule(statement.predecessor, statement.successor)
            elif isinstance(statement, Interpret):
                lsystem.add_interpret(statement.trigger, statement.action)
        return lsystem

    def add_generic_rule(self, predecessor: str, successor: str) -> None:
        if len(predecessor) != 1:
            logger.warning(
                "predecessor '%s' spans %d symbols; rules are matched one symbol at a time",
                predecessor,
                len(predecessor),
            )
        logger.debug("%s: replace %s by %s", self.name, predecessor, successor)
        self.generic_rules[predecessor] = GenericRule(predecessor, successor)

    def add_stochastic_rule(self, predecessor: str, successor: str) -> None:
        self.add_generic_rule(predecessor, successor)

    def add_context_sensitive_rule(self, predecessor: str, callback: ContextSensitiveCallback) -> None:
        self.context_sensitive_rules[predecessor] = ContextSensitiveRule(callback)

    def add_parametric_rule(self, predecessor: str, callback: ParametricCallback) -> None:
        self.parametric_rules[predecessor] = ParametricRule(callback)

    def add_interpret(self, trigger: str, action: Action) -> None:
        self.action_rules.append((trigger, action))

    def generate(self, generations: int) -> Alphabet:
        if not 0 <= generations <= MAX_GENERATIONS:
            raise ValueError(f"generations must be between 0 and {MAX_GENERATIONS}, got {generations}")
        out: List[str] = []
        self._apply_rules(self.axiom, out, generations)
        result = "".join(out)
        logger.debug("%s: %d symbols after %d generations", self.name, len(result), generations)
        return Alphabet.from_string(result, generations, self.definer)

    def _apply_rules(self, symbols: str, out: List[str], generations_left: int) -> None:
        if generations_left == 0:
            out.append(symbols)
            return

        index = 0
        while index < len(symbols):
            symbol = symbols[index]

            # parametric module: X(a,b,...)
            if index + 1 < len(symbols) and symbols[index + 1] == "(":
                end = symbols.find(")", index + 2)
                if end == -1:
                    raise GrammarError(f"unterminated parameter list for module '{symbol}'")
                inner = symbols[index + 2:end]
                args = inner.split(",") if inner else []
                rule = self.parametric_rules.get(symbol)
                result = rule.apply(symbol, args) if rule is not None else None
                # parametric results are not rewritten further
                out.append(result if result is not None else symbols[index:end + 1])
                index = end + 1
                continue

            successor = None
            context_rule = self.context_sensitive_rules.get(symbol)
            if context_rule is not None:
                successor = context_rule.apply(symbol, index, symbols)
            if successor is None:
                generic_rule = self.generic_rules.get(symbol)
                if generic_rule is not None:
                    successor = generic_rule.apply(symbol)

            if successor is None:
                out.append(symbol)
            else:
                self._apply_rules(successor, out, generations_left - 1)
            index += 1

    def run(
        self,
        resolver: ActionResolver,
        alphabet: Alphabet,
        turtle: Optional[Turtle] = None,
        seed: int = DEFAULT_SEED,
    ) -> ExecuteContext:
        """Walk the alphabet, executing bound actions. One snapshot per symbol."""
        context = ExecuteContext(turtle, seed)

        bindings: Dict[str, Action] = {}
        for trigger, action in self.action_rules:
            bindings.setdefault(trigger, action)

        for symbol in alphabet:
            bound = bindings.get(symbol.char)
            if bound is not None:
                action = resolver.resolve(symbol, bound, context.rng)
                if action is not None:
                    action.execute(symbol, context)
            context.snapshot()
        return context


class LSystemBuilder:
    def __init__(self, axiom: str, definer: Optional[SymbolDefiner] = None, name: str = ""):
        self.lsystem = LSystem(axiom, definer, name)

    def with_generic_rules(self, rules: Iterable[Tuple[str, str]]) -> "LSystemBuilder":
        for predecessor, successor in rules:
            self.lsystem.add_generic_rule(predecessor, successor)
        return self

    def with_context_sensitive_rule(
        self, predecessor: str, callback: ContextSensitiveCallback
    ) -> "LSystemBuilder":
        self.lsystem.add_context_sensitive_rule(predecessor, callback)
        return self

    def with_parametric_rule(self, predecessor: str, callback: ParametricCallback) -> "LSystemBuilder":
        self.lsystem.add_parametric_rule(predecessor, callback)
        return self

    def with_interpret(self, trigger: str, action: Action) -> "LSystemBuilder":
        self.lsystem.add_interpret(trigger, action)
        return self

    def build(self) -> LSystem:
        return self.lsystem
