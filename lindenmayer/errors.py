"""Error taxonomy for the L-system pipeline.

Every failure is terminal for the lex/parse/generate/run call that raised it.
`kind` tells callers which stage failed.
"""
from typing import Optional


class LSystemError(ValueError):
    """Base class for all errors surfaced to users."""

    kind = "lsystem"

    def __init__(self, message: str, *, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def format(self) -> str:
        if self.position is None:
            return f"{self.kind} error: {self.message}"
        return f"{self.kind} error: {self.message} (offset {self.position})"


class LexError(LSystemError):
    kind = "lex"


class ParseError(LSystemError):
    kind = "parse"


class GrammarError(LSystemError):
    kind = "grammar"


class EvaluationError(LSystemError):
    kind = "evaluation"


class TransformStackError(LSystemError):
    kind = "runtime"


class ConfigError(LSystemError):
    kind = "config"
