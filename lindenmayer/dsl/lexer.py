"""
Lexer for the L-system DSL.

lsystem KochCurve {
    axiom F;
    replace F by F+F-F-F+F;
    interpret F as DrawForward(1);
    interpret + as RotateZAction(3.1415/2);
}

`#` starts a comment that runs to the end of the line. Tokens keep their
exact source text, so joining `text` over the token list gives back the input.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

from ..errors import LexError


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    RANGE = "range"
    SYMBOL = "symbol"
    PARAM = "param"
    BRACKET = "bracket"
    BREAK = "break"
    BRACE = "brace"
    SPACE = "space"
    COMMENT = "comment"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Any = None
    text: str = field(default="", compare=False)
    position: int = field(default=-1, compare=False)

    def describe(self) -> str:
        if self.kind is TokenKind.SPACE:
            return "whitespace"
        return f"{self.kind.value} '{self.text}'"


IDENTIFIER_RE = re.compile(r"[A-Za-z]+")
NUMBER_RE = re.compile(r"\d[\d.]*")
SPACE_RE = re.compile(r"\s+")
COMMENT_RE = re.compile(r"#[^\n]*")
BOUND_RE = re.compile(r"\d+(?:\.\d+)?")

SYMBOL_CHARS = set("+-*/%<>=!&|\\^∧,.")
SINGLE_CHARS = {
    "[": TokenKind.BRACKET,
    "]": TokenKind.BRACKET,
    "(": TokenKind.PARAM,
    ")": TokenKind.PARAM,
    "{": TokenKind.BRACE,
    "}": TokenKind.BRACE,
    ";": TokenKind.BREAK,
}


def _number_token(text: str, pos: int) -> Token:
    if ".." in text:
        start, _, end = text.partition("..")
        if not end:
            raise LexError(
                f"expected a range 'start..end', found no 'end' in '{text}'", position=pos
            )
        if not BOUND_RE.fullmatch(start):
            raise LexError(f"could not parse start of the range '{text}'", position=pos)
        if not BOUND_RE.fullmatch(end):
            raise LexError(f"could not parse end of the range '{text}'", position=pos)
        return Token(TokenKind.RANGE, (float(start), float(end)), text, pos)
    try:
        return Token(TokenKind.NUMBER, float(text), text, pos)
    except ValueError:
        raise LexError(f"could not parse number '{text}'", position=pos) from None


def lex(source: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(source):
        ch = source[pos]

        m = IDENTIFIER_RE.match(source, pos)
        if m:
            tokens.append(Token(TokenKind.IDENTIFIER, m.group(), m.group(), pos))
            pos = m.end()
            continue
        m = NUMBER_RE.match(source, pos)
        if m:
            tokens.append(_number_token(m.group(), pos))
            pos = m.end()
            continue
        m = SPACE_RE.match(source, pos)
        if m:
            tokens.append(Token(TokenKind.SPACE, None, m.group(), pos))
            pos = m.end()
            continue
        m = COMMENT_RE.match(source, pos)
        if m:
            tokens.append(Token(TokenKind.COMMENT, None, m.group(), pos))
            pos = m.end()
            continue

        if ch in SYMBOL_CHARS:
            tokens.append(Token(TokenKind.SYMBOL, ch, ch, pos))
        elif ch in SINGLE_CHARS:
            kind = SINGLE_CHARS[ch]
            tokens.append(Token(kind, None if kind is TokenKind.BREAK else ch, ch, pos))
        else:
            raise LexError(f"unknown character '{ch}'", position=pos)
        pos += 1
    return tokens
