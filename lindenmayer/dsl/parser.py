"""
Recursive-descent parser: tokens → Item.

item       := 'lsystem' IDENT '{' statement* '}'
statement  := axiom | replace | interpret | let
axiom      := 'axiom' symbol-run ';'
replace    := 'replace' symbol-run 'by' symbol-run ';'
interpret  := 'interpret' SYMBOL 'as' IDENT '(' param-list ')' ';'
let        := 'let' ... ';'

Parameter expressions fold left to right without precedence:
`1+2*3` is `(1+2)*3`.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from ..errors import ParseError
from ..grammar.alphabet import SymbolDefiner
from ..grammar.lsystem import LSystem
from .lexer import Token, TokenKind, lex
from .nodes import (
    Action,
    ActionParam,
    Axiom,
    BinaryExpr,
    BinOpKind,
    ConstantParam,
    DefineVariable,
    ExpressionParam,
    Interpret,
    Item,
    NumberParam,
    RandomExpr,
    Replace,
    Statement,
)

logger = logging.getLogger(__name__)

RUN_KINDS = (
    TokenKind.IDENTIFIER,
    TokenKind.SYMBOL,
    TokenKind.BRACKET,
    TokenKind.NUMBER,
    TokenKind.PARAM,
)
TRIGGER_KINDS = (
    TokenKind.IDENTIFIER,
    TokenKind.SYMBOL,
    TokenKind.BRACKET,
    TokenKind.NUMBER,
)

OPERATORS = {
    "+": BinOpKind.ADD,
    "-": BinOpKind.SUB,
    "*": BinOpKind.MUL,
    "/": BinOpKind.DIV,
    "%": BinOpKind.REM,
    "^": BinOpKind.BIT_XOR,
    "&": BinOpKind.BIT_AND,
    "|": BinOpKind.BIT_OR,
    "<": BinOpKind.LT,
    ">": BinOpKind.GT,
}
TWO_CHAR_OPERATORS = {
    ("<", "="): BinOpKind.LE,
    (">", "="): BinOpKind.GE,
    ("!", "="): BinOpKind.NE,
}


class TokenStream:
    """Cursor over the tokens, whitespace and comments dropped."""

    def __init__(self, tokens: Iterable[Token]):
        self.tokens = [t for t in tokens if t.kind not in (TokenKind.SPACE, TokenKind.COMMENT)]
        self.index = 0

    def finished(self) -> bool:
        return self.index >= len(self.tokens)

    def current(self) -> Optional[Token]:
        return self.peek(0)

    def peek(self, offset: int = 1) -> Optional[Token]:
        i = self.index + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def advance(self) -> None:
        self.index += 1


def _found(tok: Optional[Token]) -> str:
    return "end of input" if tok is None else tok.describe()


def _error(expected: str, tok: Optional[Token]) -> ParseError:
    return ParseError(
        f"expected {expected}, found {_found(tok)}",
        position=None if tok is None else tok.position,
    )


def _is(tok: Optional[Token], kind: TokenKind, value=None) -> bool:
    if tok is None or tok.kind is not kind:
        return False
    return value is None or tok.value == value


def parse(tokens: Iterable[Token]) -> Item:
    stream = TokenStream(tokens)

    if not _is(stream.current(), TokenKind.IDENTIFIER, "lsystem"):
        raise _error("'lsystem' keyword", stream.current())
    stream.advance()

    name = stream.current()
    if not _is(name, TokenKind.IDENTIFIER):
        raise _error("lsystem name after 'lsystem' (e.g. 'lsystem MyLSystem { .. }')", name)
    stream.advance()

    if not _is(stream.current(), TokenKind.BRACE, "{"):
        raise _error("'{' after lsystem name", stream.current())
    stream.advance()

    statements: List[Statement] = []
    while True:
        tok = stream.current()
        if tok is None:
            raise _error("'}' to close the lsystem block", tok)
        if _is(tok, TokenKind.BRACE, "}"):
            stream.advance()
            break
        statements.append(_parse_statement(stream))

    if not stream.finished():
        raise _error("end of input after the lsystem block", stream.current())

    logger.debug("parsed lsystem %s with %d statements", name.value, len(statements))
    return Item(name=name.value, statements=statements)


def _parse_statement(stream: TokenStream) -> Statement:
    tok = stream.current()
    keyword = tok.value if _is(tok, TokenKind.IDENTIFIER) else None
    if keyword == "axiom":
        return _parse_axiom(stream)
    if keyword == "replace":
        return _parse_replace(stream)
    if keyword == "interpret":
        return _parse_interpret(stream)
    if keyword == "let":
        return _parse_let(stream)
    raise _error("'axiom', 'replace', 'interpret' or 'let'", tok)


def _parse_axiom(stream: TokenStream) -> Axiom:
    stream.advance()
    parts = []
    while True:
        tok = stream.current()
        if tok is None:
            raise _error("';' after axiom (e.g. 'axiom AB;')", tok)
        if tok.kind is TokenKind.BREAK:
            stream.advance()
            break
        if tok.kind not in RUN_KINDS:
            raise _error("axiom symbol or ';'", tok)
        parts.append(tok.text)
        stream.advance()
    if not parts:
        raise _error("at least one symbol after 'axiom'", stream.peek(-1))
    return Axiom("".join(parts))


def _parse_replace(stream: TokenStream) -> Replace:
    stream.advance()
    predecessor = []
    while not _is(stream.current(), TokenKind.IDENTIFIER, "by"):
        tok = stream.current()
        if tok is None or tok.kind not in RUN_KINDS:
            raise _error("'by' after replace predecessor (e.g. 'replace X by Y;')", tok)
        predecessor.append(tok.text)
        stream.advance()
    if not predecessor:
        raise _error("replace predecessor before 'by'", stream.current())
    stream.advance()

    successor = []
    while not _is(stream.current(), TokenKind.BREAK):
        tok = stream.current()
        if tok is None or tok.kind not in RUN_KINDS:
            raise _error("';' after replace successor", tok)
        successor.append(tok.text)
        stream.advance()
    stream.advance()

    return Replace("".join(predecessor), "".join(successor))


def _parse_interpret(stream: TokenStream) -> Interpret:
    stream.advance()
    trigger = []
    while not _is(stream.current(), TokenKind.IDENTIFIER, "as"):
        tok = stream.current()
        if tok is None or tok.kind not in TRIGGER_KINDS:
            raise _error("'as' after interpret trigger (e.g. 'interpret X as Y(Z);')", tok)
        trigger.append(tok.text)
        stream.advance()
    symbols = "".join(trigger)
    if not symbols:
        raise _error("trigger symbol after 'interpret'", stream.current())
    if len(symbols) > 1:
        raise ParseError(
            f"only one interpret trigger symbol is supported, found '{symbols}'",
            position=stream.current().position,
        )
    stream.advance()

    name = stream.current()
    if not _is(name, TokenKind.IDENTIFIER):
        raise _error("action name after 'as'", name)
    stream.advance()

    if not _is(stream.current(), TokenKind.PARAM, "("):
        raise _error(f"'(' after action name '{name.value}'", stream.current())
    params = _parse_param_list(stream)

    if not _is(stream.current(), TokenKind.BREAK):
        raise _error("';' after interpret statement", stream.current())
    stream.advance()

    return Interpret(symbols, Action(name.value, params))


def _parse_let(stream: TokenStream) -> DefineVariable:
    while not _is(stream.current(), TokenKind.BREAK):
        if stream.finished():
            raise _error("';' after let statement", None)
        stream.advance()
    stream.advance()
    return DefineVariable()


def _parse_param_list(stream: TokenStream) -> List[ActionParam]:
    stream.advance()
    params: List[ActionParam] = []
    if _is(stream.current(), TokenKind.PARAM, ")"):
        stream.advance()
        return params

    while True:
        params.append(_parse_expression(stream))
        tok = stream.current()
        if _is(tok, TokenKind.SYMBOL, ","):
            stream.advance()
        elif _is(tok, TokenKind.PARAM, ")"):
            stream.advance()
            return params
        else:
            raise _error("',' or ')' in parameter list", tok)


def _peek_operator(stream: TokenStream) -> Optional[Tuple[BinOpKind, int]]:
    tok = stream.current()
    if not _is(tok, TokenKind.SYMBOL):
        return None
    nxt = stream.peek()
    if _is(nxt, TokenKind.SYMBOL) and nxt.position == tok.position + 1:
        pair = TWO_CHAR_OPERATORS.get((tok.value, nxt.value))
        if pair is not None:
            return pair, 2
    if tok.value in OPERATORS:
        return OPERATORS[tok.value], 1
    return None


def _parse_expression(stream: TokenStream) -> ActionParam:
    acc = _parse_operand(stream)
    while True:
        op = _peek_operator(stream)
        if op is None:
            return acc
        kind, width = op
        for _ in range(width):
            stream.advance()
        right = _parse_operand(stream)
        acc = ExpressionParam(BinaryExpr(kind, acc, right))


def _parse_operand(stream: TokenStream) -> ActionParam:
    tok = stream.current()
    if _is(tok, TokenKind.NUMBER):
        stream.advance()
        dot, frac = stream.current(), stream.peek()
        if (
            _is(dot, TokenKind.SYMBOL, ".")
            and _is(frac, TokenKind.NUMBER)
            and tok.text.isdigit()
            and frac.text.isdigit()
        ):
            stream.advance()
            stream.advance()
            # right-hand run is the fractional digits: 10 . 05 -> 10.05
            return NumberParam(float(f"{tok.text}.{frac.text}"))
        return NumberParam(tok.value)
    if _is(tok, TokenKind.IDENTIFIER):
        stream.advance()
        return ConstantParam(tok.value)
    if _is(tok, TokenKind.RANGE):
        stream.advance()
        low, high = tok.value
        return ExpressionParam(RandomExpr(low, high))
    if _is(tok, TokenKind.PARAM, "("):
        stream.advance()
        inner = _parse_expression(stream)
        if not _is(stream.current(), TokenKind.PARAM, ")"):
            raise _error("')' to close parameter group", stream.current())
        stream.advance()
        return inner
    raise _error("parameter value", tok)


def parse_source(source: str) -> Item:
    return parse(lex(source))


def load_lsystem(source: str, definer: Optional[SymbolDefiner] = None) -> LSystem:
    """Lex, parse and translate a script into an LSystem."""
    return LSystem.from_item(parse_source(source), definer)
