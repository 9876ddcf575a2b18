import pytest

from lindenmayer.dsl.lexer import lex
from lindenmayer.dsl.nodes import (
    Action,
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
)
from lindenmayer.dsl.parser import load_lsystem, parse, parse_source
from lindenmayer.errors import ParseError
from lindenmayer.grammar.lsystem import LSystem


def body(statements: str) -> Item:
    return parse_source(f"lsystem Test {{ {statements} }}")


def only_action(statements: str) -> Action:
    (statement,) = body(statements).statements
    assert isinstance(statement, Interpret)
    return statement.action


class TestItem:
    def test_axiom(self) -> None:
        item = parse(lex("lsystem KochCurve { axiom F; }"))
        assert item == Item("KochCurve", [Axiom("F")])

    def test_empty_block(self) -> None:
        assert parse_source("lsystem Empty {}") == Item("Empty", [])

    def test_axiom_with_brackets_and_modules(self) -> None:
        assert body("axiom F[+F]a(0,1);").statements == [Axiom("F[+F]a(0,1)")]

    def test_statements_keep_order(self) -> None:
        item = body("axiom A; replace A by AB; replace B by A; interpret A as DrawForward(1);")
        assert [type(s) for s in item.statements] == [Axiom, Replace, Replace, Interpret]

    def test_comments_are_ignored(self) -> None:
        item = parse_source("# header\nlsystem C {\n  axiom F; # start\n}")
        assert item.statements == [Axiom("F")]


class TestReplace:
    def test_single(self) -> None:
        assert body("replace F by F+F-F-F+F;").statements == [Replace("F", "F+F-F-F+F")]

    def test_brackets(self) -> None:
        assert body("replace X by F+[[X]-X]-F[-FX]+X;").statements == [
            Replace("X", "F+[[X]-X]-F[-FX]+X")
        ]

    def test_multi_symbol_predecessor(self) -> None:
        assert body("replace ABC by A;").statements == [Replace("ABC", "A")]

    def test_empty_successor(self) -> None:
        assert body("replace A by;").statements == [Replace("A", "")]

    def test_missing_by(self) -> None:
        with pytest.raises(ParseError, match="'by'"):
            body("replace F F;")


class TestInterpret:
    def test_simple(self) -> None:
        assert body("interpret F as DrawForward(1);").statements == [
            Interpret("F", Action("DrawForward", [NumberParam(1.0)]))
        ]

    def test_no_params(self) -> None:
        assert only_action("interpret [ as PushTransform();") == Action("PushTransform", [])

    def test_addition(self) -> None:
        action = only_action("interpret F as DrawForward(1+1);")
        assert action.params == [
            ExpressionParam(BinaryExpr(BinOpKind.ADD, NumberParam(1.0), NumberParam(1.0)))
        ]

    def test_two_additions(self) -> None:
        action = only_action("interpret F as DrawForward(1+1, 2+2);")
        assert action.params == [
            ExpressionParam(BinaryExpr(BinOpKind.ADD, NumberParam(1.0), NumberParam(1.0))),
            ExpressionParam(BinaryExpr(BinOpKind.ADD, NumberParam(2.0), NumberParam(2.0))),
        ]

    def test_decimals(self) -> None:
        action = only_action("interpret F as DrawForward(1.5, 2.5);")
        assert action.params == [NumberParam(1.5), NumberParam(2.5)]

    def test_division(self) -> None:
        action = only_action("interpret + as RotateZAction(3.14/2);")
        assert action.params == [
            ExpressionParam(BinaryExpr(BinOpKind.DIV, NumberParam(3.14), NumberParam(2.0)))
        ]

    def test_left_fold_without_precedence(self) -> None:
        action = only_action("interpret F as DrawForward(1+2*3);")
        inner = ExpressionParam(BinaryExpr(BinOpKind.ADD, NumberParam(1.0), NumberParam(2.0)))
        assert action.params == [
            ExpressionParam(BinaryExpr(BinOpKind.MUL, inner, NumberParam(3.0)))
        ]

    def test_parenthesized_group(self) -> None:
        action = only_action("interpret F as DrawForward(1+(2*3));")
        inner = ExpressionParam(BinaryExpr(BinOpKind.MUL, NumberParam(2.0), NumberParam(3.0)))
        assert action.params == [
            ExpressionParam(BinaryExpr(BinOpKind.ADD, NumberParam(1.0), inner))
        ]

    def test_two_char_comparison(self) -> None:
        action = only_action("interpret F as DrawForward(1<=2);")
        assert action.params[0].expr.op is BinOpKind.LE

    def test_range(self) -> None:
        action = only_action("interpret + as RotateZAction(0.40..0.47);")
        assert action.params == [ExpressionParam(RandomExpr(0.40, 0.47))]

    def test_constant(self) -> None:
        action = only_action("interpret F as DrawForward(length);")
        assert action.params == [ConstantParam("length")]

    def test_bracket_trigger(self) -> None:
        (statement,) = body("interpret ] as PopTransform();").statements
        assert statement.trigger == "]"

    def test_multiple_triggers(self) -> None:
        with pytest.raises(ParseError, match="only one interpret trigger"):
            body("interpret FF as DrawForward(1);")

    def test_missing_break(self) -> None:
        with pytest.raises(ParseError, match="';'"):
            body("interpret F as DrawForward(1)")

    def test_dangling_comma(self) -> None:
        with pytest.raises(ParseError, match="parameter value"):
            body("interpret F as DrawForward(1,);")

    def test_missing_open_paren(self) -> None:
        with pytest.raises(ParseError, match="'\\('"):
            body("interpret F as DrawForward;")


class TestErrors:
    def test_missing_lsystem_keyword(self) -> None:
        with pytest.raises(ParseError, match="'lsystem' keyword"):
            parse_source("axiom F;")

    def test_missing_name(self) -> None:
        with pytest.raises(ParseError, match="lsystem name"):
            parse_source("lsystem { axiom F; }")

    def test_unclosed_block(self) -> None:
        with pytest.raises(ParseError, match="'}'"):
            parse_source("lsystem A { axiom F;")

    def test_unknown_statement(self) -> None:
        with pytest.raises(ParseError, match="'axiom', 'replace', 'interpret' or 'let'"):
            body("draw F;")

    def test_axiom_without_break(self) -> None:
        with pytest.raises(ParseError):
            body("axiom F")

    def test_trailing_tokens(self) -> None:
        with pytest.raises(ParseError, match="end of input"):
            parse_source("lsystem A { axiom F; } extra")

    def test_error_carries_position(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_source("lsystem A { draw F; }")
        assert exc.value.position == 12
        assert exc.value.format().startswith("parse error:")


class TestLet:
    def test_let_is_opaque(self) -> None:
        assert body("let angle = 25; axiom F;").statements == [DefineVariable(), Axiom("F")]

    def test_let_without_break(self) -> None:
        with pytest.raises(ParseError, match="let"):
            body("let x = 1")


class TestLoad:
    def test_load_lsystem(self) -> None:
        lsystem = load_lsystem(
            "lsystem Algae { axiom A; replace A by AB; replace B by A; interpret A as DrawForward(1); }"
        )
        assert isinstance(lsystem, LSystem)
        assert lsystem.name == "Algae"
        assert lsystem.axiom == "A"
        assert set(lsystem.generic_rules) == {"A", "B"}
        assert lsystem.action_rules == [("A", Action("DrawForward", [NumberParam(1.0)]))]
        assert str(lsystem.generate(2)) == "ABA"
