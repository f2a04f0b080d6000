from __future__ import annotations

import pytest

from lox_ref.ast_printer import AstPrinter, format_literal
from lox_ref.reverse_polish import ReversePolish
from lox_ref.syntax.expr import Assign, Binary, Call, Grouping, Literal, Logical, Ternary, Unary
from lox_ref.syntax.stmt import Block, Expression, Function, If, Print, Var, While
from tests.support.harness import binary, num, tok, var


def test_ast_printer_book_example() -> None:
    expression = Binary(
        Unary(tok("-"), num(123)),
        tok("*"),
        Grouping(num(45.67)),
    )

    assert AstPrinter().print(expression) == "(* (- 123) (group 45.67))"


def test_reverse_polish_book_example() -> None:
    expression = binary(
        Grouping(binary(num(1), "+", num(2))),
        "*",
        Grouping(binary(num(4), "-", num(3))),
    )

    assert ReversePolish().print(expression) == "1 2 + 4 3 - *"


@pytest.mark.parametrize(
    "build, expected",
    [
        pytest.param(lambda: Assign(tok("x"), num(1)), "(= x 1)", id="assign"),
        pytest.param(lambda: Call(var("f"), tok(")"), [num(1), var("y")]), "(call f 1 y)", id="call"),
        pytest.param(lambda: Call(var("f"), tok(")"), []), "(call f)", id="call-no-args"),
        pytest.param(lambda: Logical(Literal(True), tok("or"), Literal(None)), "(or true nil)", id="logical"),
        pytest.param(lambda: Ternary(var("c"), tok("?"), num(1), tok(":"), num(2)), "(?: c 1 2)", id="ternary"),
        pytest.param(lambda: Literal("text"), "text", id="string-literal"),
        pytest.param(lambda: Print(Literal("hi")), "(print hi)", id="print"),
        pytest.param(lambda: Expression(var("x")), "(; x)", id="expression-stmt"),
        pytest.param(lambda: Var(tok("x"), None), "(var x)", id="var-no-init"),
        pytest.param(lambda: Var(tok("x"), num(2)), "(var x 2)", id="var-init"),
        pytest.param(lambda: Block([Print(num(1)), Print(num(2))]), "(block (print 1) (print 2))", id="block"),
        pytest.param(lambda: If(var("c"), Print(num(1)), None), "(if c (print 1))", id="if"),
        pytest.param(lambda: If(var("c"), Print(num(1)), Print(num(2))), "(if c (print 1) (print 2))", id="if-else"),
        pytest.param(lambda: While(var("c"), Block([])), "(while c (block))", id="while"),
        pytest.param(
            lambda: Function(tok("add"), [tok("a"), tok("b")], [Print(binary(var("a"), "+", var("b")))]),
            "(fun add (a b) (print (+ a b)))",
            id="function",
        ),
    ],
)
def test_ast_printer_variants(build, expected: str) -> None:
    assert AstPrinter().print(build()) == expected


@pytest.mark.parametrize(
    "build, expected",
    [
        pytest.param(lambda: Assign(tok("x"), binary(num(1), "+", num(2))), "1 2 + x =", id="assign"),
        pytest.param(lambda: Call(var("f"), tok(")"), [num(1), num(2)]), "f 1 2 call", id="call"),
        pytest.param(lambda: Logical(var("a"), tok("and"), var("b")), "a b and", id="logical"),
        pytest.param(lambda: Unary(tok("!"), Literal(False)), "false !", id="unary"),
        pytest.param(lambda: Ternary(var("c"), tok("?"), num(1), tok(":"), num(2)), "c 1 2 ?:", id="ternary"),
        pytest.param(lambda: Literal(None), "nil", id="nil"),
    ],
)
def test_reverse_polish_variants(build, expected: str) -> None:
    assert ReversePolish().print(build()) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(None, "nil", id="nil"),
        pytest.param(True, "true", id="true"),
        pytest.param(False, "false", id="false"),
        pytest.param(2.5, "2.5", id="float"),
        pytest.param("s", "s", id="str"),
    ],
)
def test_format_literal(value: object, expected: str) -> None:
    assert format_literal(value) == expected
