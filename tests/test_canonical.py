from __future__ import annotations

import pytest

from lox_ref.ast_printer import AstPrinter
from lox_ref.canonical import CanonicalFormError, dumps, loads
from lox_ref.syntax.expr import Binary, Literal
from lox_ref.syntax.stmt import Block, Function, If, Print, Var, While
from lox_ref.token_types import TT, Token
from tests.support.harness import Recorder, binary, num, sample_exprs, sample_stmts, tok, var, variant_trace


def test_dumps_shape() -> None:
    tree = Binary(Literal(1), Token(TT.PLUS, "+", None, 3), Literal("a\"b"))

    assert dumps(tree) == '(Expr.Binary (Expr.Literal 1) <PLUS "+" nil 3> (Expr.Literal "a\\"b"))'


@pytest.mark.parametrize(
    "name",
    [pytest.param(name, id=f"expr-{name}") for name in sample_exprs()]
    + [pytest.param(name, id=f"stmt-{name}") for name in sample_stmts()],
)
def test_round_trip_dispatches_identically(name: str) -> None:
    samples = {**sample_exprs(), **sample_stmts()}
    original = samples[name]

    rebuilt = loads(dumps(original))

    assert rebuilt == original
    assert rebuilt is not original
    assert variant_trace(rebuilt) == variant_trace(original)
    assert rebuilt.accept(AstPrinter()) == original.accept(AstPrinter())


def test_round_trip_of_nested_program() -> None:
    program = Block([
        Var(tok("i"), num(0)),
        While(
            binary(var("i"), "<", num(3.5)),
            Block([
                If(var("i"), Print(Literal("yes\nno")), None),
                Function(tok("f"), [], []),
            ]),
        ),
    ])

    text = dumps(program)
    rebuilt = loads(text)

    assert rebuilt == program
    assert dumps(rebuilt) == text
    assert rebuilt.accept(Recorder()) == "Block"


def test_token_literal_and_line_survive() -> None:
    text = '(Expr.Variable <IDENTIFIER "count" "lit" 42>)'

    node = loads(text)

    assert node.name == Token(TT.IDENTIFIER, "count", "lit", 42)  # type: ignore[attr-defined]


@pytest.mark.parametrize(
    "text",
    [
        pytest.param("(Expr.Nope 1)", id="unknown-variant"),
        pytest.param('(Expr.Variable <NOPE "x" nil 1>)', id="unknown-token-type"),
        pytest.param('(Expr.Variable <IDENTIFIER "x" nil 1.5>)', id="fractional-token-line"),
        pytest.param('(Expr.Variable <IDENTIFIER "x" nil 2e3>)', id="exponent-token-line"),
        pytest.param("(Expr.Grouping)", id="missing-field"),
        pytest.param("(Expr.Grouping 1)", id="wrong-field-type"),
        pytest.param("(Expr.Grouping (Expr.Literal 1)", id="unbalanced"),
        pytest.param("42", id="bare-atom"),
        pytest.param("[(Expr.Literal 1)]", id="bare-sequence"),
        pytest.param("", id="empty"),
    ],
)
def test_malformed_text_is_rejected(text: str) -> None:
    with pytest.raises(CanonicalFormError):
        loads(text)


@pytest.mark.parametrize(
    "value",
    [
        pytest.param(float("inf"), id="infinity"),
        pytest.param(object(), id="opaque-object"),
    ],
)
def test_values_without_canonical_form(value: object) -> None:
    with pytest.raises(CanonicalFormError):
        dumps(Literal(value))
