"""Parser tests.

Besides hand-picked cases, random expression trees are rendered with `unparse`
and parsed back; that has to give the identical tree. Since `unparse` emits only
the parentheses the grammar needs, this exercises precedence, associativity and
unary/binary disambiguation far more thoroughly than examples alone.
"""
import pytest
from hypothesis import example, given, strategies as st

from lexer import Number, Operator, Paren, Symbol, lex
from parser import *

C = Constant


def B(sym, left, right):
    return BinaryOperator(BinaryKind(sym), left, right)


def U(sym, operand):
    return UnaryOperator(UnaryKind(sym), operand)


def test_precedence():
    assert to_ast("1 + 2 * 3") == B("+", C(1.0), B("*", C(2.0), C(3.0)))
    assert to_ast("2 * 3 + 1") == B("+", B("*", C(2.0), C(3.0)), C(1.0))
    assert to_ast("3 * 2^2") == B("*", C(3.0), B("^", C(2.0), C(2.0)))


def test_associativity():
    assert to_ast("5 - 3 - 1") == to_ast("(5 - 3) - 1")
    assert to_ast("5 - 3 - 1") != to_ast("5 - (3 - 1)")
    assert to_ast("1 / 2 / 3") == to_ast("(1 / 2) / 3")
    assert to_ast("2^3^2") == B("^", C(2.0), B("^", C(3.0), C(2.0)))
    assert to_ast("2^3^2") != to_ast("(2^3)^2")


def test_unary():
    assert to_ast("--3") == U("-", U("-", C(3.0)))
    assert to_ast("+3") == U("+", C(3.0))
    assert to_ast("5 * -3") == B("*", C(5.0), U("-", C(3.0)))
    assert to_ast("(-3)") == U("-", C(3.0))
    assert to_ast("1 - -3") == B("-", C(1.0), U("-", C(3.0)))
    # Unary operators bind tighter than any binary one, exponentiation included.
    assert to_ast("-2^2") == B("^", U("-", C(2.0)), C(2.0))
    assert to_ast("2^-3^2") == B("^", C(2.0), B("^", U("-", C(3.0)), C(2.0)))


def test_parens():
    assert to_ast("((4 + 3))") == to_ast("4 + 3")
    assert to_ast("(1 + 2) * 3") == B("*", B("+", C(1.0), C(2.0)), C(3.0))


def test_parse_takes_tokens():
    tokens = [Paren.OPEN, Number(1.0), Operator(Symbol.MINUS), Number(2.0), Paren.CLOSE]
    assert parse(tokens) == B("-", C(1.0), C(2.0))
    assert parse(iter(tokens)) == parse(tokens)


@pytest.mark.parametrize(
    "text, reason",
    [
        ("", "expected one expression, found 0"),
        ("(1+2", "unmatched '\\('"),
        ("1+2)", "unmatched '\\)'"),
        ("((4 + 3)))", "unmatched '\\)'"),
        (")", "missing operand before"),
        ("1 2", "missing operator before 2.0"),
        ("(1)(2)", "missing operator before '\\('"),
        ("2 3 +", "missing operator"),
        ("()", "missing operand before"),
        ("3 -", "op\\('-'\\) is missing an operand"),
        ("-", "op\\(u'-'\\) is missing an operand"),
        ("* 3", "missing its left operand"),
        ("2 * / 3", "missing its left operand"),
        ("(1 +)", "missing operand before"),
    ],
)
def test_malformed(text, reason):
    with pytest.raises(MalformedExpression, match=reason):
        to_ast(text)


def test_malformed_is_value_error():
    with pytest.raises(ValueError):
        parse([])


def test_not_a_token():
    with pytest.raises(MalformedExpression, match="not a token"):
        parse([Number(1.0), "+", Number(2.0)])


def test_resolve():
    assert resolve(Symbol.PLUS, True) is UNARY_OPS[Symbol.PLUS]
    assert resolve(Symbol.PLUS, False) is BINARY_OPS[Symbol.PLUS]
    # Only + and - have unary forms.
    assert resolve(Symbol.TIMES, True) is BINARY_OPS[Symbol.TIMES]
    assert [(o.prec, o.assoc) for o in BINARY_OPS.values()] == [
        (1, "l"),
        (1, "l"),
        (2, "l"),
        (2, "l"),
        (3, "r"),
    ]
    assert all(o.prec == UNARY_PREC > 3 for o in UNARY_OPS.values())


def test_reparse_is_deterministic():
    tokens = lex("10 / -1 * -2 ^ (3 - 1)")
    assert parse(tokens) == parse(tokens)
    assert unparse(parse(tokens)) == "10 / -1 * -2^(3 - 1)"


def test_deep_nesting():
    depth = 5000
    ast = to_ast("-" * depth + "1")
    for _ in range(depth):
        ast = ast.operand
    assert ast == C(1.0)
    assert to_ast("(" * depth + "1" + ")" * depth) == C(1.0)


def test_unparse_handpicked():
    canonical = [
        ["0.1 + 0.2 + 0.3", "(0.1 + 0.2) + 0.3"],
        ["-1^2", "(-1)^2"],
        ["-(1^2)", "-(((1^2)))"],
        ["1 + 2 * 3", "1 + (2 * 3)"],
        ["(1 + 2) * 3"],
        ["1 - (2 - 3)"],
        ["2^3^2", "2^(3^2)"],
        ["--3", "-(-3)"],
        ["1e-07 * 3", "0.0000001 * 3.0"],
    ]
    for canon, *equivs in canonical:
        canon_ast = to_ast(canon)
        assert unparse(canon_ast) == canon
        for equiv in equivs:
            assert to_ast(equiv) == canon_ast


numbers = st.floats(min_value=0.0, allow_nan=False, allow_infinity=False).map(Constant)

# An ast is either a constant, or, recursively, a unary operator applied to an
# ast, or a binary operator applied to two asts.
asts = st.recursive(
    numbers,
    lambda child: st.builds(UnaryOperator, st.sampled_from(UnaryKind), child)
    | st.builds(BinaryOperator, st.sampled_from(BinaryKind), child, child),
)


@given(asts)
@example(B("^", U("-", B("+", C(1.0), C(2.0))), C(3.0)))
@example(B("^", B("^", C(2.0), U("-", C(3.0))), C(4.0)))
@example(B("-", C(1.0), B("+", C(2.0), C(3.0))))
def test_parse_roundtrips(ast):
    assert to_ast(unparse(ast)) == ast, "Didn't roundtrip"
