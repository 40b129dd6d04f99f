"""Operator-precedence (shunting-yard) parser for arithmetic token streams.

>>> unparse(to_ast("2^3^2 - -(1+4) * 3"))
'2^3^2 - -(1 + 4) * 3'
>>> unparse(to_ast("(2^3)^2"))
'(2^3)^2'
"""
import logging
import math
import re
from enum import Enum
from typing import Literal, NamedTuple, Union

from lexer import Number, Operator, Paren, Symbol, lex

log = logging.getLogger(__name__)


class BinaryKind(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"
    EXPONENT = "^"


class UnaryKind(Enum):
    PLUS = "+"
    MINUS = "-"


class Constant(NamedTuple):
    value: float


class BinaryOperator(NamedTuple):
    kind: BinaryKind
    left: "Ast"
    right: "Ast"


class UnaryOperator(NamedTuple):
    kind: UnaryKind
    operand: "Ast"


Ast = Union[Constant, BinaryOperator, UnaryOperator]


class MalformedExpression(ValueError):
    pass


class Op(NamedTuple):
    """An operator stack entry."""

    kind: Union[BinaryKind, UnaryKind, None]
    prec: int
    assoc: Literal["l", "r"]  # left-associative, right-associative
    arity: int

    def __repr__(self):
        if self.kind is None:
            return "op('(')"
        return f"op({'u' * (self.arity == 1)}{self.kind.value!r})"

    def left_first(self, other):
        """Whether `self`, already on the stack, binds before incoming `other`."""
        return self.prec > other.prec or self.prec == other.prec and other.assoc == "l"

    def apply(self, stack):
        n = self.arity
        if len(stack) < n:
            raise MalformedExpression(f"{self!r} is missing an operand")
        node = UnaryOperator if n == 1 else BinaryOperator
        stack[-n:] = [node(self.kind, *stack[-n:])]


# One line per precedence level, loosest first.
BINARY_GROUPS = """
+l -l
*l /l
^r
""".strip()
BINARY_OPS = {
    Symbol(sym): Op(BinaryKind(sym), prec, assoc, 2)
    for prec, group in enumerate(BINARY_GROUPS.split("\n"), start=1)
    for [(sym, assoc)] in map(re.compile(r"^(\W)([lr])$").findall, group.split())
}
UNARY_PREC = 254
UNARY_OPS = {
    Symbol.PLUS: Op(UnaryKind.PLUS, UNARY_PREC, "l", 1),
    Symbol.MINUS: Op(UnaryKind.MINUS, UNARY_PREC, "l", 1),
}
OPEN_PAREN = Op(None, 0, "l", 0)


def resolve(symbol, expecting_operand):
    """Map a lexical operator symbol to its stack entry.

    >>> resolve(Symbol.MINUS, expecting_operand=True)
    op(u'-')
    >>> resolve(Symbol.MINUS, expecting_operand=False)
    op('-')
    """
    if expecting_operand and symbol in UNARY_OPS:
        return UNARY_OPS[symbol]
    return BINARY_OPS[symbol]


def op_of(node):
    if isinstance(node, UnaryOperator):
        return UNARY_OPS[Symbol(node.kind.value)]
    return BINARY_OPS[Symbol(node.kind.value)]


def shunt(tokens):
    exprs = []
    ops = []
    expecting_operand = True
    for tok in tokens:
        if isinstance(tok, Number):
            if not expecting_operand:
                raise MalformedExpression(f"missing operator before {tok.value!r}")
            exprs.append(Constant(tok.value))
            expecting_operand = False
        elif isinstance(tok, Operator):
            o = resolve(tok.symbol, expecting_operand)
            if o.arity == 2:
                if expecting_operand:
                    raise MalformedExpression(f"{o!r} is missing its left operand")
                while ops and ops[-1] is not OPEN_PAREN and ops[-1].left_first(o):
                    ops.pop().apply(exprs)
            ops.append(o)
            expecting_operand = True
        elif tok is Paren.OPEN:
            if not expecting_operand:
                raise MalformedExpression("missing operator before '('")
            ops.append(OPEN_PAREN)
        elif tok is Paren.CLOSE:
            if expecting_operand:
                raise MalformedExpression("missing operand before ')'")
            while ops and ops[-1] is not OPEN_PAREN:
                ops.pop().apply(exprs)
            if not ops:
                raise MalformedExpression("unmatched ')'")
            ops.pop()
        else:
            raise MalformedExpression(f"not a token: {tok!r}")
    while ops:
        if (o := ops.pop()) is OPEN_PAREN:
            raise MalformedExpression("unmatched '('")
        o.apply(exprs)
    if len(exprs) != 1:
        raise MalformedExpression(f"expected one expression, found {len(exprs)}")
    (ans,) = exprs
    return ans


def parse(tokens) -> Ast:
    """Build the expression tree for `tokens`.

    Raises `MalformedExpression` for unbalanced parentheses or operators
    without operands; no partial tree is ever returned.
    """
    tokens = list(tokens)
    try:
        return shunt(tokens)
    except MalformedExpression as e:
        log.debug("rejected %d tokens: %s", len(tokens), e)
        raise


def to_ast(text) -> Ast:
    return parse(lex(text))


def canonicalize_num(num):
    """Render a float without a spurious fraction.

    >>> canonicalize_num(7.0), canonicalize_num(0.5), canonicalize_num(-math.inf)
    ('7', '0.5', '-inf')
    """
    if not math.isfinite(num):
        return repr(num)
    return repr(integer if (integer := int(num)) == num else num)


def unparse(ast):
    """Render `ast` as infix text with only the parentheses parsing needs."""
    if isinstance(ast, Constant):
        return canonicalize_num(ast.value)
    if isinstance(ast, UnaryOperator):
        arg = unparse(ast.operand)
        if isinstance(ast.operand, BinaryOperator):
            arg = f"({arg})"
        return f"{ast.kind.value}{arg}"
    o = op_of(ast)
    x = unparse(ast.left)
    y = unparse(ast.right)
    if not isinstance(ast.left, Constant) and not op_of(ast.left).left_first(o):
        x = f"({x})"
    if isinstance(ast.right, BinaryOperator) and o.left_first(op_of(ast.right)):
        y = f"({y})"
    return f"{x}^{y}" if ast.kind is BinaryKind.EXPONENT else f"{x} {ast.kind.value} {y}"
