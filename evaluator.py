"""Fold an expression tree into a float, with IEEE-754 semantics throughout.

Unlike Python's own float arithmetic, nothing here raises: 1/0 is inf, 0/0 and
(-8)^0.5 are NaN, and overflowing powers give inf, as they would on the FPU (or
in numpy, which does the actual arithmetic).

>>> calc("10 / -1 * -2"), calc("1/0"), calc("(-8)^0.5")
(20.0, inf, nan)
"""
from typing import Callable, NamedTuple

import numpy as np

from parser import BinaryKind, BinaryOperator, Constant, UnaryKind, UnaryOperator, to_ast

BINARY_UFUNCS = {
    BinaryKind.PLUS: np.add,
    BinaryKind.MINUS: np.subtract,
    BinaryKind.TIMES: np.multiply,
    BinaryKind.DIVIDE: np.divide,
    BinaryKind.EXPONENT: np.power,
}
UNARY_UFUNCS = {
    UnaryKind.PLUS: np.positive,
    UnaryKind.MINUS: np.negative,
}


class Fold(NamedTuple):
    fun: Callable
    arity: int

    def apply(self, stack):
        n = self.arity
        stack[-n:] = [self.fun(*stack[-n:])]


def evaluate(ast) -> float:
    """Return the value of `ast`.

    The walk uses an explicit stack, so arbitrarily deep trees are fine.
    """
    values = []
    todo = [ast]
    with np.errstate(all="ignore"):
        while todo:
            node = todo.pop()
            if isinstance(node, Fold):
                node.apply(values)
            elif isinstance(node, Constant):
                values.append(np.float64(node.value))
            elif isinstance(node, UnaryOperator):
                todo += [Fold(UNARY_UFUNCS[node.kind], 1), node.operand]
            elif isinstance(node, BinaryOperator):
                todo += [Fold(BINARY_UFUNCS[node.kind], 2), node.right, node.left]
            else:
                raise TypeError(f"not an expression node: {node!r}")
    (ans,) = values
    return float(ans)


def calc(text) -> float:
    return evaluate(to_ast(text))
