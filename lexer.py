"""Turn arithmetic source text into a flat list of tokens.

Signs are never part of a numeric literal; whether a `-` is unary or binary is
for the parser to decide.

>>> lex("-1.5e3 * (2)")  # doctest: +NORMALIZE_WHITESPACE
[Operator(symbol=<Symbol.MINUS: '-'>), Number(value=1500.0),
 Operator(symbol=<Symbol.TIMES: '*'>), <Paren.OPEN: '('>, Number(value=2.0),
 <Paren.CLOSE: ')'>]
"""
import re
from enum import Enum
from typing import Iterator, List, NamedTuple, Union


class Symbol(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"
    EXPONENT = "^"


class Number(NamedTuple):
    value: float


class Operator(NamedTuple):
    symbol: Symbol


class Paren(Enum):
    OPEN = "("
    CLOSE = ")"


Token = Union[Number, Operator, Paren]


class LexError(ValueError):
    def __init__(self, text, pos):
        self.text = text
        self.pos = pos
        super().__init__(f"unexpected input at position {pos}: {text[pos:]!r}")


space_rex = re.compile(r"\s*")
token_rex = re.compile(
    r"""
    (?P<number>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)
  | (?P<operator>[-+*/^])
  | (?P<paren>[()])
    """,
    re.VERBOSE,
)


def iter_tokens(text) -> Iterator[Token]:
    pos = space_rex.match(text).end()
    while pos < len(text):
        if not (m := token_rex.match(text, pos)):
            raise LexError(text, pos)
        lexeme = m.group()
        if m.lastgroup == "number":
            yield Number(float(lexeme))
        elif m.lastgroup == "operator":
            yield Operator(Symbol(lexeme))
        else:
            yield Paren(lexeme)
        pos = space_rex.match(text, m.end()).end()


def lex(text) -> List[Token]:
    """Return all tokens in `text`, or raise `LexError` on anything unrecognised.

    >>> lex("  ")
    []
    >>> lex("2 % 3")
    Traceback (most recent call last):
        ...
    lexer.LexError: unexpected input at position 2: '% 3'
    """
    return list(iter_tokens(text))
