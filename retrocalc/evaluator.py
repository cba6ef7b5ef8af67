"""Arithmetic evaluation for retrocalc.

Expressions are evaluated with a small recursive-descent parser over a
bounded grammar, never with eval():

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | primary
    primary    := NUMBER | "(" expression ")"

Any literal "/0" in the input is rejected as division by zero before the
parser runs.
"""

import math
import re
from dataclasses import dataclass
from typing import List, Tuple

from .errors import DivisionByZero, InvalidExpression
from .models import Number, Step, format_number
from .tokenizer import build_steps

__all__ = ["Token", "evaluate", "calculate", "format_number", "lex"]

_NUMBER_PATTERN = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Deeply nested parentheses would exhaust the interpreter stack.
MAX_DEPTH = 100


@dataclass(frozen=True)
class Token:
    """A lexical token: kind is "number", "op", "(", ")" or "end"."""

    kind: str
    text: str
    position: int


def lex(expression: str) -> List[Token]:
    """Split an expression into parser tokens.

    Raises:
        InvalidExpression: On any character outside the grammar.
    """
    tokens = []
    pos = 0
    length = len(expression)

    while pos < length:
        char = expression[pos]
        if char.isspace():
            pos += 1
            continue
        if char in "+-*/":
            tokens.append(Token("op", char, pos))
            pos += 1
            continue
        if char in "()":
            tokens.append(Token(char, char, pos))
            pos += 1
            continue
        match = _NUMBER_PATTERN.match(expression, pos)
        if not match:
            raise InvalidExpression(
                f"Invalid expression: unexpected {char!r} at position {pos}"
            )
        tokens.append(Token("number", match.group(), pos))
        pos = match.end()

    tokens.append(Token("end", "", length))
    return tokens


def _to_number(text: str) -> Number:
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


class _Parser:
    """Recursive-descent evaluator over a token list."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "end":
            self.index += 1
        return token

    def _error(self, token: Token) -> InvalidExpression:
        if token.kind == "end":
            return InvalidExpression("Invalid expression: unexpected end of input")
        return InvalidExpression(
            f"Invalid expression: unexpected {token.text!r} at position {token.position}"
        )

    def parse(self) -> Number:
        value = self.expression()
        if self.current.kind != "end":
            raise self._error(self.current)
        return value

    def expression(self) -> Number:
        value = self.term()
        while self.current.kind == "op" and self.current.text in "+-":
            op = self._advance().text
            right = self.term()
            value = value + right if op == "+" else value - right
        return value

    def term(self) -> Number:
        value = self.unary()
        while self.current.kind == "op" and self.current.text in "*/":
            op = self._advance().text
            right = self.unary()
            if op == "*":
                value = value * right
            else:
                if right == 0:
                    raise DivisionByZero()
                value = value / right
        return value

    def unary(self) -> Number:
        if self.current.kind == "op" and self.current.text in "+-":
            op = self._advance().text
            self._enter()
            try:
                operand = self.unary()
            finally:
                self.depth -= 1
            return -operand if op == "-" else operand
        return self.primary()

    def primary(self) -> Number:
        token = self._advance()
        if token.kind == "number":
            return _to_number(token.text)
        if token.kind == "(":
            self._enter()
            try:
                value = self.expression()
            finally:
                self.depth -= 1
            closing = self._advance()
            if closing.kind != ")":
                raise self._error(closing)
            return value
        raise self._error(token)

    def _enter(self):
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise InvalidExpression("Invalid expression: nesting too deep")


def _normalize(value: Number) -> Number:
    # Integers too large to print exactly are shown in float form, as a
    # browser would.
    if isinstance(value, int) and abs(value) >= 1e21:
        value = float(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidExpression("Invalid expression: result is not a finite number")
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
    return value


def evaluate(expression: str) -> Number:
    """Evaluate an arithmetic expression.

    Args:
        expression: Raw expression text.

    Returns:
        The result. Integral results are returned as int.

    Raises:
        DivisionByZero: If the text contains "/0" or a divisor evaluates to 0.
        InvalidExpression: For any other failure, including empty input.
    """
    if "/0" in expression:
        raise DivisionByZero()
    if not expression.strip():
        raise InvalidExpression()

    try:
        return _normalize(_Parser(lex(expression)).parse())
    except (OverflowError, ValueError) as e:
        raise InvalidExpression(f"Invalid expression: {e}") from e


def calculate(expression: str) -> Tuple[Number, List[Step]]:
    """Evaluate an expression and build its display steps.

    Steps are only built when evaluation succeeds.
    """
    result = evaluate(expression)
    return result, build_steps(expression, result)
