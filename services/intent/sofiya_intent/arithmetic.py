"""Sandboxed arithmetic: numeric literals, + - * / and parentheses only"""

import re
from typing import List, Optional, Tuple, Union

from . import lexicon

Number = Union[int, float]

MAX_EXPRESSION_LENGTH = 200
MAX_DEPTH = 32

_TOKEN_RE = re.compile(r"\s*(?:(\d+(?:\.\d*)?|\.\d+)|(.))")
_RUN_RE = re.compile(r"[-\d(.][\d\s.+\-*/()]*")
_HAS_OPERATION_RE = re.compile(r"\d\s*\)*\s*[-+*/]\s*\(*\s*-?\s*\.?\d")


class EvaluationError(ValueError):
    """Raised for anything the evaluator refuses to compute"""


def _operator_word_pattern(word: str) -> re.Pattern:
    body = r"\s+".join(re.escape(part) for part in word.split())
    if word.isalpha() or " " in word:
        body = rf"(?<![a-z]){body}(?![a-z])"
    # Only between an operand and the next operand
    return re.compile(rf"(?<=[\d)])\s*{body}\s*(?=[-\d(.])", re.IGNORECASE)


_OPERATOR_WORDS: Tuple[Tuple[re.Pattern, str], ...] = tuple(
    (_operator_word_pattern(word), symbol) for word, symbol in lexicon.OPERATOR_WORDS
)


def normalize_operators(text: str) -> str:
    """Rewrite spoken operators ("times", "guna", "÷") to symbols"""
    normalized = text.lower()
    for pattern, symbol in _OPERATOR_WORDS:
        normalized = pattern.sub(f" {symbol} ", normalized)
    return normalized


def find_expression(text: str) -> Optional[str]:
    """Locate the first maximal numeric-operator-numeric run in ``text``"""
    normalized = normalize_operators(text or "")
    for run in _RUN_RE.finditer(normalized):
        candidate = run.group(0).strip()
        if _HAS_OPERATION_RE.search(candidate):
            return re.sub(r"\s+", " ", candidate)
    return None


def _tokenize(expression: str) -> List[str]:
    tokens = []
    position = 0
    expression = expression.rstrip()
    while position < len(expression):
        match = _TOKEN_RE.match(expression, position)
        if not match:
            break
        number, symbol = match.groups()
        if number is not None:
            tokens.append(number)
        elif symbol in "+-*/()":
            tokens.append(symbol)
        else:
            raise EvaluationError(f"Unsupported character {symbol!r}")
        position = match.end()
    return tokens


class _Parser:
    """expr := term (('+'|'-') term)*
    term := factor (('*'|'/') factor)*
    factor := ('+'|'-') factor | NUMBER | '(' expr ')'
    """

    def __init__(self, tokens: List[str]):
        self.tokens = tokens
        self.position = 0
        self.depth = 0

    def peek(self) -> Optional[str]:
        return self.tokens[self.position] if self.position < len(self.tokens) else None

    def take(self) -> str:
        token = self.peek()
        if token is None:
            raise EvaluationError("Unexpected end of expression")
        self.position += 1
        return token

    def parse(self) -> float:
        value = self.expr()
        if self.peek() is not None:
            raise EvaluationError(f"Unexpected token {self.peek()!r}")
        return value

    def expr(self) -> float:
        value = self.term()
        while self.peek() in ("+", "-"):
            if self.take() == "+":
                value += self.term()
            else:
                value -= self.term()
        return value

    def term(self) -> float:
        value = self.factor()
        while self.peek() in ("*", "/"):
            operator = self.take()
            right = self.factor()
            if operator == "*":
                value *= right
            elif right == 0:
                raise EvaluationError("Division by zero")
            else:
                value /= right
        return value

    def factor(self) -> float:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise EvaluationError("Expression nested too deeply")
        try:
            token = self.take()
            if token == "+":
                return self.factor()
            if token == "-":
                return -self.factor()
            if token == "(":
                value = self.expr()
                if self.take() != ")":
                    raise EvaluationError("Unbalanced parentheses")
                return value
            if token in "*/)":
                raise EvaluationError(f"Unexpected token {token!r}")
            return float(token)
        finally:
            self.depth -= 1


def evaluate(expression: str) -> Number:
    """Evaluate ``expression`` or raise EvaluationError"""
    if not expression or not expression.strip():
        raise EvaluationError("Empty expression")
    if len(expression) > MAX_EXPRESSION_LENGTH:
        raise EvaluationError("Expression too long")

    tokens = _tokenize(normalize_operators(expression))
    if not tokens:
        raise EvaluationError("Empty expression")

    value = _Parser(tokens).parse()
    if value != value or value in (float("inf"), float("-inf")):
        raise EvaluationError("Result is not a finite number")

    rounded = round(value, 4)
    if rounded == int(rounded):
        return int(rounded)
    return rounded
