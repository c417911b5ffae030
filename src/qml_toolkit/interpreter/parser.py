"""
Module: interpreter.parser

Purpose:
    Tokenizer and parser for the QML condition-expression language. Turns
    CONDITION text such as `NOT "0" AND NOT "1" AND "2"` or
    `"0" MATCHES NOCASE "reduction" OR "0" NEAR NOCASE "reduction"` into a
    ConditionExpression.

Grammar (restricted, no parentheses):
    expression  := conjunction ("OR" conjunction)*
    conjunction := term (["AND"] term)*
    term        := "NOT"* literal [operator ["NOCASE"] literal]
    operator    := MATCHES | NEAR | = | >= | <= | > | <

    NOT binds to the single following term only. Terms written next to each
    other without AND (`NOT "0" "1"`) are AND-joined.

Key Functions:
    - parse_condition(): Parse text into a ConditionExpression
    - tokenize(): Split text into tokens (quoted literals are atomic)
    - is_bare_reference(): Detect a lone `"n"` reference

Dependencies:
    - re (std)
    - qml_toolkit.core.models.conditions

Used By:
    - scoring.aggregator
    - importer.question_types
"""

from __future__ import annotations

import logging
import re
from typing import List, NamedTuple, Optional

from qml_toolkit.core.errors import ConditionParseError
from qml_toolkit.core.models.conditions import (
    Comparison,
    ConditionExpression,
    Conjunction,
    Operator,
)

logger = logging.getLogger(__name__)

# Shortest full expression is `"0" = "1"`; anything under 4 chars is a bare `"n"`.
MIN_EXPRESSION_LENGTH = 4

_TOKEN_RE = re.compile(
    r'\s*(?:'
    r'(?P<literal>"[^"]*")'
    r'|(?P<number>-?\d+(?:\.\d+)?)'
    r'|(?P<symbol>>=|<=|=|>|<)'
    r'|(?P<word>[A-Za-z_]+)'
    r'|(?P<bad>\S)'
    r')'
)

_BARE_REFERENCE_RE = re.compile(r'^\s*"?\d+"?\s*$')

_WORD_OPERATORS = {
    "MATCHES": Operator.MATCHES,
    "NEAR": Operator.NEAR,
}
_SYMBOL_OPERATORS = {
    "=": Operator.EQUALS,
    ">=": Operator.GREATER_EQUAL,
    "<=": Operator.LESS_EQUAL,
    ">": Operator.GREATER,
    "<": Operator.LESS,
}
KEYWORDS = frozenset({"OR", "AND", "NOT", "NOCASE"})


class Token(NamedTuple):
    kind: str   # "literal", "keyword", "operator"
    value: str  # Unquoted literal, upper-case keyword, or operator value
    pos: int


def is_bare_reference(text: str) -> bool:
    """
    True when CONDITION text is a lone choice reference such as `"0"`.

    Such text is not a full expression; callers synthesize a combined
    condition from the sibling outcomes before parsing.
    """
    stripped = text.strip()
    if len(stripped) < MIN_EXPRESSION_LENGTH:
        return True
    return bool(_BARE_REFERENCE_RE.match(stripped))


def tokenize(text: str) -> List[Token]:
    """
    Split condition text into tokens.

    Raises:
        ConditionParseError: On characters or words outside the grammar
    """
    tokens: List[Token] = []
    pos = 0
    stripped_end = len(text.rstrip())
    while pos < stripped_end:
        m = _TOKEN_RE.match(text, pos)
        if m is None:  # pragma: no cover - the pattern always matches non-space
            break
        start = m.start(m.lastgroup) if m.lastgroup else pos
        if m.group("literal") is not None:
            tokens.append(Token("literal", m.group("literal")[1:-1], start))
        elif m.group("number") is not None:
            tokens.append(Token("literal", m.group("number"), start))
        elif m.group("symbol") is not None:
            tokens.append(Token("operator", m.group("symbol"), start))
        elif m.group("word") is not None:
            word = m.group("word").upper()
            if word in KEYWORDS:
                tokens.append(Token("keyword", word, start))
            elif word in _WORD_OPERATORS:
                tokens.append(Token("operator", word, start))
            else:
                raise ConditionParseError(
                    f"Unexpected word {m.group('word')!r} at position {start}",
                    condition=text,
                )
        else:
            raise ConditionParseError(
                f"Unexpected character {m.group('bad')!r} at position {start}",
                condition=text,
            )
        pos = m.end()
    return tokens


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, text: str, tokens: List[Token]):
        self.text = text
        self.tokens = tokens
        self.pos = 0

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _error(self, message: str) -> ConditionParseError:
        token = self._peek()
        where = f" at position {token.pos}" if token else " at end of condition"
        return ConditionParseError(f"{message}{where}", condition=self.text)

    def _expect_literal(self) -> str:
        token = self._peek()
        if token is None or token.kind != "literal":
            raise self._error("Expected a quoted literal")
        self.pos += 1
        return token.value

    def parse(self) -> ConditionExpression:
        if not self.tokens:
            raise ConditionParseError("Empty condition", condition=self.text)

        conjunctions: List[Conjunction] = []
        current: List[Comparison] = []
        while True:
            current.append(self._parse_term())
            token = self._peek()
            if token is None:
                break
            if token.kind == "keyword" and token.value == "OR":
                self.pos += 1
                conjunctions.append(Conjunction(tuple(current)))
                current = []
                if self._peek() is None:
                    raise self._error("Dangling OR")
            elif token.kind == "keyword" and token.value == "AND":
                self.pos += 1
                if self._peek() is None:
                    raise self._error("Dangling AND")
            elif token.kind == "literal" or token.value == "NOT":
                continue  # Juxtaposed terms are AND-joined
            else:
                raise self._error(f"Unexpected {token.value!r}")
        conjunctions.append(Conjunction(tuple(current)))
        return ConditionExpression(tuple(conjunctions), source=self.text)

    def _parse_term(self) -> Comparison:
        negations = 0
        token = self._peek()
        while token is not None and token.kind == "keyword" and token.value == "NOT":
            negations += 1
            self.pos += 1
            token = self._peek()

        left = self._expect_literal()
        token = self._peek()
        if token is None or token.kind != "operator":
            return Comparison(left=left, negated=negations % 2 == 1)

        self.pos += 1
        operator = _WORD_OPERATORS.get(token.value) or _SYMBOL_OPERATORS[token.value]
        case_sensitive = True
        token = self._peek()
        if token is not None and token.kind == "keyword" and token.value == "NOCASE":
            case_sensitive = False
            self.pos += 1
        right = self._expect_literal()
        return Comparison(
            left=left,
            operator=operator,
            right=right,
            negated=negations % 2 == 1,
            case_sensitive=case_sensitive,
        )


def parse_condition(
    text: str,
    *,
    outcome_id: Optional[str] = None,
    question_id: Optional[str] = None,
) -> ConditionExpression:
    """
    Parse CONDITION text into a ConditionExpression.

    Args:
        text: Raw condition text
        outcome_id: Outcome the text came from (error context only)
        question_id: Question the text came from (error context only)

    Returns:
        Parsed expression; `source` holds the original text

    Raises:
        ConditionParseError: If text does not match the grammar

    Example:
        >>> expr = parse_condition('NOT "0" AND "1"')
        >>> [c.negated for c in expr.comparisons()]
        [True, False]
    """
    try:
        expression = _Parser(text, tokenize(text)).parse()
    except ConditionParseError as exc:
        exc.outcome_id = exc.outcome_id or outcome_id
        exc.question_id = exc.question_id or question_id
        raise
    logger.debug("Parsed condition %r into %d conjunction(s)", text, len(expression.terms))
    return expression
