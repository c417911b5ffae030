"""
Module: conditions

Purpose:
    Provides the parsed form of a QML CONDITION: a disjunction (OR) of
    conjunctions (AND) of optionally negated comparisons.

Key Classes:
    - Operator: Comparison operators understood by the parser
    - Comparison: One `"left" OP [NOCASE] "right"` term (or bare literal)
    - Conjunction: AND-joined comparisons
    - ConditionExpression: OR-joined conjunctions

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - interpreter.parser
    - scoring.aggregator
    - scoring.fractions
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


class Operator(str, Enum):
    """Comparison operator of a condition term."""
    MATCHES = "MATCHES"
    NEAR = "NEAR"
    EQUALS = "="
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    GREATER = ">"
    LESS = "<"
    SELECTED = "SELECTED"  # Bare literal: choice was selected

    def __str__(self) -> str:
        return self.value

    @property
    def is_range(self) -> bool:
        return self in (
            Operator.GREATER_EQUAL,
            Operator.LESS_EQUAL,
            Operator.GREATER,
            Operator.LESS,
        )


@dataclass(frozen=True, slots=True)
class Comparison:
    """
    One term of a condition.

    Attributes:
        left: Unquoted left operand (stem id or choice index)
        operator: Comparison operator
        right: Unquoted right operand ("" for SELECTED)
        negated: True when a NOT precedes the term
        case_sensitive: False when NOCASE follows the operator

    Example:
        >>> c = Comparison("0", Operator.MATCHES, "Paris", case_sensitive=False)
        >>> c.stem_id
        '0'
    """

    left: str
    operator: Operator = Operator.SELECTED
    right: str = ""
    negated: bool = False
    case_sensitive: bool = True

    @property
    def stem_id(self) -> str:
        return self.left

    @property
    def is_reference(self) -> bool:
        return self.operator is Operator.SELECTED

    def __str__(self) -> str:
        prefix = "NOT " if self.negated else ""
        if self.is_reference:
            return f'{prefix}"{self.left}"'
        nocase = " NOCASE" if not self.case_sensitive else ""
        return f'{prefix}"{self.left}" {self.operator}{nocase} "{self.right}"'


@dataclass(frozen=True, slots=True)
class Conjunction:
    """AND-joined comparisons, in source order."""

    comparisons: Tuple[Comparison, ...]

    def __iter__(self) -> Iterator[Comparison]:
        return iter(self.comparisons)

    def __len__(self) -> int:
        return len(self.comparisons)

    def __str__(self) -> str:
        return " AND ".join(str(c) for c in self.comparisons)


@dataclass(frozen=True, slots=True)
class ConditionExpression:
    """
    OR-joined conjunctions (immutable).

    Invariants:
        - At least one conjunction, each with at least one comparison
    """

    terms: Tuple[Conjunction, ...]
    source: str = ""

    def __post_init__(self) -> None:
        if not self.terms:
            raise ValueError("ConditionExpression needs at least one conjunction")
        if any(len(term) == 0 for term in self.terms):
            raise ValueError("Conjunctions cannot be empty")

    def comparisons(self) -> Iterator[Comparison]:
        """Iterate every comparison in source order."""
        for term in self.terms:
            yield from term

    def __str__(self) -> str:
        return " OR ".join(str(t) for t in self.terms)
