"""
Module: answers

Purpose:
    Output value objects of the scoring synthesizers: per-choice fractions
    for multichoice questions and stem-to-choice matches for matching and
    embedded-answer questions.

Key Classes:
    - ChoiceMark: Correct/incorrect mark of one choice key
    - Match: One stem-to-choice correctness association
    - MatchResult: All matches plus the residual distractor pool

Dependencies:
    - dataclasses (std)
    - .conditions.Operator
    - .outcomes.Choice
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .conditions import Operator
from .outcomes import Choice


@dataclass(frozen=True, slots=True)
class ChoiceMark:
    """Correctness of one choice as read from a combined condition."""

    key: str
    correct: bool


@dataclass(frozen=True, slots=True)
class Match:
    """
    Stem-to-choice correctness association.

    Attributes:
        stem_id: Left operand of the comparison ("0", "1", ...)
        choice_text: Accepted answer text (right operand)
        score: Score of the outcome the match came from
        feedback: Feedback of that outcome
        case_sensitive: False when the comparison used NOCASE
        operator: Operator of the originating comparison
    """

    stem_id: str
    choice_text: str
    score: int
    feedback: str = ""
    case_sensitive: bool = True
    operator: Operator = Operator.MATCHES

    @property
    def is_correct(self) -> bool:
        return self.score > 0


@dataclass(frozen=True)
class MatchResult:
    """
    Matches for every stem plus choices that matched no stem.

    Attributes:
        matches: All matches in stem order
        residual: Choices consumed by no match, in declaration order
        residual_feedback: Catch-all feedback copied onto residual options
    """

    matches: Tuple[Match, ...]
    residual: Tuple[Choice, ...] = ()
    residual_feedback: str = ""

    @property
    def stem_ids(self) -> Tuple[str, ...]:
        seen: dict[str, None] = {}
        for match in self.matches:
            seen.setdefault(match.stem_id, None)
        return tuple(seen)

    def matches_for(self, stem_id: str) -> Tuple[Match, ...]:
        return tuple(m for m in self.matches if m.stem_id == stem_id)

    @property
    def residual_texts(self) -> Tuple[str, ...]:
        return tuple(choice.content for choice in self.residual)
