"""
Module: outcomes

Purpose:
    Provides the Outcome and Choice dataclasses read from a QML question.
    Outcomes are named scoring rules (score, CONDITION text, feedback);
    choices are the answer options addressed by condition literals.

Key Functions:
    - Outcome.is_catch_all: id "wrong" or an OTHER condition with zero score
    - Outcome.is_numbered: id begins with a choice/stem index
    - Choice.key: str(index), the identity used by condition literals

Dependencies:
    - dataclasses (std)

Used By:
    - scoring.aggregator
    - scoring.matches
    - importer.question_types
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


RIGHT_ID = "right"
WRONG_ID = "wrong"
ALWAYS_ID = "Always happens"
OTHER_CONDITION = "OTHER"


@dataclass(frozen=True, slots=True)
class Outcome:
    """
    Named scoring/feedback rule attached to a question.

    Attributes:
        id: QML outcome ID ("right", "wrong", "0 Paris", ...)
        score: Signed score (SCORE attribute, else ADD, else 0)
        condition: Raw CONDITION text
        feedback: Outcome CONTENT (already sanitized)
    """

    id: str
    score: int = 0
    condition: str = ""
    feedback: str = ""

    @property
    def is_right(self) -> bool:
        return self.id.strip().lower() == RIGHT_ID

    @property
    def is_always(self) -> bool:
        return self.id.strip().lower() == ALWAYS_ID.lower()

    @property
    def is_other(self) -> bool:
        return self.condition.strip().upper() == OTHER_CONDITION

    @property
    def is_catch_all(self) -> bool:
        """True for the negative catch-all outcome, whatever its declared id."""
        if self.id.strip().lower() == WRONG_ID:
            return True
        return self.is_other and self.score == 0

    @property
    def is_numbered(self) -> bool:
        token = self.id.strip().split(" ", 1)[0]
        return token.isdigit()


@dataclass(frozen=True, slots=True)
class Choice:
    """
    Answer option in source order.

    Attributes:
        index: Position among the question's choices (0-based)
        content: Choice text (sanitized)
        options: Pull-down OPTION texts for selection/matching blanks
    """

    index: int
    content: str
    options: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Choice index cannot be negative: {self.index}")

    @property
    def key(self) -> str:
        return str(self.index)
