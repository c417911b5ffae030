"""
Module: embedded

Purpose:
    Structured form of embedded-answer (Cloze) question text, as produced by
    the embedded-text extractor. Each `{...}` block of the markup becomes an
    EmbeddedSubquestion and is replaced by a `{#n}` placeholder.

Key Classes:
    - ClozeKind: Sub-question kind tags of the markup
    - EmbeddedAnswer: One option of a sub-question
    - EmbeddedSubquestion: One decoded block
    - EmbeddedQuestion: Placeholder text plus sub-questions
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ClozeKind(str, Enum):
    """Kind tag of an embedded block."""
    MULTICHOICE = "MULTICHOICE"
    NUMERICAL = "NUMERICAL"
    SHORTANSWER = "SHORTANSWER"
    SHORTANSWER_C = "SHORTANSWER_C"

    def __str__(self) -> str:
        return self.value

    @property
    def is_numeric(self) -> bool:
        return self is ClozeKind.NUMERICAL


@dataclass(frozen=True, slots=True)
class EmbeddedAnswer:
    text: str
    correct: bool
    feedback: str = ""
    tolerance: Optional[float] = None

    def to_dict(self) -> dict:
        d = {"text": self.text, "correct": self.correct, "feedback": self.feedback}
        if self.tolerance is not None:
            d["tolerance"] = self.tolerance
        return d

    @classmethod
    def from_dict(cls, data: dict) -> EmbeddedAnswer:
        return cls(
            text=data["text"],
            correct=data["correct"],
            feedback=data.get("feedback", ""),
            tolerance=data.get("tolerance"),
        )


@dataclass(frozen=True, slots=True)
class EmbeddedSubquestion:
    """
    One decoded `{weight:KIND:options}` block.

    Attributes:
        position: 1-based placeholder number in the question text
        kind: Sub-question kind
        weight: Default grade of the block
        answers: Options in markup order
    """

    position: int
    kind: ClozeKind
    weight: int
    answers: Tuple[EmbeddedAnswer, ...]

    @property
    def correct_answers(self) -> Tuple[EmbeddedAnswer, ...]:
        return tuple(a for a in self.answers if a.correct)

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "kind": self.kind.value,
            "weight": self.weight,
            "answers": [a.to_dict() for a in self.answers],
        }

    @classmethod
    def from_dict(cls, data: dict) -> EmbeddedSubquestion:
        return cls(
            position=data["position"],
            kind=ClozeKind(data["kind"]),
            weight=data["weight"],
            answers=tuple(EmbeddedAnswer.from_dict(a) for a in data["answers"]),
        )


@dataclass(frozen=True, slots=True)
class EmbeddedQuestion:
    """Question text with `{#n}` placeholders and the decoded blocks."""

    text: str
    subquestions: Tuple[EmbeddedSubquestion, ...]

    @property
    def total_weight(self) -> int:
        return sum(s.weight for s in self.subquestions)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "subquestions": [s.to_dict() for s in self.subquestions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> EmbeddedQuestion:
        return cls(
            text=data["text"],
            subquestions=tuple(EmbeddedSubquestion.from_dict(s) for s in data["subquestions"]),
        )
