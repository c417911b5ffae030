"""
Module: questions

Purpose:
    Provides the QuestionModel tagged union - one frozen dataclass per
    supported target question kind, plus UnknownQuestion for QTYPE tags with
    no importer. These are the records handed to a question-bank sink.

Key Classes:
    - QuestionKind: Closed set of kinds (the union's tag)
    - TextFormat: Target text formats
    - QuestionModel: Common header fields and serialization
    - MultichoiceQuestion, TrueFalseQuestion, ShortAnswerQuestion,
      MultiBlankShortAnswerQuestion, NumericalQuestion,
      RangedNumericalQuestion, EssayQuestion, MatchingQuestion,
      MultiAnswerQuestion, CategoryMarker, UnknownQuestion

Key Functions:
    - QuestionModel.to_dict() / question_from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .embedded.EmbeddedQuestion

Used By:
    - importer.question_types
    - importer.sink
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum, IntEnum
from typing import Any, ClassVar, Dict, Optional, Tuple, Type

from .embedded import EmbeddedQuestion


class QuestionKind(str, Enum):
    """Target question kind."""
    MULTICHOICE = "multichoice"
    TRUEFALSE = "truefalse"
    SHORTANSWER = "shortanswer"
    SHORTANSWER_MULTI = "shortanswer_multi"
    NUMERICAL = "numerical"
    NUMERICAL_RANGED = "numerical_ranged"
    ESSAY = "essay"
    MATCHING = "match"
    MULTIANSWER = "multianswer"
    CATEGORY = "category"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class TextFormat(IntEnum):
    """Text format codes of the target question bank."""
    MOODLE = 0
    HTML = 1
    PLAIN = 2


# ─────────────────────────────────────────────────────────────────────────────
# Answer value objects
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class ChoiceAnswer:
    """One multichoice option with its fraction."""
    text: str
    fraction: float
    feedback: str = ""


@dataclass(frozen=True, slots=True)
class TextAnswer:
    """One accepted short answer."""
    text: str
    fraction: float = 1.0
    feedback: str = ""


@dataclass(frozen=True, slots=True)
class NumericAnswer:
    """One accepted numeric answer with tolerance."""
    value: float
    tolerance: float = 0.0
    fraction: float = 1.0
    feedback: str = ""


@dataclass(frozen=True, slots=True)
class MatchPair:
    """One matching sub-question; empty question_text marks a distractor."""
    question_text: str
    answer_text: str


def _answer_dicts(answers: tuple) -> list[dict]:
    return [{f.name: getattr(a, f.name) for f in fields(a)} for a in answers]


# ─────────────────────────────────────────────────────────────────────────────
# Question union
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, kw_only=True)
class QuestionModel:
    """
    Common header of every converted question (immutable).

    Attributes:
        name: Display name (DESCRIPTION attribute or derived)
        question_text: Sanitized question text
        question_text_format: TextFormat of question_text
        general_feedback: Shown after any attempt
        source_id: QML question ID, kept for error reporting
    """

    kind: ClassVar[QuestionKind]

    name: str
    question_text: str = ""
    question_text_format: TextFormat = TextFormat.HTML
    general_feedback: str = ""
    source_id: str = ""

    _NESTED: ClassVar[Dict[str, type]] = {}

    def to_dict(self) -> dict:
        """
        Serialize to dictionary for JSON storage.

        Answer tuples become lists of dicts; the kind tag is always included.
        """
        d: Dict[str, Any] = {"kind": self.kind.value}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                d[f.name] = _answer_dicts(value)
            elif isinstance(value, EmbeddedQuestion):
                d[f.name] = value.to_dict()
            elif isinstance(value, TextFormat):
                d[f.name] = int(value)
            else:
                d[f.name] = value
        return d

    @classmethod
    def from_dict(cls, data: dict) -> QuestionModel:
        """Deserialize from dictionary produced by to_dict()."""
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            nested = cls._NESTED.get(f.name)
            if nested is EmbeddedQuestion:
                value = EmbeddedQuestion.from_dict(value)
            elif nested is not None:
                value = tuple(nested(**item) for item in value)
            elif f.name == "question_text_format":
                value = TextFormat(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, kind={self.kind.value})"


@dataclass(frozen=True, kw_only=True)
class MultichoiceQuestion(QuestionModel):
    kind: ClassVar[QuestionKind] = QuestionKind.MULTICHOICE
    _NESTED: ClassVar[Dict[str, type]] = {"answers": ChoiceAnswer}

    answers: Tuple[ChoiceAnswer, ...] = ()
    single: bool = True
    shuffle_answers: bool = False
    answer_numbering: str = "abc"
    correct_feedback: str = ""
    partially_correct_feedback: str = ""
    incorrect_feedback: str = ""

    @property
    def fractions(self) -> Tuple[float, ...]:
        return tuple(a.fraction for a in self.answers)


@dataclass(frozen=True, kw_only=True)
class TrueFalseQuestion(QuestionModel):
    kind: ClassVar[QuestionKind] = QuestionKind.TRUEFALSE

    correct_answer: bool = True
    feedback_true: str = ""
    feedback_false: str = ""


@dataclass(frozen=True, kw_only=True)
class ShortAnswerQuestion(QuestionModel):
    kind: ClassVar[QuestionKind] = QuestionKind.SHORTANSWER
    _NESTED: ClassVar[Dict[str, type]] = {"answers": TextAnswer}

    answers: Tuple[TextAnswer, ...] = ()
    use_case: bool = False


@dataclass(frozen=True, kw_only=True)
class MultiBlankShortAnswerQuestion(ShortAnswerQuestion):
    """Several blanks scored together; answer is the comma-joined blanks."""
    kind: ClassVar[QuestionKind] = QuestionKind.SHORTANSWER_MULTI

    blank_count: int = 2


@dataclass(frozen=True, kw_only=True)
class NumericalQuestion(QuestionModel):
    kind: ClassVar[QuestionKind] = QuestionKind.NUMERICAL
    _NESTED: ClassVar[Dict[str, type]] = {"answers": NumericAnswer}

    answers: Tuple[NumericAnswer, ...] = ()


@dataclass(frozen=True, kw_only=True)
class RangedNumericalQuestion(NumericalQuestion):
    """Numeric answer accepted within [value - tolerance, value + tolerance]."""
    kind: ClassVar[QuestionKind] = QuestionKind.NUMERICAL_RANGED


@dataclass(frozen=True, kw_only=True)
class EssayQuestion(QuestionModel):
    kind: ClassVar[QuestionKind] = QuestionKind.ESSAY

    response_format: str = "editor"
    response_field_lines: int = 15
    grader_info: str = ""


@dataclass(frozen=True, kw_only=True)
class MatchingQuestion(QuestionModel):
    kind: ClassVar[QuestionKind] = QuestionKind.MATCHING
    _NESTED: ClassVar[Dict[str, type]] = {"subquestions": MatchPair}

    subquestions: Tuple[MatchPair, ...] = ()
    shuffle_answers: bool = True
    correct_feedback: str = ""
    incorrect_feedback: str = ""


@dataclass(frozen=True, kw_only=True)
class MultiAnswerQuestion(QuestionModel):
    """Embedded-answer (Cloze) question; question_text holds the markup."""
    kind: ClassVar[QuestionKind] = QuestionKind.MULTIANSWER
    _NESTED: ClassVar[Dict[str, type]] = {"embedded": EmbeddedQuestion}

    embedded: Optional[EmbeddedQuestion] = None


@dataclass(frozen=True, kw_only=True)
class CategoryMarker(QuestionModel):
    """Switches the target category for the questions that follow."""
    kind: ClassVar[QuestionKind] = QuestionKind.CATEGORY

    @classmethod
    def for_topic(cls, topic: str) -> CategoryMarker:
        return cls(name=f"$course$/{topic.strip()}")

    @property
    def path(self) -> str:
        return self.name


@dataclass(frozen=True, kw_only=True)
class UnknownQuestion(QuestionModel):
    """Question whose QTYPE has no importer; never written to a sink."""
    kind: ClassVar[QuestionKind] = QuestionKind.UNKNOWN

    qtype: str = ""


QUESTION_CLASSES: Dict[QuestionKind, Type[QuestionModel]] = {
    cls.kind: cls
    for cls in (
        MultichoiceQuestion,
        TrueFalseQuestion,
        ShortAnswerQuestion,
        MultiBlankShortAnswerQuestion,
        NumericalQuestion,
        RangedNumericalQuestion,
        EssayQuestion,
        MatchingQuestion,
        MultiAnswerQuestion,
        CategoryMarker,
        UnknownQuestion,
    )
}


def question_from_dict(data: dict) -> QuestionModel:
    """Rebuild the right QuestionModel variant from its dict form."""
    try:
        kind = QuestionKind(data["kind"])
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Unknown question kind in record: {data.get('kind')!r}") from exc
    return QUESTION_CLASSES[kind].from_dict(data)
