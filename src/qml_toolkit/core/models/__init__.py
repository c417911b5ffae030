"""
Core Models Package

Immutable data models shared by the interpreter, the scoring synthesizers
and the importers. All models are frozen dataclasses: they are created once
per source question and consumed once by the encoder/sink pipeline.
"""

from .conditions import Comparison, ConditionExpression, Conjunction, Operator
from .outcomes import Choice, Outcome
from .answers import ChoiceMark, Match, MatchResult
from .embedded import ClozeKind, EmbeddedAnswer, EmbeddedQuestion, EmbeddedSubquestion
from .questions import (
    CategoryMarker,
    ChoiceAnswer,
    EssayQuestion,
    MatchingQuestion,
    MatchPair,
    MultiAnswerQuestion,
    MultiBlankShortAnswerQuestion,
    MultichoiceQuestion,
    NumericAnswer,
    NumericalQuestion,
    QuestionKind,
    QuestionModel,
    RangedNumericalQuestion,
    ShortAnswerQuestion,
    TextAnswer,
    TextFormat,
    TrueFalseQuestion,
    UnknownQuestion,
    question_from_dict,
)

__all__ = [
    "Comparison",
    "ConditionExpression",
    "Conjunction",
    "Operator",
    "Choice",
    "Outcome",
    "ChoiceMark",
    "Match",
    "MatchResult",
    "ClozeKind",
    "EmbeddedAnswer",
    "EmbeddedQuestion",
    "EmbeddedSubquestion",
    "CategoryMarker",
    "ChoiceAnswer",
    "EssayQuestion",
    "MatchingQuestion",
    "MatchPair",
    "MultiAnswerQuestion",
    "MultiBlankShortAnswerQuestion",
    "MultichoiceQuestion",
    "NumericAnswer",
    "NumericalQuestion",
    "QuestionKind",
    "QuestionModel",
    "RangedNumericalQuestion",
    "ShortAnswerQuestion",
    "TextAnswer",
    "TextFormat",
    "TrueFalseQuestion",
    "UnknownQuestion",
    "question_from_dict",
]
