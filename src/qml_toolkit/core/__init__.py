"""
QML Import Core Package

Shared data models, the error hierarchy and record serialization. These
models are the single source of truth for every other subpackage.
"""

from .errors import (
    ClozeSyntaxError,
    ConditionParseError,
    DocumentError,
    MissingNodeError,
    QmlImportError,
    UnsupportedQuestionError,
    ZeroCorrectAnswersError,
)
from .models import Choice, ConditionExpression, Match, Outcome, QuestionModel

__all__ = [
    "ClozeSyntaxError",
    "ConditionParseError",
    "DocumentError",
    "MissingNodeError",
    "QmlImportError",
    "UnsupportedQuestionError",
    "ZeroCorrectAnswersError",
    "Choice",
    "ConditionExpression",
    "Match",
    "Outcome",
    "QuestionModel",
]
