"""
Module: core.errors

Purpose:
    Exception hierarchy for QML import. Per-question errors are isolated by
    the pipeline (the batch continues); DocumentError aborts the batch.

Key Classes:
    - QmlImportError: Base class for every import failure
    - ConditionParseError: Condition text outside the supported grammar
    - ZeroCorrectAnswersError: No correct answer to distribute credit over
    - MissingNodeError: Required OUTCOME/CHOICE node absent
    - UnsupportedQuestionError: QTYPE with no importer
    - ClozeSyntaxError: Malformed embedded-answer markup
    - DocumentError: Source document could not be read at all
"""

from __future__ import annotations

from typing import Optional


class QmlImportError(Exception):
    """Base class for all QML import errors."""

    def __init__(self, message: str, *, question_id: Optional[str] = None):
        super().__init__(message)
        self.question_id = question_id

    def with_question(self, question_id: str) -> "QmlImportError":
        """Attach the source question id if not already known."""
        if self.question_id is None:
            self.question_id = question_id
        return self


class ConditionParseError(QmlImportError):
    """Raised when a CONDITION does not match the restricted grammar."""

    def __init__(
        self,
        message: str,
        *,
        condition: str = "",
        outcome_id: Optional[str] = None,
        question_id: Optional[str] = None,
    ):
        super().__init__(message, question_id=question_id)
        self.condition = condition
        self.outcome_id = outcome_id

    def __str__(self) -> str:
        base = super().__str__()
        context = []
        if self.question_id is not None:
            context.append(f"question={self.question_id!r}")
        if self.outcome_id is not None:
            context.append(f"outcome={self.outcome_id!r}")
        if self.condition:
            context.append(f"condition={self.condition!r}")
        return f"{base} ({', '.join(context)})" if context else base


class ZeroCorrectAnswersError(QmlImportError):
    """Raised when no answer is marked correct."""


class MissingNodeError(QmlImportError):
    """Raised when a required node is missing from a question."""


class UnsupportedQuestionError(QmlImportError):
    """Raised when a question's QTYPE has no importer."""

    def __init__(self, qtype: str, *, question_id: Optional[str] = None):
        super().__init__(f"Unsupported question type: {qtype!r}", question_id=question_id)
        self.qtype = qtype


class ClozeSyntaxError(QmlImportError):
    """Raised when embedded-answer markup cannot be decoded."""


class DocumentError(QmlImportError):
    """Raised when the source document cannot be parsed (fatal for the batch)."""
