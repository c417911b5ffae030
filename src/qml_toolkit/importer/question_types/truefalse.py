"""
Module: importer.question_types.truefalse

Purpose:
    Imports TF (True/False) and YN (Yes/No) questions. The text of the
    first CHOICE decides which of the first two outcomes is the "true"
    branch; the correct answer is the branch whose outcome scores.

Key Functions:
    - import_truefalse(): SourceQuestion -> TrueFalseQuestion
"""

from __future__ import annotations

from qml_toolkit.core.errors import MissingNodeError
from qml_toolkit.core.models.questions import TrueFalseQuestion

from .common import ConversionContext, SourceQuestion, build_header

TRUE_WORDS = frozenset({"true", "yes"})


def import_truefalse(source: SourceQuestion, ctx: ConversionContext) -> TrueFalseQuestion:
    """
    Import a true/false question.

    Raises:
        MissingNodeError: If there is no CHOICE or fewer than two outcomes
    """
    if not source.choices:
        raise MissingNodeError(
            ctx.messages.get("missingnode", a=source.display_name, b="CHOICE"),
            question_id=source.id,
        )
    outcomes = [o for o in source.outcomes if not o.is_always]
    if len(outcomes) < 2:
        raise MissingNodeError(
            ctx.messages.get("missingnode", a=source.display_name, b="OUTCOME"),
            question_id=source.id,
        )

    first, second = outcomes[0], outcomes[1]
    if source.choices[0].content.strip().lower() in TRUE_WORDS:
        true_outcome, false_outcome = first, second
        correct_answer = first.score > 0
    else:
        true_outcome, false_outcome = second, first
        correct_answer = second.score > 0

    return TrueFalseQuestion(
        **build_header(source, ctx),
        correct_answer=correct_answer,
        feedback_true=true_outcome.feedback,
        feedback_false=false_outcome.feedback,
    )
