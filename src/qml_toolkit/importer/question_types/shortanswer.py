"""
Module: importer.question_types.shortanswer

Purpose:
    Imports FIB (fill in blanks) and TM (text match) questions. The shape of
    the outcome set picks the target kind:

        right outcome, one stem    -> ShortAnswerQuestion
        right outcome, many stems  -> MultiBlankShortAnswerQuestion
        numbered outcomes          -> MultiAnswerQuestion (SHORTANSWER blocks)

Key Functions:
    - import_shortanswer(): SourceQuestion -> QuestionModel
"""

from __future__ import annotations

import logging
from typing import List

from qml_toolkit.core.errors import ZeroCorrectAnswersError
from qml_toolkit.core.models.embedded import ClozeKind
from qml_toolkit.core.models.questions import (
    MultiBlankShortAnswerQuestion,
    QuestionModel,
    ShortAnswerQuestion,
    TextAnswer,
)
from qml_toolkit.scoring.aggregator import AggregationMode, OutcomeSet, aggregate_outcomes
from qml_toolkit.scoring.matches import synthesize_matches

from .common import ConversionContext, SourceQuestion, build_header, fragments_text, join_text
from .embedded import build_multianswer

logger = logging.getLogger(__name__)

GENERIC_FIB_DESCRIPTION = "Fill in Blanks question"
WILDCARD = "*"


def _short_header(source: SourceQuestion, ctx: ConversionContext) -> dict:
    header = build_header(source, ctx)
    blanks = fragments_text(source)
    if source.node.child("CONTENT") is None:
        header["question_text"] = blanks
    if source.description == GENERIC_FIB_DESCRIPTION and blanks:
        header["name"] = ctx.plain(blanks) or header["name"]
    return header


def _wrong_answer(outcome_set: OutcomeSet) -> List[TextAnswer]:
    if outcome_set.catch_all is None:
        return []
    return [TextAnswer(text=WILDCARD, fraction=0.0, feedback=outcome_set.catch_all_feedback)]


def _single_blank(source: SourceQuestion, ctx: ConversionContext, outcome_set: OutcomeSet) -> ShortAnswerQuestion:
    rule = next(iter(outcome_set.stems.values()))
    right = outcome_set.right
    answers = [
        TextAnswer(text=alt.text, fraction=1.0, feedback=right.feedback if right else alt.outcome.feedback)
        for alt in rule.alternatives
    ]
    answers.extend(_wrong_answer(outcome_set))
    use_case = all(alt.comparison.case_sensitive for alt in rule.alternatives)
    return ShortAnswerQuestion(**_short_header(source, ctx), answers=tuple(answers), use_case=use_case)


def _multi_blank(
    source: SourceQuestion, ctx: ConversionContext, outcome_set: OutcomeSet
) -> MultiBlankShortAnswerQuestion:
    rules = list(outcome_set.stems.values())
    joined = ",".join(rule.alternatives[0].text for rule in rules)
    right = outcome_set.right
    answers = [TextAnswer(text=joined, fraction=1.0, feedback=right.feedback if right else "")]
    answers.extend(_wrong_answer(outcome_set))

    header = _short_header(source, ctx)
    header["question_text"] = join_text(header["question_text"], ctx.messages.get("blankmultiquestionhint"))
    use_case = all(alt.comparison.case_sensitive for rule in rules for alt in rule.alternatives)
    return MultiBlankShortAnswerQuestion(
        **header,
        answers=tuple(answers),
        use_case=use_case,
        blank_count=len(rules),
    )


def import_shortanswer(source: SourceQuestion, ctx: ConversionContext) -> QuestionModel:
    """
    Import a fill-in-blanks or text-match question.

    Raises:
        ConditionParseError: If an outcome condition cannot be parsed
        ZeroCorrectAnswersError: If no outcome names an accepted answer
    """
    outcome_set = aggregate_outcomes(source.outcomes, question_id=source.id)
    if not outcome_set.stems:
        raise ZeroCorrectAnswersError(
            f"No accepted answer in {source.display_name!r}", question_id=source.id
        )

    if outcome_set.mode is AggregationMode.PER_STEM:
        logger.debug("Short answer %s scored per blank; embedding", source.display_name)
        result = synthesize_matches(outcome_set, ())
        return build_multianswer(source, ctx, result, ClozeKind.SHORTANSWER)
    if len(outcome_set.stems) == 1:
        return _single_blank(source, ctx, outcome_set)
    return _multi_blank(source, ctx, outcome_set)
