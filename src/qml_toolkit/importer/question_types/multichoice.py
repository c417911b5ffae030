"""
Module: importer.question_types.multichoice

Purpose:
    Imports MC (single response) and MR (multiple response) questions.
    Correctness comes from the combined condition of the first scoring
    outcome, synthesized from the per-choice outcomes when that condition
    is only a bare reference like `"1"`.

Key Functions:
    - import_multichoice(): SourceQuestion -> MultichoiceQuestion
"""

from __future__ import annotations

import logging
from typing import Dict

from qml_toolkit.core.errors import MissingNodeError
from qml_toolkit.core.models.questions import ChoiceAnswer, MultichoiceQuestion
from qml_toolkit.interpreter.parser import is_bare_reference, parse_condition
from qml_toolkit.scoring.aggregator import combined_condition, find_catch_all, scoring_outcomes
from qml_toolkit.scoring.fractions import synthesize_fractions

from .common import ConversionContext, SourceQuestion, build_header

logger = logging.getLogger(__name__)

SINGLE_RESPONSE_QTYPES = frozenset({"MC"})


def _per_choice_feedback(source: SourceQuestion) -> Dict[int, str]:
    """
    Feedback of per-choice outcomes, keyed by choice index.

    Only applies when outcomes are one per choice (bare-reference
    conditions); outcome N then belongs to choice N.
    """
    outcomes = scoring_outcomes(source.outcomes)
    if not outcomes or not is_bare_reference(outcomes[0].condition):
        return {}
    return {position: outcome.feedback for position, outcome in enumerate(outcomes) if outcome.feedback}


def import_multichoice(source: SourceQuestion, ctx: ConversionContext) -> MultichoiceQuestion:
    """
    Import a multichoice question.

    Raises:
        MissingNodeError: If the question has no CHOICE or no scoring OUTCOME
        ConditionParseError: If the combined condition cannot be parsed
        ZeroCorrectAnswersError: If no choice is correct
    """
    if not source.choices:
        raise MissingNodeError("Multichoice question has no CHOICE", question_id=source.id)

    condition = combined_condition(source.outcomes)
    expression = parse_condition(condition, question_id=source.id)
    single = source.qtype.upper() in SINGLE_RESPONSE_QTYPES
    fractions = synthesize_fractions(expression, source.choices, single_response=single)

    messages = ctx.messages
    feedback = _per_choice_feedback(source)
    answers = []
    for choice, fraction in zip(source.choices, fractions):
        default = messages.get("correct") if fraction > 0 else messages.get("incorrect")
        answers.append(
            ChoiceAnswer(
                text=choice.content,
                fraction=fraction,
                feedback=feedback.get(choice.index, default),
            )
        )

    right = next((o for o in source.outcomes if o.is_right), None)
    wrong = find_catch_all(source.outcomes)
    logger.debug("Multichoice %s: %d choice(s), single=%s", source.display_name, len(answers), single)
    return MultichoiceQuestion(
        **build_header(source, ctx),
        answers=tuple(answers),
        single=single,
        shuffle_answers=source.shuffle,
        correct_feedback=(right.feedback if right and right.feedback else messages.get("correct")),
        partially_correct_feedback=messages.get("partiallycorrect"),
        incorrect_feedback=(wrong.feedback if wrong and wrong.feedback else messages.get("incorrect")),
    )
