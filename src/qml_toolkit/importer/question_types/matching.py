"""
Module: importer.question_types.matching

Purpose:
    Imports MATCH questions. Each CHOICE is a stem whose correct answer is
    picked from the shared pool of OPTION texts; pool entries that no stem
    claims are kept as distractor sub-questions with empty text.

Key Functions:
    - import_matching(): SourceQuestion -> MatchingQuestion
"""

from __future__ import annotations

import logging
from typing import List

from qml_toolkit.core.errors import MissingNodeError, ZeroCorrectAnswersError
from qml_toolkit.core.models.questions import MatchingQuestion, MatchPair
from qml_toolkit.scoring.aggregator import aggregate_outcomes
from qml_toolkit.scoring.matches import synthesize_matches

from .common import ConversionContext, SourceQuestion, build_header

logger = logging.getLogger(__name__)


def import_matching(source: SourceQuestion, ctx: ConversionContext) -> MatchingQuestion:
    """
    Import a matching question.

    Stems without a correct match are skipped with a warning; a question
    where no stem has one raises ZeroCorrectAnswersError.

    Raises:
        MissingNodeError: If the question has no CHOICE
        ZeroCorrectAnswersError: If no stem has a correct match
    """
    if not source.choices:
        raise MissingNodeError("Matching question has no CHOICE", question_id=source.id)

    outcome_set = aggregate_outcomes(source.outcomes, question_id=source.id)
    result = synthesize_matches(outcome_set, source.option_pool)

    pairs: List[MatchPair] = []
    for choice in source.choices:
        correct = next((m for m in result.matches_for(choice.key) if m.is_correct), None)
        if correct is None:
            logger.warning("Stem %r of %s has no correct match; skipped", choice.key, source.display_name)
            continue
        pairs.append(MatchPair(question_text=choice.content, answer_text=correct.choice_text))
    if not pairs:
        raise ZeroCorrectAnswersError(
            f"No stem of {source.display_name!r} has a correct match", question_id=source.id
        )

    pairs.extend(MatchPair(question_text="", answer_text=text) for text in result.residual_texts)
    right = outcome_set.right
    return MatchingQuestion(
        **build_header(source, ctx),
        subquestions=tuple(pairs),
        shuffle_answers=source.shuffle,
        correct_feedback=right.feedback if right and right.feedback else ctx.messages.get("correct"),
        incorrect_feedback=outcome_set.catch_all_feedback or ctx.messages.get("incorrect"),
    )
