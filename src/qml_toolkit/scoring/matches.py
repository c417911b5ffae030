"""
Module: scoring.matches

Purpose:
    Converts an OutcomeSet into stem -> choice correctness associations for
    matching and embedded-answer questions. Every alternative of a stem
    becomes one Match carrying its outcome's score and feedback; choices no
    match consumed form the residual distractor pool.

Key Functions:
    - synthesize_matches(): OutcomeSet + choices -> MatchResult

Dependencies:
    - qml_toolkit.scoring.aggregator
    - qml_toolkit.core.models

Used By:
    - importer.question_types.matching
    - importer.question_types.embedded
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from qml_toolkit.core.models.answers import Match, MatchResult
from qml_toolkit.core.models.outcomes import Choice

from .aggregator import AggregationMode, OutcomeSet

logger = logging.getLogger(__name__)


def _normalize(text: str, case_sensitive: bool) -> str:
    text = " ".join(text.split())
    return text if case_sensitive else text.casefold()


def _consumes(match: Match, choice: Choice) -> bool:
    return _normalize(match.choice_text, match.case_sensitive) == _normalize(
        choice.content, match.case_sensitive
    )


def synthesize_matches(outcome_set: OutcomeSet, choices: Sequence[Choice]) -> MatchResult:
    """
    Build matches per stem and the residual distractor pool.

    Args:
        outcome_set: Aggregated outcomes of the question
        choices: Candidate answer texts in declaration order

    Returns:
        MatchResult whose residual choices carry the catch-all feedback

    Example:
        >>> result = synthesize_matches(outcome_set, [Choice(0, "Paris"), Choice(1, "Berlin")])
        >>> [(m.stem_id, m.choice_text) for m in result.matches]
        [('0', 'Paris')]
        >>> result.residual_texts
        ('Berlin',)
    """
    matches: List[Match] = []
    for rule in outcome_set.stems.values():
        for alternative in rule.alternatives:
            outcome = alternative.outcome
            if outcome_set.mode is AggregationMode.COMBINED and outcome_set.right is not None:
                outcome = outcome_set.right
            comparison = alternative.comparison
            matches.append(
                Match(
                    stem_id=rule.stem_id,
                    choice_text=comparison.right,
                    score=outcome.score,
                    feedback=outcome.feedback,
                    case_sensitive=comparison.case_sensitive,
                    operator=comparison.operator,
                )
            )

    residual = tuple(
        choice for choice in choices
        if not any(_consumes(match, choice) for match in matches)
    )
    logger.debug(
        "Synthesized %d match(es) over %d stem(s); %d residual distractor(s)",
        len(matches), len(outcome_set.stems), len(residual),
    )
    return MatchResult(
        matches=tuple(matches),
        residual=residual,
        residual_feedback=outcome_set.catch_all_feedback,
    )
