"""
Module: importer.question_types.numerical

Purpose:
    Imports NUM questions. Each stem's alternatives become numeric answers:
    an `=` comparison is an exact value, a `>=`/`<=` pair from the same
    outcome is a range stored as midpoint plus half-width tolerance. Several
    stems are embedded as NUMERICAL blocks instead.

Key Functions:
    - import_numerical(): SourceQuestion -> QuestionModel
    - numeric_answers(): One stem's alternatives -> NumericAnswer list
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from qml_toolkit.core.errors import ConditionParseError, ZeroCorrectAnswersError
from qml_toolkit.core.models.answers import Match, MatchResult
from qml_toolkit.core.models.conditions import Comparison, Operator
from qml_toolkit.core.models.embedded import ClozeKind
from qml_toolkit.core.models.outcomes import Outcome
from qml_toolkit.core.models.questions import (
    NumericAnswer,
    NumericalQuestion,
    QuestionModel,
    RangedNumericalQuestion,
)
from qml_toolkit.scoring.aggregator import AggregationMode, OutcomeSet, StemRule, aggregate_outcomes

from .common import ConversionContext, SourceQuestion, build_header, fragments_text
from .embedded import build_multianswer

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Integral values without a decimal point, others as repr()."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _number(comparison: Comparison, outcome: Outcome, question_id: Optional[str]) -> float:
    try:
        return float(comparison.right.strip())
    except ValueError:
        raise ConditionParseError(
            f"Numeric answer expected, got {comparison.right!r}",
            condition=outcome.condition,
            outcome_id=outcome.id,
            question_id=question_id,
        ) from None


def _best_score(rule: StemRule, outcome_set: OutcomeSet) -> int:
    if outcome_set.right is not None:
        return outcome_set.right.score
    return max((alt.outcome.score for alt in rule.alternatives), default=0)


def _fraction(outcome: Outcome, outcome_set: OutcomeSet, best: int) -> float:
    if outcome_set.mode is AggregationMode.COMBINED:
        return 1.0
    return max(-1.0, min(1.0, outcome.score / best))


def numeric_answers(
    rule: StemRule,
    outcome_set: OutcomeSet,
    *,
    question_id: Optional[str] = None,
) -> Tuple[List[NumericAnswer], bool]:
    """
    Numeric answers for one stem.

    Returns:
        (answers, ranged) where ranged is True when any answer came from
        a lower/upper bound pair

    Raises:
        ConditionParseError: On a non-numeric operand or an open range
        ZeroCorrectAnswersError: If no alternative scores
    """
    best = _best_score(rule, outcome_set)
    if best <= 0:
        raise ZeroCorrectAnswersError(f"Stem {rule.stem_id!r} has no scoring answer", question_id=question_id)

    # Range bounds are paired per outcome
    bounds: Dict[str, Dict[str, float]] = {}
    outcomes: Dict[str, Outcome] = {}
    answers: List[NumericAnswer] = []
    for alt in rule.alternatives:
        outcome = alt.outcome
        value = _number(alt.comparison, outcome, question_id)
        operator = alt.comparison.operator
        if operator.is_range:
            side = "low" if operator.value.startswith(">") else "high"
            bounds.setdefault(outcome.id, {})[side] = value
            outcomes[outcome.id] = outcome
        else:
            answers.append(
                NumericAnswer(
                    value=value,
                    tolerance=0.0,
                    fraction=_fraction(outcome, outcome_set, best),
                    feedback=(outcome_set.right or outcome).feedback,
                )
            )

    for outcome_id, pair in bounds.items():
        outcome = outcomes[outcome_id]
        if "low" not in pair or "high" not in pair:
            raise ConditionParseError(
                "Numeric range needs both a lower and an upper bound",
                condition=outcome.condition,
                outcome_id=outcome.id,
                question_id=question_id,
            )
        low, high = sorted((pair["low"], pair["high"]))
        answers.append(
            NumericAnswer(
                value=(low + high) / 2,
                tolerance=(high - low) / 2,
                fraction=_fraction(outcome, outcome_set, best),
                feedback=(outcome_set.right or outcome).feedback,
            )
        )
    return answers, bool(bounds)


def _embedded_matches(outcome_set: OutcomeSet, question_id: Optional[str]) -> MatchResult:
    matches: List[Match] = []
    for rule in outcome_set.stems.values():
        answers, _ = numeric_answers(rule, outcome_set, question_id=question_id)
        best = _best_score(rule, outcome_set)
        for answer in answers:
            matches.append(
                Match(
                    stem_id=rule.stem_id,
                    choice_text=f"{format_number(answer.value)}:{format_number(answer.tolerance)}",
                    score=max(0, round(answer.fraction * best)),
                    feedback=answer.feedback,
                    operator=Operator.EQUALS,
                )
            )
    return MatchResult(matches=tuple(matches))


def import_numerical(source: SourceQuestion, ctx: ConversionContext) -> QuestionModel:
    """
    Import a numeric question.

    Raises:
        ConditionParseError: If an operand is not a number
        ZeroCorrectAnswersError: If no outcome names a scoring value
    """
    outcome_set = aggregate_outcomes(source.outcomes, question_id=source.id)
    if not outcome_set.stems:
        raise ZeroCorrectAnswersError(
            f"No accepted value in {source.display_name!r}", question_id=source.id
        )

    if len(outcome_set.stems) > 1:
        logger.debug("Numerical %s has %d stems; embedding", source.display_name, len(outcome_set.stems))
        return build_multianswer(source, ctx, _embedded_matches(outcome_set, source.id), ClozeKind.NUMERICAL)

    rule = next(iter(outcome_set.stems.values()))
    answers, ranged = numeric_answers(rule, outcome_set, question_id=source.id)
    header = build_header(source, ctx)
    if source.node.child("CONTENT") is None:
        header["question_text"] = fragments_text(source) or header["question_text"]
    cls = RangedNumericalQuestion if ranged else NumericalQuestion
    return cls(**header, answers=tuple(answers))
