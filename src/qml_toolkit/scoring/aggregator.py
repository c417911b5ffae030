"""
Module: scoring.aggregator

Purpose:
    Groups the ordered OUTCOME set of one question and classifies it:
    a single "right" outcome whose combined condition is authoritative,
    one outcome (or more) per stem, and the catch-all "wrong" outcome.

Key Functions:
    - aggregate_outcomes(): Build an OutcomeSet from outcomes
    - combined_condition(): Condition text for multichoice scoring,
      synthesized from sibling outcomes when the text is a bare reference
    - synthesize_combined_condition(): `NOT "0" AND "1" ...` from scores

Key Classes:
    - AggregationMode: COMBINED (right outcome) or PER_STEM
    - Alternative: One acceptable comparison plus its source outcome
    - StemRule: All alternatives for one stem
    - OutcomeSet: Aggregated result

Dependencies:
    - qml_toolkit.interpreter.parser
    - qml_toolkit.core.models

Used By:
    - scoring.fractions
    - scoring.matches
    - importer.question_types
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from qml_toolkit.core.errors import MissingNodeError
from qml_toolkit.core.models.conditions import Comparison, ConditionExpression
from qml_toolkit.core.models.outcomes import Outcome
from qml_toolkit.interpreter.parser import is_bare_reference, parse_condition

logger = logging.getLogger(__name__)


class AggregationMode(str, Enum):
    """How a question's outcomes define correctness."""
    COMBINED = "combined"  # One "right" outcome, stems AND-joined
    PER_STEM = "per_stem"  # Numbered outcomes, one (or more) per stem

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Alternative:
    """One acceptable comparison for a stem, with the outcome it scores as."""

    comparison: Comparison
    outcome: Outcome

    @property
    def text(self) -> str:
        return self.comparison.right


@dataclass(frozen=True)
class StemRule:
    """All acceptable alternatives for one stem, in source order."""

    stem_id: str
    alternatives: Tuple[Alternative, ...]


@dataclass(frozen=True)
class OutcomeSet:
    """
    Aggregated outcomes of one question.

    Attributes:
        mode: COMBINED when a "right" outcome exists, else PER_STEM
        stems: Stem id -> StemRule, in first-seen order
        right: The "right" outcome (COMBINED mode only)
        catch_all: The catch-all negative outcome, if any
        general: The unconditional "Always happens" outcome, if any
    """

    mode: AggregationMode
    stems: Dict[str, StemRule] = field(default_factory=dict)
    right: Optional[Outcome] = None
    catch_all: Optional[Outcome] = None
    general: Optional[Outcome] = None

    @property
    def stem_ids(self) -> Tuple[str, ...]:
        return tuple(self.stems)

    @property
    def catch_all_feedback(self) -> str:
        return self.catch_all.feedback if self.catch_all else ""

    def rule_for(self, stem_id: str) -> StemRule:
        try:
            return self.stems[stem_id]
        except KeyError:
            raise MissingNodeError(f"No outcome addresses stem {stem_id!r}") from None


# ─────────────────────────────────────────────────────────────────────────────
# Classification
# ─────────────────────────────────────────────────────────────────────────────

def find_catch_all(outcomes: Sequence[Outcome]) -> Optional[Outcome]:
    """
    The negative catch-all outcome.

    An outcome with id "wrong" wins; otherwise the last outcome whose
    condition is OTHER with zero score, whatever its declared id.
    """
    for outcome in outcomes:
        if outcome.id.strip().lower() == "wrong":
            return outcome
    for outcome in reversed(outcomes):
        if outcome.is_other and outcome.score == 0:
            return outcome
    return None


def scoring_outcomes(outcomes: Sequence[Outcome]) -> List[Outcome]:
    """Outcomes that take part in scoring (no catch-all, no unconditional)."""
    return [o for o in outcomes if not o.is_catch_all and not o.is_always and not o.is_other]


def synthesize_combined_condition(outcomes: Sequence[Outcome]) -> str:
    """
    Build `NOT "0" AND NOT "1" AND "2"` from per-choice outcome scores.

    Each scoring outcome contributes its ordinal position as a quoted
    literal, preceded by NOT when its score is zero.

    Example:
        >>> synthesize_combined_condition([Outcome("0 a"), Outcome("1 b", score=1)])
        'NOT "0" AND "1"'
    """
    parts = []
    for position, outcome in enumerate(scoring_outcomes(outcomes)):
        prefix = "NOT " if outcome.score == 0 else ""
        parts.append(f'{prefix}"{position}"')
    return " AND ".join(parts)


def combined_condition(outcomes: Sequence[Outcome]) -> str:
    """
    Condition text describing every choice's correctness.

    Uses the "right" outcome if present, else the first scoring outcome.
    A bare reference (e.g. `"1"`) is replaced by a condition synthesized
    from all sibling outcomes.

    Raises:
        MissingNodeError: If there is no scoring outcome at all
    """
    candidates = scoring_outcomes(outcomes)
    if not candidates:
        raise MissingNodeError("Question has no scoring OUTCOME")

    right = next((o for o in candidates if o.is_right), None)
    text = (right or candidates[0]).condition
    if right is None and is_bare_reference(text):
        synthesized = synthesize_combined_condition(outcomes)
        logger.debug("Bare condition %r; synthesized %r", text, synthesized)
        return synthesized
    return text


# ─────────────────────────────────────────────────────────────────────────────
# Aggregation
# ─────────────────────────────────────────────────────────────────────────────

class _StemCollector:
    """Ordered stem -> alternatives map with duplicate suppression."""

    def __init__(self) -> None:
        self._alternatives: Dict[str, List[Alternative]] = {}
        self._seen: set[tuple[str, str]] = set()

    def add(self, comparison: Comparison, outcome: Outcome) -> None:
        key = (comparison.stem_id, comparison.right.casefold())
        bucket = self._alternatives.setdefault(comparison.stem_id, [])
        if key in self._seen:
            return
        self._seen.add(key)
        bucket.append(Alternative(comparison, outcome))

    def build(self) -> Dict[str, StemRule]:
        return {
            stem_id: StemRule(stem_id, tuple(alternatives))
            for stem_id, alternatives in self._alternatives.items()
        }


def _collect(collector: _StemCollector, expression: ConditionExpression, outcome: Outcome) -> None:
    for conjunction in expression.terms:
        for comparison in conjunction:
            if not comparison.negated:
                collector.add(comparison, outcome)


def aggregate_outcomes(
    outcomes: Sequence[Outcome],
    *,
    question_id: Optional[str] = None,
) -> OutcomeSet:
    """
    Aggregate a question's outcomes into per-stem rules.

    If an outcome with id "right" exists its condition is authoritative and
    every non-negated comparison in it becomes an alternative for the stem
    named by its left operand. Otherwise every numbered outcome contributes
    the comparisons of each of its OR alternatives.

    Args:
        outcomes: Outcomes in document order
        question_id: Used for error context

    Returns:
        OutcomeSet

    Raises:
        ConditionParseError: If a scoring condition cannot be parsed
    """
    catch_all = find_catch_all(outcomes)
    general = next((o for o in outcomes if o.is_always), None)
    right = next((o for o in outcomes if o.is_right and o is not catch_all), None)
    collector = _StemCollector()

    if right is not None:
        expression = parse_condition(right.condition, outcome_id=right.id, question_id=question_id)
        _collect(collector, expression, right)
        mode = AggregationMode.COMBINED
    else:
        for outcome in outcomes:
            if outcome is catch_all or not outcome.is_numbered or outcome.is_other:
                continue
            expression = parse_condition(
                outcome.condition, outcome_id=outcome.id, question_id=question_id
            )
            _collect(collector, expression, outcome)
        mode = AggregationMode.PER_STEM

    result = OutcomeSet(
        mode=mode,
        stems=collector.build(),
        right=right,
        catch_all=catch_all,
        general=general,
    )
    logger.debug(
        "Aggregated %d outcome(s) into %d stem(s) (%s)",
        len(outcomes), len(result.stems), mode,
    )
    return result
