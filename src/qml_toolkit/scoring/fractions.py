"""
Module: scoring.fractions

Purpose:
    Converts a combined condition over choice indices into one scoring
    fraction per choice, under an equal-weighting policy:

    - correct choice: 1 / correct_count
    - incorrect choice, single response: 0
    - incorrect choice, multi response: -1 / correct_count
      (selecting every choice nets zero)

Key Functions:
    - read_choice_marks(): Correct/incorrect mark per referenced choice key
    - synthesize_fractions(): Fractions in choice declaration order

Dependencies:
    - qml_toolkit.core.models

Used By:
    - importer.question_types.multichoice
"""

from __future__ import annotations

import logging
from typing import Dict, Sequence, Tuple

from qml_toolkit.core.errors import ZeroCorrectAnswersError
from qml_toolkit.core.models.answers import ChoiceMark
from qml_toolkit.core.models.conditions import ConditionExpression
from qml_toolkit.core.models.outcomes import Choice

logger = logging.getLogger(__name__)


def read_choice_marks(expression: ConditionExpression) -> Tuple[ChoiceMark, ...]:
    """
    Walk comparisons in order; NOT marks a choice incorrect.

    When a choice key appears more than once the first mark wins.

    Example:
        >>> from qml_toolkit.interpreter import parse_condition
        >>> marks = read_choice_marks(parse_condition('NOT "0" AND NOT "1" AND "2"'))
        >>> [(m.key, m.correct) for m in marks]
        [('0', False), ('1', False), ('2', True)]
    """
    marks: Dict[str, ChoiceMark] = {}
    for comparison in expression.comparisons():
        if comparison.stem_id not in marks:
            marks[comparison.stem_id] = ChoiceMark(comparison.stem_id, not comparison.negated)
    return tuple(marks.values())


def synthesize_fractions(
    expression: ConditionExpression,
    choices: Sequence[Choice],
    *,
    single_response: bool,
) -> Tuple[float, ...]:
    """
    Calculate the fraction contributed by selecting each choice.

    Args:
        expression: Combined condition over choice indices
        choices: Choices in declaration order
        single_response: True for MC (one selection), False for MR

    Returns:
        One fraction per choice, in declaration order (not condition order).
        Choices the condition never mentions count as incorrect.

    Raises:
        ZeroCorrectAnswersError: If no referenced choice is correct
    """
    marks = {mark.key: mark for mark in read_choice_marks(expression)}
    correct_keys = [c.key for c in choices if c.key in marks and marks[c.key].correct]
    correct_count = len(correct_keys)
    if correct_count == 0:
        raise ZeroCorrectAnswersError(
            f"Condition {expression.source or str(expression)!r} marks no choice as correct"
        )

    unknown = set(marks) - {c.key for c in choices}
    if unknown:
        logger.warning("Condition references undeclared choice(s): %s", sorted(unknown))

    worth = 1 / correct_count
    penalty = 0.0 if single_response else -worth

    fractions = tuple(worth if c.key in correct_keys else penalty for c in choices)
    logger.debug(
        "Fractions for %d choice(s), %d correct (%s): %s",
        len(choices), correct_count, "single" if single_response else "multi", fractions,
    )
    return fractions
