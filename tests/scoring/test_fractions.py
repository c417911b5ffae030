"""
Unit Tests for the Fraction Synthesizer

Tests for read_choice_marks() and synthesize_fractions().
"""

import logging

import pytest

from qml_toolkit.core.errors import ZeroCorrectAnswersError
from qml_toolkit.core.models.outcomes import Choice
from qml_toolkit.interpreter.parser import parse_condition
from qml_toolkit.scoring.fractions import read_choice_marks, synthesize_fractions


def _choices(count):
    return [Choice(i, f"choice {i}") for i in range(count)]


class TestReadChoiceMarks:
    """Tests for read_choice_marks function."""

    def test_read_when_negated_then_marked_incorrect(self):
        marks = read_choice_marks(parse_condition('NOT "0" AND NOT "1" AND "2"'))
        assert [(m.key, m.correct) for m in marks] == [("0", False), ("1", False), ("2", True)]

    def test_read_when_key_repeated_then_first_mark_wins(self):
        marks = read_choice_marks(parse_condition('"0" AND NOT "0"'))
        assert len(marks) == 1
        assert marks[0].correct is True


class TestSynthesizeFractions:
    """Tests for synthesize_fractions function."""

    def test_fractions_when_one_correct_single_then_one_and_zeros(self):
        expr = parse_condition('NOT "0" AND NOT "1" AND "2"')
        assert synthesize_fractions(expr, _choices(3), single_response=True) == (0.0, 0.0, 1.0)

    def test_fractions_when_single_response_then_positive_sum_is_one(self):
        expr = parse_condition('"0" AND NOT "1" AND "2"')
        fractions = synthesize_fractions(expr, _choices(3), single_response=True)
        assert sum(f for f in fractions if f > 0) == pytest.approx(1.0)
        assert min(fractions) == 0.0

    def test_fractions_when_multi_response_then_penalty_is_minus_share(self):
        expr = parse_condition('"0" AND "1" AND NOT "2" AND NOT "3"')
        fractions = synthesize_fractions(expr, _choices(4), single_response=False)
        assert fractions == (0.5, 0.5, -0.5, -0.5)

    def test_fractions_when_all_selected_and_counts_equal_then_nets_zero(self):
        expr = parse_condition('"0" AND "1" AND NOT "2" AND NOT "3"')
        assert sum(synthesize_fractions(expr, _choices(4), single_response=False)) == pytest.approx(0.0)

    def test_fractions_when_choice_not_mentioned_then_incorrect(self):
        expr = parse_condition('"1"  AND NOT "0"')
        assert synthesize_fractions(expr, _choices(3), single_response=False) == (-1.0, 1.0, -1.0)

    def test_fractions_when_declaration_order_differs_then_follows_choices(self):
        expr = parse_condition('"2" AND NOT "0" AND NOT "1"')
        assert synthesize_fractions(expr, _choices(3), single_response=True) == (0.0, 0.0, 1.0)

    def test_fractions_when_zero_correct_then_raises_error(self):
        expr = parse_condition('NOT "0" AND NOT "1"')
        with pytest.raises(ZeroCorrectAnswersError):
            synthesize_fractions(expr, _choices(2), single_response=True)

    def test_fractions_when_undeclared_key_then_warns(self, caplog):
        expr = parse_condition('"0" AND NOT "5"')
        with caplog.at_level(logging.WARNING, logger="qml_toolkit.scoring.fractions"):
            synthesize_fractions(expr, _choices(2), single_response=True)
        assert "undeclared" in caplog.text
