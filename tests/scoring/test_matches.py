"""
Unit Tests for the Match Synthesizer

Tests for synthesize_matches().
"""

from qml_toolkit.core.models.outcomes import Choice, Outcome
from qml_toolkit.scoring.aggregator import aggregate_outcomes
from qml_toolkit.scoring.matches import synthesize_matches


class TestSynthesizeMatches:
    """Tests for synthesize_matches function."""

    def test_matches_when_right_and_wrong_then_one_match_and_residual(self):
        outcome_set = aggregate_outcomes([
            Outcome("right", score=1, condition='"0" MATCHES "Paris"', feedback="Well done"),
            Outcome("wrong", score=0, condition="OTHER", feedback="No"),
        ])
        result = synthesize_matches(outcome_set, [Choice(0, "Paris"), Choice(1, "Berlin")])

        assert [(m.stem_id, m.choice_text, m.score) for m in result.matches] == [("0", "Paris", 1)]
        assert result.matches[0].feedback == "Well done"
        assert result.residual_texts == ("Berlin",)
        assert result.residual_feedback == "No"

    def test_matches_when_per_stem_then_scores_from_each_outcome(self):
        outcome_set = aggregate_outcomes([
            Outcome("0 Paris", score=2, condition='"0" MATCHES "Paris"', feedback="Yes"),
            Outcome("1 Rome", score=1, condition='"1" MATCHES "Rome"', feedback="Right"),
        ])
        result = synthesize_matches(outcome_set, [])
        assert [(m.stem_id, m.score, m.feedback) for m in result.matches] == [
            ("0", 2, "Yes"), ("1", 1, "Right"),
        ]
        assert result.stem_ids == ("0", "1")

    def test_matches_when_nocase_then_consumes_choice_ignoring_case(self):
        outcome_set = aggregate_outcomes([
            Outcome("right", score=1, condition='"0" MATCHES NOCASE "paris"'),
        ])
        result = synthesize_matches(outcome_set, [Choice(0, "PARIS"), Choice(1, "Berlin")])
        assert result.residual_texts == ("Berlin",)

    def test_matches_when_case_sensitive_then_other_case_stays_residual(self):
        outcome_set = aggregate_outcomes([
            Outcome("right", score=1, condition='"0" MATCHES "paris"'),
        ])
        result = synthesize_matches(outcome_set, [Choice(0, "Paris")])
        assert result.residual_texts == ("Paris",)

    def test_matches_when_zero_score_alternative_then_incorrect_match(self):
        outcome_set = aggregate_outcomes([
            Outcome("0 Paris", score=1, condition='"0" MATCHES "Paris"'),
            Outcome("0 Lyon", score=0, condition='"0" MATCHES "Lyon"', feedback="Too far south"),
        ])
        result = synthesize_matches(outcome_set, [])
        assert [m.is_correct for m in result.matches_for("0")] == [True, False]
