"""
Module: scoring

Purpose:
    Scoring synthesizers: outcome aggregation, per-choice fractions for
    multichoice questions and stem matches for matching/embedded questions.

Key Functions:
    - aggregate_outcomes(): Outcomes -> OutcomeSet
    - combined_condition(): Multichoice condition (synthesized when bare)
    - synthesize_fractions(): Condition -> per-choice fractions
    - synthesize_matches(): OutcomeSet -> MatchResult
"""

from .aggregator import (
    AggregationMode,
    Alternative,
    OutcomeSet,
    StemRule,
    aggregate_outcomes,
    combined_condition,
    find_catch_all,
    synthesize_combined_condition,
)
from .fractions import read_choice_marks, synthesize_fractions
from .matches import synthesize_matches

__all__ = [
    "AggregationMode",
    "Alternative",
    "OutcomeSet",
    "StemRule",
    "aggregate_outcomes",
    "combined_condition",
    "find_catch_all",
    "synthesize_combined_condition",
    "read_choice_marks",
    "synthesize_fractions",
    "synthesize_matches",
]
