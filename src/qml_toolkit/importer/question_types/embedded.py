"""
Module: importer.question_types.embedded

Purpose:
    Builds embedded-answer (multianswer) questions: each CHOICE blank of the
    ANSWER becomes one Cloze block holding that stem's matches and
    distractors, and the encoded text is decoded by the extractor into the
    structured EmbeddedQuestion stored on the model.

Key Functions:
    - build_multianswer(): Matches -> MultiAnswerQuestion
    - import_selection(): SEL (pull-down blanks) questions
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from qml_toolkit.cloze.encoder import encode_question, encode_stem
from qml_toolkit.cloze.extractor import extract_embedded
from qml_toolkit.core.errors import MissingNodeError
from qml_toolkit.core.models.answers import Match, MatchResult
from qml_toolkit.core.models.embedded import ClozeKind
from qml_toolkit.core.models.questions import MultiAnswerQuestion, TextFormat
from qml_toolkit.scoring.aggregator import aggregate_outcomes
from qml_toolkit.scoring.matches import synthesize_matches

from .common import ConversionContext, SourceQuestion, build_header, join_text

logger = logging.getLogger(__name__)


def _distractors(own_options: Sequence[str], matches: Sequence[Match], residual: Sequence[str]) -> List[str]:
    """The stem's own unmatched options followed by the shared residual pool."""
    taken = {m.choice_text.casefold() for m in matches}
    result: List[str] = []
    for text in list(own_options) + list(residual):
        if text and text.casefold() not in taken:
            taken.add(text.casefold())
            result.append(text)
    return result


def build_multianswer(
    source: SourceQuestion,
    ctx: ConversionContext,
    result: MatchResult,
    kind: ClozeKind,
) -> MultiAnswerQuestion:
    """
    Encode every stem into the question text.

    Blanks are placed where their CHOICE sits among the ANSWER fragments.
    Stems with no CHOICE blank are appended after the fragments.

    Args:
        source: Question being imported
        ctx: Conversion context
        result: Matches and residual pool
        kind: Block kind for every stem

    Raises:
        MissingNodeError: If a blank has no outcome addressing it
        ZeroCorrectAnswersError: If a stem has no correct match
    """
    residual = result.residual_texts if not kind.is_numeric else ()
    encoded: List[str] = []
    placed = set()
    for segment in source.segments:
        if not segment.is_blank:
            encoded.append(segment.text)
            continue
        key = segment.choice.key
        matches = result.matches_for(key)
        if not matches:
            raise MissingNodeError(
                f"No outcome addresses blank {key!r} of {source.display_name!r}",
                question_id=source.id,
            )
        distractors = _distractors(segment.choice.options, matches, residual)
        encoded.append(encode_stem(segment.text, matches, distractors, kind, result.residual_feedback))
        placed.add(key)

    for stem_id in result.stem_ids:
        if stem_id in placed:
            continue
        matches = result.matches_for(stem_id)
        distractors = _distractors((), matches, residual)
        encoded.append(encode_stem("", matches, distractors, kind, result.residual_feedback))

    header = build_header(source, ctx)
    text = join_text(header["question_text"], encode_question(encoded))
    embedded = extract_embedded(text)
    logger.debug(
        "Multianswer %s: %d embedded block(s) of kind %s",
        source.display_name, len(embedded.subquestions), kind,
    )
    header.update(question_text=text)
    if header["question_text_format"] is TextFormat.PLAIN:
        header.update(question_text_format=TextFormat.MOODLE)
    return MultiAnswerQuestion(**header, embedded=embedded)


def import_selection(source: SourceQuestion, ctx: ConversionContext) -> MultiAnswerQuestion:
    """
    Import a SEL question: each CHOICE is a pull-down blank over its OPTIONs.

    Raises:
        MissingNodeError: If there is no CHOICE blank
    """
    if not source.choices:
        raise MissingNodeError("Selection question has no CHOICE", question_id=source.id)
    outcome_set = aggregate_outcomes(source.outcomes, question_id=source.id)
    result = synthesize_matches(outcome_set, source.option_pool)
    return build_multianswer(source, ctx, result, ClozeKind.MULTICHOICE)
