"""
Module: cloze.encoder

Purpose:
    Serializes a stem and its matches into embedded-answer (Cloze) markup:

        {<weight>:<KIND>:~=right#feedback~wrong#feedback}

    Each option is prefixed `~=` when correct and `~` otherwise, and gets a
    `#feedback` suffix when feedback is non-empty. The output must be
    byte-exact for the extractor to decode it.

Key Functions:
    - encode_block(): Matches + distractors -> one `{...}` block
    - encode_stem(): Insert the block into a stem's text
    - encode_question(): Join encoded stems and text fragments
    - escape_cloze(): Backslash-escape markup characters

Dependencies:
    - re (std)
    - qml_toolkit.core.models

Used By:
    - importer.question_types.embedded
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence

from qml_toolkit.core.errors import ZeroCorrectAnswersError
from qml_toolkit.core.models.answers import Match
from qml_toolkit.core.models.embedded import ClozeKind

logger = logging.getLogger(__name__)

BLANK_RE = re.compile(r"_{2,}")
_SPECIAL_RE = re.compile(r"([\\~#}])")
_MARKERS = ("=", "%")


def escape_cloze(text: str) -> str:
    r"""
    Escape the characters that delimit options, feedback and blocks.

    Example:
        >>> escape_cloze("C# ~ F#")
        'C\\# \\~ F\\#'
    """
    return _SPECIAL_RE.sub(r"\\\1", text)


def format_option(text: str, correct: bool, feedback: str = "") -> str:
    """One `~=text#feedback` / `~text` option."""
    body = escape_cloze(text)
    if body.startswith(_MARKERS):
        # A leading "=" or "%" would read back as a correctness marker
        body = "\\" + body
    option = ("~=" if correct else "~") + body
    if feedback:
        option += "#" + escape_cloze(feedback)
    return option


def _numeric_text(text: str) -> str:
    return text if ":" in text else f"{text}:0"


def resolve_kind(kind: ClozeKind, matches: Sequence[Match]) -> ClozeKind:
    """SHORTANSWER becomes SHORTANSWER_C when a correct match is case sensitive."""
    if kind is ClozeKind.SHORTANSWER and any(
        m.case_sensitive for m in matches if m.is_correct
    ):
        return ClozeKind.SHORTANSWER_C
    return kind


def encode_block(
    matches: Sequence[Match],
    residual: Iterable[str] = (),
    kind: ClozeKind = ClozeKind.MULTICHOICE,
    residual_feedback: str = "",
) -> str:
    """
    Encode one stem's options as an embedded block.

    Correct matches come first (in match order), then incorrect matches,
    then residual distractors carrying residual_feedback.

    Args:
        matches: Matches of a single stem
        residual: Distractor texts that matched no stem
        kind: MULTICHOICE, NUMERICAL or SHORTANSWER style
        residual_feedback: Feedback for every distractor

    Returns:
        Markup such as `{1:MULTICHOICE:~=Paris~Berlin#No}`

    Raises:
        ZeroCorrectAnswersError: If no match is correct
    """
    correct = [m for m in matches if m.is_correct]
    if not correct:
        stem = matches[0].stem_id if matches else "?"
        raise ZeroCorrectAnswersError(f"Stem {stem!r} has no correct answer to embed")

    kind = resolve_kind(kind, matches)
    weight = sum(m.score for m in correct)

    options: List[str] = []
    for match in correct + [m for m in matches if not m.is_correct]:
        text = _numeric_text(match.choice_text) if kind.is_numeric else match.choice_text
        options.append(format_option(text, match.is_correct, match.feedback))
    if not kind.is_numeric:
        options.extend(format_option(text, False, residual_feedback) for text in residual)

    return "{" + f"{weight}:{kind.value}:" + "".join(options) + "}"


def encode_stem(
    text: str,
    matches: Sequence[Match],
    residual: Iterable[str] = (),
    kind: ClozeKind = ClozeKind.MULTICHOICE,
    residual_feedback: str = "",
) -> str:
    """
    Encode a stem and place its block in the stem text.

    The first run of two or more underscores is replaced by the block;
    without such a run the block is appended after a single space.

    Example:
        >>> encode_stem("Capital of France: ___", [Match("0", "Paris", 1)])
        'Capital of France: {1:MULTICHOICE:~=Paris}'
    """
    block = encode_block(matches, residual, kind, residual_feedback)
    if BLANK_RE.search(text):
        # Function replacement so backslashes in the block stay literal
        return BLANK_RE.sub(lambda _m: block, text, count=1)
    if not text.strip():
        return block
    return f"{text.rstrip()} {block}"


def encode_question(segments: Sequence[str]) -> str:
    """Join question text fragments and encoded stems with single spaces."""
    return " ".join(s.strip() for s in segments if s and s.strip())
