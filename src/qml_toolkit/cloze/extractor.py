"""
Module: cloze.extractor

Purpose:
    Decodes embedded-answer (Cloze) markup into an EmbeddedQuestion: each
    `{weight:KIND:options}` block becomes an EmbeddedSubquestion and is
    replaced by a `{#n}` placeholder in the question text.

Key Functions:
    - extract_embedded(): Markup -> EmbeddedQuestion
    - split_unescaped(): Split on a delimiter not preceded by a backslash
    - unescape_cloze(): Reverse of encoder.escape_cloze

Dependencies:
    - re (std)
    - qml_toolkit.core.models.embedded

Used By:
    - importer.question_types.embedded
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from qml_toolkit.core.errors import ClozeSyntaxError
from qml_toolkit.core.models.embedded import (
    ClozeKind,
    EmbeddedAnswer,
    EmbeddedQuestion,
    EmbeddedSubquestion,
)

logger = logging.getLogger(__name__)

_BLOCK_START_RE = re.compile(r"\{(\d+):")
_BLOCK_RE = re.compile(r"\{(?P<weight>\d+):(?P<kind>[A-Z_]+):(?P<body>(?:\\.|[^\\}])*)\}")
_FRACTION_RE = re.compile(r"^%(-?\d+(?:\.\d+)?)%")
_UNESCAPE_RE = re.compile(r"\\(.)")


def unescape_cloze(text: str) -> str:
    return _UNESCAPE_RE.sub(r"\1", text)


def split_unescaped(text: str, delimiter: str) -> List[str]:
    """Split on delimiter characters that are not backslash-escaped."""
    parts: List[str] = []
    current: List[str] = []
    escaped = False
    for char in text:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            current.append(char)
            escaped = True
        elif char == delimiter:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def _parse_answer(raw: str, kind: ClozeKind) -> EmbeddedAnswer:
    # Escaped markers (\= and \%) are literal text, unescaped below
    correct = False
    if raw.startswith("="):
        correct = True
        raw = raw[1:]
    else:
        m = _FRACTION_RE.match(raw)
        if m:
            correct = float(m.group(1)) > 0
            raw = raw[m.end():]

    pieces = split_unescaped(raw, "#")
    text = pieces[0]
    feedback = "#".join(pieces[1:]) if len(pieces) > 1 else ""

    tolerance: Optional[float] = None
    if kind.is_numeric:
        value, _, tol = text.partition(":")
        try:
            float(value)
            tolerance = float(tol) if tol else 0.0
        except ValueError:
            raise ClozeSyntaxError(f"Invalid numeric answer {text!r}") from None
        text = value

    return EmbeddedAnswer(
        text=unescape_cloze(text),
        correct=correct,
        feedback=unescape_cloze(feedback),
        tolerance=tolerance,
    )


def _parse_block(match: re.Match, position: int) -> EmbeddedSubquestion:
    try:
        kind = ClozeKind(match.group("kind"))
    except ValueError:
        raise ClozeSyntaxError(f"Unknown embedded kind {match.group('kind')!r}") from None

    raw_answers = split_unescaped(match.group("body"), "~")
    if raw_answers and raw_answers[0] == "":
        raw_answers = raw_answers[1:]
    if not raw_answers:
        raise ClozeSyntaxError(f"Embedded block {match.group(0)!r} has no answers")

    answers = tuple(_parse_answer(raw, kind) for raw in raw_answers)
    return EmbeddedSubquestion(
        position=position,
        kind=kind,
        weight=int(match.group("weight")),
        answers=answers,
    )


def extract_embedded(text: str) -> EmbeddedQuestion:
    """
    Decode every embedded block in question text.

    Args:
        text: Question text containing Cloze markup

    Returns:
        EmbeddedQuestion with `{#1}`, `{#2}`, ... placeholders

    Raises:
        ClozeSyntaxError: If a block is unterminated or malformed

    Example:
        >>> q = extract_embedded("Capital: {1:MULTICHOICE:~=Paris~Berlin#No}")
        >>> q.text
        'Capital: {#1}'
        >>> [(a.text, a.correct, a.feedback) for a in q.subquestions[0].answers]
        [('Paris', True, ''), ('Berlin', False, 'No')]
    """
    pieces: List[str] = []
    subquestions: List[EmbeddedSubquestion] = []
    pos = 0
    while True:
        start = _BLOCK_START_RE.search(text, pos)
        if start is None:
            pieces.append(text[pos:])
            break
        block = _BLOCK_RE.match(text, start.start())
        if block is None:
            raise ClozeSyntaxError(
                f"Malformed embedded block at position {start.start()}: "
                f"{text[start.start():start.start() + 40]!r}"
            )
        subquestion = _parse_block(block, len(subquestions) + 1)
        subquestions.append(subquestion)
        pieces.append(text[pos:block.start()])
        pieces.append(f"{{#{subquestion.position}}}")
        pos = block.end()

    logger.debug("Extracted %d embedded sub-question(s)", len(subquestions))
    return EmbeddedQuestion(text="".join(pieces), subquestions=tuple(subquestions))


def answer_tuples(question: EmbeddedQuestion) -> List[Tuple[int, str, bool, str]]:
    """Flatten to (position, text, correct, feedback) tuples."""
    return [
        (sub.position, answer.text, answer.correct, answer.feedback)
        for sub in question.subquestions
        for answer in sub.answers
    ]
