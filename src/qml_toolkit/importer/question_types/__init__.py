"""
Per-kind importers for QML questions.

The ANSWER/@QTYPE tag selects exactly one importer from a closed table;
tags outside the table resolve to SourceKind.UNKNOWN and are reported,
never guessed.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict

from qml_toolkit.core.errors import UnsupportedQuestionError
from qml_toolkit.core.models.questions import QuestionModel

from .common import ConversionContext, SourceQuestion, read_source_question
from .embedded import build_multianswer, import_selection
from .essay import import_essay
from .matching import import_matching
from .multichoice import import_multichoice
from .numerical import import_numerical
from .shortanswer import import_shortanswer
from .truefalse import import_truefalse


class SourceKind(str, Enum):
    """Importer families of the QTYPE tags."""
    MULTICHOICE = "multichoice"
    TRUEFALSE = "truefalse"
    SHORTANSWER = "shortanswer"
    NUMERICAL = "numerical"
    ESSAY = "essay"
    MATCHING = "matching"
    SELECTION = "selection"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


QTYPE_KINDS: Dict[str, SourceKind] = {
    "MC": SourceKind.MULTICHOICE,
    "MR": SourceKind.MULTICHOICE,
    "TF": SourceKind.TRUEFALSE,
    "YN": SourceKind.TRUEFALSE,
    "FIB": SourceKind.SHORTANSWER,
    "TM": SourceKind.SHORTANSWER,
    "NUM": SourceKind.NUMERICAL,
    "ESSAY": SourceKind.ESSAY,
    "EXPLAIN": SourceKind.ESSAY,
    "MATCH": SourceKind.MATCHING,
    "SEL": SourceKind.SELECTION,
}

Importer = Callable[[SourceQuestion, ConversionContext], QuestionModel]

IMPORTERS: Dict[SourceKind, Importer] = {
    SourceKind.MULTICHOICE: import_multichoice,
    SourceKind.TRUEFALSE: import_truefalse,
    SourceKind.SHORTANSWER: import_shortanswer,
    SourceKind.NUMERICAL: import_numerical,
    SourceKind.ESSAY: import_essay,
    SourceKind.MATCHING: import_matching,
    SourceKind.SELECTION: import_selection,
}


def resolve_kind(qtype: str) -> SourceKind:
    """Map a QTYPE tag (case-insensitive) to its importer family."""
    return QTYPE_KINDS.get(qtype.strip().upper(), SourceKind.UNKNOWN)


def convert_question(source: SourceQuestion, ctx: ConversionContext) -> QuestionModel:
    """
    Run the importer registered for the question's QTYPE.

    Raises:
        UnsupportedQuestionError: If the QTYPE has no importer
        QmlImportError: Any error raised by the kind importer
    """
    kind = resolve_kind(source.qtype)
    importer = IMPORTERS.get(kind)
    if importer is None:
        raise UnsupportedQuestionError(source.qtype or "(none)", question_id=source.id)
    return importer(source, ctx)


__all__ = [
    "ConversionContext",
    "IMPORTERS",
    "QTYPE_KINDS",
    "SourceKind",
    "SourceQuestion",
    "build_multianswer",
    "convert_question",
    "read_source_question",
    "resolve_kind",
]
