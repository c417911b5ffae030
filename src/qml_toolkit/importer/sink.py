"""
Module: importer.sink

Purpose:
    Destinations for converted questions. The pipeline hands every
    successfully converted question (and category marker) to a sink, in
    source order, on the calling thread.

Key Classes:
    - QuestionBankSink: Protocol with add(model)
    - MemoryQuestionBank: Keeps questions in a list
    - JsonlQuestionBank: Validated, file-locked JSONL records

Dependencies:
    - qml_toolkit.core.utils.serialization
    - qml_toolkit.core.schemas
    - importer.file_locking (portalocker)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Protocol, Union

from qml_toolkit.core.models.questions import QuestionKind, QuestionModel
from qml_toolkit.core.schemas.validator import validate_record
from qml_toolkit.core.utils.serialization import serialize_question

from .file_locking import locked_append_jsonl

logger = logging.getLogger(__name__)


class QuestionBankSink(Protocol):
    """Anything that accepts converted questions."""

    def add(self, model: QuestionModel) -> None:
        ...


class MemoryQuestionBank:
    """In-memory sink, mostly for tests and library callers."""

    def __init__(self) -> None:
        self.questions: List[QuestionModel] = []

    def add(self, model: QuestionModel) -> None:
        if model.kind is QuestionKind.UNKNOWN:
            raise ValueError(f"Refusing to store unknown question {model.name!r}")
        self.questions.append(model)

    def __iter__(self) -> Iterator[QuestionModel]:
        return iter(self.questions)

    def __len__(self) -> int:
        return len(self.questions)


class JsonlQuestionBank:
    """
    Appends one validated JSON record per question to a JSONL file.

    Records are checked against question_record.schema.json before they
    are written; an invalid record raises ValidationError and nothing is
    written for it.

    Args:
        path: Output file (created with its parent directories)
        strict: Run full jsonschema validation, not only the basic checks
    """

    def __init__(self, path: Union[str, Path], *, strict: bool = True):
        self.path = Path(path)
        self.strict = strict
        self.written = 0

    def add(self, model: QuestionModel) -> None:
        record = serialize_question(model)
        validate_record(record, strict=self.strict)
        self.written += locked_append_jsonl(self.path, [record])
        logger.debug("Stored %s in %s", model.name, self.path.name)
