"""
Module: importer.pipeline

Purpose:
    Batch import of a QML document. Each QUESTION is converted by the
    importer of its kind; per-question failures are logged, recorded and
    skipped so one bad question never stops the batch. A malformed document
    aborts the whole import.

Key Functions:
    - import_questions(): Document (or bytes/text/path) -> ImportResult

Key Classes:
    - ImportResult: Converted questions, notices, errors and skipped questions

Dependencies:
    - concurrent.futures: Optional parallel conversion
    - qml_toolkit.importer.question_types
    - qml_toolkit.importer.diagnostics

Used By:
    - qml_toolkit.cli
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from qml_toolkit.core.errors import DocumentError, QmlImportError
from qml_toolkit.core.models.questions import CategoryMarker, QuestionModel, UnknownQuestion
from qml_toolkit.core.schemas.validator import ValidationError

from .config import ImportConfig
from .diagnostics import ImportDiagnostics
from .messages import MessageCatalog
from .question_types import SourceKind, convert_question, read_source_question, resolve_kind
from .question_types.common import ConversionContext, derive_name
from .reader import EmptyDocument, QmlDocument, QmlNode, read_document
from .sink import QuestionBankSink

logger = logging.getLogger(__name__)

DocumentSource = Union[QmlDocument, EmptyDocument, bytes, str, Path]


@dataclass
class ImportResult:
    """
    Result of importing one document.

    Attributes:
        questions: Converted questions and category markers, in source order
        notices: Localized notices raised while converting
        errors: Per-question failures, in source order
        skipped: Questions whose QTYPE has no importer
        diagnostics: Collector holding the same issues for reporting
    """
    questions: List[QuestionModel] = field(default_factory=list)
    notices: List[str] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)
    skipped: List[UnknownQuestion] = field(default_factory=list)
    diagnostics: ImportDiagnostics = field(default_factory=ImportDiagnostics)

    @property
    def imported(self) -> List[QuestionModel]:
        """Converted questions without category markers."""
        return [q for q in self.questions if not isinstance(q, CategoryMarker)]

    def summary(self, messages: Optional[MessageCatalog] = None) -> str:
        messages = messages or MessageCatalog()
        return messages.get(
            "importsummary",
            a=len(self.imported),
            b=len(self.skipped),
            c=len(self.errors),
        )


@dataclass
class _Conversion:
    """Outcome of converting one QUESTION node."""
    position: int
    question_id: str
    name: str
    topic: str
    model: Optional[QuestionModel] = None
    error: Optional[QmlImportError] = None
    notices: List[str] = field(default_factory=list)


def _convert_node(
    node: QmlNode,
    position: int,
    config: ImportConfig,
    messages: MessageCatalog,
) -> _Conversion:
    """Convert one QUESTION node; never raises QmlImportError."""
    question_id = node.get("ID")
    conversion = _Conversion(
        position=position,
        question_id=question_id,
        name=node.get("DESCRIPTION").strip() or question_id or f"#{position}",
        topic=node.get("TOPIC").strip(),
    )
    ctx = ConversionContext(config=config, messages=messages)
    try:
        source = read_source_question(node, position, ctx)
        if resolve_kind(source.qtype) is SourceKind.UNKNOWN:
            conversion.model = UnknownQuestion(
                name=derive_name(source.description, "", source.id or f"Question {position}"),
                source_id=source.id,
                qtype=source.qtype,
            )
        else:
            conversion.model = convert_question(source, ctx)
    except QmlImportError as exc:
        conversion.error = exc.with_question(question_id)
    conversion.notices = ctx.notices
    return conversion


def _convert_all(
    nodes: List[QmlNode],
    config: ImportConfig,
    messages: MessageCatalog,
) -> List[_Conversion]:
    if config.workers <= 1 or len(nodes) <= 1:
        return [_convert_node(node, i, config, messages) for i, node in enumerate(nodes, start=1)]

    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        futures = [
            executor.submit(_convert_node, node, i, config, messages)
            for i, node in enumerate(nodes, start=1)
        ]
        conversions = [future.result() for future in futures]
    return sorted(conversions, key=lambda c: c.position)


def _load(source: DocumentSource) -> Union[QmlDocument, EmptyDocument]:
    if isinstance(source, (QmlDocument, EmptyDocument)):
        return source
    return read_document(source)


def import_questions(
    source: DocumentSource,
    config: Optional[ImportConfig] = None,
    *,
    sink: Optional[QuestionBankSink] = None,
    diagnostics: Optional[ImportDiagnostics] = None,
) -> ImportResult:
    """
    Import every QUESTION of a QML document.

    Pipeline:
    1. Read the document (EmptyDocument aborts with DocumentError)
    2. Convert each QUESTION with the importer of its QTYPE, optionally
       on a thread pool, keeping source order
    3. Emit a category marker whenever TOPIC changes
    4. Hand converted questions to the sink on the calling thread

    Args:
        source: Parsed document, or XML bytes/text/path to read
        config: Import configuration (defaults to ImportConfig())
        sink: Optional destination for converted questions
        diagnostics: Optional collector shared across documents

    Returns:
        ImportResult with questions, notices, errors and skipped questions

    Raises:
        DocumentError: If the document is malformed or empty

    Example:
        >>> result = import_questions(Path("quiz.qml"), sink=MemoryQuestionBank())
        >>> print(result.summary())
        Imported 12 question(s), skipped 1, failed 0
    """
    config = config or ImportConfig()
    messages = MessageCatalog(config.language)
    document = _load(source)
    if isinstance(document, EmptyDocument):
        raise DocumentError(messages.get("documentinvalid", a=document.reason))

    diagnostics = diagnostics or ImportDiagnostics(source_name=document.source_name)
    result = ImportResult(diagnostics=diagnostics)
    nodes = list(document.questions())
    logger.info("Importing %d question(s) from %s", len(nodes), document.source_name or "document")

    current_topic = ""
    for conversion in _convert_all(nodes, config, messages):
        for notice in conversion.notices:
            result.notices.append(notice)
            diagnostics.add_notice(conversion.position, conversion.question_id, conversion.name, notice)

        if conversion.error is not None:
            _record_failure(result, conversion, conversion.error, messages)
            continue

        model = conversion.model
        if isinstance(model, UnknownQuestion):
            logger.warning(
                "Skipping question %s (#%d): unsupported type %r",
                conversion.name, conversion.position, model.qtype,
            )
            notice = messages.get("unknownquestiontype", a=model.qtype or "(none)")
            result.notices.append(notice)
            result.skipped.append(model)
            diagnostics.add_unsupported(conversion.position, conversion.question_id, conversion.name, notice)
            continue

        if config.emit_categories and conversion.topic and conversion.topic != current_topic:
            marker = CategoryMarker.for_topic(conversion.topic)
            if sink is not None:
                sink.add(marker)
            result.questions.append(marker)
            current_topic = conversion.topic

        try:
            if sink is not None:
                sink.add(model)
        except ValidationError as exc:
            _record_failure(result, conversion, exc, messages)
            continue
        result.questions.append(model)
        diagnostics.mark_imported()

    logger.info(
        "Completed import of %s: %s",
        document.source_name or "document",
        result.summary(messages),
        extra={
            "source_name": document.source_name,
            "imported": len(result.imported),
            "skipped": len(result.skipped),
            "failed": len(result.errors),
        },
    )
    return result


def _record_failure(
    result: ImportResult,
    conversion: _Conversion,
    exc: Exception,
    messages: MessageCatalog,
) -> None:
    logger.warning(
        "%s",
        messages.get("questionfailed", a=f"{conversion.name} (#{conversion.position})", b=exc),
        extra={
            "question_id": conversion.question_id,
            "position": conversion.position,
            "error": type(exc).__name__,
        },
    )
    result.errors.append(exc)
    result.diagnostics.add_failure(conversion.position, conversion.question_id, conversion.name, exc)
