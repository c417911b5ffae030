"""
Integration Tests for the Import Pipeline

Tests for import_questions() over complete QML documents.
"""

import json
import logging

import pytest

from qml_toolkit.core.errors import ConditionParseError, DocumentError
from qml_toolkit.core.models.questions import (
    CategoryMarker,
    EssayQuestion,
    MatchingQuestion,
    MultiAnswerQuestion,
    MultichoiceQuestion,
    QuestionKind,
    RangedNumericalQuestion,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)
from qml_toolkit.importer.config import ImportConfig, TemplateVariables
from qml_toolkit.importer.diagnostics import ISSUE_FAILED, ImportDiagnostics
from qml_toolkit.importer.pipeline import import_questions
from qml_toolkit.importer.reader import read_document
from qml_toolkit.importer.sink import JsonlQuestionBank, MemoryQuestionBank

from conftest import BROKEN_CONDITION_QUESTION, MC_QUESTION, TF_QUESTION, wrap_qml


class TestImportQuestions:
    """Tests for import_questions over the sample document."""

    def test_import_when_sample_document_then_every_kind_converted(self, sample_document):
        result = import_questions(sample_document)

        assert [type(q) for q in result.imported] == [
            MultichoiceQuestion,
            MultichoiceQuestion,
            TrueFalseQuestion,
            ShortAnswerQuestion,
            MultiAnswerQuestion,
            RangedNumericalQuestion,
            EssayQuestion,
            MatchingQuestion,
            MultiAnswerQuestion,
        ]
        assert len(result.skipped) == 1
        assert result.errors == []

    def test_import_when_topic_changes_then_category_marker_emitted(self, sample_document):
        result = import_questions(sample_document)

        markers = [q.path for q in result.questions if isinstance(q, CategoryMarker)]
        assert markers == [
            "$course$/Geography",
            "$course$/Maths",
            "$course$/Chemistry",
            "$course$/Geography",
            "$course$/Chemistry",
            "$course$/Biology",
            "$course$/Geography",
        ]
        assert len(result.questions) == 16
        assert result.questions[0].kind is QuestionKind.CATEGORY

    def test_import_when_categories_disabled_then_no_markers(self, sample_document):
        result = import_questions(sample_document, ImportConfig(emit_categories=False))
        assert len(result.questions) == 9

    def test_import_when_unknown_qtype_then_skipped_with_notice(self, sample_document):
        result = import_questions(sample_document)

        assert result.skipped[0].qtype == "HOT"
        assert result.notices == ["Question type HOT is not supported by QML import"]
        assert result.diagnostics.summary()["unsupported"] == 1

    def test_import_when_complete_then_summary_counts(self, sample_document):
        result = import_questions(sample_document)
        assert result.summary() == "Imported 9 question(s), skipped 1, failed 0"
        assert result.diagnostics.summary()["imported"] == 9

    def test_import_when_workers_then_same_order_as_sequential(self, sample_document):
        sequential = import_questions(sample_document)
        parallel = import_questions(sample_document, ImportConfig(workers=4))
        assert parallel.questions == sequential.questions

    def test_import_when_sink_given_then_receives_questions_and_markers(self, sample_document):
        sink = MemoryQuestionBank()
        result = import_questions(sample_document, sink=sink)
        assert sink.questions == result.questions

    def test_import_when_jsonl_sink_then_every_record_valid(self, sample_path, tmp_path):
        out = tmp_path / "bank.jsonl"
        sink = JsonlQuestionBank(out)
        result = import_questions(sample_path, sink=sink)

        records = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
        assert sink.written == 16
        assert len(records) == len(result.questions)
        assert records[0] == {
            "schema_version": 1,
            "kind": "category",
            "name": "$course$/Geography",
            "question_text": "",
            "question_text_format": 1,
            "general_feedback": "",
            "source_id": "",
        }

    def test_import_when_parsed_document_then_accepted(self, sample_document):
        result = import_questions(read_document(sample_document))
        assert len(result.imported) == 9


class TestImportFailures:
    """Tests for per-question and document failures."""

    def test_import_when_condition_broken_then_question_failed_and_batch_continues(self, caplog):
        document = wrap_qml(MC_QUESTION, BROKEN_CONDITION_QUESTION, TF_QUESTION)
        with caplog.at_level(logging.WARNING, logger="qml_toolkit.importer.pipeline"):
            result = import_questions(document)

        assert len(result.imported) == 2
        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, ConditionParseError)
        assert error.question_id == "1011"
        assert "Broken (#2) could not be imported" in caplog.text

    def test_import_when_condition_broken_then_diagnostics_record_condition(self):
        diagnostics = ImportDiagnostics()
        import_questions(wrap_qml(BROKEN_CONDITION_QUESTION), diagnostics=diagnostics)

        issue = diagnostics.issues[0]
        assert issue.issue_type == ISSUE_FAILED
        assert issue.position == 1
        assert issue.condition == '"0" FOO "1"'
        assert diagnostics.summary()["failed"] == 1

    def test_import_when_failed_question_then_no_category_marker(self):
        broken = BROKEN_CONDITION_QUESTION.replace('TOPIC="Geography"', 'TOPIC="Physics"')
        result = import_questions(wrap_qml(broken, MC_QUESTION))
        markers = [q.path for q in result.questions if isinstance(q, CategoryMarker)]
        assert markers == ["$course$/Geography"]

    @pytest.mark.parametrize("source", ["", "<QML><QUESTION></QML>", "<QML/>"])
    def test_import_when_document_unusable_then_raises_document_error(self, source):
        with pytest.raises(DocumentError) as exc_info:
            import_questions(source)
        assert "could not be read" in str(exc_info.value)

    def test_import_when_content_type_missing_then_notice(self):
        question = TF_QUESTION.replace('<CONTENT TYPE="text/plain">The sky', "<CONTENT>The sky")
        result = import_questions(wrap_qml(question))
        assert result.notices == [
            "Notice: no content type set in question header for Sky colour. Defaulting to HTML"
        ]
        assert result.diagnostics.summary()["notice"] == 1

    def test_import_when_template_variables_then_substituted(self):
        question = TF_QUESTION.replace("The sky is blue.", "The sky over %CITY% is blue.")
        config = ImportConfig(variables=TemplateVariables({"%CITY%": "Paris"}))
        result = import_questions(wrap_qml(question), config)
        assert result.imported[0].question_text == "The sky over Paris is blue."
