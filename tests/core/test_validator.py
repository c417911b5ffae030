"""
Unit Tests for Schema Validation

Tests for the record validator module.
"""

import pytest

from qml_toolkit.core.schemas.validator import (
    validate_record,
    ValidationError,
    RECORD_SCHEMA_VERSION,
)


class TestValidateRecord:
    """Tests for validate_record function."""

    @pytest.fixture
    def valid_record(self) -> dict:
        """Create a valid multichoice record for testing."""
        return {
            "schema_version": RECORD_SCHEMA_VERSION,
            "kind": "multichoice",
            "name": "Capital of France",
            "question_text": "<p>What is the capital of France?</p>",
            "question_text_format": 1,
            "answers": [
                {"text": "Paris", "fraction": 1.0, "feedback": "Well done"},
                {"text": "Berlin", "fraction": 0.0, "feedback": ""},
            ],
            "single": True,
        }

    def test_validate_when_valid_record_then_passes(self, valid_record):
        validate_record(valid_record)

    def test_validate_when_missing_name_then_raises_error(self, valid_record):
        del valid_record["name"]
        with pytest.raises(ValidationError, match="Missing required fields") as exc_info:
            validate_record(valid_record)
        assert "Missing field: name" in exc_info.value.errors

    def test_validate_when_wrong_version_then_raises_error(self, valid_record):
        valid_record["schema_version"] = 99
        with pytest.raises(ValidationError, match="Unsupported record schema version") as exc_info:
            validate_record(valid_record)
        assert exc_info.value.path == "schema_version"

    def test_validate_when_unknown_kind_then_raises_error(self, valid_record):
        valid_record["kind"] = "unknown"
        with pytest.raises(ValidationError, match="cannot be stored"):
            validate_record(valid_record, strict=False)

    def test_validate_when_fraction_out_of_range_then_reports_path(self, valid_record):
        valid_record["answers"][1]["fraction"] = -2
        with pytest.raises(ValidationError, match="Schema validation failed") as exc_info:
            validate_record(valid_record)
        assert exc_info.value.path == "answers.1.fraction"

    def test_validate_when_multichoice_without_answers_then_raises_error(self, valid_record):
        valid_record["answers"] = []
        with pytest.raises(ValidationError):
            validate_record(valid_record)

    def test_validate_when_not_strict_then_skips_schema(self, valid_record):
        valid_record["answers"] = []
        validate_record(valid_record, strict=False)

    def test_validate_when_several_violations_then_collects_all(self, valid_record):
        valid_record["name"] = ""
        valid_record["question_text_format"] = 7
        with pytest.raises(ValidationError) as exc_info:
            validate_record(valid_record)
        assert len(exc_info.value.errors) == 2

    def test_validate_when_multianswer_without_embedded_then_raises_error(self):
        record = {"schema_version": RECORD_SCHEMA_VERSION, "kind": "multianswer", "name": "Cloze"}
        with pytest.raises(ValidationError):
            validate_record(record)
