"""
Serialization Utilities

Provides to/from JSON utilities for converted question records.

- `serialize_*` and `deserialize_*` functions wrap the models' own
  `to_dict()` / `from_dict()`
- Records carry a schema_version and are validated before
  deserialization
- One record per line (JSONL), UTF-8, no ASCII escaping
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from ..models.questions import QuestionModel, question_from_dict
from ..schemas.validator import RECORD_SCHEMA_VERSION, ValidationError, validate_record


# ─────────────────────────────────────────────────────────────────────────────
# Question Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_question(question: QuestionModel) -> dict[str, Any]:
    """
    Serialize a question to a record dictionary.

    The output can be written to JSON and will pass schema validation
    (UnknownQuestion records excepted; those are never stored).

    Args:
        question: Converted question

    Returns:
        Dictionary with schema_version first, then the model fields
    """
    record: dict[str, Any] = {"schema_version": RECORD_SCHEMA_VERSION}
    record.update(question.to_dict())
    return record


def deserialize_question(data: dict[str, Any], *, validate: bool = True) -> QuestionModel:
    """
    Deserialize a question from a record dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the schema first

    Returns:
        QuestionModel variant named by the record's kind

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If the kind is unknown
    """
    if validate:
        validate_record(data, strict=True)
    payload = {k: v for k, v in data.items() if k != "schema_version"}
    return question_from_dict(payload)


# ─────────────────────────────────────────────────────────────────────────────
# JSONL files
# ─────────────────────────────────────────────────────────────────────────────

def load_question_records_jsonl(path: Path) -> list[dict[str, Any]]:
    """
    Load raw records from a JSONL file.

    Blank lines are skipped.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If a line is not a JSON object
    """
    if not path.exists():
        raise FileNotFoundError(f"Questions file not found: {path}")

    records = []
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValidationError(
                    f"Invalid JSON on line {line_number}: {exc.msg}",
                    path=f"line {line_number}",
                ) from exc
            if not isinstance(record, dict):
                raise ValidationError(
                    f"Line {line_number} is not a JSON object",
                    path=f"line {line_number}",
                )
            records.append(record)
    return records


def load_questions_jsonl(path: Path, *, validate: bool = True) -> list[QuestionModel]:
    """Load and deserialize every record of a JSONL file."""
    return [
        deserialize_question(record, validate=validate)
        for record in load_question_records_jsonl(path)
    ]


def save_questions_jsonl(questions: Iterable[QuestionModel], path: Path) -> None:
    """
    Save questions to a JSONL file, replacing its contents.

    Args:
        questions: Converted questions to save
        path: Output path
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        for question in questions:
            data = serialize_question(question)
            f.write(json.dumps(data, ensure_ascii=False))
            f.write("\n")
