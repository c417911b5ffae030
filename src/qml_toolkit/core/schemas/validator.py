"""
Schema Validation Utilities

Validates converted question records before they reach a question bank.

Two levels:
- Basic checks (always): required header fields, known kind tag and
  schema version
- Full JSON Schema validation (strict): every violation is collected
  into ValidationError.errors, not just the first one
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


RECORD_SCHEMA_VERSION = 1

_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_record(data: dict[str, Any], *, strict: bool = True) -> None:
    """
    Validate a question record against the record schema.

    Args:
        data: Record produced by serialize_question()
        strict: If True, run full jsonschema validation after basic checks

    Raises:
        ValidationError: If the record is invalid
    """
    required = ["schema_version", "kind", "name"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing]
        )

    version = data.get("schema_version")
    if version != RECORD_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported record schema version: {version} (expected {RECORD_SCHEMA_VERSION})",
            path="schema_version"
        )

    if data.get("kind") == "unknown":
        raise ValidationError(
            "Unknown questions cannot be stored",
            path="kind"
        )

    if not strict:
        return

    schema = _load_schema("question_record")
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors]
        )
