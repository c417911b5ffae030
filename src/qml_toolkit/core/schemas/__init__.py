"""
Schemas Package

JSON schema definition and validation of converted question records.
"""

from .validator import (
    validate_record,
    ValidationError,
    RECORD_SCHEMA_VERSION,
)

__all__ = [
    "validate_record",
    "ValidationError",
    "RECORD_SCHEMA_VERSION",
]
