"""
Utils Package

Serialization of converted questions to and from JSONL records.
"""

from .serialization import (
    serialize_question,
    deserialize_question,
    load_question_records_jsonl,
    load_questions_jsonl,
    save_questions_jsonl,
)

__all__ = [
    "serialize_question",
    "deserialize_question",
    "load_question_records_jsonl",
    "load_questions_jsonl",
    "save_questions_jsonl",
]
