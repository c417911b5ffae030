"""
Module: interpreter

Purpose:
    Parser for the QML condition-expression language.

Key Functions:
    - parse_condition(): CONDITION text -> ConditionExpression
    - is_bare_reference(): Detect lone `"n"` references
"""

from .parser import is_bare_reference, parse_condition, tokenize

__all__ = [
    "is_bare_reference",
    "parse_condition",
    "tokenize",
]
