"""
QML Importer Package

Reads Questionmark QML documents and converts each QUESTION into a
question-bank model.

Usage:
    from qml_toolkit.importer import ImportConfig, import_questions, JsonlQuestionBank

    result = import_questions(Path("quiz.qml"), ImportConfig(), sink=JsonlQuestionBank("bank.jsonl"))
"""

from .config import ImportConfig, TemplateVariables
from .diagnostics import ImportDiagnostics, ImportIssue
from .messages import MessageCatalog
from .pipeline import ImportResult, import_questions
from .reader import EmptyDocument, QmlDocument, QmlNode, read_document
from .sanitizer import ContentSanitizer, SanitizeProfile
from .sink import JsonlQuestionBank, MemoryQuestionBank, QuestionBankSink

__all__ = [
    "ContentSanitizer",
    "EmptyDocument",
    "ImportConfig",
    "ImportDiagnostics",
    "ImportIssue",
    "ImportResult",
    "JsonlQuestionBank",
    "MemoryQuestionBank",
    "MessageCatalog",
    "QmlDocument",
    "QmlNode",
    "QuestionBankSink",
    "SanitizeProfile",
    "TemplateVariables",
    "import_questions",
    "read_document",
]
