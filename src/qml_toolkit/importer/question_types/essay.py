"""
Module: importer.question_types.essay

Purpose:
    Imports ESSAY and EXPLAIN questions as free-text essays. There is nothing
    to score automatically; the first outcome's feedback becomes the
    grader information.
"""

from __future__ import annotations

from qml_toolkit.core.models.questions import EssayQuestion

from .common import ConversionContext, SourceQuestion, build_header

RESPONSE_FORMAT = "editor"


def import_essay(source: SourceQuestion, ctx: ConversionContext) -> EssayQuestion:
    grader = next((o for o in source.outcomes if not o.is_always), None)
    return EssayQuestion(
        **build_header(source, ctx),
        response_format=RESPONSE_FORMAT,
        response_field_lines=ctx.config.essay_field_lines,
        grader_info=grader.feedback if grader else "",
    )
