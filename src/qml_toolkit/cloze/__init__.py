"""
Module: cloze

Purpose:
    Embedded-answer (Cloze) markup: the encoder writes `{w:KIND:~=a~b}`
    blocks into question text and the extractor decodes them back into an
    EmbeddedQuestion.
"""

from .encoder import encode_block, encode_question, encode_stem, escape_cloze
from .extractor import answer_tuples, extract_embedded, unescape_cloze

__all__ = [
    "encode_block",
    "encode_question",
    "encode_stem",
    "escape_cloze",
    "answer_tuples",
    "extract_embedded",
    "unescape_cloze",
]
