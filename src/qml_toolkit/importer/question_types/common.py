"""
Module: importer.question_types.common

Purpose:
    Reads the parts every question kind shares out of a QUESTION node:
    outcomes, choices, ANSWER text fragments and the common header fields
    (name, question text and format, general feedback). Also holds the
    per-question ConversionContext passed to each kind importer.

Key Classes:
    - ConversionContext: Config, sanitizer, messages and notices for one question
    - SourceQuestion: Typed view of one QUESTION node
    - AnswerSegment: One CONTENT fragment or CHOICE blank of an ANSWER

Key Functions:
    - read_source_question(): QmlNode -> SourceQuestion
    - build_header(): Common QuestionModel keyword arguments

Dependencies:
    - qml_toolkit.importer.reader
    - qml_toolkit.importer.sanitizer
    - qml_toolkit.importer.config
    - qml_toolkit.importer.messages
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from qml_toolkit.core.models.outcomes import Choice, Outcome
from qml_toolkit.core.models.questions import TextFormat

from ..config import ImportConfig
from ..messages import MessageCatalog
from ..reader import QmlNode
from ..sanitizer import ContentSanitizer, SanitizeProfile

logger = logging.getLogger(__name__)

BLANK_MARKER = "_____"
NAME_LENGTH = 60

_CONTENT_PROFILES = {
    "text/plain": (SanitizeProfile.PLAIN_TEXT, TextFormat.PLAIN),
    "text/html": (SanitizeProfile.RICH_HTML, TextFormat.HTML),
}


@dataclass
class ConversionContext:
    """
    Everything a kind importer needs besides the question itself.

    One context is created per question, so `notices` is never shared
    between concurrently converted questions.
    """

    config: ImportConfig
    messages: MessageCatalog
    sanitizer: ContentSanitizer = field(default_factory=ContentSanitizer)
    notices: List[str] = field(default_factory=list)

    def notice(self, key: str, **args: Any) -> None:
        message = self.messages.get(key, **args)
        logger.info(message)
        self.notices.append(message)

    def clean(self, raw: str, profile: SanitizeProfile) -> str:
        """Apply template variables, then sanitize."""
        return self.sanitizer.clean(self.config.variables.apply(raw), profile)

    def clean_content(self, node: Optional[QmlNode]) -> Tuple[str, TextFormat]:
        """Clean a CONTENT node according to its TYPE attribute."""
        if node is None:
            return "", TextFormat.HTML
        profile, fmt = _CONTENT_PROFILES.get(
            node.get("TYPE").strip().lower(),
            (self.config.default_profile, TextFormat.HTML),
        )
        return self.clean(node.markup, profile).strip(), fmt

    def plain(self, raw: str) -> str:
        return self.clean(raw, self.config.answer_profile).strip()


@dataclass(frozen=True)
class AnswerSegment:
    """CONTENT fragment (choice is None) or CHOICE blank of an ANSWER."""

    text: str
    choice: Optional[Choice] = None

    @property
    def is_blank(self) -> bool:
        return self.choice is not None


@dataclass(frozen=True)
class SourceQuestion:
    """
    Typed view of one QUESTION node.

    Attributes:
        node: The QUESTION node
        position: 1-based position in the document
        qtype: ANSWER/@QTYPE as written
        outcomes: OUTCOME nodes in document order
        choices: CHOICE nodes in document order
        segments: ANSWER children (fragments and blanks) in order
    """

    node: QmlNode
    position: int
    qtype: str
    outcomes: Tuple[Outcome, ...]
    choices: Tuple[Choice, ...]
    segments: Tuple[AnswerSegment, ...] = ()

    @property
    def id(self) -> str:
        return self.node.get("ID")

    @property
    def description(self) -> str:
        return self.node.get("DESCRIPTION").strip()

    @property
    def topic(self) -> str:
        return self.node.get("TOPIC").strip()

    @property
    def answer(self) -> Optional[QmlNode]:
        return self.node.child("ANSWER")

    @property
    def display_name(self) -> str:
        """Name used in user-facing messages."""
        return self.description or self.id or f"#{self.position}"

    @property
    def shuffle(self) -> bool:
        answer = self.answer
        return answer is not None and answer.get("SHUFFLE").strip().upper() == "Y"

    @property
    def option_pool(self) -> Tuple[Choice, ...]:
        """De-duplicated OPTION texts of every choice, as choices."""
        seen: Dict[str, None] = {}
        for choice in self.choices:
            for option in choice.options:
                seen.setdefault(option, None)
        return tuple(Choice(i, text) for i, text in enumerate(seen))


# ─────────────────────────────────────────────────────────────────────────────
# Reading
# ─────────────────────────────────────────────────────────────────────────────

def parse_score(node: QmlNode) -> int:
    """
    Score of an OUTCOME: SCORE when present, else ADD, else 0.

    Non-integer values are rounded; unreadable values score 0.
    """
    for attribute in ("SCORE", "ADD"):
        raw = node.get(attribute).strip()
        if not raw:
            continue
        try:
            return int(round(float(raw)))
        except ValueError:
            logger.warning("Ignoring non-numeric %s=%r on outcome %r", attribute, raw, node.get("ID"))
    return 0


def read_outcomes(node: QmlNode, ctx: ConversionContext) -> Tuple[Outcome, ...]:
    outcomes = []
    for outcome_node in node.children_named("OUTCOME"):
        feedback, _ = ctx.clean_content(outcome_node.child("CONTENT"))
        outcomes.append(
            Outcome(
                id=outcome_node.get("ID").strip(),
                score=parse_score(outcome_node),
                condition=outcome_node.child_text("CONDITION").strip(),
                feedback=feedback,
            )
        )
    return tuple(outcomes)


def read_answer(node: QmlNode, ctx: ConversionContext) -> Tuple[Tuple[Choice, ...], Tuple[AnswerSegment, ...]]:
    """Choices and ordered segments of the ANSWER node."""
    answer = node.child("ANSWER")
    if answer is None:
        return (), ()

    choices: List[Choice] = []
    segments: List[AnswerSegment] = []
    for child in answer.children:
        if child.name == "CONTENT":
            text, _ = ctx.clean_content(child)
            segments.append(AnswerSegment(text=text))
        elif child.name == "CHOICE":
            content_node = child.child("CONTENT")
            content = ctx.plain(content_node.markup) if content_node is not None else ""
            options = tuple(ctx.plain(o.markup) for o in child.children_named("OPTION"))
            choice = Choice(index=len(choices), content=content, options=options)
            choices.append(choice)
            segments.append(AnswerSegment(text=content, choice=choice))
    return tuple(choices), tuple(segments)


def read_source_question(node: QmlNode, position: int, ctx: ConversionContext) -> SourceQuestion:
    """Read a QUESTION node into a SourceQuestion."""
    answer = node.child("ANSWER")
    choices, segments = read_answer(node, ctx)
    return SourceQuestion(
        node=node,
        position=position,
        qtype=answer.get("QTYPE").strip() if answer is not None else "",
        outcomes=read_outcomes(node, ctx),
        choices=choices,
        segments=segments,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Headers
# ─────────────────────────────────────────────────────────────────────────────

def derive_name(description: str, plain_text: str, fallback: str) -> str:
    """DESCRIPTION, else the start of the question text, else fallback."""
    if description:
        return description
    if plain_text:
        if len(plain_text) <= NAME_LENGTH:
            return plain_text
        return plain_text[:NAME_LENGTH].rstrip() + "..."
    return fallback


def build_header(source: SourceQuestion, ctx: ConversionContext) -> Dict[str, Any]:
    """
    Common QuestionModel keyword arguments.

    The question CONTENT's TYPE decides the text format; a missing TYPE
    defaults to HTML with a notice. Without a CONTENT node the DESCRIPTION
    is used as the question text.
    """
    content = source.node.child("CONTENT")
    if content is not None:
        if not content.get("TYPE").strip():
            ctx.notice("contenttypenotset", a=source.display_name)
        question_text, text_format = ctx.clean_content(content)
    else:
        question_text, text_format = source.description, TextFormat.HTML

    general = next((o for o in source.outcomes if o.is_always), None)
    return {
        "name": derive_name(source.description, ctx.plain(question_text), source.id or f"Question {source.position}"),
        "question_text": question_text,
        "question_text_format": text_format,
        "general_feedback": general.feedback if general else "",
        "source_id": source.id,
    }


def fragments_text(source: SourceQuestion, blank: str = BLANK_MARKER) -> str:
    """ANSWER fragments joined, with each CHOICE rendered as a blank."""
    parts = []
    for segment in source.segments:
        if segment.is_blank:
            if "__" in segment.text:
                parts.append(segment.text)
            else:
                parts.append(join_text(segment.text, blank))
        elif segment.text:
            parts.append(segment.text)
    return " ".join(p.strip() for p in parts if p.strip())


def join_text(*parts: str) -> str:
    return " ".join(p.strip() for p in parts if p and p.strip())
