"""
Module: importer.sanitizer

Purpose:
    Cleans free-text fields before they enter a QuestionModel. Three
    profiles: plain text (markup stripped, entities decoded, whitespace
    collapsed), rich HTML (markup kept, active content removed) and raw.

Key Classes:
    - SanitizeProfile: Cleaning profile
    - ContentSanitizer: Applies a profile to text

Dependencies:
    - html, html.parser (std)

Used By:
    - importer.question_types
"""

from __future__ import annotations

import html
import logging
import re
from enum import Enum
from html.parser import HTMLParser
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")

# Elements dropped together with their content in rich HTML
_DROP_ELEMENTS = frozenset({"script", "style", "iframe", "object", "embed", "frame", "frameset"})
_VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "hr", "img", "input", "link", "meta", "param", "source", "wbr",
})
_URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction", "xlink:href"})
_BLOCK_ELEMENTS = frozenset({"p", "div", "br", "li", "tr", "h1", "h2", "h3", "h4", "h5", "h6"})


class SanitizeProfile(str, Enum):
    """How a free-text field is cleaned."""
    PLAIN_TEXT = "plain-text"
    RICH_HTML = "rich-html"
    RAW = "raw"

    def __str__(self) -> str:
        return self.value


class _PlainTextParser(HTMLParser):
    """Collects text content; block elements become spaces."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: List[str] = []
        self._skip = 0

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag in _DROP_ELEMENTS:
            self._skip += 1
        elif tag in _BLOCK_ELEMENTS:
            self.parts.append(" ")

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROP_ELEMENTS and self._skip:
            self._skip -= 1
        elif tag in _BLOCK_ELEMENTS:
            self.parts.append(" ")

    def handle_data(self, data: str) -> None:
        if not self._skip:
            self.parts.append(data)


class _RichHtmlParser(HTMLParser):
    """Re-emits markup without active content."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self.parts: List[str] = []
        self._skip = 0

    @staticmethod
    def _safe_attrs(attrs: List[Tuple[str, Optional[str]]]) -> str:
        kept = []
        for name, value in attrs:
            if name.startswith("on"):
                continue
            if value is None:
                kept.append(f" {name}")
                continue
            if name in _URL_ATTRIBUTES and value.strip().lower().startswith(("javascript:", "vbscript:")):
                continue
            kept.append(f' {name}="{html.escape(value, quote=True)}"')
        return "".join(kept)

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag in _DROP_ELEMENTS:
            self._skip += 1
            return
        if not self._skip:
            self.parts.append(f"<{tag}{self._safe_attrs(attrs)}>")

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag in _DROP_ELEMENTS or self._skip:
            return
        self.parts.append(f"<{tag}{self._safe_attrs(attrs)} />")

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROP_ELEMENTS:
            if self._skip:
                self._skip -= 1
            return
        if not self._skip and tag not in _VOID_ELEMENTS:
            self.parts.append(f"</{tag}>")

    def handle_data(self, data: str) -> None:
        if not self._skip:
            self.parts.append(data)

    def handle_entityref(self, name: str) -> None:
        if not self._skip:
            self.parts.append(f"&{name};")

    def handle_charref(self, name: str) -> None:
        if not self._skip:
            self.parts.append(f"&#{name};")


class ContentSanitizer:
    """
    Cleans raw text according to a profile.

    Example:
        >>> ContentSanitizer().clean("<p>Paris &amp; Lyon</p>", SanitizeProfile.PLAIN_TEXT)
        'Paris & Lyon'
    """

    def clean(self, text: str, profile: SanitizeProfile = SanitizeProfile.RICH_HTML) -> str:
        if not text:
            return ""
        if profile is SanitizeProfile.RAW:
            return text
        if profile is SanitizeProfile.PLAIN_TEXT:
            return self.to_plain_text(text)
        return self.to_rich_html(text)

    def to_plain_text(self, text: str) -> str:
        parser = _PlainTextParser()
        parser.feed(text)
        parser.close()
        return _WS_RE.sub(" ", "".join(parser.parts)).strip()

    def to_rich_html(self, text: str) -> str:
        parser = _RichHtmlParser()
        parser.feed(text)
        parser.close()
        return "".join(parser.parts).strip()
