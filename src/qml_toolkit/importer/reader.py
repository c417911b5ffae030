"""
Module: importer.reader

Purpose:
    Reads a QML source document into a navigable tree of QmlNode objects
    (name, attributes, ordered children, inline text). Parsing uses
    defusedxml so entity-expansion and external-entity payloads are refused.

Key Functions:
    - read_document(): bytes/str/path -> QmlDocument or EmptyDocument

Key Classes:
    - QmlNode: Immutable element node
    - QmlDocument: Root node plus question iteration
    - EmptyDocument: Explicit "nothing readable" result (never None)

Dependencies:
    - defusedxml: Hardened XML parsing

Used By:
    - importer.pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union
from xml.etree.ElementTree import Element, ParseError, tostring

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DefusedET

logger = logging.getLogger(__name__)

Source = Union[bytes, str, Path]


@dataclass(frozen=True)
class QmlNode:
    """
    One element of a QML document (immutable).

    Attributes:
        name: Element tag, e.g. "QUESTION", "OUTCOME"
        attributes: Attribute map
        children: Child elements in document order
        text: Text directly inside the element (before the first child)
        tail: Text after this element, inside the parent
        markup: Inner content with child elements kept as XML markup
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: Tuple["QmlNode", ...] = ()
    text: str = ""
    tail: str = ""
    markup: str = ""

    def get(self, key: str, default: str = "") -> str:
        return self.attributes.get(key, default)

    def child(self, name: str) -> Optional["QmlNode"]:
        """First child with this name, or None."""
        return next((c for c in self.children if c.name == name), None)

    def children_named(self, name: str) -> Tuple["QmlNode", ...]:
        return tuple(c for c in self.children if c.name == name)

    def child_text(self, name: str) -> str:
        node = self.child(name)
        return node.full_text if node else ""

    @property
    def full_text(self) -> str:
        """All text inside the element, children included."""
        parts = [self.text]
        for child in self.children:
            parts.append(child.full_text)
            parts.append(child.tail)
        return "".join(parts)

    def iter(self) -> Iterator["QmlNode"]:
        yield self
        for child in self.children:
            yield from child.iter()

    @classmethod
    def from_element(cls, element: Element) -> "QmlNode":
        return cls(
            name=element.tag,
            attributes=dict(element.attrib),
            children=tuple(cls.from_element(c) for c in element),
            text=element.text or "",
            tail=element.tail or "",
            markup=(element.text or "") + "".join(
                tostring(c, encoding="unicode") for c in element
            ),
        )


@dataclass(frozen=True)
class QmlDocument:
    """A successfully parsed QML document."""

    root: QmlNode
    source_name: str = ""

    @property
    def is_empty(self) -> bool:
        return False

    def questions(self) -> Tuple[QmlNode, ...]:
        """QUESTION nodes in document order (root may itself be a QUESTION)."""
        if self.root.name == "QUESTION":
            return (self.root,)
        return self.root.children_named("QUESTION")


@dataclass(frozen=True)
class EmptyDocument:
    """The source could not be read, or held no elements."""

    reason: str
    source_name: str = ""

    @property
    def is_empty(self) -> bool:
        return True

    def questions(self) -> Tuple[QmlNode, ...]:
        return ()


def _load_bytes(source: Source) -> Tuple[bytes, str]:
    if isinstance(source, Path):
        return source.read_bytes(), source.name
    if isinstance(source, str):
        return source.encode("utf-8"), "<string>"
    return bytes(source), "<bytes>"


def read_document(source: Source) -> Union[QmlDocument, EmptyDocument]:
    """
    Parse a QML document.

    Args:
        source: XML bytes, XML text, or a Path to a file

    Returns:
        QmlDocument, or EmptyDocument carrying the reason when the stream
        cannot be parsed or has no content

    Raises:
        FileNotFoundError: If a Path source does not exist
    """
    data, name = _load_bytes(source)
    if not data.strip():
        logger.warning("QML source %s is empty", name)
        return EmptyDocument("empty source", source_name=name)

    try:
        element = DefusedET.fromstring(data)
    except (ParseError, DefusedXmlException) as exc:
        logger.error("Could not parse QML source %s: %s", name, exc)
        return EmptyDocument(f"unparseable document: {exc}", source_name=name)

    root = QmlNode.from_element(element)
    if not root.children and not root.text.strip():
        return EmptyDocument("document has no content", source_name=name)

    logger.info("Read QML document %s with %d node(s)", name, sum(1 for _ in root.iter()))
    return QmlDocument(root=root, source_name=name)
