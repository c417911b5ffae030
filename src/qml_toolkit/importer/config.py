"""
Module: importer.config

Purpose:
    Configuration for an import run. ImportConfig is immutable and validated
    on construction; TemplateVariables is the read-only substitution map
    applied verbatim to raw content before sanitizing. Both are built once
    and passed explicitly to every question importer.

Key Classes:
    - TemplateVariables: Read-only key -> replacement mapping
    - ImportConfig: Settings for one import run

Dependencies:
    - dataclasses (std)
    - json (std)

Used By:
    - importer.pipeline
    - importer.question_types
    - cli
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Optional

from .sanitizer import SanitizeProfile

logger = logging.getLogger(__name__)


class TemplateVariables(Mapping):
    """
    Read-only substitution map.

    Keys are replaced verbatim (no delimiters are added), longest key first
    so that overlapping keys substitute deterministically.

    Example:
        >>> tv = TemplateVariables({"%SERVER%": "https://lms.example"})
        >>> tv.apply('<img src="%SERVER%/a.png">')
        '<img src="https://lms.example/a.png">'
    """

    def __init__(self, values: Optional[Mapping] = None):
        cleaned: Dict[str, str] = {}
        for key, value in (values or {}).items():
            if not isinstance(key, str) or not key:
                raise ValueError(f"Template variable keys must be non-empty strings: {key!r}")
            cleaned[key] = "" if value is None else str(value)
        self._values = MappingProxyType(cleaned)
        self._order = sorted(cleaned, key=len, reverse=True)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def apply(self, text: str) -> str:
        """Substitute every key in text."""
        if not text or not self._values:
            return text
        for key in self._order:
            if key in text:
                text = text.replace(key, self._values[key])
        return text

    @classmethod
    def from_json(cls, path: Path) -> TemplateVariables:
        """
        Load a flat JSON object of substitutions.

        Raises:
            FileNotFoundError: If path doesn't exist
            ValueError: If the file is not a JSON object
        """
        if not path.exists():
            raise FileNotFoundError(f"Template variables file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Template variables must be a JSON object: {path}")
        logger.info("Loaded %d template variable(s) from %s", len(data), path)
        return cls(data)


@dataclass(frozen=True)
class ImportConfig:
    """
    Configuration for importing QML questions (immutable).

    Attributes:
        language: Message catalog language code
        variables: Template-variable substitutions
        default_profile: Profile for content with no TYPE attribute
        answer_profile: Profile for choice and option texts
        workers: Questions converted concurrently (1 = sequential)
        emit_categories: Emit a category marker when TOPIC changes
        strict_validation: Validate records against the JSON schema on write
        essay_field_lines: Response field height for essay questions

    Example:
        >>> config = ImportConfig(language="en", workers=4)
    """

    language: str = "en"
    variables: TemplateVariables = field(default_factory=TemplateVariables)
    default_profile: SanitizeProfile = SanitizeProfile.RICH_HTML
    answer_profile: SanitizeProfile = SanitizeProfile.PLAIN_TEXT
    workers: int = 1
    emit_categories: bool = True
    strict_validation: bool = True
    essay_field_lines: int = 15

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.language or not self.language.replace("_", "").isalpha():
            raise ValueError(f"language must be a code like 'en': {self.language!r}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1: {self.workers}")
        if self.essay_field_lines < 1:
            raise ValueError(f"essay_field_lines must be positive: {self.essay_field_lines}")
