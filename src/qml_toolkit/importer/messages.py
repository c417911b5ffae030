"""
Module: importer.messages

Purpose:
    Localized message lookup for notices and errors shown to the user.
    Catalogs are flat JSON objects under `qml_toolkit/resources/lang/`.

Key Classes:
    - MessageCatalog: get(key, a=None, b=None, ...) -> display string

Dependencies:
    - importlib.resources (std)
    - json (std)
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


@lru_cache(maxsize=None)
def _load_catalog(language: str) -> Dict[str, str]:
    path = resources.files("qml_toolkit.resources.lang").joinpath(f"{language}.json")
    if not path.is_file():
        raise FileNotFoundError(f"No message catalog for language {language!r}")
    return json.loads(path.read_text(encoding="utf-8"))


class MessageCatalog:
    """
    Message strings for one language, falling back to English per key.

    Placeholders are `{a}`, `{b}`, ... filled from keyword arguments.
    Unknown keys render as `[[key]]` so a missing string is visible.

    Example:
        >>> MessageCatalog("en").get("unknownquestiontype", a="HOT")
        'Question type HOT is not supported by QML import'
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = language
        try:
            self._strings = _load_catalog(language)
        except FileNotFoundError:
            logger.warning("No message catalog for %r, using %r", language, DEFAULT_LANGUAGE)
            self.language = DEFAULT_LANGUAGE
            self._strings = _load_catalog(DEFAULT_LANGUAGE)
        self._fallback = _load_catalog(DEFAULT_LANGUAGE)

    def has(self, key: str) -> bool:
        return key in self._strings or key in self._fallback

    def get(self, key: str, **args: Any) -> str:
        template = self._strings.get(key, self._fallback.get(key))
        if template is None:
            logger.debug("Missing message key %r", key)
            return f"[[{key}]]"
        try:
            return template.format(**{k: "" if v is None else v for k, v in args.items()})
        except (KeyError, IndexError):
            logger.warning("Message %r is missing arguments: %s", key, sorted(args))
            return template
