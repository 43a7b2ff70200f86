"""UI string lookup for TextCut.

English strings are the keys themselves; other languages live in
``textcut.utils.lang.<code>`` modules exposing a ``STRINGS`` table.
"""

from __future__ import annotations

import importlib
import logging

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
# Languages with a string table besides English
TRANSLATIONS = ("ko",)

_strings: dict[str, str] = {}
_language: str = DEFAULT_LANGUAGE


def init_language(lang_code: str = DEFAULT_LANGUAGE) -> None:
    """Switch the UI language. Unknown codes fall back to English."""
    global _strings, _language
    if lang_code not in TRANSLATIONS:
        if lang_code != DEFAULT_LANGUAGE:
            logger.warning(f"No translation for UI language {lang_code!r}, using English")
        _strings, _language = {}, DEFAULT_LANGUAGE
        return
    module = importlib.import_module(f"textcut.utils.lang.{lang_code}")
    _strings, _language = module.STRINGS, lang_code


def tr(key: str, **fields: object) -> str:
    """Translated *key*, with ``{name}`` style *fields* filled in."""
    text = _strings.get(key, key)
    return text.format(**fields) if fields else text


def current_language() -> str:
    return _language
