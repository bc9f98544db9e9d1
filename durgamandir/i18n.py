"""English / Hindi lookup for the site.

Catalogues live in ``translations/<lang>.json`` as nested objects; keys are
dotted paths (``nav.home``). A missing Hindi entry falls back to English, a
missing English entry to the key itself.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("en", "hi")
DEFAULT_LANGUAGE = "en"
LANGUAGE_SESSION_KEY = "durgamaa_lang"
LANGUAGE_COOKIE_NAME = "durgamaa_lang"
CATALOG_DIR = Path(__file__).resolve().parent / "translations"


@lru_cache(maxsize=None)
def load_catalog(lang: str) -> dict:
    path = CATALOG_DIR / f"{lang}.json"
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError:
        logger.warning("Translation catalogue missing: %s", path)
        return {}


def _lookup(catalog: dict, key: str):
    node = catalog
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def normalize_language(value):
    code = (value or "").strip().lower().replace("_", "-").split("-")[0]
    return code if code in SUPPORTED_LANGUAGES else None


def translate(key: str, lang: str = DEFAULT_LANGUAGE) -> str:
    lang = normalize_language(lang) or DEFAULT_LANGUAGE
    value = _lookup(load_catalog(lang), key)
    if value is None and lang != DEFAULT_LANGUAGE:
        value = _lookup(load_catalog(DEFAULT_LANGUAGE), key)
    return value if value is not None else key


def language_from_accept_header(header: str):
    for part in (header or "").split(","):
        code = normalize_language(part.split(";")[0])
        if code:
            return code
    return None


def language_from_request(request) -> str:
    session = getattr(request, "session", None)
    stored = session.get(LANGUAGE_SESSION_KEY) if session is not None else None
    return (
        normalize_language(stored)
        or normalize_language(request.COOKIES.get(LANGUAGE_COOKIE_NAME))
        or language_from_accept_header(request.META.get("HTTP_ACCEPT_LANGUAGE", ""))
        or DEFAULT_LANGUAGE
    )


def other_language(lang: str) -> str:
    return "en" if lang == "hi" else "hi"


def localized(record, field: str, lang: str) -> str:
    """Value of a bilingual field in ``lang``, else in the other language.

    Hindi values use the ``<field>Hi`` key next to the English ``<field>``.
    """
    if not isinstance(record, dict):
        return ""
    en = record.get(field)
    hi = record.get(f"{field}Hi")
    first, second = (hi, en) if lang == "hi" else (en, hi)
    for value in (first, second):
        if isinstance(value, str) and value.strip():
            return value
    return ""
