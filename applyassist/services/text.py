import re
from functools import lru_cache
from typing import Iterable


def normalize_space(value: str) -> str:
    return re.sub(r"\s+", " ", value or "").strip()


def norm(value: str) -> str:
    return normalize_space(value).lower()


@lru_cache(maxsize=512)
def _term_pattern(term: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(term.lower()) + r"(?![a-z0-9])")


def mentions(text: str, term: str) -> bool:
    """Whole-word, case-insensitive containment ("ny" does not match "company")."""
    if not term or not text:
        return False
    return _term_pattern(term).search(text.lower()) is not None


def first_mention(text: str, terms: Iterable[str]) -> str | None:
    for term in terms:
        if mentions(text, term):
            return term
    return None


def mentions_any(text: str, terms: Iterable[str]) -> bool:
    return first_mention(text, terms) is not None


def contains_any(text: str, phrases: Iterable[str]) -> bool:
    lowered = (text or "").lower()
    return any(phrase.lower() in lowered for phrase in phrases if phrase)
