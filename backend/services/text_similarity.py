"""Shared string-similarity helpers used by every analyzer.

All fuzzy comparisons (skills, role titles, degree fields, criteria) go
through ``jaro_winkler`` so they score identically.
"""

import re

from rapidfuzz.distance import JaroWinkler

_WORD_RE = re.compile(r"[\w#+]+(?:[.'][\w#+]+)*", re.UNICODE)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

CONTEXT_WINDOW = 50


def jaro_winkler(a: str, b: str) -> float:
    """Jaro-Winkler similarity in [0, 1]; 1.0 means identical."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return float(JaroWinkler.normalized_similarity(a, b))


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens, keeping tech spellings like ``c#`` or ``node.js``."""
    return _WORD_RE.findall(text.lower())


def extract_context(text: str, term: str, window: int = CONTEXT_WINDOW) -> str:
    """Return the text around the first case-insensitive occurrence of ``term``."""
    if not term:
        return ""
    index = text.lower().find(term.lower())
    if index < 0:
        return ""
    return context_at(text, index, len(term), window)


def context_at(text: str, index: int, length: int, window: int = CONTEXT_WINDOW) -> str:
    """Return ``window`` characters either side of ``text[index:index + length]``."""
    start = max(0, index - window)
    end = min(len(text), index + length + window)
    return text[start:end]


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def best_token_similarity(term: str, tokens: list[str] | set[str]) -> float:
    """Highest ``jaro_winkler`` score between ``term`` and any token."""
    term = term.lower()
    best = 0.0
    for token in tokens:
        score = jaro_winkler(term, token)
        if score > best:
            best = score
            if best == 1.0:
                break
    return best
