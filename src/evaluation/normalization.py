"""
Text normalization for answer comparison.

Both the learner answer and the expected answer go through the same steps:
- lower-case and unify typographic apostrophes
- expand English contractions (I'm -> i am, can't -> cannot)
- strip sentence punctuation and quotes
- collapse whitespace

A normalized string normalizes to itself.
"""

from __future__ import annotations

import re

# Contractions expanded before punctuation is stripped, so "I'm" and "I am"
# compare equal.
CONTRACTIONS: dict[str, str] = {
    "i'm": "i am",
    "you're": "you are",
    "he's": "he is",
    "she's": "she is",
    "it's": "it is",
    "we're": "we are",
    "they're": "they are",
    "don't": "do not",
    "doesn't": "does not",
    "didn't": "did not",
    "won't": "will not",
    "can't": "cannot",
    "couldn't": "could not",
    "wouldn't": "would not",
    "shouldn't": "should not",
    "haven't": "have not",
    "hasn't": "has not",
    "hadn't": "had not",
    "isn't": "is not",
    "aren't": "are not",
    "wasn't": "was not",
    "weren't": "were not",
    "let's": "let us",
    "that's": "that is",
    "what's": "what is",
    "there's": "there is",
    "here's": "here is",
    "who's": "who is",
    "i've": "i have",
    "you've": "you have",
    "we've": "we have",
    "they've": "they have",
    "i'd": "i would",
    "you'd": "you would",
    "he'd": "he would",
    "she'd": "she would",
    "we'd": "we would",
    "they'd": "they would",
    "i'll": "i will",
    "you'll": "you will",
    "he'll": "he will",
    "she'll": "she will",
    "we'll": "we will",
    "they'll": "they will",
}

# British spelling -> American spelling, applied as substring replacement so
# inflected forms (colours, favourites) are covered too.
BRITISH_TO_AMERICAN: tuple[tuple[str, str], ...] = (
    ("colour", "color"),
    ("favourite", "favorite"),
    ("travelling", "traveling"),
    ("centre", "center"),
    ("theatre", "theater"),
    ("realise", "realize"),
    ("organise", "organize"),
    ("grey", "gray"),
    ("programme", "program"),
    ("behaviour", "behavior"),
    ("neighbour", "neighbor"),
)

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})
_CONTRACTION_RE = re.compile(
    r"\b("
    + "|".join(re.escape(c) for c in sorted(CONTRACTIONS, key=len, reverse=True))
    + r")\b"
)
_PUNCTUATION_RE = re.compile(r"[.,!?;:'\"“”]")
_WHITESPACE_RE = re.compile(r"\s+")


def expand_contractions(text: str) -> str:
    """Expand known contractions in lower-cased text."""
    return _CONTRACTION_RE.sub(lambda m: CONTRACTIONS[m.group(1)], text)


def normalize_answer(text: str | None) -> str:
    """Normalize an answer for comparison. None is treated as empty."""
    if not text:
        return ""
    normalized = text.lower().translate(_APOSTROPHES)
    normalized = expand_contractions(normalized)
    normalized = _PUNCTUATION_RE.sub("", normalized)
    return _WHITESPACE_RE.sub(" ", normalized).strip()


def americanize(text: str) -> str:
    """Replace British spellings with their American equivalents."""
    for british, american in BRITISH_TO_AMERICAN:
        text = text.replace(british, american)
    return text


def tokenize(text: str) -> list[str]:
    """Split normalized text into words."""
    return text.split()
