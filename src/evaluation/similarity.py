"""
Levenshtein-based string similarity for typo tolerance.
"""

from __future__ import annotations


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning a into b."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Two-row dynamic programming over the shorter string
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j - 1] + cost,  # substitution
                    current[j - 1] + 1,  # insertion
                    previous[j] + 1,  # deletion
                )
            )
        previous = current

    return previous[-1]


def similarity(a: str, b: str) -> float:
    """
    Normalized similarity in [0, 1]: (max_len - distance) / max_len.

    Two empty strings are identical (1.0); one empty string against a
    non-empty one scores 0.0.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    longest = max(len(a), len(b))
    return (longest - levenshtein_distance(a, b)) / longest
