from __future__ import annotations

from collections.abc import Callable

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

"""Fuzzy name similarity.

The 90-point threshold is calibrated against token-set ratio: both strings are
tokenized (case/punctuation folded), unique tokens are sorted and the
intersection / remainders are compared. That makes the score tolerant of word
order and of one name being a subset of the other ("John A Smith" vs
"Smith, John").
"""

__all__ = [
    "SimilarityFn",
    "token_set_similarity",
]

SimilarityFn = Callable[[str, str], int]


def token_set_similarity(a: str, b: str) -> int:
    """Token-set ratio rounded half-up to an integer in 0..100."""
    if not a or not b:
        return 0
    score = fuzz.token_set_ratio(a, b, processor=default_process)
    return int(score + 0.5)
