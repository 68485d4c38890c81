from __future__ import annotations

import math
from typing import Any

"""Scalar normalization used for every identifier / name comparison."""

__all__ = [
    "normalize",
    "is_missing",
]


def is_missing(value: Any) -> bool:
    """True for None and float NaN (pandas empty cell)."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def normalize(value: Any) -> str:
    """Canonicalize a cell value: stringify, trim, lowercase.

    Missing values become "". Integral floats lose their ".0" so that a
    spreadsheet cell read as 12345.0 compares equal to the text "12345".
    """
    if is_missing(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip().lower()
