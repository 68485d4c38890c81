from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Lookup models: quick SSID lookups with optional name verification."""

__all__ = [
    "LookupStatus",
    "LookupItem",
    "LookupResult",
]


class LookupStatus(Enum):
    MATCH = "Match"
    MISMATCH = "Mismatch"
    NOT_FOUND = "Not Found"
    LOOKUP_SUCCESS = "Lookup Success"


@dataclass(frozen=True)
class LookupItem:
    ssid: str
    name_to_verify: str | None = None


@dataclass(frozen=True)
class LookupResult:
    ssid: str
    name_to_verify: str  # "N/A" when no name was given
    correct_name: str  # "---" when not found / source has no name
    status: LookupStatus
    similarity: int | None = None
