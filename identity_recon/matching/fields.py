from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from .normalize import is_missing, normalize

"""Tolerant field resolution over loosely-keyed entries.

Column labels differ from file to file ("SSID", "ssid", "Social Security ID",
"SSN", ...). A label is reduced in two stages before comparison:

1. lowercase and strip every non-alphanumeric character
2. fold known synonyms onto one token (e.g. "ssn" -> "socialsecurity")

This module is the only place that does fuzzy key lookup on an entry.
Resolution never raises: an absent field is returned as "".
"""

__all__ = [
    "Entry",
    "ResolvedIdentity",
    "SSID_FIELDS",
    "NIN_FIELDS",
    "FULL_NAME_FIELDS",
    "FIRST_NAME_FIELDS",
    "MIDDLE_NAME_FIELDS",
    "LAST_NAME_FIELDS",
    "normalize_key",
    "resolve_field",
    "resolve_full_name",
    "resolve_identity",
]

Entry = Mapping[str, Any]

SSID_FIELDS = ("SSID", "SSN", "Social Security ID", "SocialSecurity", "Social Security Number")
NIN_FIELDS = ("NIN", "National ID", "NationalID", "National Identification Number")
FULL_NAME_FIELDS = (
    "FULL NAME",
    "Name",
    "Beneficiary Name",
    "Customer Name",
    "Person Name",
)
FIRST_NAME_FIELDS = ("firstname", "first_name", "first", "given name")
MIDDLE_NAME_FIELDS = ("middlename", "middle_name", "middle")
LAST_NAME_FIELDS = ("lastname", "last_name", "last", "surname", "family name")

_NON_ALNUM = re.compile(r"[^a-z0-9]")

# 記号除去後のトークン -> 正規トークン
_KEY_FOLDS = {
    "fullname": "name",
    "beneficiaryname": "name",
    "customername": "name",
    "personname": "name",
    "nin": "nationalid",
    "nationalidentificationnumber": "nationalid",
    "nationalidnumber": "nationalid",
    "ninnumber": "nationalid",
    "ninno": "nationalid",
    "ssid": "socialsecurity",
    "ssn": "socialsecurity",
    "socialsecurityid": "socialsecurity",
    "socialsecuritynumber": "socialsecurity",
    "ssidno": "socialsecurity",
    "ssidnumber": "socialsecurity",
    "first": "firstname",
    "givenname": "firstname",
    "middle": "middlename",
    "last": "lastname",
    "surname": "lastname",
    "familyname": "lastname",
}


@lru_cache(maxsize=4096)
def normalize_key(label: Any) -> str:
    """Reduce a column label to its comparison token."""
    stripped = _NON_ALNUM.sub("", str(label).lower())
    return _KEY_FOLDS.get(stripped, stripped)


def resolve_field(entry: Entry, candidate_names: Iterable[str]) -> str:
    """Return the normalized value of the first matching key in `entry`.

    Keys are visited in the entry's own order; a key matches when its folded
    label equals the folded label of any candidate name. Keys holding a missing
    value (None / NaN) are skipped. Returns "" when nothing matches.
    """
    wanted = {normalize_key(n) for n in candidate_names}
    for key, value in entry.items():
        if normalize_key(key) in wanted and not is_missing(value):
            return normalize(value)
    return ""


def resolve_full_name(entry: Entry) -> str:
    """Resolve the full name, falling back to first/middle/last parts."""
    full = resolve_field(entry, FULL_NAME_FIELDS)
    if full:
        return full
    parts = [
        resolve_field(entry, FIRST_NAME_FIELDS),
        resolve_field(entry, MIDDLE_NAME_FIELDS),
        resolve_field(entry, LAST_NAME_FIELDS),
    ]
    return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class ResolvedIdentity:
    ssid: str
    nin: str
    name: str


def resolve_identity(entry: Entry) -> ResolvedIdentity:
    return ResolvedIdentity(
        ssid=resolve_field(entry, SSID_FIELDS),
        nin=resolve_field(entry, NIN_FIELDS),
        name=resolve_full_name(entry),
    )
