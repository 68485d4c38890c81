from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..models.report import ReconciliationSummary
from ..models.validation_result import OUTPUT_KEYS, MatchStatus, ValidationResult
from .fields import SSID_FIELDS, Entry, resolve_field

"""Result assembler: ProcessedEntry construction and summary counts."""

__all__ = [
    "merge_result",
    "build_headers",
    "summarize",
    "find_candidate_duplicates",
    "duplicate_request_result",
]


def merge_result(candidate: Entry, result: ValidationResult) -> dict[str, Any]:
    """New output record: candidate fields followed by the fixed output keys.

    The candidate mapping itself is left untouched.
    """
    merged = dict(candidate)
    merged.update(result.output_fields())
    return merged


def build_headers(candidate_headers: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for h in list(candidate_headers) + list(OUTPUT_KEYS):
        seen.setdefault(h, None)
    return list(seen)


def summarize(outcomes: Sequence[ValidationResult], duplicate_candidates: int = 0) -> ReconciliationSummary:
    valid = sum(1 for r in outcomes if r.status is MatchStatus.VALID)
    partial = sum(1 for r in outcomes if r.status is MatchStatus.PARTIAL_MATCH)
    invalid = sum(1 for r in outcomes if r.status is MatchStatus.INVALID)
    return ReconciliationSummary(
        total=len(outcomes),
        valid=valid,
        invalid=invalid,
        partial_match=partial,
        duplicate_candidates=duplicate_candidates,
        system_errors=sum(1 for r in outcomes if r.is_system_error),
    )


def find_candidate_duplicates(candidates: Sequence[Entry]) -> dict[int, int]:
    """Map position -> position of the first candidate with the same SSID.

    Only repeats are returned; the first occurrence of each SSID is not.
    Candidates without an SSID are never considered duplicates.
    """
    first_seen: dict[str, int] = {}
    repeats: dict[int, int] = {}
    for pos, candidate in enumerate(candidates):
        ssid = resolve_field(candidate, SSID_FIELDS)
        if not ssid:
            continue
        if ssid in first_seen:
            repeats[pos] = first_seen[ssid]
        else:
            first_seen[ssid] = pos
    return repeats


def duplicate_request_result(first_pos: int) -> ValidationResult:
    return ValidationResult.invalid(
        f"Duplicate request: SSID already submitted in row {first_pos + 1}"
    )
