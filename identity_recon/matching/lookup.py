from __future__ import annotations

from collections.abc import Sequence

from ..models.config_models import DEFAULT_SIMILARITY_THRESHOLD
from ..models.lookup import LookupItem, LookupResult, LookupStatus
from .fields import SSID_FIELDS, Entry, resolve_field, resolve_full_name
from .index import SourceIndex
from .normalize import normalize
from .similarity import SimilarityFn, token_set_similarity

"""Quick SSID lookup with optional name verification.

Lighter than full reconciliation: only the SSID index is probed and only the
name is compared.
"""

__all__ = [
    "lookup",
    "lookup_items_from_entries",
]

NOT_AVAILABLE = "N/A"
NO_NAME = "---"


def lookup_items_from_entries(entries: Sequence[Entry]) -> list[LookupItem]:
    """Build lookup items from a batch dataset, dropping rows without an SSID."""
    items = []
    for entry in entries:
        ssid = resolve_field(entry, SSID_FIELDS)
        if not ssid:
            continue
        items.append(LookupItem(ssid=ssid, name_to_verify=resolve_full_name(entry) or None))
    return items


def lookup(
    items: Sequence[LookupItem],
    index: SourceIndex,
    threshold: int = DEFAULT_SIMILARITY_THRESHOLD,
    similarity: SimilarityFn = token_set_similarity,
) -> list[LookupResult]:
    results: list[LookupResult] = []
    for item in items:
        record = index.by_ssid.get(normalize(item.ssid))
        name_to_verify = item.name_to_verify or NOT_AVAILABLE
        if record is None:
            results.append(
                LookupResult(
                    ssid=item.ssid,
                    name_to_verify=name_to_verify,
                    correct_name=NO_NAME,
                    status=LookupStatus.NOT_FOUND,
                )
            )
            continue

        correct_name = resolve_full_name(record)
        if not item.name_to_verify:
            results.append(
                LookupResult(
                    ssid=item.ssid,
                    name_to_verify=NOT_AVAILABLE,
                    correct_name=correct_name or NO_NAME,
                    status=LookupStatus.LOOKUP_SUCCESS,
                )
            )
            continue

        score = similarity(normalize(item.name_to_verify), correct_name)
        results.append(
            LookupResult(
                ssid=item.ssid,
                name_to_verify=item.name_to_verify,
                correct_name=correct_name or NO_NAME,
                status=LookupStatus.MATCH if score >= threshold else LookupStatus.MISMATCH,
                similarity=score,
            )
        )
    return results
