from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from .fields import Entry, resolve_identity

"""Source indexer: SSID / NIN lookup maps over the source dataset.

Built once per run and read-only afterwards, so candidate evaluation can be
spread across threads without locking. Indexing is a single O(S) pass.

Duplicate policy:
- SSID is the primary key. A repeated SSID keeps the first record and records
  a warning naming the SSID and the rejected record's name.
- NIN is secondary. A repeated NIN keeps the first record silently.
- A record with neither identifier is not indexed.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "DuplicateSource",
    "SourceIndex",
    "build_index",
]


@dataclass(frozen=True)
class DuplicateSource:
    """A source record rejected because its SSID was already indexed."""
    row: int  # 1-based position in the source dataset
    ssid: str
    name: str
    first_row: int  # 先に索引済みのレコード位置

    @property
    def warning(self) -> str:
        name = self.name or "<no name>"
        return (
            f"Duplicate SSID '{self.ssid}' in source row {self.row} ({name}); "
            f"keeping row {self.first_row}"
        )


@dataclass(frozen=True)
class SourceIndex:
    """Read-only lookup maps keyed by normalized identifier."""
    by_ssid: Mapping[str, Entry]
    by_nin: Mapping[str, Entry]
    record_count: int = 0
    duplicates: tuple[DuplicateSource, ...] = field(default_factory=tuple)

    @property
    def warnings(self) -> list[str]:
        return [d.warning for d in self.duplicates]


def build_index(source: Sequence[Entry]) -> SourceIndex:
    """Index the source dataset by SSID and NIN (first seen wins)."""
    by_ssid: dict[str, Entry] = {}
    by_nin: dict[str, Entry] = {}
    ssid_rows: dict[str, int] = {}
    duplicates: list[DuplicateSource] = []

    for pos, record in enumerate(source, start=1):
        ident = resolve_identity(record)
        if ident.ssid:
            if ident.ssid in by_ssid:
                dup = DuplicateSource(
                    row=pos, ssid=ident.ssid, name=ident.name, first_row=ssid_rows[ident.ssid]
                )
                duplicates.append(dup)
                logger.debug(dup.warning)
            else:
                by_ssid[ident.ssid] = record
                ssid_rows[ident.ssid] = pos
        # NIN は副キー: 重複は黙って先勝ち
        if ident.nin and ident.nin not in by_nin:
            by_nin[ident.nin] = record

    logger.debug(
        "source indexed records=%d by_ssid=%d by_nin=%d duplicates=%d",
        len(source),
        len(by_ssid),
        len(by_nin),
        len(duplicates),
    )
    return SourceIndex(
        by_ssid=MappingProxyType(by_ssid),
        by_nin=MappingProxyType(by_nin),
        record_count=len(source),
        duplicates=tuple(duplicates),
    )
