from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from ..matching.normalize import is_missing

"""Header row detection for loosely structured grids.

Uploaded spreadsheets often carry title rows, blank rows or multi-row headers
above the real header. The detector scores each of the first rows by how many
identity-column keywords its text contains and picks the densest one.

Known limitation: a header made only of generic labels (no keyword at all)
falls back to row 0.
"""

__all__ = [
    "HEADER_KEYWORDS",
    "MAX_HEADER_SCAN_ROWS",
    "TabularData",
    "find_header_row_index",
    "grid_to_entries",
]

MAX_HEADER_SCAN_ROWS = 10
HEADER_KEYWORDS = (
    "ssid",
    "nin",
    "name",
    "id",
    "pension",
    "account",
    "bank",
    "verification",
    "no",
    "s/n",
    "firstname",
    "lastname",
)


@dataclass
class TabularData:
    header_row_index: int
    columns: list[str]
    entries: list[dict[str, Any]]  # 列名 -> セル値 (空行は除外済)


def _is_blank(cell: Any) -> bool:
    return is_missing(cell) or cell == ""


def _is_text(cell: Any) -> bool:
    # CSV は dtype=str で読むため "123" も文字列で届く: 数値に読めるものは除外
    if not isinstance(cell, str):
        return False
    return bool(pd.isna(pd.to_numeric(cell.strip(), errors="coerce")))


def _keyword_score(row: Sequence[Any]) -> int:
    cells = [c for c in row if not _is_blank(c)]
    if len(cells) < 2:
        return 0
    strings = sum(1 for c in cells if _is_text(c))
    # 数値主体の行はデータ行とみなす
    if strings / len(cells) < 0.5:
        return 0
    text = " ".join(str(c) for c in cells).lower()
    return sum(1 for k in HEADER_KEYWORDS if k in text)


def find_header_row_index(rows: Sequence[Sequence[Any]]) -> int:
    """Zero-based index of the most header-like row among the first ten.

    Ties keep the earliest row; no scoring row at all yields 0.
    """
    best_index = 0
    best_score = 0
    for i, row in enumerate(rows[:MAX_HEADER_SCAN_ROWS]):
        if not row:
            continue
        score = _keyword_score(row)
        if score > best_score:
            best_score = score
            best_index = i
    return best_index


def grid_to_entries(rows: Sequence[Sequence[Any]], header_row_index: int | None = None) -> TabularData:
    """Key the rows below the header row by the header labels.

    Header cells are stripped text; blank header cells drop their column.
    Rows whose values are all blank are skipped.
    """
    if header_row_index is None:
        header_row_index = find_header_row_index(rows)
    if not rows:
        return TabularData(header_row_index=0, columns=[], entries=[])

    header = ["" if is_missing(h) else str(h).strip() for h in rows[header_row_index]]
    entries: list[dict[str, Any]] = []
    for raw in rows[header_row_index + 1:]:
        entry: dict[str, Any] = {}
        for col, label in enumerate(header):
            if not label:
                continue
            value = raw[col] if col < len(raw) else None
            entry[label] = None if is_missing(value) else value
        if any(not _is_blank(v) for v in entry.values()):
            entries.append(entry)
    return TabularData(
        header_row_index=header_row_index,
        columns=[h for h in header if h],
        entries=entries,
    )
