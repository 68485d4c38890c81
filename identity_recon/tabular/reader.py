from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

import pandas as pd

from .header import TabularData, grid_to_entries

"""Tabular file reader (.xlsx / .xls / .csv).

Files are read without assuming any header position (pandas header=None); the
header row is located afterwards by the keyword detector. Only the first sheet
of a workbook is used.
"""

__all__ = [
    "EmptyGridError",
    "UnsupportedFileError",
    "SUPPORTED_SUFFIXES",
    "read_grid",
    "load_entries",
]

SUPPORTED_SUFFIXES = {".xlsx", ".xls", ".csv"}


class EmptyGridError(Exception):
    """Raised when a file contains no rows at all."""


class UnsupportedFileError(Exception):
    """Raised for file extensions other than .xlsx/.xls/.csv."""


def _frame_to_grid(df: pd.DataFrame) -> list[list[Any]]:
    # NaN -> None に揃える (object 化してから置換)
    cleaned = df.astype(object).where(pd.notna(df), None)
    return [list(row) for row in cleaned.itertuples(index=False, name=None)]


def read_grid(path: Path) -> list[list[Any]]:
    """Read the first sheet (or the CSV) of `path` as a raw row grid."""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedFileError(f"unsupported file type: {path.name}")
    if suffix == ".csv":
        # タイトル行等で列数が揃わない CSV 対応: 最大列数を先に数えて names で固定
        with path.open(encoding="utf-8-sig", newline="") as f:
            width = max((len(r) for r in csv.reader(f)), default=0)
        if width == 0:
            raise EmptyGridError(f"file is empty: {path.name}")
        # 文字列のまま読む (先頭ゼロ付き ID 等を保持)
        df = pd.read_csv(
            path,
            header=None,
            names=list(range(width)),
            dtype=str,
            skip_blank_lines=False,
            encoding="utf-8-sig",
        )
    else:
        xls = pd.ExcelFile(path)
        df = xls.parse(xls.sheet_names[0], header=None)
    grid = _frame_to_grid(df)
    if not grid:
        raise EmptyGridError(f"file is empty: {path.name}")
    return grid


def load_entries(path: Path) -> TabularData:
    """Read `path`, detect its header row and return keyed entries."""
    return grid_to_entries(read_grid(path))
