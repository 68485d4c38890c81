from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd

from ..models.report import ReconciliationReport
from ..models.validation_result import STATUS_KEY, MatchStatus

"""Export of processed entries to .csv / .xlsx."""

__all__ = [
    "default_export_name",
    "write_results",
]


def default_export_name(
    original_name: str | None,
    status_filter: MatchStatus | None = None,
    today: date | None = None,
    suffix: str = ".xlsx",
) -> str:
    """`<base>_Validated_<All|Valid|Partial_Match|Invalid>_<YYYY-MM-DD><suffix>`."""
    base = Path(original_name).stem if original_name else "Validation_Results"
    marker = status_filter.value.replace(" ", "_") if status_filter else "All"
    stamp = (today or date.today()).isoformat()
    return f"{base}_Validated_{marker}_{stamp}{suffix}"


def write_results(
    report: ReconciliationReport,
    path: Path,
    status_filter: MatchStatus | None = None,
) -> int:
    """Write processed entries (optionally one status only) and return the row count.

    Nothing is written when the filter leaves no rows.
    """
    rows = report.results
    if status_filter is not None:
        rows = [r for r in rows if r.get(STATUS_KEY) == status_filter.value]
    if not rows:
        return 0
    df = pd.DataFrame(rows, columns=report.headers)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".csv":
        df.to_csv(path, index=False, encoding="utf-8")
    else:
        df.to_excel(path, index=False, sheet_name="Results")
    return len(df)
