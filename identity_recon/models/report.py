from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .validation_result import ValidationResult

"""Report models for a reconciliation run.

ReconciliationSummary carries the aggregate counts; ReconciliationReport is the
complete output handed to consumers (table rendering, export, charts).
"""

__all__ = [
    "ReconciliationSummary",
    "ReconciliationReport",
]


@dataclass(frozen=True)
class ReconciliationSummary:
    """Aggregate counts over one run.

    valid + invalid + partial_match == total always holds. duplicate_candidates
    and system_errors are subsets of invalid.
    """
    total: int
    valid: int
    invalid: int
    partial_match: int
    duplicate_candidates: int = 0  # 事前フィルタで弾いた重複申請数
    system_errors: int = 0  # 予期せぬ例外で Invalid になった件数

    def to_dict(self) -> dict[str, int]:
        # 旧 API レスポンスと同じキー名 (camelCase)
        return {
            "total": self.total,
            "valid": self.valid,
            "invalid": self.invalid,
            "partialMatch": self.partial_match,
            "duplicateCandidates": self.duplicate_candidates,
            "processingErrors": self.system_errors,
        }


@dataclass(frozen=True)
class ReconciliationReport:
    """Everything a consumer needs from one run."""
    headers: list[str]  # 候補データの列 + 出力キー (重複排除済)
    results: list[dict[str, Any]]  # ProcessedEntry (入力順)
    outcomes: list[ValidationResult]  # results と同じ並び
    summary: ReconciliationSummary
    warnings: list[str] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    elapsed_seconds: float = 0.0
    throughput_rows_per_sec: float = 0.0
