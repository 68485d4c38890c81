from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the reconciliation issue log.

Each record is one JSON Lines entry. Fixed schema: no keys beyond the dataclass
fields are ever written.

Error types (UPPER_SNAKE):
- SOURCE_DUPLICATE_SSID: duplicate SSID in the source dataset (first kept)
- CANDIDATE_DUPLICATE: repeated SSID in the candidate dataset (pre-filtered)
- SYSTEM_ERROR: unexpected fault while evaluating a single candidate
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured issue record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        dataset: "source" or "candidates"
        row: 1-based record position within the dataset. -1 when unknown
        error_type: Issue classification in UPPER_SNAKE_CASE format
        message: Human-readable description
    """
    timestamp: str  # ISO8601 UTC
    dataset: str
    row: int  # 行番号。不明な場合 -1 許容
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(dataset: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            dataset=dataset,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
