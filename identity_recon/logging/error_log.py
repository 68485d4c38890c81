from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Issue log buffering.

Records are kept in memory during a run and written once as JSON Lines to
`logs/issues-YYYYMMDD-HHMMSS.log` (UTC). The file path is fixed on first
access so all flushes of one run land in the same file. Per (dataset,
error_type) counts survive flushes, for the end-of-run breakdown.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for issue records. flush() appends JSON Lines.

    append() may be called from the orchestrator only (single thread); worker
    threads never touch the buffer.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR
        self._counts: Counter[tuple[str, str]] = Counter()

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"issues-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)
        self._counts[(record.dataset, record.error_type)] += 1

    def counts(self) -> dict[tuple[str, str], int]:
        """Records appended so far per (dataset, error_type), flushed ones included."""
        return dict(self._counts)

    def breakdown(self) -> str:
        """`candidates/SYSTEM_ERROR=1 source/SOURCE_DUPLICATE_SSID=2` (sorted)."""
        return " ".join(f"{ds}/{et}={n}" for (ds, et), n in sorted(self._counts.items()))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, or None when empty."""
        if not self._records:
            return None  # 空ならファイルを作らない
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
