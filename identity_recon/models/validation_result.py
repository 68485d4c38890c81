from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""ValidationResult model and MatchStatus enum.

A ValidationResult is produced exactly once per candidate entry by the match
engine. It stays a plain mutable record so that an external reviewer can force
a result to Valid after the fact (manual approval); the engine never does so
itself.
"""

__all__ = [
    "MatchStatus",
    "ValidationResult",
    "OUTPUT_KEYS",
    "STATUS_KEY",
    "REASON_KEY",
    "MATCHED_NAME_KEY",
    "CORRECT_SSID_KEY",
    "CORRECT_NIN_KEY",
]

STATUS_KEY = "Match Status"
REASON_KEY = "Match Reason"
MATCHED_NAME_KEY = "Matched Name"
CORRECT_SSID_KEY = "Correct SSID"
CORRECT_NIN_KEY = "Correct NIN"

# ProcessedEntry に追加される固定キー (この順序で出力)
OUTPUT_KEYS = (STATUS_KEY, REASON_KEY, MATCHED_NAME_KEY, CORRECT_SSID_KEY, CORRECT_NIN_KEY)


class MatchStatus(Enum):
    """Verdict for a single candidate entry.

    Values are the user-facing labels written to the `Match Status` column.
    """
    VALID = "Valid"
    PARTIAL_MATCH = "Partial Match"
    INVALID = "Invalid"


@dataclass
class ValidationResult:
    """Outcome of matching one candidate against the source index.

    Attributes:
        status: Verdict
        reason: Human-readable explanation listing every failing check
        matched_name: Normalized full name of the chosen source record
        matched_ssid: Normalized SSID of the chosen source record
        matched_nin: Normalized NIN of the chosen source record
        similarity: Token-set name similarity (0-100) against the chosen record
        error: Exception message when the result comes from an unexpected fault
    """
    status: MatchStatus
    reason: str
    matched_name: str | None = None
    matched_ssid: str | None = None
    matched_nin: str | None = None
    similarity: int | None = None
    error: str | None = None

    @classmethod
    def invalid(cls, reason: str, *, error: str | None = None) -> ValidationResult:
        return cls(status=MatchStatus.INVALID, reason=reason, error=error)

    @property
    def is_system_error(self) -> bool:
        return self.error is not None

    def output_fields(self) -> dict[str, str]:
        """Flatten into the fixed ProcessedEntry output keys."""
        return {
            STATUS_KEY: self.status.value,
            REASON_KEY: self.reason,
            MATCHED_NAME_KEY: self.matched_name or "",
            CORRECT_SSID_KEY: self.matched_ssid or "",
            CORRECT_NIN_KEY: self.matched_nin or "",
        }
