"""Domain models for the identity reconciliation engine."""

from .config_models import AbsencePolicy, MatchConfig, ReconConfig
from .error_record import ErrorRecord
from .lookup import LookupItem, LookupResult, LookupStatus
from .report import ReconciliationReport, ReconciliationSummary
from .validation_result import OUTPUT_KEYS, MatchStatus, ValidationResult

__all__ = [
    # Configuration models
    "AbsencePolicy",
    "MatchConfig",
    "ReconConfig",
    # Matching models
    "MatchStatus",
    "ValidationResult",
    "OUTPUT_KEYS",
    "ReconciliationReport",
    "ReconciliationSummary",
    # Lookup models
    "LookupItem",
    "LookupResult",
    "LookupStatus",
    # Logging
    "ErrorRecord",
]
