from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Config dataclasses for the reconciliation engine.

These are the typed domain models produced by the YAML loader in
identity_recon/config/loader.py. The engine itself only ever sees MatchConfig;
the remaining limits belong to the orchestration layer.
"""

__all__ = [
    "AbsencePolicy",
    "MatchConfig",
    "ReconConfig",
    "DEFAULT_SIMILARITY_THRESHOLD",
]

DEFAULT_SIMILARITY_THRESHOLD = 90
DEFAULT_MAX_SOURCE_RECORDS = 500_000
DEFAULT_MAX_CANDIDATE_RECORDS = 20_000
DEFAULT_CACHE_TTL_SECONDS = 600.0


class AbsencePolicy(Enum):
    """How a missing identifier on one side of a comparison is judged.

    - LENIENT: absence on either side never counts as a mismatch
    - STRICT: present on one side but absent on the other is a mismatch
      (absent on both sides still agrees)
    """
    LENIENT = "lenient"
    STRICT = "strict"


@dataclass(frozen=True)
class MatchConfig:
    """Parameters of a single matching run."""
    similarity_threshold: int = DEFAULT_SIMILARITY_THRESHOLD  # 0-100, inclusive
    absence_policy: AbsencePolicy = AbsencePolicy.LENIENT


@dataclass(frozen=True)
class ReconConfig:
    """Root configuration object for a reconciliation run.

    Capacity limits are guards for the caller. The engine keeps working past
    them, it just gets slower.
    """
    match: MatchConfig = field(default_factory=MatchConfig)
    max_source_records: int = DEFAULT_MAX_SOURCE_RECORDS
    max_candidate_records: int = DEFAULT_MAX_CANDIDATE_RECORDS
    reject_duplicate_candidates: bool = False  # 同一 SSID の重複申請を事前に Invalid 扱い
    workers: int = 1  # 1 = 逐次実行
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    default_source: str | None = None  # 既定ソースファイル (RECON_DEFAULT_SOURCE で上書き可)
    output_directory: str = "./output"
