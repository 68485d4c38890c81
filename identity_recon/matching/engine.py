from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.config_models import AbsencePolicy, MatchConfig
from ..models.validation_result import MatchStatus, ValidationResult
from .fields import Entry, resolve_identity
from .index import SourceIndex, build_index
from .similarity import SimilarityFn, token_set_similarity

"""Match engine: one verdict per candidate entry.

Evaluation order for a candidate:

1. no resolvable name               -> Invalid  "Missing name field."
2. neither SSID nor NIN             -> Invalid  "Missing both SSID and NIN"
3. no hit in either index           -> Invalid  "No record found"
4. pick the best-scoring hit (SSID agree 40 + NIN agree 40 + similarity * 0.2)
5. best hit has no name             -> Invalid  "Source record missing name"
6. SSID, NIN and name checks        -> Valid or Partial Match

A candidate can reach two *different* source records through SSID and NIN when
the source itself is inconsistent; scoring prefers the one agreeing on more
signals and keeps the first seen on a tie.

Any unexpected exception is turned into an Invalid "System error" result so a
single bad row never aborts the batch.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ReconciliationEngine",
    "REASON_MISSING_NAME",
    "REASON_MISSING_IDS",
    "REASON_NOT_FOUND",
    "REASON_SOURCE_MISSING_NAME",
]

REASON_MISSING_NAME = "Missing name field."
REASON_MISSING_IDS = "Missing both SSID and NIN"
REASON_NOT_FOUND = "No record found"
REASON_SOURCE_MISSING_NAME = "Source record missing name"

IDENTIFIER_POINTS = 40
SIMILARITY_WEIGHT = 0.2


def _identifiers_agree(entry_value: str, source_value: str, policy: AbsencePolicy) -> bool:
    if policy is AbsencePolicy.STRICT:
        # 片側のみ存在は不一致、両側欠落は一致扱い
        return entry_value == source_value
    return not entry_value or not source_value or entry_value == source_value


class ReconciliationEngine:
    """Stateless matcher parameterized by MatchConfig.

    The engine holds no per-run state: the same instance can evaluate many
    candidates concurrently against one read-only SourceIndex.
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        similarity: SimilarityFn = token_set_similarity,
    ) -> None:
        self.config = config or MatchConfig()
        self.similarity = similarity

    def build_index(self, source: Sequence[Entry]) -> SourceIndex:
        return build_index(source)

    def evaluate(self, candidate: Entry, index: SourceIndex) -> ValidationResult:
        """Match one candidate. Never raises."""
        try:
            return self._evaluate(candidate, index)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.debug("candidate evaluation failed: %s", message, exc_info=True)
            return ValidationResult.invalid(f"System error: {message}", error=message)

    def _evaluate(self, candidate: Entry, index: SourceIndex) -> ValidationResult:
        entry = resolve_identity(candidate)
        if not entry.name:
            return ValidationResult.invalid(REASON_MISSING_NAME)
        if not entry.ssid and not entry.nin:
            return ValidationResult.invalid(REASON_MISSING_IDS)

        hits: list[Entry] = []
        for key, lookup in ((entry.ssid, index.by_ssid), (entry.nin, index.by_nin)):
            if not key:
                continue
            record = lookup.get(key)
            # 同一レコードが SSID / NIN 両方で引ける場合は 1 件扱い (同一性で判定)
            if record is not None and not any(record is h for h in hits):
                hits.append(record)
        if not hits:
            return ValidationResult.invalid(REASON_NOT_FOUND)

        best = hits[0]
        best_score = 0.0
        for record in hits:
            score = self._score(entry.ssid, entry.nin, entry.name, record)
            if score > best_score:
                best_score = score
                best = record

        source = resolve_identity(best)
        if not source.name:
            return ValidationResult.invalid(REASON_SOURCE_MISSING_NAME)

        policy = self.config.absence_policy
        ssid_ok = _identifiers_agree(entry.ssid, source.ssid, policy)
        nin_ok = _identifiers_agree(entry.nin, source.nin, policy)
        similarity = self.similarity(entry.name, source.name)
        name_ok = similarity >= self.config.similarity_threshold

        if ssid_ok and nin_ok and name_ok:
            return ValidationResult(
                status=MatchStatus.VALID,
                reason=f"Verified ({similarity}% name match)",
                matched_name=source.name,
                matched_ssid=source.ssid,
                matched_nin=source.nin,
                similarity=similarity,
            )

        issues: list[str] = []
        if not ssid_ok:
            issues.append("SSID mismatch")
        if not nin_ok:
            issues.append("NIN mismatch")
        if not name_ok:
            issues.append(f"Name similarity: {similarity}%")
        return ValidationResult(
            status=MatchStatus.PARTIAL_MATCH,
            reason=f"Issues: {'; '.join(issues)}",
            matched_name=source.name,
            matched_ssid=source.ssid,
            matched_nin=source.nin,
            similarity=similarity,
        )

    def _score(self, ssid: str, nin: str, name: str, record: Entry) -> float:
        source = resolve_identity(record)
        score = 0.0
        if ssid and source.ssid == ssid:
            score += IDENTIFIER_POINTS
        if nin and source.nin == nin:
            score += IDENTIFIER_POINTS
        if source.name:
            score += self.similarity(name, source.name) * SIMILARITY_WEIGHT
        return score
