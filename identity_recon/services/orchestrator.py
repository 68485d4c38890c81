from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import UTC, datetime
from typing import Any

from ..logging.error_log import ErrorLogBuffer
from ..matching.assembler import (
    build_headers,
    duplicate_request_result,
    find_candidate_duplicates,
    merge_result,
    summarize,
)
from ..matching.engine import ReconciliationEngine
from ..matching.index import SourceIndex
from ..matching.lookup import lookup
from ..models.config_models import ReconConfig
from ..models.error_record import ErrorRecord
from ..models.lookup import LookupItem, LookupResult
from ..models.report import ReconciliationReport
from ..models.validation_result import ValidationResult
from ..tabular.reader import load_entries
from .progress import PhaseIndicator, ProgressTracker
from .source_cache import SourceCache

"""Service orchestration for a reconciliation run.

run_reconciliation() is the request layer around the stateless engine:

1. Validate dataset shape (fatal, before any matching)
2. Enforce capacity guards
3. Build the source index (or reuse a cached one)
4. Pre-filter repeated candidate SSIDs (optional)
5. Evaluate candidates, sequentially or on a thread pool
6. Assemble ProcessedEntries, summary and warnings in input order
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ProcessingError",
    "DatasetError",
    "CapacityExceededError",
    "validate_dataset",
    "load_source_index",
    "run_reconciliation",
    "run_lookup",
]


class ProcessingError(Exception):
    """Base exception for processing errors."""


class DatasetError(ProcessingError):
    """A dataset is not a non-empty sequence of mappings."""


class CapacityExceededError(ProcessingError):
    """A dataset is larger than the configured limit."""


def validate_dataset(records: Any, name: str) -> list[Mapping[str, Any]]:
    """Check the shape of a decoded dataset and return it as a list.

    Raises:
        DatasetError: not a sequence, empty, or an element is not a mapping
    """
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Sequence):
        raise DatasetError(f"{name} must be a sequence of records, got {type(records).__name__}")
    if len(records) == 0:
        raise DatasetError(f"{name} dataset is empty")
    for pos, record in enumerate(records, start=1):
        if not isinstance(record, Mapping):
            raise DatasetError(
                f"{name} record {pos} is not an object (got {type(record).__name__})"
            )
    return list(records)


def load_source_index(
    path: Path,
    engine: ReconciliationEngine | None = None,
    cache: SourceCache[SourceIndex] | None = None,
) -> SourceIndex:
    """Read a source file and build its index.

    Long-lived callers (a service handling many requests against the same
    source) pass a SourceCache; the index is then rebuilt only after the TTL
    expires. The key is the resolved file path.

    Raises:
        ProcessingError: the file has no data rows below its header
    """
    engine = engine or ReconciliationEngine()

    def _build() -> SourceIndex:
        data = load_entries(path)
        if not data.entries:
            raise ProcessingError(f"source file has no data rows: {path}")
        return engine.build_index(data.entries)

    if cache is None:
        return _build()
    return cache.get(str(path.resolve()), _build)


def _check_capacity(count: int, limit: int, name: str) -> None:
    if count > limit:
        raise CapacityExceededError(f"{name} exceeds limit of {limit} records (got {count})")


def _evaluate_all(
    engine: ReconciliationEngine,
    index: SourceIndex,
    candidates: Sequence[Mapping[str, Any]],
    positions: Iterable[int],
    results: list[ValidationResult | None],
    workers: int,
    progress: ProgressTracker,
) -> None:
    """Fill `results` at each evaluated position.

    Results are written by position, never by completion order, so the output
    order equals the input order for any worker count.
    """
    if workers <= 1:
        for pos in positions:
            results[pos] = engine.evaluate(candidates[pos], index)
            progress.advance()
        return

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="recon") as pool:
        futures = {pool.submit(engine.evaluate, candidates[pos], index): pos for pos in positions}
        for fut in as_completed(futures):
            results[futures[fut]] = fut.result()
            progress.advance()


def run_reconciliation(
    source: Any,
    candidates: Any,
    config: ReconConfig | None = None,
    *,
    engine: ReconciliationEngine | None = None,
    index: SourceIndex | None = None,
    candidate_headers: Iterable[str] | None = None,
    error_log: ErrorLogBuffer | None = None,
    show_progress: bool = True,
) -> ReconciliationReport:
    """Validate every candidate against the source dataset.

    Args:
        source: Source-of-truth records. Ignored for indexing when `index` is given
        candidates: Records to validate
        config: Run configuration (defaults when None)
        engine: Engine to use; built from config.match when None
        index: Pre-built (e.g. cached) source index
        candidate_headers: Column order for the report; taken from the
            candidates' keys in first-seen order when None
        error_log: Issue buffer to append duplicate / system-error records to
        show_progress: Allow the tqdm bar (still TTY only)

    Returns:
        ReconciliationReport with exactly one ProcessedEntry per candidate

    Raises:
        DatasetError: malformed or empty dataset
        CapacityExceededError: dataset larger than the configured limit
    """
    config = config or ReconConfig()
    engine = engine or ReconciliationEngine(config.match)
    start_time = datetime.now(UTC)

    entries = validate_dataset(candidates, "candidates")
    _check_capacity(len(entries), config.max_candidate_records, "candidates")

    if index is None:
        source_records = validate_dataset(source, "source")
        _check_capacity(len(source_records), config.max_source_records, "source")
        phase = PhaseIndicator(enabled=show_progress)
        phase.start("Indexing source")
        index = engine.build_index(source_records)
        phase.finish(success=True, count=index.record_count)
    # ここ以降 index は読み取り専用 (並列評価の同期点)

    warnings = index.warnings
    if error_log is not None:
        for dup in index.duplicates:
            error_log.append(ErrorRecord.create("source", dup.row, "SOURCE_DUPLICATE_SSID", dup.warning))

    outcomes: list[ValidationResult | None] = [None] * len(entries)
    duplicates: dict[int, int] = {}
    if config.reject_duplicate_candidates:
        duplicates = find_candidate_duplicates(entries)
        for pos, first_pos in duplicates.items():
            outcomes[pos] = duplicate_request_result(first_pos)
            if error_log is not None:
                error_log.append(
                    ErrorRecord.create("candidates", pos + 1, "CANDIDATE_DUPLICATE", outcomes[pos].reason)
                )
        if duplicates:
            logger.info("rejected %d duplicate candidate request(s)", len(duplicates))

    pending = [pos for pos in range(len(entries)) if pos not in duplicates]
    with ProgressTracker(len(entries), enabled=show_progress) as progress:
        progress.advance(len(duplicates))
        _evaluate_all(engine, index, entries, pending, outcomes, config.workers, progress)

    final: list[ValidationResult] = [r for r in outcomes if r is not None]
    if len(final) != len(entries):  # pragma: no cover (evaluate never raises)
        raise ProcessingError("internal error: missing results for some candidates")

    if error_log is not None:
        for pos, result in enumerate(final, start=1):
            if result.is_system_error:
                error_log.append(ErrorRecord.create("candidates", pos, "SYSTEM_ERROR", result.reason))

    if candidate_headers is None:
        seen: dict[str, None] = {}
        for entry in entries:
            for key in entry:
                seen.setdefault(key, None)
        candidate_headers = seen

    results = [merge_result(entry, result) for entry, result in zip(entries, final, strict=True)]
    summary = summarize(final, duplicate_candidates=len(duplicates))

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput = len(entries) / elapsed_seconds if elapsed_seconds > 0 else 0.0

    logger.debug(
        "reconciliation done total=%d valid=%d partial=%d invalid=%d elapsed=%.3fs",
        summary.total,
        summary.valid,
        summary.partial_match,
        summary.invalid,
        elapsed_seconds,
    )
    return ReconciliationReport(
        headers=build_headers(candidate_headers),
        results=results,
        outcomes=final,
        summary=summary,
        warnings=warnings,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput,
    )


def run_lookup(
    items: Sequence[LookupItem],
    index: SourceIndex,
    config: ReconConfig | None = None,
) -> list[LookupResult]:
    """SSID lookups against a built index.

    Raises:
        DatasetError: no lookup items (e.g. a batch file without any SSID)
    """
    config = config or ReconConfig()
    if not items:
        raise DatasetError("no valid lookup data provided")
    return lookup(items, index, threshold=config.match.similarity_threshold)
