from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from identity_recon.config.loader import ConfigError, load_config
from identity_recon.logging.error_log import ErrorLogBuffer
from identity_recon.logging.init import log_summary, setup_logging
from identity_recon.matching.engine import ReconciliationEngine
from identity_recon.matching.lookup import lookup_items_from_entries
from identity_recon.models.config_models import AbsencePolicy, ReconConfig
from identity_recon.models.lookup import LookupItem, LookupStatus
from identity_recon.models.validation_result import MatchStatus
from identity_recon.services.orchestrator import (
    ProcessingError,
    load_source_index,
    run_lookup,
    run_reconciliation,
)
from identity_recon.services.summary import render_summary_line
from identity_recon.tabular.header import grid_to_entries
from identity_recon.tabular.reader import EmptyGridError, UnsupportedFileError, load_entries, read_grid
from identity_recon.tabular.writer import default_export_name, write_results

"""CLI entrypoint.

Commands:
- validate: reconcile a candidate file against a source file
- lookup:   SSID lookups (single or batch file) with optional name check
- inspect:  show the detected header row and first entries of a file

Exit codes:
- 0: run completed
- 1: fatal (config, unreadable file, bad dataset, capacity exceeded)
- 2: run completed but some candidates ended in a system error
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_SYSTEM_ERRORS = 2

_STATUS_CHOICES = {s.value: s for s in MatchStatus}


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (RECON_DEFAULT_SOURCE 等)."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except Exception as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="identity-recon",
        description="Reconcile identity records (SSID / NIN / name) against a source of truth",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: config/recon.yml)")
    sub = p.add_subparsers(dest="command", required=True)

    v = sub.add_parser("validate", help="Validate a candidate file against the source")
    v.add_argument("candidates", type=Path, help="File with records to validate (.xlsx/.xls/.csv)")
    v.add_argument("--source", type=Path, default=None, help="Source-of-truth file (default: configured default_source)")
    v.add_argument("--output", type=Path, default=None, help="Write results to this .xlsx/.csv file")
    v.add_argument("--export", action="store_true", help="Write results under output_directory with a generated name")
    v.add_argument("--status", choices=sorted(_STATUS_CHOICES), default=None, help="Export only one status")
    v.add_argument("--workers", type=int, default=None, help="Worker threads for candidate evaluation")
    v.add_argument("--strict", action="store_true", help="Treat one-sided identifier absence as a mismatch")
    v.add_argument("--reject-duplicates", action="store_true", help="Reject repeated candidate SSIDs up front")

    lk = sub.add_parser("lookup", help="Look up SSIDs in the source")
    lk.add_argument("--source", type=Path, default=None, help="Source-of-truth file (default: configured default_source)")
    lk.add_argument("--ssid", default=None, help="Single SSID to look up")
    lk.add_argument("--name", default=None, help="Name to verify for --ssid")
    lk.add_argument("--batch", type=Path, default=None, help="File with SSID / name columns")

    ins = sub.add_parser("inspect", help="Print detected header row and first entries then exit")
    ins.add_argument("path", type=Path)
    return p.parse_args(argv)


def _apply_overrides(cfg: ReconConfig, args: argparse.Namespace) -> ReconConfig:
    if getattr(args, "workers", None):
        cfg = replace(cfg, workers=args.workers)
    if getattr(args, "reject_duplicates", False):
        cfg = replace(cfg, reject_duplicate_candidates=True)
    if getattr(args, "strict", False):
        cfg = replace(cfg, match=replace(cfg.match, absence_policy=AbsencePolicy.STRICT))
    return cfg


def _resolve_source(args: argparse.Namespace, cfg: ReconConfig) -> Path | None:
    if args.source is not None:
        return args.source
    if cfg.default_source:
        return Path(cfg.default_source)
    return None


def _inspect(path: Path) -> int:
    try:
        grid = read_grid(path)
    except (OSError, EmptyGridError, UnsupportedFileError) as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    data = grid_to_entries(grid)
    print(f"FILE: {path.name} rows={len(grid)} header_row={data.header_row_index}")
    print(f"  columns={data.columns}")
    # datetime 含む場合は isoformat で表示
    for entry in data.entries[:3]:
        print("  entry=", {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in entry.items()})
    return EXIT_SUCCESS


def _validate(args: argparse.Namespace, cfg: ReconConfig) -> int:
    logger = setup_logging()
    source_path = _resolve_source(args, cfg)
    if source_path is None:
        logger.error("source: no --source given and no default_source configured")
        return EXIT_FATAL

    engine = ReconciliationEngine(cfg.match)
    error_log = ErrorLogBuffer()
    try:
        index = load_source_index(source_path, engine)
        candidates = load_entries(args.candidates)
        logger.info(
            f"Validating {args.candidates.name} (header row {candidates.header_row_index}) "
            f"against {source_path.name}"
        )
        report = run_reconciliation(
            None,
            candidates.entries,
            cfg,
            engine=engine,
            index=index,
            candidate_headers=candidates.columns,
            error_log=error_log,
        )
    except (OSError, EmptyGridError, UnsupportedFileError, ProcessingError) as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for w in report.warnings:
        logger.warning(w)

    status_filter = _STATUS_CHOICES[args.status] if args.status else None
    out_path = args.output
    if out_path is None and args.export:
        out_path = Path(cfg.output_directory) / default_export_name(args.candidates.name, status_filter)
    if out_path is not None:
        written = write_results(report, out_path, status_filter=status_filter)
        if written:
            logger.info(f"results written: {out_path} rows={written}")
        else:
            logger.info("no rows matched the export filter; nothing written")

    issues_path = error_log.flush()
    if issues_path is not None:
        logger.info(f"issue log: {issues_path} {error_log.breakdown()}")

    log_summary(render_summary_line(report)[len("SUMMARY "):])
    return EXIT_SYSTEM_ERRORS if report.summary.system_errors else EXIT_SUCCESS


def _lookup(args: argparse.Namespace, cfg: ReconConfig) -> int:
    logger = setup_logging()
    source_path = _resolve_source(args, cfg)
    if source_path is None:
        logger.error("source: no --source given and no default_source configured")
        return EXIT_FATAL

    try:
        if args.batch is not None:
            items = lookup_items_from_entries(load_entries(args.batch).entries)
        elif args.ssid:
            items = [LookupItem(ssid=args.ssid, name_to_verify=args.name)]
        else:
            items = []
        index = load_source_index(source_path, ReconciliationEngine(cfg.match))
        results = run_lookup(items, index, cfg)
    except (OSError, EmptyGridError, UnsupportedFileError, ProcessingError) as e:
        logger.error(f"lookup: {e}")
        return EXIT_FATAL

    for r in results:
        sim = "" if r.similarity is None else f" similarity={r.similarity}"
        print(f"{r.ssid}\t{r.status.value}\tname={r.name_to_verify}\tsystem_name={r.correct_name}{sim}")
    found = sum(1 for r in results if r.status is not LookupStatus.NOT_FOUND)
    log_summary(f"lookups={len(results)} found={found} source_records={index.record_count}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    # NOTE: [] が渡された場合に sys.argv[1:] が混入しないよう None のときのみ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    cfg = _apply_overrides(cfg, args)

    if args.command == "inspect":
        return _inspect(args.path)
    if args.command == "lookup":
        return _lookup(args, cfg)
    return _validate(args, cfg)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
