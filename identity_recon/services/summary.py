from __future__ import annotations

from ..models.report import ReconciliationReport

"""SUMMARY line rendering.

Format:
SUMMARY total={n} valid={n} partial={n} invalid={n} duplicates={n}
warnings={n} elapsed_sec={x} throughput_rps={x}
"""


def _format_number(value: float) -> str:
    # 整数値は小数点なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(report: ReconciliationReport) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from identity_recon.models.report import ReconciliationSummary
        >>> summary = ReconciliationSummary(total=3, valid=1, invalid=1, partial_match=1)
        >>> report = ReconciliationReport(
        ...     headers=[], results=[], outcomes=[], summary=summary,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=1.5,
        ... )
        >>> render_summary_line(report)
        'SUMMARY total=3 valid=1 partial=1 invalid=1 duplicates=0 warnings=0 elapsed_sec=2 throughput_rps=1.5'
    """
    s = report.summary
    return (
        f"SUMMARY total={s.total} "
        f"valid={s.valid} "
        f"partial={s.partial_match} "
        f"invalid={s.invalid} "
        f"duplicates={s.duplicate_candidates} "
        f"warnings={len(report.warnings)} "
        f"elapsed_sec={_format_number(report.elapsed_seconds)} "
        f"throughput_rps={_format_number(report.throughput_rows_per_sec)}"
    )
