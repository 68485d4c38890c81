#!/usr/bin/env python3
"""Dataset generation script for reconciliation testing.

Generates a synthetic source-of-truth file and a candidate file with a known
mix of outcomes. Both files carry a title row above the header row, the same
shape as the spreadsheets users upload:
- Row 1: Title row (found and skipped by header detection)
- Row 2: Header row
- Row 3+: Data rows

Candidate mix (approximate shares):
- 60% exact copies (case / whitespace varied)
- 15% NIN changed          -> Partial Match
- 10% name mangled         -> Partial Match
- 10% unknown identifiers  -> Invalid (no record found)
-  5% name removed         -> Invalid (missing name)
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

FIRST_NAMES = [
    "John", "Mary", "Ahmed", "Chinedu", "Aisha", "Peter", "Grace", "Ibrahim",
    "Fatima", "Samuel", "Ngozi", "David", "Esther", "Musa", "Ruth", "Tunde",
]
LAST_NAMES = [
    "Smith", "Okafor", "Bello", "Adeyemi", "Johnson", "Eze", "Mohammed", "Obi",
    "Williams", "Abubakar", "Nwosu", "Brown", "Lawal", "Okeke", "Taylor", "Yusuf",
]


def generate_source(rows: int, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    first = rng.choice(FIRST_NAMES, rows)
    middle = rng.choice(FIRST_NAMES, rows)
    last = rng.choice(LAST_NAMES, rows)
    return pd.DataFrame(
        {
            "S/N": np.arange(1, rows + 1),
            "SSID": [f"SS{i:08d}" for i in range(1, rows + 1)],
            "NIN": [f"{n:011d}" for n in rng.integers(10**10, 10**11 - 1, rows)],
            "FULL NAME": [f"{f} {m} {ln}" for f, m, ln in zip(first, middle, last, strict=True)],
            "Pension Account": [f"PEN{n:010d}" for n in rng.integers(0, 10**10, rows)],
        }
    )


def generate_candidates(source: pd.DataFrame, rows: int, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed + 1)
    picks = rng.integers(0, len(source), rows)
    kinds = rng.choice(
        ["exact", "nin", "name", "unknown", "noname"],
        rows,
        p=[0.60, 0.15, 0.10, 0.10, 0.05],
    )
    out = []
    for i, (pos, kind) in enumerate(zip(picks, kinds, strict=True)):
        src = source.iloc[int(pos)]
        ssid, nin, name = src["SSID"], src["NIN"], src["FULL NAME"]
        if kind == "exact":
            ssid = f" {ssid.lower()} "
            name = name.upper()
        elif kind == "nin":
            nin = f"{int(nin) + 1:011d}"
        elif kind == "name":
            name = "Unrelated Person"
        elif kind == "unknown":
            ssid = f"ZZ{i:08d}"
            nin = f"9{i:010d}"
        elif kind == "noname":
            name = None
        out.append({"SSID": ssid, "NIN": nin, "Full Name": name, "Expected": kind})
    return pd.DataFrame(out)


def write_with_title(df: pd.DataFrame, output_path: Path, title: str) -> None:
    """Write `df` with a title row above the header row (.xlsx or .csv)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    sheet_data = [[title] + [""] * (len(df.columns) - 1), df.columns.tolist()]
    sheet_data.extend(df.astype(object).where(pd.notna(df), None).values.tolist())
    final_df = pd.DataFrame(sheet_data)
    if output_path.suffix.lower() == ".csv":
        final_df.to_csv(output_path, header=False, index=False)
    else:
        final_df.to_excel(output_path, header=False, index=False, engine="openpyxl")
    print(f"Created file: {output_path} ({len(df):,} data rows)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic source / candidate identity datasets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/
  %(prog)s data/ --source-rows 200000 --candidate-rows 20000 --format csv
        """,
    )
    parser.add_argument("output_dir", type=Path, help="Directory for source.* and candidates.*")
    parser.add_argument("--source-rows", type=int, default=50_000)
    parser.add_argument("--candidate-rows", type=int, default=5_000)
    parser.add_argument("--format", choices=["xlsx", "csv"], default="xlsx")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    if args.source_rows <= 0 or args.candidate_rows <= 0:
        print("Error: row counts must be positive", file=sys.stderr)
        return 1

    source = generate_source(args.source_rows, args.seed)
    candidates = generate_candidates(source, args.candidate_rows, args.seed)
    write_with_title(source, args.output_dir / f"source.{args.format}", "Pension Register Export")
    write_with_title(candidates, args.output_dir / f"candidates.{args.format}", "Verification Batch")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
