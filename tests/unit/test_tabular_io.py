from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from identity_recon.models.report import ReconciliationReport, ReconciliationSummary
from identity_recon.models.validation_result import MatchStatus
from identity_recon.tabular.reader import EmptyGridError, UnsupportedFileError, load_entries, read_grid
from identity_recon.tabular.writer import default_export_name, write_results


def test_read_csv_with_title_row(source_csv):
    grid = read_grid(source_csv)
    assert grid[0] == ["Pension Register Export", None, None]
    data = load_entries(source_csv)
    assert data.header_row_index == 1
    assert data.entries[0] == {"SSID": "A1", "NIN": "N1", "FULL NAME": "John Smith"}


def test_read_ragged_csv(write_csv):
    path = write_csv("ragged.csv", "Batch upload\nSSID,NIN,Name\nA1,N1,John Smith\n")
    data = load_entries(path)
    assert data.columns == ["SSID", "NIN", "Name"]
    assert len(data.entries) == 1


def test_csv_numeric_row_above_header(write_csv):
    path = write_csv(
        "numbered.csv",
        "1,2,3,Bank Account No Pension\nSSID,Full Name,Bank\nA1,John Smith,GTB\n",
    )
    data = load_entries(path)
    assert data.header_row_index == 1
    assert data.columns == ["SSID", "Full Name", "Bank"]
    assert data.entries == [{"SSID": "A1", "Full Name": "John Smith", "Bank": "GTB"}]


def test_csv_keeps_leading_zeros(write_csv):
    path = write_csv("zeros.csv", "SSID,NIN,Name\n00123,0456,Ada Obi\n")
    entry = load_entries(path).entries[0]
    assert entry["SSID"] == "00123"
    assert entry["NIN"] == "0456"


def test_read_xlsx_first_sheet(temp_workdir):
    path = temp_workdir / "data" / "src.xlsx"
    df = pd.DataFrame(
        [
            ["Pension Register", None, None],
            ["SSID", "NIN", "FULL NAME"],
            ["A1", "N1", "John Smith"],
        ]
    )
    df.to_excel(path, index=False, header=False)
    data = load_entries(path)
    assert data.header_row_index == 1
    assert data.entries == [{"SSID": "A1", "NIN": "N1", "FULL NAME": "John Smith"}]


def test_empty_csv(write_csv):
    with pytest.raises(EmptyGridError):
        read_grid(write_csv("empty.csv", ""))


def test_unsupported_suffix(temp_workdir):
    path = temp_workdir / "data" / "notes.txt"
    path.write_text("SSID\n", encoding="utf-8")
    with pytest.raises(UnsupportedFileError):
        read_grid(path)


def test_default_export_name():
    today = date(2026, 3, 1)
    assert default_export_name("batch7.xlsx", None, today) == "batch7_Validated_All_2026-03-01.xlsx"
    assert (
        default_export_name("batch7.csv", MatchStatus.PARTIAL_MATCH, today, suffix=".csv")
        == "batch7_Validated_Partial_Match_2026-03-01.csv"
    )
    assert default_export_name(None, MatchStatus.VALID, today) == "Validation_Results_Validated_Valid_2026-03-01.xlsx"


def _report() -> ReconciliationReport:
    results = [
        {"SSID": "A1", "Match Status": "Valid", "Match Reason": "Verified (100% name match)",
         "Matched Name": "john", "Correct SSID": "a1", "Correct NIN": ""},
        {"SSID": "Z9", "Match Status": "Invalid", "Match Reason": "No record found",
         "Matched Name": "", "Correct SSID": "", "Correct NIN": ""},
    ]
    return ReconciliationReport(
        headers=["SSID", "Match Status", "Match Reason", "Matched Name", "Correct SSID", "Correct NIN"],
        results=results,
        outcomes=[],
        summary=ReconciliationSummary(total=2, valid=1, invalid=1, partial_match=0),
    )


def test_write_results_csv(temp_workdir):
    out = temp_workdir / "output" / "r.csv"
    assert write_results(_report(), out) == 2
    df = pd.read_csv(out, dtype=str, keep_default_na=False)
    assert list(df.columns)[:2] == ["SSID", "Match Status"]
    assert list(df["Match Status"]) == ["Valid", "Invalid"]


def test_write_results_xlsx_filtered(temp_workdir):
    out = temp_workdir / "output" / "r.xlsx"
    assert write_results(_report(), out, status_filter=MatchStatus.INVALID) == 1
    df = pd.read_excel(out, sheet_name="Results", dtype=str)
    assert list(df["SSID"]) == ["Z9"]


def test_write_results_nothing_to_write(temp_workdir):
    out = temp_workdir / "output" / "none.csv"
    assert write_results(_report(), out, status_filter=MatchStatus.PARTIAL_MATCH) == 0
    assert not out.exists()
