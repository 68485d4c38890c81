from __future__ import annotations

import json
from pathlib import Path

from identity_recon.cli.__main__ import main as cli_main

ALLOWED_KEYS = {"timestamp", "dataset", "row", "error_type", "message"}
ALLOWED_TYPES = {"SOURCE_DUPLICATE_SSID", "CANDIDATE_DUPLICATE", "SYSTEM_ERROR"}


def _issue_lines() -> list[dict]:
    files = sorted(Path("logs").glob("issues-*.log"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]


def test_issue_log_schema(write_csv, candidates_csv, capsys):
    source = write_csv(
        "dup_source.csv",
        "SSID,NIN,FULL NAME\nA1,N1,John Smith\nA1,N5,Someone Else\nB2,N2,Mary Okafor\n",
    )
    cands = write_csv(
        "dup_cands.csv",
        "SSID,NIN,Full Name\nA1,N1,John Smith\nA1,N1,John Smith\n",
    )
    code = cli_main(["validate", str(cands), "--source", str(source), "--reject-duplicates"])
    assert code == 0
    records = _issue_lines()
    assert [r["error_type"] for r in records] == ["SOURCE_DUPLICATE_SSID", "CANDIDATE_DUPLICATE"]
    for r in records:
        assert set(r) == ALLOWED_KEYS
        assert r["error_type"] in ALLOWED_TYPES
        assert isinstance(r["row"], int)
        assert r["dataset"] in {"source", "candidates"}
    out = capsys.readouterr().out
    assert "WARN Duplicate SSID 'a1' in source row 2" in out
    assert "duplicates=1 warnings=1" in out
    assert "candidates/CANDIDATE_DUPLICATE=1 source/SOURCE_DUPLICATE_SSID=1" in out


def test_no_issue_log_when_clean(source_csv, candidates_csv, temp_workdir):
    assert cli_main(["validate", str(candidates_csv), "--source", str(source_csv)]) == 0
    assert not (temp_workdir / "logs").exists()
