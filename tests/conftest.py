# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path

import pytest

from identity_recon.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging_and_env(monkeypatch):
    # handler が前テストの stdout を掴んだままにならないようリセット
    reset_logging()
    monkeypatch.delenv("RECON_DEFAULT_SOURCE", raising=False)
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def sample_config_yaml() -> str:
    return """similarity_threshold: 90
absence_policy: lenient
max_source_records: 1000
max_candidate_records: 100
reject_duplicate_candidates: false
workers: 1
cache_ttl_seconds: 600
output_directory: ./output
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "recon.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def source_records() -> list[dict]:
    return [
        {"S/N": 1, "SSID": "A1", "NIN": "N1", "FULL NAME": "John Smith"},
        {"S/N": 2, "SSID": "B2", "NIN": "N2", "FULL NAME": "Mary Okafor"},
        {"S/N": 3, "SSID": "C3", "NIN": "N3", "FULL NAME": "Ahmed Bello"},
    ]


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(name: str, text: str) -> Path:
        p = temp_workdir / "data" / name
        p.write_text(text, encoding="utf-8")
        return p
    return _write


@pytest.fixture()
def source_csv(write_csv) -> Path:
    return write_csv(
        "source.csv",
        "Pension Register Export,,\n"
        "SSID,NIN,FULL NAME\n"
        "A1,N1,John Smith\n"
        "B2,N2,Mary Okafor\n",
    )


@pytest.fixture()
def candidates_csv(write_csv) -> Path:
    return write_csv(
        "candidates.csv",
        "SSID,NIN,Full Name\n"
        "a1,N1,JOHN SMITH\n"
        "B2,N9,Mary Okafor\n"
        "ZZ9,,Jane Doe\n",
    )
