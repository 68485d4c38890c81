from __future__ import annotations

from identity_recon.matching.assembler import (
    build_headers,
    duplicate_request_result,
    find_candidate_duplicates,
    merge_result,
    summarize,
)
from identity_recon.models.validation_result import OUTPUT_KEYS, MatchStatus, ValidationResult


def test_merge_result_keeps_candidate_and_adds_output_keys():
    candidate = {"SSID": "A1", "Name": "John"}
    result = ValidationResult(
        status=MatchStatus.VALID,
        reason="Verified (100% name match)",
        matched_name="john",
        matched_ssid="a1",
        matched_nin="n1",
        similarity=100,
    )
    merged = merge_result(candidate, result)
    assert merged["SSID"] == "A1"
    assert merged["Match Status"] == "Valid"
    assert merged["Correct NIN"] == "n1"
    assert list(merged)[-len(OUTPUT_KEYS):] == list(OUTPUT_KEYS)
    # 入力は変更しない
    assert candidate == {"SSID": "A1", "Name": "John"}


def test_merge_result_invalid_blanks_matched_fields():
    merged = merge_result({"SSID": "Z"}, ValidationResult.invalid("No record found"))
    assert merged["Matched Name"] == ""
    assert merged["Correct SSID"] == ""
    assert merged["Match Reason"] == "No record found"


def test_build_headers_dedupes_preserving_order():
    headers = build_headers(["SSID", "Match Status", "Name"])
    assert headers == ["SSID", "Match Status", "Name", "Match Reason", "Matched Name", "Correct SSID", "Correct NIN"]


def test_summarize_counts_partition_total():
    outcomes = [
        ValidationResult(status=MatchStatus.VALID, reason="ok"),
        ValidationResult(status=MatchStatus.PARTIAL_MATCH, reason="Issues: SSID mismatch"),
        ValidationResult.invalid("No record found"),
        ValidationResult.invalid("System error: x", error="x"),
    ]
    s = summarize(outcomes, duplicate_candidates=0)
    assert (s.total, s.valid, s.partial_match, s.invalid) == (4, 1, 1, 2)
    assert s.valid + s.partial_match + s.invalid == s.total
    assert s.system_errors == 1
    assert s.to_dict() == {
        "total": 4,
        "valid": 1,
        "invalid": 2,
        "partialMatch": 1,
        "duplicateCandidates": 0,
        "processingErrors": 1,
    }


def test_find_candidate_duplicates():
    candidates = [
        {"SSID": "A1"},
        {"SSID": "B2"},
        {"ssn": " a1 "},
        {"Name": "no ssid"},
        {"Name": "no ssid either"},
        {"SSID": "B2"},
    ]
    assert find_candidate_duplicates(candidates) == {2: 0, 5: 1}


def test_duplicate_request_result_is_one_based():
    r = duplicate_request_result(0)
    assert r.status is MatchStatus.INVALID
    assert r.reason == "Duplicate request: SSID already submitted in row 1"
    assert not r.is_system_error
