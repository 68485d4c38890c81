from __future__ import annotations

from identity_recon.matching.index import build_index


def test_index_by_ssid_and_nin(source_records):
    idx = build_index(source_records)
    assert idx.record_count == 3
    assert set(idx.by_ssid) == {"a1", "b2", "c3"}
    assert set(idx.by_nin) == {"n1", "n2", "n3"}
    assert idx.by_ssid["b2"] is source_records[1]
    assert idx.warnings == []


def test_duplicate_ssid_keeps_first_and_warns():
    source = [
        {"SSID": "X1", "NIN": "N1", "Name": "First Person"},
        {"SSID": "x1 ", "NIN": "N2", "Name": "Second Person"},
    ]
    idx = build_index(source)
    assert idx.by_ssid["x1"] is source[0]
    assert len(idx.duplicates) == 1
    dup = idx.duplicates[0]
    assert dup.row == 2
    assert dup.first_row == 1
    assert "x1" in dup.warning
    assert "second person" in dup.warning
    # 重複レコードの NIN は副キーとして索引される
    assert idx.by_nin["n2"] is source[1]


def test_duplicate_nin_is_silent():
    source = [
        {"SSID": "A", "NIN": "N1", "Name": "One"},
        {"SSID": "B", "NIN": "N1", "Name": "Two"},
    ]
    idx = build_index(source)
    assert idx.by_nin["n1"] is source[0]
    assert idx.warnings == []


def test_record_without_identifiers_not_indexed():
    idx = build_index([{"Name": "Ghost"}, {"SSID": "A", "Name": "Real"}])
    assert idx.record_count == 2
    assert list(idx.by_ssid) == ["a"]
    assert len(idx.by_nin) == 0


def test_index_maps_are_read_only(source_records):
    idx = build_index(source_records)
    try:
        idx.by_ssid["zz"] = {}  # type: ignore[index]
    except TypeError:
        pass
    else:  # pragma: no cover
        raise AssertionError("index should be read-only")
