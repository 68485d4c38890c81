from __future__ import annotations

from identity_recon.services.source_cache import SourceCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_hit_within_ttl():
    clock = FakeClock()
    cache: SourceCache[int] = SourceCache(600, clock=clock)
    calls = []

    def loader() -> int:
        calls.append(1)
        return len(calls)

    assert cache.get("src", loader) == 1
    clock.now = 599.0
    assert cache.get("src", loader) == 1
    assert len(calls) == 1


def test_rebuild_after_expiry():
    clock = FakeClock()
    cache: SourceCache[str] = SourceCache(10, clock=clock)
    values = iter(["first", "second"])
    assert cache.get("k", lambda: next(values)) == "first"
    clock.now = 10.0
    assert cache.get("k", lambda: next(values)) == "second"


def test_keys_are_independent():
    cache: SourceCache[str] = SourceCache(60, clock=FakeClock())
    assert cache.get("a", lambda: "A") == "A"
    assert cache.get("b", lambda: "B") == "B"
    assert len(cache) == 2
    assert "a" in cache


def test_invalidate_and_clear():
    cache: SourceCache[str] = SourceCache(60, clock=FakeClock())
    cache.get("a", lambda: "A")
    cache.get("b", lambda: "B")
    cache.invalidate("a")
    assert "a" not in cache
    cache.invalidate("missing")
    cache.clear()
    assert len(cache) == 0


def test_loader_error_leaves_cache_empty():
    cache: SourceCache[str] = SourceCache(60, clock=FakeClock())

    def failing() -> str:
        raise OSError("unreadable")

    try:
        cache.get("a", failing)
    except OSError:
        pass
    assert "a" not in cache
