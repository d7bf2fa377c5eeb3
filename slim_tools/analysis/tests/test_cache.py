"""Tests for the version-guarded LRU document cache."""

from lsprotocol import types as lsp

from slim_tools.analysis.cache import DocumentCache
from slim_tools.analysis.tracker import TrackingState


def diag(message: str = "d") -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=0, character=1)),
        message=message,
    )


# --- Version guard ---

class TestVersionGuard:
    def test_hit_same_version_miss_other(self):
        cache = DocumentCache()
        state = TrackingState(defined_constants={"K"})
        cache.set_tracking_state("file:///a.slim", 1, state)
        assert cache.get_tracking_state("file:///a.slim", 1) is state
        assert cache.get_tracking_state("file:///a.slim", 2) is None

    def test_unknown_uri(self):
        assert DocumentCache().get_diagnostics("file:///none.slim", 1) is None

    def test_fields_are_independent(self):
        cache = DocumentCache()
        cache.set_tracking_state("u", 1, TrackingState())
        assert cache.get_diagnostics("u", 1) is None
        cache.set_diagnostics("u", 1, [diag()])
        assert cache.get_tracking_state("u", 1) is not None
        assert len(cache.get_diagnostics("u", 1)) == 1

    def test_empty_diagnostics_are_a_hit(self):
        cache = DocumentCache()
        cache.set_diagnostics("u", 1, [])
        assert cache.get_diagnostics("u", 1) == []
        assert cache.stats().hits == 1

    def test_newer_version_replaces_entry(self):
        cache = DocumentCache()
        cache.set_tracking_state("u", 1, TrackingState())
        cache.set_diagnostics("u", 1, [diag()])
        cache.set_tracking_state("u", 2, TrackingState())
        assert cache.get_diagnostics("u", 2) is None
        assert cache.get_diagnostics("u", 1) is None

    def test_stale_write_ignored(self):
        cache = DocumentCache()
        cache.set_diagnostics("u", 3, [diag("new")])
        cache.set_diagnostics("u", 2, [diag("old")])
        assert cache.get_diagnostics("u", 2) is None
        assert cache.get_diagnostics("u", 3)[0].message == "new"


# --- LRU ---

class TestEviction:
    def test_evicts_least_recently_used(self):
        cache = DocumentCache(capacity=2)
        cache.set_diagnostics("a", 1, [])
        cache.set_diagnostics("b", 1, [])
        cache.get_diagnostics("a", 1)
        cache.set_diagnostics("c", 1, [])
        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache
        assert cache.stats().evictions == 1

    def test_update_does_not_evict(self):
        cache = DocumentCache(capacity=2)
        cache.set_diagnostics("a", 1, [])
        cache.set_diagnostics("b", 1, [])
        cache.set_diagnostics("a", 2, [])
        assert len(cache) == 2
        assert cache.stats().evictions == 0

    def test_write_refreshes_recency(self):
        cache = DocumentCache(capacity=2)
        cache.set_diagnostics("a", 1, [])
        cache.set_diagnostics("b", 1, [])
        cache.set_tracking_state("a", 1, TrackingState())
        cache.set_diagnostics("c", 1, [])
        assert cache.stats().entries == ("a", "c")

    def test_zero_capacity_stores_nothing(self):
        cache = DocumentCache(capacity=0)
        cache.set_diagnostics("a", 1, [])
        assert len(cache) == 0
        assert cache.get_diagnostics("a", 1) is None


# --- Maintenance ---

class TestMaintenance:
    def test_delete(self):
        cache = DocumentCache()
        cache.set_diagnostics("a", 1, [])
        cache.delete("a")
        cache.delete("missing")
        assert "a" not in cache

    def test_stats(self):
        cache = DocumentCache(capacity=5)
        cache.set_diagnostics("a", 1, [])
        cache.get_diagnostics("a", 1)
        cache.get_diagnostics("a", 2)
        cache.get_diagnostics("b", 1)
        stats = cache.stats()
        assert stats.size == 1
        assert stats.entries == ("a",)
        assert stats.capacity == 5
        assert (stats.hits, stats.misses) == (1, 2)
        assert stats.hit_rate == 1 / 3

    def test_hit_rate_without_lookups(self):
        assert DocumentCache().stats().hit_rate == 0.0

    def test_clear(self):
        cache = DocumentCache()
        cache.set_diagnostics("a", 1, [])
        cache.get_diagnostics("a", 1)
        cache.clear()
        stats = cache.stats()
        assert stats.size == 0
        assert stats.hits == stats.misses == stats.evictions == 0
