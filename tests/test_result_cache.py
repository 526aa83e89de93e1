from models.search import AnalysisMode, DateRange, SearchQuery, SourceKind
from tools.web.cache import ResultCache, build_cache_key


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _query(**overrides) -> SearchQuery:
    base = dict(
        text="fusion energy",
        source_kind=SourceKind.NEWS,
        max_results=5,
        analysis_mode=AnalysisMode.COMPREHENSIVE,
    )
    base.update(overrides)
    return SearchQuery(**base)


def test_get_returns_stored_value():
    cache = ResultCache()
    cache.set("k", {"answer": 42})
    assert cache.get("k") == {"answer": 42}
    assert cache.get("missing") is None


def test_expired_entry_is_absent_and_removed():
    clock = FakeClock()
    cache = ResultCache(ttl_seconds=30 * 60, clock=clock)
    cache.set("k", "value")

    clock.now = 30 * 60
    assert cache.get("k") == "value"

    clock.now = 30 * 60 + 1
    assert cache.get("k") is None
    assert cache.size == 0


def test_overflow_evicts_earliest_inserted_entry():
    cache = ResultCache(max_size=100)
    for i in range(100):
        cache.set(f"key-{i}", i)

    cache.set("key-100", 100)

    assert cache.size == 100
    assert cache.get("key-0") is None
    assert cache.get("key-1") == 1
    assert cache.get("key-100") == 100


def test_eviction_ignores_reads():
    cache = ResultCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)
    assert cache.get("a") is None
    assert cache.get("b") == 2


def test_resetting_existing_key_does_not_evict_others():
    cache = ResultCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    assert cache.size == 2
    assert cache.get("a") == 10
    assert cache.get("b") == 2


def test_clear_empties_cache():
    cache = ResultCache()
    cache.set("a", 1)
    cache.clear()
    assert cache.size == 0


def test_cache_key_covers_every_result_parameter():
    base = build_cache_key(_query())
    assert base == build_cache_key(_query())
    assert base.endswith(":comprehensive")

    variants = [
        _query(text="fusion power"),
        _query(source_kind=SourceKind.WEB),
        _query(max_results=6),
        _query(handles=("nasa",)),
        _query(date_range=DateRange(from_date="2024-01-01")),
        _query(date_range=DateRange(to_date="2024-01-01")),
    ]
    assert len({build_cache_key(q) for q in variants} | {base}) == len(variants) + 1
