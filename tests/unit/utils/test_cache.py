import pytest

from journey.utils.cache import CatalogCache


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class _Loader:
    def __init__(self, *items):
        self.items = list(items)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return list(self.items)


@pytest.fixture
def clock():
    return _Clock()


@pytest.mark.unit
def test_fetch_loads_once_and_counts_hits(clock):
    cache = CatalogCache(maxsize=4, ttl=10, clock=clock)
    loader = _Loader("a", "b")

    assert cache.fetch(("top_tracks", "ar-1", "US"), loader) == ["a", "b"]
    assert cache.fetch(("top_tracks", "ar-1", "US"), loader) == ["a", "b"]

    assert loader.calls == 1
    assert (cache.hits, cache.misses) == (1, 1)


@pytest.mark.unit
def test_returned_lists_do_not_alias_the_entry(clock):
    cache = CatalogCache(clock=clock)
    cache.fetch(("related_artists", "seed"), _Loader(1, 2)).append(3)

    assert cache.fetch(("related_artists", "seed"), _Loader()) == [1, 2]


@pytest.mark.unit
def test_entries_expire(clock):
    cache = CatalogCache(maxsize=4, ttl=10, clock=clock)
    loader = _Loader("v")
    cache.fetch(("k",), loader)

    clock.now += 9.5
    cache.fetch(("k",), loader)
    assert loader.calls == 1
    clock.now += 1
    cache.fetch(("k",), loader)
    assert loader.calls == 2


@pytest.mark.unit
def test_failed_load_is_not_stored(clock):
    cache = CatalogCache(clock=clock)

    def boom():
        raise RuntimeError("down")

    with pytest.raises(RuntimeError):
        cache.fetch(("k",), boom)

    assert len(cache) == 0
    assert cache.fetch(("k",), _Loader("ok")) == ["ok"]


@pytest.mark.unit
def test_least_recently_used_is_evicted(clock):
    cache = CatalogCache(maxsize=2, ttl=10, clock=clock)
    cache.fetch(("a",), _Loader(1))
    cache.fetch(("b",), _Loader(2))
    cache.fetch(("a",), _Loader())
    cache.fetch(("c",), _Loader(3))

    reload_b = _Loader(20)
    assert cache.fetch(("b",), reload_b) == [20]
    assert reload_b.calls == 1


@pytest.mark.unit
def test_invalidate_by_kind(clock):
    cache = CatalogCache(clock=clock)
    cache.fetch(("top_tracks", "a", "US"), _Loader(1))
    cache.fetch(("related_artists", "a"), _Loader(2))

    cache.invalidate("top_tracks")
    assert len(cache) == 1
    cache.invalidate()
    assert len(cache) == 0


@pytest.mark.unit
@pytest.mark.parametrize("kwargs", [{"maxsize": 0}, {"ttl": 0}])
def test_invalid_construction(kwargs):
    with pytest.raises(ValueError):
        CatalogCache(**kwargs)
