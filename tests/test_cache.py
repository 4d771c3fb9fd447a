"""Tests for the parsed-name LRU cache."""
import threading

import pytest

from plantmatch.matching.cache import ParsedNameCache
from plantmatch.matching.name_parser import parse_plant_name


def test_parse_through_cache():
    cache = ParsedNameCache(max_size=10)
    first = cache.parse("Pinus mugo 'Mops'")
    second = cache.parse("Pinus mugo 'Mops'")
    assert first == second == parse_plant_name("Pinus mugo 'Mops'")
    assert cache.misses == 1
    assert cache.hits == 1
    assert len(cache) == 1


def test_evicts_least_recently_used():
    cache = ParsedNameCache(max_size=2)
    cache.parse("Acer rubrum")
    cache.parse("Betula pendula")
    cache.get("Acer rubrum")  # touch, Betula is now oldest
    cache.parse("Carpinus betulus")
    assert "Acer rubrum" in cache
    assert "Carpinus betulus" in cache
    assert "Betula pendula" not in cache
    assert len(cache) == 2


def test_get_missing_returns_none():
    cache = ParsedNameCache()
    assert cache.get("Quercus robur") is None
    assert cache.misses == 1


def test_clear():
    cache = ParsedNameCache()
    cache.parse("Quercus robur")
    cache.clear()
    assert len(cache) == 0
    assert cache.hits == 0


def test_rejects_zero_size():
    with pytest.raises(ValueError):
        ParsedNameCache(max_size=0)


def test_shared_between_threads():
    cache = ParsedNameCache(max_size=50)
    names = [f"Acer palmatum 'Form {i}'" for i in range(200)]
    sizes = []

    def worker():
        for name in names:
            cache.parse(name)
            sizes.append(len(cache))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(cache) == 50
    assert max(sizes) <= 50
    assert names[-1] in cache
