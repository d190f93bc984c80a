"""Tests for candle cache backends (Parquet and Memory)."""

import os
import shutil
import time
from datetime import date

import pytest

from cloudquant.cache import MemoryCache, NoCache, ParquetCache, create_cache
from cloudquant.models.candle import Candle


class TestNoCache:
    def test_always_misses(self, sample_candles):
        cache = NoCache()
        assert cache.get_candles("AAPL", "D", 30) is None
        cache.store_candles("AAPL", sample_candles, "D", 30)
        assert cache.get_candles("AAPL", "D", 30) is None
        assert not cache.has_data("AAPL", "D", 30)


class TestParquetCache:
    @pytest.fixture
    def cache(self, tmp_path):
        return ParquetCache(tmp_path / "cache")

    def test_store_and_retrieve(self, cache, sample_candles):
        cache.store_candles("AAPL", sample_candles, "D", 30)
        assert cache.has_data("AAPL", "D", 30)

        result = cache.get_candles("AAPL", "D", 30)
        assert result == sample_candles

    def test_unix_times_survive(self, cache):
        candles = [
            Candle(time=1704067200, open=1.0, high=2.0, low=0.5, close=1.5, volume=None),
            Candle(time=1704153600, open=1.5, high=2.5, low=1.0, close=2.0, volume=None),
        ]
        cache.store_candles("TSLA", candles, "D", 2)
        result = cache.get_candles("TSLA", "D", 2)
        assert result is not None
        assert [c.time for c in result] == [1704067200, 1704153600]
        assert all(c.volume is None for c in result)

    def test_miss(self, cache):
        assert cache.get_candles("AAPL", "D", 30) is None
        assert not cache.has_data("AAPL", "D", 30)

    def test_clear_symbol(self, cache, sample_candles):
        cache.store_candles("AAPL", sample_candles, "D", 30)
        cache.store_candles("MSFT", sample_candles, "D", 30)
        cache.clear("AAPL")
        assert not cache.has_data("AAPL", "D", 30)
        assert cache.has_data("MSFT", "D", 30)

    def test_new_day_is_a_miss(self, tmp_path, sample_candles):
        day = [date(2024, 1, 19)]
        cache = ParquetCache(tmp_path / "cache", today=lambda: day[0])
        cache.store_candles("AAPL", sample_candles, "D", 30)
        assert cache.get_candles("AAPL", "D", 30) == sample_candles

        day[0] = date(2024, 1, 20)
        assert cache.get_candles("AAPL", "D", 30) is None

    def test_store_removes_earlier_days(self, tmp_path, sample_candles):
        day = [date(2024, 1, 19)]
        cache = ParquetCache(tmp_path / "cache", today=lambda: day[0])
        cache.store_candles("AAPL", sample_candles, "D", 30)
        day[0] = date(2024, 1, 20)
        cache.store_candles("AAPL", sample_candles[:2], "D", 30)

        files = sorted(p.name for p in (tmp_path / "cache" / "AAPL").iterdir())
        assert files == ["D_30d_2024-01-20.parquet"]

    def test_ttl_expiry_by_mtime(self, tmp_path, sample_candles):
        cache = ParquetCache(tmp_path / "cache", ttl_seconds=60)
        cache.store_candles("AAPL", sample_candles, "D", 30)
        assert cache.get_candles("AAPL", "D", 30) == sample_candles

        fp = cache._file_path("AAPL", "D", 30)
        old = time.time() - 120
        os.utime(fp, (old, old))
        assert cache.get_candles("AAPL", "D", 30) is None

    def test_survives_missing_symbol_dir(self, tmp_path, sample_candles):
        cache = ParquetCache(tmp_path / "cache")
        shutil.rmtree(tmp_path / "cache")
        assert cache.get_candles("AAPL", "D", 30) is None
        cache.store_candles("AAPL", sample_candles, "D", 30)
        assert cache.get_candles("AAPL", "D", 30) == sample_candles

    def test_factory_passes_ttl(self, tmp_path):
        cache = create_cache("parquet", str(tmp_path / "cache"), 30)
        assert isinstance(cache, ParquetCache)
        assert cache.ttl == 30

    def test_empty_candles_not_stored(self, cache):
        cache.store_candles("AAPL", [], "D", 30)
        assert not cache.has_data("AAPL", "D", 30)


class TestMemoryCache:
    def test_store_and_retrieve(self, sample_candles):
        cache = MemoryCache(ttl_seconds=60)
        cache.store_candles("AAPL", sample_candles, "D", 30)
        assert cache.get_candles("AAPL", "D", 30) == sample_candles

    def test_key_includes_range(self, sample_candles):
        cache = MemoryCache(ttl_seconds=60)
        cache.store_candles("AAPL", sample_candles, "D", 30)
        assert cache.get_candles("AAPL", "D", 7) is None

    def test_ttl_expiry(self, sample_candles):
        cache = MemoryCache(ttl_seconds=0)  # Immediate expiry
        cache.store_candles("AAPL", sample_candles, "D", 30)
        time.sleep(0.01)  # Ensure time advances
        assert cache.get_candles("AAPL", "D", 30) is None

    def test_lru_eviction(self, sample_candles):
        cache = MemoryCache(ttl_seconds=300, max_entries=2)
        cache.store_candles("AAPL", sample_candles, "D", 30)
        cache.store_candles("MSFT", sample_candles, "D", 30)
        cache.store_candles("GOOG", sample_candles, "D", 30)
        # AAPL should be evicted (LRU)
        assert cache.get_candles("AAPL", "D", 30) is None
        assert cache.get_candles("MSFT", "D", 30) is not None
        assert cache.get_candles("GOOG", "D", 30) is not None

    def test_clear_symbol(self, sample_candles):
        cache = MemoryCache(ttl_seconds=60)
        cache.store_candles("AAPL", sample_candles, "D", 30)
        cache.store_candles("MSFT", sample_candles, "D", 30)
        cache.clear("aapl")
        assert cache.get_candles("AAPL", "D", 30) is None
        assert cache.get_candles("MSFT", "D", 30) is not None


class TestCreateCache:
    def test_backends(self, tmp_path):
        assert isinstance(create_cache("memory", str(tmp_path), 60), MemoryCache)
        assert isinstance(create_cache("parquet", str(tmp_path / "c"), 60), ParquetCache)
        assert isinstance(create_cache("none", str(tmp_path), 60), NoCache)
