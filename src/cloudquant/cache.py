"""Cache backends for candle history - Parquet (disk) and Memory (TTL)."""

from __future__ import annotations

import shutil
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import date
from pathlib import Path
from typing import Callable

import pandas as pd

from cloudquant.models.candle import Candle


class CacheBackend(ABC):
    """Abstract cache interface keyed by (symbol, resolution, range_days)."""

    @abstractmethod
    def get_candles(
        self, symbol: str, resolution: str, range_days: int,
    ) -> list[Candle] | None:
        """Return cached candles, or None on miss."""
        ...

    @abstractmethod
    def store_candles(
        self, symbol: str, candles: list[Candle], resolution: str, range_days: int,
    ) -> None:
        """Store candles in cache."""
        ...

    @abstractmethod
    def has_data(self, symbol: str, resolution: str, range_days: int) -> bool:
        ...

    @abstractmethod
    def clear(self, symbol: str) -> None:
        ...


class NoCache(CacheBackend):
    """No-op cache - always misses."""

    def get_candles(self, symbol, resolution, range_days):  # type: ignore[override]
        return None

    def store_candles(self, symbol, candles, resolution, range_days):  # type: ignore[override]
        pass

    def has_data(self, symbol, resolution, range_days):  # type: ignore[override]
        return False

    def clear(self, symbol):  # type: ignore[override]
        pass


class ParquetCache(CacheBackend):
    """Disk-based cache using Parquet files with Snappy compression.

    Storage layout:
    ``{base_path}/{SYMBOL}/{resolution}_{range_days}d_{end_date}.parquet``

    ``end_date`` is the day the history was fetched, so a new day is a new
    key. Files older than ``ttl_seconds`` (by mtime) are misses as well.
    Storing a series removes that symbol's files for earlier days.

    Candle times are stored as strings so ISO dates and unix timestamps
    survive the round trip; ``time_is_int`` records which one it was.

    Args:
        base_path: Cache root directory.
        ttl_seconds: Maximum file age; None disables the age check.
        today: Override the current date (tests).
    """

    def __init__(
        self,
        base_path: Path | str,
        ttl_seconds: int | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.ttl = ttl_seconds
        self._today = today

    def _symbol_dir(self, symbol: str) -> Path:
        return self.base_path / symbol.upper()

    def _file_path(self, symbol: str, resolution: str, range_days: int) -> Path:
        end = self._today().isoformat()
        return self._symbol_dir(symbol) / f"{resolution}_{range_days}d_{end}.parquet"

    def _expired(self, fp: Path) -> bool:
        if self.ttl is None:
            return False
        return time.time() - fp.stat().st_mtime > self.ttl

    def get_candles(
        self, symbol: str, resolution: str, range_days: int,
    ) -> list[Candle] | None:
        fp = self._file_path(symbol, resolution, range_days)
        if not fp.exists() or self._expired(fp):
            return None

        try:
            df = pd.read_parquet(fp)
            return self._df_to_candles(df)
        except Exception:
            # A corrupt cache file is a miss; the caller refetches
            return None

    def store_candles(
        self, symbol: str, candles: list[Candle], resolution: str, range_days: int,
    ) -> None:
        if not candles:
            return
        fp = self._file_path(symbol, resolution, range_days)
        fp.parent.mkdir(parents=True, exist_ok=True)
        for old in fp.parent.glob(f"{resolution}_{range_days}d_*.parquet"):
            if old != fp:
                old.unlink()
        df = self._candles_to_df(candles)
        df.to_parquet(fp, compression="snappy")

    def has_data(self, symbol: str, resolution: str, range_days: int) -> bool:
        return self._file_path(symbol, resolution, range_days).exists()

    def clear(self, symbol: str) -> None:
        symbol_dir = self._symbol_dir(symbol)
        if symbol_dir.exists():
            shutil.rmtree(symbol_dir)

    # ---- helpers ----

    @staticmethod
    def _candles_to_df(candles: list[Candle]) -> pd.DataFrame:
        records = [
            {
                "time": str(c.time),
                "time_is_int": not isinstance(c.time, str),
                "open": c.open,
                "high": c.high,
                "low": c.low,
                "close": c.close,
                "volume": c.volume,
            }
            for c in candles
        ]
        return pd.DataFrame(records)

    @staticmethod
    def _df_to_candles(df: pd.DataFrame) -> list[Candle]:
        candles: list[Candle] = []
        for _, row in df.iterrows():
            raw_time = row["time"]
            candles.append(Candle(
                time=int(raw_time) if bool(row["time_is_int"]) else str(raw_time),
                open=float(row["open"]),
                high=float(row["high"]),
                low=float(row["low"]),
                close=float(row["close"]),
                volume=int(row["volume"]) if pd.notna(row.get("volume")) else None,
            ))
        return candles


class MemoryCache(CacheBackend):
    """In-memory TTL cache for candle history.

    Uses LRU eviction when ``max_entries`` is exceeded.
    """

    def __init__(self, ttl_seconds: int = 60, max_entries: int = 100) -> None:
        self.ttl = ttl_seconds
        self.max_entries = max_entries
        self._store: OrderedDict[str, tuple[float, list[Candle]]] = OrderedDict()

    def _key(self, symbol: str, resolution: str, range_days: int) -> str:
        return f"{symbol.upper()}|{resolution}|{range_days}"

    def _evict_expired(self) -> None:
        now = time.monotonic()
        expired = [k for k, (ts, _) in self._store.items() if now - ts > self.ttl]
        for k in expired:
            del self._store[k]

    def _evict_lru(self) -> None:
        while len(self._store) > self.max_entries:
            self._store.popitem(last=False)

    def get_candles(
        self, symbol: str, resolution: str, range_days: int,
    ) -> list[Candle] | None:
        self._evict_expired()
        key = self._key(symbol, resolution, range_days)
        entry = self._store.get(key)
        if entry is None:
            return None
        ts, candles = entry
        if time.monotonic() - ts > self.ttl:
            del self._store[key]
            return None
        self._store.move_to_end(key)  # refresh LRU position
        return list(candles)

    def store_candles(
        self, symbol: str, candles: list[Candle], resolution: str, range_days: int,
    ) -> None:
        key = self._key(symbol, resolution, range_days)
        self._store[key] = (time.monotonic(), list(candles))
        self._store.move_to_end(key)
        self._evict_lru()

    def has_data(self, symbol: str, resolution: str, range_days: int) -> bool:
        self._evict_expired()
        return self._key(symbol, resolution, range_days) in self._store

    def clear(self, symbol: str) -> None:
        prefix = f"{symbol.upper()}|"
        keys = [k for k in self._store if k.startswith(prefix)]
        for k in keys:
            del self._store[k]


def create_cache(backend: str, cache_dir: str, ttl_seconds: int) -> CacheBackend:
    """Build the cache named by ``DashboardConfig.cache_backend``."""
    if backend == "parquet":
        return ParquetCache(cache_dir, ttl_seconds=ttl_seconds)
    if backend == "memory":
        return MemoryCache(ttl_seconds=ttl_seconds)
    return NoCache()
