"""Dashboard configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CacheBackendType(Enum):
    """Candle-history cache backends."""

    MEMORY = "memory"
    PARQUET = "parquet"
    NONE = "none"


class LedgerBackendType(Enum):
    """Trade ledger backing stores."""

    DURABLE = "durable"
    LOCAL = "local"


@dataclass
class DashboardConfig:
    """Configuration resolved once at startup and injected into components.

    Attributes:
        finnhub_api_key: Finnhub API key. Its presence selects live mode.
        ledger_config: JSON blob describing the durable trade store
            (``{"uri": ..., "database": ..., "collection": ...}``). Its
            presence selects the durable ledger backend.
        data_dir: Directory holding the local fallback trade store.
        cache_backend: Candle cache type: "memory", "parquet", or "none".
        cache_dir: Directory for parquet cache files.
        cache_ttl_seconds: TTL for in-memory cache entries.
        validate: Whether to run quality checks on live candle responses.
        poll_interval_seconds: Quote polling cadence.
        candle_resolution: Resolution passed through to the candle provider.
        candle_range_days: How many days of history to load.
        symbols: Symbols offered by the dashboard.
        default_symbol: Symbol active on startup and the mock fallback symbol.
        mock_seed: Seed for synthetic data; None draws one per process.
        mock_quote_latency: Simulated latency of a mock quote fetch.
        mock_candle_latency: Simulated latency of a mock candle fetch.
        mock_write_latency: Simulated latency of a local ledger write.
        log_level: Level for the ``cloudquant`` logger.
    """

    finnhub_api_key: str | None = None
    ledger_config: str | None = None
    data_dir: str = "data"

    cache_backend: str = "memory"
    cache_dir: str = "data/cache"
    cache_ttl_seconds: int = 60
    validate: bool = True

    poll_interval_seconds: float = 5.0
    candle_resolution: str = "D"
    candle_range_days: int = 30
    symbols: tuple[str, ...] = ("AAPL", "TSLA", "NVDA")
    default_symbol: str = "AAPL"

    mock_seed: int | None = None
    mock_quote_latency: float = 0.4
    mock_candle_latency: float = 0.6
    mock_write_latency: float = 0.8

    log_level: str = "INFO"

    @property
    def live_mode(self) -> bool:
        """True when a market-data credential is configured."""
        return bool(self.finnhub_api_key)

    @property
    def ledger_backend(self) -> LedgerBackendType:
        if self.ledger_config:
            return LedgerBackendType.DURABLE
        return LedgerBackendType.LOCAL

    @property
    def durable_ledger(self) -> bool:
        return self.ledger_backend is LedgerBackendType.DURABLE
