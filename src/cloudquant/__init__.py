"""cloudquant - market-data aggregation and portfolio valuation core.

Keeps a candle series current from polled quotes, records simulated
trades in an append-only ledger, and values the resulting portfolio.
Runs against Finnhub when a key is configured and against a
deterministic mock otherwise.

Quick start::

    from cloudquant import create_session_from_env
    session = create_session_from_env()
    candles = await session.select_symbol("AAPL")
"""

from __future__ import annotations

import os

from cloudquant.aggregator import CandleAggregator
from cloudquant.config import CacheBackendType, DashboardConfig, LedgerBackendType
from cloudquant.errors import (
    CollisionError,
    DashboardError,
    DashboardErrorCode,
    FetchError,
    InvalidSeries,
    PersistenceError,
)
from cloudquant.ledger import LocalTradeStore, MongoTradeStore, TradeLedger, TradeStore
from cloudquant.log import get_logger, setup_logger
from cloudquant.models.candle import Candle
from cloudquant.models.holding import Holding, PortfolioSummary
from cloudquant.models.quote import Quote
from cloudquant.models.trade import Trade, TradeCandidate, TradeSide, TradeStatus
from cloudquant.polling import PollingController
from cloudquant.session import TradingSession
from cloudquant.sources import CandleSource, DataSource, QuoteSource
from cloudquant.valuation import PortfolioValuator, summarize, valuate

__version__ = "0.1.0"

__all__ = [
    # Session
    "TradingSession",
    "create_session_from_env",
    "config_from_env",
    # Core components
    "CandleAggregator",
    "PollingController",
    "TradeLedger",
    "PortfolioValuator",
    "valuate",
    "summarize",
    # Sources and stores
    "DataSource",
    "QuoteSource",
    "CandleSource",
    "TradeStore",
    "LocalTradeStore",
    "MongoTradeStore",
    # Config
    "DashboardConfig",
    "CacheBackendType",
    "LedgerBackendType",
    # Errors
    "DashboardError",
    "DashboardErrorCode",
    "FetchError",
    "InvalidSeries",
    "PersistenceError",
    "CollisionError",
    # Models
    "Candle",
    "Quote",
    "Trade",
    "TradeCandidate",
    "TradeSide",
    "TradeStatus",
    "Holding",
    "PortfolioSummary",
    # Logging
    "setup_logger",
    "get_logger",
]


def config_from_env() -> DashboardConfig:
    """Resolve ``DashboardConfig`` from environment variables.

    Environment variables:
        FINNHUB_API_KEY: Finnhub API key; enables live market data.
        CLOUDQUANT_LEDGER_CONFIG: JSON blob for the durable trade store.
        CLOUDQUANT_DATA_DIR: Local trade store directory (default: "data").
        CLOUDQUANT_CACHE: Candle cache - "memory", "parquet", "none" (default: "memory").
        CLOUDQUANT_CACHE_DIR: Parquet cache directory (default: "data/cache").
        CLOUDQUANT_POLL_INTERVAL: Quote polling interval in seconds (default: 5).
        CLOUDQUANT_MOCK_SEED: Seed for simulated data (default: random per process).
        CLOUDQUANT_LOG_LEVEL: Log level (default: "INFO").
    """
    seed = os.getenv("CLOUDQUANT_MOCK_SEED")
    return DashboardConfig(
        finnhub_api_key=os.getenv("FINNHUB_API_KEY") or None,
        ledger_config=os.getenv("CLOUDQUANT_LEDGER_CONFIG") or None,
        data_dir=os.getenv("CLOUDQUANT_DATA_DIR", "data"),
        cache_backend=CacheBackendType(os.getenv("CLOUDQUANT_CACHE", "memory")).value,
        cache_dir=os.getenv("CLOUDQUANT_CACHE_DIR", "data/cache"),
        poll_interval_seconds=float(os.getenv("CLOUDQUANT_POLL_INTERVAL", "5")),
        mock_seed=int(seed) if seed else None,
        log_level=os.getenv("CLOUDQUANT_LOG_LEVEL", "INFO"),
    )


def create_session_from_env() -> TradingSession:
    """Zero-config factory: configure logging and build a session from env vars."""
    config = config_from_env()
    setup_logger(config.log_level)
    return TradingSession(config)
