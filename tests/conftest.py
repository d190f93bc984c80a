"""Shared fixtures for cloudquant tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from cloudquant.config import DashboardConfig
from cloudquant.models.candle import Candle
from cloudquant.models.quote import Quote
from cloudquant.models.trade import Trade, TradeSide, TradeStatus
from cloudquant.providers.mock import MockProvider


@pytest.fixture
def mock_config(tmp_path) -> DashboardConfig:
    """Simulated mode, no latency, local store under tmp_path."""
    return DashboardConfig(
        data_dir=str(tmp_path / "data"),
        cache_backend="none",
        poll_interval_seconds=0.02,
        mock_seed=42,
        mock_quote_latency=0.0,
        mock_candle_latency=0.0,
        mock_write_latency=0.0,
    )


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider(seed=42)


@pytest.fixture
def sample_candles() -> list[Candle]:
    """5 consecutive daily candles."""
    candles = []
    for i in range(5):
        candles.append(Candle(
            time=f"2024-01-{15 + i:02d}",
            open=150.0 + i,
            high=152.0 + i,
            low=149.0 + i,
            close=151.0 + i,
            volume=1_000_000 + i * 1000,
        ))
    return candles


@pytest.fixture
def sample_quote() -> Quote:
    return Quote(c=152.45, d=1.25, dp=0.82, h=153.0, l=150.5, o=151.0, pc=151.2)


def make_quote(price: float) -> Quote:
    return Quote(c=price, d=0.0, dp=0.0, h=price, l=price, o=price, pc=price)


def make_trade(
    symbol: str,
    price: float,
    quantity: int,
    side: TradeSide = TradeSide.BUY,
    timestamp: int = 1_700_000_000_000,
    trade_id: str | None = None,
) -> Trade:
    return Trade(
        id=trade_id or f"{symbol}-{timestamp}",
        symbol=symbol,
        side=side,
        price=price,
        quantity=quantity,
        timestamp=timestamp,
        status=TradeStatus.FILLED,
    )
