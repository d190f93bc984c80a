"""Mock provider for simulated mode, testing and CI - no API keys required."""

from __future__ import annotations

import random
import time
from datetime import date, timedelta

from cloudquant.models.candle import Candle
from cloudquant.models.quote import Quote
from cloudquant.providers.base import BaseMarketDataProvider

DEFAULT_SYMBOL = "AAPL"

MOCK_QUOTES: dict[str, Quote] = {
    "AAPL": Quote(c=152.45, d=1.25, dp=0.82, h=153.00, l=150.50, o=151.00, pc=151.20),
    "TSLA": Quote(c=210.50, d=-2.30, dp=-1.08, h=215.00, l=208.00, o=212.00, pc=212.80),
    "NVDA": Quote(c=450.00, d=5.00, dp=1.12, h=455.00, l=445.00, o=448.00, pc=445.00),
}

START_PRICES: dict[str, float] = {
    "AAPL": 150.0,
    "TSLA": 200.0,
    "NVDA": 450.0,
}


def generate_candles(
    rng: random.Random,
    days: int,
    start_price: float,
    today: date | None = None,
) -> list[Candle]:
    """Random-walk daily candles for the ``days`` days before ``today``."""
    today = today or date.today()
    candles: list[Candle] = []
    price = start_price

    for i in range(days, 0, -1):
        day = today - timedelta(days=i)
        volatility = price * 0.02
        change = (rng.random() - 0.5) * volatility
        o = price
        c = price + change
        h = max(o, c) + rng.random() * volatility * 0.5
        l = min(o, c) - rng.random() * volatility * 0.5
        volume = int(rng.random() * 1_000_000) + 500_000

        candles.append(Candle(
            time=day.isoformat(),
            open=round(o, 2),
            high=round(h, 2),
            low=round(l, 2),
            close=round(c, 2),
            volume=volume,
        ))
        price = c

    return candles


class MockProvider(BaseMarketDataProvider):
    """Deterministic provider returning synthetic data in the live schema.

    Series are generated once per (symbol, range) from ``seed`` and reused,
    so every fetch within a process sees the same history. Unknown symbols
    get the default symbol's data. Use ``set_candles``/``set_quote`` to
    pre-load data.
    """

    def __init__(
        self,
        seed: int | None = None,
        quote_latency: float = 0.0,
        candle_latency: float = 0.0,
        default_symbol: str = DEFAULT_SYMBOL,
        today: date | None = None,
    ) -> None:
        self.seed = seed if seed is not None else random.randrange(2**32)
        self.quote_latency = quote_latency
        self.candle_latency = candle_latency
        self.default_symbol = default_symbol.upper()
        self.today = today
        self._candles: dict[str, list[Candle]] = {}
        self._generated: dict[tuple[str, int], list[Candle]] = {}
        self._quotes: dict[str, Quote] = dict(MOCK_QUOTES)

    @property
    def is_live(self) -> bool:
        return False

    # --- Pre-load helpers ---

    def set_candles(self, symbol: str, candles: list[Candle]) -> None:
        self._candles[symbol.upper()] = list(candles)

    def set_quote(self, symbol: str, quote: Quote) -> None:
        self._quotes[symbol.upper()] = quote

    # --- Provider implementation ---

    def get_quote(self, symbol: str) -> Quote:
        self._simulate_latency(self.quote_latency)
        key = symbol.upper()
        if key in self._quotes:
            return self._quotes[key]
        return self._quotes.get(self.default_symbol, MOCK_QUOTES[DEFAULT_SYMBOL])

    def get_candles(
        self,
        symbol: str,
        resolution: str = "D",
        range_days: int = 30,
    ) -> list[Candle]:
        self._simulate_latency(self.candle_latency)
        key = symbol.upper()
        if key in self._candles:
            return list(self._candles[key])
        if key not in START_PRICES:
            key = self.default_symbol
        return list(self._series(key, range_days))

    # --- Synthetic data generation ---

    def _series(self, symbol: str, range_days: int) -> list[Candle]:
        cache_key = (symbol, range_days)
        if cache_key not in self._generated:
            rng = random.Random(f"{self.seed}:{symbol}:{range_days}")
            start_price = START_PRICES.get(symbol, START_PRICES[DEFAULT_SYMBOL])
            self._generated[cache_key] = generate_candles(
                rng, range_days, start_price, today=self.today,
            )
        return self._generated[cache_key]

    @staticmethod
    def _simulate_latency(seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
