"""Abstract base class for market data providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cloudquant.models.candle import Candle
from cloudquant.models.quote import Quote


class BaseMarketDataProvider(ABC):
    """Abstract base for all market data providers.

    Providers raise ``FetchError`` on any failure; the fallback policy that
    turns failures into mock data lives in ``cloudquant.sources``.
    """

    # --- Real-time ---

    @abstractmethod
    def get_quote(self, symbol: str) -> Quote:
        """Get the current quote for a symbol."""
        ...

    # --- Historical candles ---

    @abstractmethod
    def get_candles(
        self,
        symbol: str,
        resolution: str = "D",
        range_days: int = 30,
    ) -> list[Candle]:
        """Fetch historical candles.

        Args:
            symbol: Ticker symbol.
            resolution: Provider resolution string, passed through untouched.
            range_days: Number of calendar days of history ending now.

        Returns:
            List of Candle objects ordered by time ascending.
        """
        ...

    # --- Mode ---

    @property
    def is_live(self) -> bool:
        """True for providers that talk to a real upstream."""
        return True
