"""In-memory candle series for the active symbol with live tick merging."""

from __future__ import annotations

from dataclasses import replace

from cloudquant.errors import InvalidSeries
from cloudquant.log import get_logger
from cloudquant.models.candle import Candle
from cloudquant.models.quote import Quote
from cloudquant.quality import check_time_order

logger = get_logger("aggregator")


class CandleAggregator:
    """Owns the candle series and folds quote ticks into its last candle.

    History (every candle but the last) is never touched after ``load``.
    A tick only moves the last candle's close/high/low. Ticks are assumed
    to belong to the last candle's bucket: a tick arriving after a day
    rollover is merged into the previous day's candle, as no rollover
    detection is attempted.
    """

    def __init__(self, symbol: str | None = None) -> None:
        self.symbol = symbol
        self._candles: list[Candle] = []

    def __len__(self) -> int:
        return len(self._candles)

    @property
    def is_empty(self) -> bool:
        return not self._candles

    def load(self, candles: list[Candle], symbol: str | None = None) -> None:
        """Replace the series wholesale.

        An empty series is a valid (idle) state. Raises ``InvalidSeries``
        if ``candles`` is not ordered by non-decreasing time.
        """
        series = list(candles)
        check = check_time_order(series)
        if not check.passed:
            raise InvalidSeries(f"Candle series for {symbol or self.symbol} rejected: {check.message}")
        self._candles = series
        if symbol is not None:
            self.symbol = symbol
        logger.debug("Loaded %d candles for %s", len(series), self.symbol)

    def merge_tick(self, quote: Quote) -> Candle | None:
        """Fold a quote into the last candle and return it; no-op when empty."""
        if not self._candles:
            return None
        last = self._candles[-1]
        price = quote.c
        updated = replace(
            last,
            close=price,
            high=max(last.high, price),
            low=min(last.low, price),
        )
        self._candles[-1] = updated
        return updated

    def snapshot(self) -> list[Candle]:
        """Copy of the current series. Candles are frozen, so sharing them is safe."""
        return list(self._candles)

    def last(self) -> Candle | None:
        return self._candles[-1] if self._candles else None

    def clear(self) -> None:
        self._candles = []
