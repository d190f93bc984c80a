"""Fixed-cadence quote polling that feeds the candle aggregator."""

from __future__ import annotations

import asyncio
from typing import Callable

from cloudquant.aggregator import CandleAggregator
from cloudquant.log import get_logger
from cloudquant.models.candle import Candle
from cloudquant.models.quote import Quote
from cloudquant.sources import QuoteSource

logger = get_logger("polling")

DEFAULT_INTERVAL = 5.0


class PollingController:
    """Polls ``QuoteSource`` for the active symbol every ``interval`` seconds.

    Each tick runs as its own task, so a fetch that never resolves cannot
    delay the next tick. A tick carries the generation it was scheduled
    under and is discarded if ``stop``/``start`` moved the controller on
    before it could merge, so a late quote never lands in another
    symbol's series.

    Must be driven from a running event loop; the quote fetch itself runs
    in a worker thread and the merge happens back on the loop.

    Args:
        quotes: Quote source for the tick fetches.
        aggregator: Series the ticks are merged into.
        interval: Seconds between ticks.
        on_tick: Called with the updated last candle after each merge.
        on_error: Called with any exception raised while handling a tick.
    """

    def __init__(
        self,
        quotes: QuoteSource,
        aggregator: CandleAggregator,
        interval: float = DEFAULT_INTERVAL,
        on_tick: Callable[[Candle], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self.quotes = quotes
        self.aggregator = aggregator
        self.interval = interval
        self.on_tick = on_tick
        self.on_error = on_error

        self.active_symbol: str | None = None
        self.running = False
        self._generation = 0
        self._timer: asyncio.Task | None = None
        self._ticks: set[asyncio.Task] = set()

    def start(self, symbol: str) -> None:
        """Begin polling ``symbol``, replacing any cadence already running."""
        if self.running:
            self.stop()
        loop = asyncio.get_running_loop()
        self._generation += 1
        self.active_symbol = symbol
        self.running = True
        self._timer = loop.create_task(self._schedule(self._generation))
        logger.info("Polling %s every %.1fs", symbol, self.interval)

    def stop(self) -> None:
        """Cancel the cadence and any in-flight ticks. Safe to call repeatedly."""
        if not self.running and self._timer is None:
            return
        self._generation += 1
        self.running = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._ticks):
            task.cancel()
        self._ticks.clear()
        logger.info("Stopped polling %s", self.active_symbol)

    async def _schedule(self, generation: int) -> None:
        loop = asyncio.get_running_loop()
        while generation == self._generation:
            await asyncio.sleep(self.interval)
            if generation != self._generation:
                break
            task = loop.create_task(self._tick(generation))
            self._ticks.add(task)
            task.add_done_callback(self._ticks.discard)

    async def _tick(self, generation: int) -> None:
        # Symbol is read when the tick fires, not when it was scheduled
        symbol = self.active_symbol
        if symbol is None or self.aggregator.is_empty:
            return
        try:
            quote: Quote = await asyncio.to_thread(self.quotes.fetch, symbol)
            if generation != self._generation or symbol != self.active_symbol:
                logger.debug("Discarding stale tick for %s", symbol)
                return
            candle = self.aggregator.merge_tick(quote)
            if candle is not None and self.on_tick is not None:
                self.on_tick(candle)
        except Exception as exc:
            logger.error("Polling tick for %s failed: %s", symbol, exc)
            if self.on_error is not None:
                self.on_error(exc)
