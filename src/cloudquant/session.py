"""TradingSession - wires the core components behind the presentation boundary."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from cloudquant.aggregator import CandleAggregator
from cloudquant.config import DashboardConfig
from cloudquant.errors import PersistenceError
from cloudquant.ledger import TradeLedger
from cloudquant.log import get_logger
from cloudquant.models.candle import Candle
from cloudquant.models.holding import PortfolioSummary
from cloudquant.models.quote import Quote
from cloudquant.models.trade import Trade, TradeCandidate, TradeSide
from cloudquant.polling import PollingController
from cloudquant.sources import CandleSource, DataSource, QuoteSource
from cloudquant.valuation import PortfolioValuator

logger = get_logger("session")


class TradingSession:
    """One dashboard session: chart series, polling, ledger and valuation.

    Flows:
        CandleSource -> CandleAggregator (load) -> PollingController (tick)
        -> CandleAggregator (merge); TradeLedger -> PortfolioValuator.

    Usage::

        session = TradingSession(DashboardConfig())
        await session.select_symbol("TSLA")
        trade = await session.execute_buy("TSLA", 5)
        summary = session.portfolio()
        await session.close()

    Args:
        config: Resolved configuration.
        data_source: Override the data source built from ``config``.
        ledger: Override the ledger built from ``config``.
        on_tick: Called with the last candle after each merged tick.
        on_error: Called with errors raised by a polling tick.
    """

    def __init__(
        self,
        config: DashboardConfig,
        data_source: DataSource | None = None,
        ledger: TradeLedger | None = None,
        on_tick: Callable[[Candle], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self.config = config
        self.data_source = data_source or DataSource(config)
        self.quotes = QuoteSource(self.data_source)
        self.candles = CandleSource(self.data_source)
        self.aggregator = CandleAggregator()
        self.poller = PollingController(
            self.quotes,
            self.aggregator,
            interval=config.poll_interval_seconds,
            on_tick=on_tick,
            on_error=on_error,
        )
        self.ledger = ledger or TradeLedger.from_config(config)
        self.valuator = PortfolioValuator()

        self.active_symbol: str | None = None
        self._trades: list[Trade] = []

    # ---------------------------------------------------------- market data

    async def select_symbol(self, symbol: str) -> list[Candle]:
        """Make ``symbol`` active: stop polling, reload history, restart polling."""
        symbol = symbol.upper()
        self.poller.stop()
        self.active_symbol = symbol

        series = await asyncio.to_thread(self.candles.fetch, symbol)
        if self.active_symbol != symbol:
            # A newer switch won while this history was loading
            return self.aggregator.snapshot()

        self.aggregator.load(series, symbol=symbol)
        self.poller.start(symbol)
        return self.aggregator.snapshot()

    async def refresh_history(self) -> list[Candle]:
        """Drop the active symbol's cached history and reload it."""
        if self.active_symbol is None:
            return []
        self.candles.invalidate(self.active_symbol)
        return await self.select_symbol(self.active_symbol)

    def chart(self) -> list[Candle]:
        return self.aggregator.snapshot()

    async def check_price(self, symbol: str) -> Quote:
        return await asyncio.to_thread(self.quotes.fetch, symbol.upper())

    # --------------------------------------------------------------- trades

    async def refresh_trades(self) -> list[Trade]:
        self._trades = await asyncio.to_thread(self.ledger.read)
        return list(self._trades)

    async def execute_buy(
        self, symbol: str, quantity: int, quote: Quote | None = None,
    ) -> Trade:
        """Buy ``quantity`` shares at the quoted price, then refresh trades.

        A failed write propagates and leaves the cached trades untouched.
        Once the write succeeds the trade is returned even if the refresh
        fails; the cached trades then lag until the next refresh.
        """
        symbol = symbol.upper()
        if quote is None:
            quote = await self.check_price(symbol)
        candidate = TradeCandidate(
            symbol=symbol, side=TradeSide.BUY, price=quote.c, quantity=quantity,
        )
        trade = await asyncio.to_thread(self.ledger.write, candidate)
        try:
            await self.refresh_trades()
        except PersistenceError as exc:
            logger.warning("Recorded trade %s but trade refresh failed: %s", trade.id, exc)
        return trade

    def trades(self) -> list[Trade]:
        return list(self._trades)

    def portfolio(self) -> PortfolioSummary:
        return self.valuator.summarize(self._trades)

    # -------------------------------------------------------------- status

    def status(self) -> dict[str, Any]:
        return {
            "market_data": "live" if self.data_source.live_mode else "simulated",
            "ledger": "durable" if self.ledger.durable else "local",
            "symbols": list(self.config.symbols),
            "active_symbol": self.active_symbol,
            "polling": self.poller.running,
        }

    async def close(self) -> None:
        self.poller.stop()
        self.ledger.close()
