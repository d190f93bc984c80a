"""Portfolio valuation from the trade ledger snapshot."""

from __future__ import annotations

from collections.abc import Iterable

from cloudquant.models.holding import Holding, PortfolioSummary
from cloudquant.models.trade import Trade


class PortfolioValuator:
    """Derive holdings and allocation percentages from a list of trades.

    Every trade adds ``price * quantity`` to its symbol's value whatever
    its side; SELL trades are not netted against BUYs. Holdings come out
    in order of each symbol's first appearance in the input.
    """

    def valuate(self, trades: Iterable[Trade]) -> list[Holding]:
        values: dict[str, float] = {}
        for trade in trades:
            values[trade.symbol] = values.get(trade.symbol, 0.0) + trade.price * trade.quantity

        total = sum(values.values())
        return [
            Holding(
                symbol=symbol,
                value=value,
                percentage=round(value / total * 100, 1) if total else 0.0,
            )
            for symbol, value in values.items()
        ]

    def summarize(self, trades: Iterable[Trade]) -> PortfolioSummary:
        trades = list(trades)
        holdings = self.valuate(trades)
        return PortfolioSummary(
            holdings=holdings,
            total_value=sum(h.value for h in holdings),
            trade_count=len(trades),
        )


_default = PortfolioValuator()


def valuate(trades: Iterable[Trade]) -> list[Holding]:
    return _default.valuate(trades)


def summarize(trades: Iterable[Trade]) -> PortfolioSummary:
    return _default.summarize(trades)
