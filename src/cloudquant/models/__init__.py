"""Dashboard data models."""

from cloudquant.models.candle import Candle
from cloudquant.models.holding import Holding, PortfolioSummary
from cloudquant.models.quote import Quote
from cloudquant.models.trade import Trade, TradeCandidate, TradeSide, TradeStatus

__all__ = [
    "Candle",
    "Quote",
    "Trade",
    "TradeCandidate",
    "TradeSide",
    "TradeStatus",
    "Holding",
    "PortfolioSummary",
]
