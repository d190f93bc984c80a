"""Derived portfolio models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Holding:
    """Per-symbol aggregate value and allocation.

    Attributes:
        symbol: Ticker symbol.
        value: Sum of ``price * quantity`` over the symbol's trades.
        percentage: Share of total portfolio value, 0-100, one decimal.
    """

    symbol: str
    value: float
    percentage: float


@dataclass(frozen=True)
class PortfolioSummary:
    """Holdings plus the totals shown alongside the allocation chart."""

    holdings: list[Holding] = field(default_factory=list)
    total_value: float = 0.0
    trade_count: int = 0
