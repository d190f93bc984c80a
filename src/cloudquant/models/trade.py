"""Trade data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class TradeSide(Enum):
    BUY = "BUY"
    SELL = "SELL"


class TradeStatus(Enum):
    FILLED = "FILLED"
    PENDING = "PENDING"


@dataclass(frozen=True)
class TradeCandidate:
    """Order details supplied by the caller before the ledger finalizes them."""

    symbol: str
    side: TradeSide
    price: float
    quantity: int


@dataclass(frozen=True)
class Trade:
    """Executed trade. Immutable once recorded.

    Attributes:
        id: Unique id assigned by the ledger.
        symbol: Ticker symbol.
        side: BUY or SELL.
        price: Execution price per share.
        quantity: Number of shares.
        timestamp: Execution instant in epoch milliseconds.
        status: FILLED or PENDING.
    """

    id: str
    symbol: str
    side: TradeSide
    price: float
    quantity: int
    timestamp: int
    status: TradeStatus = TradeStatus.FILLED

    @property
    def notional(self) -> float:
        return self.price * self.quantity

    @property
    def executed_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "side": self.side.value,
            "price": self.price,
            "quantity": self.quantity,
            "timestamp": self.timestamp,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Trade:
        return cls(
            id=str(data["id"]),
            symbol=data["symbol"],
            side=TradeSide(data["side"]),
            price=float(data["price"]),
            quantity=int(data["quantity"]),
            timestamp=int(data["timestamp"]),
            status=TradeStatus(data.get("status", TradeStatus.FILLED.value)),
        )
