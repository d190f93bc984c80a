"""Append-only trade ledger over a durable or local backing store."""

from __future__ import annotations

import threading
import time
import uuid
from typing import Callable

from cloudquant.config import DashboardConfig
from cloudquant.errors import PersistenceError
from cloudquant.ledger.store import LocalTradeStore, MongoTradeStore, TradeStore
from cloudquant.log import get_logger
from cloudquant.models.trade import Trade, TradeCandidate, TradeSide, TradeStatus

logger = get_logger("ledger")


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_trade_id(timestamp_ms: int) -> str:
    """``trade_<ms>_<random hex>``; the random suffix keeps same-millisecond ids apart."""
    return f"trade_{timestamp_ms}_{uuid.uuid4().hex[:12]}"


def validate_candidate(candidate: TradeCandidate) -> TradeCandidate:
    """Normalize a candidate, raising ``ValueError`` if it cannot be recorded."""
    side = candidate.side if isinstance(candidate.side, TradeSide) else TradeSide(candidate.side)
    if not candidate.symbol or not candidate.symbol.strip():
        raise ValueError("Trade symbol is required")
    if not candidate.price > 0:
        raise ValueError(f"Trade price must be positive, got {candidate.price}")
    if isinstance(candidate.quantity, bool) or int(candidate.quantity) != candidate.quantity:
        raise ValueError(f"Trade quantity must be a whole number, got {candidate.quantity}")
    if candidate.quantity <= 0:
        raise ValueError(f"Trade quantity must be positive, got {candidate.quantity}")
    return TradeCandidate(
        symbol=candidate.symbol.strip().upper(),
        side=side,
        price=float(candidate.price),
        quantity=int(candidate.quantity),
    )


class TradeLedger:
    """Executed-trade history.

    The backing store is chosen once (see ``from_config``) and never
    switched afterwards; a failing durable store surfaces as
    ``PersistenceError`` instead of diverting writes to local storage.

    Writes are serialized so ids and timestamps are assigned in order:
    each trade gets a timestamp strictly greater than the previous one,
    which keeps "most recent first" well defined for rapid writes.
    Reads take no lock.

    Args:
        store: Backing store.
        write_latency: Simulated latency added after each write.
        clock: Millisecond clock (tests).
    """

    def __init__(
        self,
        store: TradeStore,
        write_latency: float = 0.0,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.store = store
        self.write_latency = write_latency
        self._clock = clock
        self._lock = threading.Lock()
        self._last_timestamp = 0

    @classmethod
    def from_config(cls, config: DashboardConfig) -> TradeLedger:
        if config.durable_ledger:
            store: TradeStore = MongoTradeStore.from_config(config.ledger_config or "")
            return cls(store)
        logger.warning("No ledger config; trades are kept in the local store under %s", config.data_dir)
        return cls(LocalTradeStore(config.data_dir), write_latency=config.mock_write_latency)

    @property
    def durable(self) -> bool:
        return self.store.durable

    def read(self) -> list[Trade]:
        """All trades, most recent first."""
        trades = self.store.read_all()
        return sorted(trades, key=lambda t: t.timestamp, reverse=True)

    def write(self, candidate: TradeCandidate) -> Trade:
        """Finalize ``candidate`` as a FILLED trade and append it.

        Raises:
            ValueError: If the candidate has a bad price, quantity or side.
            PersistenceError: If the backing store rejects the write.
        """
        candidate = validate_candidate(candidate)
        with self._lock:
            timestamp = max(self._clock(), self._last_timestamp + 1)
            trade = Trade(
                id=new_trade_id(timestamp),
                symbol=candidate.symbol,
                side=candidate.side,
                price=candidate.price,
                quantity=candidate.quantity,
                timestamp=timestamp,
                status=TradeStatus.FILLED,
            )
            try:
                self.store.append(trade)
            except PersistenceError as exc:
                logger.error("Trade write failed for %s: %s", trade.symbol, exc)
                raise
            self._last_timestamp = timestamp

        logger.info(
            "Executed %s %d %s @ %.2f (%s)",
            trade.side.value, trade.quantity, trade.symbol, trade.price, trade.id,
        )
        if self.write_latency > 0:
            time.sleep(self.write_latency)
        return trade

    def close(self) -> None:
        self.store.close()
