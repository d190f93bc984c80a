"""Backing stores for the trade ledger - document database and local file."""

from __future__ import annotations

import json
import os
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pymongo import DESCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from cloudquant.errors import CollisionError, PersistenceError
from cloudquant.log import get_logger
from cloudquant.models.trade import Trade, TradeSide, TradeStatus

logger = get_logger("ledger.store")

LOCAL_COLLECTION = "mock_trades"
DEFAULT_DATABASE = "cloudquant"
DEFAULT_COLLECTION = "trades"

DAY_MS = 86_400_000


class TradeStore(ABC):
    """Append-only trade storage."""

    @abstractmethod
    def append(self, trade: Trade) -> None:
        """Persist a finalized trade."""
        ...

    @abstractmethod
    def read_all(self) -> list[Trade]:
        """Return every stored trade, most recent first."""
        ...

    @property
    def durable(self) -> bool:
        return False

    def close(self) -> None:
        pass


def seed_trades(now_ms: int | None = None) -> list[Trade]:
    """Sample holdings shown by a fresh local store."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    seeds = [
        ("t1", "AAPL", 145.00, 50, 5),
        ("t2", "TSLA", 190.00, 20, 3),
        ("t3", "NVDA", 400.00, 10, 10),
    ]
    return [
        Trade(
            id=trade_id,
            symbol=symbol,
            side=TradeSide.BUY,
            price=price,
            quantity=quantity,
            timestamp=now_ms - DAY_MS * days_ago,
            status=TradeStatus.FILLED,
        )
        for trade_id, symbol, price, quantity, days_ago in seeds
    ]


class LocalTradeStore(TradeStore):
    """JSON file store under ``{base_path}/mock_trades.json``.

    Until the first write the store answers with ``seed_trades``; the first
    write persists the seeds together with the new trade. Writes replace
    the file atomically, so concurrent readers always see a whole list.
    """

    def __init__(
        self,
        base_path: Path | str,
        seed: list[Trade] | None = None,
    ) -> None:
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.file_path = self.base_path / f"{LOCAL_COLLECTION}.json"
        self._seed = seed if seed is not None else seed_trades()
        self._lock = threading.Lock()

    def append(self, trade: Trade) -> None:
        with self._lock:
            trades = [trade, *self.read_all()]
            self._write(trades)

    def read_all(self) -> list[Trade]:
        if not self.file_path.exists():
            return list(self._seed)
        try:
            records = json.loads(self.file_path.read_text(encoding="utf-8"))
            return [Trade.from_dict(r) for r in records]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise PersistenceError(f"Cannot read local trade store {self.file_path}: {exc}") from exc

    def _write(self, trades: list[Trade]) -> None:
        tmp_path = self.file_path.with_suffix(".json.tmp")
        payload = json.dumps([t.to_dict() for t in trades], indent=2)
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.file_path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write local trade store {self.file_path}: {exc}") from exc


def parse_ledger_config(blob: str) -> dict[str, Any]:
    """Parse the durable-store JSON blob.

    Raises:
        PersistenceError: If the blob is not a JSON object with a ``uri``.
    """
    try:
        settings = json.loads(blob)
    except ValueError as exc:
        raise PersistenceError(f"Ledger config is not valid JSON: {exc}") from exc
    if not isinstance(settings, dict) or not settings.get("uri"):
        raise PersistenceError("Ledger config must be a JSON object with a 'uri'")
    settings.setdefault("database", DEFAULT_DATABASE)
    settings.setdefault("collection", DEFAULT_COLLECTION)
    return settings


class MongoTradeStore(TradeStore):
    """Document-database store keyed by trade id (stored as ``_id``).

    Args:
        uri: MongoDB connection string.
        database: Database name.
        collection: Collection name.
        timeout_ms: Server selection timeout; bounds how long an
            unreachable server blocks a read or write.
        client_collection: Pre-built collection (tests).
    """

    def __init__(
        self,
        uri: str | None = None,
        database: str = DEFAULT_DATABASE,
        collection: str = DEFAULT_COLLECTION,
        timeout_ms: int = 5000,
        client_collection: Any = None,
    ) -> None:
        self.client: MongoClient | None = None
        if client_collection is None:
            if not uri:
                raise PersistenceError("MongoTradeStore requires a uri")
            self.client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
            client_collection = self.client[database][collection]
        self.collection = client_collection

        try:
            self.collection.create_index([("timestamp", DESCENDING)])
        except PyMongoError as exc:
            logger.warning("Could not ensure timestamp index: %s", exc)

    @classmethod
    def from_config(cls, blob: str) -> MongoTradeStore:
        settings = parse_ledger_config(blob)
        return cls(
            uri=settings["uri"],
            database=settings["database"],
            collection=settings["collection"],
            timeout_ms=int(settings.get("timeout_ms", 5000)),
        )

    @property
    def durable(self) -> bool:
        return True

    def append(self, trade: Trade) -> None:
        doc = {"_id": trade.id, **trade.to_dict()}
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise CollisionError(f"Trade id {trade.id} already stored") from exc
        except PyMongoError as exc:
            raise PersistenceError(f"Trade write failed: {exc}") from exc

    def read_all(self) -> list[Trade]:
        try:
            docs = list(self.collection.find({}, {"_id": 0}).sort("timestamp", DESCENDING))
        except PyMongoError as exc:
            raise PersistenceError(f"Trade read failed: {exc}") from exc
        return [Trade.from_dict(d) for d in docs]

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
