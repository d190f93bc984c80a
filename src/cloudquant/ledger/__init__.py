"""Trade ledger and its backing stores."""

from cloudquant.ledger.ledger import TradeLedger, new_trade_id, validate_candidate
from cloudquant.ledger.store import (
    LOCAL_COLLECTION,
    LocalTradeStore,
    MongoTradeStore,
    TradeStore,
    parse_ledger_config,
    seed_trades,
)

__all__ = [
    "TradeLedger",
    "TradeStore",
    "LocalTradeStore",
    "MongoTradeStore",
    "LOCAL_COLLECTION",
    "new_trade_id",
    "parse_ledger_config",
    "seed_trades",
    "validate_candidate",
]
