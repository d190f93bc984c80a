"""Candle (OHLCV) data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Union

CandleTime = Union[str, int]


def time_key(value: CandleTime) -> float:
    """Map a candle time (ISO date string or unix seconds) to a sortable number."""
    if isinstance(value, str):
        day = date.fromisoformat(value[:10])
        return datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp()
    return float(value)


@dataclass(frozen=True)
class Candle:
    """One aggregation bucket (a trading day at the default resolution).

    Attributes:
        time: Bucket start, either ``YYYY-MM-DD`` or a unix timestamp.
        open: Opening price.
        high: High price.
        low: Low price.
        close: Closing (or latest) price.
        volume: Traded volume, when the source supplies one.
    """

    time: CandleTime
    open: float
    high: float
    low: float
    close: float
    volume: int | None = None

    @property
    def sort_key(self) -> float:
        return time_key(self.time)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "time": self.time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }
        if self.volume is not None:
            data["volume"] = self.volume
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Candle:
        volume = data.get("volume")
        return cls(
            time=data["time"],
            open=float(data["open"]),
            high=float(data["high"]),
            low=float(data["low"]),
            close=float(data["close"]),
            volume=int(volume) if volume is not None else None,
        )
