"""Finnhub data provider - live quotes and candles.

Requires a Finnhub API key (``FINNHUB_API_KEY``). Requests go through
``finnhub-python``, which applies the transport's default timeout.
"""

from __future__ import annotations

import os
import time

import finnhub

from cloudquant.errors import DashboardErrorCode, FetchError
from cloudquant.models.candle import Candle
from cloudquant.models.quote import Quote
from cloudquant.providers.base import BaseMarketDataProvider

SECONDS_PER_DAY = 24 * 60 * 60


class FinnhubProvider(BaseMarketDataProvider):
    """Fetch quotes and candles from Finnhub.io.

    Capabilities: quotes, candles.
    """

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key or os.getenv("FINNHUB_API_KEY")
        if not self.api_key:
            raise FetchError(
                "Finnhub API key required. Set FINNHUB_API_KEY env var or pass api_key.",
                code=DashboardErrorCode.AUTH_FAILED,
                retryable=False,
            )

        self.client = finnhub.Client(api_key=self.api_key)

    def get_quote(self, symbol: str) -> Quote:
        try:
            data = self.client.quote(symbol.upper())
        except Exception as exc:
            raise FetchError(f"Finnhub quote failed for {symbol}: {exc}") from exc

        try:
            return Quote.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise FetchError(
                f"Malformed Finnhub quote for {symbol}: {exc}",
                code=DashboardErrorCode.MALFORMED_RESPONSE,
            ) from exc

    def get_candles(
        self,
        symbol: str,
        resolution: str = "D",
        range_days: int = 30,
    ) -> list[Candle]:
        end_ts = int(time.time())
        start_ts = end_ts - range_days * SECONDS_PER_DAY

        try:
            data = self.client.stock_candles(symbol.upper(), resolution, start_ts, end_ts)
        except Exception as exc:
            raise FetchError(f"Finnhub candles failed for {symbol}: {exc}") from exc

        if not isinstance(data, dict) or data.get("s") != "ok":
            status = data.get("s") if isinstance(data, dict) else type(data).__name__
            raise FetchError(
                f"No candle data for {symbol} (status={status})",
                code=DashboardErrorCode.NO_DATA,
            )

        try:
            candles: list[Candle] = []
            volumes = data.get("v") or []
            for i, ts in enumerate(data["t"]):
                candles.append(Candle(
                    time=int(ts),
                    open=float(data["o"][i]),
                    high=float(data["h"][i]),
                    low=float(data["l"][i]),
                    close=float(data["c"][i]),
                    volume=int(volumes[i]) if i < len(volumes) else None,
                ))
            return candles
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise FetchError(
                f"Malformed Finnhub candles for {symbol}: {exc}",
                code=DashboardErrorCode.MALFORMED_RESPONSE,
            ) from exc
