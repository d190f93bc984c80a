"""Tests for FinnhubProvider against a patched client (no network)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from cloudquant.errors import DashboardErrorCode, FetchError
from cloudquant.providers.finnhub import FinnhubProvider


@pytest.fixture
def provider() -> FinnhubProvider:
    with patch("finnhub.Client") as client_cls:
        client_cls.return_value = MagicMock()
        yield FinnhubProvider(api_key="test-key")


class TestFinnhubInit:
    def test_requires_key(self, monkeypatch):
        monkeypatch.delenv("FINNHUB_API_KEY", raising=False)
        with pytest.raises(FetchError) as exc_info:
            FinnhubProvider()
        assert exc_info.value.code == DashboardErrorCode.AUTH_FAILED
        assert exc_info.value.retryable is False

    def test_is_live(self, provider):
        assert provider.is_live is True


class TestFinnhubQuote:
    def test_parses_quote(self, provider):
        provider.client.quote.return_value = {
            "c": 152.45, "d": 1.25, "dp": 0.82, "h": 153.0,
            "l": 150.5, "o": 151.0, "pc": 151.2, "t": 1704067200,
        }
        quote = provider.get_quote("aapl")
        provider.client.quote.assert_called_once_with("AAPL")
        assert quote.c == 152.45
        assert quote.pc == 151.2

    def test_transport_error_wrapped(self, provider):
        provider.client.quote.side_effect = ConnectionError("reset")
        with pytest.raises(FetchError) as exc_info:
            provider.get_quote("AAPL")
        assert exc_info.value.retryable is True
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_malformed_payload(self, provider):
        provider.client.quote.return_value = {"error": "You don't have access"}
        with pytest.raises(FetchError) as exc_info:
            provider.get_quote("AAPL")
        assert exc_info.value.code == DashboardErrorCode.MALFORMED_RESPONSE


class TestFinnhubCandles:
    def test_parses_candles(self, provider):
        provider.client.stock_candles.return_value = {
            "s": "ok",
            "t": [1704067200, 1704153600],
            "o": [100.0, 102.0],
            "h": [105.0, 106.0],
            "l": [98.0, 101.0],
            "c": [102.0, 104.0],
            "v": [1000, 2000],
        }
        candles = provider.get_candles("AAPL", "D", 30)
        assert [c.time for c in candles] == [1704067200, 1704153600]
        assert candles[1].close == 104.0
        assert candles[0].volume == 1000

        args = provider.client.stock_candles.call_args.args
        assert args[0] == "AAPL"
        assert args[1] == "D"
        assert args[3] - args[2] == 30 * 24 * 60 * 60

    def test_no_data_status(self, provider):
        provider.client.stock_candles.return_value = {"s": "no_data"}
        with pytest.raises(FetchError) as exc_info:
            provider.get_candles("AAPL")
        assert exc_info.value.code == DashboardErrorCode.NO_DATA

    def test_ragged_arrays(self, provider):
        provider.client.stock_candles.return_value = {
            "s": "ok", "t": [1, 2], "o": [1.0], "h": [1.0], "l": [1.0], "c": [1.0],
        }
        with pytest.raises(FetchError) as exc_info:
            provider.get_candles("AAPL")
        assert exc_info.value.code == DashboardErrorCode.MALFORMED_RESPONSE

    def test_transport_error_wrapped(self, provider):
        provider.client.stock_candles.side_effect = TimeoutError("slow")
        with pytest.raises(FetchError):
            provider.get_candles("AAPL")
