"""Tests for PortfolioValuator."""

import pytest

from cloudquant.models.trade import TradeSide
from cloudquant.valuation import PortfolioValuator, summarize, valuate

from conftest import make_trade


class TestValuate:
    def test_empty(self):
        assert valuate([]) == []
        assert summarize([]).total_value == 0

    def test_single_symbol_is_100_percent(self):
        trades = [make_trade("AAPL", 100.0, 1), make_trade("AAPL", 110.0, 3)]
        holdings = valuate(trades)
        assert len(holdings) == 1
        assert holdings[0].percentage == 100.0
        assert holdings[0].value == pytest.approx(430.0)

    def test_even_split(self):
        trades = [make_trade("AAPL", 100.0, 10), make_trade("TSLA", 50.0, 20)]
        holdings = {h.symbol: h for h in valuate(trades)}
        assert holdings["AAPL"].value == 1000.0
        assert holdings["AAPL"].percentage == 50.0
        assert holdings["TSLA"].value == 1000.0
        assert holdings["TSLA"].percentage == 50.0

    def test_one_decimal_rounding(self):
        trades = [make_trade("A", 1.0, 1), make_trade("B", 1.0, 2)]
        assert [h.percentage for h in valuate(trades)] == [33.3, 66.7]

    def test_first_appearance_order(self):
        trades = [
            make_trade("TSLA", 1.0, 1),
            make_trade("AAPL", 1.0, 1),
            make_trade("TSLA", 1.0, 1),
            make_trade("NVDA", 1.0, 1),
        ]
        assert [h.symbol for h in valuate(trades)] == ["TSLA", "AAPL", "NVDA"]

    def test_sell_adds_value(self):
        trades = [
            make_trade("AAPL", 100.0, 10),
            make_trade("AAPL", 100.0, 5, side=TradeSide.SELL),
        ]
        assert valuate(trades)[0].value == 1500.0

    def test_zero_total_gives_zero_percentage(self):
        # Zero-priced rows can come from hand-edited local stores
        holdings = valuate([make_trade("AAPL", 0.0, 10)])
        assert holdings[0].percentage == 0

    def test_value_conservation(self):
        trades = [
            make_trade("AAPL", 145.0, 50),
            make_trade("TSLA", 190.0, 20),
            make_trade("NVDA", 400.0, 10),
            make_trade("AAPL", 152.45, 3),
            make_trade("MSFT", 0.37, 7),
        ]
        holdings = valuate(trades)
        assert sum(h.value for h in holdings) == pytest.approx(sum(t.price * t.quantity for t in trades))
        assert sum(h.percentage for h in holdings) == pytest.approx(100.0, abs=0.05 * len(holdings))

    def test_deterministic(self):
        trades = [make_trade(s, 10.0, i + 1) for i, s in enumerate("ABCDE")]
        assert valuate(trades) == valuate(list(trades))

    def test_accepts_iterator(self):
        assert len(PortfolioValuator().valuate(iter([make_trade("A", 1.0, 1)]))) == 1


class TestSummarize:
    def test_totals(self):
        trades = [make_trade("AAPL", 100.0, 10), make_trade("TSLA", 50.0, 20)]
        summary = summarize(trades)
        assert summary.total_value == 2000.0
        assert summary.trade_count == 2
        assert len(summary.holdings) == 2
