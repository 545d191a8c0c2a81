"""Tests for AutoTrader (consensus -> paper orders)."""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.models.bar import PriceBar
from core.models.portfolio import OrderSide, TradeRequest
from core.models.signal import ConsensusResult, MarketRegime, Sentiment, Signal
from app.config import Settings
from app.services import AutoTrader, PaperTrader
from app.trading_config import TradingConfig

NOW = datetime(2024, 6, 3, 14, 30, tzinfo=timezone.utc)


def _result(sentiment, confidence):
    signal = {
        Sentiment.BULLISH: Signal.BUY,
        Sentiment.BEARISH: Signal.SELL,
        Sentiment.NEUTRAL: Signal.HOLD,
    }[sentiment]
    return ConsensusResult(
        signal=signal,
        confidence=confidence,
        sentiment=sentiment,
        regime=MarketRegime.SIDEWAYS,
        reason="stub",
    )


class StubCouncil:
    def __init__(self, result):
        self.result = result
        self.seen_headlines = "unset"

    def analyze(self, bars, headlines=None):
        self.seen_headlines = headlines
        return self.result


def _make_bars(closes, spread=0.02):
    bars = []
    prev = closes[0]
    for i, close in enumerate(closes):
        bars.append(
            PriceBar(
                time=date(2024, 1, 1) + timedelta(days=i),
                open=prev,
                high=close * (1 + spread),
                low=close * (1 - spread),
                close=close,
            )
        )
        prev = close
    return bars


@pytest.fixture
def clock():
    state = {"now": NOW}

    def now():
        return state["now"]

    now.state = state
    return now


def _auto(result=None, clock=None, **config):
    config.setdefault("auto_trade", True)
    trader = PaperTrader(initial_cash=100_000, clock=clock or (lambda: NOW))
    return AutoTrader(
        config=TradingConfig(**config),
        trader=trader,
        council=StubCouncil(result or _result(Sentiment.NEUTRAL, 0)),
    )


class TestExecute:
    def test_bullish_buys_at_limit(self):
        auto = _auto()
        outcome = auto.execute("AAPL", 100.0, _result(Sentiment.BULLISH, 80))

        assert outcome.executed
        trade = outcome.trade
        assert trade.side == OrderSide.BUY
        # min(2% , 20%) of 100,000 at 100
        assert trade.quantity == 20
        assert trade.price == pytest.approx(99.9)
        assert trade.reason == "Auto-Bot: BULLISH (Conf: 80%)"

    def test_neutral_skipped(self):
        auto = _auto()
        assert auto.execute("AAPL", 100.0, _result(Sentiment.NEUTRAL, 90)) is None

    def test_below_threshold_skipped(self):
        auto = _auto()
        assert auto.execute("AAPL", 100.0, _result(Sentiment.BULLISH, 59)) is None
        assert auto.trader.portfolio.trades == []

    def test_custom_threshold(self):
        auto = _auto(confidence_threshold=40)
        assert auto.execute("AAPL", 100.0, _result(Sentiment.BULLISH, 45)).executed

    def test_bearish_without_holdings_skipped(self):
        auto = _auto()
        assert auto.execute("AAPL", 100.0, _result(Sentiment.BEARISH, 90)) is None

    def test_bearish_sells_down_holding(self, clock):
        auto = _auto(clock=clock)
        auto.trader.execute(
            TradeRequest(symbol="AAPL", side=OrderSide.BUY, quantity=10, price=100.0)
        )
        clock.state["now"] = NOW + timedelta(minutes=5)

        outcome = auto.execute("AAPL", 100.0, _result(Sentiment.BEARISH, 70))

        assert outcome.executed
        assert outcome.trade.side == OrderSide.SELL
        assert outcome.trade.quantity == 10
        assert outcome.trade.price == pytest.approx(100.1)
        assert auto.trader.portfolio.get_position("AAPL") is None

    def test_unaffordable_price_skipped(self):
        auto = _auto()
        assert auto.execute("BRK.A", 600_000.0, _result(Sentiment.BULLISH, 90)) is None

    def test_breaker_denial_is_reported(self):
        auto = _auto()
        auto.execute("AAPL", 100.0, _result(Sentiment.BULLISH, 80))
        outcome = auto.execute("AAPL", 100.0, _result(Sentiment.BULLISH, 80))

        assert not outcome.executed
        assert outcome.message.startswith("trade skipped: Circuit Breaker: Cooldown")


class TestAutoTradeSwitch:
    def test_disabled_by_default(self):
        auto = AutoTrader(
            config=TradingConfig(),
            trader=PaperTrader(initial_cash=100_000, clock=lambda: NOW),
            council=StubCouncil(_result(Sentiment.BULLISH, 90)),
        )

        assert auto.execute("AAPL", 100.0, _result(Sentiment.BULLISH, 90)) is None
        assert auto.on_bars("AAPL", _make_bars([100.0, 101.0])) is None
        assert auto.council.seen_headlines == "unset"
        assert auto.trader.portfolio.trades == []

    def test_symbol_outside_watchlist_skipped(self):
        auto = _auto(_result(Sentiment.BULLISH, 90), symbols=["MSFT"])

        assert auto.execute("AAPL", 100.0, _result(Sentiment.BULLISH, 90)) is None
        assert auto.on_bars("AAPL", _make_bars([100.0, 101.0])) is None
        assert auto.trader.portfolio.trades == []

    def test_symbol_on_watchlist_trades(self):
        auto = _auto(symbols=["MSFT", "AAPL"])
        assert auto.execute("AAPL", 100.0, _result(Sentiment.BULLISH, 90)).executed


class TestOnBars:
    def test_empty_bars(self):
        assert _auto().on_bars("AAPL", []) is None

    def test_uses_last_close_and_passes_headlines(self):
        auto = _auto(_result(Sentiment.BULLISH, 90))
        bars = _make_bars([100.0, 100.0, 200.0])

        outcome = auto.on_bars("AAPL", bars, headlines=["Strong quarter"])

        assert auto.council.seen_headlines == ["Strong quarter"]
        # 2% of 100,000 at 200
        assert outcome.trade.quantity == 10
        assert outcome.trade.price == pytest.approx(round(200 * 0.9992, 2))

    def test_real_council_on_uptrend(self):
        trader = PaperTrader(initial_cash=100_000, clock=lambda: NOW)
        auto = AutoTrader(config=TradingConfig(auto_trade=True, confidence_threshold=50), trader=trader)
        bars = _make_bars([100 * 1.01 ** i for i in range(60)])

        outcome = auto.on_bars("UP", bars)

        assert outcome is not None
        assert outcome.executed
        assert outcome.trade.side == OrderSide.BUY


class TestFromSettings:
    def test_builds_from_settings_and_yaml(self, tmp_path):
        config_path = tmp_path / "trading.yaml"
        config_path.write_text(
            "auto_trade: true\n"
            "confidence_threshold: 70\n"
            "circuit_breaker:\n"
            "  cooldown_ms: 0\n"
        )
        settings = Settings(
            _env_file=None,
            paper_initial_cash=5_000,
            paper_state_path=str(tmp_path / "paper.json"),
            trading_config_path=str(config_path),
        )

        auto = AutoTrader.from_settings(settings)

        assert auto.config.confidence_threshold == 70
        assert auto.trader.portfolio.cash == 5_000
        outcome = auto.execute("AAPL", 10.0, _result(Sentiment.BULLISH, 75))
        assert outcome.executed
        assert (tmp_path / "paper.json").exists()
