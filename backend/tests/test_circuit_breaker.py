"""Tests for the pre-trade circuit breaker."""

from datetime import datetime, timedelta, timezone

from core.models.config import CircuitBreakerConfig
from core.models.portfolio import OrderSide, Portfolio, Position, Trade, TradeRequest
from core.risk import CircuitBreaker, TriggeredRule

NOW = datetime(2024, 6, 3, 15, 0, tzinfo=timezone.utc)


def _portfolio(equity=100_000.0, **kwargs):
    kwargs.setdefault("cash", equity)
    return Portfolio(equity=equity, **kwargs)


def _request(symbol="AAPL", side=OrderSide.BUY, quantity=10, price=100.0):
    return TradeRequest(symbol=symbol, side=side, quantity=quantity, price=price)


def _trade(symbol="AAPL", seconds_ago=30, timestamp=None):
    return Trade(
        id=f"{symbol}-{seconds_ago}",
        symbol=symbol,
        side=OrderSide.BUY,
        quantity=1,
        price=100.0,
        timestamp=timestamp or NOW - timedelta(seconds=seconds_ago),
    )


class TestDailyLoss:
    def test_loss_beyond_limit_denied(self):
        portfolio = _portfolio(equity=94_000, daily_start_equity=100_000)
        verdict = CircuitBreaker().check_trade(_request(), portfolio, now=NOW)

        assert not verdict.allowed
        assert verdict.triggered_rule == TriggeredRule.DAILY_LOSS
        assert verdict.reason == "Circuit Breaker: Max Daily Loss Exceeded (5%)"

    def test_loss_at_limit_allowed(self):
        portfolio = _portfolio(equity=95_000, daily_start_equity=100_000)
        assert CircuitBreaker().check_trade(_request(), portfolio, now=NOW).allowed

    def test_falls_back_to_initial_equity(self):
        portfolio = _portfolio(equity=90_000, initial_equity=100_000)
        verdict = CircuitBreaker().check_trade(_request(), portfolio, now=NOW)

        assert verdict.triggered_rule == TriggeredRule.DAILY_LOSS

    def test_no_baseline_means_no_loss(self):
        assert not CircuitBreaker().is_daily_loss_exceeded(_portfolio(equity=50_000))

    def test_custom_limit(self):
        breaker = CircuitBreaker(CircuitBreakerConfig(max_daily_loss_percent=0.10))
        portfolio = _portfolio(equity=94_000, daily_start_equity=100_000)

        assert breaker.check_trade(_request(), portfolio, now=NOW).allowed


class TestCooldown:
    def test_recent_trade_denied(self):
        portfolio = _portfolio(trades=[_trade(seconds_ago=30)])
        verdict = CircuitBreaker().check_trade(_request(), portfolio, now=NOW)

        assert not verdict.allowed
        assert verdict.triggered_rule == TriggeredRule.COOLDOWN
        assert verdict.reason == "Circuit Breaker: Cooldown Active (60s)"

    def test_expired_cooldown_allowed(self):
        portfolio = _portfolio(trades=[_trade(seconds_ago=61)])
        assert CircuitBreaker().check_trade(_request(), portfolio, now=NOW).allowed

    def test_other_symbol_not_affected(self):
        portfolio = _portfolio(trades=[_trade(symbol="MSFT", seconds_ago=5)])
        assert CircuitBreaker().check_trade(_request(), portfolio, now=NOW).allowed

    def test_uses_most_recent_trade_regardless_of_order(self):
        portfolio = _portfolio(
            trades=[_trade(seconds_ago=7200), _trade(seconds_ago=10)]
        )
        verdict = CircuitBreaker().check_trade(_request(), portfolio, now=NOW)

        assert verdict.triggered_rule == TriggeredRule.COOLDOWN

    def test_naive_timestamps_are_utc(self):
        naive = datetime(2024, 6, 3, 14, 59, 30)
        portfolio = _portfolio(trades=[_trade(timestamp=naive)])

        assert CircuitBreaker().is_cooling_down(portfolio, "AAPL", now=NOW)

    def test_zero_cooldown(self):
        breaker = CircuitBreaker(CircuitBreakerConfig(cooldown_ms=0))
        portfolio = _portfolio(trades=[_trade(seconds_ago=0)])

        assert breaker.check_trade(_request(), portfolio, now=NOW).allowed


class TestExposure:
    def test_oversized_buy_denied(self):
        verdict = CircuitBreaker().check_trade(
            _request(quantity=250, price=100), _portfolio(), now=NOW
        )

        assert not verdict.allowed
        assert verdict.triggered_rule == TriggeredRule.MAX_EXPOSURE
        assert verdict.reason == "Circuit Breaker: Max Position Size Exceeded (20%)"

    def test_buy_at_limit_allowed(self):
        verdict = CircuitBreaker().check_trade(
            _request(quantity=200, price=100), _portfolio(), now=NOW
        )
        assert verdict.allowed

    def test_existing_position_counts(self):
        portfolio = _portfolio(
            positions=[Position(symbol="AAPL", quantity=100, average_price=100.0)]
        )
        verdict = CircuitBreaker().check_trade(
            _request(quantity=150, price=100), portfolio, now=NOW
        )

        assert verdict.triggered_rule == TriggeredRule.MAX_EXPOSURE

    def test_sell_is_exempt(self):
        verdict = CircuitBreaker().check_trade(
            _request(side=OrderSide.SELL, quantity=1000, price=100), _portfolio(), now=NOW
        )
        assert verdict.allowed

    def test_zero_equity_does_not_raise(self):
        portfolio = _portfolio(equity=0.0)
        verdict = CircuitBreaker().check_trade(_request(), portfolio, now=NOW)

        assert not verdict.allowed
        assert verdict.triggered_rule == TriggeredRule.MAX_EXPOSURE


class TestCheckOrder:
    def test_daily_loss_checked_before_cooldown(self):
        portfolio = _portfolio(
            equity=90_000,
            daily_start_equity=100_000,
            trades=[_trade(seconds_ago=1)],
        )
        verdict = CircuitBreaker().check_trade(
            _request(quantity=1000), portfolio, now=NOW
        )

        assert verdict.triggered_rule == TriggeredRule.DAILY_LOSS

    def test_cooldown_checked_before_exposure(self):
        portfolio = _portfolio(trades=[_trade(seconds_ago=1)])
        verdict = CircuitBreaker().check_trade(
            _request(quantity=1000), portfolio, now=NOW
        )

        assert verdict.triggered_rule == TriggeredRule.COOLDOWN

    def test_allowed_verdict(self):
        verdict = CircuitBreaker().check_trade(_request(), _portfolio(), now=NOW)

        assert verdict.allowed
        assert verdict.reason is None
        assert verdict.triggered_rule is None
