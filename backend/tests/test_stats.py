"""Tests for backtest statistics helpers."""

from datetime import date

import pytest

from core.models.portfolio import SimulatedTrade
from backtest.stats import (
    RISK_FREE_RATE,
    TRADING_DAYS_PER_YEAR,
    DrawdownTracker,
    StatisticsCalculator,
)


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def make_trade(pnl: float = 0.0, closed: bool = True) -> SimulatedTrade:
    """Build a SimulatedTrade, closed unless told otherwise."""
    trade = SimulatedTrade(entry_date=date(2024, 1, 2), entry_price=100.0, quantity=1)
    if closed:
        trade.exit_date = date(2024, 1, 5)
        trade.exit_price = 100.0 + pnl
        trade.pnl = pnl
    return trade


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

class TestConstants:
    def test_trading_days(self):
        assert TRADING_DAYS_PER_YEAR == 252

    def test_risk_free_rate(self):
        assert RISK_FREE_RATE == 0.02


# ---------------------------------------------------------------------------
# Trade statistics
# ---------------------------------------------------------------------------

class TestWinRate:
    def test_no_trades(self):
        assert StatisticsCalculator.win_rate([]) == 0.0

    def test_counts_only_completed_trades(self):
        trades = [make_trade(10), make_trade(-5), make_trade(closed=False)]
        assert StatisticsCalculator.win_rate(trades) == pytest.approx(50.0)

    def test_breakeven_is_not_a_win(self):
        assert StatisticsCalculator.win_rate([make_trade(0), make_trade(1)]) == pytest.approx(50.0)


class TestProfitFactor:
    def test_ratio(self):
        assert StatisticsCalculator.profit_factor(30, 10) == 3.0
        assert StatisticsCalculator.profit_factor(10, 3) == 3.33

    def test_no_losses_reports_gross_win(self):
        assert StatisticsCalculator.profit_factor(24, 0) == 24.0

    def test_nothing_traded(self):
        assert StatisticsCalculator.profit_factor(0, 0) == 0.0

    def test_only_losses(self):
        assert StatisticsCalculator.profit_factor(0, 12) == 0.0


# ---------------------------------------------------------------------------
# Return / risk metrics
# ---------------------------------------------------------------------------

class TestCagr:
    def test_one_year_doubling(self):
        assert StatisticsCalculator.cagr_percent(20_000, 10_000, 252) == 100.0

    def test_two_years(self):
        assert StatisticsCalculator.cagr_percent(12_100, 10_000, 504) == 10.0

    def test_degenerate_inputs(self):
        assert StatisticsCalculator.cagr_percent(12_000, 10_000, 0) == 0.0
        assert StatisticsCalculator.cagr_percent(0, 10_000, 252) == 0.0
        assert StatisticsCalculator.cagr_percent(12_000, 0, 252) == 0.0


class TestDailyReturns:
    def test_simple_returns(self):
        returns = StatisticsCalculator.daily_returns([100, 110, 99])
        assert returns == pytest.approx([0.1, -0.1])

    def test_zero_previous_value_skipped(self):
        assert StatisticsCalculator.daily_returns([0, 10, 20]) == pytest.approx([1.0])

    def test_single_value(self):
        assert StatisticsCalculator.daily_returns([100]) == []


class TestVolatility:
    def test_annualized_population_std(self):
        assert StatisticsCalculator.annualized_volatility_percent([0.01, -0.01]) == 15.87

    def test_constant_returns(self):
        assert StatisticsCalculator.annualized_volatility_percent([0.01, 0.01]) == 0.0

    def test_no_returns(self):
        assert StatisticsCalculator.annualized_volatility_percent([]) == 0.0


class TestSharpe:
    def test_excess_return_over_volatility(self):
        assert StatisticsCalculator.sharpe_ratio(10.0, 20.0) == 0.4

    def test_negative(self):
        assert StatisticsCalculator.sharpe_ratio(0.0, 10.0) == -0.2

    def test_zero_volatility(self):
        assert StatisticsCalculator.sharpe_ratio(50.0, 0.0) == 0.0


# ---------------------------------------------------------------------------
# Drawdown
# ---------------------------------------------------------------------------

class TestDrawdownTracker:
    def test_worst_peak_to_trough(self):
        tracker = DrawdownTracker()
        for value in [100, 120, 90, 130, 117]:
            tracker.update(value)

        assert tracker.peak == 130
        assert tracker.max_drawdown == pytest.approx(0.25)
        assert tracker.max_drawdown_percent == 25.0

    def test_seeded_peak(self):
        tracker = DrawdownTracker(peak=10_000)
        tracker.update(9_000)

        assert tracker.max_drawdown_percent == 10.0

    def test_monotonic_rise_has_no_drawdown(self):
        tracker = DrawdownTracker()
        for value in range(1, 10):
            tracker.update(value)

        assert tracker.max_drawdown == 0.0
