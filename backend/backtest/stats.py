"""Statistics and result models for backtests.

Percent-valued fields (profit_percent, win_rate, max_drawdown,
annualized_return, volatility) are in percent; sharpe_ratio and
profit_factor are plain ratios.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Sequence

import numpy as np
from pydantic import BaseModel, Field

from core.models.portfolio import SimulatedTrade

logger = logging.getLogger(__name__)

TRADING_DAYS_PER_YEAR = 252
RISK_FREE_RATE = 0.02


class EquityPoint(BaseModel):
    time: date
    value: float


class BacktestReport(BaseModel):
    """Single-asset Arena result."""

    symbol: str
    total_days: int
    initial_balance: float
    final_balance: float
    profit: float
    profit_percent: float
    trade_count: int
    win_rate: float
    max_drawdown: float
    profit_factor: float
    trades: list[SimulatedTrade] = Field(default_factory=list)
    equity_curve: list[EquityPoint] = Field(default_factory=list)


class AssetResult(BaseModel):
    symbol: str
    weight: float
    initial_value: float
    final_value: float
    return_percent: float


class PortfolioBacktestResult(BaseModel):
    """Multi-asset buy-and-drift result."""

    initial_capital: float
    final_value: float
    total_return_percent: float
    annualized_return: float
    sharpe_ratio: float
    volatility: float
    max_drawdown: float
    total_commission: float
    period_days: int
    asset_results: list[AssetResult] = Field(default_factory=list)
    portfolio_history: list[EquityPoint] = Field(default_factory=list)


class DrawdownTracker:
    """Running peak and worst peak-to-current decline (as a fraction)."""

    def __init__(self, peak: float = -math.inf):
        self.peak = peak
        self.max_drawdown = 0.0

    def update(self, value: float) -> float:
        if value > self.peak:
            self.peak = value
        if self.peak > 0:
            drawdown = (self.peak - value) / self.peak
            if drawdown > self.max_drawdown:
                self.max_drawdown = drawdown
        return self.max_drawdown

    @property
    def max_drawdown_percent(self) -> float:
        return round(self.max_drawdown * 100, 2)


class StatisticsCalculator:
    """Stateless metric helpers shared by the Arena and portfolio backtest."""

    @staticmethod
    def win_rate(trades: Sequence[SimulatedTrade]) -> float:
        """Percent of completed trades with positive PnL (0 when none)."""
        completed = [t for t in trades if t.is_closed]
        if not completed:
            return 0.0
        wins = sum(1 for t in completed if t.pnl > 0)
        return wins / len(completed) * 100

    @staticmethod
    def profit_factor(gross_win: float, gross_loss: float) -> float:
        """Gross win over gross loss, rounded to 2 dp.

        With no losing trades the result is ``gross_win`` itself rather
        than infinity, so a loss-free run reports its total winnings.
        """
        if gross_loss == 0:
            return round(gross_win, 2)
        return round(gross_win / gross_loss, 2)

    @staticmethod
    def cagr_percent(final_value: float, initial_value: float, trading_days: int) -> float:
        """Compound annual growth rate in percent (2 dp)."""
        if trading_days <= 0 or initial_value <= 0 or final_value <= 0:
            return 0.0
        years = trading_days / TRADING_DAYS_PER_YEAR
        return round(((final_value / initial_value) ** (1 / years) - 1) * 100, 2)

    @staticmethod
    def daily_returns(values: Sequence[float]) -> list[float]:
        """Simple returns between consecutive values."""
        return [
            (cur - prev) / prev
            for prev, cur in zip(values, values[1:])
            if prev != 0
        ]

    @staticmethod
    def annualized_volatility_percent(returns: Sequence[float]) -> float:
        """Population stdev of daily returns * sqrt(252), in percent (2 dp)."""
        if len(returns) == 0:
            return 0.0
        daily_vol = float(np.std(np.asarray(returns, dtype=np.float64)))
        return round(daily_vol * math.sqrt(TRADING_DAYS_PER_YEAR) * 100, 2)

    @staticmethod
    def sharpe_ratio(
        cagr_percent: float,
        volatility_percent: float,
        risk_free_rate: float = RISK_FREE_RATE,
    ) -> float:
        """(CAGR - risk free) / volatility using fractions; 0 when vol is 0."""
        if volatility_percent == 0:
            return 0.0
        return round((cagr_percent / 100 - risk_free_rate) / (volatility_percent / 100), 2)
