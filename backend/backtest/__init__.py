"""Backtesting for the council decision engine.

Only depends on core/ for business logic.

- Arena: single-asset replay through council, sizing and exits
- run_portfolio_backtest: weighted buy-and-drift simulation

Usage:
    python -m backtest arena AAPL
    python -m backtest portfolio SPY:60 AGG:40
"""

from backtest.arena import Arena
from backtest.errors import (
    BacktestError,
    MissingSymbolDataError,
    NoCommonDatesError,
    WeightSumError,
)
from backtest.portfolio import PortfolioAssetConfig, run_portfolio_backtest
from backtest.stats import BacktestReport, PortfolioBacktestResult

__all__ = [
    "Arena",
    "BacktestError",
    "MissingSymbolDataError",
    "NoCommonDatesError",
    "WeightSumError",
    "PortfolioAssetConfig",
    "run_portfolio_backtest",
    "BacktestReport",
    "PortfolioBacktestResult",
]
