"""Multi-asset portfolio backtest (buy and drift, no rebalancing).

Each asset is bought once on the first common trading date with
``capital * weight / 100`` less commission, then revalued at every
common date's close.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from core.models.bar import PriceBar

from backtest.errors import (
    BacktestError,
    MissingSymbolDataError,
    NoCommonDatesError,
    WeightSumError,
)
from backtest.stats import (
    AssetResult,
    DrawdownTracker,
    EquityPoint,
    PortfolioBacktestResult,
    StatisticsCalculator,
)

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 0.01


class PortfolioAssetConfig(BaseModel):
    """One portfolio holding and its target weight in percent."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    weight: float = Field(ge=0, le=100)


def validate_weights(assets: Sequence[PortfolioAssetConfig]) -> None:
    """Raise WeightSumError unless weights sum to 100 (+/- 0.01)."""
    total = sum(a.weight for a in assets)
    if abs(total - 100) > WEIGHT_TOLERANCE:
        raise WeightSumError(total)


def _index_by_date(
    assets: Sequence[PortfolioAssetConfig],
    data: Mapping[str, Sequence[PriceBar]],
    period_days: int,
) -> tuple[dict[str, dict[date, PriceBar]], list[date]]:
    """Build symbol -> date -> bar maps and the sorted common dates."""
    by_symbol: dict[str, dict[date, PriceBar]] = {}
    common: set[date] | None = None

    for asset in assets:
        bars = data.get(asset.symbol)
        if not bars:
            raise MissingSymbolDataError(asset.symbol)
        window = list(bars)[-period_days:] if period_days > 0 else list(bars)
        by_symbol[asset.symbol] = {bar.time: bar for bar in window}
        dates = set(by_symbol[asset.symbol])
        common = dates if common is None else common & dates

    if not common:
        raise NoCommonDatesError()
    return by_symbol, sorted(common)


def run_portfolio_backtest(
    assets: Sequence[PortfolioAssetConfig],
    data: Mapping[str, Sequence[PriceBar]],
    initial_capital: float = 10_000.0,
    period_days: int = 252,
    commission_rate: float = 0.0,
) -> PortfolioBacktestResult:
    """Simulate a weighted buy-and-drift portfolio.

    Args:
        assets: Holdings with weights in percent; must sum to 100.
        data: Bars per symbol, ascending by time.
        initial_capital: Starting portfolio value.
        period_days: Each series is cut to its last ``period_days`` bars
            before the common dates are intersected.
        commission_rate: Fraction of each allocation paid on entry.

    Returns:
        PortfolioBacktestResult with daily portfolio values.

    Raises:
        WeightSumError: Weights do not sum to 100%.
        MissingSymbolDataError: A symbol has no bars.
        NoCommonDatesError: The series share no dates.
    """
    validate_weights(assets)
    if initial_capital <= 0:
        raise BacktestError(f"initial_capital must be positive, got {initial_capital}")
    by_symbol, dates = _index_by_date(assets, data, period_days)
    first = dates[0]
    logger.info(
        "Portfolio backtest: %d assets, %d common dates (%s -> %s)",
        len(assets), len(dates), first, dates[-1],
    )

    # One slot per entry; a symbol listed twice is held twice.
    total_commission = 0.0
    quantities: list[float] = []
    allocations: list[float] = []
    for asset in assets:
        allocation = initial_capital * asset.weight / 100
        commission = allocation * commission_rate
        total_commission += commission
        start_close = by_symbol[asset.symbol][first].close
        quantities.append((allocation - commission) / start_close if start_close else 0.0)
        allocations.append(allocation)

    history: list[EquityPoint] = []
    drawdown = DrawdownTracker()
    asset_values = list(allocations)
    for day in dates:
        for i, asset in enumerate(assets):
            asset_values[i] = quantities[i] * by_symbol[asset.symbol][day].close
        total = sum(asset_values)
        drawdown.update(total)
        history.append(EquityPoint(time=day, value=total))

    final_value = history[-1].value
    values = [p.value for p in history]
    calc = StatisticsCalculator
    annualized = calc.cagr_percent(final_value, initial_capital, len(dates))
    volatility = calc.annualized_volatility_percent(calc.daily_returns(values))

    asset_results = [
        AssetResult(
            symbol=asset.symbol,
            weight=asset.weight,
            initial_value=allocations[i],
            final_value=asset_values[i],
            return_percent=round(
                (asset_values[i] - allocations[i]) / allocations[i] * 100, 2
            ) if allocations[i] else 0.0,
        )
        for i, asset in enumerate(assets)
    ]

    return PortfolioBacktestResult(
        initial_capital=initial_capital,
        final_value=final_value,
        total_return_percent=round((final_value - initial_capital) / initial_capital * 100, 2),
        annualized_return=annualized,
        sharpe_ratio=calc.sharpe_ratio(annualized, volatility),
        volatility=volatility,
        max_drawdown=drawdown.max_drawdown_percent,
        total_commission=total_commission,
        period_days=len(dates),
        asset_results=asset_results,
        portfolio_history=history,
    )
