"""Price bar (OHLC candle) data model."""

from datetime import date

from pydantic import BaseModel, ConfigDict


class PriceBar(BaseModel):
    """Daily OHLC bar.

    Bar sequences handed to indicators, agents and backtests must be
    strictly ascending by ``time``.
    """

    model_config = ConfigDict(frozen=True)

    time: date
    open: float
    high: float
    low: float
    close: float
    volume: float | None = None


def closes_of(bars: list[PriceBar]) -> list[float]:
    """Extract the close series from a list of bars."""
    return [b.close for b in bars]
