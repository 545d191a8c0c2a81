"""Backtest data access."""

from backtest.storage.bar_source import (
    BarSource,
    CsvBarSource,
    InMemoryBarSource,
    bars_from_frame,
    load_many,
)

__all__ = [
    "BarSource",
    "CsvBarSource",
    "InMemoryBarSource",
    "bars_from_frame",
    "load_many",
]
