"""Bar data sources for backtesting.

CSV files are read with pandas, one file per symbol (``<SYMBOL>.csv``)
with a ``time`` (or ``date``) column plus open/high/low/close and an
optional volume column.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Protocol, Sequence

import pandas as pd

from core.models.bar import PriceBar

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ("open", "high", "low", "close")


class BarSource(Protocol):
    """Protocol for daily bar access."""

    def load(self, symbol: str) -> list[PriceBar]: ...


def bars_from_frame(df: pd.DataFrame) -> list[PriceBar]:
    """Convert an OHLC DataFrame to time-ascending, de-duplicated bars.

    Duplicate dates keep the last row.
    """
    df = df.rename(columns=lambda c: str(c).strip().lower())
    if "time" not in df.columns and "date" in df.columns:
        df = df.rename(columns={"date": "time"})
    missing = [c for c in ("time", *PRICE_COLUMNS) if c not in df.columns]
    if missing:
        raise ValueError(f"Bar data is missing columns: {', '.join(missing)}")

    df = df.copy()
    df["time"] = pd.to_datetime(df["time"]).dt.date
    df = df.dropna(subset=list(PRICE_COLUMNS))
    df = df.sort_values("time", kind="stable").drop_duplicates(subset="time", keep="last")

    has_volume = "volume" in df.columns
    bars = []
    for row in df.itertuples(index=False):
        volume = getattr(row, "volume") if has_volume else None
        bars.append(
            PriceBar(
                time=row.time,
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=None if volume is None or pd.isna(volume) else float(volume),
            )
        )
    return bars


class CsvBarSource:
    """Read ``<SYMBOL>.csv`` files from a directory."""

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)

    def path_for(self, symbol: str) -> Path:
        return self._directory / f"{symbol}.csv"

    def load(self, symbol: str) -> list[PriceBar]:
        """Load bars for ``symbol``; an absent file yields an empty list."""
        path = self.path_for(symbol)
        if not path.exists():
            logger.warning("No bar file for %s at %s", symbol, path)
            return []
        bars = bars_from_frame(pd.read_csv(path))
        logger.info("Loaded %d bars for %s from %s", len(bars), symbol, path)
        return bars


class InMemoryBarSource:
    """Serve bars from a dict; used by tests and callers with data in hand."""

    def __init__(self, data: Mapping[str, Sequence[PriceBar]]):
        self._data = {symbol: list(bars) for symbol, bars in data.items()}

    def load(self, symbol: str) -> list[PriceBar]:
        return list(self._data.get(symbol, []))


def load_many(source: BarSource, symbols: Sequence[str]) -> dict[str, list[PriceBar]]:
    """Load several symbols from one source."""
    return {symbol: source.load(symbol) for symbol in symbols}
