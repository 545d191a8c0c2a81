"""Errors raised by backtest entry points.

Each aborts only the request that raised it.
"""


class BacktestError(Exception):
    """Base class for caller-fatal backtest errors."""


class WeightSumError(BacktestError, ValueError):
    """Portfolio weights do not sum to 100%."""

    def __init__(self, total: float):
        self.total = total
        super().__init__(f"Weight sum must be 100% (got {total:g}%)")


class NoCommonDatesError(BacktestError):
    """The requested assets share no trading dates."""

    def __init__(self, detail: str = ""):
        message = "Insufficient common dates for backtest"
        super().__init__(f"{message} ({detail})" if detail else message)


class MissingSymbolDataError(NoCommonDatesError):
    """No price data was supplied for a requested symbol."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"no data for {symbol}")
