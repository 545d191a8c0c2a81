"""Technical indicators (pure math, no I/O)."""

from core.indicators.indicators import (
    NEUTRAL_ADX,
    NEUTRAL_RSI,
    adx,
    atr,
    bollinger_bands,
    ema_series,
    macd,
    rsi,
    sma,
    true_range,
)

__all__ = [
    "NEUTRAL_ADX",
    "NEUTRAL_RSI",
    "adx",
    "atr",
    "bollinger_bands",
    "ema_series",
    "macd",
    "rsi",
    "sma",
    "true_range",
]
