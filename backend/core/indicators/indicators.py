"""Technical indicators for the council's agents.

All functions are pure and never raise on short input: they degrade to a
documented neutral default instead (SMA -> last value, RSI -> 50,
ADX -> 20, ATR -> 0.0).

RSI and ADX here are deliberate simplifications and are the canonical
numbers for this system:

- RSI uses plain sums over the last ``period`` diffs (no Wilder
  smoothing), and a window without losses uses ``rs = 100``, so it caps
  at ~99.01 and never reaches exactly 100.
- ADX is the unsmoothed mean of per-bar DX over the last ``period`` bar
  pairs, not Wilder's recursive ADX.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from core.models.bar import PriceBar

NEUTRAL_RSI = 50.0
NEUTRAL_ADX = 20.0


# =============================================================================
# Moving averages
# =============================================================================

def sma(values: Sequence[float], period: int) -> float:
    """
    Simple Moving Average of the latest window.

    Args:
        values: Sequence of values, oldest first
        period: Window length

    Returns:
        Mean of the last ``period`` values. With fewer values than
        ``period`` the last value is returned as-is (not a partial
        mean); an empty input returns 0.0.
    """
    if len(values) == 0:
        return 0.0
    if period <= 0 or len(values) < period:
        return float(values[-1])
    return float(np.mean(np.asarray(values[-period:], dtype=np.float64)))


def ema_series(values: Sequence[float], period: int) -> list[float]:
    """
    Exponential Moving Average series.

    Seeded with the SMA of the first ``period`` values.

    Args:
        values: Sequence of values, oldest first
        period: EMA period

    Returns:
        List the same length as ``values`` with NaN before the seed.
    """
    if period <= 0 or len(values) < period:
        return [math.nan] * len(values)

    arr = np.asarray(values, dtype=np.float64)
    multiplier = 2.0 / (period + 1)

    result = np.empty_like(arr)
    result[:period - 1] = np.nan
    result[period - 1] = np.mean(arr[:period])

    for i in range(period, len(arr)):
        result[i] = arr[i] * multiplier + result[i - 1] * (1 - multiplier)

    return result.tolist()


# =============================================================================
# Oscillators
# =============================================================================

def rsi(closes: Sequence[float], period: int = 14) -> float:
    """
    Relative Strength Index over the last ``period`` diffs.

    Args:
        closes: Close prices, oldest first
        period: Lookback period

    Returns:
        RSI in [0, 100); 50 when fewer than ``period + 1`` closes.
    """
    if period <= 0 or len(closes) < period + 1:
        return NEUTRAL_RSI

    window = np.asarray(closes[-(period + 1):], dtype=np.float64)
    changes = np.diff(window)
    gains = float(changes[changes > 0].sum())
    losses = float(-changes[changes < 0].sum())

    avg_gain = gains / period
    avg_loss = losses / period
    rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss

    return 100.0 - 100.0 / (1.0 + rs)


def adx(bars: Sequence[PriceBar], period: int = 14) -> float:
    """
    Simplified Average Directional Index (trend strength).

    ADX > 25 reads as a strong trend, ADX < 20 as weak or no trend.

    Args:
        bars: OHLC bars, oldest first
        period: Number of bar pairs to average over

    Returns:
        Mean DX over the window in [0, 100]; 20 when fewer than
        ``period + 1`` bars. Pairs with zero true range or zero
        directional movement add nothing but still count in the divisor.
    """
    if period <= 0 or len(bars) < period + 1:
        return NEUTRAL_ADX

    data = bars[-(period + 1):]
    sum_dx = 0.0

    for prev, cur in zip(data, data[1:]):
        tr = max(
            cur.high - cur.low,
            abs(cur.high - prev.close),
            abs(cur.low - prev.close),
        )
        up_move = cur.high - prev.high
        down_move = prev.low - cur.low
        plus_dm = max(up_move, 0.0) if up_move > down_move else 0.0
        minus_dm = max(down_move, 0.0) if down_move > up_move else 0.0

        if tr > 0:
            plus_di = plus_dm / tr * 100
            minus_di = minus_dm / tr * 100
            di_sum = plus_di + minus_di
            if di_sum > 0:
                sum_dx += abs(plus_di - minus_di) / di_sum * 100

    return sum_dx / period


def macd(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> tuple[list[float], list[float], list[float]]:
    """
    Moving Average Convergence Divergence.

    Args:
        closes: Close prices, oldest first
        fast: Fast EMA period
        slow: Slow EMA period
        signal: Signal-line EMA period (over the defined MACD values)

    Returns:
        Tuple of (macd_line, signal_line, histogram), each the same length
        as ``closes`` with NaN where undefined.
    """
    n = len(closes)
    fast_ema = np.asarray(ema_series(closes, fast), dtype=np.float64)
    slow_ema = np.asarray(ema_series(closes, slow), dtype=np.float64)
    macd_line = fast_ema - slow_ema

    signal_line = np.full(n, np.nan)
    defined = np.flatnonzero(~np.isnan(macd_line))
    if len(defined) >= signal:
        start = int(defined[0])
        signal_line[start:] = ema_series(macd_line[start:].tolist(), signal)

    histogram = macd_line - signal_line
    return macd_line.tolist(), signal_line.tolist(), histogram.tolist()


def bollinger_bands(
    closes: Sequence[float],
    period: int = 20,
    num_std: float = 2.0,
) -> tuple[float, float, float]:
    """
    Bollinger Bands of the latest window (population standard deviation).

    Args:
        closes: Close prices, oldest first
        period: Window length
        num_std: Band width in standard deviations

    Returns:
        Tuple of (upper, middle, lower). With fewer than ``period`` closes
        all three collapse to the SMA fallback (the last close).
    """
    middle = sma(closes, period)
    if period <= 0 or len(closes) < period:
        return middle, middle, middle

    std = float(np.std(np.asarray(closes[-period:], dtype=np.float64)))
    return middle + num_std * std, middle, middle - num_std * std


# =============================================================================
# Volatility
# =============================================================================

def true_range(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> list[float]:
    """
    Calculate True Range.

    Args:
        highs: High prices
        lows: Low prices
        closes: Close prices

    Returns:
        List of True Range values; the first bar uses high - low.
    """
    n = len(highs)
    if n == 0:
        return []

    result = [highs[0] - lows[0]]

    for i in range(1, n):
        hl = highs[i] - lows[i]
        hc = abs(highs[i] - closes[i - 1])
        lc = abs(lows[i] - closes[i - 1])
        result.append(max(hl, hc, lc))

    return result


def atr(bars: Sequence[PriceBar], period: int = 14) -> float:
    """
    Average True Range (Wilder smoothing) of the latest bar.

    Args:
        bars: OHLC bars, oldest first
        period: ATR period

    Returns:
        Latest ATR value; 0.0 when fewer than ``period`` bars.
    """
    tr = true_range(
        [b.high for b in bars],
        [b.low for b in bars],
        [b.close for b in bars],
    )
    if period <= 0 or len(tr) < period:
        return 0.0

    value = float(np.mean(tr[:period]))
    alpha = 1.0 / period
    for tr_value in tr[period:]:
        value = alpha * tr_value + (1 - alpha) * value

    return value
