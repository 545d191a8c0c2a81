"""Market regime classifier.

Derives a sentiment, a confidence and a coarse regime label from RSI,
ADX and the SMA(5)/SMA(20) spread of one bar series. ADX decides how
RSI is read:

- strong trend (ADX > 25): follow the SMA trend, ignore RSI extremes
- weak trend (ADX < 20): RSI extremes are reversal signals
- medium trend: an RSI extreme only counts when it opposes the SMA
  trend; otherwise a trend strength beyond +/-2% sets the bias

SQUEEZE exists as a regime value but is never produced here.
"""

from __future__ import annotations

import logging
from typing import Sequence

from core.indicators import NEUTRAL_ADX, NEUTRAL_RSI, adx, rsi, sma
from core.models.bar import PriceBar, closes_of
from core.models.signal import MarketRegime, RegimeAnalysis, Sentiment

logger = logging.getLogger(__name__)

MIN_BARS = 20
STRONG_TREND_ADX = 25
WEAK_TREND_ADX = 20
VOLATILE_ADX = 30

NEUTRAL_ANALYSIS = RegimeAnalysis(
    sentiment=Sentiment.NEUTRAL,
    confidence=50,
    rsi=int(NEUTRAL_RSI),
    adx=int(NEUTRAL_ADX),
    regime=MarketRegime.SIDEWAYS,
)


def _sentiment_and_confidence(
    rsi_value: float,
    adx_value: float,
    trend_strength: float,
    is_bullish: bool,
) -> tuple[Sentiment, float]:
    if adx_value > STRONG_TREND_ADX:
        if is_bullish:
            return Sentiment.BULLISH, min(
                85, 60 + (rsi_value - 50) * 0.5 + (adx_value - 25) * 0.5
            )
        return Sentiment.BEARISH, min(
            85, 60 + (50 - rsi_value) * 0.5 + (adx_value - 25) * 0.5
        )

    if adx_value < WEAK_TREND_ADX:
        if rsi_value > 70:
            return Sentiment.BEARISH, min(80, 55 + (rsi_value - 70) * 1.5)
        if rsi_value < 30:
            return Sentiment.BULLISH, min(80, 55 + (30 - rsi_value) * 1.5)
        return Sentiment.NEUTRAL, 50

    if rsi_value > 70 and not is_bullish:
        return Sentiment.BEARISH, min(75, 50 + (rsi_value - 70))
    if rsi_value < 30 and is_bullish:
        return Sentiment.BULLISH, min(75, 50 + (30 - rsi_value))
    if trend_strength > 2:
        return Sentiment.BULLISH, min(70, 50 + trend_strength * 3)
    if trend_strength < -2:
        return Sentiment.BEARISH, min(70, 50 + abs(trend_strength) * 3)
    return Sentiment.NEUTRAL, 50


def _regime_label(adx_value: float, trend_strength: float, is_bullish: bool) -> MarketRegime:
    if adx_value > STRONG_TREND_ADX:
        return MarketRegime.BULL_TREND if is_bullish else MarketRegime.BEAR_TREND
    if adx_value > VOLATILE_ADX and abs(trend_strength) > 3:
        return MarketRegime.VOLATILE
    return MarketRegime.SIDEWAYS


def classify_regime(bars: Sequence[PriceBar]) -> RegimeAnalysis:
    """Classify the market state of a bar series.

    Args:
        bars: OHLC bars, oldest first.

    Returns:
        RegimeAnalysis with confidence, RSI and ADX rounded to integers.
        Fewer than 20 bars yields the fixed neutral analysis.
    """
    if len(bars) < MIN_BARS:
        return NEUTRAL_ANALYSIS

    closes = closes_of(list(bars))
    rsi_value = rsi(closes)
    adx_value = adx(bars)

    sma5 = sma(closes, 5)
    sma20 = sma(closes, 20)
    trend_strength = (sma5 - sma20) / sma20 * 100 if sma20 else 0.0
    is_bullish = sma5 > sma20

    sentiment, confidence = _sentiment_and_confidence(
        rsi_value, adx_value, trend_strength, is_bullish
    )
    regime = _regime_label(adx_value, trend_strength, is_bullish)

    logger.debug(
        "Regime %s (%s %.1f) rsi=%.1f adx=%.1f ts=%.2f",
        regime.value, sentiment.value, confidence, rsi_value, adx_value, trend_strength,
    )
    return RegimeAnalysis(
        sentiment=sentiment,
        confidence=int(round(max(0.0, min(100.0, confidence)))),
        rsi=int(round(rsi_value)),
        adx=int(round(adx_value)),
        regime=regime,
        trend_strength=trend_strength,
    )
