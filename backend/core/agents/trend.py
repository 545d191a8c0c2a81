"""Trend-following agent: SMA perfect order plus MACD momentum."""

from __future__ import annotations

import math
from typing import Sequence

from core.agents.base import BaseAgent
from core.agents.protocol import AuxData
from core.agents.registry import register_agent
from core.indicators import macd, sma
from core.models.bar import PriceBar, closes_of
from core.models.signal import AgentRole, AgentVote, MarketRegime

TREND_THRESHOLD = 30


@register_agent("trend")
class TrendAgent(BaseAgent):
    id = "trend_agent"
    name = "Trend Follower"
    role = AgentRole.TREND

    def _evaluate(
        self,
        history: Sequence[PriceBar],
        regime: MarketRegime | None,
        aux_data: AuxData | None,
    ) -> AgentVote:
        closes = closes_of(list(history))
        last = closes[-1]
        sma20 = sma(closes, 20)
        sma50 = sma(closes, 50)

        score = 0.0
        reasons: list[str] = []

        if last > sma20 > sma50:
            score += 40
            reasons.append("Perfect Order (Price > SMA20 > SMA50)")
        elif last < sma20 < sma50:
            score -= 40
            reasons.append("Dead Cross Order")

        macd_line, signal_line, hist = macd(closes)
        if not (math.isnan(macd_line[-1]) or math.isnan(signal_line[-1])):
            if macd_line[-1] > signal_line[-1]:
                score += 20
                # Skip the momentum bonus until two histogram values exist
                if not math.isnan(hist[-2]) and hist[-1] > 0 and hist[-1] > hist[-2]:
                    score += 10
                    reasons.append("MACD Momentum Rising")
            else:
                score -= 20

        return self._vote_from_score(score, TREND_THRESHOLD, reasons, "No strong trend")
