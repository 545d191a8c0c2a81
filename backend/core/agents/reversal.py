"""Mean-reversion agent: RSI extremes and Bollinger band breaches."""

from __future__ import annotations

from typing import Sequence

from core.agents.base import BaseAgent
from core.agents.protocol import AuxData
from core.agents.registry import register_agent
from core.indicators import bollinger_bands, rsi
from core.models.bar import PriceBar, closes_of
from core.models.signal import AgentRole, AgentVote, MarketRegime

REVERSAL_THRESHOLD = 40
# Fading a confirmed trend is discounted to a quarter of its raw score.
TREND_REGIME_DAMPING = 0.25


@register_agent("reversal")
class ReversalAgent(BaseAgent):
    id = "reversal_agent"
    name = "Contra (Reversal)"
    role = AgentRole.REVERSAL

    def _evaluate(
        self,
        history: Sequence[PriceBar],
        regime: MarketRegime | None,
        aux_data: AuxData | None,
    ) -> AgentVote:
        closes = closes_of(list(history))
        last = closes[-1]
        rsi_value = rsi(closes)
        upper, _, lower = bollinger_bands(closes, 20, 2.0)

        score = 0.0
        reasons: list[str] = []

        if rsi_value < 30:
            score += 50
            reasons.append(f"RSI Oversold ({round(rsi_value)})")
        elif rsi_value > 70:
            score -= 50
            reasons.append(f"RSI Overbought ({round(rsi_value)})")

        if last < lower:
            score += 30
            reasons.append("Below Lower Band")
        elif last > upper:
            score -= 30
            reasons.append("Above Upper Band")

        if score and regime is not None and regime.is_trend:
            score *= TREND_REGIME_DAMPING
            reasons.append(f"Damped against {regime.value}")

        return self._vote_from_score(
            score, REVERSAL_THRESHOLD, reasons, "No extremes detected"
        )
