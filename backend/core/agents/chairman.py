"""Chairman agent: the council's own directional vote.

The chairman only votes here; weighting the council is the job of
``core.consensus.ConsensusAggregator``.
"""

from __future__ import annotations

from typing import Sequence

from core.agents.base import BaseAgent
from core.agents.protocol import AuxData
from core.agents.registry import register_agent
from core.indicators import rsi, sma
from core.models.bar import PriceBar, closes_of
from core.models.signal import AgentRole, AgentVote, MarketRegime, Signal

CHAIRMAN_THRESHOLD = 25
STRONG_SCORE = 50
STRONG_CONFIDENCE = 90


@register_agent("chairman")
class ChairmanAgent(BaseAgent):
    id = "chairman"
    name = "Alpha (Chairman)"
    role = AgentRole.CHAIRMAN

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
        rsi_value = rsi(closes)

        score = 0.0
        reasons: list[str] = []

        if last > sma20 > sma50:
            score += 30
            reasons.append("Perfect Bull Alignment")
        elif last < sma20 < sma50:
            score -= 30
            reasons.append("Bear Trend")

        if regime == MarketRegime.BULL_TREND:
            score += 25
            reasons.append("Confirmed Bull Regime")
        elif regime == MarketRegime.BEAR_TREND:
            score -= 25
            reasons.append("Confirmed Bear Regime")
        elif rsi_value < 30:
            # RSI extremes are only read outside a confirmed trend
            score += 20
            reasons.append(f"Oversold (RSI {round(rsi_value)})")
        elif rsi_value > 70:
            score -= 20
            reasons.append(f"Overbought (RSI {round(rsi_value)})")

        if regime == MarketRegime.SQUEEZE:
            reasons.append("Squeeze Detected (Await Breakout)")
            if last > sma20:
                score += 10
        elif regime == MarketRegime.VOLATILE:
            reasons.append("High Volatility (Caution)")
            score *= 0.5

        vote = self._vote_from_score(score, CHAIRMAN_THRESHOLD, reasons, "No clear signal")
        if abs(score) > STRONG_SCORE:
            return self._vote(vote.signal, STRONG_CONFIDENCE, vote.reason)
        return vote
