"""Breakout agent: trades volatility expansion in the trend direction."""

from __future__ import annotations

from typing import Sequence

from core.agents.base import BaseAgent
from core.agents.protocol import AuxData
from core.agents.registry import register_agent
from core.indicators import atr
from core.models.bar import PriceBar
from core.models.signal import AgentRole, AgentVote, MarketRegime, Signal

VOLATILITY_THRESHOLD = 40
ATR_PERCENT_TRIGGER = 2.0


@register_agent("volatility")
class VolatilityAgent(BaseAgent):
    id = "volatility_agent"
    name = "Hunter (Volatility)"
    role = AgentRole.VOLATILE

    def _evaluate(
        self,
        history: Sequence[PriceBar],
        regime: MarketRegime | None,
        aux_data: AuxData | None,
    ) -> AgentVote:
        if regime == MarketRegime.SQUEEZE:
            return self._vote(Signal.HOLD, 50, "Squeeze Active - Waiting for breakout")

        last = history[-1].close
        atr_percent = atr(history, 14) / last * 100 if last > 0 else 0.0

        score = 0.0
        reasons: list[str] = []

        if atr_percent > ATR_PERCENT_TRIGGER and regime is not None and regime.is_trend:
            # Base 40, plus up to 30 more as ATR% expands past the trigger
            strength = 40 + min(30.0, (atr_percent - ATR_PERCENT_TRIGGER) * 10)
            if regime == MarketRegime.BULL_TREND:
                score = strength
                reasons.append(f"High Volatility Breakout (Up, ATR {atr_percent:.1f}%)")
            else:
                score = -strength
                reasons.append(f"High Volatility Breakout (Down, ATR {atr_percent:.1f}%)")
        else:
            reasons.append("Low Volatility")

        return self._vote_from_score(score, VOLATILITY_THRESHOLD, reasons, "Market Dormant")
