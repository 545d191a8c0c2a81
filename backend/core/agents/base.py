"""Shared plumbing for the built-in agents."""

from __future__ import annotations

from typing import Sequence

from core.agents.protocol import AuxData
from core.models.bar import PriceBar
from core.models.signal import AgentRole, AgentVote, MarketRegime, Signal, sentiment_for
from core.regime import classify_regime

MIN_HISTORY = 50


class BaseAgent:
    """Base class: data-sufficiency guard, regime resolution, vote building.

    Subclasses set ``id``, ``name`` and ``role`` and implement
    ``_evaluate``. ``min_history`` of 0 disables the bar-count guard.
    """

    id: str = ""
    name: str = ""
    role: AgentRole
    min_history: int = MIN_HISTORY

    def analyze(
        self,
        history: Sequence[PriceBar],
        regime: MarketRegime | None = None,
        aux_data: AuxData | None = None,
    ) -> AgentVote:
        if len(history) < self.min_history:
            return self._neutral(
                f"Insufficient data ({len(history)}/{self.min_history} bars)"
            )
        if regime is None and self.min_history:
            regime = classify_regime(history).regime
        return self._evaluate(history, regime, aux_data)

    def _evaluate(
        self,
        history: Sequence[PriceBar],
        regime: MarketRegime | None,
        aux_data: AuxData | None,
    ) -> AgentVote:
        raise NotImplementedError

    def _neutral(self, reason: str) -> AgentVote:
        return AgentVote(
            agent_id=self.id,
            name=self.name,
            role=self.role,
            signal=Signal.HOLD,
            confidence=0,
            sentiment=sentiment_for(Signal.HOLD),
            reason=reason,
        )

    def _vote(self, signal: Signal, confidence: float, reason: str) -> AgentVote:
        return AgentVote(
            agent_id=self.id,
            name=self.name,
            role=self.role,
            signal=signal,
            confidence=min(max(confidence, 0.0), 100.0),
            sentiment=sentiment_for(signal),
            reason=reason,
        )

    def _vote_from_score(
        self,
        score: float,
        threshold: float,
        reasons: list[str],
        fallback_reason: str,
    ) -> AgentVote:
        """Threshold a signed score into a vote; confidence is ``|score|``."""
        if score >= threshold:
            signal = Signal.BUY
        elif score <= -threshold:
            signal = Signal.SELL
        else:
            signal = Signal.HOLD
        return self._vote(signal, abs(score), ", ".join(reasons) or fallback_reason)
