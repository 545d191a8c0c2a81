"""Weighted council voting.

Two composed pieces:
- ConsensusAggregator: turns a set of agent votes into one decision
- Council: runs the regime classifier and every agent over the same
  history, then hands the votes to the aggregator

consensus_score = sum(direction * confidence * weight) / sum(weight),
with BUY=+1, SELL=-1, HOLD=0. The chairman votes like any agent, just
with the heaviest weight.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from core.agents import Agent, create_agent, create_agents
from core.models.bar import PriceBar
from core.models.config import DEFAULT_COUNCIL, CouncilConfig
from core.models.signal import (
    AgentRole,
    AgentVote,
    ConsensusResult,
    MarketRegime,
    Signal,
    sentiment_for,
)
from core.regime import classify_regime

logger = logging.getLogger(__name__)

ROLE_WEIGHTS: dict[AgentRole, float] = {
    AgentRole.CHAIRMAN: 2.0,
    AgentRole.VOLATILE: 1.5,
    AgentRole.TREND: 1.0,
    AgentRole.REVERSAL: 1.0,
}
DEFAULT_WEIGHT = 1.0
DEFAULT_DEADBAND = 10.0


class ConsensusAggregator:
    """Combine one vote per agent into a ConsensusResult."""

    def __init__(
        self,
        weights: Mapping[AgentRole, float] | None = None,
        deadband: float = DEFAULT_DEADBAND,
    ) -> None:
        self.weights = dict(ROLE_WEIGHTS if weights is None else weights)
        self.deadband = deadband

    @classmethod
    def from_config(cls, config: CouncilConfig) -> "ConsensusAggregator":
        weights = dict(ROLE_WEIGHTS)
        for role_name, weight in config.role_weights.items():
            weights[AgentRole(role_name.upper())] = weight
        return cls(weights=weights, deadband=config.deadband)

    def weight_for(self, role: AgentRole) -> float:
        return self.weights.get(role, DEFAULT_WEIGHT)

    def score(self, votes: Sequence[AgentVote]) -> float:
        """Weighted consensus score in [-100, 100]; 0 for no votes."""
        total_weight = 0.0
        weighted = 0.0
        for vote in votes:
            weight = self.weight_for(vote.role)
            weighted += vote.signal.direction * vote.confidence * weight
            total_weight += weight
        if total_weight <= 0:
            return 0.0
        return max(-100.0, min(100.0, weighted / total_weight))

    def aggregate(
        self,
        votes: Sequence[AgentVote],
        regime: MarketRegime,
        rsi: int = 50,
        adx: int = 20,
    ) -> ConsensusResult:
        score = self.score(votes)
        if score > self.deadband:
            signal = Signal.BUY
        elif score < -self.deadband:
            signal = Signal.SELL
        else:
            signal = Signal.HOLD

        summary = "; ".join(
            f"{v.name}: {v.signal.value} ({v.confidence:.0f}%)" for v in votes
        )
        return ConsensusResult(
            signal=signal,
            confidence=abs(score),
            sentiment=sentiment_for(signal),
            regime=regime,
            reason=f"Council {signal.value} (score {score:+.1f}) | {summary}",
            score=score,
            rsi=rsi,
            adx=adx,
            votes=list(votes),
        )


def default_agents() -> list[Agent]:
    """Price-driven agents consulted on every pass."""
    return create_agents(DEFAULT_COUNCIL)


class Council:
    """Full analysis pass: regime, agent votes, weighted consensus.

    The news agent is only consulted when headlines are supplied (an
    empty list still counts as supplied and yields a HOLD vote).
    """

    def __init__(
        self,
        agents: Sequence[Agent] | None = None,
        aggregator: ConsensusAggregator | None = None,
        news_agent: Agent | None = None,
    ) -> None:
        self.agents = list(agents) if agents is not None else default_agents()
        self.aggregator = aggregator or ConsensusAggregator()
        self.news_agent = news_agent or create_agent("news_sentiment")

    @classmethod
    def from_config(cls, config: CouncilConfig) -> "Council":
        """Seat the configured agents from the registry.

        Raises:
            KeyError: An agent key is not registered.
        """
        return cls(
            agents=create_agents(config.agents),
            aggregator=ConsensusAggregator.from_config(config),
            news_agent=create_agent(config.news_agent),
        )

    def analyze(
        self,
        bars: Sequence[PriceBar],
        headlines: Sequence[str] | None = None,
    ) -> ConsensusResult:
        analysis = classify_regime(bars)
        votes = [agent.analyze(bars, analysis.regime) for agent in self.agents]
        if headlines is not None:
            votes.append(
                self.news_agent.analyze(
                    bars, analysis.regime, {"headlines": list(headlines)}
                )
            )

        result = self.aggregator.aggregate(
            votes, analysis.regime, rsi=analysis.rsi, adx=analysis.adx
        )
        logger.debug(
            "Consensus %s %.1f (%s, %d votes)",
            result.signal.value, result.confidence, result.regime.value, len(votes),
        )
        return result
