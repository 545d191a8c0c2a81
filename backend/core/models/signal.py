"""Signal, vote and consensus data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Signal(str, Enum):
    """Trade action recommended by an agent or the council."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"

    @property
    def direction(self) -> int:
        """Signed direction used in weighted voting."""
        if self is Signal.BUY:
            return 1
        if self is Signal.SELL:
            return -1
        return 0


class Sentiment(str, Enum):
    """Market sentiment label."""

    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class MarketRegime(str, Enum):
    """Coarse market-state label.

    SQUEEZE is part of the vocabulary (agents react to it) but the
    built-in classifier never emits it.
    """

    BULL_TREND = "BULL_TREND"
    BEAR_TREND = "BEAR_TREND"
    SIDEWAYS = "SIDEWAYS"
    VOLATILE = "VOLATILE"
    SQUEEZE = "SQUEEZE"

    @property
    def is_trend(self) -> bool:
        return self in (MarketRegime.BULL_TREND, MarketRegime.BEAR_TREND)


class AgentRole(str, Enum):
    """Role of an agent in the council; drives its voting weight."""

    CHAIRMAN = "CHAIRMAN"
    TREND = "TREND"
    REVERSAL = "REVERSAL"
    VOLATILE = "VOLATILE"
    SENTIMENT = "SENTIMENT"


_SENTIMENT_FOR_SIGNAL = {
    Signal.BUY: Sentiment.BULLISH,
    Signal.SELL: Sentiment.BEARISH,
    Signal.HOLD: Sentiment.NEUTRAL,
}


def sentiment_for(signal: Signal) -> Sentiment:
    """Map a signal to the sentiment it implies."""
    return _SENTIMENT_FOR_SIGNAL[signal]


class AgentVote(BaseModel):
    """One agent's opinion for one analysis pass. Never mutated."""

    model_config = ConfigDict(frozen=True)

    agent_id: str
    name: str
    role: AgentRole
    signal: Signal
    confidence: float = Field(ge=0, le=100)
    sentiment: Sentiment
    reason: str = ""


class RegimeAnalysis(BaseModel):
    """Output of the regime classifier."""

    model_config = ConfigDict(frozen=True)

    sentiment: Sentiment
    confidence: int
    rsi: int
    adx: int
    regime: MarketRegime
    trend_strength: float = 0.0


class ConsensusResult(BaseModel):
    """Weighted council decision for one analysis pass."""

    model_config = ConfigDict(frozen=True)

    signal: Signal
    confidence: float
    sentiment: Sentiment
    regime: MarketRegime
    reason: str
    score: float = 0.0
    rsi: int = 50
    adx: int = 20
    votes: list[AgentVote] = Field(default_factory=list)
