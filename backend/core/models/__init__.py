"""Data models shared by the decision core, backtests and the ledger."""

from core.models.bar import PriceBar, closes_of
from core.models.config import (
    ArenaConfig,
    CircuitBreakerConfig,
    CouncilConfig,
    RiskParameters,
    TradeSetup,
)
from core.models.portfolio import (
    OrderSide,
    Portfolio,
    Position,
    PositionSide,
    SimulatedPosition,
    SimulatedTrade,
    Trade,
    TradeRequest,
)
from core.models.signal import (
    AgentRole,
    AgentVote,
    ConsensusResult,
    MarketRegime,
    RegimeAnalysis,
    Sentiment,
    Signal,
    sentiment_for,
)

__all__ = [
    "PriceBar",
    "closes_of",
    "ArenaConfig",
    "CircuitBreakerConfig",
    "CouncilConfig",
    "RiskParameters",
    "TradeSetup",
    "OrderSide",
    "Portfolio",
    "Position",
    "PositionSide",
    "SimulatedPosition",
    "SimulatedTrade",
    "Trade",
    "TradeRequest",
    "AgentRole",
    "AgentVote",
    "ConsensusResult",
    "MarketRegime",
    "RegimeAnalysis",
    "Sentiment",
    "Signal",
    "sentiment_for",
]
