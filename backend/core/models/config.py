"""Trading configuration models.

Every decision takes its configuration as an explicit argument; nothing
here is held as module-level mutable state.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from core.models.signal import Sentiment

DEFAULT_COUNCIL = ("chairman", "trend", "reversal", "volatility")


def _check_fraction(name: str, value: float) -> float:
    if not 0 < value <= 1:
        raise ValueError(f"{name} must be a fraction in (0, 1], got {value}")
    return value


class RiskParameters(BaseModel):
    """Per-decision risk limits supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    account_equity: float
    risk_per_trade_percent: float = 0.02  # 2% of equity
    max_position_size_percent: float = 0.10  # 10% of equity

    @field_validator("risk_per_trade_percent", "max_position_size_percent")
    @classmethod
    def _fraction(cls, v: float, info: ValidationInfo) -> float:
        return _check_fraction(info.field_name, v)


class TradeSetup(BaseModel):
    """Candidate trade handed to sizing and limit-price calculation."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    sentiment: Sentiment
    confidence: float = Field(ge=0, le=100)
    available_cash: float | None = None


class CircuitBreakerConfig(BaseModel):
    """Thresholds for the pre-trade risk gate."""

    model_config = ConfigDict(frozen=True)

    max_daily_loss_percent: float = 0.05
    cooldown_ms: int = Field(default=60_000, ge=0)
    max_position_size_percent: float = 0.20

    @field_validator("max_daily_loss_percent", "max_position_size_percent")
    @classmethod
    def _fraction(cls, v: float, info: ValidationInfo) -> float:
        return _check_fraction(info.field_name, v)


class CouncilConfig(BaseModel):
    """Consensus voting parameters.

    ``role_weights`` overrides the default weight of individual roles,
    keyed by role name (e.g. ``{"CHAIRMAN": 3.0}``). ``agents`` are the
    registry keys seated on every pass; ``news_agent`` is only consulted
    when headlines are supplied.
    """

    model_config = ConfigDict(frozen=True)

    deadband: float = Field(default=10.0, ge=0, le=100)
    role_weights: dict[str, float] = Field(default_factory=dict)
    agents: tuple[str, ...] = DEFAULT_COUNCIL
    news_agent: str = "news_sentiment"


class ArenaConfig(BaseModel):
    """Single-asset backtest parameters."""

    model_config = ConfigDict(frozen=True)

    initial_balance: float = Field(default=10_000.0, gt=0)
    risk_percent: float = 0.02
    max_pos_percent: float = 0.10
    buy_threshold: float = Field(default=50.0, ge=0, le=100)
    stop_loss_percent: float = 0.05
    take_profit_percent: float = 0.10
    warmup_bars: int = Field(default=50, ge=1)
    allow_short: bool = False

    @field_validator(
        "risk_percent", "max_pos_percent", "stop_loss_percent", "take_profit_percent"
    )
    @classmethod
    def _fraction(cls, v: float, info: ValidationInfo) -> float:
        return _check_fraction(info.field_name, v)
