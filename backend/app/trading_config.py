"""Trading configuration loaded from trading.yaml.

Supports:
- Risk limits for position sizing
- Circuit breaker thresholds
- Council voting weights and deadband
- Auto-trading switch and confidence threshold
- Backward compatible: no YAML file = built-in defaults, no auto-trading
"""

import logging
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from core.agents import list_agents
from core.models.config import CircuitBreakerConfig, CouncilConfig, RiskParameters
from core.models.signal import AgentRole

logger = logging.getLogger(__name__)


class RiskEntry(BaseModel):
    """Risk section of trading.yaml (fractions of equity)."""

    risk_per_trade_percent: float = 0.02
    max_position_size_percent: float = 0.20

    @field_validator("risk_per_trade_percent", "max_position_size_percent")
    @classmethod
    def _fraction(cls, v: float, info: ValidationInfo) -> float:
        if not 0 < v <= 1:
            raise ValueError(f"risk.{info.field_name} must be a fraction in (0, 1], got {v}")
        return v

    def to_risk_parameters(self, account_equity: float) -> RiskParameters:
        return RiskParameters(
            account_equity=account_equity,
            risk_per_trade_percent=self.risk_per_trade_percent,
            max_position_size_percent=self.max_position_size_percent,
        )


class TradingConfig(BaseModel):
    """Top-level trading.yaml configuration."""

    symbols: list[str] = []
    auto_trade: bool = False
    confidence_threshold: float = Field(default=60.0, ge=0, le=100)
    risk: RiskEntry = RiskEntry()
    circuit_breaker: CircuitBreakerConfig = CircuitBreakerConfig()
    council: CouncilConfig = CouncilConfig()

    @model_validator(mode="after")
    def _validate(self):
        valid_roles = {r.value for r in AgentRole}
        unknown = [k for k in self.council.role_weights if k.upper() not in valid_roles]
        if unknown:
            raise ValueError(
                f"council.role_weights has unknown roles {unknown}; "
                f"must be one of {sorted(valid_roles)}"
            )
        known = set(list_agents())
        missing = [n for n in (*self.council.agents, self.council.news_agent) if n not in known]
        if missing:
            raise ValueError(
                f"council has unknown agents {missing}; must be one of {sorted(known)}"
            )
        return self


_DEFAULT_PATH = Path(__file__).parent.parent / "trading.yaml"


def load_trading_config(path: Path | None = None) -> TradingConfig:
    """Load trading config from YAML file.

    Falls back to defaults (no auto-trading) if file doesn't exist.
    """
    config_path = path or _DEFAULT_PATH

    # Load .env into os.environ alongside the YAML
    env_path = config_path.parent / ".env"
    load_dotenv(env_path, override=False)

    if not config_path.exists():
        logger.info("No trading.yaml found at %s, using defaults", config_path)
        return TradingConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    config = TradingConfig(**raw)
    logger.info(
        "Loaded trading config: %d symbols, auto_trade=%s, threshold=%.0f, "
        "max daily loss=%.0f%%, cooldown=%dms",
        len(config.symbols),
        config.auto_trade,
        config.confidence_threshold,
        config.circuit_breaker.max_daily_loss_percent * 100,
        config.circuit_breaker.cooldown_ms,
    )
    return config
