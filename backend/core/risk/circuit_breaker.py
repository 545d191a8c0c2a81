"""Circuit breaker: stateless pre-trade risk gate.

Checks run in order and stop at the first failure:
1. DAILY_LOSS   - equity fell more than max_daily_loss_percent below the
                  day's baseline
2. COOLDOWN     - the symbol traded less than cooldown_ms ago
3. MAX_EXPOSURE - (BUY only) the position would exceed
                  max_position_size_percent of equity

The gate never raises. It reads a consistent Portfolio snapshot and
returns a verdict; the ledger owner decides what to do with it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict

from core.models.config import CircuitBreakerConfig
from core.models.portfolio import OrderSide, Portfolio, TradeRequest

logger = logging.getLogger(__name__)


class TriggeredRule(str, Enum):
    DAILY_LOSS = "DAILY_LOSS"
    COOLDOWN = "COOLDOWN"
    MAX_EXPOSURE = "MAX_EXPOSURE"


class CircuitBreakerVerdict(BaseModel):
    """Result of one gate check."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: str | None = None
    triggered_rule: TriggeredRule | None = None


ALLOWED = CircuitBreakerVerdict(allowed=True)


def _as_utc(ts: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


class CircuitBreaker:
    """Evaluate trade requests against explicit risk thresholds."""

    def __init__(self, config: CircuitBreakerConfig | None = None) -> None:
        self.config = config or CircuitBreakerConfig()

    def check_trade(
        self,
        request: TradeRequest,
        portfolio: Portfolio,
        now: datetime | None = None,
    ) -> CircuitBreakerVerdict:
        """Check one trade request against the ledger snapshot.

        Args:
            request: The order about to be executed.
            portfolio: Current ledger snapshot (read only).
            now: Evaluation time; defaults to the current UTC time.

        Returns:
            CircuitBreakerVerdict; ``allowed`` is False with a reason and
            the rule that fired when any check fails.
        """
        cfg = self.config

        if self.is_daily_loss_exceeded(portfolio):
            return self._deny(
                request,
                TriggeredRule.DAILY_LOSS,
                f"Circuit Breaker: Max Daily Loss Exceeded ({cfg.max_daily_loss_percent:.0%})",
            )

        if self.is_cooling_down(portfolio, request.symbol, now):
            return self._deny(
                request,
                TriggeredRule.COOLDOWN,
                f"Circuit Breaker: Cooldown Active ({cfg.cooldown_ms / 1000:g}s)",
            )

        if request.side == OrderSide.BUY and self.is_exposure_too_high(portfolio, request):
            return self._deny(
                request,
                TriggeredRule.MAX_EXPOSURE,
                f"Circuit Breaker: Max Position Size Exceeded ({cfg.max_position_size_percent:.0%})",
            )

        return ALLOWED

    def is_daily_loss_exceeded(self, portfolio: Portfolio) -> bool:
        baseline = portfolio.daily_start_equity
        if baseline is None:
            baseline = portfolio.initial_equity
        if baseline is None:
            baseline = portfolio.equity
        if baseline <= 0:
            return False
        drawdown = (baseline - portfolio.equity) / baseline
        return drawdown > self.config.max_daily_loss_percent

    def is_cooling_down(
        self,
        portfolio: Portfolio,
        symbol: str,
        now: datetime | None = None,
    ) -> bool:
        # Most recent by timestamp, whatever order the ledger keeps
        stamps = [_as_utc(t.timestamp) for t in portfolio.trades if t.symbol == symbol]
        if not stamps:
            return False
        now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        elapsed_ms = (now - max(stamps)).total_seconds() * 1000
        return elapsed_ms < self.config.cooldown_ms

    def is_exposure_too_high(self, portfolio: Portfolio, request: TradeRequest) -> bool:
        existing = portfolio.get_position(request.symbol)
        existing_value = existing.quantity * existing.average_price if existing else 0.0
        total_after = existing_value + request.cost
        if portfolio.equity <= 0:
            return total_after > 0
        return total_after / portfolio.equity > self.config.max_position_size_percent

    @staticmethod
    def _deny(
        request: TradeRequest,
        rule: TriggeredRule,
        reason: str,
    ) -> CircuitBreakerVerdict:
        logger.warning(
            "Trade blocked [%s] %s %s x%g: %s",
            rule.value, request.side.value, request.symbol, request.quantity, reason,
        )
        return CircuitBreakerVerdict(allowed=False, reason=reason, triggered_rule=rule)
