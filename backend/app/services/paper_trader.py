"""Paper-trading ledger gated by the circuit breaker.

Holds the Portfolio the circuit breaker reads. Every order passes the
breaker first; a denial is a normal outcome ("trade skipped: <reason>"),
not an error. State can optionally be persisted to a JSON file.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Mapping

from pydantic import BaseModel, ConfigDict

from core.models.portfolio import OrderSide, Portfolio, Position, Trade, TradeRequest
from core.risk.circuit_breaker import CircuitBreaker, TriggeredRule

logger = logging.getLogger(__name__)

MAX_TRADE_HISTORY = 50
DEFAULT_INITIAL_CASH = 1_000_000.0


class ExecutionOutcome(BaseModel):
    """Result of submitting one order to the ledger."""

    model_config = ConfigDict(frozen=True)

    executed: bool
    message: str
    trade: Trade | None = None
    triggered_rule: TriggeredRule | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaperTrader:
    """In-memory long-only ledger.

    Args:
        initial_cash: Starting cash (and legacy daily-loss baseline).
        breaker: Pre-trade gate; defaults to CircuitBreaker().
        clock: Time source for trade timestamps and cooldown checks.
        state_path: Optional JSON file to load from and save to.
    """

    def __init__(
        self,
        initial_cash: float = DEFAULT_INITIAL_CASH,
        breaker: CircuitBreaker | None = None,
        clock: Callable[[], datetime] = _utcnow,
        state_path: str | Path | None = None,
    ):
        self._breaker = breaker or CircuitBreaker()
        self._clock = clock
        self._state_path = Path(state_path) if state_path else None
        self._initial_cash = initial_cash
        self.portfolio = self._load_state()

    def _fresh_portfolio(self) -> Portfolio:
        return Portfolio(
            cash=self._initial_cash,
            equity=self._initial_cash,
            initial_equity=self._initial_cash,
        )

    def _load_state(self) -> Portfolio:
        if self._state_path is None or not self._state_path.exists():
            return self._fresh_portfolio()
        portfolio = Portfolio.model_validate_json(self._state_path.read_text())
        logger.info(
            "Loaded paper portfolio from %s: cash=%.2f, %d positions",
            self._state_path, portfolio.cash, len(portfolio.positions),
        )
        return portfolio

    def _save_state(self) -> None:
        if self._state_path is None:
            return
        self._state_path.parent.mkdir(parents=True, exist_ok=True)
        self._state_path.write_text(self.portfolio.model_dump_json(indent=2))

    def execute(self, request: TradeRequest) -> ExecutionOutcome:
        """Run the circuit breaker, then fill ``request`` at its price."""
        now = self._clock()
        verdict = self._breaker.check_trade(request, self.portfolio, now=now)
        if not verdict.allowed:
            message = f"trade skipped: {verdict.reason}"
            logger.info("%s %s: %s", request.side.value, request.symbol, message)
            return ExecutionOutcome(
                executed=False, message=message, triggered_rule=verdict.triggered_rule
            )

        portfolio = self.portfolio
        cost = request.cost
        position = portfolio.get_position(request.symbol)

        if request.side == OrderSide.BUY:
            if portfolio.cash < cost:
                return ExecutionOutcome(executed=False, message="Insufficient Funds")
            portfolio.cash -= cost
            if position is not None:
                total_value = position.quantity * position.average_price + cost
                position.quantity += request.quantity
                position.average_price = total_value / position.quantity
                position.current_price = request.price
            else:
                portfolio.positions.append(
                    Position(
                        symbol=request.symbol,
                        quantity=request.quantity,
                        average_price=request.price,
                        current_price=request.price,
                    )
                )
        else:
            if position is None or position.quantity < request.quantity:
                return ExecutionOutcome(executed=False, message="Insufficient Holdings")
            portfolio.cash += cost
            position.quantity -= request.quantity
            position.current_price = request.price
            if position.quantity == 0:
                portfolio.positions = [
                    p for p in portfolio.positions if p.symbol != request.symbol
                ]

        trade = Trade(
            id=uuid.uuid4().hex[:12],
            symbol=request.symbol,
            side=request.side,
            quantity=request.quantity,
            price=request.price,
            timestamp=now,
            reason=request.reason,
        )
        # Most recent first, bounded history
        portfolio.trades.insert(0, trade)
        del portfolio.trades[MAX_TRADE_HISTORY:]

        self._revalue()
        self._save_state()
        logger.info(
            "Executed %s %s x%g @ %.2f (%s)",
            request.side.value, request.symbol, request.quantity, request.price, request.reason,
        )
        return ExecutionOutcome(executed=True, message="Order Executed", trade=trade)

    def update_prices(self, prices: Mapping[str, float]) -> Portfolio:
        """Mark positions to the given prices and recompute equity."""
        for position in self.portfolio.positions:
            if position.symbol in prices:
                position.current_price = prices[position.symbol]
        self._revalue()
        return self.portfolio

    def reset_day(self) -> None:
        """Start a new trading day: current equity becomes the loss baseline."""
        self.portfolio.daily_start_equity = self.portfolio.equity
        logger.info("Daily baseline reset to %.2f", self.portfolio.equity)

    def reset_account(self) -> None:
        """Discard all positions and trades."""
        self.portfolio = self._fresh_portfolio()
        self._save_state()

    def _revalue(self) -> None:
        self.portfolio.equity = self.portfolio.cash + sum(
            p.market_value for p in self.portfolio.positions
        )
