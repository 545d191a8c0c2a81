"""Ledger and simulation models: portfolio, positions and trades."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OrderSide(str, Enum):
    """Side of an order or ledger trade."""

    BUY = "BUY"
    SELL = "SELL"


class PositionSide(str, Enum):
    """Side of an open simulated position."""

    LONG = "LONG"
    SHORT = "SHORT"


class Position(BaseModel):
    """Holding in the paper-trading ledger."""

    symbol: str
    quantity: float
    average_price: float
    current_price: float = 0.0

    @property
    def market_value(self) -> float:
        price = self.current_price or self.average_price
        return self.quantity * price


class Trade(BaseModel):
    """Executed ledger trade."""

    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    side: OrderSide
    quantity: float
    price: float
    timestamp: datetime
    reason: str = ""


class Portfolio(BaseModel):
    """Snapshot of the trading ledger.

    ``trades`` is kept most-recent-first by the ledger; readers that care
    about recency should not rely on that ordering.
    ``initial_equity`` is the legacy daily-loss baseline used when
    ``daily_start_equity`` has never been set.
    """

    cash: float
    equity: float
    daily_start_equity: float | None = None
    initial_equity: float | None = None
    positions: list[Position] = Field(default_factory=list)
    trades: list[Trade] = Field(default_factory=list)

    def get_position(self, symbol: str) -> Position | None:
        for position in self.positions:
            if position.symbol == symbol:
                return position
        return None


class TradeRequest(BaseModel):
    """Order submitted to the circuit breaker and ledger."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    side: OrderSide
    quantity: float = Field(gt=0)
    price: float = Field(gt=0)
    reason: str = "Council Consensus"

    @property
    def cost(self) -> float:
        return self.quantity * self.price


class SimulatedPosition(BaseModel):
    """Open position inside a single-asset backtest."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    quantity: int
    entry_price: float
    side: PositionSide = PositionSide.LONG

    def unrealized_pnl_percent(self, price: float) -> float:
        """Signed return of the position at ``price`` as a fraction."""
        change = (price - self.entry_price) / self.entry_price
        return change if self.side == PositionSide.LONG else -change

    def mark_value(self, price: float) -> float:
        """Value the position contributes to equity at ``price``.

        Shorts hold ``quantity * entry_price`` as collateral, so their
        value grows as the price falls.
        """
        if self.side == PositionSide.LONG:
            return self.quantity * price
        return self.quantity * (2 * self.entry_price - price)


class SimulatedTrade(BaseModel):
    """Backtest trade; exit fields are filled in place when it closes."""

    entry_date: date
    entry_price: float
    quantity: int
    side: PositionSide = PositionSide.LONG
    exit_date: date | None = None
    exit_price: float | None = None
    pnl: float = 0.0
    reason: str = ""

    @property
    def is_closed(self) -> bool:
        return self.exit_date is not None
