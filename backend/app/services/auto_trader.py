"""Automatic trading on council consensus (live path).

Bars -> Council -> sizing / limit price -> PaperTrader (circuit breaker
inside). NEUTRAL or low-confidence consensus is skipped, and nothing trades
unless ``auto_trade`` is on (optionally limited to ``symbols``). The paper
account is long-only, so a BEARISH consensus can only sell down an
existing holding.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from core.consensus import Council
from core.models.bar import PriceBar
from core.models.config import TradeSetup
from core.models.portfolio import OrderSide, TradeRequest
from core.models.signal import ConsensusResult, Sentiment
from core.risk.circuit_breaker import CircuitBreaker
from core.sizing import calculate_limit_price, calculate_position_size

from app.config import Settings, get_settings
from app.services.paper_trader import ExecutionOutcome, PaperTrader
from app.trading_config import TradingConfig, load_trading_config

logger = logging.getLogger(__name__)


class AutoTrader:
    """Turn consensus decisions into paper orders."""

    def __init__(
        self,
        config: TradingConfig | None = None,
        trader: PaperTrader | None = None,
        council: Council | None = None,
    ):
        self.config = config or TradingConfig()
        self.trader = trader or PaperTrader(
            breaker=CircuitBreaker(self.config.circuit_breaker)
        )
        self.council = council or Council.from_config(self.config.council)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AutoTrader":
        """Build the live trader from environment settings and trading.yaml."""
        settings = settings or get_settings()
        config_path = Path(settings.trading_config_path) if settings.trading_config_path else None
        config = load_trading_config(config_path)
        trader = PaperTrader(
            initial_cash=settings.paper_initial_cash,
            breaker=CircuitBreaker(config.circuit_breaker),
            state_path=settings.paper_state_path or None,
        )
        return cls(config=config, trader=trader)

    def is_enabled_for(self, symbol: str) -> bool:
        """Whether orders may be submitted for ``symbol``."""
        if not self.config.auto_trade:
            return False
        return not self.config.symbols or symbol in self.config.symbols

    def on_bars(
        self,
        symbol: str,
        bars: Sequence[PriceBar],
        headlines: Sequence[str] | None = None,
    ) -> ExecutionOutcome | None:
        """Analyze the latest bars and trade if the consensus is strong enough.

        Returns:
            The ledger outcome, or None when no order was submitted.
        """
        if not bars or not self.is_enabled_for(symbol):
            return None
        result = self.council.analyze(bars, headlines=headlines)
        return self.execute(symbol, bars[-1].close, result)

    def execute(
        self,
        symbol: str,
        price: float,
        result: ConsensusResult,
    ) -> ExecutionOutcome | None:
        """Size and submit an order for one consensus result.

        Nothing is submitted while ``auto_trade`` is off, or for a symbol
        outside a non-empty ``symbols`` list.
        """
        if not self.is_enabled_for(symbol):
            logger.debug("%s: auto-trading disabled for this symbol", symbol)
            return None
        if result.sentiment == Sentiment.NEUTRAL or result.confidence < self.config.confidence_threshold:
            logger.debug(
                "%s: no trade (%s %.1f < %.0f)",
                symbol, result.sentiment.value, result.confidence, self.config.confidence_threshold,
            )
            return None

        portfolio = self.trader.portfolio
        setup = TradeSetup(
            symbol=symbol,
            price=price,
            sentiment=result.sentiment,
            confidence=result.confidence,
            available_cash=portfolio.cash,
        )
        quantity = calculate_position_size(
            setup, self.config.risk.to_risk_parameters(portfolio.equity)
        )

        if result.sentiment == Sentiment.BULLISH:
            side = OrderSide.BUY
        else:
            side = OrderSide.SELL
            held = portfolio.get_position(symbol)
            if held is None:
                logger.debug("%s: bearish but nothing held", symbol)
                return None
            quantity = min(quantity, held.quantity) if quantity > 0 else held.quantity

        if quantity <= 0:
            logger.debug("%s: sized quantity is 0", symbol)
            return None

        request = TradeRequest(
            symbol=symbol,
            side=side,
            quantity=quantity,
            price=calculate_limit_price(setup),
            reason=f"Auto-Bot: {result.sentiment.value} (Conf: {result.confidence:.0f}%)",
        )
        return self.trader.execute(request)
