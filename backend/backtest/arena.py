"""Single-asset backtest ("Arena").

Replays a bar series through the same council, sizing and limit logic
used live. Per bar, after a warm-up of ``warmup_bars``:

- the council re-analyzes every bar up to and including the current one
  (expanding window)
- equity is marked to market and the drawdown tracker is updated
- with a position open: exit on stop-loss, then take-profit, then a
  council flip against the position, all filled at the close
- when flat: enter when the council is BULLISH with confidence at or
  above ``buy_threshold`` and the sized quantity is affordable

Any position still open after the last bar is closed at its close.

Shorts are off by default. With ``allow_short`` a BEARISH council opens
a short that reserves ``quantity * entry`` of cash as collateral.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from core.consensus import Council
from core.models.bar import PriceBar
from core.models.config import ArenaConfig, RiskParameters, TradeSetup
from core.models.portfolio import PositionSide, SimulatedPosition, SimulatedTrade
from core.models.signal import ConsensusResult, Sentiment
from core.sizing import calculate_position_size

from backtest.stats import BacktestReport, DrawdownTracker, EquityPoint, StatisticsCalculator

logger = logging.getLogger(__name__)

END_OF_BACKTEST = "End of Backtest"


class ConsensusSource(Protocol):
    """Anything that can turn a bar history into a consensus decision."""

    def analyze(self, bars: Sequence[PriceBar]) -> ConsensusResult: ...


class Arena:
    """Run the decision pipeline over one symbol's history."""

    def __init__(
        self,
        config: ArenaConfig | None = None,
        council: ConsensusSource | None = None,
    ) -> None:
        self.config = config or ArenaConfig()
        self.council = council or Council()

    def run(self, symbol: str, bars: Sequence[PriceBar]) -> BacktestReport:
        """Backtest ``symbol`` over ``bars`` (ascending by time)."""
        cfg = self.config
        bars = list(bars)
        logger.info(
            "Arena %s: %d bars, balance=%.2f, threshold=%.0f, short=%s",
            symbol, len(bars), cfg.initial_balance, cfg.buy_threshold, cfg.allow_short,
        )

        cash = cfg.initial_balance
        position: SimulatedPosition | None = None
        open_trade: SimulatedTrade | None = None
        trades: list[SimulatedTrade] = []
        equity_curve: list[EquityPoint] = []
        drawdown = DrawdownTracker(peak=cfg.initial_balance)
        gross_win = 0.0
        gross_loss = 0.0

        for i in range(cfg.warmup_bars, len(bars)):
            bar = bars[i]
            price = bar.close
            analysis = self.council.analyze(bars[: i + 1])

            equity = cash + (position.mark_value(price) if position else 0.0)
            drawdown.update(equity)
            equity_curve.append(EquityPoint(time=bar.time, value=equity))

            if position is not None:
                reason = self._exit_reason(position, price, analysis)
                if reason is None:
                    continue
                pnl, proceeds = self._close(position, price)
                cash += proceeds
                if pnl > 0:
                    gross_win += pnl
                else:
                    gross_loss += abs(pnl)
                open_trade.exit_date = bar.time
                open_trade.exit_price = price
                open_trade.pnl = pnl
                open_trade.reason = reason
                logger.debug("%s %s exit @ %.2f pnl=%.2f (%s)", bar.time, symbol, price, pnl, reason)
                position = None
                open_trade = None
                continue

            side = self._entry_side(analysis)
            if side is None:
                continue

            sentiment = Sentiment.BULLISH if side == PositionSide.LONG else Sentiment.BEARISH
            quantity = calculate_position_size(
                TradeSetup(
                    symbol=symbol,
                    price=price,
                    sentiment=sentiment,
                    confidence=analysis.confidence,
                    available_cash=cash,
                ),
                RiskParameters(
                    account_equity=equity,
                    risk_per_trade_percent=cfg.risk_percent,
                    max_position_size_percent=cfg.max_pos_percent,
                ),
            )
            trade_value = quantity * price
            if quantity <= 0 or trade_value > cash:
                continue

            # Longs pay for the shares, shorts post the same amount as collateral
            cash -= trade_value
            position = SimulatedPosition(
                symbol=symbol, quantity=quantity, entry_price=price, side=side
            )
            open_trade = SimulatedTrade(
                entry_date=bar.time,
                entry_price=price,
                quantity=quantity,
                side=side,
                reason=f"Smart Entry (Conf: {analysis.confidence:.0f}%)",
            )
            trades.append(open_trade)
            logger.debug(
                "%s %s %s entry @ %.2f x%d", bar.time, symbol, side.value, price, quantity
            )

        if position is not None:
            last = bars[-1]
            pnl, proceeds = self._close(position, last.close)
            cash += proceeds
            if pnl > 0:
                gross_win += pnl
            else:
                gross_loss += abs(pnl)
            open_trade.exit_date = last.time
            open_trade.exit_price = last.close
            open_trade.pnl = pnl
            open_trade.reason = END_OF_BACKTEST

        profit = cash - cfg.initial_balance
        completed = [t for t in trades if t.is_closed]
        report = BacktestReport(
            symbol=symbol,
            total_days=len(bars),
            initial_balance=cfg.initial_balance,
            final_balance=cash,
            profit=profit,
            profit_percent=profit / cfg.initial_balance * 100,
            trade_count=len(completed),
            win_rate=StatisticsCalculator.win_rate(completed),
            max_drawdown=drawdown.max_drawdown_percent,
            profit_factor=StatisticsCalculator.profit_factor(gross_win, gross_loss),
            trades=completed,
            equity_curve=equity_curve,
        )
        logger.info(
            "Arena %s done: %d trades, profit=%.2f (%.2f%%), win rate=%.1f%%",
            symbol, report.trade_count, report.profit, report.profit_percent, report.win_rate,
        )
        return report

    def _entry_side(self, analysis: ConsensusResult) -> PositionSide | None:
        if analysis.confidence < self.config.buy_threshold:
            return None
        if analysis.sentiment == Sentiment.BULLISH:
            return PositionSide.LONG
        if analysis.sentiment == Sentiment.BEARISH and self.config.allow_short:
            return PositionSide.SHORT
        return None

    def _exit_reason(
        self,
        position: SimulatedPosition,
        price: float,
        analysis: ConsensusResult,
    ) -> str | None:
        cfg = self.config
        pnl_percent = position.unrealized_pnl_percent(price)
        if pnl_percent < -cfg.stop_loss_percent:
            return f"Stop Loss (-{cfg.stop_loss_percent:.0%})"
        if pnl_percent > cfg.take_profit_percent:
            return f"Take Profit (+{cfg.take_profit_percent:.0%})"
        if position.side == PositionSide.LONG and analysis.sentiment == Sentiment.BEARISH:
            return "Signal Reversal (Bearish)"
        if position.side == PositionSide.SHORT and analysis.sentiment == Sentiment.BULLISH:
            return "Signal Reversal (Bullish)"
        return None

    @staticmethod
    def _close(position: SimulatedPosition, price: float) -> tuple[float, float]:
        """Return (pnl, cash released) for closing ``position`` at ``price``."""
        if position.side == PositionSide.LONG:
            pnl = (price - position.entry_price) * position.quantity
        else:
            pnl = (position.entry_price - price) * position.quantity
        return pnl, position.mark_value(price)
