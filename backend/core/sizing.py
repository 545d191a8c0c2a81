"""Position sizing and limit-price placement."""

from __future__ import annotations

import math

from core.models.config import RiskParameters, TradeSetup
from core.models.signal import Sentiment

LIMIT_SPREAD = 0.001  # 0.1% base offset from the reference price
AGGRESSIVE_CONFIDENCE = 80
PASSIVE_CONFIDENCE = 60
AGGRESSION = 0.2


def calculate_position_size(setup: TradeSetup, risk: RiskParameters) -> int:
    """Whole-share quantity allowed by the risk limits.

    quantity = floor(min(equity * risk_per_trade, equity * max_position) / price),
    further capped by what ``setup.available_cash`` can pay for.

    Returns:
        Non-negative share count; 0 for a non-positive price or equity.
    """
    if setup.price <= 0 or risk.account_equity <= 0:
        return 0

    risk_cap = risk.account_equity * risk.risk_per_trade_percent
    exposure_cap = risk.account_equity * risk.max_position_size_percent
    quantity = math.floor(min(risk_cap, exposure_cap) / setup.price)

    if setup.available_cash is not None:
        affordable = math.floor(max(setup.available_cash, 0.0) / setup.price)
        quantity = min(quantity, affordable)

    return max(quantity, 0)


def _aggression(confidence: float) -> float:
    if confidence > AGGRESSIVE_CONFIDENCE:
        return AGGRESSION
    if confidence < PASSIVE_CONFIDENCE:
        return -AGGRESSION
    return 0.0


def calculate_limit_price(setup: TradeSetup) -> float:
    """Limit price just inside the reference price, on the trade's side.

    Buys sit below and sells above the reference price by
    ``LIMIT_SPREAD * (1 - aggression)``; high confidence (> 80) narrows
    the offset to chase the fill, low confidence (< 60) widens it. The
    offset therefore stays between 0.08% and 0.12% of the price.
    Neutral setups return the price unchanged.
    """
    offset = LIMIT_SPREAD * (1 - _aggression(setup.confidence))
    if setup.sentiment == Sentiment.BULLISH:
        return round(setup.price * (1 - offset), 2)
    if setup.sentiment == Sentiment.BEARISH:
        return round(setup.price * (1 + offset), 2)
    return round(setup.price, 2)
