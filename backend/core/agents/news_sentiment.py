"""Headline keyword sentiment agent.

Reads ``aux_data["headlines"]`` and ignores the bar history, so it votes
even when only a handful of bars are available.
"""

from __future__ import annotations

from typing import Sequence

from core.agents.base import BaseAgent
from core.agents.protocol import AuxData
from core.agents.registry import register_agent
from core.models.bar import PriceBar
from core.models.signal import AgentRole, AgentVote, MarketRegime, Signal

POSITIVE_KEYWORDS = (
    "beat", "exceeds", "strong", "growth", "rise", "increase", "surge",
    "rally", "bullish", "upward", "positive", "optimistic", "record",
    "breakthrough", "innovation", "partnership", "expansion", "profit",
    "gain", "outperform", "upgrade", "recommend", "buy",
)

NEGATIVE_KEYWORDS = (
    "miss", "below", "weak", "decline", "fall", "decrease", "drop",
    "plunge", "bearish", "downward", "negative", "pessimistic", "concern",
    "risk", "challenge", "struggle", "loss", "underperform", "downgrade",
    "sell", "recession", "inflation", "rate hike", "cut", "layoff",
)

# Confidence per net keyword, capped at 100
CONFIDENCE_PER_KEYWORD = 20


def score_headline(headline: str) -> tuple[int, list[str]]:
    """Net keyword score of one headline (substring, case-insensitive)."""
    text = headline.lower()
    matched: list[str] = []
    score = 0
    for keyword in POSITIVE_KEYWORDS:
        if keyword in text:
            score += 1
            matched.append(keyword)
    for keyword in NEGATIVE_KEYWORDS:
        if keyword in text:
            score -= 1
            matched.append(keyword)
    return score, matched


@register_agent("news_sentiment")
class NewsSentimentAgent(BaseAgent):
    id = "news_sentiment_agent"
    name = "News Sentiment Analyzer"
    role = AgentRole.SENTIMENT
    min_history = 0

    def _evaluate(
        self,
        history: Sequence[PriceBar],
        regime: MarketRegime | None,
        aux_data: AuxData | None,
    ) -> AgentVote:
        headlines = list((aux_data or {}).get("headlines") or [])
        if not headlines:
            return self._neutral("No news data available")

        net = 0
        reasons: list[str] = []
        for index, headline in enumerate(headlines, start=1):
            score, matched = score_headline(headline)
            if score:
                label = "positive" if score > 0 else "negative"
                reasons.append(f"News {index}: {label} ({score:+d}, {', '.join(matched)})")
                net += score

        if net == 0:
            return self._neutral("; ".join(reasons) or "No sentiment keywords found in news")

        signal = Signal.BUY if net > 0 else Signal.SELL
        confidence = min(100, abs(net) * CONFIDENCE_PER_KEYWORD)
        return self._vote(signal, confidence, "; ".join(reasons))
