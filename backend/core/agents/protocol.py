"""Agent protocol defining the interface every council member implements.

This module provides:
- Agent: Runtime-checkable Protocol for one analyst in the council
- AuxData: Optional side inputs an agent may read (e.g. headlines)
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from core.models.bar import PriceBar
from core.models.signal import AgentRole, AgentVote, MarketRegime

AuxData = Mapping[str, Any]


@runtime_checkable
class Agent(Protocol):
    """Protocol that all council agents must implement.

    Agents never raise: on insufficient data they return a HOLD vote with
    confidence 0 and a reason string.
    """

    @property
    def id(self) -> str:
        """Stable agent identifier (e.g., 'trend_agent')."""
        ...

    @property
    def name(self) -> str:
        """Display name."""
        ...

    @property
    def role(self) -> AgentRole:
        """Council role; selects the voting weight."""
        ...

    def analyze(
        self,
        history: Sequence[PriceBar],
        regime: MarketRegime | None = None,
        aux_data: AuxData | None = None,
    ) -> AgentVote:
        """Produce a fresh vote for the given history.

        Args:
            history: Bars up to and including the current one, oldest first.
            regime: Pre-computed market regime; classified from ``history``
                when omitted.
            aux_data: Optional side inputs, e.g. ``{"headlines": [...]}``.

        Returns:
            AgentVote whose sentiment matches its signal.
        """
        ...
