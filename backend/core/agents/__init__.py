"""Council agents.

Public API:
- Agent: Protocol that all agents must implement
- BaseAgent: Shared base for the built-in agents
- register_agent / create_agent / create_agents / list_agents / get_agent_class

Importing this package auto-registers all built-in agents.
"""

from core.agents.protocol import Agent, AuxData
from core.agents.base import BaseAgent
from core.agents.registry import (
    create_agent,
    create_agents,
    get_agent_class,
    list_agents,
    register_agent,
)

from core.agents.chairman import ChairmanAgent
from core.agents.news_sentiment import NewsSentimentAgent
from core.agents.reversal import ReversalAgent
from core.agents.trend import TrendAgent
from core.agents.volatility import VolatilityAgent

__all__ = [
    "Agent",
    "AuxData",
    "BaseAgent",
    "create_agent",
    "create_agents",
    "get_agent_class",
    "list_agents",
    "register_agent",
    "ChairmanAgent",
    "NewsSentimentAgent",
    "ReversalAgent",
    "TrendAgent",
    "VolatilityAgent",
]
