"""Business services."""

from app.services.auto_trader import AutoTrader
from app.services.paper_trader import ExecutionOutcome, PaperTrader

__all__ = [
    "AutoTrader",
    "ExecutionOutcome",
    "PaperTrader",
]
