"""Pre-trade risk gate."""

from core.risk.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerVerdict,
    TriggeredRule,
)

__all__ = ["CircuitBreaker", "CircuitBreakerVerdict", "TriggeredRule"]
