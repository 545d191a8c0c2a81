"""Name -> agent class lookup used to seat the council.

Each built-in agent registers itself under a short key ("trend",
"chairman", ...). ``CouncilConfig.agents`` lists those keys, and
``Council.from_config`` seats them through ``create_agents``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type] = {}


def register_agent(name: str):
    """Class decorator adding an agent under ``name``; names are unique."""

    def decorator(cls):
        existing = _REGISTRY.get(name)
        if existing is not None:
            raise ValueError(f"Agent key '{name}' already registered ({existing.__name__})")
        _REGISTRY[name] = cls
        logger.debug("Agent %s registered as '%s'", cls.__name__, name)
        return cls

    return decorator


def get_agent_class(name: str) -> type:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"No agent registered as '{name}'. Available: {', '.join(list_agents()) or '(none)'}"
        ) from None


def create_agent(name: str, **kwargs: Any):
    return get_agent_class(name)(**kwargs)


def create_agents(names: Iterable[str]) -> list:
    """Instantiate one agent per key, in order.

    Raises:
        KeyError: A key is not registered.
    """
    return [create_agent(name) for name in names]


def list_agents() -> list[str]:
    return sorted(_REGISTRY)
