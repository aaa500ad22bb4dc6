"""
Core Package - Configuration, session lifecycle and agent orchestration
"""

from .config import settings, Settings
from .exceptions import (
    AgentServerError,
    ValidationError,
    StateError,
    ProvisioningError,
    AgentError,
)


# Lazy import to avoid circular dependency with the tools package
def __getattr__(name):
    if name == 'SessionManager':
        from .session import SessionManager
        return SessionManager
    if name in ('AgentFactory', 'AgentHandle', 'TurnAggregator'):
        from . import agent
        return getattr(agent, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'settings',
    'Settings',
    'AgentServerError',
    'ValidationError',
    'StateError',
    'ProvisioningError',
    'AgentError',
    'SessionManager',
    'AgentFactory',
    'AgentHandle',
    'TurnAggregator',
]
