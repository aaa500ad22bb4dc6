"""
Agent Logic - Process-wide session wiring

Owns the single SessionManager and TurnAggregator for the process and
exposes them as FastAPI dependencies.
"""

from typing import Optional
from dotenv import load_dotenv

from wallet_agent.core.config import settings
from wallet_agent.core.agent import AgentFactory, TurnAggregator
from wallet_agent.core.session import SessionManager
from wallet_agent.models.turn import TurnResult
from wallet_agent.services.key_provisioner import KeyProvisioner

load_dotenv()

# Global instances
_session_manager: Optional[SessionManager] = None
_turn_aggregator: Optional[TurnAggregator] = None


def get_session_manager() -> SessionManager:
    """
    Get or create the global SessionManager instance.

    Returns:
        SessionManager for this process
    """
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager(
            provisioner=KeyProvisioner(settings),
            agent_factory=AgentFactory(settings)
        )
    return _session_manager


def get_turn_aggregator() -> TurnAggregator:
    """Get or create the global TurnAggregator instance."""
    global _turn_aggregator
    if _turn_aggregator is None:
        _turn_aggregator = TurnAggregator(timeout=settings.turn_timeout)
    return _turn_aggregator


async def run_chat_turn(
    message: str,
    manager: SessionManager,
    aggregator: TurnAggregator
) -> TurnResult:
    """
    Execute one chat turn against the ready session.

    Args:
        message: Validated user message
        manager: Session owning the agent handle
        aggregator: Turn runner

    Returns:
        TurnResult in arrival order
    """
    handle = manager.get_ready_session()
    turn = manager.next_turn()
    return await aggregator.run(handle, message, turn)
