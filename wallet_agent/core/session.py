"""
Session State Machine - Lifecycle of the single agent session

    UNINITIALIZED --initialize()--> INITIALIZING --success--> READY
                                         |
                                         +--failure/cancel--> UNINITIALIZED

Only one session exists per process. A failed initialization leaves no
trace: key material, credentials and the agent handle are discarded.

Usage:
    manager = SessionManager(KeyProvisioner(settings), AgentFactory(settings))

    address = await manager.initialize(config)
    handle = manager.get_ready_session()
"""

from typing import Any, Dict, Optional
import asyncio
import logging

from wallet_agent.core.agent import AgentFactory, AgentHandle
from wallet_agent.core.exceptions import ProvisioningError, StateError, redact
from wallet_agent.models.session import KeyMaterial, SessionConfig, SessionState
from wallet_agent.services.key_provisioner import KeyProvisioner

logger = logging.getLogger(__name__)

ALREADY_INITIALIZED = "Agent is already initialized"
NOT_INITIALIZED = "Agent not initialized. Please call /init endpoint first"


class SessionManager:
    """
    Owns the process-wide session and guards its state transitions.

    The state check and the move to INITIALIZING happen in one critical
    section, so concurrent initialize() calls cannot both proceed. Once
    READY, the handle and address are never mutated until reset().
    """

    def __init__(self, provisioner: KeyProvisioner, agent_factory: AgentFactory):
        self.provisioner = provisioner
        self.agent_factory = agent_factory
        self._lock = asyncio.Lock()
        self._state = SessionState.UNINITIALIZED
        self._keys: Optional[KeyMaterial] = None
        self._handle: Optional[AgentHandle] = None
        self._turns = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def turn_count(self) -> int:
        return self._turns

    async def initialize(self, config: SessionConfig) -> str:
        """
        Provision keys and build the agent.

        Args:
            config: Validated session configuration

        Returns:
            The session's public wallet address

        Raises:
            StateError: if a session is initializing or ready (no side effects)
            ProvisioningError: if key provisioning or agent construction fails;
                the session is rolled back to UNINITIALIZED
        """
        async with self._lock:
            if self._state != SessionState.UNINITIALIZED:
                logger.warning(f"Rejected initialize() in state {self._state.value}")
                raise StateError(ALREADY_INITIALIZED)
            self._state = SessionState.INITIALIZING

        logger.info(f"Initializing session with model {config.llm.modelName}")
        keys: Optional[KeyMaterial] = None
        try:
            keys = await asyncio.to_thread(self.provisioner.provision)
            handle = self.agent_factory.create(config, keys)
        except ProvisioningError as e:
            self._rollback()
            logger.error(f"Error initializing agent: {e.message}")
            raise
        except Exception as e:
            secrets = config.credentials()
            if keys is not None:
                secrets.append(keys.export_secret())
            detail = redact(str(e), secrets) or type(e).__name__
            self._rollback()
            logger.error(f"Error initializing agent: {type(e).__name__}: {detail}")
            raise ProvisioningError(detail) from None
        except BaseException:
            self._rollback()
            logger.warning("Initialization cancelled, session rolled back")
            raise

        self._keys = keys
        self._handle = handle
        self._turns = 0
        self._state = SessionState.READY
        logger.info(f"Session ready, wallet {keys.address}")
        return keys.address

    def get_ready_session(self) -> AgentHandle:
        """
        Get the agent handle of the ready session.

        Raises:
            StateError: if the session is not READY
        """
        if self._state != SessionState.READY or self._handle is None:
            raise StateError(NOT_INITIALIZED)
        return self._handle

    def get_wallet_address(self) -> str:
        """
        Get the public address of the ready session.

        Raises:
            StateError: if the session is not READY
        """
        if self._state != SessionState.READY or self._keys is None:
            raise StateError(NOT_INITIALIZED)
        return self._keys.address

    def next_turn(self) -> int:
        """Advance and return the monotonic turn counter."""
        self._turns += 1
        return self._turns

    def snapshot(self) -> Dict[str, Any]:
        """Public view of the session for health reporting."""
        return {"state": self._state.value, "turns": self._turns}

    def reset(self) -> None:
        """Discard the session and all key material."""
        self._rollback()
        self._turns = 0
        logger.info("Session reset")

    def _rollback(self) -> None:
        self._keys = None
        self._handle = None
        self._state = SessionState.UNINITIALIZED
