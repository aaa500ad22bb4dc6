"""
Unit Tests for the Session State Machine

Covers single initialization, rollback on failure and cancellation,
and READY-only accessors.
"""

import asyncio
import logging

import base58
import pytest

from tests.fakes import StubAgentFactory, StubProvisioner
from wallet_agent.core.exceptions import ProvisioningError, StateError
from wallet_agent.core.session import ALREADY_INITIALIZED, NOT_INITIALIZED, SessionManager
from wallet_agent.models.session import SessionState


class TestInitialize:
    """Tests for the Uninitialized -> Ready transition."""

    @pytest.mark.asyncio
    async def test_initialize_success(self, session_manager, session_config, provisioner, agent_factory):
        """Test a successful initialization stores handle and address."""
        address = await session_manager.initialize(session_config)

        assert session_manager.state == SessionState.READY
        assert address == provisioner.issued[0].address
        assert session_manager.get_wallet_address() == address
        assert session_manager.get_ready_session() is not None
        assert agent_factory.created[0]["config"] is session_config

    @pytest.mark.asyncio
    async def test_second_initialize_rejected(self, session_manager, session_config, provisioner):
        """Test re-initialization is rejected without touching keys."""
        address = await session_manager.initialize(session_config)
        handle = session_manager.get_ready_session()

        with pytest.raises(StateError) as exc_info:
            await session_manager.initialize(session_config)

        assert exc_info.value.message == ALREADY_INITIALIZED
        assert provisioner.calls == 1
        assert session_manager.get_wallet_address() == address
        assert session_manager.get_ready_session() is handle

    @pytest.mark.asyncio
    async def test_concurrent_initialize_not_queued(self, session_config, agent_factory):
        """Test a call arriving during INITIALIZING is rejected immediately."""
        provisioner = StubProvisioner(delay=0.2)
        manager = SessionManager(provisioner=provisioner, agent_factory=agent_factory)

        results = await asyncio.gather(
            manager.initialize(session_config),
            manager.initialize(session_config),
            return_exceptions=True
        )

        errors = [r for r in results if isinstance(r, StateError)]
        addresses = [r for r in results if isinstance(r, str)]
        assert len(errors) == 1
        assert len(addresses) == 1
        assert provisioner.calls == 1
        assert manager.get_wallet_address() == addresses[0]


class TestRollback:
    """Tests for atomic failure of initialize()."""

    @pytest.mark.asyncio
    async def test_provisioning_failure_rolls_back(self, session_config, agent_factory):
        """Test a provisioning failure returns to UNINITIALIZED and allows a retry."""
        provisioner = StubProvisioner(error=ProvisioningError("Derivation authority unreachable"))
        manager = SessionManager(provisioner=provisioner, agent_factory=agent_factory)

        with pytest.raises(ProvisioningError):
            await manager.initialize(session_config)

        assert manager.state == SessionState.UNINITIALIZED
        with pytest.raises(StateError):
            manager.get_wallet_address()
        assert agent_factory.created == []

        provisioner.error = None
        address = await manager.initialize(session_config)
        assert manager.state == SessionState.READY
        assert address == provisioner.issued[-1].address

    @pytest.mark.asyncio
    async def test_agent_construction_failure_redacts_secrets(self, session_config):
        """Test construction errors surface without secrets or credentials."""
        provisioner = StubProvisioner()
        leaky = RuntimeError("bad key test-model-key for https://rpc.example.test/?api-key=rpc-secret")
        manager = SessionManager(provisioner=provisioner, agent_factory=StubAgentFactory(error=leaky))

        with pytest.raises(ProvisioningError) as exc_info:
            await manager.initialize(session_config)

        message = exc_info.value.message
        assert "test-model-key" not in message
        assert "rpc-secret" not in message
        assert provisioner.issued[0].export_secret() not in message
        assert exc_info.value.__cause__ is None
        assert manager.state == SessionState.UNINITIALIZED

    @pytest.mark.asyncio
    async def test_construction_error_mentioning_secret(self, session_config):
        """Test the exported secret itself is scrubbed from error details."""
        provisioner = StubProvisioner()

        class EchoSecretFactory(StubAgentFactory):
            def create(self, config, keys):
                raise ValueError(f"cannot parse {keys.export_secret()}")

        manager = SessionManager(provisioner=provisioner, agent_factory=EchoSecretFactory())
        with pytest.raises(ProvisioningError) as exc_info:
            await manager.initialize(session_config)

        assert provisioner.issued[0].export_secret() not in exc_info.value.message
        assert "***" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_construction_failure_log_is_redacted(self, session_config, caplog):
        caplog.set_level(logging.DEBUG)
        provisioner = StubProvisioner()
        leaky = RuntimeError("bad key test-model-key for https://rpc.example.test/?api-key=rpc-secret")
        manager = SessionManager(provisioner=provisioner, agent_factory=StubAgentFactory(error=leaky))

        with pytest.raises(ProvisioningError):
            await manager.initialize(session_config)

        assert "Error initializing agent: RuntimeError" in caplog.text
        assert "test-model-key" not in caplog.text
        assert "rpc-secret" not in caplog.text
        assert provisioner.issued[0].export_secret() not in caplog.text

    @pytest.mark.asyncio
    async def test_cancellation_rolls_back(self, session_config, agent_factory):
        """Test a cancelled initialization never leaves the session INITIALIZING."""
        provisioner = StubProvisioner(delay=0.5)
        manager = SessionManager(provisioner=provisioner, agent_factory=agent_factory)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(manager.initialize(session_config), timeout=0.05)

        assert manager.state == SessionState.UNINITIALIZED
        assert agent_factory.created == []


class TestReadyAccessors:
    """Tests for READY-only operations."""

    def test_get_ready_session_before_init(self, session_manager):
        with pytest.raises(StateError) as exc_info:
            session_manager.get_ready_session()
        assert exc_info.value.message == NOT_INITIALIZED

    def test_get_wallet_address_before_init(self, session_manager):
        with pytest.raises(StateError):
            session_manager.get_wallet_address()

    @pytest.mark.asyncio
    async def test_wallet_address_is_base58_public_key(self, session_manager, session_config):
        address = await session_manager.initialize(session_config)
        assert len(base58.b58decode(address)) == 32

    def test_turn_counter_monotonic(self, session_manager):
        assert [session_manager.next_turn() for _ in range(3)] == [1, 2, 3]
        assert session_manager.turn_count == 3

    @pytest.mark.asyncio
    async def test_reset_discards_session(self, session_manager, session_config):
        await session_manager.initialize(session_config)
        session_manager.next_turn()

        session_manager.reset()

        assert session_manager.state == SessionState.UNINITIALIZED
        assert session_manager.snapshot() == {"state": "uninitialized", "turns": 0}
        with pytest.raises(StateError):
            session_manager.get_wallet_address()

    @pytest.mark.asyncio
    async def test_snapshot_has_no_secrets(self, session_manager, session_config, provisioner):
        await session_manager.initialize(session_config)
        snapshot = session_manager.snapshot()
        assert snapshot == {"state": "ready", "turns": 0}
        assert provisioner.issued[0].export_secret() not in str(snapshot)
