"""
Pytest Configuration and Fixtures

Provides common fixtures for all tests: settings, stub key provisioners,
fake LangGraph workflows and agent factories, and an HTTP test client
wired to an isolated SessionManager.
"""

import os

import pytest

# Set test environment variables before importing app modules
os.environ["KEY_STRATEGY"] = "generated"
os.environ["LOG_LEVEL"] = "DEBUG"

from tests.fakes import (
    TEST_THREAD,
    FakeWorkflow,
    StubAgentFactory,
    StubProvisioner,
    agent_chunk,
    tools_chunk,
)
from wallet_agent.core.config import Settings
from wallet_agent.core.agent import TurnAggregator
from wallet_agent.core.session import SessionManager
from wallet_agent.models.message import LLMConfig
from wallet_agent.models.session import SessionConfig


@pytest.fixture
def test_settings():
    """Provide test configuration settings."""
    return Settings(
        llm_model="gemini-2.5-flash",
        llm_temperature=0.7,
        key_strategy="generated",
        derive_url="http://127.0.0.1:1100",
        derive_path="signing-server",
        derive_timeout=2.0,
        thread_id=TEST_THREAD,
        turn_timeout=None,
        rpc_timeout=2.0,
    )


@pytest.fixture
def session_config():
    """Provide a validated session configuration."""
    return SessionConfig(
        llm=LLMConfig(modelName="gemini-2.5-flash", temperature=0.7),
        model_api_key="test-model-key",
        rpc_url="https://rpc.example.test/?api-key=rpc-secret",
    )


@pytest.fixture
def init_payload():
    """Provide a well-formed /init body."""
    return {
        "GEMINI_API_KEY": "test-model-key",
        "RPC_URL": "https://rpc.example.test/?api-key=rpc-secret",
        "llm": {"modelName": "gemini-2.5-flash", "temperature": 0.3},
    }


@pytest.fixture
def turn_chunks():
    """A typical tool-using turn: tool call, tool output, final answer."""
    return [
        agent_chunk("", tool_calls=[{"name": "get_balance", "args": {}, "id": "call_1"}]),
        tools_chunk("1.5 SOL"),
        agent_chunk("Your balance is 1.5 SOL."),
    ]


@pytest.fixture
def fake_workflow(turn_chunks):
    return FakeWorkflow(chunks=turn_chunks)


@pytest.fixture
def provisioner():
    return StubProvisioner()


@pytest.fixture
def agent_factory(fake_workflow):
    return StubAgentFactory(workflow=fake_workflow)


@pytest.fixture
def session_manager(provisioner, agent_factory):
    """Provide a fresh SessionManager with stub collaborators."""
    return SessionManager(provisioner=provisioner, agent_factory=agent_factory)


@pytest.fixture
def turn_aggregator():
    return TurnAggregator()


@pytest.fixture
def client(session_manager, turn_aggregator):
    """Provide an HTTP test client bound to the fixture session."""
    from fastapi.testclient import TestClient
    from agent_logic import get_session_manager, get_turn_aggregator
    from main import create_app

    app = create_app(enable_rate_limiting=False)
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    app.dependency_overrides[get_turn_aggregator] = lambda: turn_aggregator

    with TestClient(app) as test_client:
        yield test_client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
