"""
API Routes

Session provisioning, chat and wallet endpoints.

Usage:
    from fastapi import FastAPI
    from api.routes import router

    app = FastAPI()
    app.include_router(router)
"""

from typing import Any
import logging

from fastapi import APIRouter, Depends, Request

from agent_logic import get_session_manager, get_turn_aggregator, run_chat_turn
from wallet_agent import __version__
from wallet_agent.core.agent import TurnAggregator
from wallet_agent.core.exceptions import StateError, ValidationError
from wallet_agent.core.session import ALREADY_INITIALIZED, SessionManager
from wallet_agent.core.validator import BODY_ERROR, validate_chat_request, validate_init_request
from wallet_agent.models.message import ChatResponse, InitResponse, WalletResponse
from wallet_agent.models.session import SessionState

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="",
    tags=["agent"]
)


async def read_json(request: Request) -> Any:
    """Decode the request body, reporting malformed JSON as a validation error."""
    try:
        return await request.json()
    except ValueError:
        raise ValidationError([BODY_ERROR])


@router.get("/")
def read_root():
    """
    Root endpoint.

    Returns:
        dict: Status message
    """
    return {"status": "Wallet agent is running."}


@router.get("/health")
def health_check(manager: SessionManager = Depends(get_session_manager)):
    """
    Health check endpoint for Docker and monitoring.

    Returns:
        dict: Health status and session lifecycle state
    """
    return {
        "status": "healthy",
        "service": "wallet-agent",
        "version": __version__,
        "session": manager.snapshot()
    }


@router.post("/init", response_model=InitResponse)
async def init_agent(
    request: Request,
    manager: SessionManager = Depends(get_session_manager)
):
    """
    Provision the session: keys, credentials and agent.

    Body:
        GEMINI_API_KEY (or OPENAI_API_KEY), RPC_URL, optional llm {modelName, temperature}

    Returns:
        InitResponse with the wallet address and effective llm config
    """
    if manager.state != SessionState.UNINITIALIZED:
        raise StateError(ALREADY_INITIALIZED)

    config = validate_init_request(await read_json(request))
    address = await manager.initialize(config)

    return InitResponse(walletAddress=address, config={"llm": config.llm})


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
    aggregator: TurnAggregator = Depends(get_turn_aggregator)
):
    """
    Run one conversational turn.

    Returns:
        ChatResponse with agent and tool contributions in arrival order
    """
    manager.get_ready_session()
    message = validate_chat_request(await read_json(request))

    result = await run_chat_turn(message, manager, aggregator)
    return ChatResponse(responses=result.responses)


@router.get("/wallet", response_model=WalletResponse)
def get_wallet(manager: SessionManager = Depends(get_session_manager)):
    """
    Get the session wallet address.

    Returns:
        WalletResponse
    """
    return WalletResponse(walletAddress=manager.get_wallet_address())
