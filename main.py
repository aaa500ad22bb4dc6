# main.py
"""
FastAPI Application Entry Point

Builds the app from api/routes.py and api/middleware.py and runs it
with uvicorn when executed directly.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import errno
import logging
import socket
import sys

from fastapi import FastAPI

from agent_logic import get_session_manager
from api.middleware import setup_middleware
from api.routes import router
from wallet_agent import __version__
from wallet_agent.core.config import settings

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure logging from settings.log_level."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Drop the session and its key material on shutdown."""
    yield
    logger.info("[SHUTDOWN] Discarding agent session")
    get_session_manager().reset()


def create_app(enable_rate_limiting: bool = True) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        enable_rate_limiting: Attach the slowapi limiter

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Wallet Agent API",
        description="Single-session on-chain conversational agent",
        version=__version__,
        lifespan=lifespan
    )

    setup_middleware(
        app,
        allowed_origins=settings.allowed_origins,
        enable_rate_limiting=enable_rate_limiting
    )

    app.include_router(router)
    return app


app = create_app()


def port_in_use(host: str, port: int) -> bool:
    """Check whether host:port is already bound by another listener."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as e:
            return e.errno == errno.EADDRINUSE
    return False


def serve() -> None:
    """Run the API server; exit with status 1 if it cannot start."""
    import uvicorn

    setup_logging()
    port = settings.api_port

    if port_in_use(settings.api_host, port):
        logger.error(
            f"Port {port} is already in use. "
            f"Please try a different port by setting the API_PORT environment variable."
        )
        sys.exit(1)

    try:
        uvicorn.run(
            app,
            host=settings.api_host,
            port=port,
            log_level=settings.log_level.lower(),
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    serve()
