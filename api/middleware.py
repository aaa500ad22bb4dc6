"""
API Middleware - Request/response middleware for FastAPI

Provides:
- CORS handling
- Request logging
- Response timing
- Error handling (service error taxonomy and unhandled exceptions)
- Rate limiting (using slowapi)
"""

import time
import logging
from typing import Callable, Optional, List
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from wallet_agent.core.config import settings
from wallet_agent.core.exceptions import AgentServerError

# Setup logging
logger = logging.getLogger(__name__)


# Rate limiter configuration
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])


def setup_cors(app: FastAPI, allowed_origins: Optional[List[str]] = None):
    """
    Setup CORS middleware.

    Args:
        app: FastAPI application instance
        allowed_origins: List of allowed origins. If None, allows all origins.
    """
    origins = allowed_origins or ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(f"CORS middleware configured with origins: {origins}")


def setup_rate_limiting(app: FastAPI):
    """
    Setup rate limiting middleware using slowapi.

    Default limit comes from settings.rate_limit, per client IP.
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    logger.info(f"Rate limiting middleware configured ({settings.rate_limit})")


async def agent_error_handler(request: Request, exc: AgentServerError) -> JSONResponse:
    """Render service errors with their own status code and body."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


def setup_error_handlers(app: FastAPI):
    """Register the handler for the service error taxonomy."""
    app.add_exception_handler(AgentServerError, agent_error_handler)


async def request_logging_middleware(request: Request, call_next: Callable):
    """
    Middleware to log all incoming requests.

    Logs method, path, client IP, status code and processing time.
    Request bodies are never logged since they carry credentials.
    """
    start_time = time.time()

    client_ip = request.client.host if request.client else "unknown"
    method = request.method
    path = request.url.path

    logger.info(f"Request: {method} {path} from {client_ip}")

    try:
        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        logger.info(
            f"Response: {method} {path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )

        return response

    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            f"Error: {method} {path} - "
            f"Error: {type(e).__name__} - "
            f"Time: {process_time:.3f}s"
        )
        raise


async def error_handling_middleware(request: Request, call_next: Callable):
    """
    Middleware to handle errors gracefully.

    Catches unhandled exceptions and returns proper JSON responses.
    """
    try:
        return await call_next(request)

    except Exception as e:
        logger.error(f"Unhandled exception: {type(e).__name__}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"}
        )


def setup_middleware(
    app: FastAPI,
    enable_cors: bool = True,
    allowed_origins: Optional[List[str]] = None,
    enable_rate_limiting: bool = True,
    enable_logging: bool = True,
    enable_error_handling: bool = True
):
    """
    Setup all middleware for the FastAPI application.

    Args:
        app: FastAPI application instance
        enable_cors: Enable CORS middleware
        allowed_origins: List of allowed CORS origins
        enable_rate_limiting: Enable rate limiting
        enable_logging: Enable request logging
        enable_error_handling: Enable error handling

    Usage:
        from fastapi import FastAPI
        from api.middleware import setup_middleware

        app = FastAPI()
        setup_middleware(app, allowed_origins=["http://localhost:3000"])
    """
    setup_error_handlers(app)

    # Error handling (innermost, so request logging sees the 500 it produces)
    if enable_error_handling:
        app.middleware("http")(error_handling_middleware)
        logger.info("Error handling middleware enabled")

    if enable_logging:
        app.middleware("http")(request_logging_middleware)
        logger.info("Request logging middleware enabled")

    if enable_cors:
        setup_cors(app, allowed_origins)

    if enable_rate_limiting:
        setup_rate_limiting(app)

    logger.info("All middleware configured successfully")


__all__ = [
    "setup_middleware",
    "setup_cors",
    "setup_rate_limiting",
    "setup_error_handlers",
    "limiter",
    "request_logging_middleware",
    "error_handling_middleware",
]
