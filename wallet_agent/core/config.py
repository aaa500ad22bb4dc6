"""
Configuration Management

Centralized configuration using Pydantic Settings.
All environment variables are validated and type-checked.

Usage:
    from wallet_agent.core.config import settings

    model = settings.llm_model
    authority = settings.derive_url
"""

from pydantic_settings import BaseSettings
from typing import List, Literal, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM defaults (used when /init omits the llm block)
    llm_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.7

    # Server Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    allowed_origins: List[str] = ["*"]
    rate_limit: str = "100/minute"
    log_level: str = "INFO"

    # Key provisioning
    key_strategy: Literal["auto", "derived", "generated"] = "auto"
    derive_url: Optional[str] = "http://127.0.0.1:1100"
    derive_path: str = "signing-server"
    derive_timeout: float = 10.0

    # Agent Settings
    thread_id: str = "Solana Agent Kit!"
    turn_timeout: Optional[float] = None  # None drains the stream without a deadline
    rpc_timeout: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra env vars


# Global settings instance
settings = Settings()
