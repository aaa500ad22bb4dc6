"""
Message Data Models

Pydantic models for the HTTP request/response payloads.

Usage:
    from wallet_agent.models.message import InitResponse, LLMConfig

    response = InitResponse(
        walletAddress="9xQe...",
        config={"llm": LLMConfig(modelName="gemini-2.5-flash", temperature=0.7)}
    )
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List


class LLMConfig(BaseModel):
    """Language model selection for the session."""

    model_config = ConfigDict(frozen=True)

    modelName: str = Field(..., min_length=1, description="Chat model name")
    temperature: float = Field(..., ge=0, le=1, description="Sampling temperature")


class InitResponse(BaseModel):
    """Response from a successful /init."""
    message: str = "Agent initialized successfully"
    walletAddress: str
    config: Dict[str, LLMConfig]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Agent initialized successfully",
                "walletAddress": "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin",
                "config": {"llm": {"modelName": "gemini-2.5-flash", "temperature": 0.7}}
            }
        }
    )


class ChatResponse(BaseModel):
    """Aggregated output of one turn, in arrival order."""
    responses: List[str]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "responses": [
                    "",
                    "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin",
                    "Your wallet address is 9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin."
                ]
            }
        }
    )


class WalletResponse(BaseModel):
    """Public address of the provisioned session."""
    walletAddress: str
