"""
Turn Models

A turn is one user message in, one ordered list of agent/tool
contributions out.
"""

from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict, Field


class TurnEventKind(str, Enum):
    """Source of a streamed contribution."""
    AGENT = "agent"
    TOOL = "tool"


class TurnEvent(BaseModel):
    """One increment of the streamed trace of a turn."""

    model_config = ConfigDict(frozen=True)

    kind: TurnEventKind
    text: str


class TurnResult(BaseModel):
    """Texts collected from a turn's events, in arrival order."""

    turn: int = Field(default=0, description="Session turn number")
    responses: List[str] = Field(default_factory=list)

    def add(self, event: TurnEvent) -> None:
        self.responses.append(event.text)
