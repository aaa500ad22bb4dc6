"""
Models Package - Data models and schemas

This package contains Pydantic models for request/response payloads,
session state and turn aggregation.
"""

from .message import LLMConfig, InitResponse, ChatResponse, WalletResponse
from .session import SessionState, SessionConfig, KeyMaterial
from .turn import TurnEvent, TurnEventKind, TurnResult

__all__ = [
    'LLMConfig',
    'InitResponse',
    'ChatResponse',
    'WalletResponse',
    'SessionState',
    'SessionConfig',
    'KeyMaterial',
    'TurnEvent',
    'TurnEventKind',
    'TurnResult',
]
