"""
Services Package - External integrations

Key provisioning and LLM construction.
"""

from .key_provisioner import KeyProvisioner
from .llm_service import LLMService

__all__ = [
    'KeyProvisioner',
    'LLMService',
]
