"""
Session Models

Lifecycle state, immutable session configuration and key material
for the single agent session held by the process.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, SecretBytes, SecretStr
import base58

from wallet_agent.models.message import LLMConfig


class SessionState(str, Enum):
    """Session lifecycle states. A failed initialization returns to UNINITIALIZED."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class SessionConfig(BaseModel):
    """
    Validated /init payload.

    Constructed once by the request validator and consumed only during
    initialization. Credentials are SecretStr so they never show up in
    logs or reprs.
    """

    model_config = ConfigDict(frozen=True)

    llm: LLMConfig
    model_api_key: SecretStr = Field(description="Language model access token")
    rpc_url: SecretStr = Field(description="Blockchain network RPC endpoint")

    def credentials(self) -> list:
        """Plain credential values, for redaction only."""
        return [self.model_api_key.get_secret_value(), self.rpc_url.get_secret_value()]


class KeyMaterial(BaseModel):
    """
    Signing keypair for a session.

    Example:
        keys = KeyMaterial(address="9xQe...", secret=SecretBytes(seed + public_key))
        keys.export_secret()  # base58 string for the agent toolkit
    """

    model_config = ConfigDict(frozen=True)

    address: str = Field(description="Base58 public key")
    secret: SecretBytes = Field(description="64-byte secret key (seed || public key)")

    def export_secret(self) -> str:
        """Encode the secret in the base58 wire format used by Solana tooling."""
        return base58.b58encode(self.secret.get_secret_value()).decode("ascii")
