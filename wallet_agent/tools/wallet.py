"""
Wallet Tools - Wallet capabilities for the agent

Tools are bound to one session at construction: its public address, RPC
endpoint and, for message signing, its secret key. Nothing here builds or
sends transactions.
"""

from typing import Optional
import itertools
import logging

import base58
import requests
from cryptography.hazmat.primitives.asymmetric import ed25519
from pydantic import BaseModel, Field, SecretBytes

from wallet_agent.core.exceptions import redact
from wallet_agent.tools.base import BaseTool, ToolResult

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000


class WalletAddressTool(BaseTool):
    """Reports the session's own wallet address."""

    def __init__(self, address: str):
        self.address = address

    @property
    def name(self) -> str:
        return "get_wallet_address"

    @property
    def description(self) -> str:
        return "Get the public address of the agent's own wallet"

    def _execute_impl(self, **kwargs) -> ToolResult:
        return ToolResult(success=True, data=self.address)


class BalanceArgs(BaseModel):
    address: Optional[str] = Field(
        default=None,
        description="Base58 account address. Defaults to the agent's own wallet."
    )


class BalanceTool(BaseTool):
    """
    Fetches an account balance over Solana JSON-RPC (getBalance).

    The RPC URL can embed provider API keys, so it is scrubbed from any
    error text returned to the model.
    """

    args_schema = BalanceArgs

    def __init__(
        self,
        rpc_url: str,
        address: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.rpc_url = rpc_url
        self.address = address
        self.timeout = timeout
        self.http = session or requests.Session()
        self._ids = itertools.count(1)

    @property
    def name(self) -> str:
        return "get_balance"

    @property
    def description(self) -> str:
        return "Get the SOL balance of a wallet. Uses the agent's own wallet when no address is given."

    def _execute_impl(self, **kwargs) -> ToolResult:
        address = kwargs.get("address") or self.address
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "getBalance",
            "params": [address],
        }

        try:
            response = self.http.post(self.rpc_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.Timeout:
            return ToolResult(success=False, error=f"RPC request timed out after {self.timeout}s")
        except (requests.exceptions.RequestException, ValueError) as e:
            return ToolResult(success=False, error=redact(f"RPC request failed: {e}", [self.rpc_url]))

        if "error" in body:
            message = body["error"].get("message", "unknown error")
            return ToolResult(success=False, error=f"RPC error: {message}")

        lamports = body["result"]["value"]
        return ToolResult(
            success=True,
            data=f"{lamports / LAMPORTS_PER_SOL} SOL",
            metadata={"address": address, "lamports": lamports}
        )


class SignMessageArgs(BaseModel):
    message: str = Field(description="UTF-8 text to sign with the agent's wallet key")


class SignMessageTool(BaseTool):
    """
    Signs arbitrary text with the session's Ed25519 key.

    The signature and the signer address are returned base58 encoded so
    they can be checked against the wallet address by anyone.
    """

    args_schema = SignMessageArgs

    def __init__(self, address: str, secret: SecretBytes):
        self.address = address
        # Secret layout is seed || public key; only the seed signs
        seed = secret.get_secret_value()[:32]
        self._signer = ed25519.Ed25519PrivateKey.from_private_bytes(seed)

    @property
    def name(self) -> str:
        return "sign_message"

    @property
    def description(self) -> str:
        return "Sign a text message with the agent's wallet key and return the base58 signature"

    def _execute_impl(self, **kwargs) -> ToolResult:
        message = kwargs.get("message")
        if not isinstance(message, str) or not message:
            return ToolResult(success=False, error="message is required")

        signature = self._signer.sign(message.encode("utf-8"))
        return ToolResult(
            success=True,
            data=base58.b58encode(signature).decode("ascii"),
            metadata={"signer": self.address}
        )


def create_wallet_tools(
    address: str,
    rpc_url: str,
    secret: SecretBytes,
    timeout: float = 10.0
) -> list:
    """
    Build the tool list for a session.

    Args:
        address: Session wallet address
        rpc_url: Blockchain RPC endpoint
        secret: Session secret key (seed || public key)
        timeout: RPC request timeout in seconds

    Returns:
        List of BaseTool instances
    """
    return [
        WalletAddressTool(address),
        BalanceTool(rpc_url, address, timeout=timeout),
        SignMessageTool(address, secret),
    ]
