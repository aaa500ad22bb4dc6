"""
Key Provisioner - Signing keypair for a new session

Two strategies:
- derived: ask the local derivation authority for raw Ed25519 key bytes
  and use the first 32 as a deterministic seed
- generated: fresh random keypair, no external dependency

Usage:
    from wallet_agent.services.key_provisioner import KeyProvisioner
    from wallet_agent.core.config import settings

    keys = KeyProvisioner(settings).provision()
    keys.address          # base58 public key
    keys.export_secret()  # base58 64-byte secret key
"""

from typing import Optional
import logging

import base58
import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from pydantic import SecretBytes

from wallet_agent.core.config import Settings
from wallet_agent.core.exceptions import ProvisioningError
from wallet_agent.models.session import KeyMaterial

logger = logging.getLogger(__name__)

SEED_LENGTH = 32


def keypair_from_seed(seed: bytes) -> KeyMaterial:
    """
    Build KeyMaterial from a 32-byte Ed25519 seed.

    The secret follows the Solana layout: seed followed by public key.
    """
    if len(seed) != SEED_LENGTH:
        raise ProvisioningError(f"Ed25519 seed must be {SEED_LENGTH} bytes, got {len(seed)}")

    private_key = ed25519.Ed25519PrivateKey.from_private_bytes(seed)
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )
    return KeyMaterial(
        address=base58.b58encode(public_bytes).decode("ascii"),
        secret=SecretBytes(seed + public_bytes)
    )


class KeyProvisioner:
    """
    Produces fresh KeyMaterial on every call. Nothing is cached.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        """
        Initialize provisioner.

        Args:
            settings: Application settings (key_strategy, derive_* options)
            session: Optional requests session, mostly for tests
        """
        self.settings = settings
        self.http = session or requests.Session()

    @property
    def strategy(self) -> str:
        """Resolved strategy name: 'derived' or 'generated'."""
        if self.settings.key_strategy == "auto":
            return "derived" if self.settings.derive_url else "generated"
        return self.settings.key_strategy

    def provision(self) -> KeyMaterial:
        """
        Produce key material using the configured strategy.

        Raises:
            ProvisioningError: on any derivation or generation failure.
                The derived strategy never falls back to a generated key.
        """
        if self.strategy == "derived":
            keys = keypair_from_seed(self._fetch_seed())
        else:
            keys = self.generate()
        logger.info(f"Provisioned {self.strategy} keypair for {keys.address}")
        return keys

    @staticmethod
    def generate() -> KeyMaterial:
        """Generate a fresh random keypair."""
        private_key = ed25519.Ed25519PrivateKey.generate()
        seed = private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )
        return keypair_from_seed(seed)

    def _fetch_seed(self) -> bytes:
        """Request raw key bytes from the derivation authority."""
        if not self.settings.derive_url:
            raise ProvisioningError("Derived key strategy requires DERIVE_URL")

        url = f"{self.settings.derive_url.rstrip('/')}/derive/ed25519"
        try:
            response = self.http.get(
                url,
                params={"path": self.settings.derive_path},
                timeout=self.settings.derive_timeout
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            raise ProvisioningError(
                f"Derivation authority timed out after {self.settings.derive_timeout}s"
            )
        except requests.exceptions.HTTPError as e:
            raise ProvisioningError(
                f"Derivation authority returned HTTP {e.response.status_code if e.response is not None else 'error'}"
            )
        except requests.exceptions.RequestException as e:
            raise ProvisioningError(f"Derivation authority unreachable: {type(e).__name__}")

        raw = response.content
        if len(raw) < SEED_LENGTH:
            raise ProvisioningError(
                f"Derivation authority returned {len(raw)} bytes, at least {SEED_LENGTH} required"
            )
        return raw[:SEED_LENGTH]
