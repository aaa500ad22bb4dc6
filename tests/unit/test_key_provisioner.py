"""
Unit Tests for KeyProvisioner

Covers the derived and generated strategies and failure handling of the
derivation authority.
"""

import pytest
import base58
import requests
from unittest.mock import Mock, patch

from wallet_agent.core.exceptions import ProvisioningError
from wallet_agent.services.key_provisioner import KeyProvisioner, keypair_from_seed

# RFC 8032 Ed25519 test vector 1
RFC_SEED = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
RFC_PUBLIC = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")


def http_returning(content: bytes) -> Mock:
    response = Mock()
    response.content = content
    response.raise_for_status = Mock()
    http = Mock(spec=requests.Session)
    http.get = Mock(return_value=response)
    return http


@pytest.fixture
def derived_settings(test_settings):
    return test_settings.model_copy(update={"key_strategy": "derived"})


class TestKeypairFromSeed:
    """Tests for deterministic keypair construction."""

    def test_known_vector(self):
        """Test the address encodes the RFC 8032 public key."""
        keys = keypair_from_seed(RFC_SEED)
        assert base58.b58decode(keys.address) == RFC_PUBLIC

    def test_secret_layout(self):
        """Test the exported secret is seed followed by public key."""
        keys = keypair_from_seed(RFC_SEED)
        secret = base58.b58decode(keys.export_secret())
        assert len(secret) == 64
        assert secret[:32] == RFC_SEED
        assert secret[32:] == RFC_PUBLIC

    def test_wrong_seed_length(self):
        """Test seeds that are not 32 bytes are rejected."""
        with pytest.raises(ProvisioningError):
            keypair_from_seed(b"\x01" * 31)

    def test_secret_hidden_from_repr(self):
        """Test the secret never appears in repr or str."""
        keys = keypair_from_seed(RFC_SEED)
        exported = keys.export_secret()
        assert exported not in repr(keys)
        assert exported not in str(keys)
        assert RFC_SEED.hex() not in repr(keys)


class TestStrategySelection:
    """Tests for resolving the configured strategy."""

    def test_auto_with_authority(self, test_settings):
        settings = test_settings.model_copy(update={"key_strategy": "auto"})
        assert KeyProvisioner(settings).strategy == "derived"

    def test_auto_without_authority(self, test_settings):
        settings = test_settings.model_copy(update={"key_strategy": "auto", "derive_url": None})
        assert KeyProvisioner(settings).strategy == "generated"

    def test_explicit_strategy(self, test_settings):
        assert KeyProvisioner(test_settings).strategy == "generated"


class TestDerivedStrategy:
    """Tests for the derivation authority path."""

    def test_request_shape(self, derived_settings):
        """Test the authority is called with the fixed path label and a timeout."""
        http = http_returning(RFC_SEED + b"\x00" * 32)
        KeyProvisioner(derived_settings, session=http).provision()

        http.get.assert_called_once_with(
            "http://127.0.0.1:1100/derive/ed25519",
            params={"path": "signing-server"},
            timeout=derived_settings.derive_timeout
        )

    def test_uses_first_32_bytes(self, derived_settings):
        """Test only the first 32 bytes seed the keypair."""
        http = http_returning(RFC_SEED + b"\xff" * 32)
        keys = KeyProvisioner(derived_settings, session=http).provision()
        assert base58.b58decode(keys.address) == RFC_PUBLIC

    def test_deterministic(self, derived_settings):
        """Test the same authority bytes give the same address."""
        http = http_returning(RFC_SEED)
        provisioner = KeyProvisioner(derived_settings, session=http)
        assert provisioner.provision().address == provisioner.provision().address
        assert http.get.call_count == 2

    def test_short_response_fails_without_fallback(self, derived_settings):
        """Test insufficient bytes fail and never fall back to a generated key."""
        http = http_returning(b"\x01" * 16)
        provisioner = KeyProvisioner(derived_settings, session=http)

        with patch.object(KeyProvisioner, "generate") as generate:
            with pytest.raises(ProvisioningError) as exc_info:
                provisioner.provision()
            generate.assert_not_called()
        assert "16 bytes" in exc_info.value.message

    def test_unreachable_authority(self, derived_settings):
        """Test connection failures become ProvisioningError."""
        http = Mock(spec=requests.Session)
        http.get = Mock(side_effect=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(ProvisioningError) as exc_info:
            KeyProvisioner(derived_settings, session=http).provision()
        assert "unreachable" in exc_info.value.message

    def test_timeout(self, derived_settings):
        """Test a slow authority is bounded by derive_timeout."""
        http = Mock(spec=requests.Session)
        http.get = Mock(side_effect=requests.exceptions.Timeout())

        with pytest.raises(ProvisioningError) as exc_info:
            KeyProvisioner(derived_settings, session=http).provision()
        assert "timed out" in exc_info.value.message

    def test_http_error_status(self, derived_settings):
        """Test non-2xx responses fail provisioning."""
        http = http_returning(RFC_SEED)
        http.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError(
            response=Mock(status_code=503)
        )

        with pytest.raises(ProvisioningError) as exc_info:
            KeyProvisioner(derived_settings, session=http).provision()
        assert "503" in exc_info.value.message

    def test_missing_url(self, derived_settings):
        """Test the derived strategy requires an authority URL."""
        settings = derived_settings.model_copy(update={"derive_url": None})
        with pytest.raises(ProvisioningError):
            KeyProvisioner(settings, session=Mock()).provision()


class TestGeneratedStrategy:
    """Tests for fresh random keys."""

    def test_fresh_on_every_call(self, test_settings):
        """Test no key is reused across attempts."""
        http = Mock(spec=requests.Session)
        provisioner = KeyProvisioner(test_settings, session=http)

        first = provisioner.provision()
        second = provisioner.provision()

        assert first.address != second.address
        assert first.export_secret() != second.export_secret()
        http.get.assert_not_called()

    def test_generated_key_is_consistent(self):
        """Test the generated secret embeds the advertised public key."""
        keys = KeyProvisioner.generate()
        secret = base58.b58decode(keys.export_secret())
        assert secret[32:] == base58.b58decode(keys.address)
