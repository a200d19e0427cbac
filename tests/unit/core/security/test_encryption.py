"""Unit tests for the secret vault"""
import base64

import pytest

from rbm.core.security.encryption import (
    AuthenticationFailure,
    InvalidPayload,
    SecretVault,
    get_secret_vault,
)
from rbm.exceptions import ConfigurationError, CryptoError


class TestSecretVault:
    """Tests for SecretVault encrypt/decrypt"""

    def test_vault_requires_master_secret(self):
        with pytest.raises(ConfigurationError):
            SecretVault("")
        with pytest.raises(ConfigurationError):
            SecretVault(None)

    def test_encrypt_decrypt_roundtrip(self, vault):
        plaintext = "sk-live-1234567890abcdef"
        payload = vault.encrypt(plaintext)

        assert plaintext not in payload
        assert vault.decrypt(payload) == plaintext

    def test_roundtrip_unicode_and_empty(self, vault):
        for plaintext in ("", "pässwörd ✓", "x" * 2048):
            assert vault.decrypt(vault.encrypt(plaintext)) == plaintext

    def test_payload_format(self, vault):
        nonce_part, sep, cipher_part = vault.encrypt("secret").partition(".")

        assert sep == "."
        assert len(base64.b64decode(nonce_part)) == 12
        # 6 plaintext bytes plus the 16-byte tag
        assert len(base64.b64decode(cipher_part)) == 6 + 16

    def test_fresh_nonce_per_encryption(self, vault):
        first = vault.encrypt("same value")
        second = vault.encrypt("same value")

        assert first != second
        assert first.split(".")[0] != second.split(".")[0]

    def test_tampered_ciphertext_fails(self, vault):
        nonce_part, _, cipher_part = vault.encrypt("secret value").partition(".")
        raw = bytearray(base64.b64decode(cipher_part))
        raw[0] ^= 0x01
        tampered = f"{nonce_part}.{base64.b64encode(bytes(raw)).decode()}"

        with pytest.raises(AuthenticationFailure):
            vault.decrypt(tampered)

    def test_flipping_any_ciphertext_byte_fails(self, vault):
        nonce_part, _, cipher_part = vault.encrypt("short").partition(".")
        raw = base64.b64decode(cipher_part)
        for index in range(len(raw)):
            flipped = bytearray(raw)
            flipped[index] ^= 0xFF
            with pytest.raises(CryptoError):
                vault.decrypt(f"{nonce_part}.{base64.b64encode(bytes(flipped)).decode()}")

    def test_wrong_key_fails(self, vault):
        payload = vault.encrypt("secret value")
        other = SecretVault("a-different-master-secret")

        with pytest.raises(AuthenticationFailure):
            other.decrypt(payload)

    def test_missing_delimiter_is_invalid_payload(self, vault):
        with pytest.raises(InvalidPayload):
            vault.decrypt("bm8tZGVsaW1pdGVy")
        with pytest.raises(InvalidPayload):
            vault.decrypt("")

    def test_bad_base64_is_invalid_payload(self, vault):
        with pytest.raises(InvalidPayload):
            vault.decrypt("not base64!.also not base64!")

    def test_bad_nonce_length_is_invalid_payload(self, vault):
        short_nonce = base64.b64encode(b"short").decode()
        cipher = base64.b64encode(b"x" * 32).decode()
        with pytest.raises(InvalidPayload):
            vault.decrypt(f"{short_nonce}.{cipher}")

    def test_crypto_errors_share_one_message(self, vault):
        payload = vault.encrypt("secret")
        for bad in ("garbage", payload[:-4] + "AAAA"):
            with pytest.raises(CryptoError) as exc_info:
                vault.decrypt(bad)
            assert exc_info.value.message == "Invalid secret"
            assert exc_info.value.status_code == 500

    def test_global_vault_uses_configured_secret(self):
        vault = get_secret_vault()
        assert vault is get_secret_vault()
        assert vault.decrypt(vault.encrypt("value")) == "value"


class TestMasking:
    """Tests for mask and metadata"""

    def test_mask_keeps_last_four(self):
        assert SecretVault.mask("sk-abc123") == "••••c123"

    def test_mask_reveals_only_last_four(self):
        assert SecretVault.mask("abcd1234") == "••••1234"
        for value in ("12345", "sk-" + "x" * 40 + "tail", "pässwörd"):
            masked = SecretVault.mask(value)
            assert masked.startswith("••••")
            assert masked[4:] == value[-4:]

    def test_mask_short_values_fully_redacted(self):
        assert SecretVault.mask("abcd") == "••••••••"
        assert SecretVault.mask("ab") == "••••••••"
        assert SecretVault.mask("") == "••••••••"
        assert SecretVault.mask(None) == "••••••••"

    def test_metadata_present(self):
        meta = SecretVault.metadata("sk-abc123")

        assert meta == {"present": True, "length": 9, "last4": "c123", "status": "present"}

    def test_metadata_missing(self):
        meta = SecretVault.metadata(None)

        assert meta["present"] is False
        assert meta["length"] == 0
        assert meta["last4"] == ""
        assert meta["status"] == "missing"
