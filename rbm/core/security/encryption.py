"""Secret vault: AES-256-GCM envelope encryption for per-user credentials"""
import base64
import binascii
import hashlib
import os
from typing import Dict, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from rbm.exceptions import ConfigurationError, CryptoError

NONCE_SIZE = 12  # 96-bit GCM nonce
PAYLOAD_DELIMITER = "."
MASK_PREFIX = "••••"
MASK_PLACEHOLDER = "••••••••"
VISIBLE_CHARS = 4


class InvalidPayload(CryptoError):
    """Stored payload is not ``nonce.ciphertext`` base64"""
    pass


class AuthenticationFailure(CryptoError):
    """GCM tag did not verify (tampered payload or wrong key)"""
    pass


class SecretVault:
    """Encrypts, decrypts and masks small string secrets.

    The AES key is SHA-256 of a server-held master secret. Each payload is
    ``base64(nonce) + "." + base64(ciphertext || tag)``.
    """

    def __init__(self, master_secret: Union[str, bytes, None]):
        if not master_secret:
            raise ConfigurationError("master secret is not set")
        if isinstance(master_secret, str):
            master_secret = master_secret.encode("utf-8")
        self._aesgcm = AESGCM(hashlib.sha256(master_secret).digest())

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt plaintext with a fresh random nonce.

        Args:
            plaintext: UTF-8 text to encrypt

        Returns:
            Opaque payload string safe to persist
        """
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = self._aesgcm.encrypt(nonce, plaintext.encode("utf-8"), None)
        return PAYLOAD_DELIMITER.join(
            (base64.b64encode(nonce).decode("ascii"), base64.b64encode(ciphertext).decode("ascii"))
        )

    def decrypt(self, payload: str) -> str:
        """
        Decrypt a payload produced by :meth:`encrypt`.

        Raises:
            InvalidPayload: delimiter missing or parts not decodable
            AuthenticationFailure: integrity tag did not verify
        """
        nonce_part, sep, cipher_part = (payload or "").partition(PAYLOAD_DELIMITER)
        if not sep or not nonce_part or not cipher_part:
            raise InvalidPayload("missing delimiter")

        try:
            nonce = base64.b64decode(nonce_part, validate=True)
            ciphertext = base64.b64decode(cipher_part, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidPayload("bad base64") from e

        if len(nonce) != NONCE_SIZE:
            raise InvalidPayload("bad nonce length")

        try:
            plaintext = self._aesgcm.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise AuthenticationFailure("tag mismatch") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidPayload("plaintext is not UTF-8") from e

    @staticmethod
    def mask(plaintext: Optional[str]) -> str:
        """
        Redact a secret for display, keeping only the last 4 characters.

        Values of 4 characters or fewer are fully redacted.
        """
        if not plaintext or len(plaintext) <= VISIBLE_CHARS:
            return MASK_PLACEHOLDER
        return f"{MASK_PREFIX}{plaintext[-VISIBLE_CHARS:]}"

    @staticmethod
    def metadata(value: Optional[str]) -> Dict[str, object]:
        """Describe a secret without exposing it"""
        present = bool(value)
        return {
            "present": present,
            "length": len(value) if value else 0,
            "last4": value[-VISIBLE_CHARS:] if value and len(value) > VISIBLE_CHARS else "",
            "status": "present" if present else "missing",
        }


# Global vault instance
_secret_vault: Optional[SecretVault] = None


def get_secret_vault() -> SecretVault:
    """Get global secret vault instance"""
    global _secret_vault
    if _secret_vault is None:
        from rbm.core.config import settings

        _secret_vault = SecretVault(settings.master_secret)
    return _secret_vault
