"""Per-user secret storage backed by the user_secrets table"""
import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rbm.core.security.encryption import SecretVault, get_secret_vault
from rbm.db.models import UserSecret
from rbm.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Secret key names used by provider integrations
OPENAI_API_KEY = "openai_api_key"
ANTHROPIC_API_KEY = "anthropic_api_key"
PROVIDER_SECRET_KEYS = {
    "openai": OPENAI_API_KEY,
    "anthropic": ANTHROPIC_API_KEY,
}


class SecretStore:
    """Get/set/list/delete encrypted secrets for a user"""

    def __init__(self, db: AsyncSession, vault: Optional[SecretVault] = None):
        self.db = db
        self.vault = vault or get_secret_vault()

    async def _get_row(self, user_id: str, key_name: str) -> Optional[UserSecret]:
        result = await self.db.execute(
            select(UserSecret).where(UserSecret.user_id == user_id, UserSecret.key == key_name)
        )
        return result.scalar_one_or_none()

    async def get(self, user_id: str, key_name: str) -> Optional[str]:
        """
        Decrypt a stored secret.

        Returns:
            Plaintext, or None when no secret is stored under key_name

        Raises:
            CryptoError: stored payload could not be decrypted
        """
        row = await self._get_row(user_id, key_name)
        if row is None or not row.value_encrypted:
            return None
        return self.vault.decrypt(row.value_encrypted)

    async def set(self, user_id: str, key_name: str, plaintext: str) -> bool:
        """Encrypt and upsert a secret, overwriting any previous value"""
        if not key_name or not plaintext:
            raise ValidationError("key and value are required")

        payload = self.vault.encrypt(plaintext)
        row = await self._get_row(user_id, key_name)
        if row is None:
            self.db.add(UserSecret(user_id=user_id, key=key_name, value_encrypted=payload))
        else:
            row.value_encrypted = payload
        await self.db.commit()
        logger.info("Stored secret %s for user %s", key_name, user_id)
        return True

    async def list_keys(self, user_id: str) -> List[str]:
        """Names of the secrets a user has stored"""
        result = await self.db.execute(
            select(UserSecret.key).where(UserSecret.user_id == user_id).order_by(UserSecret.key)
        )
        return list(result.scalars().all())

    async def delete(self, user_id: str, key_name: str) -> bool:
        """Delete a secret; returns False when nothing was stored"""
        result = await self.db.execute(
            delete(UserSecret).where(UserSecret.user_id == user_id, UserSecret.key == key_name)
        )
        await self.db.commit()
        deleted = bool(result.rowcount)
        if deleted:
            logger.info("Deleted secret %s for user %s", key_name, user_id)
        return deleted

    def mask(self, plaintext: Optional[str]) -> str:
        return self.vault.mask(plaintext)
