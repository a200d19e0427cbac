"""Unit tests for the per-user secret store"""
import pytest
from sqlalchemy import select

from rbm.db.models import UserSecret
from rbm.exceptions import CryptoError, ValidationError
from rbm.services.secrets import SecretStore


@pytest.fixture
def store(test_db_session, vault):
    return SecretStore(test_db_session, vault=vault)


class TestSecretStore:
    """Tests for SecretStore"""

    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        await store.set("user-1", "openai_api_key", "sk-abc123")

        assert await store.get("user-1", "openai_api_key") == "sk-abc123"

    @pytest.mark.asyncio
    async def test_openai_key_scenario(self, store):
        await store.set("u1", "openai_api_key", "sk-abc123")

        value = await store.get("u1", "openai_api_key")

        assert value == "sk-abc123"
        assert store.mask(value) == "••••c123"

    @pytest.mark.asyncio
    async def test_value_is_encrypted_at_rest(self, store, test_db_session):
        await store.set("user-1", "openai_api_key", "sk-abc123")

        row = (await test_db_session.execute(select(UserSecret))).scalar_one()
        assert "sk-abc123" not in row.value_encrypted
        assert "." in row.value_encrypted

    @pytest.mark.asyncio
    async def test_set_overwrites(self, store, test_db_session):
        await store.set("user-1", "openai_api_key", "first-value")
        await store.set("user-1", "openai_api_key", "second-value")

        assert await store.get("user-1", "openai_api_key") == "second-value"
        rows = (await test_db_session.execute(select(UserSecret))).scalars().all()
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_missing_secret_is_none(self, store):
        assert await store.get("user-1", "nothing-here") is None

    @pytest.mark.asyncio
    async def test_secrets_are_scoped_per_user(self, store):
        await store.set("user-1", "openai_api_key", "sk-user-one")

        assert await store.get("user-2", "openai_api_key") is None
        assert await store.list_keys("user-2") == []
        assert await store.delete("user-2", "openai_api_key") is False
        assert await store.get("user-1", "openai_api_key") == "sk-user-one"

    @pytest.mark.asyncio
    async def test_list_keys_sorted(self, store):
        await store.set("user-1", "zeta", "value-z")
        await store.set("user-1", "alpha", "value-a")

        assert await store.list_keys("user-1") == ["alpha", "zeta"]

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.set("user-1", "openai_api_key", "sk-abc123")

        assert await store.delete("user-1", "openai_api_key") is True
        assert await store.get("user-1", "openai_api_key") is None
        assert await store.delete("user-1", "openai_api_key") is False

    @pytest.mark.asyncio
    async def test_empty_key_or_value_rejected(self, store):
        with pytest.raises(ValidationError):
            await store.set("user-1", "", "value")
        with pytest.raises(ValidationError):
            await store.set("user-1", "key", "")

    @pytest.mark.asyncio
    async def test_corrupt_payload_raises_crypto_error(self, store, test_db_session):
        test_db_session.add(UserSecret(user_id="user-1", key="broken", value_encrypted="not-a-payload"))
        await test_db_session.commit()

        with pytest.raises(CryptoError):
            await store.get("user-1", "broken")

    def test_mask(self, store):
        assert store.mask("sk-abc123") == "••••c123"
