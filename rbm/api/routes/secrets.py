"""Per-user secret vault routes"""
from fastapi import APIRouter, Depends

from rbm.core.auth import get_current_user
from rbm.core.security.encryption import SecretVault
from rbm.api.dependencies import get_secret_store
from rbm.exceptions import NotFoundOrForbidden
from rbm.schemas.secrets import (
    SecretListResponse,
    SecretLookup,
    SecretLookupResponse,
    SecretMetadata,
    SecretSet,
)
from rbm.services.secrets import SecretStore

router = APIRouter(prefix="/secrets", tags=["secrets"])


@router.post("")
async def set_secret(
    body: SecretSet,
    store: SecretStore = Depends(get_secret_store),
    current_user: dict = Depends(get_current_user),
):
    """
    Encrypt and store a secret for the current user.

    The plaintext is never echoed back or logged.
    """
    await store.set(current_user["user_id"], body.key, body.value)
    return {"ok": True}


@router.post("/get", response_model=SecretLookupResponse)
async def get_secret(
    body: SecretLookup,
    store: SecretStore = Depends(get_secret_store),
    current_user: dict = Depends(get_current_user),
):
    """Return masked metadata for a stored secret"""
    value = await store.get(current_user["user_id"], body.key)
    return SecretLookupResponse(
        found=value is not None,
        metadata=SecretMetadata(**SecretVault.metadata(value)),
        masked=SecretVault.mask(value),
    )


@router.get("", response_model=SecretListResponse)
async def list_secrets(
    store: SecretStore = Depends(get_secret_store),
    current_user: dict = Depends(get_current_user),
):
    keys = await store.list_keys(current_user["user_id"])
    return SecretListResponse(keys=keys, count=len(keys))


@router.delete("/{key}")
async def delete_secret(
    key: str,
    store: SecretStore = Depends(get_secret_store),
    current_user: dict = Depends(get_current_user),
):
    deleted = await store.delete(current_user["user_id"], key.strip())
    if not deleted:
        raise NotFoundOrForbidden("Secret not found or access denied")
    return {"ok": True}
