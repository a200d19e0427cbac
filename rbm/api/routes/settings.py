"""User settings routes"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rbm.core.auth import get_current_user
from rbm.core.database import get_db
from rbm.schemas.settings import SettingsResponse, SettingsUpdate
from rbm.services.settings import load_settings, save_settings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsResponse)
async def get_settings(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Effective settings: defaults merged with the user's stored overrides"""
    document, updated_at = await load_settings(db, current_user["user_id"])
    return SettingsResponse(
        settings=document,
        updated_at=updated_at.isoformat() if updated_at else None,
    )


@router.put("", response_model=SettingsResponse)
async def update_settings(
    body: SettingsUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    row = await save_settings(db, current_user["user_id"], body.settings)
    return SettingsResponse(
        settings=body.settings,
        updated_at=row.updated_at.isoformat() if row.updated_at else None,
    )
