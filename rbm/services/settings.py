"""User settings: immutable defaults merged with stored overrides"""
import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from rbm.db.models import UserSettings
from rbm.schemas.settings import SettingsDocument, SettingsOverrides

logger = logging.getLogger(__name__)


def default_settings() -> SettingsDocument:
    """A fresh default settings document"""
    return SettingsDocument()


def merge_settings(overrides: Optional[SettingsOverrides]) -> SettingsDocument:
    """
    Merge stored overrides onto defaults without mutating either.

    Nested objects merge key by key; lists are replaced wholesale.
    """
    base = default_settings()
    if overrides is None:
        return base

    data = overrides.model_dump(exclude_unset=True, exclude_none=True)
    merged: Dict[str, Any] = base.model_dump()
    for section in ("modules", "providers", "integrations"):
        if section in data:
            merged[section] = {**merged[section], **data[section]}
    if "custom" in data.get("api_keys", {}):
        merged["api_keys"] = {"custom": data["api_keys"]["custom"]}
    if "servers" in data.get("mcp", {}):
        merged["mcp"] = {"servers": data["mcp"]["servers"]}
    for key, value in (overrides.model_extra or {}).items():
        merged[key] = value
    return SettingsDocument.model_validate(merged)


def parse_stored_settings(raw: Optional[Mapping[str, Any]]) -> SettingsDocument:
    """Validate a stored settings blob; unreadable data falls back to defaults"""
    try:
        overrides = SettingsOverrides.model_validate(raw or {})
    except PydanticValidationError:
        logger.warning("Stored settings failed validation, using defaults")
        overrides = None
    return merge_settings(overrides)


async def load_settings(db: AsyncSession, user_id: str) -> tuple:
    """
    Load a user's effective settings.

    Returns:
        Tuple of (SettingsDocument, updated_at or None)
    """
    row = await db.get(UserSettings, user_id)
    if row is None:
        return default_settings(), None
    return parse_stored_settings(row.settings), row.updated_at


async def save_settings(db: AsyncSession, user_id: str, document: SettingsDocument) -> UserSettings:
    """Replace a user's stored settings"""
    row = await db.get(UserSettings, user_id)
    payload = document.model_dump()
    if row is None:
        row = UserSettings(user_id=user_id, settings=payload)
        db.add(row)
    else:
        row.settings = payload
    await db.commit()
    await db.refresh(row)
    return row
