"""Database utility functions"""
from typing import Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rbm.exceptions import NotFoundOrForbidden

T = TypeVar("T")


async def get_owned_or_404(
    db: AsyncSession,
    model: Type[T],
    entity_id: UUID,
    user_id: str,
    entity_name: Optional[str] = None,
) -> T:
    """
    Fetch an entity owned by ``user_id`` or raise a 404.

    A row that exists but belongs to someone else is reported exactly like
    a missing row.

    Example:
        website = await get_owned_or_404(db, Website, website_id, user_id, "Website")
    """
    entity = await db.get(model, entity_id)
    if entity is None or getattr(entity, "user_id", None) != user_id:
        name = entity_name or model.__name__
        raise NotFoundOrForbidden(f"{name} not found or access denied")
    return entity
