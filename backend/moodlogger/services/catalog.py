"""Read-only catalogs and the user's display profile."""
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.models.catalog import CrisisResource, Resource
from moodlogger.models.profile import Profile


async def list_resources(db: AsyncSession) -> list[Resource]:
    result = await db.execute(select(Resource).order_by(Resource.category, Resource.title))
    return list(result.scalars().all())


async def list_crisis_resources(db: AsyncSession) -> list[CrisisResource]:
    """Emergency lines first."""
    result = await db.execute(
        select(CrisisResource).order_by(CrisisResource.is_emergency.desc(), CrisisResource.title)
    )
    return list(result.scalars().all())


async def get_profile(db: AsyncSession, user_id: uuid.UUID) -> Profile | None:
    return await db.get(Profile, user_id)
