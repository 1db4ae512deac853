"""Resource catalogs, the daily reflection prompt and the display profile."""
import uuid
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.api.deps import get_current_user_id, get_timezone
from moodlogger.db.session import get_db
from moodlogger.schemas.catalog import (
    CrisisResourceResponse,
    ProfileResponse,
    ReflectionPromptResponse,
    ResourceResponse,
)
from moodlogger.services.catalog import get_profile, list_crisis_resources, list_resources
from moodlogger.services.reflection_prompts import prompt_for_day

router = APIRouter()


@router.get("/resources", response_model=list[ResourceResponse])
async def get_resources(db: AsyncSession = Depends(get_db)):
    return await list_resources(db)


@router.get("/crisis-resources", response_model=list[CrisisResourceResponse])
async def get_crisis_resources(db: AsyncSession = Depends(get_db)):
    """Crisis lines, emergency services first."""
    return await list_crisis_resources(db)


@router.get("/reflections/today", response_model=ReflectionPromptResponse)
async def get_reflection_prompt(tz: ZoneInfo = Depends(get_timezone)):
    today = datetime.now(timezone.utc).astimezone(tz).date()
    return ReflectionPromptResponse(date=today.isoformat(), prompt=prompt_for_day(today))


@router.get("/profile", response_model=ProfileResponse)
async def get_my_profile(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    profile = await get_profile(db, user_id)
    if profile is None:
        return ProfileResponse()
    return ProfileResponse(full_name=profile.full_name, first_name=profile.first_name)
