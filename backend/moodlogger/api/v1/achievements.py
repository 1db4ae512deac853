import uuid
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.api.deps import get_current_user_id, get_timezone
from moodlogger.db.session import get_db
from moodlogger.models.mood import Achievement
from moodlogger.schemas.achievement import AchievementCheckResponse, AchievementResponse
from moodlogger.services.achievements import ACHIEVEMENT_LABELS, check_and_award, list_achievements

router = APIRouter()


def _to_response(achievement: Achievement) -> AchievementResponse:
    return AchievementResponse(
        id=achievement.id,
        achievement_type=achievement.achievement_type,
        label=ACHIEVEMENT_LABELS.get(achievement.achievement_type),
        earned_at=achievement.earned_at,
    )


@router.get("", response_model=list[AchievementResponse])
async def get_achievements(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Earned achievements, newest first."""
    return [_to_response(a) for a in await list_achievements(db, user_id)]


@router.post("/check", response_model=AchievementCheckResponse)
async def check_achievements(
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    """Award anything newly earned, then return the full list."""
    awarded = await check_and_award(db, user_id, tz=tz)
    achievements = await list_achievements(db, user_id)
    return AchievementCheckResponse(
        awarded=awarded,
        achievements=[_to_response(a) for a in achievements],
    )
