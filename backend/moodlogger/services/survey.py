"""Survey responses and the personalization profile derived from them."""
import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.models._columns import utcnow
from moodlogger.models.profile import UserSurvey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersonalizationProfile:
    """Self-reported tags used to bias generated text."""

    conditions: tuple[str, ...] = ()
    interests: tuple[str, ...] = ()


def split_hobbies(text: str) -> list[str]:
    """Split comma separated hobbies, dropping blanks."""
    return [h.strip() for h in text.split(",") if h.strip()]


def normalize_conditions(selected: list[str], other_text: str | None = None) -> list[str]:
    """Replace "Other" with "Other: <text>" when free text is supplied."""
    conditions = list(selected)
    if "Other" in conditions and other_text and other_text.strip():
        conditions[conditions.index("Other")] = f"Other: {other_text.strip()}"
    return conditions


async def get_survey(db: AsyncSession, user_id: uuid.UUID) -> UserSurvey | None:
    result = await db.execute(select(UserSurvey).where(UserSurvey.user_id == user_id))
    return result.scalar_one_or_none()


async def save_survey(
    db: AsyncSession,
    user_id: uuid.UUID,
    conditions: list[str],
    hobbies: list[str],
) -> UserSurvey:
    """Create or replace the caller's survey responses."""
    survey = await get_survey(db, user_id)
    if survey is None:
        survey = UserSurvey(user_id=user_id)
        db.add(survey)
    survey.mental_health_conditions = conditions
    survey.hobbies_interests = hobbies
    survey.updated_at = utcnow()
    await db.flush()
    return survey


async def get_personalization_profile(
    db: AsyncSession, user_id: uuid.UUID
) -> PersonalizationProfile | None:
    """Look up the caller's profile. A failed lookup counts as no profile."""
    try:
        survey = await get_survey(db, user_id)
    except SQLAlchemyError as e:
        logger.warning(f"Survey lookup failed for user {user_id}: {e}")
        return None

    if survey is None:
        logger.info(f"No survey data found for user: {user_id}")
        return None

    return PersonalizationProfile(
        conditions=tuple(survey.mental_health_conditions or ()),
        interests=tuple(survey.hobbies_interests or ()),
    )
