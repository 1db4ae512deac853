"""Milestone achievements awarded from mood logging history."""
import logging
import uuid
from datetime import datetime, timezone, tzinfo

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.models._columns import utcnow
from moodlogger.models.mood import Achievement
from moodlogger.services.mood_stats import calculate_streak
from moodlogger.services.moods import recent_entry_times

logger = logging.getLogger(__name__)

# Dialect inserts that support ON CONFLICT DO NOTHING
UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}

ACHIEVEMENT_LABELS = {
    "first_entry": "First Entry",
    "7_day_streak": "7-Day Streak",
    "30_day_streak": "30-Day Streak",
    "first_month": "First Month",
    "mood_warrior": "Mood Warrior",
    "consistent": "Consistency King",
}


def evaluate_achievements(entry_count: int, streak: int) -> list[str]:
    """Achievement types earned for the given history."""
    earned = []
    if entry_count >= 1:
        earned.append("first_entry")
    if entry_count >= 30:
        earned.append("first_month")
    if entry_count >= 50:
        earned.append("mood_warrior")
    if streak >= 7:
        earned.append("7_day_streak")
    if streak >= 30:
        earned.append("30_day_streak")
    return earned


async def list_achievements(db: AsyncSession, user_id: uuid.UUID) -> list[Achievement]:
    result = await db.execute(
        select(Achievement)
        .where(Achievement.user_id == user_id)
        .order_by(Achievement.earned_at.desc())
    )
    return list(result.scalars().all())


async def awarded_types(db: AsyncSession, user_id: uuid.UUID) -> set[str]:
    result = await db.execute(
        select(Achievement.achievement_type).where(Achievement.user_id == user_id)
    )
    return set(result.scalars().all())


async def award_achievement(
    db: AsyncSession, user_id: uuid.UUID, achievement_type: str
) -> bool:
    """Insert one achievement unless the user already holds it.

    Returns True only when this call created the row, so concurrent checks
    for the same user never collide on the (user, type) constraint.
    """
    insert = UPSERT_INSERTS[db.get_bind().dialect.name]
    stmt = (
        insert(Achievement)
        .values(
            id=uuid.uuid4(),
            user_id=user_id,
            achievement_type=achievement_type,
            earned_at=utcnow(),
        )
        .on_conflict_do_nothing(index_elements=["user_id", "achievement_type"])
    )
    result = await db.execute(stmt)
    return result.rowcount == 1


async def check_and_award(
    db: AsyncSession,
    user_id: uuid.UUID,
    tz: tzinfo = timezone.utc,
    now: datetime | None = None,
) -> list[str]:
    """Award every newly earned achievement. Returns the new types."""
    entry_times = await recent_entry_times(db, user_id, limit=None)
    streak = calculate_streak(entry_times, now=now, tz=tz)
    earned = evaluate_achievements(len(entry_times), streak)

    existing = await awarded_types(db, user_id)
    awarded = []
    for achievement_type in earned:
        if achievement_type in existing:
            continue
        if await award_achievement(db, user_id, achievement_type):
            awarded.append(achievement_type)

    if awarded:
        logger.info(f"Achievements awarded: user={user_id}, types={awarded}")
    return awarded
