"""Mood entries: logging, day-scoped lookups and history windows."""
import logging
import uuid
from datetime import datetime, timedelta, timezone, tzinfo

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.models.mood import MoodEntry
from moodlogger.services.timeframes import day_bounds, utc

logger = logging.getLogger(__name__)

STREAK_LOOKBACK = 30


class MoodAlreadyLogged(Exception):
    """Raised when the user has already logged a mood today."""

    def __init__(self, entry: MoodEntry):
        self.entry = entry
        self.message = "You've already logged your mood today! Come back tomorrow."
        super().__init__(self.message)


async def get_today_entry(
    db: AsyncSession,
    user_id: uuid.UUID,
    tz: tzinfo,
    now: datetime | None = None,
) -> MoodEntry | None:
    start, end = day_bounds(now or datetime.now(timezone.utc), tz)
    result = await db.execute(
        select(MoodEntry)
        .where(
            MoodEntry.user_id == user_id,
            MoodEntry.created_at >= start,
            MoodEntry.created_at < end,
        )
        .order_by(MoodEntry.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def log_mood(
    db: AsyncSession,
    user_id: uuid.UUID,
    mood_level: int,
    note: str | None,
    activity_tags: list[str],
    tz: tzinfo,
    now: datetime | None = None,
) -> MoodEntry:
    """Record today's mood. One entry per calendar day."""
    existing = await get_today_entry(db, user_id, tz, now)
    if existing is not None:
        raise MoodAlreadyLogged(existing)

    entry = MoodEntry(
        user_id=user_id,
        mood_level=mood_level,
        note=(note or "").strip() or None,
        activity_tags=list(activity_tags),
    )
    if now is not None:
        entry.created_at = utc(now)
    db.add(entry)
    await db.flush()
    logger.info(f"Mood logged: user={user_id}, level={mood_level}")
    return entry


async def entries_since(
    db: AsyncSession,
    user_id: uuid.UUID,
    days: int,
    now: datetime | None = None,
) -> list[MoodEntry]:
    """Entries in the trailing ``days`` days, oldest first."""
    since = utc(now or datetime.now(timezone.utc)) - timedelta(days=days)
    result = await db.execute(
        select(MoodEntry)
        .where(MoodEntry.user_id == user_id, MoodEntry.created_at >= since)
        .order_by(MoodEntry.created_at.asc())
    )
    return list(result.scalars().all())


async def recent_entry_times(
    db: AsyncSession, user_id: uuid.UUID, limit: int | None = STREAK_LOOKBACK
) -> list[datetime]:
    """Timestamps of the most recent entries, newest first."""
    query = (
        select(MoodEntry.created_at)
        .where(MoodEntry.user_id == user_id)
        .order_by(MoodEntry.created_at.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def count_entries(db: AsyncSession, user_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count()).select_from(MoodEntry).where(MoodEntry.user_id == user_id)
    )
    return result.scalar_one()
