"""Daily journal: one entry per calendar day, edited in place."""
import uuid
from datetime import datetime, timezone, tzinfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.models.journal import JournalEntry
from moodlogger.services.timeframes import day_bounds, utc


class EmptyJournalEntry(Exception):
    def __init__(self, message: str = "Journal entry cannot be empty"):
        self.message = message
        super().__init__(self.message)


async def get_today_entry(
    db: AsyncSession,
    user_id: uuid.UUID,
    tz: tzinfo,
    now: datetime | None = None,
) -> JournalEntry | None:
    start, end = day_bounds(now or datetime.now(timezone.utc), tz)
    result = await db.execute(
        select(JournalEntry)
        .where(
            JournalEntry.user_id == user_id,
            JournalEntry.created_at >= start,
            JournalEntry.created_at < end,
        )
        .order_by(JournalEntry.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def save_today_entry(
    db: AsyncSession,
    user_id: uuid.UUID,
    content: str,
    tz: tzinfo,
    now: datetime | None = None,
) -> JournalEntry:
    """Update today's entry, or start one if none exists yet."""
    if not content.strip():
        raise EmptyJournalEntry()

    entry = await get_today_entry(db, user_id, tz, now)
    if entry is None:
        entry = JournalEntry(user_id=user_id, content=content)
        if now is not None:
            entry.created_at = entry.updated_at = utc(now)
        db.add(entry)
    else:
        entry.content = content
        entry.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return entry
