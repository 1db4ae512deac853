"""Calendar-day boundaries in a caller's timezone."""
from datetime import datetime, time, timedelta, timezone, tzinfo


def day_bounds(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """UTC start and end of the calendar day containing ``now`` in ``tz``."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local_day = now.astimezone(tz).date()
    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)
