"""Derived mood statistics.

Pure functions over timestamped mood records. Records are any objects with
``created_at`` (datetime) and ``mood_level`` (int) attributes, so ORM rows and
plain samples are interchangeable. Naive timestamps are treated as UTC.
"""
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import NamedTuple, Protocol

WEEK_DAYS = 7
MONTH_DAYS = 30
NO_BEST_DAY = "N/A"


class MoodRecord(Protocol):
    created_at: datetime
    mood_level: int


class MoodSample(NamedTuple):
    created_at: datetime
    mood_level: int


@dataclass
class MoodSummary:
    weekly_average: float
    monthly_average: float
    weekly_change: int
    best_day: str
    mood_counts: dict[int, int] = field(default_factory=dict)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero, the way dashboards display figures."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def ensure_aware(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def local_date(ts: datetime, tz: tzinfo = timezone.utc) -> date:
    """Calendar day of a timestamp in the given timezone."""
    return ensure_aware(ts).astimezone(tz).date()


def calculate_streak(
    timestamps: Iterable[datetime],
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> int:
    """Count consecutive calendar days with an entry, ending today.

    Today must have an entry for the streak to be nonzero. Several entries
    on the same day count once.
    """
    now = ensure_aware(now or datetime.now(timezone.utc))
    today = local_date(now, tz)
    days = {local_date(ts, tz) for ts in timestamps}

    streak = 0
    while today - timedelta(days=streak) in days:
        streak += 1
    return streak


def entries_in_window(
    entries: Iterable[MoodRecord],
    days: int,
    now: datetime | None = None,
    offset_days: int = 0,
) -> list[MoodRecord]:
    """Entries within ``days`` days ending ``offset_days`` days before now.

    The window is half-open: start inclusive, end exclusive (except for the
    trailing window, which includes everything up to now).
    """
    now = ensure_aware(now or datetime.now(timezone.utc))
    end = now - timedelta(days=offset_days)
    start = end - timedelta(days=days)
    selected = []
    for entry in entries:
        ts = ensure_aware(entry.created_at)
        if ts < start:
            continue
        if offset_days and ts >= end:
            continue
        if not offset_days and ts > end:
            continue
        selected.append(entry)
    return selected


def average_mood(entries: Sequence[MoodRecord]) -> float:
    """Arithmetic mean of mood levels; 0.0 for an empty window."""
    if not entries:
        return 0.0
    return sum(e.mood_level for e in entries) / len(entries)


def weekly_change(current_average: float, previous_average: float) -> float:
    """Percentage change between two averages.

    Zero when there is no previous average to compare against.
    """
    if previous_average <= 0:
        return 0.0
    return (current_average - previous_average) / previous_average * 100


def best_day_of_week(
    entries: Iterable[MoodRecord], tz: tzinfo = timezone.utc
) -> str:
    """Weekday name with the highest average mood.

    Ties go to the weekday encountered first.
    """
    day_moods: dict[str, list[int]] = {}
    for entry in entries:
        day = ensure_aware(entry.created_at).astimezone(tz).strftime("%A")
        day_moods.setdefault(day, []).append(entry.mood_level)

    best_day = NO_BEST_DAY
    best_avg = 0.0
    for day, moods in day_moods.items():
        avg = sum(moods) / len(moods)
        if avg > best_avg:
            best_avg = avg
            best_day = day
    return best_day


def mood_counts(entries: Iterable[MoodRecord]) -> dict[int, int]:
    counts = {level: 0 for level in range(1, 6)}
    for entry in entries:
        counts[entry.mood_level] = counts.get(entry.mood_level, 0) + 1
    return counts


def summarize_moods(
    entries: Sequence[MoodRecord],
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> MoodSummary:
    """Dashboard summary over the trailing month of entries."""
    now = ensure_aware(now or datetime.now(timezone.utc))
    this_week = entries_in_window(entries, WEEK_DAYS, now)
    last_week = entries_in_window(entries, WEEK_DAYS, now, offset_days=WEEK_DAYS)
    this_month = entries_in_window(entries, MONTH_DAYS, now)

    weekly_avg = average_mood(this_week)
    last_week_avg = average_mood(last_week)

    return MoodSummary(
        weekly_average=round_half_up(weekly_avg, 1),
        monthly_average=round_half_up(average_mood(this_month), 1),
        weekly_change=int(round_half_up(weekly_change(weekly_avg, last_week_avg))),
        best_day=best_day_of_week(this_week, tz),
        mood_counts=mood_counts(this_month),
    )
