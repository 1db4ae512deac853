"""Mood logging, history and derived statistics."""
import logging
import uuid
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.api.deps import get_current_user_id, get_timezone
from moodlogger.db.session import get_db
from moodlogger.schemas.mood import (
    MoodCreateRequest,
    MoodEntryResponse,
    MoodHistoryPoint,
    MoodLogResponse,
    MoodSummaryResponse,
    StreakResponse,
)
from moodlogger.services import moods
from moodlogger.services.chart_generator import format_chart_label, generate_mood_history_chart
from moodlogger.services.mood_stats import MONTH_DAYS, calculate_streak, summarize_moods
from moodlogger.services.mood_tips import MOOD_LABELS, MOOD_TIPS

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=MoodLogResponse, status_code=201)
async def log_mood(
    request: MoodCreateRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    """Log today's mood. Only one entry per calendar day."""
    try:
        entry = await moods.log_mood(
            db, user_id, request.mood_level, request.note, request.activity_tags, tz
        )
    except moods.MoodAlreadyLogged as e:
        return JSONResponse(
            status_code=409,
            content={
                "error": e.message,
                "entry": MoodEntryResponse.model_validate(e.entry).model_dump(mode="json"),
            },
        )

    return MoodLogResponse(
        entry=MoodEntryResponse.model_validate(entry),
        label=MOOD_LABELS[entry.mood_level],
        tip=MOOD_TIPS[entry.mood_level],
    )


@router.get("/today", response_model=MoodEntryResponse)
async def get_today_mood(
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    entry = await moods.get_today_entry(db, user_id, tz)
    if entry is None:
        return JSONResponse(status_code=404, content={"error": "No mood logged today."})
    return entry


@router.get("/history", response_model=list[MoodHistoryPoint])
async def get_mood_history(
    days: int = Query(MONTH_DAYS, ge=1, le=365),
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    """Mood series for the trailing window, oldest first."""
    entries = await moods.entries_since(db, user_id, days)
    return [
        MoodHistoryPoint(
            date=format_chart_label(e, tz),
            mood=e.mood_level,
            full_date=e.created_at,
        )
        for e in entries
    ]


@router.get("/history/chart")
async def get_mood_history_chart(
    days: int = Query(MONTH_DAYS, ge=1, le=365),
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    """Mood series rendered as a PNG line chart."""
    entries = await moods.entries_since(db, user_id, days)
    png = await run_in_threadpool(generate_mood_history_chart, entries, tz)
    return Response(content=png, media_type="image/png")


@router.get("/summary", response_model=MoodSummaryResponse)
async def get_mood_summary(
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    now = datetime.now(timezone.utc)
    entries = await moods.entries_since(db, user_id, MONTH_DAYS, now=now)
    summary = summarize_moods(entries, now=now, tz=tz)
    return MoodSummaryResponse(
        weekly_average=summary.weekly_average,
        monthly_average=summary.monthly_average,
        weekly_change=summary.weekly_change,
        best_day=summary.best_day,
        mood_counts=summary.mood_counts,
    )


@router.get("/streak", response_model=StreakResponse)
async def get_streak(
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    entry_times = await moods.recent_entry_times(db, user_id)
    return StreakResponse(streak=calculate_streak(entry_times, tz=tz))
