"""Daily journal endpoints."""
import uuid
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.api.deps import get_current_user_id, get_timezone
from moodlogger.db.session import get_db
from moodlogger.schemas.journal import JournalEntryResponse, JournalSaveRequest
from moodlogger.services import journal

router = APIRouter()


@router.get("/today", response_model=JournalEntryResponse)
async def get_today_journal(
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    entry = await journal.get_today_entry(db, user_id, tz)
    if entry is None:
        return JSONResponse(status_code=404, content={"error": "No journal entry today."})
    return entry


@router.put("/today", response_model=JournalEntryResponse)
async def save_today_journal(
    request: JournalSaveRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    tz: ZoneInfo = Depends(get_timezone),
    db: AsyncSession = Depends(get_db),
):
    """Create today's entry or overwrite its content."""
    try:
        return await journal.save_today_entry(db, user_id, request.content, tz)
    except journal.EmptyJournalEntry as e:
        return JSONResponse(status_code=400, content={"error": e.message})
