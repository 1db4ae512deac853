"""Therapy session bookkeeping; the conversation itself goes through /chat/therapy."""
import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.api.deps import get_current_user_id
from moodlogger.db.session import get_db
from moodlogger.schemas.therapy import (
    TherapyExchangeRequest,
    TherapyMessageResponse,
    TherapySessionResponse,
)
from moodlogger.services import therapy
from moodlogger.services.records import RecordNotFound

router = APIRouter()


@router.post("/sessions", response_model=TherapySessionResponse, status_code=201)
async def start_therapy_session(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await therapy.start_session(db, user_id)


@router.post(
    "/sessions/{session_id}/messages",
    response_model=list[TherapyMessageResponse],
    status_code=201,
)
async def save_therapy_exchange(
    session_id: uuid.UUID,
    request: TherapyExchangeRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Persist a finished user/assistant exchange."""
    try:
        return await therapy.add_exchange(
            db, user_id, session_id, request.user_content, request.assistant_content
        )
    except RecordNotFound as e:
        return JSONResponse(status_code=404, content={"error": e.message})


@router.get("/sessions/{session_id}/messages", response_model=list[TherapyMessageResponse])
async def get_therapy_messages(
    session_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await therapy.list_messages(db, user_id, session_id)
    except RecordNotFound as e:
        return JSONResponse(status_code=404, content={"error": e.message})


@router.post("/sessions/{session_id}/end", response_model=TherapySessionResponse)
async def end_therapy_session(
    session_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await therapy.end_session(db, user_id, session_id)
    except RecordNotFound as e:
        return JSONResponse(status_code=404, content={"error": e.message})
