"""Meditation session tracking."""
import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.api.deps import get_current_user_id
from moodlogger.db.session import get_db
from moodlogger.schemas.meditation import (
    MeditationCompleteRequest,
    MeditationSessionResponse,
    MeditationStartRequest,
    MeditationStartResponse,
    ReflectionCreateRequest,
    ReflectionResponse,
)
from moodlogger.services import meditation
from moodlogger.services.records import RecordNotFound

router = APIRouter()


@router.post("/sessions", response_model=MeditationStartResponse, status_code=201)
async def start_meditation(
    request: MeditationStartRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    session = await meditation.start_session(db, user_id, request.meditation_type)
    content = meditation.MEDITATION_CONTENT[request.meditation_type]
    return MeditationStartResponse(
        session=MeditationSessionResponse.model_validate(session),
        **content,
    )


@router.post("/sessions/{session_id}/complete", response_model=MeditationSessionResponse)
async def complete_meditation(
    session_id: uuid.UUID,
    request: MeditationCompleteRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await meditation.complete_session(
            db, user_id, session_id, request.duration_minutes
        )
    except RecordNotFound as e:
        return JSONResponse(status_code=404, content={"error": e.message})


@router.post(
    "/sessions/{session_id}/reflection",
    response_model=ReflectionResponse,
    status_code=201,
)
async def add_meditation_reflection(
    session_id: uuid.UUID,
    request: ReflectionCreateRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await meditation.add_reflection(
            db, user_id, session_id,
            request.mood_before, request.mood_after, request.notes,
        )
    except RecordNotFound as e:
        return JSONResponse(status_code=404, content={"error": e.message})
