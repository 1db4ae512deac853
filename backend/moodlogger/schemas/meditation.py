import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from moodlogger.models.meditation import MeditationType


class MeditationStartRequest(BaseModel):
    meditation_type: MeditationType = MeditationType.GUIDED


class MeditationSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    meditation_type: MeditationType
    duration_minutes: int | None = None
    created_at: datetime


class MeditationStartResponse(BaseModel):
    session: MeditationSessionResponse
    title: str
    description: str
    text: str | None = None


class MeditationCompleteRequest(BaseModel):
    duration_minutes: int | None = Field(None, ge=0, le=24 * 60)


class ReflectionCreateRequest(BaseModel):
    mood_before: int = Field(5, ge=1, le=10)
    mood_after: int = Field(5, ge=1, le=10)
    notes: str | None = Field(None, max_length=5000)


class ReflectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    session_id: uuid.UUID
    mood_before: int
    mood_after: int
    notes: str | None = None
    created_at: datetime
