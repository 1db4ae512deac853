import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TherapySessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    started_at: datetime
    ended_at: datetime | None = None


class TherapyExchangeRequest(BaseModel):
    """A completed turn: the user's message and the full assistant reply."""

    user_content: str = Field(..., min_length=1, max_length=5000)
    assistant_content: str = Field(..., min_length=1)


class TherapyMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    role: str
    content: str
    created_at: datetime
