import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ConversationMessage(BaseModel):
    """A single message in the visible transcript."""

    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1, max_length=5000)


class ConversationRequest(BaseModel):
    """Full transcript plus the new user turn, oldest first."""

    messages: list[ConversationMessage] = Field(..., min_length=1, max_length=50)


class PersonalizedConversationRequest(ConversationRequest):
    model_config = ConfigDict(populate_by_name=True)

    user_id: uuid.UUID = Field(..., alias="userId")


class MoodInsightRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mood_level: int = Field(..., ge=1, le=5, alias="moodLevel")
    note: str | None = Field(None, max_length=5000)


class MoodInsightResponse(BaseModel):
    insight: str
