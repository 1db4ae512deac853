import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ActivityTag = Literal["Study", "Social", "Exercise", "Sleep", "Hobbies", "Work"]


class MoodCreateRequest(BaseModel):
    mood_level: int = Field(..., ge=1, le=5)
    note: str | None = Field(None, max_length=5000)
    activity_tags: list[ActivityTag] = Field(default_factory=list)


class MoodEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    mood_level: int
    note: str | None = None
    activity_tags: list[str] = Field(default_factory=list)
    created_at: datetime


class MoodLogResponse(BaseModel):
    entry: MoodEntryResponse
    label: str
    tip: str


class MoodHistoryPoint(BaseModel):
    date: str
    mood: int
    full_date: datetime


class MoodSummaryResponse(BaseModel):
    weekly_average: float
    monthly_average: float
    weekly_change: int
    best_day: str
    mood_counts: dict[int, int]


class StreakResponse(BaseModel):
    streak: int
