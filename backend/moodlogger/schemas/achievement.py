import uuid
from datetime import datetime

from pydantic import BaseModel


class AchievementResponse(BaseModel):
    id: uuid.UUID
    achievement_type: str
    label: str | None = None
    earned_at: datetime


class AchievementCheckResponse(BaseModel):
    awarded: list[str]
    achievements: list[AchievementResponse]
