from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Condition = Literal[
    "Depression",
    "Anxiety",
    "Stress",
    "Breakup/Relationship Issues",
    "Academic Pressure",
    "Family Issues",
    "Social Anxiety",
    "Sleep Issues",
    "Other",
]


class SurveySaveRequest(BaseModel):
    conditions: list[Condition] = Field(default_factory=list)
    other_text: str | None = Field(None, max_length=500)
    hobbies: str = Field("", max_length=2000, description="Comma separated hobbies")


class SurveyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mental_health_conditions: list[str]
    hobbies_interests: list[str]
    updated_at: datetime
