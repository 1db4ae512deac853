import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class JournalSaveRequest(BaseModel):
    content: str = Field(..., max_length=20000)


class JournalEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    content: str
    created_at: datetime
    updated_at: datetime
