import uuid

from pydantic import BaseModel, ConfigDict


class ResourceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    category: str
    url: str | None = None
    icon: str


class CrisisResourceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    phone: str | None = None
    url: str | None = None
    available_hours: str | None = None
    category: str
    is_emergency: bool


class ProfileResponse(BaseModel):
    full_name: str | None = None
    first_name: str | None = None


class ReflectionPromptResponse(BaseModel):
    date: str
    prompt: str
