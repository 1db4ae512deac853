"""Lookup helpers shared by the store services."""
import uuid
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.db.session import Base

ModelT = TypeVar("ModelT", bound=Base)


class RecordNotFound(Exception):
    """Raised when a row is missing or owned by another user."""

    def __init__(self, message: str = "Record not found."):
        self.message = message
        super().__init__(self.message)


async def get_owned(
    db: AsyncSession, model: type[ModelT], record_id: uuid.UUID, user_id: uuid.UUID
) -> ModelT:
    record = await db.get(model, record_id)
    if record is None or record.user_id != user_id:
        raise RecordNotFound(f"{model.__name__} not found.")
    return record
