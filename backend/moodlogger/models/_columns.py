import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def uuid_pk():
    return mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


def user_fk():
    return mapped_column(Uuid, index=True, nullable=False)


def created_at():
    return mapped_column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)
