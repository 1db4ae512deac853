import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from moodlogger.db.session import Base
from moodlogger.models._columns import created_at, utcnow, uuid_pk


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = created_at()

    @property
    def first_name(self) -> str | None:
        if not self.full_name or not self.full_name.strip():
            return None
        return self.full_name.strip().split(" ")[0]


class UserSurvey(Base):
    """Self-reported conditions and interests used to personalize chat."""

    __tablename__ = "user_survey"

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, unique=True, index=True, nullable=False)
    mental_health_conditions: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    hobbies_interests: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = created_at()
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<UserSurvey(user_id={self.user_id})>"
