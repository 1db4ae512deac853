import enum
import uuid
from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from moodlogger.db.session import Base
from moodlogger.models._columns import created_at, user_fk, uuid_pk


class MeditationType(str, enum.Enum):
    GUIDED = "guided"
    NATURE = "nature"
    CALMING = "calming"
    BREATHING = "breathing"


class MeditationSession(Base):
    __tablename__ = "meditation_sessions"

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = user_fk()
    meditation_type: Mapped[MeditationType] = mapped_column(
        Enum(MeditationType, values_callable=lambda e: [x.value for x in e]),
        nullable=False,
    )
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = created_at()


class MeditationReflection(Base):
    __tablename__ = "meditation_reflections"

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = user_fk()
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("meditation_sessions.id"), index=True, nullable=False
    )
    mood_before: Mapped[int] = mapped_column(Integer, nullable=False)
    mood_after: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = created_at()
