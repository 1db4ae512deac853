"""Therapy chat sessions and their persisted transcripts."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.models.therapy import TherapyMessage, TherapySession
from moodlogger.services.records import get_owned


async def start_session(db: AsyncSession, user_id: uuid.UUID) -> TherapySession:
    session = TherapySession(user_id=user_id)
    db.add(session)
    await db.flush()
    return session


async def add_exchange(
    db: AsyncSession,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    user_content: str,
    assistant_content: str,
) -> list[TherapyMessage]:
    """Append one completed user/assistant exchange to the transcript."""
    await get_owned(db, TherapySession, session_id, user_id)
    now = datetime.now(timezone.utc)
    messages = [
        TherapyMessage(
            user_id=user_id, session_id=session_id, role="user",
            content=user_content, created_at=now,
        ),
        TherapyMessage(
            user_id=user_id, session_id=session_id, role="assistant",
            content=assistant_content, created_at=now,
        ),
    ]
    db.add_all(messages)
    await db.flush()
    return messages


async def list_messages(
    db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID
) -> list[TherapyMessage]:
    await get_owned(db, TherapySession, session_id, user_id)
    result = await db.execute(
        select(TherapyMessage)
        .where(TherapyMessage.session_id == session_id)
        .order_by(TherapyMessage.created_at.asc(), TherapyMessage.role.desc())
    )
    return list(result.scalars().all())


async def end_session(
    db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID
) -> TherapySession:
    session = await get_owned(db, TherapySession, session_id, user_id)
    session.ended_at = datetime.now(timezone.utc)
    await db.flush()
    return session
