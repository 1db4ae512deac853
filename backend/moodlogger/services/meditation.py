"""Meditation sessions and post-session reflections."""
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.models.meditation import MeditationReflection, MeditationSession, MeditationType
from moodlogger.services.records import get_owned
from moodlogger.services.timeframes import utc

MEDITATION_CONTENT = {
    MeditationType.GUIDED: {
        "title": "Guided Meditation",
        "description": "Follow along with a calming voice guiding your meditation practice",
        "text": (
            "Close your eyes and take a deep breath in... Hold it for a moment... Now slowly exhale.\n\n"
            "Feel your body relaxing with each breath. Let go of any tension in your shoulders, your jaw, your hands.\n\n"
            "Bring your attention to the present moment. Notice the sounds around you, the sensation of your breath, the feeling of peace.\n\n"
            "Stay here for a few moments, breathing naturally and feeling calm.\n\n"
            "When you're ready, slowly open your eyes and notice how you feel."
        ),
    },
    MeditationType.NATURE: {
        "title": "Nature Sounds",
        "description": "Immerse yourself in peaceful nature sounds",
        "text": None,
    },
    MeditationType.CALMING: {
        "title": "Calming Music",
        "description": "Relax with gentle, soothing melodies",
        "text": None,
    },
    MeditationType.BREATHING: {
        "title": "Breathing Exercises",
        "description": "Practice mindful breathing techniques",
        "text": (
            "Box Breathing Exercise:\n\n"
            "1. Breathe in slowly through your nose for 4 counts\n"
            "2. Hold your breath for 4 counts\n"
            "3. Exhale slowly through your mouth for 4 counts\n"
            "4. Hold your breath for 4 counts\n\n"
            "Repeat this cycle 4-5 times.\n\n"
            "Feel your body and mind becoming calmer with each cycle.\n\n"
            "Notice how your heart rate slows and your muscles relax."
        ),
    },
}


async def start_session(
    db: AsyncSession, user_id: uuid.UUID, meditation_type: MeditationType
) -> MeditationSession:
    session = MeditationSession(user_id=user_id, meditation_type=meditation_type)
    db.add(session)
    await db.flush()
    return session


async def complete_session(
    db: AsyncSession,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    duration_minutes: int | None = None,
    now: datetime | None = None,
) -> MeditationSession:
    """Record the session length, measured from its start when not given."""
    session = await get_owned(db, MeditationSession, session_id, user_id)
    if duration_minutes is None:
        elapsed = utc(now or datetime.now(timezone.utc)) - utc(session.created_at)
        duration_minutes = max(round(elapsed.total_seconds() / 60), 0)
    session.duration_minutes = duration_minutes
    await db.flush()
    return session


async def add_reflection(
    db: AsyncSession,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    mood_before: int,
    mood_after: int,
    notes: str | None = None,
) -> MeditationReflection:
    await get_owned(db, MeditationSession, session_id, user_id)
    reflection = MeditationReflection(
        user_id=user_id,
        session_id=session_id,
        mood_before=mood_before,
        mood_after=mood_after,
        notes=notes or None,
    )
    db.add(reflection)
    await db.flush()
    return reflection
