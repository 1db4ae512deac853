"""Chat proxy: forwards a conversation to the LLM gateway.

One configurable handler backs all three chat features:

- ``therapy_chat``: relays the upstream event stream, fixed persona.
- ``mood_chat``: relays the upstream event stream, persona personalized from
  the caller's survey responses.
- ``mood_insights``: single-shot completion returned as one string.
"""
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from moodlogger.services.gateway import GatewayClient
from moodlogger.services.survey import PersonalizationProfile, get_personalization_profile

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

CONDITIONS_CLAUSE = (
    "The user has shared these mental health experiences: {tags}. "
    "Be sensitive to these experiences when providing support."
)
INTERESTS_CLAUSE = (
    "The user enjoys these activities: {tags}. When appropriate, suggest these "
    "or similar activities to help improve their mood."
)
NO_PROFILE_CLAUSE = (
    "The user hasn't shared their interests yet. If appropriate, gently ask what "
    "activities or hobbies they enjoy, as this can help you provide better "
    "personalized suggestions."
)

MOOD_DESCRIPTIONS = ("very sad", "sad", "okay", "good", "great")
INSIGHT_FALLBACK = "Keep going! You're doing great."

ProfileLookup = Callable[[AsyncSession, uuid.UUID], Awaitable[PersonalizationProfile | None]]


@lru_cache
def load_prompt(name: str) -> str:
    """Load a base persona prompt by file stem."""
    prompt_path = PROMPTS_DIR / f"{name}.txt"
    return prompt_path.read_text(encoding="utf-8").strip()


def therapy_prompt(profile: PersonalizationProfile | None = None) -> str:
    return load_prompt("therapy_chat")


def insight_prompt(profile: PersonalizationProfile | None = None) -> str:
    return load_prompt("mood_insight")


def personalized_mood_prompt(profile: PersonalizationProfile | None) -> str:
    """Mood support persona plus clauses drawn from the caller's profile."""
    prompt = load_prompt("mood_chat")

    if profile is None:
        return f"{prompt}\n\n{NO_PROFILE_CLAUSE}"

    if profile.conditions:
        prompt += "\n\n" + CONDITIONS_CLAUSE.format(tags=", ".join(profile.conditions))
    if profile.interests:
        prompt += "\n\n" + INTERESTS_CLAUSE.format(tags=", ".join(profile.interests))
    return prompt


def build_insight_messages(mood_level: int, note: str | None = None) -> list[dict]:
    """Single user turn describing the logged mood."""
    description = MOOD_DESCRIPTIONS[mood_level - 1]
    content = f"The user is feeling {description} ({mood_level}/5)."
    if note:
        content += f'\nThey wrote: "{note}"'
    content += "\n\nProvide supportive insights and suggestions."
    return [{"role": "user", "content": content}]


def extract_message_content(data: dict) -> str | None:
    """Generated text of a non-streaming completion, if present."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content or None


@dataclass(frozen=True)
class ChatProxy:
    name: str
    build_system_prompt: Callable[[PersonalizationProfile | None], str]
    streaming: bool = True
    personalization: ProfileLookup | None = None
    fallback: str = ""

    async def system_prompt(
        self, db: AsyncSession | None = None, user_id: uuid.UUID | None = None
    ) -> str:
        profile = None
        if self.personalization is not None and db is not None and user_id is not None:
            profile = await self.personalization(db, user_id)
        return self.build_system_prompt(profile)

    async def _payload(
        self,
        messages: list[dict],
        db: AsyncSession | None,
        user_id: uuid.UUID | None,
    ) -> list[dict]:
        system_prompt = await self.system_prompt(db, user_id)
        return [{"role": "system", "content": system_prompt}, *messages]

    async def relay(
        self,
        gateway: GatewayClient,
        messages: list[dict],
        db: AsyncSession | None = None,
        user_id: uuid.UUID | None = None,
    ) -> httpx.Response:
        """Open the upstream event stream for this conversation."""
        gateway.ensure_configured()
        logger.info(f"[{self.name}] relaying {len(messages)} messages")
        payload = await self._payload(messages, db, user_id)
        return await gateway.open_stream(payload)

    async def complete(
        self,
        gateway: GatewayClient,
        messages: list[dict],
        db: AsyncSession | None = None,
        user_id: uuid.UUID | None = None,
    ) -> str:
        """Run a single-shot completion and return the generated text."""
        gateway.ensure_configured()
        logger.info(f"[{self.name}] requesting completion")
        payload = await self._payload(messages, db, user_id)
        data = await gateway.complete(payload)
        return extract_message_content(data) or self.fallback


therapy_chat = ChatProxy(name="therapy-chat", build_system_prompt=therapy_prompt)

mood_chat = ChatProxy(
    name="mood-chat",
    build_system_prompt=personalized_mood_prompt,
    personalization=get_personalization_profile,
)

mood_insights = ChatProxy(
    name="mood-insights",
    build_system_prompt=insight_prompt,
    streaming=False,
    fallback=INSIGHT_FALLBACK,
)
