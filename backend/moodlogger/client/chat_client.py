"""Async client for the chat endpoints.

Owns one ``httpx.AsyncClient`` for its lifetime; use it as an async context
manager so the connection pool is closed deterministically.
"""
import logging
import uuid
from collections.abc import Callable

import httpx

from moodlogger.client.event_stream import iter_delta_content
from moodlogger.client.transcript import Transcript
from moodlogger.services.mood_tips import MOOD_TIPS

logger = logging.getLogger(__name__)

THERAPY_CHAT = "/v1/chat/therapy"
MOOD_CHAT = "/v1/chat/mood"
MOOD_INSIGHT = "/v1/insights/mood"

Notifier = Callable[[str, str], None]


def log_notification(title: str, description: str) -> None:
    logger.warning(f"{title}: {description}")


class StreamUnavailable(Exception):
    """Raised when the chat endpoint does not answer with an event stream."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        self.message = f"Failed to get response (status {status_code})"
        super().__init__(self.message)


class ChatClient:
    def __init__(
        self,
        base_url: str,
        user_id: uuid.UUID | None = None,
        timeout: float = 60.0,
        notify: Notifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"X-User-Id": str(user_id)} if user_id else {}
        self.user_id = user_id
        self.notify = notify or log_notification
        self._client = httpx.AsyncClient(
            base_url=base_url, headers=headers, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def stream_reply(
        self,
        transcript: Transcript,
        text: str,
        endpoint: str = THERAPY_CHAT,
        user_id: uuid.UUID | None = None,
        on_update: Callable[[str], None] | None = None,
    ) -> str | None:
        """Send one user turn and stream the reply into ``transcript``.

        Returns the completed reply, or None when the turn failed (the
        placeholder is rolled back and the user is notified).
        Raises TurnInProgress if a turn is already streaming.
        """
        body = {"messages": transcript.begin_turn(text)}
        if user_id is not None:
            body["userId"] = str(user_id)

        reply = ""
        try:
            async with self._client.stream("POST", endpoint, json=body) as response:
                if response.status_code != 200:
                    raise StreamUnavailable(response.status_code)
                async for fragment in iter_delta_content(response.aiter_bytes()):
                    reply += fragment
                    transcript.update(reply)
                    if on_update is not None:
                        on_update(reply)
        except (httpx.HTTPError, StreamUnavailable) as e:
            logger.error(f"Error streaming chat: {e}")
            transcript.fail()
            self.notify("Error", "Failed to get response. Please try again.")
            return None
        except BaseException:
            # Cancellation or a failing callback must still release the turn
            transcript.fail()
            raise

        return transcript.settle()

    async def mood_insight(self, mood_level: int, note: str | None = None) -> str:
        """Supportive insight for a logged mood, or the static tip on failure."""
        try:
            response = await self._client.post(
                MOOD_INSIGHT, json={"moodLevel": mood_level, "note": note}
            )
            response.raise_for_status()
            data = response.json()
            insight = data.get("insight") if isinstance(data, dict) else None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error calling mood insights: {e}")
            insight = None
        return insight or MOOD_TIPS[mood_level]

    async def save_therapy_exchange(
        self, session_id: uuid.UUID, user_text: str, assistant_text: str
    ) -> bool:
        """Persist a finished exchange. Failures are logged, never raised."""
        try:
            response = await self._client.post(
                f"/v1/therapy/sessions/{session_id}/messages",
                json={"user_content": user_text, "assistant_content": assistant_text},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Could not save therapy exchange for session {session_id}: {e}")
            return False
        return True

    async def send_therapy_message(
        self,
        transcript: Transcript,
        session_id: uuid.UUID,
        text: str,
        on_update: Callable[[str], None] | None = None,
    ) -> str | None:
        """Stream a therapy reply, then store the exchange."""
        reply = await self.stream_reply(transcript, text, THERAPY_CHAT, on_update=on_update)
        if reply:
            await self.save_therapy_exchange(session_id, text, reply)
        return reply
