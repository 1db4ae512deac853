"""
Unit tests for the streaming chat client.
"""
import asyncio
import json
import uuid

import httpx
import pytest

from moodlogger.client.chat_client import MOOD_CHAT, THERAPY_CHAT, ChatClient
from moodlogger.client.transcript import ChatMessage, Transcript, TurnState
from moodlogger.services.mood_tips import MOOD_TIPS
from streams import StalledStream, sse_body


class ScriptedServer:
    """Answers client requests from a table of canned responses."""

    def __init__(self, responses: dict[str, httpx.Response]):
        self.responses = responses
        self.requests: list[tuple[str, dict]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.url.path, json.loads(request.content)))
        response = self.responses.get(request.url.path)
        if isinstance(response, Exception):
            raise response
        return response or httpx.Response(404)


def make_client(server: ScriptedServer, notifications: list | None = None, user_id=None):
    def notify(title, description):
        notifications.append((title, description))

    return ChatClient(
        "http://moodlogger.test",
        user_id=user_id,
        notify=notify if notifications is not None else None,
        transport=httpx.MockTransport(server.handler),
    )


class TestStreamReply:

    @pytest.mark.asyncio
    async def test_reply_accumulates_into_transcript(self):
        server = ScriptedServer({THERAPY_CHAT: httpx.Response(200, content=sse_body("A", "B"))})
        transcript = Transcript()
        updates = []

        async with make_client(server) as client:
            reply = await client.stream_reply(transcript, "Hello", on_update=updates.append)

        assert reply == "AB"
        assert updates == ["A", "AB"]
        assert transcript.messages == [
            ChatMessage(role="user", content="Hello"),
            ChatMessage(role="assistant", content="AB"),
        ]
        assert transcript.state == TurnState.SETTLED

    @pytest.mark.asyncio
    async def test_request_body(self):
        user_id = uuid.uuid4()
        server = ScriptedServer({MOOD_CHAT: httpx.Response(200, content=sse_body("ok"))})
        transcript = Transcript([ChatMessage(role="assistant", content="Hi!")])

        async with make_client(server, user_id=user_id) as client:
            await client.stream_reply(transcript, "Rough day", MOOD_CHAT, user_id=user_id)

        path, body = server.requests[0]
        assert path == MOOD_CHAT
        assert body == {
            "messages": [
                {"role": "assistant", "content": "Hi!"},
                {"role": "user", "content": "Rough day"},
            ],
            "userId": str(user_id),
        }

    @pytest.mark.asyncio
    async def test_error_status_rolls_back_and_notifies(self):
        server = ScriptedServer({THERAPY_CHAT: httpx.Response(429, json={"error": "slow down"})})
        transcript = Transcript()
        notifications = []

        async with make_client(server, notifications) as client:
            reply = await client.stream_reply(transcript, "Hello")

        assert reply is None
        assert transcript.messages == [ChatMessage(role="user", content="Hello")]
        assert transcript.state == TurnState.FAILED
        assert notifications == [("Error", "Failed to get response. Please try again.")]

    @pytest.mark.asyncio
    async def test_transport_failure_rolls_back(self):
        server = ScriptedServer({THERAPY_CHAT: httpx.ConnectError("connection refused")})
        transcript = Transcript()
        notifications = []

        async with make_client(server, notifications) as client:
            reply = await client.stream_reply(transcript, "Hello")

        assert reply is None
        assert transcript.messages[-1].role == "user"
        assert len(notifications) == 1

    @pytest.mark.asyncio
    async def test_empty_stream_leaves_no_placeholder(self):
        server = ScriptedServer({THERAPY_CHAT: httpx.Response(200, content=b"data: [DONE]\n\n")})
        transcript = Transcript()

        async with make_client(server) as client:
            reply = await client.stream_reply(transcript, "Hello")

        assert reply == ""
        assert transcript.messages == [ChatMessage(role="user", content="Hello")]

    @pytest.mark.asyncio
    async def test_cancelled_turn_is_released(self):
        server = ScriptedServer({
            THERAPY_CHAT: httpx.Response(200, stream=StalledStream(sse_body("A", done=False)))
        })
        transcript = Transcript()
        first_delta = asyncio.Event()

        async with make_client(server) as client:
            task = asyncio.create_task(
                client.stream_reply(transcript, "Hello", on_update=lambda _: first_delta.set())
            )
            await first_delta.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert transcript.state == TurnState.FAILED
        assert transcript.messages == [ChatMessage(role="user", content="Hello")]
        transcript.begin_turn("again")
        assert transcript.in_flight

    @pytest.mark.asyncio
    async def test_failing_callback_releases_turn(self):
        server = ScriptedServer({THERAPY_CHAT: httpx.Response(200, content=sse_body("A", "B"))})
        transcript = Transcript()
        notifications = []

        def explode(reply):
            raise ValueError("render failed")

        async with make_client(server, notifications) as client:
            with pytest.raises(ValueError):
                await client.stream_reply(transcript, "Hello", on_update=explode)

        assert transcript.state == TurnState.FAILED
        assert transcript.messages == [ChatMessage(role="user", content="Hello")]
        assert notifications == []
        transcript.begin_turn("again")
        assert transcript.in_flight


class TestTherapyTurn:

    @pytest.mark.asyncio
    async def test_exchange_saved_after_reply(self):
        session_id = uuid.uuid4()
        save_path = f"/v1/therapy/sessions/{session_id}/messages"
        server = ScriptedServer({
            THERAPY_CHAT: httpx.Response(200, content=sse_body("I hear you.")),
            save_path: httpx.Response(201, json=[]),
        })

        async with make_client(server) as client:
            reply = await client.send_therapy_message(Transcript(), session_id, "I'm stressed")

        assert reply == "I hear you."
        assert server.requests[-1] == (
            save_path,
            {"user_content": "I'm stressed", "assistant_content": "I hear you."},
        )

    @pytest.mark.asyncio
    async def test_nothing_saved_when_reply_fails(self):
        server = ScriptedServer({THERAPY_CHAT: httpx.Response(500)})

        async with make_client(server, []) as client:
            reply = await client.send_therapy_message(Transcript(), uuid.uuid4(), "Hello")

        assert reply is None
        assert [path for path, _ in server.requests] == [THERAPY_CHAT]

    @pytest.mark.asyncio
    async def test_save_failure_is_not_fatal(self):
        server = ScriptedServer({})

        async with make_client(server) as client:
            saved = await client.save_therapy_exchange(uuid.uuid4(), "hi", "hello")

        assert saved is False


class TestMoodInsight:

    @pytest.mark.asyncio
    async def test_generated_insight(self):
        server = ScriptedServer({"/v1/insights/mood": httpx.Response(200, json={"insight": "Nice!"})})

        async with make_client(server) as client:
            insight = await client.mood_insight(4, "Good workout")

        assert insight == "Nice!"
        assert server.requests[0][1] == {"moodLevel": 4, "note": "Good workout"}

    @pytest.mark.asyncio
    async def test_falls_back_to_static_tip(self):
        server = ScriptedServer({"/v1/insights/mood": httpx.Response(402, json={"error": "pay"})})

        async with make_client(server) as client:
            insight = await client.mood_insight(1)

        assert insight == MOOD_TIPS[1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [["unexpected"], "just text", 5])
    async def test_non_object_body_falls_back(self, body):
        server = ScriptedServer({"/v1/insights/mood": httpx.Response(200, json=body)})

        async with make_client(server) as client:
            insight = await client.mood_insight(3)

        assert insight == MOOD_TIPS[3]
