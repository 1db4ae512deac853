"""Chat transcript with an explicit per-turn state machine.

    idle -> streaming -> settled
                      -> failed

While a turn is streaming, the last entry is the assistant placeholder and
is overwritten wholesale on every update. A failed turn removes the
placeholder so the transcript never keeps an empty pending reply.
"""
import enum
from dataclasses import asdict, dataclass

MAX_REQUEST_MESSAGES = 50


class TurnState(str, enum.Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    SETTLED = "settled"
    FAILED = "failed"


class TurnInProgress(Exception):
    """Raised when a new turn starts before the previous one finished."""

    def __init__(self, message: str = "Wait for the current reply to finish."):
        self.message = message
        super().__init__(self.message)


class InvalidTransition(Exception):
    def __init__(self, state: TurnState, action: str):
        self.message = f"Cannot {action} while {state.value}"
        super().__init__(self.message)


@dataclass
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> dict:
        return asdict(self)


class Transcript:
    def __init__(self, messages: list[ChatMessage] | None = None):
        self.messages: list[ChatMessage] = list(messages or [])
        self.state = TurnState.IDLE

    @property
    def in_flight(self) -> bool:
        return self.state == TurnState.STREAMING

    def _require_streaming(self, action: str) -> None:
        if self.state != TurnState.STREAMING:
            raise InvalidTransition(self.state, action)

    def begin_turn(self, user_text: str) -> list[dict]:
        """Append the user's message and an empty assistant placeholder.

        Returns the conversation to send upstream: the visible transcript
        plus the new message, oldest first, without the placeholder.
        """
        if self.in_flight:
            raise TurnInProgress()

        self.messages.append(ChatMessage(role="user", content=user_text))
        request = [m.to_dict() for m in self.messages[-MAX_REQUEST_MESSAGES:]]
        self.messages.append(ChatMessage(role="assistant", content=""))
        self.state = TurnState.STREAMING
        return request

    def update(self, content: str) -> None:
        """Replace the placeholder with the cumulative reply so far."""
        self._require_streaming("update")
        self.messages[-1] = ChatMessage(role="assistant", content=content)

    def settle(self) -> str:
        """Finish the turn and return the completed reply.

        An empty reply leaves no assistant entry behind.
        """
        self._require_streaming("settle")
        reply = self.messages[-1].content
        if not reply:
            self.messages.pop()
        self.state = TurnState.SETTLED
        return reply

    def fail(self) -> None:
        """Abandon the turn and drop the placeholder."""
        self._require_streaming("fail")
        self.messages.pop()
        self.state = TurnState.FAILED
