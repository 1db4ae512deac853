"""Incremental decoder for the relayed chat completion event stream.

Records are newline-delimited. ``data: `` records carry a JSON delta
envelope, ``:`` lines are keep-alive comments, and ``data: [DONE]`` ends the
stream. A record split across network chunks is held back until its newline
arrives.
"""
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def extract_delta_content(envelope: dict) -> str | None:
    """Incremental text carried by one envelope, if any."""
    try:
        content = envelope["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    if isinstance(content, str) and content:
        return content
    return None


class EventStreamDecoder:
    """Feed raw bytes in; get text fragments out."""

    def __init__(self):
        self._buffer = bytearray()
        self.done = False
        self.malformed = 0

    def feed(self, chunk: bytes) -> list[str]:
        """Consume ``chunk`` and return the fragments of every complete record."""
        if self.done:
            return []
        self._buffer.extend(chunk)

        fragments = []
        while not self.done:
            newline = self._buffer.find(b"\n")
            if newline == -1:
                break
            raw = bytes(self._buffer[:newline])
            del self._buffer[: newline + 1]
            fragment = self._decode_line(raw)
            if fragment:
                fragments.append(fragment)
        return fragments

    def flush(self) -> list[str]:
        """Decode a final record left without a trailing newline."""
        if self.done or not self._buffer:
            return []
        raw = bytes(self._buffer)
        self._buffer.clear()
        fragment = self._decode_line(raw)
        return [fragment] if fragment else []

    def _decode_line(self, raw: bytes) -> str | None:
        line = raw.decode("utf-8", errors="replace")
        if line.endswith("\r"):
            line = line[:-1]
        if line.startswith(":") or not line.strip():
            return None
        if not line.startswith(DATA_PREFIX):
            return None

        payload = line[len(DATA_PREFIX):].strip()
        if payload == DONE_SENTINEL:
            self.done = True
            return None

        try:
            envelope = json.loads(payload)
        except json.JSONDecodeError as e:
            self.malformed += 1
            logger.warning(f"Skipping malformed stream record: {e}")
            return None
        return extract_delta_content(envelope)


async def iter_delta_content(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield text fragments from a byte stream until it ends or signals done."""
    decoder = EventStreamDecoder()
    async for chunk in chunks:
        for fragment in decoder.feed(chunk):
            yield fragment
        if decoder.done:
            return
    for fragment in decoder.flush():
        yield fragment
