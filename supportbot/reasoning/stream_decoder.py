"""
Stream Decoder

Decodes the answer endpoint's newline-delimited event stream.

Frame format (one per line):
    data: {"type": "content_block_delta", "delta": {"text": "Hel"}}
    data: [DONE]

Design decisions:
- All decoding state lives in StreamDecoderState, passed into every call,
  so the decoder can be driven with synthetic byte chunks
- Network reads may end mid-frame: the trailing partial line is held back
  until its newline arrives
- A malformed frame is logged and skipped; decoding continues
- Events come out in exactly the order their frames arrived
"""

import json
from dataclasses import dataclass, field

from supportbot.core.exceptions import DecodeWarning
from supportbot.core.types import ContentDelta, Done, StreamEvent, Unrecognized
from supportbot.observability.logging import get_logger

logger = get_logger("supportbot.reasoning.stream_decoder")

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"
CONTENT_DELTA_TYPE = "content_block_delta"


@dataclass
class StreamDecoderState:
    """Per-stream decoding state."""

    buffer: bytes = b""
    content: list[str] = field(default_factory=list)

    bytes_received: int = 0
    frames: int = 0
    malformed_frames: int = 0
    done: bool = False

    @property
    def text(self) -> str:
        """Answer text assembled so far."""
        return "".join(self.content)


def parse_frame(line: str) -> StreamEvent | None:
    """
    Parse one complete line.

    Returns None for blank lines and Unrecognized for lines without the
    data prefix or payloads that carry no text.

    Raises:
        DecodeWarning: The data payload is not valid JSON
    """
    stripped = line.strip()
    if not stripped:
        return None

    if not stripped.startswith(DATA_PREFIX):
        return Unrecognized()

    payload = stripped[len(DATA_PREFIX) :].strip()
    if payload == DONE_SENTINEL:
        return Done()

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DecodeWarning(
            f"Malformed stream frame: {e.msg}",
            context={"frame": payload[:200]},
            cause=e,
        )

    if not isinstance(data, dict):
        return Unrecognized()

    kind = data.get("type")
    if kind == CONTENT_DELTA_TYPE:
        delta = data.get("delta")
        text = delta.get("text") if isinstance(delta, dict) else None
        if isinstance(text, str) and text:
            return ContentDelta(text=text)

    return Unrecognized(kind=kind if isinstance(kind, str) else None)


def decode_chunk(state: StreamDecoderState, chunk: bytes) -> list[StreamEvent]:
    """
    Feed one network read into the decoder.

    Returns the events completed by this chunk, in frame order. Nothing
    is returned once the end-of-stream sentinel has been seen.
    """
    if state.done:
        return []

    state.bytes_received += len(chunk)
    *lines, state.buffer = (state.buffer + chunk).split(b"\n")

    events: list[StreamEvent] = []
    for raw in lines:
        event = _decode_line(state, raw)
        if event is None:
            continue

        events.append(event)
        if isinstance(event, Done):
            state.done = True
            state.buffer = b""
            break

    return events


def decode_remainder(state: StreamDecoderState) -> list[StreamEvent]:
    """Parse whatever is left in the buffer after the stream closed."""
    if state.done or not state.buffer.strip():
        state.buffer = b""
        return []

    raw, state.buffer = state.buffer, b""
    event = _decode_line(state, raw)
    if event is None:
        return []

    if isinstance(event, Done):
        state.done = True
    return [event]


def _decode_line(state: StreamDecoderState, raw: bytes) -> StreamEvent | None:
    try:
        event = parse_frame(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        event = None
        _record_malformed(state, DecodeWarning("Stream frame is not valid UTF-8", cause=e))
    except DecodeWarning as warning:
        event = None
        _record_malformed(state, warning)

    if event is not None:
        state.frames += 1
        if isinstance(event, ContentDelta):
            state.content.append(event.text)

    return event


def _record_malformed(state: StreamDecoderState, warning: DecodeWarning) -> None:
    state.malformed_frames += 1
    logger.warning(
        "Skipping malformed stream frame",
        error=warning,
        malformed_frames=state.malformed_frames,
    )
