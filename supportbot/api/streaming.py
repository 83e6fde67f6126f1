"""
Streaming Response Utilities

Server-Sent Events support for the chat endpoint.
"""

import json
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing
from typing import Any

from starlette.responses import StreamingResponse as StarletteStreamingResponse


def format_sse_event(
    data: Any,
    event: str | None = None,
    id: str | None = None,
) -> str:
    """Format one event as SSE."""
    lines = []

    if event:
        lines.append(f"event: {event}")

    if id:
        lines.append(f"id: {id}")

    if isinstance(data, (dict, list)):
        data = json.dumps(data)

    for line in str(data).split("\n"):
        lines.append(f"data: {line}")

    lines.append("")  # Empty line to end event

    return "\n".join(lines) + "\n"


def StreamingResponse(
    content: AsyncIterator[str],
    media_type: str = "text/event-stream",
    **kwargs: Any,
) -> StarletteStreamingResponse:
    """
    Create a streaming response for SSE.
    """
    return StarletteStreamingResponse(
        content,
        media_type=media_type,
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
        **kwargs,
    )


async def stream_sse(
    events: AsyncGenerator[tuple[str, Any], None],
) -> AsyncIterator[str]:
    """
    Stream (event, data) pairs as numbered SSE events.

    The event generator is closed when streaming stops, even on disconnect.
    """
    event_id = 0

    async with aclosing(events):
        async for event, data in events:
            event_id += 1
            yield format_sse_event(data, event=event, id=str(event_id))
