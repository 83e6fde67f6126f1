"""
Chat API Routes

Streaming chat endpoint grounded in KB articles.
"""

from collections.abc import AsyncGenerator
from contextlib import aclosing
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.responses import StreamingResponse as StarletteStreamingResponse

from supportbot.api.dependencies import get_assistant, get_trace_context
from supportbot.api.streaming import StreamingResponse, stream_sse
from supportbot.core.exceptions import SupportBotError
from supportbot.core.types import Article, ConversationMessage
from supportbot.observability.logging import get_logger
from supportbot.runtime.assistant import SupportAssistant

logger = get_logger("supportbot.api.chat")

router = APIRouter()


class ChatRequest(BaseModel):
    """Request body for chat endpoint."""

    messages: list[ConversationMessage] = Field(..., min_length=1)


@router.post("/chat")
async def chat(
    request: ChatRequest,
    assistant: SupportAssistant = Depends(get_assistant),
    trace: dict[str, str | None] = Depends(get_trace_context),
) -> StarletteStreamingResponse:
    """
    Chat with the assistant.

    Streams SSE events: `delta` per answer fragment, then `sources` and
    `done`. Failures before the first fragment are returned as HTTP
    errors; later failures end the stream with an `error` event.
    """
    grounding = await assistant.ground(request.messages)
    deltas = assistant.relay.stream(request.messages, grounding.context)

    # Pull the first fragment now so status errors become HTTP errors
    try:
        first: str | None = await anext(deltas)
    except StopAsyncIteration:
        first = None

    return StreamingResponse(
        stream_sse(_chat_events(first, deltas, grounding.sources, trace["request_id"])),
    )


async def _chat_events(
    first: str | None,
    deltas: AsyncGenerator[str, None],
    sources: list[Article],
    request_id: str | None = None,
) -> AsyncGenerator[tuple[str, Any], None]:
    # Streams after TracingMiddleware has returned
    with logger.context(request_id=request_id):
        async with aclosing(deltas):
            try:
                if first is not None:
                    yield "delta", {"text": first}
                async for text in deltas:
                    yield "delta", {"text": text}
            except SupportBotError as e:
                logger.error("Chat stream failed", error=e)
                yield "error", e.to_dict()
                return

        yield "sources", [_source_payload(article) for article in sources]
        yield "done", {}


def _source_payload(article: Article) -> dict[str, str]:
    return {
        "id": article.id,
        "title": article.title,
        "url": article.url,
        "category": article.category,
    }
