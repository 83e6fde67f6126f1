"""
Stream Relay

Sends a conversation plus KB context to the answer-generation endpoint
and relays the streamed answer as ordered text deltas.

Design decisions:
- Deltas reach the caller in exactly the order their frames arrived;
  decode and dispatch are strictly serial per call
- Non-2xx is fatal for the call; 429 is a distinct RateLimitError
- Malformed frames are skipped by the decoder and never abort the stream
- No retries here; retrying a message is the caller's policy
- Cancelling the call (task cancellation or closing the iterator) stops
  reading and closes the connection
"""

import asyncio
import inspect
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import aclosing, asynccontextmanager

import httpx

from supportbot.config.settings import ChatSettings
from supportbot.core.exceptions import RateLimitError, TransportError
from supportbot.core.types import ContentDelta, ConversationMessage
from supportbot.observability.logging import get_logger
from supportbot.reasoning.prompts import PromptComposer
from supportbot.reasoning.stream_decoder import (
    StreamDecoderState,
    decode_chunk,
    decode_remainder,
)

logger = get_logger("supportbot.reasoning.relay")

DeltaCallback = Callable[[str], Awaitable[None] | None]


class StreamRelay:
    """
    Client for the streaming answer endpoint.

    Usage:
        relay = StreamRelay("https://worker.example.com/api/chat")
        answer = await relay.relay(messages, context, on_delta=print)
    """

    def __init__(
        self,
        endpoint: str,
        composer: PromptComposer | None = None,
        timeout: float = 60.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._endpoint = endpoint
        self._composer = composer or PromptComposer()
        self._timeout = timeout
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._client = client
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: ChatSettings, **kwargs) -> "StreamRelay":
        return cls(
            endpoint=settings.endpoint,
            composer=PromptComposer.from_settings(settings),
            timeout=settings.request_timeout,
            **kwargs,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def relay(
        self,
        messages: Sequence[ConversationMessage],
        context: str,
        on_delta: DeltaCallback,
    ) -> str:
        """
        Relay one answer, invoking `on_delta` for every text fragment.

        `on_delta` may be a plain function or a coroutine function; it is
        awaited before the next frame is dispatched.

        Returns:
            The full answer text

        Raises:
            RateLimitError: Endpoint answered 429
            TransportError: Other non-2xx status, connection failure or
                no response body
        """
        state = StreamDecoderState()

        async with aclosing(self.stream(messages, context, state=state)) as deltas:
            async for delta in deltas:
                result = on_delta(delta)
                if inspect.isawaitable(result):
                    await result

        return state.text

    async def stream(
        self,
        messages: Sequence[ConversationMessage],
        context: str,
        state: StreamDecoderState | None = None,
    ) -> AsyncIterator[str]:
        """
        Relay one answer as an async iterator of text fragments.

        Closing the iterator early releases the connection.
        """
        state = state if state is not None else StreamDecoderState()
        payload = self._composer.build_request(messages, context)

        logger.info(
            "Relaying answer stream",
            endpoint=self._endpoint,
            messages=len(payload["messages"]),
            context_chars=len(context),
        )

        try:
            async with self._client_session() as client:
                async with client.stream(
                    "POST",
                    self._endpoint,
                    json=payload,
                    headers=self._headers,
                ) as response:
                    await self._check_status(response)

                    async for chunk in response.aiter_bytes():
                        for event in decode_chunk(state, chunk):
                            if isinstance(event, ContentDelta):
                                yield event.text
                        if state.done:
                            break

                    for event in decode_remainder(state):
                        if isinstance(event, ContentDelta):
                            yield event.text
        except httpx.HTTPError as e:
            logger.error("Answer stream failed", error=e, endpoint=self._endpoint)
            raise TransportError(
                f"Answer stream failed: {e}",
                context={"endpoint": self._endpoint},
                cause=e,
            )
        except (asyncio.CancelledError, GeneratorExit):
            logger.info(
                "Answer stream abandoned",
                frames=state.frames,
                answer_chars=len(state.text),
            )
            raise

        if state.bytes_received == 0:
            raise TransportError(
                "No response body",
                context={"endpoint": self._endpoint},
            )

        logger.info(
            "Answer stream complete",
            frames=state.frames,
            malformed_frames=state.malformed_frames,
            answer_chars=len(state.text),
        )

    @asynccontextmanager
    async def _client_session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            yield client

    async def _check_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return

        status = response.status_code
        if status == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            logger.warning("Answer endpoint rate limited", retry_after=retry_after)
            raise RateLimitError(
                "Rate limit reached. Please try again in a moment.",
                retry_after=retry_after,
                context={"endpoint": self._endpoint},
            )

        body = (await response.aread()).decode("utf-8", errors="replace")
        logger.error("Answer endpoint error", status=status, body=body[:200])
        raise TransportError(
            f"API error: {status}",
            status_code=status,
            context={"endpoint": self._endpoint, "body": body[:200]},
        )


def _parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
