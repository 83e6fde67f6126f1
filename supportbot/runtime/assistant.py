"""
Support Assistant

One chat turn: retrieve KB articles for the latest user question, build
the grounding context, and relay the streamed answer.

Design decisions:
- Conversation history is owned by the caller and passed in per turn
- A retrieval failure is raised, never turned into an empty context
- Falling back to a second engine is opt-in and logged
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from supportbot.core.exceptions import RetrievalError
from supportbot.core.types import Article, ConversationMessage, MessageRole
from supportbot.knowledge.context import ContextBuilder
from supportbot.knowledge.retriever import RetrievalEngine
from supportbot.observability.logging import get_logger
from supportbot.reasoning.relay import DeltaCallback, StreamRelay

logger = get_logger("supportbot.runtime.assistant")


@dataclass
class ChatTurn:
    """Result of one assistant turn."""

    content: str
    sources: list[Article] = field(default_factory=list)
    retrieval_mode: str | None = None


@dataclass
class Grounding:
    """Retrieved sources and the context rendered from them."""

    sources: list[Article]
    context: str
    retrieval_mode: str | None = None


class SupportAssistant:
    """
    Retrieval-grounded chat over a streaming answer endpoint.

    Usage:
        assistant = SupportAssistant(engine, ContextBuilder(), relay)
        turn = await assistant.send_message(history, on_delta=print)
    """

    def __init__(
        self,
        engine: RetrievalEngine,
        context_builder: ContextBuilder,
        relay: StreamRelay,
        fallback_engine: RetrievalEngine | None = None,
        max_results: int | None = None,
    ):
        self._engine = engine
        self._context_builder = context_builder
        self._relay = relay
        self._fallback_engine = fallback_engine
        self._max_results = max_results

    @property
    def engine(self) -> RetrievalEngine:
        return self._engine

    @property
    def relay(self) -> StreamRelay:
        return self._relay

    @property
    def fallback_engine(self) -> RetrievalEngine | None:
        return self._fallback_engine

    async def retrieve(self, messages: Sequence[ConversationMessage]) -> tuple[list[Article], str | None]:
        """
        Retrieve articles for the last user message.

        Returns:
            (articles, mode used). No user message yields ([], None).
        """
        question = last_user_message(messages)
        if question is None:
            return [], None

        try:
            return await self._engine.search(question, self._max_results), self._engine.mode
        except RetrievalError as e:
            if self._fallback_engine is None:
                raise

            logger.warning(
                "Retrieval failed, falling back",
                error=e,
                failed_mode=self._engine.mode,
                fallback_mode=self._fallback_engine.mode,
            )
            articles = await self._fallback_engine.search(question, self._max_results)
            return articles, self._fallback_engine.mode

    async def send_message(
        self,
        messages: Sequence[ConversationMessage],
        on_delta: DeltaCallback,
    ) -> ChatTurn:
        """
        Run one turn and stream the answer into `on_delta`.

        Raises:
            LoadError / RetrievalError: Retrieval failed (no fallback taken)
            RateLimitError / TransportError: Answer endpoint failed
        """
        grounding = await self.ground(messages)
        content = await self._relay.relay(messages, grounding.context, on_delta)
        return ChatTurn(
            content=content,
            sources=grounding.sources,
            retrieval_mode=grounding.retrieval_mode,
        )

    async def ground(self, messages: Sequence[ConversationMessage]) -> Grounding:
        """Retrieve sources and render the context for the next answer."""
        articles, mode = await self.retrieve(messages)
        context = self._context_builder.build(articles)

        if articles:
            logger.info("Grounding answer", sources=len(articles), mode=mode)

        return Grounding(sources=articles, context=context, retrieval_mode=mode)


def last_user_message(messages: Sequence[ConversationMessage]) -> str | None:
    """Content of the most recent user message, if any."""
    for message in reversed(messages):
        if message.role == MessageRole.USER.value and message.content.strip():
            return message.content
    return None
