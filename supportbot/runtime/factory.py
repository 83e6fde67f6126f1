"""
Assistant Factory

Builds a SupportAssistant from settings.
"""

from supportbot.config import Settings, get_settings
from supportbot.knowledge.context import ContextBuilder
from supportbot.knowledge.retriever import SearchMode, create_retrieval_engine
from supportbot.knowledge.store import ArticleStore
from supportbot.reasoning.relay import StreamRelay
from supportbot.runtime.assistant import SupportAssistant


async def create_assistant(
    settings: Settings | None = None,
    *,
    store: ArticleStore | None = None,
    relay: StreamRelay | None = None,
) -> SupportAssistant:
    """
    Create an assistant with the configured retrieval mode.

    With `fallback_to_lexical` set and vector search configured, a lexical
    engine over the same store is attached as the fallback.
    """
    settings = settings or get_settings()

    engine = await create_retrieval_engine(settings, store=store)

    fallback_engine = None
    if settings.chat.fallback_to_lexical and engine.mode == SearchMode.VECTOR.value:
        fallback_engine = await create_retrieval_engine(
            settings,
            mode=SearchMode.LEXICAL,
            store=store,
        )

    return SupportAssistant(
        engine=engine,
        context_builder=ContextBuilder(preview_chars=settings.knowledge.preview_chars),
        relay=relay or StreamRelay.from_settings(settings.chat),
        fallback_engine=fallback_engine,
        max_results=settings.knowledge.max_results,
    )
