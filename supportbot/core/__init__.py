"""
Core Module

Contains fundamental types, exceptions, interfaces, and utilities used across
all other modules of the support assistant.
"""

from supportbot.core.exceptions import (
    ConfigurationError,
    DecodeWarning,
    EmbeddingError,
    LoadError,
    RateLimitError,
    RetrievalError,
    SupportBotError,
    TransportError,
    VectorIndexError,
)
from supportbot.core.interfaces import EmbedderProtocol, SearchStrategy, VectorIndexProtocol
from supportbot.core.lazy import AsyncLazy
from supportbot.core.types import (
    Article,
    ContentDelta,
    ConversationMessage,
    Done,
    KBSnapshot,
    MessageRole,
    ScoredArticle,
    StreamEvent,
    Unrecognized,
)

__all__ = [
    # Types
    "Article",
    "ContentDelta",
    "ConversationMessage",
    "Done",
    "KBSnapshot",
    "MessageRole",
    "ScoredArticle",
    "StreamEvent",
    "Unrecognized",
    # Exceptions
    "ConfigurationError",
    "DecodeWarning",
    "EmbeddingError",
    "LoadError",
    "RateLimitError",
    "RetrievalError",
    "SupportBotError",
    "TransportError",
    "VectorIndexError",
    # Interfaces/Protocols
    "EmbedderProtocol",
    "SearchStrategy",
    "VectorIndexProtocol",
    # Utilities
    "AsyncLazy",
]
