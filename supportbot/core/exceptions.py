"""
Exception Hierarchy

Defines all exceptions used by the support assistant core.
Exceptions are organized by domain and include context for debugging.

Design decisions:
- All exceptions inherit from SupportBotError for easy catching
- Exceptions carry structured context, not just messages
- Error codes enable programmatic handling (e.g. a "try again" message on 429)
"""

from typing import Any


class SupportBotError(Exception):
    """
    Base exception for all SupportBot errors.

    Provides structured error information including:
    - Human-readable message
    - Machine-readable error code
    - Additional context for debugging
    """

    error_code: str = "SUPPORTBOT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.error_code
        self.context = context or {}
        self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "context": self.context,
        }


# ============================================================
# Configuration Errors
# ============================================================


class ConfigurationError(SupportBotError):
    """Error in configuration or settings."""

    error_code = "CONFIGURATION_ERROR"


# ============================================================
# Knowledge Base Errors
# ============================================================


class LoadError(SupportBotError):
    """KB document unreachable or malformed."""

    error_code = "KB_LOAD_ERROR"


class RetrievalError(SupportBotError):
    """A retrieval collaborator (embedder or similarity search) failed."""

    error_code = "RETRIEVAL_ERROR"


class EmbeddingError(RetrievalError):
    """Error generating a query embedding."""

    error_code = "EMBEDDING_ERROR"


class VectorIndexError(RetrievalError):
    """Error from the similarity-search collaborator."""

    error_code = "VECTOR_INDEX_ERROR"


# ============================================================
# Answer Stream Errors
# ============================================================


class TransportError(SupportBotError):
    """Answer endpoint returned a non-2xx status or no body."""

    error_code = "TRANSPORT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class RateLimitError(TransportError):
    """Answer endpoint rejected the request with 429."""

    error_code = "RATE_LIMIT"

    def __init__(
        self,
        message: str,
        *,
        retry_after: float | None = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("status_code", 429)
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class DecodeWarning(SupportBotError):
    """
    A single stream frame could not be decoded.

    Logged and skipped by the stream decoder; never propagated to callers.
    """

    error_code = "FRAME_DECODE_WARNING"
