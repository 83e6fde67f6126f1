"""
Interface & Serving Layer

FastAPI endpoints for KB search and streaming chat.
"""

from supportbot.api.app import create_app
from supportbot.api.dependencies import get_assistant, get_retrieval_engine
from supportbot.api.middleware import TracingMiddleware, status_for_error
from supportbot.api.streaming import StreamingResponse, format_sse_event, stream_sse

__all__ = [
    # App
    "create_app",
    # Dependencies
    "get_assistant",
    "get_retrieval_engine",
    # Middleware
    "TracingMiddleware",
    "status_for_error",
    # Streaming
    "StreamingResponse",
    "format_sse_event",
    "stream_sse",
]
