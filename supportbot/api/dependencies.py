"""
FastAPI Dependencies

Dependency injection for API routes.

Components are built once in the application lifespan and read from
app.state here.
"""

from typing import Any

from fastapi import Depends, HTTPException, Request

from supportbot.knowledge.retriever import RetrievalEngine
from supportbot.runtime.assistant import SupportAssistant


async def get_components(request: Request) -> dict[str, Any]:
    """Get application components from state."""
    return getattr(request.app.state, "components", {})


async def get_assistant(
    components: dict[str, Any] = Depends(get_components),
) -> SupportAssistant:
    """Get the support assistant."""
    if "assistant" not in components:
        raise HTTPException(status_code=503, detail="Assistant not available")
    value = components["assistant"]
    assert isinstance(value, SupportAssistant)
    return value


async def get_retrieval_engine(
    assistant: SupportAssistant = Depends(get_assistant),
) -> RetrievalEngine:
    """Get the retrieval engine the assistant searches with."""
    return assistant.engine


async def get_trace_context(request: Request) -> dict[str, str | None]:
    """Get tracing context from request."""
    return {
        "request_id": getattr(request.state, "request_id", None),
    }
