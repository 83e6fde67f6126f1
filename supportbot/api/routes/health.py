"""
Health Check Routes
"""

from typing import Any

from fastapi import APIRouter, Depends

from supportbot.api.dependencies import get_assistant
from supportbot.runtime.assistant import SupportAssistant

router = APIRouter()


@router.get("/health")
async def health_check(
    assistant: SupportAssistant = Depends(get_assistant),
) -> dict[str, Any]:
    """Basic health check with the configured retrieval mode."""
    return {
        "status": "healthy",
        "search_mode": assistant.engine.mode,
    }
