"""
FastAPI Application Factory

Creates and configures the main application.

Design decisions:
- Factory pattern for testability
- Lifespan management for component lifecycle
- Components can be injected, skipping the settings-driven build
- Domain errors are mapped to HTTP statuses in one place
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from supportbot.api.middleware import TracingMiddleware, register_error_handlers
from supportbot.config import Settings, get_settings
from supportbot.observability.logging import configure_logging, get_logger
from supportbot.runtime.factory import create_assistant

logger = get_logger("supportbot.api.app")


async def build_components(settings: Settings) -> dict[str, Any]:
    """
    Build the application components from settings.

    The KB itself is loaded lazily on the first lexical search; an
    in-memory vector index loads it here.
    """
    assistant = await create_assistant(settings)

    logger.info(
        "Assistant ready",
        search_mode=assistant.engine.mode,
        chat_endpoint=assistant.relay.endpoint,
    )
    return {"assistant": assistant}


def create_app(
    settings: Settings | None = None,
    components: dict[str, Any] | None = None,
    **kwargs: Any,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to the process-wide settings)
        components: Prebuilt components; when given, nothing is built on startup
        **kwargs: Additional FastAPI arguments
    """
    settings = settings or get_settings()

    configure_logging(
        level=settings.observability.log_level,
        json_output=settings.observability.log_format == "json",
        log_file=settings.observability.log_file,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.components = (
            components if components is not None else await build_components(settings)
        )
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Knowledge-grounded support assistant",
        debug=settings.debug,
        lifespan=lifespan,
        **kwargs,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TracingMiddleware)

    register_error_handlers(app)

    from supportbot.api.routes import chat, health, search

    app.include_router(health.router, tags=["health"])
    app.include_router(search.router, prefix=settings.api_prefix, tags=["search"])
    app.include_router(chat.router, prefix=settings.api_prefix, tags=["chat"])

    return app
