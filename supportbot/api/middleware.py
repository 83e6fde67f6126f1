"""
API Middleware

Request tracing and domain-error mapping.
"""

import time
from collections.abc import Callable
from uuid import uuid4

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from supportbot.core.exceptions import (
    LoadError,
    RateLimitError,
    RetrievalError,
    SupportBotError,
    TransportError,
)
from supportbot.observability.logging import get_logger

logger = get_logger("supportbot.api")


class TracingMiddleware(BaseHTTPMiddleware):
    """
    Adds a request id to the response and to every log record written
    while the request is handled.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get("X-Request-Id", str(uuid4()))
        request.state.request_id = request_id

        start_time = time.perf_counter()

        with logger.context(request_id=request_id):
            response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers["X-Request-Id"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        return response


def status_for_error(error: SupportBotError) -> int:
    """HTTP status for a domain error."""
    if isinstance(error, RateLimitError):
        return 429
    if isinstance(error, LoadError):
        return 503
    if isinstance(error, (TransportError, RetrievalError)):
        return 502
    return 500


async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
    """Render a SupportBotError as a JSON error response."""
    assert isinstance(exc, SupportBotError)
    status = status_for_error(exc)

    logger.error(
        "Request failed",
        error=exc,
        path=request.url.path,
        status=status,
    )

    headers = {}
    if isinstance(exc, RateLimitError) and exc.retry_after is not None:
        headers["Retry-After"] = str(int(exc.retry_after))

    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SupportBotError, handle_domain_error)
