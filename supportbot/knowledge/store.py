"""
Article Store

Holds the full knowledge base in memory.

Design decisions:
- The KB document is fetched once, on first use, then cached for the
  life of the process; refreshing requires a restart
- Concurrent first callers share one in-flight load
- A failed load is raised to every waiting caller and is not cached
"""

import asyncio
import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from supportbot.config import get_settings
from supportbot.core.exceptions import LoadError
from supportbot.core.lazy import AsyncLazy
from supportbot.core.types import KBSnapshot
from supportbot.observability.logging import get_logger

logger = get_logger("supportbot.knowledge.store")


class ArticleStore:
    """
    In-memory knowledge base.

    The source is either an http(s) URL or a local file path.
    """

    def __init__(
        self,
        source: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._source = source
        self._timeout = timeout
        self._transport = transport
        self._snapshot: AsyncLazy[KBSnapshot] = AsyncLazy(self._load_snapshot)

    @property
    def source(self) -> str:
        return self._source

    @property
    def loaded(self) -> bool:
        return self._snapshot.initialized

    async def load(self) -> KBSnapshot:
        """
        Return the KB snapshot, loading it on first call.

        Raises:
            LoadError: Source unreachable or document malformed
        """
        return await self._snapshot.get()

    async def _load_snapshot(self) -> KBSnapshot:
        raw = await self._read_source()
        snapshot = parse_kb_document(raw, source=self._source)

        logger.info(
            "Loaded KB articles",
            source=self._source,
            total_articles=snapshot.total_articles,
            categories=len(snapshot.categories),
        )
        return snapshot

    async def _read_source(self) -> str:
        if self._source.startswith(("http://", "https://")):
            return await self._fetch()

        path = Path(self._source)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            logger.error("Failed to read KB file", error=e, source=self._source)
            raise LoadError(
                f"Failed to read KB file: {self._source}",
                context={"source": self._source},
                cause=e,
            )

    async def _fetch(self) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(self._source)
        except httpx.HTTPError as e:
            logger.error("Failed to fetch KB", error=e, source=self._source)
            raise LoadError(
                f"Failed to fetch KB: {e}",
                context={"source": self._source},
                cause=e,
            )

        if not response.is_success:
            logger.error("Failed to load KB", source=self._source, status=response.status_code)
            raise LoadError(
                f"Failed to load KB: {response.status_code}",
                context={"source": self._source, "status_code": response.status_code},
            )

        return response.text


def parse_kb_document(raw: str, source: str = "<memory>") -> KBSnapshot:
    """
    Parse and validate a KB document.

    Expected shape: {scraped_at, total_articles, categories, articles: [...]}.

    Raises:
        LoadError: Invalid JSON, missing or non-array `articles`, or
            invalid article records
    """
    context = {"source": source}

    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        raise LoadError(f"KB document is not valid JSON: {e}", context=context, cause=e)

    if not isinstance(data, dict):
        raise LoadError("KB document must be a JSON object", context=context)

    if "articles" not in data:
        raise LoadError("KB document has no 'articles' field", context=context)

    if not isinstance(data["articles"], list):
        raise LoadError("KB document 'articles' must be an array", context=context)

    try:
        return KBSnapshot.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise LoadError(
            f"KB document failed validation: {e.error_count()} error(s)",
            context={**context, "errors": errors},
            cause=e,
        )


@lru_cache(maxsize=1)
def get_article_store() -> ArticleStore:
    """Process-wide store built from settings."""
    settings = get_settings()
    return ArticleStore(
        source=settings.knowledge.source,
        timeout=settings.knowledge.load_timeout,
    )
