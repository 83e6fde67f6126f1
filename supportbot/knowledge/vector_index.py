"""
Vector Index

Similarity search over article embeddings.

The index itself belongs to the backing store; SupabaseVectorIndex only
calls its search function. InMemoryVectorIndex serves local development and
tests with the same contract.

Design decisions:
- Results always come back ordered by descending similarity
- Product filtering happens inside the index, before the limit is applied
- Rows are mapped to Article with word_count recomputed and no scrape time
"""

from collections.abc import Sequence
from typing import Any

import httpx
import numpy as np
from supabase import AsyncClient, PostgrestAPIError, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from supportbot.core.exceptions import VectorIndexError
from supportbot.core.interfaces import EmbedderProtocol
from supportbot.core.lazy import AsyncLazy
from supportbot.core.types import Article, KBSnapshot, ScoredArticle
from supportbot.knowledge.embeddings import document_embedding_text
from supportbot.knowledge.products import matches_product
from supportbot.observability.logging import get_logger

logger = get_logger("supportbot.knowledge.vector_index")


def format_embedding(vector: Sequence[float]) -> str:
    """Render a vector as the bracketed, comma-separated literal pgvector expects."""
    return "[" + ",".join(repr(float(x)) for x in vector) + "]"


def row_to_scored_article(row: dict[str, Any]) -> ScoredArticle:
    """Map one similarity-search row to a ScoredArticle."""
    content = row.get("content") or ""
    article = Article(
        id=row["id"],
        url=row.get("url") or "",
        title=row.get("title") or "",
        category=row.get("category") or "",
        content=content,
        word_count=len(content.split()),
        scraped_at="",
    )
    return ScoredArticle(article=article, score=float(row.get("similarity", 0.0)))


class SupabaseVectorIndex:
    """
    Supabase (pgvector) similarity search.

    Calls the `function` database function through the async supabase
    client with {query_embedding, match_threshold, match_count,
    product_filter}. The client is created on first use unless one is
    passed in.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        function: str = "search_articles",
        timeout: float = 30.0,
        client: AsyncClient | None = None,
    ):
        self._url = url
        self._api_key = api_key
        self._function = function
        self._timeout = timeout
        self._client = client
        self._lazy_client = AsyncLazy(self._create_client)

    async def _create_client(self) -> AsyncClient:
        return await acreate_client(
            self._url,
            self._api_key,
            options=AsyncClientOptions(postgrest_client_timeout=self._timeout),
        )

    async def _get_client(self) -> AsyncClient:
        if self._client is not None:
            return self._client
        return await self._lazy_client.get()

    async def similarity_search(
        self,
        query_vector: list[float],
        threshold: float,
        limit: int,
        product_filter: str | None = None,
    ) -> list[ScoredArticle]:
        payload = {
            "query_embedding": format_embedding(query_vector),
            "match_threshold": threshold,
            "match_count": limit,
            "product_filter": product_filter,
        }

        try:
            client = await self._get_client()
            result = await client.rpc(self._function, payload).execute()
        except PostgrestAPIError as e:
            raise VectorIndexError(
                f"Similarity search failed: {e.message}",
                context={"function": self._function, "code": e.code},
                cause=e,
            )
        except httpx.HTTPError as e:
            raise VectorIndexError(
                f"Similarity search request failed: {e}",
                context={"function": self._function},
                cause=e,
            )

        rows = result.data
        if not isinstance(rows, list):
            raise VectorIndexError("Similarity search did not return an array of rows")

        try:
            return [row_to_scored_article(row) for row in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise VectorIndexError("Similarity search returned malformed rows", cause=e)


class InMemoryVectorIndex:
    """
    Brute-force cosine similarity over normalized vectors.

    Vectors are expected to be L2-normalized, so cosine similarity is a
    plain dot product.
    """

    def __init__(self, dimension: int = 384):
        self._dimension = dimension
        self._articles: list[Article] = []
        self._vectors: list[np.ndarray] = []
        self._matrix: np.ndarray | None = None

    @property
    def dimension(self) -> int:
        return self._dimension

    def __len__(self) -> int:
        return len(self._articles)

    def add(self, article: Article, embedding: Sequence[float]) -> None:
        """Add an article with its write-path embedding."""
        if len(embedding) != self._dimension:
            raise ValueError(f"Expected dimension {self._dimension}, got {len(embedding)}")

        self._articles.append(article)
        self._vectors.append(np.asarray(embedding, dtype=np.float32))
        self._matrix = None

    @classmethod
    async def from_snapshot(
        cls,
        snapshot: KBSnapshot,
        embedder: EmbedderProtocol,
    ) -> "InMemoryVectorIndex":
        """Embed every article with the write-path recipe and index it."""
        index = cls(dimension=embedder.dimension)
        texts = [document_embedding_text(article) for article in snapshot.articles]
        embeddings = await embedder.embed_batch(texts)
        for article, embedding in zip(snapshot.articles, embeddings, strict=True):
            index.add(article, embedding)

        logger.info("Built in-memory vector index", articles=len(index))
        return index

    async def similarity_search(
        self,
        query_vector: list[float],
        threshold: float,
        limit: int,
        product_filter: str | None = None,
    ) -> list[ScoredArticle]:
        if not self._articles or limit <= 0:
            return []

        if len(query_vector) != self._dimension:
            raise VectorIndexError(
                f"Expected query dimension {self._dimension}, got {len(query_vector)}",
            )

        if self._matrix is None:
            self._matrix = np.vstack(self._vectors)

        query = np.asarray(query_vector, dtype=np.float32)
        similarities = self._matrix @ query

        # Stable sort keeps insertion order among equal similarities
        order = np.argsort(-similarities, kind="stable")

        results: list[ScoredArticle] = []
        for i in order:
            similarity = float(similarities[i])
            if similarity <= threshold:
                break

            article = self._articles[i]
            if product_filter and not matches_product(article.url, article.category, product_filter):
                continue

            results.append(ScoredArticle(article=article, score=similarity))
            if len(results) >= limit:
                break

        return results
