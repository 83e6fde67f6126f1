"""
Embedding Service

Generate vector embeddings for text.
Abstracts different embedding providers.

Design decisions:
- Provider-agnostic interface
- Model initialized once per process, on first use
- Vectors are mean-pooled and L2-normalized (cosine == dot product)
- The same text recipe is used on the write and read paths
"""

import asyncio
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

import httpx

from supportbot.config import get_settings
from supportbot.config.settings import VectorSettings
from supportbot.core.exceptions import ConfigurationError, EmbeddingError
from supportbot.core.lazy import AsyncLazy
from supportbot.core.types import Article
from supportbot.observability.logging import get_logger

logger = get_logger("supportbot.knowledge.embeddings")

DOCUMENT_CONTENT_CHARS = 500


def document_embedding_text(article: Article) -> str:
    """
    Text embedded for an article on the write path.

    The title is repeated to weight it over the body.
    """
    return f"{article.title} {article.title} {article.content[:DOCUMENT_CONTENT_CHARS]}"


class EmbeddingService(ABC):
    """
    Abstract embedding service.

    Generates dense vector representations of text
    for semantic similarity search.
    """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Embedding dimension."""
        pass

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Generate embedding for single text."""
        pass

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts."""
        return [await self.embed(text) for text in texts]

    def _check_dimension(self, embedding: list[float]) -> list[float]:
        if len(embedding) != self.dimension:
            raise EmbeddingError(
                f"Expected embedding dimension {self.dimension}, got {len(embedding)}",
                context={"expected": self.dimension, "actual": len(embedding)},
            )
        return embedding


class LocalEmbeddings(EmbeddingService):
    """
    Local embedding service using sentence-transformers.

    Runs on CPU/GPU locally, no API calls needed. The model is
    downloaded and loaded once, on the first embed call.
    """

    def __init__(
        self,
        model_name: str = "all-MiniLM-L6-v2",
        dimension: int = 384,
        device: str = "cpu",
    ):
        self._model_name = model_name
        self._dimension = dimension
        self._device = device
        self._model: AsyncLazy[Any] = AsyncLazy(self._load_model)

    @property
    def dimension(self) -> int:
        return self._dimension

    async def _load_model(self) -> Any:
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as e:
            raise EmbeddingError(
                "sentence-transformers required. Install with: "
                "pip install sentence-transformers",
                cause=e,
            )

        logger.info("Initializing embedding model", model=self._model_name, device=self._device)
        try:
            model = await asyncio.to_thread(
                SentenceTransformer, self._model_name, device=self._device
            )
        except OSError as e:
            raise EmbeddingError(
                f"Failed to load embedding model {self._model_name}",
                context={"model": self._model_name},
                cause=e,
            )

        logger.info("Embedding model ready", model=self._model_name)
        return model

    async def embed(self, text: str) -> list[float]:
        """Generate a normalized embedding locally."""
        model = await self._model.get()
        vector = await asyncio.to_thread(
            model.encode,
            text,
            convert_to_numpy=True,
            normalize_embeddings=True,
        )
        return self._check_dimension(vector.tolist())

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate normalized embeddings for a batch."""
        if not texts:
            return []

        model = await self._model.get()
        vectors = await asyncio.to_thread(
            model.encode,
            texts,
            convert_to_numpy=True,
            normalize_embeddings=True,
        )
        return [self._check_dimension(v) for v in vectors.tolist()]


class RemoteEmbeddings(EmbeddingService):
    """
    Embedding service backed by the store's `embed` edge function.

    Request:  POST {"input": text}
    Response: {"embedding": [...]}
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        dimension: int = 384,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._endpoint = endpoint
        self._api_key = api_key
        self._dimension = dimension
        self._timeout = timeout
        self._transport = transport

    @property
    def dimension(self) -> int:
        return self._dimension

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding remotely."""
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._endpoint,
                    json={"input": text},
                    headers=self._headers(),
                )
        except httpx.HTTPError as e:
            raise EmbeddingError(f"Embedding request failed: {e}", cause=e)

        if not response.is_success:
            raise EmbeddingError(
                f"Embedding endpoint returned {response.status_code}",
                context={"status_code": response.status_code, "body": response.text[:200]},
            )

        try:
            embedding = response.json()["embedding"]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbeddingError("Malformed embedding response", cause=e)

        if not isinstance(embedding, list):
            raise EmbeddingError("Malformed embedding response: 'embedding' is not an array")

        return self._check_dimension([float(x) for x in embedding])


def create_embedder(settings: VectorSettings) -> EmbeddingService:
    """Build the configured embedding service."""
    if settings.embedding_provider == "remote":
        if not settings.supabase_url:
            raise ConfigurationError("VECTOR_SUPABASE_URL is required for remote embeddings")

        api_key = settings.supabase_key.get_secret_value() if settings.supabase_key else None
        return RemoteEmbeddings(
            endpoint=f"{settings.supabase_url.rstrip('/')}/functions/v1/{settings.embed_function}",
            api_key=api_key,
            dimension=settings.embedding_dimension,
            timeout=settings.request_timeout,
        )

    return LocalEmbeddings(
        model_name=settings.embedding_model,
        dimension=settings.embedding_dimension,
        device=settings.device,
    )


@lru_cache(maxsize=1)
def get_embedder() -> EmbeddingService:
    """Process-wide embedder built from settings."""
    return create_embedder(get_settings().vector)
