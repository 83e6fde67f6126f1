"""
Core Interfaces and Protocols

Defines the contracts between the retrieval engine and its collaborators.

Design decisions:
- Protocol-based for structural subtyping
- Minimal interface surface
- Collaborators (embedder, vector index) are external; only the call
  contract lives here
"""

from typing import Protocol, runtime_checkable

from supportbot.core.types import Article, ScoredArticle


# =============================================================================
# EMBEDDER PROTOCOL
# =============================================================================


@runtime_checkable
class EmbedderProtocol(Protocol):
    """
    Converts text into a fixed-length, L2-normalized vector.

    Implemented by: LocalEmbeddings, RemoteEmbeddings
    Used by: VectorSearch, InMemoryVectorIndex

    The write path (whatever populates the vector index) and the read
    path must use the same model, pooling and normalization.
    """

    @property
    def dimension(self) -> int:
        """Embedding dimension."""
        ...

    async def embed(self, text: str) -> list[float]:
        """Generate embedding for a single text."""
        ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts, in order."""
        ...


# =============================================================================
# VECTOR INDEX PROTOCOL
# =============================================================================


@runtime_checkable
class VectorIndexProtocol(Protocol):
    """
    Similarity search exposed by the backing store.

    Implemented by: SupabaseVectorIndex, InMemoryVectorIndex
    Used by: VectorSearch

    Results are ordered by descending similarity.
    """

    async def similarity_search(
        self,
        query_vector: list[float],
        threshold: float,
        limit: int,
        product_filter: str | None = None,
    ) -> list[ScoredArticle]:
        """Return up to `limit` articles with similarity above `threshold`."""
        ...


# =============================================================================
# SEARCH STRATEGY PROTOCOL
# =============================================================================


@runtime_checkable
class SearchStrategy(Protocol):
    """
    One way of turning a query into ranked articles.

    Implemented by: LexicalSearch, VectorSearch
    Used by: RetrievalEngine
    """

    @property
    def mode(self) -> str:
        """Search mode identifier."""
        ...

    async def search(
        self,
        query: str,
        max_results: int,
        product_filter: str | None = None,
    ) -> list[Article]:
        """Return at most `max_results` articles, best first."""
        ...
