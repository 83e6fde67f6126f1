"""
Retrieval Engine

Turns a free-text query into a ranked, bounded list of KB articles.

Design decisions:
- Two interchangeable strategies (lexical, vector) behind one search call
- The strategy is fixed per engine instance, never chosen per query
- Product-scope detection is shared by both strategies
- Scores stop at this boundary; callers get ranked articles only
- Collaborator failures surface as RetrievalError, never as an empty result
"""

from collections.abc import Sequence
from enum import Enum

from supportbot.config import Settings, get_settings
from supportbot.core.exceptions import (
    ConfigurationError,
    EmbeddingError,
    RetrievalError,
    VectorIndexError,
)
from supportbot.core.interfaces import EmbedderProtocol, SearchStrategy, VectorIndexProtocol
from supportbot.core.types import Article
from supportbot.knowledge.embeddings import get_embedder
from supportbot.knowledge.lexical import LexicalScorer, tokenize
from supportbot.knowledge.products import DEFAULT_PRODUCT_KEYWORDS, detect_product_filter
from supportbot.knowledge.store import ArticleStore, get_article_store
from supportbot.knowledge.vector_index import InMemoryVectorIndex, SupabaseVectorIndex
from supportbot.observability.logging import get_logger

logger = get_logger("supportbot.knowledge.retriever")


class SearchMode(str, Enum):
    """Retrieval strategy."""

    LEXICAL = "lexical"
    VECTOR = "vector"


class LexicalSearch:
    """Keyword scoring over the cached KB snapshot."""

    mode = SearchMode.LEXICAL.value

    def __init__(
        self,
        store: ArticleStore,
        scorer: LexicalScorer | None = None,
    ):
        self._store = store
        self._scorer = scorer or LexicalScorer()

    async def search(
        self,
        query: str,
        max_results: int,
        product_filter: str | None = None,
    ) -> list[Article]:
        # No usable tokens: skip the KB load and scoring entirely
        if not tokenize(query):
            return []

        snapshot = await self._store.load()
        scored = self._scorer.score(
            query,
            snapshot.articles,
            product_filter=product_filter,
            max_results=max_results,
        )
        return [s.article for s in scored]


class VectorSearch:
    """
    Embedding + similarity search.

    Asks the index for at least `min_candidates` rows to leave headroom
    for re-ranking, then truncates locally.
    """

    mode = SearchMode.VECTOR.value

    def __init__(
        self,
        embedder: EmbedderProtocol,
        index: VectorIndexProtocol,
        match_threshold: float = 0.1,
        min_candidates: int = 15,
    ):
        self._embedder = embedder
        self._index = index
        self._match_threshold = match_threshold
        self._min_candidates = min_candidates

    @property
    def match_threshold(self) -> float:
        return self._match_threshold

    async def search(
        self,
        query: str,
        max_results: int,
        product_filter: str | None = None,
    ) -> list[Article]:
        try:
            query_vector = await self._embedder.embed(query)
        except RetrievalError:
            raise
        except Exception as e:  # collaborator failure, re-raised as a domain error
            raise EmbeddingError(f"Query embedding failed: {e}", cause=e)

        try:
            results = await self._index.similarity_search(
                query_vector,
                threshold=self._match_threshold,
                limit=max(max_results, self._min_candidates),
                product_filter=product_filter,
            )
        except RetrievalError:
            raise
        except Exception as e:  # collaborator failure, re-raised as a domain error
            raise VectorIndexError(f"Similarity search failed: {e}", cause=e)

        logger.debug(
            "Vector matches",
            candidates=len(results),
            threshold=self._match_threshold,
        )
        return [r.article for r in results[:max_results]]


class RetrievalEngine:
    """
    Knowledge retrieval entry point.

    Usage:
        engine = RetrievalEngine(LexicalSearch(store))
        articles = await engine.search("How do I print a quote?", max_results=5)
    """

    def __init__(
        self,
        strategy: SearchStrategy,
        product_keywords: Sequence[str] = DEFAULT_PRODUCT_KEYWORDS,
        default_max_results: int = 10,
    ):
        self._strategy = strategy
        self._product_keywords = tuple(product_keywords)
        self._default_max_results = default_max_results

    @property
    def mode(self) -> str:
        return self._strategy.mode

    def detect_product_filter(self, query: str) -> str | None:
        return detect_product_filter(query, self._product_keywords)

    async def search(
        self,
        query: str,
        max_results: int | None = None,
    ) -> list[Article]:
        """
        Retrieve ranked articles for a query.

        Args:
            query: Free-text query
            max_results: Result cap (defaults to the engine's configured cap)

        Returns:
            Articles, best first. Empty means nothing relevant was found.

        Raises:
            LoadError: KB could not be loaded (lexical mode)
            RetrievalError: Embedder or similarity search failed (vector mode)
        """
        limit = max_results if max_results is not None else self._default_max_results
        if not query.strip() or limit <= 0:
            return []

        product_filter = self.detect_product_filter(query)
        articles = await self._strategy.search(query, limit, product_filter=product_filter)

        logger.info(
            "Retrieved KB articles",
            mode=self.mode,
            product_filter=product_filter,
            results=min(len(articles), limit),
        )
        return articles[:limit]


async def create_retrieval_engine(
    settings: Settings | None = None,
    *,
    mode: SearchMode | str | None = None,
    store: ArticleStore | None = None,
    embedder: EmbedderProtocol | None = None,
    index: VectorIndexProtocol | None = None,
) -> RetrievalEngine:
    """
    Build an engine from settings.

    Explicit collaborators override the process-wide defaults. An
    in-memory index is built from the KB snapshot, so the store is loaded
    eagerly in that case.
    """
    settings = settings or get_settings()
    mode = SearchMode(mode or settings.knowledge.search_mode)
    knowledge = settings.knowledge

    if mode == SearchMode.LEXICAL:
        strategy: SearchStrategy = LexicalSearch(
            store=store or get_article_store(),
            scorer=LexicalScorer(
                product_keywords=knowledge.product_keywords,
                max_results=knowledge.max_results,
            ),
        )
    else:
        vector = settings.vector
        embedder = embedder or get_embedder()

        if index is None:
            if vector.provider == "memory":
                snapshot = await (store or get_article_store()).load()
                index = await InMemoryVectorIndex.from_snapshot(snapshot, embedder)
            else:
                if not vector.supabase_url or not vector.supabase_key:
                    raise ConfigurationError(
                        "VECTOR_SUPABASE_URL and VECTOR_SUPABASE_KEY are required for vector search"
                    )
                index = SupabaseVectorIndex(
                    url=vector.supabase_url,
                    api_key=vector.supabase_key.get_secret_value(),
                    function=vector.search_function,
                    timeout=vector.request_timeout,
                )

        strategy = VectorSearch(
            embedder=embedder,
            index=index,
            match_threshold=vector.match_threshold,
            min_candidates=vector.min_candidates,
        )

    return RetrievalEngine(
        strategy,
        product_keywords=knowledge.product_keywords,
        default_max_results=knowledge.max_results,
    )
