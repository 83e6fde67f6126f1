"""
Knowledge / Retrieval Module

KB loading, lexical scoring, embedding, similarity search and context
building for answer grounding.
"""

from supportbot.knowledge.context import ContextBuilder
from supportbot.knowledge.embeddings import (
    EmbeddingService,
    LocalEmbeddings,
    RemoteEmbeddings,
    create_embedder,
    document_embedding_text,
    get_embedder,
)
from supportbot.knowledge.lexical import LexicalScorer, tokenize
from supportbot.knowledge.products import detect_product_filter
from supportbot.knowledge.retriever import (
    LexicalSearch,
    RetrievalEngine,
    SearchMode,
    VectorSearch,
    create_retrieval_engine,
)
from supportbot.knowledge.store import ArticleStore, get_article_store, parse_kb_document
from supportbot.knowledge.vector_index import (
    InMemoryVectorIndex,
    SupabaseVectorIndex,
    format_embedding,
)

__all__ = [
    # Store
    "ArticleStore",
    "get_article_store",
    "parse_kb_document",
    # Lexical
    "LexicalScorer",
    "detect_product_filter",
    "tokenize",
    # Embeddings
    "EmbeddingService",
    "LocalEmbeddings",
    "RemoteEmbeddings",
    "create_embedder",
    "document_embedding_text",
    "get_embedder",
    # Vector index
    "InMemoryVectorIndex",
    "SupabaseVectorIndex",
    "format_embedding",
    # Retrieval
    "LexicalSearch",
    "RetrievalEngine",
    "SearchMode",
    "VectorSearch",
    "create_retrieval_engine",
    # Context
    "ContextBuilder",
]
