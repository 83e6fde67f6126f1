"""
Search API Routes

Direct access to KB retrieval, without answer generation.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from supportbot.api.dependencies import get_retrieval_engine
from supportbot.core.types import Article
from supportbot.knowledge.retriever import RetrievalEngine

router = APIRouter()


class SearchRequest(BaseModel):
    """Request body for search endpoint."""

    query: str = Field(..., max_length=2000)
    max_results: int | None = Field(default=None, ge=1, le=50)


class SearchResponse(BaseModel):
    """Ranked articles for one query."""

    query: str
    mode: str
    product_filter: str | None = None
    results: list[Article]


@router.post("/search")
async def search(
    request: SearchRequest,
    engine: RetrievalEngine = Depends(get_retrieval_engine),
) -> SearchResponse:
    """
    Search the knowledge base.

    An empty result list means nothing relevant was found; retrieval
    failures are reported as errors.
    """
    results = await engine.search(request.query, request.max_results)

    return SearchResponse(
        query=request.query,
        mode=engine.mode,
        product_filter=engine.detect_product_filter(request.query),
        results=results,
    )
