"""
Test Fixtures

Sample KB data and test doubles shared across the suite.
"""

import hashlib
import json
import math

SAMPLE_ARTICLES = [
    {
        "id": "1",
        "url": "https://moraware.com/countergo/print-quote",
        "title": "Print a Quote",
        "category": "CounterGo",
        "content": "To print a quote open the quote and click Print. You can print a quote as a PDF.",
        "word_count": 17,
        "scraped_at": "2024-05-01T00:00:00Z",
    },
    {
        "id": "2",
        "url": "https://moraware.com/systemize/schedule-job",
        "title": "Schedule a Job",
        "category": "Systemize",
        "content": "Jobs are scheduled from the calendar. Drag a job activity to a new date.",
        "word_count": 13,
        "scraped_at": "2024-05-01T00:00:00Z",
    },
    {
        "id": "3",
        "url": "https://moraware.com/inventory/slabs",
        "title": "Track Slabs",
        "category": "Inventory",
        "content": "Inventory tracks every slab. Print slab labels from the slab list.",
        "word_count": 11,
        "scraped_at": "2024-05-01T00:00:00Z",
    },
    {
        "id": "4",
        "url": "https://moraware.com/systemize/print-job-forms",
        "title": "Print Job Forms",
        "category": "Systemize",
        "content": "Job forms can be printed from the job page.",
        "word_count": 9,
        "scraped_at": None,
    },
]


def kb_document(articles: list[dict] | None = None, **overrides) -> dict:
    """Build a KB document in the on-disk format."""
    articles = SAMPLE_ARTICLES if articles is None else articles
    document = {
        "scraped_at": "2024-05-01T00:00:00Z",
        "total_articles": len(articles),
        "categories": sorted({a.get("category", "") for a in articles}),
        "articles": articles,
    }
    document.update(overrides)
    return document


def sse_body(*texts: str, done: bool = True) -> bytes:
    """Encode text fragments as answer-endpoint frames."""
    lines = [
        "data: "
        + json.dumps({"type": "content_block_delta", "delta": {"text": text}}, ensure_ascii=False)
        for text in texts
    ]
    if done:
        lines.append("data: [DONE]")
    return ("\n".join(lines) + "\n").encode()


class HashEmbedder:
    """
    Deterministic bag-of-words embedder.

    Each lower-cased word is hashed into one of `dimension` buckets and the
    result is L2-normalized, so texts sharing words have positive cosine
    similarity.
    """

    def __init__(self, dimension: int = 384):
        self._dimension = dimension
        self.calls: list[str] = []
        self.batches: list[list[str]] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        vector = [0.0] * self._dimension
        for word in text.lower().split():
            bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % self._dimension
            vector[bucket] += 1.0

        norm = math.sqrt(sum(x * x for x in vector))
        if norm == 0:
            return vector
        return [x / norm for x in vector]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.batches.append(list(texts))
        return [await self.embed(text) for text in texts]


class FailingEmbedder:
    """Embedder whose backend is down."""

    dimension = 384

    def __init__(self, error: Exception | None = None):
        self._error = error or RuntimeError("embedding backend unavailable")

    async def embed(self, text: str) -> list[float]:
        raise self._error

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        raise self._error


class RecordingIndex:
    """Vector index double that records calls and returns fixed rows."""

    def __init__(self, results=None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.calls: list[dict] = []

    async def similarity_search(self, query_vector, threshold, limit, product_filter=None):
        self.calls.append(
            {
                "query_vector": query_vector,
                "threshold": threshold,
                "limit": limit,
                "product_filter": product_filter,
            }
        )
        if self.error is not None:
            raise self.error
        return list(self.results)
