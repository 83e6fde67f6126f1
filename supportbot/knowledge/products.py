"""
Product Scope Detection

Maps a free-text query onto one product family so retrieval can be
restricted to that product's articles.
"""

from collections.abc import Sequence

DEFAULT_PRODUCT_KEYWORDS: tuple[str, ...] = ("systemize", "inventory", "countergo")


def detect_product_filter(
    query: str,
    keywords: Sequence[str] = DEFAULT_PRODUCT_KEYWORDS,
) -> str | None:
    """
    Return the first product keyword contained in the query, or None.

    Keywords are checked in order, so with the defaults a query that names
    both Systemize and CounterGo is scoped to "systemize". Depends on the
    query text alone.
    """
    query_lower = query.lower()
    for keyword in keywords:
        if keyword.lower() in query_lower:
            return keyword.lower()
    return None


def matches_product(url: str, category: str, product_filter: str) -> bool:
    """Check whether an article belongs to a product scope (case-insensitive)."""
    needle = product_filter.lower()
    return needle in url.lower() or needle in category.lower()
