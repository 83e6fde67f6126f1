"""
Lexical Scorer

Keyword scoring of knowledge-base articles against a query.

Scoring per query token (additive across tokens):
- title contains token:                       +20
- content whole-word occurrences:             +min(count, 10)
- title contains a non-product token:         +30 (action verbs like "print")
Once per article:
- title equals a token or the whole query:    +50

Pure functions, no I/O.
"""

import re
from collections.abc import Sequence

from supportbot.core.types import Article, ScoredArticle
from supportbot.knowledge.products import DEFAULT_PRODUCT_KEYWORDS, matches_product

MIN_TOKEN_LENGTH = 3

EXACT_TITLE_BONUS = 50
TITLE_MATCH_SCORE = 20
ACTION_TITLE_BONUS = 30
CONTENT_MATCH_CAP = 10


def tokenize(query: str) -> list[str]:
    """Lower-case, split on whitespace, drop tokens of two characters or fewer."""
    return [token for token in query.lower().split() if len(token) >= MIN_TOKEN_LENGTH]


class LexicalScorer:
    """
    Weighted field-match scorer.

    Ranking is deterministic: descending score, ties in original KB order.
    """

    def __init__(
        self,
        product_keywords: Sequence[str] = DEFAULT_PRODUCT_KEYWORDS,
        max_results: int = 10,
    ):
        self._product_keywords = frozenset(k.lower() for k in product_keywords)
        self._max_results = max_results

    def score(
        self,
        query: str,
        articles: Sequence[Article],
        product_filter: str | None = None,
        max_results: int | None = None,
    ) -> list[ScoredArticle]:
        """
        Score and rank articles for a query.

        Args:
            query: Free-text query
            articles: Candidate articles in KB order
            product_filter: Restrict candidates to one product scope. An
                empty restricted set stays empty.
            max_results: Override the default result cap

        Returns:
            Articles with a positive score, best first
        """
        tokens = tokenize(query)
        if not tokens:
            return []

        limit = max_results if max_results is not None else self._max_results

        if product_filter:
            articles = [a for a in articles if matches_product(a.url, a.category, product_filter)]

        phrase = " ".join(query.lower().split())
        patterns = {token: _word_pattern(token) for token in set(tokens)}

        scored: list[ScoredArticle] = []
        for article in articles:
            total = self._score_article(article, tokens, phrase, patterns)
            if total > 0:
                scored.append(ScoredArticle(article=article, score=float(total)))

        # sorted() is stable, so equal scores keep KB order
        scored = sorted(scored, key=lambda s: s.score, reverse=True)
        return scored[:limit]

    def _score_article(
        self,
        article: Article,
        tokens: list[str],
        phrase: str,
        patterns: dict[str, re.Pattern[str]],
    ) -> int:
        title = article.title.lower()
        content = article.content.lower()

        total = 0
        if title == phrase or title in tokens:
            total += EXACT_TITLE_BONUS

        for token in tokens:
            in_title = token in title
            if in_title:
                total += TITLE_MATCH_SCORE
                if token not in self._product_keywords:
                    total += ACTION_TITLE_BONUS

            occurrences = len(patterns[token].findall(content))
            total += min(occurrences, CONTENT_MATCH_CAP)

        return total


def _word_pattern(token: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(token)}\b")
