"""
Context Builder

Formats retrieved articles into the KB fragment sent with a question.
"""

from collections.abc import Sequence

from supportbot.core.types import Article

SOURCE_SEPARATOR = "\n\n---\n\n"


class ContextBuilder:
    """
    Renders articles as numbered source blocks.

    Each block carries the 1-based source index, title, category, a content
    preview and the URL. The preview ends with "..." only when the content
    was actually cut.
    """

    def __init__(
        self,
        preview_chars: int = 1000,
        separator: str = SOURCE_SEPARATOR,
    ):
        self._preview_chars = preview_chars
        self._separator = separator

    def build(self, articles: Sequence[Article]) -> str:
        """Build the context string; empty input gives an empty string."""
        if not articles:
            return ""

        return self._separator.join(
            self._format_article(i, article) for i, article in enumerate(articles, 1)
        )

    def _format_article(self, index: int, article: Article) -> str:
        preview = article.content[: self._preview_chars]
        ellipsis = "..." if len(preview) < len(article.content) else ""
        return (
            f"[Source {index}: {article.title}]\n"
            f"Category: {article.category}\n"
            f"{preview}{ellipsis}\n"
            f"URL: {article.url}"
        )
