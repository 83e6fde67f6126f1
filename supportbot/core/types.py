"""
Core Types and Data Structures

Defines the fundamental types used throughout the support assistant.
These are intentionally simple, immutable where possible, and serializable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Article(BaseModel):
    """
    A single knowledge-base article.

    Immutable after load. Owned by the ArticleStore; every other
    component only reads it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    title: str
    category: str = ""
    content: str = ""
    word_count: int = 0
    scraped_at: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Scrapers emit numeric ids for some sources
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("scraped_at", mode="before")
    @classmethod
    def _coerce_scraped_at(cls, value: Any) -> Any:
        return "" if value is None else value


class KBSnapshot(BaseModel):
    """
    The full knowledge base as loaded from the KB document.

    Invariants:
    - total_articles == len(articles)
    - article ids are unique
    """

    model_config = ConfigDict(frozen=True)

    scraped_at: str = ""
    total_articles: int
    categories: list[str] = Field(default_factory=list)
    articles: list[Article]

    @model_validator(mode="before")
    @classmethod
    def _default_total(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("total_articles") is None:
            articles = data.get("articles")
            if isinstance(articles, list):
                data = {**data, "total_articles": len(articles)}
        return data

    @model_validator(mode="after")
    def _check_invariants(self) -> "KBSnapshot":
        if self.total_articles != len(self.articles):
            raise ValueError(
                f"total_articles is {self.total_articles} but "
                f"{len(self.articles)} articles are present"
            )

        seen: set[str] = set()
        for article in self.articles:
            if article.id in seen:
                raise ValueError(f"Duplicate article id: {article.id}")
            seen.add(article.id)

        return self


@dataclass(frozen=True)
class ScoredArticle:
    """
    An article paired with its relevance for one query.

    `score` is the additive lexical score in lexical mode and the cosine
    similarity in [0, 1] in vector mode.
    """

    article: Article
    score: float


class MessageRole(str, Enum):
    """Role of a message in a conversation."""

    USER = "user"
    ASSISTANT = "assistant"


class ConversationMessage(BaseModel):
    """
    A single message in a conversation.

    Conversation history is owned by the caller and passed by value
    into every relay call.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


# =============================================================================
# STREAM EVENTS
# =============================================================================


@dataclass(frozen=True)
class ContentDelta:
    """One incremental fragment of generated answer text."""

    text: str


@dataclass(frozen=True)
class Done:
    """End-of-stream sentinel."""


@dataclass(frozen=True)
class Unrecognized:
    """A well-formed frame that carries nothing for the caller."""

    kind: str | None = None


StreamEvent = ContentDelta | Done | Unrecognized
