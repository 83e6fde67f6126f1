"""
Unit Tests - Core

Tests for types, exceptions, settings and structured logging.
"""

import json

import pytest
from pydantic import ValidationError

from supportbot.config.settings import KnowledgeSettings, Settings, VectorSettings
from supportbot.core.exceptions import (
    EmbeddingError,
    RateLimitError,
    RetrievalError,
    SupportBotError,
    TransportError,
)
from supportbot.core.types import Article, ConversationMessage, MessageRole
from supportbot.observability.logging import (
    BufferHandler,
    ConsoleHandler,
    LogLevel,
    StructuredLogger,
    get_logger,
)


class TestTypes:
    """Tests for core types."""

    def test_article_is_immutable(self):
        """Test articles cannot be modified after load."""
        article = Article(id="1", url="u", title="T")

        with pytest.raises(ValidationError):
            article.title = "changed"

    def test_message_to_dict(self):
        """Test messages serialize with a plain role string."""
        message = ConversationMessage(role=MessageRole.ASSISTANT, content="Hello")

        assert message.to_dict() == {"role": "assistant", "content": "Hello"}

    def test_message_rejects_unknown_role(self):
        """Test only user and assistant roles are accepted."""
        with pytest.raises(ValidationError):
            ConversationMessage(role="system", content="x")


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_to_dict(self):
        """Test errors serialize code, message and context."""
        error = EmbeddingError("Query embedding failed", context={"model": "m"})

        assert error.to_dict() == {
            "error": "EMBEDDING_ERROR",
            "message": "Query embedding failed",
            "context": {"model": "m"},
        }

    def test_hierarchy(self):
        """Test subtypes are catchable by their parents."""
        assert issubclass(EmbeddingError, RetrievalError)
        assert issubclass(RateLimitError, TransportError)
        assert issubclass(TransportError, SupportBotError)

    def test_cause_attached(self):
        """Test the original exception is kept as __cause__."""
        cause = ValueError("bad")

        assert SupportBotError("wrapped", cause=cause).__cause__ is cause

    def test_rate_limit_defaults(self):
        """Test rate limits default to status 429."""
        error = RateLimitError("slow down", retry_after=2.5)

        assert error.status_code == 429
        assert error.retry_after == 2.5


class TestSettings:
    """Tests for settings."""

    def test_defaults(self):
        """Test default retrieval configuration."""
        settings = Settings()

        assert settings.knowledge.max_results == 10
        assert settings.knowledge.product_keywords == ["systemize", "inventory", "countergo"]
        assert settings.vector.match_threshold == 0.1
        assert settings.vector.min_candidates == 15
        assert settings.vector.embedding_dimension == 384
        assert settings.chat.temperature == 0.0
        assert settings.chat.fallback_to_lexical is False

    def test_environment_prefix(self, monkeypatch):
        """Test sections read their own environment prefix."""
        monkeypatch.setenv("KB_MAX_RESULTS", "5")
        monkeypatch.setenv("VECTOR_MATCH_THRESHOLD", "0.3")

        assert KnowledgeSettings().max_results == 5
        assert VectorSettings().match_threshold == 0.3

    def test_invalid_search_mode(self):
        """Test invalid configuration fails at construction."""
        with pytest.raises(ValidationError):
            KnowledgeSettings(search_mode="fuzzy")

    def test_api_settings(self):
        """Test only the API options the app reads are exposed."""
        settings = Settings()

        assert settings.api_prefix == "/api"
        assert settings.cors_origins == ["*"]
        assert not {"api_host", "api_port", "environment"} & set(Settings.model_fields)

    def test_settings_frozen(self):
        """Test the master settings are immutable."""
        settings = Settings()

        with pytest.raises(ValidationError):
            settings.debug = True


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_records_data_and_error(self):
        """Test structured fields and error details are recorded."""
        buffer = BufferHandler()
        logger = StructuredLogger("test", level=LogLevel.DEBUG, handlers=[buffer])

        logger.error("Search failed", error=EmbeddingError("down"), mode="vector")

        record = buffer.records[0]
        assert record.data == {"mode": "vector"}
        assert record.error_type == "EmbeddingError"
        assert record.error_code == "EMBEDDING_ERROR"

    def test_level_filtering(self):
        """Test records below the logger level are dropped."""
        buffer = BufferHandler()
        logger = StructuredLogger("test", level=LogLevel.WARNING, handlers=[buffer])

        logger.info("ignored")
        logger.warning("kept")

        assert buffer.messages() == ["kept"]

    def test_context_enrichment(self):
        """Test context variables are attached to records."""
        buffer = BufferHandler()
        logger = StructuredLogger("test", level=LogLevel.DEBUG, handlers=[buffer])

        with logger.context(request_id="req-1"):
            logger.info("inside")
        logger.info("outside")

        assert buffer.records[0].request_id == "req-1"
        assert buffer.records[1].request_id is None

    def test_json_console_output(self, capsys):
        """Test JSON console lines."""
        logger = StructuredLogger("test", level=LogLevel.DEBUG, handlers=[ConsoleHandler(json_output=True)])

        logger.info("Loaded KB articles", total_articles=4)

        line = json.loads(capsys.readouterr().err.strip())
        assert line["message"] == "Loaded KB articles"
        assert line["data"] == {"total_articles": 4}

    def test_get_logger_follows_configuration(self, log_buffer):
        """Test named loggers use the shared handlers."""
        get_logger("supportbot.test").debug("hello")

        assert log_buffer.messages() == ["hello"]
