"""
Test Configuration

Shared fixtures and test utilities.
"""

import json
from pathlib import Path

import pytest

from supportbot.core.types import Article, ConversationMessage, KBSnapshot, MessageRole
from supportbot.observability.logging import BufferHandler, LogLevel, configure_logging
from tests.fixtures import SAMPLE_ARTICLES, HashEmbedder, kb_document


@pytest.fixture
def sample_articles() -> list[Article]:
    """Sample KB articles."""
    return [Article.model_validate(a) for a in SAMPLE_ARTICLES]


@pytest.fixture
def sample_snapshot() -> KBSnapshot:
    """Sample KB snapshot."""
    return KBSnapshot.model_validate(kb_document())


@pytest.fixture
def kb_file(tmp_path: Path) -> Path:
    """Sample KB document written to disk."""
    path = tmp_path / "kb-data.json"
    path.write_text(json.dumps(kb_document()), encoding="utf-8")
    return path


@pytest.fixture
def embedder() -> HashEmbedder:
    """Deterministic test embedder."""
    return HashEmbedder()


@pytest.fixture
def sample_messages() -> list[ConversationMessage]:
    """Sample conversation ending with a user question."""
    return [
        ConversationMessage(role=MessageRole.USER, content="Hi"),
        ConversationMessage(role=MessageRole.ASSISTANT, content="Hello! How can I help?"),
        ConversationMessage(role=MessageRole.USER, content="How do I print a quote?"),
    ]


@pytest.fixture
def log_buffer():
    """Capture log records from every logger."""
    buffer = BufferHandler(level=LogLevel.DEBUG)
    configure_logging(level=LogLevel.DEBUG, handlers=[buffer])
    yield buffer
    configure_logging(level=LogLevel.INFO, handlers=[])


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
