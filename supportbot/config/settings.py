"""
Settings Management

Provides centralized, type-safe configuration using Pydantic.
Supports environment variables, .env files, and hierarchical config.

Design decisions:
- Using pydantic-settings for validation and type coercion
- Immutable settings after initialization (frozen model)
- Separate concerns: knowledge settings vs. vector settings vs. chat settings
- Prompt text is product copy and lives here, not in code
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = """You are the Moraware AI Assistant - product specialist for CounterGo, Systemize, and Inventory software.

CORE RULES:
- Use ONLY the KB articles provided in the user message
- NO numbered lists, NO headers (##), NO tutorial format
- 2-4 sentences maximum unless complexity requires more
- If KB doesn't have info, say: "Moraware documentation doesn't cover this. Contact support at support.moraware.com"
- Compressed prose only

Answer with KB-backed specificity and compressed clarity."""

DEFAULT_GROUNDING_TEMPLATE = """Use ONLY these Moraware KB articles to answer. NO generic tutorials, NO numbered lists, NO headers.

{context}

USER QUESTION: {question}

ANSWER RULES: 2-4 sentences max. KB content only. No Step 1/Step 2. No "##" headers."""


class KnowledgeSettings(BaseSettings):
    """Knowledge base and retrieval configuration."""

    model_config = SettingsConfigDict(env_prefix="KB_")

    # URL (http/https) or local path of the KB document
    source: str = Field(default="./data/kb-data.json")
    load_timeout: float = Field(default=30.0, gt=0)

    # Static per engine instance
    search_mode: Literal["lexical", "vector"] = "lexical"
    max_results: int = Field(default=10, ge=1)

    # Checked in order, first match wins
    product_keywords: list[str] = Field(
        default=["systemize", "inventory", "countergo"],
    )

    # Context building
    preview_chars: int = Field(default=1000, ge=1)


class VectorSettings(BaseSettings):
    """Vector index and embedding configuration."""

    model_config = SettingsConfigDict(env_prefix="VECTOR_")

    provider: Literal["supabase", "memory"] = "supabase"

    # Supabase settings
    supabase_url: str | None = Field(default=None)
    supabase_key: SecretStr | None = Field(default=None)
    search_function: str = Field(default="search_articles")
    request_timeout: float = Field(default=30.0, gt=0)

    # Similarity search
    match_threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    min_candidates: int = Field(default=15, ge=1)

    # Embedding settings
    embedding_provider: Literal["local", "remote"] = "local"
    embedding_model: str = Field(default="all-MiniLM-L6-v2")
    embedding_dimension: int = Field(default=384, ge=1)
    embed_function: str = Field(default="embed")
    device: str = Field(default="cpu")


class ChatSettings(BaseSettings):
    """Answer-generation endpoint configuration."""

    model_config = SettingsConfigDict(env_prefix="CHAT_")

    endpoint: str = Field(default="http://localhost:8787/api/chat")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    request_timeout: float = Field(default=60.0, gt=0)

    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT)
    grounding_template: str = Field(default=DEFAULT_GROUNDING_TEMPLATE)

    # Caller-level policy: degrade a failed vector search to lexical
    fallback_to_lexical: bool = Field(default=False)


class ObservabilitySettings(BaseSettings):
    """Observability configuration."""

    model_config = SettingsConfigDict(env_prefix="OBS_")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: str | None = Field(default=None)


class Settings(BaseSettings):
    """
    Master settings aggregator.

    This is the single source of truth for all configuration.
    Sub-settings are composed here to maintain clear boundaries.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,  # Immutable after creation
    )

    # Application metadata
    app_name: str = Field(default="SupportBot")
    app_version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)

    # API settings
    api_prefix: str = Field(default="/api")
    cors_origins: list[str] = Field(default=["*"])

    # Component settings (composed)
    knowledge: KnowledgeSettings = Field(default_factory=KnowledgeSettings)
    vector: VectorSettings = Field(default_factory=VectorSettings)
    chat: ChatSettings = Field(default_factory=ChatSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure only one settings instance exists.
    This is safe because settings are frozen/immutable.
    """
    return Settings()
