"""
Configuration Module

Centralized configuration management for the support assistant.
"""

from supportbot.config.settings import (
    ChatSettings,
    KnowledgeSettings,
    ObservabilitySettings,
    Settings,
    VectorSettings,
    get_settings,
)

__all__ = [
    "ChatSettings",
    "KnowledgeSettings",
    "ObservabilitySettings",
    "Settings",
    "VectorSettings",
    "get_settings",
]
