"""
API Routes Package
"""

from supportbot.api.routes import chat, health, search

__all__ = ["chat", "health", "search"]
