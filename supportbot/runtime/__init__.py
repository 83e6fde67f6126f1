"""
Runtime Module

Wires retrieval, context building and the answer relay into chat turns.
"""

from supportbot.runtime.assistant import ChatTurn, Grounding, SupportAssistant, last_user_message
from supportbot.runtime.factory import create_assistant

__all__ = [
    "ChatTurn",
    "Grounding",
    "SupportAssistant",
    "create_assistant",
    "last_user_message",
]
