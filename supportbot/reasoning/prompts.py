"""
Prompt Composition

Builds the request body for the answer-generation endpoint.

The system prompt and grounding template are configuration strings. KB
context is injected into the last user message.
"""

from collections.abc import Sequence
from typing import Any

from supportbot.config.settings import (
    DEFAULT_GROUNDING_TEMPLATE,
    DEFAULT_SYSTEM_PROMPT,
    ChatSettings,
)
from supportbot.core.types import ConversationMessage, MessageRole


class PromptComposer:
    """Turns conversation history + KB context into an endpoint payload."""

    def __init__(
        self,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        grounding_template: str = DEFAULT_GROUNDING_TEMPLATE,
        temperature: float = 0.0,
    ):
        self._system_prompt = system_prompt
        self._grounding_template = grounding_template
        self._temperature = temperature

    @classmethod
    def from_settings(cls, settings: ChatSettings) -> "PromptComposer":
        return cls(
            system_prompt=settings.system_prompt,
            grounding_template=settings.grounding_template,
            temperature=settings.temperature,
        )

    def compose_messages(
        self,
        messages: Sequence[ConversationMessage],
        context: str,
    ) -> list[dict[str, str]]:
        """
        Convert messages to endpoint dicts.

        Blank messages are dropped. When there is context and the last
        message is from the user, that message is wrapped in the grounding
        template.
        """
        converted = [m.to_dict() for m in messages if m.content and m.content.strip()]

        if context and converted and converted[-1]["role"] == MessageRole.USER.value:
            question = converted[-1]["content"]
            converted[-1] = {
                "role": MessageRole.USER.value,
                "content": self._grounding_template.format(context=context, question=question),
            }

        return converted

    def build_request(
        self,
        messages: Sequence[ConversationMessage],
        context: str,
    ) -> dict[str, Any]:
        """Request body: {messages, system, temperature}."""
        return {
            "messages": self.compose_messages(messages, context),
            "system": self._system_prompt,
            "temperature": self._temperature,
        }
