"""
Unit Tests - Prompt Composition
"""

from supportbot.config.settings import DEFAULT_SYSTEM_PROMPT, ChatSettings
from supportbot.core.types import ConversationMessage, MessageRole
from supportbot.reasoning.prompts import PromptComposer

TEMPLATE = "CONTEXT:\n{context}\nQUESTION: {question}"


def user(content: str) -> ConversationMessage:
    return ConversationMessage(role=MessageRole.USER, content=content)


def assistant(content: str) -> ConversationMessage:
    return ConversationMessage(role=MessageRole.ASSISTANT, content=content)


class TestPromptComposer:
    """Tests for PromptComposer."""

    def test_context_injected_into_last_user_message(self, sample_messages):
        """Test only the final user message is wrapped."""
        composer = PromptComposer(grounding_template=TEMPLATE)

        messages = composer.compose_messages(sample_messages, "[Source 1: Print a Quote]")

        assert messages[0] == {"role": "user", "content": "Hi"}
        assert messages[-1] == {
            "role": "user",
            "content": "CONTEXT:\n[Source 1: Print a Quote]\nQUESTION: How do I print a quote?",
        }

    def test_no_context_leaves_messages_unchanged(self, sample_messages):
        """Test messages pass through when there is no context."""
        messages = PromptComposer(grounding_template=TEMPLATE).compose_messages(sample_messages, "")

        assert messages == [m.to_dict() for m in sample_messages]

    def test_blank_messages_dropped(self):
        """Test empty and whitespace-only messages are removed."""
        messages = PromptComposer().compose_messages([user("  "), assistant(""), user("Hi")], "")

        assert messages == [{"role": "user", "content": "Hi"}]

    def test_last_message_from_assistant_not_wrapped(self):
        """Test context is not injected when the user did not speak last."""
        composer = PromptComposer(grounding_template=TEMPLATE)

        messages = composer.compose_messages([user("Hi"), assistant("Hello")], "ctx")

        assert messages == [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
        ]

    def test_build_request(self):
        """Test the endpoint payload."""
        composer = PromptComposer(system_prompt="Be brief.", temperature=0.0)

        request = composer.build_request([user("Hi")], "")

        assert request == {
            "messages": [{"role": "user", "content": "Hi"}],
            "system": "Be brief.",
            "temperature": 0.0,
        }

    def test_from_settings(self):
        """Test prompts come from configuration."""
        composer = PromptComposer.from_settings(ChatSettings(temperature=0.5))

        request = composer.build_request([user("Hi")], "")

        assert request["system"] == DEFAULT_SYSTEM_PROMPT
        assert request["temperature"] == 0.5
