"""
Reasoning Module

Prompt composition and streaming relay for the answer-generation endpoint.
"""

from supportbot.reasoning.prompts import PromptComposer
from supportbot.reasoning.relay import DeltaCallback, StreamRelay
from supportbot.reasoning.stream_decoder import (
    StreamDecoderState,
    decode_chunk,
    decode_remainder,
    parse_frame,
)

__all__ = [
    "DeltaCallback",
    "PromptComposer",
    "StreamDecoderState",
    "StreamRelay",
    "decode_chunk",
    "decode_remainder",
    "parse_frame",
]
