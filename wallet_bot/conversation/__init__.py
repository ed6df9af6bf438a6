"""Conversation state: pending reply prompts and typed button commands."""

from .collector import ConversationCollector, Prompt, PromptStore
from .commands import Command, UnknownCommand, decode_callback, encode_callback

__all__ = [
    "ConversationCollector",
    "Prompt",
    "PromptStore",
    "Command",
    "UnknownCommand",
    "decode_callback",
    "encode_callback",
]
