"""
Per-chat "wait for the next reply" slots.

Each chat has at most one armed prompt. Arming a new prompt replaces the old
one without notifying whoever armed it (last arm wins), and prompts never
time out. The next message from the chat consumes the slot whether or not the
handler accepts the text.
"""

from dataclasses import dataclass, field
from itertools import count
from typing import Awaitable, Callable, Optional

from ..logging import get_logger

logger = get_logger("conversation")

ReplyHandler = Callable[[str], Awaitable[None]]

_prompt_ids = count(1)


@dataclass(frozen=True)
class Prompt:
    """An armed expectation for the next message from one chat."""
    handler: ReplyHandler
    label: str = ""
    prompt_id: int = field(default_factory=lambda: next(_prompt_ids))


class PromptStore:
    """Process-wide map of chat id to the armed Prompt."""

    def __init__(self):
        self._slots: dict[int, Prompt] = {}

    def get(self, chat_id: int) -> Optional[Prompt]:
        return self._slots.get(chat_id)

    def put(self, chat_id: int, prompt: Prompt) -> Optional[Prompt]:
        """Arm ``prompt`` and return whatever it replaced."""
        previous = self._slots.get(chat_id)
        self._slots[chat_id] = prompt
        return previous

    def take(self, chat_id: int) -> Optional[Prompt]:
        return self._slots.pop(chat_id, None)

    def __len__(self) -> int:
        return len(self._slots)


class ConversationCollector:
    """Routes a chat's next free-text message to the flow that asked for it."""

    def __init__(self, store: PromptStore):
        self.store = store

    def prompt(self, chat_id: int, on_reply: ReplyHandler, label: str = "") -> Prompt:
        armed = Prompt(handler=on_reply, label=label)
        replaced = self.store.put(chat_id, armed)
        if replaced is not None:
            logger.debug(
                f"Chat {chat_id}: prompt '{replaced.label}' superseded by '{label}'"
            )
        return armed

    def is_armed(self, chat_id: int) -> bool:
        return self.store.get(chat_id) is not None

    def abandon(self, chat_id: int) -> Optional[Prompt]:
        """Consume the slot without running its handler.

        Used when the next message is a slash command, which is routed as a
        command instead of being read as the awaited reply.
        """
        dropped = self.store.take(chat_id)
        if dropped is not None:
            logger.debug(f"Chat {chat_id}: prompt '{dropped.label}' abandoned")
        return dropped

    async def deliver(self, chat_id: int, text: str) -> bool:
        """Hand ``text`` to the armed handler, if any.

        The slot is cleared before the handler runs, so a handler may arm the
        next prompt of its chain. Returns False when nothing was armed.
        """
        armed = self.store.take(chat_id)
        if armed is None:
            return False
        await armed.handler(text)
        return True
