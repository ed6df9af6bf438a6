"""Short-lived server-side values referenced from button payloads.

Buttons only carry an opaque token; the value it stands for (a decrypted key
waiting for a duration choice, the accounts found during an import) stays in
process memory and disappears after ``ttl_seconds``.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, Optional, TypeVar

from .session import Clock, utcnow

T = TypeVar("T")

TOKEN_BYTES = 8  # keeps callback payloads well under Telegram's 64 bytes


@dataclass(frozen=True)
class _Entry(Generic[T]):
    owner_id: int
    value: T
    expires_at: datetime


class PendingStore(Generic[T]):
    """Token -> value map with expiry and owner check."""

    def __init__(self, ttl_seconds: int = 300, clock: Clock = utcnow):
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock
        self._entries: dict[str, _Entry[T]] = {}

    def put(self, owner_id: int, value: T) -> str:
        """Store ``value`` for ``owner_id`` and return the token referring to it."""
        self._purge()
        token = secrets.token_urlsafe(TOKEN_BYTES)
        self._entries[token] = _Entry(owner_id, value, self.clock() + self.ttl)
        return token

    def peek(self, token: str, owner_id: int) -> Optional[T]:
        """Like ``pop`` but leaves the value in place."""
        entry = self._entries.get(token)
        if entry is None or entry.owner_id != owner_id or self.clock() >= entry.expires_at:
            return None
        return entry.value

    def pop(self, token: str, owner_id: int) -> Optional[T]:
        """Consume the value behind ``token``.

        Returns None if the token is unknown, expired, or belongs to another user.
        """
        entry = self._entries.get(token)
        if entry is None or entry.owner_id != owner_id:
            return None
        del self._entries[token]
        if self.clock() >= entry.expires_at:
            return None
        return entry.value

    def discard_owner(self, owner_id: int) -> None:
        for token, entry in list(self._entries.items()):
            if entry.owner_id == owner_id:
                del self._entries[token]

    def _purge(self) -> None:
        now = self.clock()
        for token, entry in list(self._entries.items()):
            if now >= entry.expires_at:
                del self._entries[token]

    def __len__(self) -> int:
        return len(self._entries)
