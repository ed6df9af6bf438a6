"""
Signing sessions - hold decrypted private keys in memory for a bounded time.

A session is granted by unlocking with the wallet password and lasts for the
chosen number of hours. Only the expiry is written to the users table; the
decrypted key lives in this process alone, so a restart locks every wallet.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from ..errors import DecryptionFailure
from ..logging import get_logger
from .crypto import decrypt

logger = get_logger("session")

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthorizationResult(str, Enum):
    """Outcome of an unlock attempt."""
    GRANTED = "granted"
    PASSWORD_INCORRECT = "password_incorrect"
    NO_ACCOUNT = "no_account"


@dataclass(frozen=True)
class Session:
    """A decrypted key paired with the moment it stops being usable."""
    private_key: str
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class SessionExpiration:
    """Remaining session time broken into display units."""
    days: int
    hours: int
    minutes: int
    remaining_seconds: int
    timestamp: int  # absolute expiry, unix seconds

    def describe(self) -> str:
        parts = []
        if self.days:
            parts.append(f"{self.days} days")
        if self.hours:
            parts.append(f"{self.hours} hours")
        if self.minutes:
            parts.append(f"{self.minutes} minutes")
        return " ".join(parts) or "less than a minute"


class SessionStore:
    """Process-wide map of user id to Session.

    Records are immutable and only ever replaced whole, so a reader never sees
    a key paired with another session's expiry.
    """

    def __init__(self):
        self._sessions: dict[int, Session] = {}

    def get(self, user_id: int) -> Optional[Session]:
        return self._sessions.get(user_id)

    def put(self, user_id: int, session: Session) -> None:
        self._sessions[user_id] = session

    def remove(self, user_id: int, expected: Optional[Session] = None) -> None:
        """Drop the user's session; with ``expected``, only if it is still current."""
        if expected is not None and self._sessions.get(user_id) is not expected:
            return
        self._sessions.pop(user_id, None)

    def items(self) -> list[tuple[int, Session]]:
        return list(self._sessions.items())

    def __len__(self) -> int:
        return len(self._sessions)


class SessionAuthorizer:
    """Grants, queries and expires signing sessions.

    ``users`` is any store exposing ``get(user_id)`` and
    ``set_session_expiration(user_id, expires_at)``.
    """

    def __init__(self, users, store: SessionStore, clock: Clock = utcnow):
        self.users = users
        self.store = store
        self.clock = clock

    async def authorize(self, user_id: int, password: str, duration_hours: int) -> AuthorizationResult:
        """Unlock the user's stored key for ``duration_hours``.

        A wrong password leaves any existing session untouched.
        """
        user = await self.users.get(user_id)
        if user is None or not user.has_credential:
            return AuthorizationResult.NO_ACCOUNT

        try:
            private_key = decrypt(user.encrypted_private_key, password)
        except DecryptionFailure:
            logger.warning(f"Unlock rejected for user {user_id}: incorrect password")
            return AuthorizationResult.PASSWORD_INCORRECT

        await self.grant(user_id, private_key, duration_hours)
        return AuthorizationResult.GRANTED

    async def grant(self, user_id: int, private_key: str, duration_hours: int) -> Session:
        """Install an already-decrypted key, replacing any prior session."""
        if duration_hours <= 0:
            raise ValueError("Session duration must be positive")

        session = Session(
            private_key=private_key,
            expires_at=self.clock() + timedelta(hours=duration_hours),
        )
        # Persist first: if the write fails the previous session stays in place
        await self.users.set_session_expiration(user_id, session.expires_at)
        self.store.put(user_id, session)
        logger.info(f"Session granted for user {user_id} ({duration_hours}h)")
        return session

    async def lock(self, user_id: int) -> None:
        """End the user's session immediately."""
        self.store.remove(user_id)
        await self.users.set_session_expiration(user_id, None)
        logger.info(f"Session locked for user {user_id}")

    def _live_session(self, user_id: int) -> Optional[Session]:
        session = self.store.get(user_id)
        if session is None:
            return None
        if not session.is_live(self.clock()):
            self.store.remove(user_id, expected=session)
            logger.debug(f"Session for user {user_id} expired")
            return None
        return session

    def is_active(self, user_id: int) -> bool:
        return self._live_session(user_id) is not None

    def get_private_key(self, user_id: int) -> Optional[str]:
        """The decrypted key, only while the session is live."""
        session = self._live_session(user_id)
        return session.private_key if session else None

    def get_expiration(self, user_id: int) -> Optional[SessionExpiration]:
        session = self._live_session(user_id)
        if session is None:
            return None

        remaining = int((session.expires_at - self.clock()).total_seconds())
        remaining = max(remaining, 0)
        return SessionExpiration(
            days=remaining // 86400,
            hours=remaining % 86400 // 3600,
            minutes=remaining % 3600 // 60,
            remaining_seconds=remaining,
            timestamp=int(session.expires_at.timestamp()),
        )

    def purge_expired(self) -> int:
        """Drop every expired session from memory. Returns how many were dropped."""
        now = self.clock()
        purged = 0
        for user_id, session in self.store.items():
            if not session.is_live(now):
                self.store.remove(user_id, expected=session)
                purged += 1
        if purged:
            logger.debug(f"Purged {purged} expired session(s)")
        return purged
