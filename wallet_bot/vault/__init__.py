"""Vault module: private key encryption and time-bounded signing sessions."""

from .crypto import derive_key, encrypt, decrypt
from .pending import PendingStore
from .session import (
    AuthorizationResult,
    Session,
    SessionAuthorizer,
    SessionExpiration,
    SessionStore,
)

__all__ = [
    'derive_key',
    'encrypt',
    'decrypt',
    'PendingStore',
    'AuthorizationResult',
    'Session',
    'SessionAuthorizer',
    'SessionExpiration',
    'SessionStore',
]
