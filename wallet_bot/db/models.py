"""Database models for the wallet bot."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


@dataclass
class UserCredential:
    """A chat user and the account they custody with the bot.

    ``encrypted_private_key`` is set iff ``account_name`` and ``public_key`` are.
    """
    user_id: int
    account_name: Optional[str] = None
    public_key: Optional[str] = None
    encrypted_private_key: Optional[str] = None
    permission_name: Optional[str] = None
    session_expiration: Optional[datetime] = None

    @property
    def has_credential(self) -> bool:
        return bool(self.account_name and self.public_key and self.encrypted_private_key)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization. Never includes the key."""
        return {
            "user_id": self.user_id,
            "account_name": self.account_name,
            "public_key": self.public_key,
            "permission_name": self.permission_name,
            "session_expiration": self.session_expiration.isoformat() if self.session_expiration else None,
        }


@dataclass
class AccountOrder:
    """A provisional account awaiting on-chain creation."""
    order_id: int
    user_id: int
    account_name: str
    public_key: str
    encrypted_private_key: str
    activated: bool = False


class RamOrderStatus(str, Enum):
    """Status of a RAM purchase order."""
    PENDING = "pending"  # Waiting for the matching worker
    SUCCESS = "success"  # Executed, transaction_id set
    FAILED = "failed"    # Rejected, failure_reason set


@dataclass
class RamOrder:
    """A limit order to buy RAM once the price drops to ``price_per_kb``."""
    order_id: int
    user_id: int
    account_name: str
    ram_bytes: int
    price_per_kb: Decimal
    status: RamOrderStatus
    order_date: datetime
    transaction_id: Optional[str] = None
    failure_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "user_id": self.user_id,
            "account_name": self.account_name,
            "ram_bytes": self.ram_bytes,
            "price_per_kb": str(self.price_per_kb),
            "status": self.status.value,
            "order_date": self.order_date.isoformat(),
            "transaction_id": self.transaction_id,
            "failure_reason": self.failure_reason,
        }
