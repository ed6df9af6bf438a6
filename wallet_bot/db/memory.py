"""In-memory backing store with the same semantics as the Postgres repositories.

Used by tests and by ``--memory-store`` local runs. Every method completes
without awaiting, so each call is atomic with respect to other coroutines.
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..errors import NoPendingOrder, PendingLimitExceeded, PendingOrderExists
from .models import AccountOrder, RamOrder, RamOrderStatus, UserCredential


class MemoryDatabase:
    """Tables shared by the in-memory repositories."""

    def __init__(self) -> None:
        self.users: dict[int, UserCredential] = {}
        self.account_orders: dict[int, AccountOrder] = {}
        self.ram_orders: dict[int, RamOrder] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)


class MemoryUserRepository:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def get(self, user_id: int) -> Optional[UserCredential]:
        user = self.db.users.get(user_id)
        return replace(user) if user else None

    async def ensure(self, user_id: int) -> UserCredential:
        user = self.db.users.setdefault(user_id, UserCredential(user_id=user_id))
        return replace(user)

    async def save_credential(
        self,
        user_id: int,
        account_name: str,
        public_key: str,
        encrypted_private_key: str,
        permission_name: str,
    ) -> UserCredential:
        current = self.db.users.get(user_id) or UserCredential(user_id=user_id)
        user = replace(
            current,
            account_name=account_name,
            public_key=public_key,
            encrypted_private_key=encrypted_private_key,
            permission_name=permission_name,
        )
        self.db.users[user_id] = user
        return replace(user)

    async def set_session_expiration(self, user_id: int, expires_at: Optional[datetime]) -> None:
        user = self.db.users.get(user_id)
        if user is not None:
            self.db.users[user_id] = replace(user, session_expiration=expires_at)

    async def clear_credential(self, user_id: int) -> None:
        if user_id in self.db.users:
            self.db.users[user_id] = UserCredential(user_id=user_id)


class MemoryAccountOrderRepository:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def get_pending(self, user_id: int) -> Optional[AccountOrder]:
        pending = [
            o for o in self.db.account_orders.values()
            if o.user_id == user_id and not o.activated
        ]
        if not pending:
            return None
        return replace(max(pending, key=lambda o: o.order_id))

    async def create(
        self,
        user_id: int,
        account_name: str,
        public_key: str,
        encrypted_private_key: str,
    ) -> AccountOrder:
        existing = await self.get_pending(user_id)
        if existing is not None:
            raise PendingOrderExists(existing.account_name)

        order = AccountOrder(
            order_id=self.db.next_id(),
            user_id=user_id,
            account_name=account_name,
            public_key=public_key,
            encrypted_private_key=encrypted_private_key,
        )
        self.db.account_orders[order.order_id] = order
        return replace(order)

    async def promote(self, order: AccountOrder, permission_name: str) -> UserCredential:
        stored = self.db.account_orders.get(order.order_id)
        if stored is None or stored.activated:
            raise NoPendingOrder()

        self.db.account_orders[order.order_id] = replace(stored, activated=True)
        current = self.db.users.get(order.user_id) or UserCredential(user_id=order.user_id)
        user = replace(
            current,
            account_name=stored.account_name,
            public_key=stored.public_key,
            encrypted_private_key=stored.encrypted_private_key,
            permission_name=permission_name,
        )
        self.db.users[order.user_id] = user
        return replace(user)

    async def delete_pending(self, user_id: int) -> int:
        doomed = [
            order_id for order_id, o in self.db.account_orders.items()
            if o.user_id == user_id and not o.activated
        ]
        for order_id in doomed:
            del self.db.account_orders[order_id]
        return len(doomed)


class MemoryRamOrderRepository:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    def _for_user(self, user_id: int) -> list[RamOrder]:
        return [o for o in self.db.ram_orders.values() if o.user_id == user_id]

    async def insert_if_below_limit(
        self,
        user_id: int,
        account_name: str,
        ram_bytes: int,
        price_per_kb: Decimal,
        limit: int,
        order_date: datetime,
    ) -> RamOrder:
        pending = sum(1 for o in self._for_user(user_id) if o.status == RamOrderStatus.PENDING)
        if pending >= limit:
            raise PendingLimitExceeded(limit)

        order = RamOrder(
            order_id=self.db.next_id(),
            user_id=user_id,
            account_name=account_name,
            ram_bytes=ram_bytes,
            price_per_kb=price_per_kb,
            status=RamOrderStatus.PENDING,
            order_date=order_date,
        )
        self.db.ram_orders[order.order_id] = order
        return replace(order)

    async def count_pending(self, user_id: int) -> int:
        return sum(1 for o in self._for_user(user_id) if o.status == RamOrderStatus.PENDING)

    async def list_page(self, user_id: int, limit: int, offset: int) -> list[RamOrder]:
        ordered = sorted(
            self._for_user(user_id),
            key=lambda o: (o.order_date, o.order_id),
            reverse=True,
        )
        return [replace(o) for o in ordered[offset:offset + limit]]

    async def count(self, user_id: int) -> int:
        return len(self._for_user(user_id))

    async def clear(self, user_id: int) -> int:
        doomed = [o.order_id for o in self._for_user(user_id)]
        for order_id in doomed:
            del self.db.ram_orders[order_id]
        return len(doomed)

    def set_status(
        self,
        order_id: int,
        status: RamOrderStatus,
        transaction_id: Optional[str] = None,
        failure_reason: Optional[str] = None,
    ) -> None:
        """Stand-in for the external matching worker's result write."""
        order = self.db.ram_orders[order_id]
        self.db.ram_orders[order_id] = replace(
            order,
            status=status,
            transaction_id=transaction_id,
            failure_reason=failure_reason,
        )
