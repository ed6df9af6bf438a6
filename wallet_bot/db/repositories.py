"""Postgres repositories for users, account orders and RAM orders."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

import asyncpg

from ..errors import NoPendingOrder, PendingLimitExceeded, PendingOrderExists
from ..logging import get_logger
from .models import AccountOrder, RamOrder, RamOrderStatus, UserCredential

logger = get_logger("database")


def _row_to_user(row: asyncpg.Record) -> UserCredential:
    return UserCredential(
        user_id=row["user_id"],
        account_name=row["eos_account_name"],
        public_key=row["eos_public_key"],
        encrypted_private_key=row["eos_private_key"],
        permission_name=row["permission_name"],
        session_expiration=row["session_expiration"],
    )


def _row_to_account_order(row: asyncpg.Record) -> AccountOrder:
    return AccountOrder(
        order_id=row["order_id"],
        user_id=row["user_id"],
        account_name=row["eos_account_name"],
        public_key=row["eos_public_key"],
        encrypted_private_key=row["eos_private_key"],
        activated=row["activated"],
    )


def _row_to_ram_order(row: asyncpg.Record) -> RamOrder:
    return RamOrder(
        order_id=row["order_id"],
        user_id=row["user_id"],
        account_name=row["eos_account_name"],
        ram_bytes=row["ram_bytes"],
        price_per_kb=row["price_per_kb"],
        status=RamOrderStatus(row["order_status"]),
        order_date=row["order_date"],
        transaction_id=row["transaction_id"],
        failure_reason=row["failure_reason"],
    )


async def _lock_user(conn: asyncpg.Connection, scope: str, user_id: int) -> None:
    """Serialize writers for one user until the enclosing transaction ends."""
    await conn.execute(
        "SELECT pg_advisory_xact_lock(hashtextextended($1, 0))",
        f"{scope}:{user_id}",
    )


_UPSERT_CREDENTIAL = """
    INSERT INTO users (user_id, eos_account_name, eos_public_key, eos_private_key, permission_name)
    VALUES ($1, $2, $3, $4, $5)
    ON CONFLICT (user_id) DO UPDATE SET
        eos_account_name = EXCLUDED.eos_account_name,
        eos_public_key = EXCLUDED.eos_public_key,
        eos_private_key = EXCLUDED.eos_private_key,
        permission_name = EXCLUDED.permission_name
    RETURNING *
"""


class UserRepository:
    """Repository for the users table."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get(self, user_id: int) -> Optional[UserCredential]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("SELECT * FROM users WHERE user_id = $1", user_id)
            return _row_to_user(row) if row else None

    async def ensure(self, user_id: int) -> UserCredential:
        """Create the user's row on first contact."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO users (user_id) VALUES ($1)
                ON CONFLICT (user_id) DO UPDATE SET user_id = EXCLUDED.user_id
                RETURNING *
                """,
                user_id,
            )
            return _row_to_user(row)

    async def save_credential(
        self,
        user_id: int,
        account_name: str,
        public_key: str,
        encrypted_private_key: str,
        permission_name: str,
    ) -> UserCredential:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                _UPSERT_CREDENTIAL,
                user_id, account_name, public_key, encrypted_private_key, permission_name,
            )
            logger.info(f"Credential saved for user {user_id} ({account_name}@{permission_name})")
            return _row_to_user(row)

    async def set_session_expiration(self, user_id: int, expires_at: Optional[datetime]) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(
                "UPDATE users SET session_expiration = $2 WHERE user_id = $1",
                user_id, expires_at,
            )

    async def clear_credential(self, user_id: int) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                UPDATE users SET
                    eos_account_name = NULL,
                    eos_public_key = NULL,
                    eos_private_key = NULL,
                    permission_name = NULL,
                    session_expiration = NULL
                WHERE user_id = $1
                """,
                user_id,
            )
            logger.info(f"Credential cleared for user {user_id}")


class AccountOrderRepository:
    """Repository for account creation orders."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get_pending(self, user_id: int) -> Optional[AccountOrder]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT * FROM account_orders
                WHERE user_id = $1 AND activated = FALSE
                ORDER BY order_id DESC LIMIT 1
                """,
                user_id,
            )
            return _row_to_account_order(row) if row else None

    async def create(
        self,
        user_id: int,
        account_name: str,
        public_key: str,
        encrypted_private_key: str,
    ) -> AccountOrder:
        """Insert a new order unless one is already waiting for activation."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                await _lock_user(conn, "account_orders", user_id)
                existing = await conn.fetchval(
                    "SELECT eos_account_name FROM account_orders WHERE user_id = $1 AND activated = FALSE",
                    user_id,
                )
                if existing:
                    raise PendingOrderExists(existing)

                row = await conn.fetchrow(
                    """
                    INSERT INTO account_orders (user_id, eos_account_name, eos_public_key, eos_private_key)
                    VALUES ($1, $2, $3, $4)
                    RETURNING *
                    """,
                    user_id, account_name, public_key, encrypted_private_key,
                )
                return _row_to_account_order(row)

    async def promote(self, order: AccountOrder, permission_name: str) -> UserCredential:
        """Copy the order into the user's credential and mark it activated, atomically."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                status = await conn.execute(
                    "UPDATE account_orders SET activated = TRUE WHERE order_id = $1 AND activated = FALSE",
                    order.order_id,
                )
                if status == "UPDATE 0":
                    raise NoPendingOrder()

                row = await conn.fetchrow(
                    _UPSERT_CREDENTIAL,
                    order.user_id,
                    order.account_name,
                    order.public_key,
                    order.encrypted_private_key,
                    permission_name,
                )
                return _row_to_user(row)

    async def delete_pending(self, user_id: int) -> int:
        async with self.pool.acquire() as conn:
            status = await conn.execute(
                "DELETE FROM account_orders WHERE user_id = $1 AND activated = FALSE",
                user_id,
            )
            return int(status.split()[-1])


class RamOrderRepository:
    """Repository for RAM limit orders."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def insert_if_below_limit(
        self,
        user_id: int,
        account_name: str,
        ram_bytes: int,
        price_per_kb: Decimal,
        limit: int,
        order_date: datetime,
    ) -> RamOrder:
        """Count pending orders and insert in one transaction."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                await _lock_user(conn, "ram_orders", user_id)
                pending = await conn.fetchval(
                    "SELECT COUNT(*) FROM ram_orders WHERE user_id = $1 AND order_status = $2",
                    user_id, RamOrderStatus.PENDING.value,
                )
                if pending >= limit:
                    raise PendingLimitExceeded(limit)

                row = await conn.fetchrow(
                    """
                    INSERT INTO ram_orders
                        (user_id, eos_account_name, ram_bytes, price_per_kb, order_status, order_date)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING *
                    """,
                    user_id, account_name, ram_bytes, price_per_kb,
                    RamOrderStatus.PENDING.value, order_date,
                )
                return _row_to_ram_order(row)

    async def count_pending(self, user_id: int) -> int:
        async with self.pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT COUNT(*) FROM ram_orders WHERE user_id = $1 AND order_status = $2",
                user_id, RamOrderStatus.PENDING.value,
            )

    async def list_page(self, user_id: int, limit: int, offset: int) -> list[RamOrder]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT * FROM ram_orders
                WHERE user_id = $1
                ORDER BY order_date DESC, order_id DESC
                LIMIT $2 OFFSET $3
                """,
                user_id, limit, offset,
            )
            return [_row_to_ram_order(row) for row in rows]

    async def count(self, user_id: int) -> int:
        async with self.pool.acquire() as conn:
            return await conn.fetchval("SELECT COUNT(*) FROM ram_orders WHERE user_id = $1", user_id)

    async def clear(self, user_id: int) -> int:
        async with self.pool.acquire() as conn:
            status = await conn.execute("DELETE FROM ram_orders WHERE user_id = $1", user_id)
            return int(status.split()[-1])
