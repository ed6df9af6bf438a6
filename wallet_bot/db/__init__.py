"""Database module for the wallet bot."""

from dataclasses import dataclass

import asyncpg

from .base import AccountOrderStore, RamOrderStore, UserStore
from .connection import close_db, init_db, run_migrations
from .memory import (
    MemoryAccountOrderRepository,
    MemoryDatabase,
    MemoryRamOrderRepository,
    MemoryUserRepository,
)
from .models import AccountOrder, RamOrder, RamOrderStatus, UserCredential
from .repositories import AccountOrderRepository, RamOrderRepository, UserRepository


@dataclass
class Repositories:
    """The three stores the bot writes to."""
    users: UserStore
    account_orders: AccountOrderStore
    ram_orders: RamOrderStore


def postgres_repositories(pool: asyncpg.Pool) -> Repositories:
    return Repositories(
        users=UserRepository(pool),
        account_orders=AccountOrderRepository(pool),
        ram_orders=RamOrderRepository(pool),
    )


def memory_repositories(db: MemoryDatabase | None = None) -> Repositories:
    db = db or MemoryDatabase()
    return Repositories(
        users=MemoryUserRepository(db),
        account_orders=MemoryAccountOrderRepository(db),
        ram_orders=MemoryRamOrderRepository(db),
    )


__all__ = [
    "run_migrations",
    "init_db",
    "close_db",
    "Repositories",
    "postgres_repositories",
    "memory_repositories",
    "MemoryDatabase",
    "UserRepository",
    "AccountOrderRepository",
    "RamOrderRepository",
    "UserCredential",
    "AccountOrder",
    "RamOrder",
    "RamOrderStatus",
]
