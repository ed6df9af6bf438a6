"""Storage interfaces shared by the Postgres and in-memory backends."""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from .models import AccountOrder, RamOrder, UserCredential


class UserStore(Protocol):
    async def get(self, user_id: int) -> Optional[UserCredential]: ...

    async def ensure(self, user_id: int) -> UserCredential: ...

    async def save_credential(
        self,
        user_id: int,
        account_name: str,
        public_key: str,
        encrypted_private_key: str,
        permission_name: str,
    ) -> UserCredential: ...

    async def set_session_expiration(self, user_id: int, expires_at: Optional[datetime]) -> None: ...

    async def clear_credential(self, user_id: int) -> None: ...


class AccountOrderStore(Protocol):
    async def get_pending(self, user_id: int) -> Optional[AccountOrder]: ...

    async def create(
        self,
        user_id: int,
        account_name: str,
        public_key: str,
        encrypted_private_key: str,
    ) -> AccountOrder: ...

    async def promote(self, order: AccountOrder, permission_name: str) -> UserCredential: ...

    async def delete_pending(self, user_id: int) -> int: ...


class RamOrderStore(Protocol):
    async def insert_if_below_limit(
        self,
        user_id: int,
        account_name: str,
        ram_bytes: int,
        price_per_kb: Decimal,
        limit: int,
        order_date: datetime,
    ) -> RamOrder: ...

    async def count_pending(self, user_id: int) -> int: ...

    async def list_page(self, user_id: int, limit: int, offset: int) -> list[RamOrder]: ...

    async def count(self, user_id: int) -> int: ...

    async def clear(self, user_id: int) -> int: ...
