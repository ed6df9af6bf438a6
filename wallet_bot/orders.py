"""RAM limit orders: placing, paging and clearing a user's backlog.

Orders are only created, read and deleted here. Status changes to success or
failed are written by the external matching worker.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .db.base import RamOrderStore
from .db.models import RamOrder
from .errors import InvalidInput
from .logging import get_logger
from .vault.session import Clock, utcnow

logger = get_logger("orders")

MAX_PENDING_ORDERS = 5
DEFAULT_PAGE_SIZE = 5


@dataclass(frozen=True)
class OrderPage:
    """One page of a user's orders, newest first."""
    orders: list[RamOrder]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def shown_through(self) -> int:
        """Index of the last order on this page, counting from the newest."""
        return (self.page - 1) * self.page_size + len(self.orders)


class RamOrderManager:
    """Creates, lists and clears a user's RAM orders."""

    def __init__(
        self,
        store: RamOrderStore,
        max_pending: int = MAX_PENDING_ORDERS,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Clock = utcnow,
    ):
        self.store = store
        self.max_pending = max_pending
        self.page_size = page_size
        self.clock = clock

    async def place_order(
        self,
        user_id: int,
        account_name: str,
        ram_bytes: int,
        price_per_kb: Decimal,
    ) -> RamOrder:
        """Record a pending order.

        Raises:
            PendingLimitExceeded: the user already has ``max_pending`` pending orders
            InvalidInput: non-positive size or price
        """
        if ram_bytes <= 0:
            raise InvalidInput("RAM amount must be greater than zero.")
        if price_per_kb <= 0:
            raise InvalidInput("Price per KB must be greater than zero.")

        order = await self.store.insert_if_below_limit(
            user_id,
            account_name,
            ram_bytes,
            price_per_kb,
            self.max_pending,
            self.clock(),
        )
        logger.info(
            f"RAM order {order.order_id} placed for user {user_id}: "
            f"{ram_bytes} bytes to {account_name} at {price_per_kb} EOS/KB"
        )
        return order

    async def list_orders(self, user_id: int, page: int = 1, page_size: Optional[int] = None) -> OrderPage:
        page_size = page_size or self.page_size
        total = await self.store.count(user_id)
        # Stale paging buttons can point past the end once orders are cleared
        last_page = max(math.ceil(total / page_size), 1)
        page = min(max(page, 1), last_page)
        offset = (page - 1) * page_size

        orders = await self.store.list_page(user_id, page_size, offset)
        return OrderPage(orders=orders, total_count=total, page=page, page_size=page_size)

    async def has_orders(self, user_id: int) -> bool:
        return await self.store.count(user_id) > 0

    async def clear_orders(self, user_id: int) -> int:
        """Delete every order the user has, whatever its status."""
        removed = await self.store.clear(user_id)
        logger.info(f"Cleared {removed} RAM order(s) for user {user_id}")
        return removed
