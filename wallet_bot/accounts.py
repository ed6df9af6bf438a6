"""Account custody: importing keys, account creation orders, activation, deletion."""

from dataclasses import dataclass
from typing import Optional

from .chain.client import ChainClient, KeyAccount
from .db.base import AccountOrderStore, UserStore
from .db.models import AccountOrder, UserCredential
from .errors import (
    AccountAlreadyExists,
    AccountNotYetCreated,
    InvalidInput,
    NoAccount,
    NoPendingOrder,
    PendingOrderExists,
)
from .logging import get_logger
from .vault import crypto
from .vault.session import SessionAuthorizer

logger = get_logger("accounts")

MIN_PASSWORD_LENGTH = 8
DEFAULT_PERMISSION = "active"


def validate_password(password: Optional[str]) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(
            f"Invalid password. Please provide an encryption password (>= {MIN_PASSWORD_LENGTH} characters)."
        )
    return password


@dataclass(frozen=True)
class ImportResult:
    """Outcome of checking an imported key against the chain.

    ``saved`` is set when the key controls exactly one account permission and
    the credential has been written. Otherwise the caller must pick one of
    ``accounts`` and call ``AccountService.select_account``.
    """
    public_key: str
    encrypted_private_key: str
    accounts: list[KeyAccount]
    saved: Optional[UserCredential] = None


class AccountService:
    """Composes the vault, the chain and the account stores."""

    def __init__(
        self,
        users: UserStore,
        account_orders: AccountOrderStore,
        chain: ChainClient,
        sessions: SessionAuthorizer,
    ):
        self.users = users
        self.account_orders = account_orders
        self.chain = chain
        self.sessions = sessions

    # --- Import ---

    async def import_account(self, user_id: int, private_key: str, password: str) -> ImportResult:
        validate_password(password)
        private_key = private_key.strip()
        try:
            public_key = self.chain.public_key_of(private_key)
        except ValueError as e:
            raise InvalidInput("Invalid private key.") from e

        accounts = await self.chain.get_key_accounts(public_key)
        if not accounts:
            raise NoAccount("No account is controlled by this key.")

        encrypted = crypto.encrypt(private_key, password)
        result = ImportResult(public_key=public_key, encrypted_private_key=encrypted, accounts=accounts)

        if len(accounts) == 1:
            saved = await self.select_account(user_id, result, accounts[0])
            return ImportResult(public_key, encrypted, accounts, saved=saved)

        logger.info(f"Key for user {user_id} controls {len(accounts)} accounts; awaiting choice")
        return result

    async def select_account(self, user_id: int, result: ImportResult, account: KeyAccount) -> UserCredential:
        if account not in result.accounts:
            raise InvalidInput("That account is not controlled by the imported key.")

        # A new key invalidates any session unlocked for the previous one
        self.sessions.store.remove(user_id)
        saved = await self.users.save_credential(
            user_id,
            account.account_name,
            result.public_key,
            result.encrypted_private_key,
            account.permission_name,
        )
        logger.info(f"User {user_id} imported {account.account_name}@{account.permission_name}")
        return saved

    # --- Account creation orders ---

    async def get_pending_order(self, user_id: int) -> Optional[AccountOrder]:
        return await self.account_orders.get_pending(user_id)

    async def create_order(self, user_id: int, password: str) -> AccountOrder:
        """Reserve a fresh account name and key pair until the sign-up transfer lands.

        Raises:
            PendingOrderExists: an unactivated order is already outstanding
            AccountAlreadyExists: the generated name is taken; nothing is written
        """
        validate_password(password)

        existing = await self.account_orders.get_pending(user_id)
        if existing is not None:
            raise PendingOrderExists(existing.account_name)

        account_name = self.chain.generate_account_name()
        if await self.chain.account_exists(account_name):
            logger.warning(f"Generated account name {account_name} already exists")
            raise AccountAlreadyExists(account_name)

        key_pair = self.chain.generate_key_pair()
        order = await self.account_orders.create(
            user_id,
            account_name,
            key_pair.public_key,
            crypto.encrypt(key_pair.private_key, password),
        )
        logger.info(f"Account order {order.order_id} created for user {user_id}: {account_name}")
        return order

    async def activate(self, user_id: int) -> UserCredential:
        """Promote the pending order once the account exists on chain.

        Raises:
            NoPendingOrder: nothing to activate
            AccountNotYetCreated: the order stays pending for a later retry
        """
        order = await self.account_orders.get_pending(user_id)
        if order is None:
            raise NoPendingOrder()

        if not await self.chain.account_exists(order.account_name):
            raise AccountNotYetCreated(order.account_name)

        credential = await self.account_orders.promote(order, DEFAULT_PERMISSION)
        self.sessions.store.remove(user_id)
        logger.info(f"Account {order.account_name} activated for user {user_id}")
        return credential

    async def delete_order(self, user_id: int) -> bool:
        removed = await self.account_orders.delete_pending(user_id)
        if removed:
            logger.info(f"Deleted pending account order for user {user_id}")
        return removed > 0

    # --- Deletion ---

    async def delete_account(self, user_id: int) -> None:
        """Forget the stored credential and end any live session."""
        await self.users.clear_credential(user_id)
        self.sessions.store.remove(user_id)
        logger.info(f"Account information deleted for user {user_id}")
