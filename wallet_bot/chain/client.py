"""Contracts for the blockchain collaborators.

``ChainClient`` is everything the bot needs from the chain. ``Signer`` is the
part supplied by an external key/signing library: deriving public keys,
generating key pairs, and signing and broadcasting actions.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol


@dataclass(frozen=True)
class KeyPair:
    private_key: str
    public_key: str


@dataclass(frozen=True)
class KeyAccount:
    """An account permission controlled by a public key."""
    account_name: str
    permission_name: str


@dataclass(frozen=True)
class ResourceUsage:
    """RAM in bytes, NET in bytes, CPU in microseconds."""
    ram_used: int
    ram_quota: int
    net_used: int
    net_max: int
    cpu_used: int
    cpu_max: int


class Signer(Protocol):
    def public_key_of(self, private_key: str) -> str:
        """Raises ValueError for malformed keys."""
        ...

    def generate_key_pair(self) -> KeyPair: ...

    async def push_actions(self, private_key: str, actions: list[dict]) -> str:
        """Sign and broadcast ``actions``; return the transaction id.

        Raises ChainError on rejection.
        """
        ...


class ChainClient(Protocol):
    async def account_exists(self, account_name: str) -> bool: ...

    def generate_key_pair(self) -> KeyPair: ...

    def generate_account_name(self) -> str: ...

    def public_key_of(self, private_key: str) -> str: ...

    async def get_key_accounts(self, public_key: str) -> list[KeyAccount]: ...

    async def get_balance(self, account_name: str) -> Decimal: ...

    async def get_account_resource_usage(self, account_name: str) -> ResourceUsage: ...

    async def get_ram_price(self) -> Decimal: ...

    async def transfer(
        self,
        signing_key: str,
        sender: str,
        receiver: str,
        amount: Decimal,
        memo: str = "",
        permission: str = "active",
    ) -> str: ...

    async def buy_ram(
        self,
        signing_key: str,
        payer: str,
        receiver: str,
        eos_amount: Decimal,
        permission: str = "active",
    ) -> str: ...

    async def buy_ram_bytes(
        self,
        signing_key: str,
        payer: str,
        receiver: str,
        ram_bytes: int,
        permission: str = "active",
    ) -> str: ...
