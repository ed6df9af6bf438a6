"""ChainClient built from the RPC reader and an external signer."""

from decimal import Decimal

from ..errors import ChainError
from ..logging import get_logger
from .client import KeyAccount, KeyPair, ResourceUsage, Signer
from .faults import classify_fault
from .names import generate_account_name
from .rpc import EosRpcClient

logger = get_logger("chain")

EOS_PRECISION = Decimal("0.0001")


def format_eos(amount: Decimal) -> str:
    """Decimal('1.5') -> '1.5000 EOS'"""
    return f"{amount.quantize(EOS_PRECISION)} EOS"


class EosChain:
    """Reads go to the chain API; signed actions go through ``signer``.

    Signer faults are classified here so callers can tell resource
    exhaustion apart from other rejections.
    """

    def __init__(self, rpc: EosRpcClient, signer: Signer):
        self.rpc = rpc
        self.signer = signer

    async def account_exists(self, account_name: str) -> bool:
        return await self.rpc.account_exists(account_name)

    def generate_key_pair(self) -> KeyPair:
        return self.signer.generate_key_pair()

    def generate_account_name(self) -> str:
        return generate_account_name()

    def public_key_of(self, private_key: str) -> str:
        return self.signer.public_key_of(private_key)

    async def get_key_accounts(self, public_key: str) -> list[KeyAccount]:
        return await self.rpc.get_key_accounts(public_key)

    async def get_balance(self, account_name: str) -> Decimal:
        return await self.rpc.get_balance(account_name)

    async def get_account_resource_usage(self, account_name: str) -> ResourceUsage:
        return await self.rpc.get_account_resource_usage(account_name)

    async def get_ram_price(self) -> Decimal:
        return await self.rpc.get_ram_price()

    async def _push(self, signing_key: str, actions: list[dict]) -> str:
        try:
            tx_id = await self.signer.push_actions(signing_key, actions)
        except ChainError as e:
            raise classify_fault(e) from e
        logger.info(f"Broadcast {actions[0]['account']}::{actions[0]['name']} as {tx_id}")
        return tx_id

    async def transfer(
        self,
        signing_key: str,
        sender: str,
        receiver: str,
        amount: Decimal,
        memo: str = "",
        permission: str = "active",
    ) -> str:
        return await self._push(signing_key, [{
            "account": "eosio.token",
            "name": "transfer",
            "authorization": [{"actor": sender, "permission": permission}],
            "data": {
                "from": sender,
                "to": receiver,
                "quantity": format_eos(amount),
                "memo": memo,
            },
        }])

    async def buy_ram(
        self,
        signing_key: str,
        payer: str,
        receiver: str,
        eos_amount: Decimal,
        permission: str = "active",
    ) -> str:
        return await self._push(signing_key, [{
            "account": "eosio",
            "name": "buyram",
            "authorization": [{"actor": payer, "permission": permission}],
            "data": {"payer": payer, "receiver": receiver, "quant": format_eos(eos_amount)},
        }])

    async def buy_ram_bytes(
        self,
        signing_key: str,
        payer: str,
        receiver: str,
        ram_bytes: int,
        permission: str = "active",
    ) -> str:
        return await self._push(signing_key, [{
            "account": "eosio",
            "name": "buyrambytes",
            "authorization": [{"actor": payer, "permission": permission}],
            "data": {"payer": payer, "receiver": receiver, "bytes": ram_bytes},
        }])
