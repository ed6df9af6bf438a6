import asyncio
import inspect
import os
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

os.environ.setdefault("WALLET_MEMORY_STORE", "true")

import pytest  # noqa: E402

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wallet_bot.bot import build_bot  # noqa: E402
from wallet_bot.bot.transport import TransportError  # noqa: E402
from wallet_bot.chain import KeyAccount, KeyPair, ResourceUsage  # noqa: E402
from wallet_bot.config import BotConfig  # noqa: E402
from wallet_bot.db import MemoryDatabase, memory_repositories  # noqa: E402
from wallet_bot.errors import ChainError  # noqa: E402
from wallet_bot.vault import SessionAuthorizer, SessionStore  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTransport:
    """Records everything the bot would have sent to the chat."""

    def __init__(self):
        self.sent: list[dict] = []
        self.edited: list[dict] = []
        self.deleted: list[tuple[int, int]] = []
        self.answered: list[str] = []
        self.fail_delete = False
        self._next_message_id = 100

    async def send_message(self, chat_id, text, keyboard=None, parse_mode=None):
        self._next_message_id += 1
        self.sent.append({"chat_id": chat_id, "text": text, "keyboard": keyboard, "parse_mode": parse_mode})
        return self._next_message_id

    async def edit_message(self, chat_id, message_id, text, keyboard=None, parse_mode=None):
        self.edited.append(
            {"chat_id": chat_id, "message_id": message_id, "text": text, "keyboard": keyboard}
        )

    async def delete_message(self, chat_id, message_id):
        if self.fail_delete:
            raise TransportError("message to delete not found")
        self.deleted.append((chat_id, message_id))

    async def answer_callback(self, callback_id):
        self.answered.append(callback_id)

    @property
    def texts(self) -> list[str]:
        return [m["text"] for m in self.sent] + [m["text"] for m in self.edited]

    @property
    def last_text(self) -> str:
        return self.sent[-1]["text"]


class FakeChain:
    """Chain stand-in: keys are 'PRIV_x' -> 'PUB_x'."""

    def __init__(self):
        self.key_accounts: dict[str, list[KeyAccount]] = {}
        self.existing_accounts: set[str] = set()
        self.balances: dict[str, Decimal] = {}
        self.ram_price = Decimal("0.0150")
        self.next_account_name = "newaccount12"
        self.pushed: list[tuple[str, str, dict]] = []
        self.push_error: ChainError | None = None

    async def account_exists(self, account_name):
        return account_name in self.existing_accounts

    def generate_key_pair(self):
        return KeyPair(private_key="PRIV_generated", public_key="PUB_generated")

    def generate_account_name(self):
        return self.next_account_name

    def public_key_of(self, private_key):
        if not private_key.startswith("PRIV_"):
            raise ValueError("not a private key")
        return "PUB_" + private_key[len("PRIV_"):]

    async def get_key_accounts(self, public_key):
        return list(self.key_accounts.get(public_key, []))

    async def get_balance(self, account_name):
        return self.balances.get(account_name, Decimal("0"))

    async def get_account_resource_usage(self, account_name):
        return ResourceUsage(2048, 8192, 100, 1024 * 1024, 1500, 2_000_000)

    async def get_ram_price(self):
        return self.ram_price

    def _push(self, signing_key, name, data):
        if self.push_error is not None:
            raise self.push_error
        self.pushed.append((signing_key, name, data))
        return f"tx{len(self.pushed)}"

    async def transfer(self, signing_key, sender, receiver, amount, memo="", permission="active"):
        return self._push(signing_key, "transfer", {"from": sender, "to": receiver, "amount": amount, "memo": memo})

    async def buy_ram(self, signing_key, payer, receiver, eos_amount, permission="active"):
        return self._push(signing_key, "buyram", {"payer": payer, "receiver": receiver, "quant": eos_amount})

    async def buy_ram_bytes(self, signing_key, payer, receiver, ram_bytes, permission="active"):
        return self._push(signing_key, "buyrambytes", {"payer": payer, "receiver": receiver, "bytes": ram_bytes})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_db():
    return MemoryDatabase()


@pytest.fixture
def repos(memory_db):
    return memory_repositories(memory_db)


@pytest.fixture
def sessions(repos, clock):
    return SessionAuthorizer(repos.users, SessionStore(), clock=clock)


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def config():
    return BotConfig(telegram_token="test-token", use_memory_store=True, signer="tests:none")


@pytest.fixture
def bot(config, transport, chain, repos, sessions):
    return build_bot(config, transport, chain, repos, sessions)


def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames
            if name in pyfuncitem.funcargs
        }
        asyncio.run(pyfuncitem.obj(**call_kwargs))
        return True
    return None


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test as async")
