"""Chat front end: transport, keyboards, input parsing and the wallet flows."""

from ..accounts import AccountService
from ..chain.client import ChainClient
from ..config import BotConfig
from ..conversation import ConversationCollector, PromptStore
from ..db import Repositories
from ..orders import RamOrderManager
from ..vault import PendingStore, SessionAuthorizer, SessionStore
from .handlers import WalletBot
from .transport import (
    Button,
    ChatTransport,
    InboundEvent,
    Keyboard,
    TelegramError,
    TelegramTransport,
    TransportError,
)


def build_bot(
    config: BotConfig,
    transport: ChatTransport,
    chain: ChainClient,
    repos: Repositories,
    sessions: SessionAuthorizer | None = None,
) -> WalletBot:
    """Wire the services behind one WalletBot."""
    sessions = sessions or SessionAuthorizer(repos.users, SessionStore())
    return WalletBot(
        transport=transport,
        chain=chain,
        users=repos.users,
        sessions=sessions,
        collector=ConversationCollector(PromptStore()),
        orders=RamOrderManager(
            repos.ram_orders,
            max_pending=config.max_pending_ram_orders,
            page_size=config.ram_orders_page_size,
        ),
        accounts=AccountService(repos.users, repos.account_orders, chain, sessions),
        grants=PendingStore(ttl_seconds=config.pending_token_ttl),
        imports=PendingStore(ttl_seconds=config.pending_token_ttl),
        config=config,
    )


__all__ = [
    "build_bot",
    "WalletBot",
    "Button",
    "ChatTransport",
    "InboundEvent",
    "Keyboard",
    "TelegramError",
    "TelegramTransport",
    "TransportError",
]
