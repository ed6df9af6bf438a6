"""
FastAPI application for the wallet bot.

Receives Telegram webhook updates and runs the session purge loop.
"""
import asyncio
import importlib
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api import telegram_router
from .bot import TelegramTransport, build_bot
from .bot.transport import ChatTransport
from .chain import ChainClient, EosChain, EosRpcClient, Signer
from .config import BotConfig
from .db import Repositories, close_db, init_db, memory_repositories, postgres_repositories
from .logging import get_logger
from .vault import SessionAuthorizer, SessionStore

logger = get_logger("main")


def load_signer(spec: str) -> Signer:
    """Instantiate the signer named by a ``module:factory`` string."""
    if not spec or ":" not in spec:
        raise ValueError("Signer must be given as 'module:factory' (set WALLET_SIGNER)")
    module_name, factory_name = spec.split(":", 1)
    factory = getattr(importlib.import_module(module_name), factory_name)
    return factory()


async def _purge_expired_sessions(sessions: SessionAuthorizer, interval: int):
    """Background task: drop expired signing sessions from memory."""
    while True:
        await asyncio.sleep(interval)
        try:
            sessions.purge_expired()
        except Exception as e:
            logger.exception(f"Session purge failed: {e}")


def create_app(
    config: Optional[BotConfig] = None,
    chain: Optional[ChainClient] = None,
    transport: Optional[ChatTransport] = None,
    repos: Optional[Repositories] = None,
) -> FastAPI:
    """Build the app. Anything not passed in is constructed from ``config``."""
    config = config or BotConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting wallet bot...")
        owned_pool = False
        closers = []

        stores = repos
        if stores is None:
            if config.use_memory_store:
                logger.warning("Using in-memory store; data is lost on restart")
                stores = memory_repositories()
            else:
                pool = await init_db(config.database_url or None)
                owned_pool = True
                stores = postgres_repositories(pool)

        chain_client = chain
        if chain_client is None:
            rpc = EosRpcClient(config.chain_api_url)
            closers.append(rpc.close)
            chain_client = EosChain(rpc, load_signer(config.signer))

        chat = transport
        if chat is None:
            telegram = TelegramTransport(config.telegram_token, config.telegram_api_url)
            closers.append(telegram.close)
            chat = telegram

        sessions = SessionAuthorizer(stores.users, SessionStore())
        app.state.config = config
        app.state.bot = build_bot(config, chat, chain_client, stores, sessions)

        purge_task = asyncio.create_task(
            _purge_expired_sessions(sessions, config.session_purge_interval)
        )
        yield
        purge_task.cancel()
        for close in closers:
            await close()
        if owned_pool:
            await close_db()
        logger.info("Shutting down...")

    app = FastAPI(
        title="EOS Wallet Bot",
        description="Telegram bot for custodial EOS account management",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(telegram_router)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app
