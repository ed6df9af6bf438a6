"""Entry point for the wallet bot.

Usage:
    python -m wallet_bot [options]

Options:
    --host HOST             Bind address (default: 0.0.0.0)
    --port PORT             Webhook server port (default: WALLET_PORT or 8080)
    --database-url URL      Postgres DSN (default: DATABASE_URL, then AWS Secrets Manager)
    --memory-store          Keep all state in memory (local runs only)
    --chain-api-url URL     EOS chain API (default: EOS_API_URL or https://eos.greymass.com)
    --signer MODULE:FACTORY Transaction signer factory (default: WALLET_SIGNER)
    --log-dir DIR           Log file directory (default: WALLET_LOG_DIR or ./logs)
"""

import argparse

import uvicorn

from .config import BotConfig
from .logging import get_logger, setup_logging
from .main import create_app

logger = get_logger("main")


def parse_args() -> BotConfig:
    parser = argparse.ArgumentParser(description="EOS Wallet Telegram Bot")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=8080, help="Webhook server port")
    parser.add_argument("--database-url", default="", help="Postgres DSN")
    parser.add_argument("--memory-store", action="store_true", help="Keep all state in memory")
    parser.add_argument("--chain-api-url", default="", help="EOS chain API base URL")
    parser.add_argument("--signer", default="", help="Signer factory as module:factory")
    parser.add_argument("--log-dir", default="", help="Log file directory")

    args = parser.parse_args()

    return BotConfig(
        host=args.host,
        port=args.port,
        database_url=args.database_url,
        use_memory_store=args.memory_store,
        chain_api_url=args.chain_api_url,
        signer=args.signer,
        log_dir=args.log_dir,
    )


def main():
    config = parse_args()
    log_dir = setup_logging(config.log_dir or None)

    logger.info("Wallet bot starting")
    logger.info(f"  Chain API:  {config.chain_api_url}")
    logger.info(f"  Signer:     {config.signer or '(not set)'}")
    logger.info(f"  Store:      {'memory' if config.use_memory_store else 'postgres'}")
    logger.info(f"  Listening:  {config.host}:{config.port}")
    logger.info(f"  Logs:       {log_dir}")

    if not config.telegram_token:
        logger.error("TELEGRAM_BOT_TOKEN is not set")
        raise SystemExit(1)

    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level="warning")


if __name__ == "__main__":
    main()
