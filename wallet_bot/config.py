"""Bot configuration with CLI > env var > defaults precedence."""

import os
from dataclasses import dataclass


@dataclass
class BotConfig:
    """Configuration for the bot process."""
    telegram_token: str = ""
    telegram_api_url: str = ""
    webhook_secret: str = ""
    chain_api_url: str = ""
    signer: str = ""  # "module:factory" returning a chain.Signer
    database_url: str = ""
    use_memory_store: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_dir: str = ""

    # Links shown to users
    explorer_tx_url: str = "https://bloks.io/transaction/"
    powerup_url: str = "https://eospowerup.io/free"
    powerup_bot_url: str = "https://t.me/eospowerupbot"

    # Account creation
    account_creator: str = "signupeoseos"
    account_creation_fee: str = "4 EOS"

    # Sessions and orders
    default_unlock_hours: int = 1
    pending_token_ttl: int = 300
    session_purge_interval: int = 60
    max_pending_ram_orders: int = 5
    ram_orders_page_size: int = 5

    def __post_init__(self):
        if not self.telegram_token:
            self.telegram_token = os.getenv("TELEGRAM_BOT_TOKEN", "")
        if not self.telegram_api_url:
            self.telegram_api_url = os.getenv("TELEGRAM_API_URL", "https://api.telegram.org")
        if not self.webhook_secret:
            self.webhook_secret = os.getenv("TELEGRAM_WEBHOOK_SECRET", "")
        if not self.chain_api_url:
            self.chain_api_url = os.getenv("EOS_API_URL", "https://eos.greymass.com")
        if not self.signer:
            self.signer = os.getenv("WALLET_SIGNER", "")
        if not self.database_url:
            self.database_url = os.getenv("DATABASE_URL", "")
        if not self.use_memory_store:
            self.use_memory_store = os.getenv("WALLET_MEMORY_STORE", "").lower() in ("1", "true", "yes")
        if self.port == 8080:
            env_port = os.getenv("WALLET_PORT")
            if env_port:
                self.port = int(env_port)
        if not self.log_dir:
            self.log_dir = os.getenv("WALLET_LOG_DIR", "")

        env_ttl = os.getenv("WALLET_PENDING_TOKEN_TTL")
        if env_ttl and self.pending_token_ttl == 300:
            self.pending_token_ttl = int(env_ttl)
