"""Postgres pool lifecycle and schema migrations for the wallet bot."""

import json
import os
from typing import Optional

import asyncpg

from ..logging import get_logger

logger = get_logger("database")
migration_logger = get_logger("migrations")

POOL_MIN_SIZE = 2
POOL_MAX_SIZE = 10

# Owned by the process root: init_db() on startup, close_db() on shutdown
_pool: Optional[asyncpg.Pool] = None


def _secret_credentials() -> dict:
    """Database credentials stored as JSON in AWS Secrets Manager."""
    import boto3

    secret_name = os.getenv("DB_SECRET_NAME", "wallet-bot/postgres-credentials")
    region = os.getenv("AWS_REGION", "us-west-2")

    logger.debug(f"Fetching credentials from Secrets Manager: {secret_name}")
    secrets_client = boto3.client("secretsmanager", region_name=region)
    secret = secrets_client.get_secret_value(SecretId=secret_name)
    return json.loads(secret["SecretString"])


async def init_db(database_url: Optional[str] = None) -> asyncpg.Pool:
    """Open the pool (DATABASE_URL first, then Secrets Manager) and migrate."""
    global _pool

    if _pool is not None:
        return _pool

    database_url = database_url or os.getenv("DATABASE_URL")
    if database_url:
        host = database_url.rsplit("@", 1)[-1]
        logger.info(f"Connecting to database at {host}")
        _pool = await asyncpg.create_pool(database_url, min_size=POOL_MIN_SIZE, max_size=POOL_MAX_SIZE)
    else:
        creds = _secret_credentials()
        logger.info(f"Connecting to database at {creds['host']} (Secrets Manager)")
        _pool = await asyncpg.create_pool(
            host=creds["host"],
            port=creds.get("port", 5432),
            user=creds["username"],
            password=creds["password"],
            database=creds.get("database", "wallet_bot"),
            min_size=POOL_MIN_SIZE,
            max_size=POOL_MAX_SIZE,
        )

    await run_migrations(_pool)
    return _pool


async def close_db():
    global _pool
    if _pool is not None:
        logger.info("Closing database connection pool")
        await _pool.close()
        _pool = None


async def run_migrations(pool: asyncpg.Pool):
    """Apply every entry of MIGRATIONS not yet recorded in _migrations, in order."""
    async with pool.acquire() as conn:
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id SERIAL PRIMARY KEY,
                name VARCHAR(255) NOT NULL UNIQUE,
                applied_at TIMESTAMPTZ DEFAULT NOW()
            )
        """)
        applied = {row["name"] for row in await conn.fetch("SELECT name FROM _migrations")}

        for name, sql in MIGRATIONS:
            if name in applied:
                continue
            migration_logger.info(f"Applying migration: {name}")
            try:
                async with conn.transaction():
                    await conn.execute(sql)
                    await conn.execute("INSERT INTO _migrations (name) VALUES ($1)", name)
            except asyncpg.PostgresError as e:
                migration_logger.error(f"Migration {name} failed: {e}")
                raise
        migration_logger.info("Schema up to date")


# Migration SQL
MIGRATION_001_CREATE_USERS = """
-- Users: one row per chat user; the four credential columns are set or cleared together
CREATE TABLE IF NOT EXISTS users (
    user_id BIGINT PRIMARY KEY,
    eos_account_name TEXT,
    eos_public_key TEXT,
    eos_private_key TEXT,                     -- base64(salt || iv || AES-GCM ciphertext)
    permission_name TEXT,
    session_expiration TIMESTAMPTZ,           -- the decrypted key is never stored
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT users_credential_complete CHECK (
        (eos_private_key IS NULL AND eos_account_name IS NULL AND eos_public_key IS NULL)
        OR (eos_private_key IS NOT NULL AND eos_account_name IS NOT NULL AND eos_public_key IS NOT NULL)
    )
);
"""

MIGRATION_002_CREATE_ACCOUNT_ORDERS = """
-- Account orders: provisional accounts waiting for the sign-up transfer
CREATE TABLE IF NOT EXISTS account_orders (
    order_id BIGSERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL,
    eos_account_name TEXT NOT NULL,
    eos_public_key TEXT NOT NULL,
    eos_private_key TEXT NOT NULL,
    activated BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_account_orders_user ON account_orders(user_id);
-- At most one unactivated order per user
CREATE UNIQUE INDEX IF NOT EXISTS idx_account_orders_one_pending
    ON account_orders(user_id) WHERE activated = FALSE;
"""

MIGRATION_003_CREATE_RAM_ORDERS = """
-- RAM orders: limit orders executed by the external matching worker
CREATE TABLE IF NOT EXISTS ram_orders (
    order_id BIGSERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL,
    eos_account_name TEXT NOT NULL,
    ram_bytes BIGINT NOT NULL CHECK (ram_bytes > 0),
    price_per_kb NUMERIC(20, 8) NOT NULL CHECK (price_per_kb > 0),
    order_status TEXT NOT NULL DEFAULT 'pending',  -- pending, success, failed
    order_date TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    transaction_id TEXT,                            -- set by the worker on success
    failure_reason TEXT                             -- set by the worker on failure
);

CREATE INDEX IF NOT EXISTS idx_ram_orders_user_date ON ram_orders(user_id, order_date DESC);
CREATE INDEX IF NOT EXISTS idx_ram_orders_pending ON ram_orders(user_id)
    WHERE order_status = 'pending';
"""

MIGRATIONS = (
    ("001_create_users", MIGRATION_001_CREATE_USERS),
    ("002_create_account_orders", MIGRATION_002_CREATE_ACCOUNT_ORDERS),
    ("003_create_ram_orders", MIGRATION_003_CREATE_RAM_ORDERS),
)
