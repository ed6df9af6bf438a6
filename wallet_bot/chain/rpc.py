"""Async HTTP client for the EOS chain API (read-only calls)."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from ..errors import ChainError
from ..logging import get_logger
from .client import KeyAccount, ResourceUsage

logger = get_logger("chain")

# Error names nodeos uses when get_account is asked for a missing account
_MISSING_ACCOUNT_ERRORS = {"unknown_key_exception", "account_query_exception"}


def parse_asset(asset: str) -> Decimal:
    """'1.2345 EOS' -> Decimal('1.2345')"""
    amount, _, _symbol = asset.strip().partition(" ")
    try:
        return Decimal(amount)
    except InvalidOperation as e:
        raise ChainError(f"Unexpected asset value: {asset!r}") from e


class EosRpcClient:
    """Chain API reads: accounts, balances, resources and the RAM market."""

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self):
        await self._client.aclose()

    async def _post(self, path: str, payload: dict) -> Any:
        try:
            resp = await self._client.post(f"{self.base_url}{path}", json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"Chain API request {path} failed: {e}")
            raise ChainError(f"Chain API unreachable: {e}") from e

        if resp.status_code >= 400:
            raise self._error_from_response(resp)
        return resp.json()

    @staticmethod
    def _error_from_response(resp: httpx.Response) -> ChainError:
        try:
            body = resp.json()
        except ValueError:
            return ChainError(f"Chain API error {resp.status_code}: {resp.text[:200]}")

        error = body.get("error") or {}
        details = error.get("details") or []
        message = details[0].get("message") if details else None
        message = message or error.get("what") or body.get("message") or f"HTTP {resp.status_code}"
        return ChainError(message, name=error.get("name"), code=error.get("code"))

    async def get_account(self, account_name: str) -> dict:
        return await self._post("/v1/chain/get_account", {"account_name": account_name})

    async def account_exists(self, account_name: str) -> bool:
        try:
            await self.get_account(account_name)
        except ChainError as e:
            if e.name in _MISSING_ACCOUNT_ERRORS:
                return False
            raise
        return True

    async def get_balance(self, account_name: str, symbol: str = "EOS") -> Decimal:
        balances = await self._post(
            "/v1/chain/get_currency_balance",
            {"code": "eosio.token", "account": account_name, "symbol": symbol},
        )
        if not balances:
            return Decimal("0")
        return parse_asset(balances[0])

    async def get_account_resource_usage(self, account_name: str) -> ResourceUsage:
        account = await self.get_account(account_name)
        net = account.get("net_limit") or {}
        cpu = account.get("cpu_limit") or {}
        return ResourceUsage(
            ram_used=int(account.get("ram_usage", 0)),
            ram_quota=int(account.get("ram_quota", 0)),
            net_used=int(net.get("used", 0)),
            net_max=int(net.get("max", 0)),
            cpu_used=int(cpu.get("used", 0)),
            cpu_max=int(cpu.get("max", 0)),
        )

    async def get_ram_price(self) -> Decimal:
        """Current RAM price in EOS per KB from the eosio rammarket table."""
        data = await self._post(
            "/v1/chain/get_table_rows",
            {"json": True, "code": "eosio", "scope": "eosio", "table": "rammarket", "limit": 1},
        )
        rows = data.get("rows") or []
        if not rows:
            raise ChainError("RAM market table is empty")

        base = parse_asset(rows[0]["base"]["balance"])
        quote = parse_asset(rows[0]["quote"]["balance"])
        if base <= 0:
            raise ChainError("RAM market reports zero supply")
        return (quote / base * 1024).quantize(Decimal("0.0001"))

    async def get_key_accounts(self, public_key: str) -> list[KeyAccount]:
        """Every account permission that ``public_key`` directly controls."""
        data = await self._post(
            "/v1/chain/get_accounts_by_authorizers",
            {"keys": [public_key], "accounts": []},
        )
        found: list[KeyAccount] = []
        for entry in data.get("accounts") or []:
            account = KeyAccount(entry["account_name"], entry["permission_name"])
            if account not in found:
                found.append(account)
        return found
