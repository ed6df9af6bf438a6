"""Parsing of free-text replies into typed requests."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..chain.names import is_valid_account_name
from ..errors import InvalidInput

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(bytes?|b|kb|mb|gb)\s*$", re.IGNORECASE)
_EOS_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*eos\s*$", re.IGNORECASE)

SIZE_MULTIPLIERS = {
    "b": 1,
    "byte": 1,
    "bytes": 1,
    "kb": 1024,
    "mb": 1024 ** 2,
    "gb": 1024 ** 3,
}


@dataclass(frozen=True)
class TransferRequest:
    receiver: str
    amount: Decimal
    memo: str = ""


@dataclass(frozen=True)
class BuyRamRequest:
    """Exactly one of ``ram_bytes`` and ``eos_amount`` is set."""
    receiver: str
    ram_bytes: Optional[int] = None
    eos_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class RamOrderRequest:
    receiver: str
    ram_bytes: int
    price_per_kb: Decimal


def convert_to_bytes(text: str) -> int:
    """'1.2kb' -> 1228. Raises InvalidInput for anything else."""
    match = _SIZE_RE.match(text)
    if not match:
        raise InvalidInput(f"Invalid RAM amount: {text.strip()}. Use bytes, kb, mb or gb.")
    number, unit = match.groups()
    ram_bytes = int(Decimal(number) * SIZE_MULTIPLIERS[unit.lower()])
    if ram_bytes <= 0:
        raise InvalidInput("RAM amount must be at least 1 byte.")
    return ram_bytes


def parse_eos_amount(text: str) -> Decimal:
    text = text.strip()
    if text.lower().endswith("eos"):
        text = text[:-3].strip()
    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise InvalidInput(f"Invalid amount: {text}") from e
    if not amount.is_finite() or amount <= 0:
        raise InvalidInput("Amount must be greater than zero.")
    if amount.as_tuple().exponent < -4:
        raise InvalidInput("EOS amounts have at most 4 decimal places.")
    return amount


def _receiver(text: str) -> str:
    receiver = text.strip()
    if not is_valid_account_name(receiver):
        raise InvalidInput(f"Invalid account name: {receiver}")
    return receiver


def parse_transfer(text: str) -> TransferRequest:
    """'<receiver>,<amount>[,<memo>]' where '_' in the memo means a space."""
    parts = text.split(",")
    if len(parts) < 2:
        raise InvalidInput("Please provide the address and amount.")
    receiver, amount, *memo_parts = parts
    memo = ",".join(memo_parts).replace("_", " ").strip()
    return TransferRequest(_receiver(receiver), parse_eos_amount(amount), memo)


def parse_buy_ram(text: str) -> BuyRamRequest:
    """'<receiver>,<n>bytes|kb|mb|gb' or '<receiver>,<n>EOS'"""
    parts = text.split(",")
    if len(parts) != 2:
        raise InvalidInput("Please provide the receiver and the amount.")
    receiver, amount = parts
    receiver = _receiver(receiver)

    if _SIZE_RE.match(amount):
        return BuyRamRequest(receiver, ram_bytes=convert_to_bytes(amount))
    if _EOS_RE.match(amount):
        return BuyRamRequest(receiver, eos_amount=parse_eos_amount(amount))
    raise InvalidInput("Invalid amount format. Please use bytes, kb, mb, gb, or EOS.")


def parse_ram_order(text: str) -> RamOrderRequest:
    """'<receiver>,<size>,<price_per_kb>'"""
    parts = text.split(",")
    if len(parts) != 3:
        raise InvalidInput("Please provide the RAM order details: <receiver>,<ram_amount>,<price_per_kb>")
    receiver, size, price = parts
    try:
        price_per_kb = Decimal(price.strip())
    except InvalidOperation as e:
        raise InvalidInput(f"Invalid price: {price.strip()}") from e
    if not price_per_kb.is_finite() or price_per_kb <= 0:
        raise InvalidInput("Price per KB must be greater than zero.")
    return RamOrderRequest(_receiver(receiver), convert_to_bytes(size), price_per_kb)
