from decimal import Decimal

import pytest

from wallet_bot.bot import inputs
from wallet_bot.errors import InvalidInput


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1024bytes", 1024),
        ("1byte", 1),
        ("512b", 512),
        ("1.2kb", 1228),
        ("1KB", 1024),
        ("1mb", 1024 ** 2),
        ("2.1gb", int(Decimal("2.1") * 1024 ** 3)),
    ],
)
def test_convert_to_bytes(text, expected):
    assert inputs.convert_to_bytes(text) == expected


@pytest.mark.parametrize("text", ["", "kb", "1tb", "-1kb", "0kb", "0.0001b"])
def test_convert_to_bytes_rejects(text):
    with pytest.raises(InvalidInput):
        inputs.convert_to_bytes(text)


def test_parse_transfer_replaces_underscores_in_memo():
    request = inputs.parse_transfer("bob111111111,3.45,This_is_The_memo")
    assert request.receiver == "bob111111111"
    assert request.amount == Decimal("3.45")
    assert request.memo == "This is The memo"


def test_parse_transfer_without_memo():
    request = inputs.parse_transfer(" bob111111111 , 0.001 ")
    assert request.amount == Decimal("0.001")
    assert request.memo == ""


@pytest.mark.parametrize(
    "text",
    ["bob111111111", "bob111111111,abc", "bob111111111,0", "bob111111111,1.00001", "Not_An_Account,1"],
)
def test_parse_transfer_rejects(text):
    with pytest.raises(InvalidInput):
        inputs.parse_transfer(text)


def test_parse_buy_ram_by_size_or_eos():
    by_size = inputs.parse_buy_ram("bob111111111,1mb")
    assert by_size.ram_bytes == 1024 ** 2
    assert by_size.eos_amount is None

    by_eos = inputs.parse_buy_ram("bob111111111,3.45EOS")
    assert by_eos.eos_amount == Decimal("3.45")
    assert by_eos.ram_bytes is None


@pytest.mark.parametrize("text", ["bob111111111", "bob111111111,3", "bob111111111,1mb,extra", "bob111111111,0EOS"])
def test_parse_buy_ram_rejects(text):
    with pytest.raises(InvalidInput):
        inputs.parse_buy_ram(text)


def test_parse_ram_order():
    request = inputs.parse_ram_order("bob111111111,1kb,0.01")
    assert request.receiver == "bob111111111"
    assert request.ram_bytes == 1024
    assert request.price_per_kb == Decimal("0.01")


@pytest.mark.parametrize("text", ["bob111111111,1kb", "bob111111111,1kb,free", "bob111111111,1kb,0", "bob111111111,lots,0.01"])
def test_parse_ram_order_rejects(text):
    with pytest.raises(InvalidInput):
        inputs.parse_ram_order(text)
