from decimal import Decimal

import pytest

from wallet_bot.chain import EosChain, classify_fault, format_eos
from wallet_bot.errors import ChainError, ResourceInsufficient


@pytest.mark.parametrize(
    "name,resource",
    [
        ("tx_cpu_usage_exceeded", "cpu"),
        ("leeway_deadline_exception", "cpu"),
        ("tx_net_usage_exceeded", "net"),
        ("ram_usage_exceeded", "ram"),
    ],
)
def test_named_resource_faults(name, resource):
    fault = classify_fault(ChainError("transaction rejected", name=name))
    assert isinstance(fault, ResourceInsufficient)
    assert fault.resource == resource
    assert fault.name == name


def test_named_non_resource_fault_is_not_reclassified():
    error = ChainError("overdrawn balance, ram is fine", name="eosio_assert_message_exception")
    assert classify_fault(error) is error


def test_unnamed_fault_falls_back_to_message():
    fault = classify_fault(ChainError("billed CPU time exceeds the maximum"))
    assert isinstance(fault, ResourceInsufficient)
    assert fault.resource == "cpu"


def test_unnamed_fault_does_not_match_inside_words():
    error = ChainError("the parameters are incorrect")
    assert classify_fault(error) is error


def test_format_eos_uses_four_decimals():
    assert format_eos(Decimal("1.5")) == "1.5000 EOS"
    assert format_eos(Decimal("0.0001")) == "0.0001 EOS"


class RecordingSigner:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def public_key_of(self, private_key):
        return "PUB"

    def generate_key_pair(self):
        raise NotImplementedError

    async def push_actions(self, private_key, actions):
        if self.error:
            raise self.error
        self.calls.append((private_key, actions))
        return "deadbeef"


@pytest.mark.asyncio
async def test_transfer_builds_token_action():
    signer = RecordingSigner()
    chain = EosChain(rpc=None, signer=signer)

    tx_id = await chain.transfer("PRIV", "alice1111111", "bob111111111", Decimal("1.2"), "hi", "owner")

    assert tx_id == "deadbeef"
    (key, actions), = signer.calls
    assert key == "PRIV"
    assert actions[0]["account"] == "eosio.token"
    assert actions[0]["authorization"] == [{"actor": "alice1111111", "permission": "owner"}]
    assert actions[0]["data"]["quantity"] == "1.2000 EOS"
    assert actions[0]["data"]["memo"] == "hi"


@pytest.mark.asyncio
async def test_buy_ram_bytes_and_buy_ram_actions():
    signer = RecordingSigner()
    chain = EosChain(rpc=None, signer=signer)

    await chain.buy_ram_bytes("PRIV", "alice1111111", "bob111111111", 4096)
    await chain.buy_ram("PRIV", "alice1111111", "bob111111111", Decimal("2"))

    assert signer.calls[0][1][0]["name"] == "buyrambytes"
    assert signer.calls[0][1][0]["data"]["bytes"] == 4096
    assert signer.calls[1][1][0]["name"] == "buyram"
    assert signer.calls[1][1][0]["data"]["quant"] == "2.0000 EOS"


@pytest.mark.asyncio
async def test_signer_faults_are_classified():
    chain = EosChain(rpc=None, signer=RecordingSigner(ChainError("cpu", name="tx_cpu_usage_exceeded")))
    with pytest.raises(ResourceInsufficient):
        await chain.transfer("PRIV", "alice1111111", "bob111111111", Decimal("1"))
