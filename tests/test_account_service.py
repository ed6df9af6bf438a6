import pytest

from wallet_bot.accounts import AccountService
from wallet_bot.chain import KeyAccount
from wallet_bot.errors import (
    AccountAlreadyExists,
    AccountNotYetCreated,
    InvalidInput,
    NoAccount,
    NoPendingOrder,
    PendingOrderExists,
)
from wallet_bot.vault import AuthorizationResult, crypto


@pytest.fixture
def service(repos, chain, sessions):
    return AccountService(repos.users, repos.account_orders, chain, sessions)


@pytest.mark.asyncio
async def test_import_single_account_then_unlock(service, chain, repos, sessions):
    chain.key_accounts["PUB_alice"] = [KeyAccount("alice1111111", "active")]

    result = await service.import_account(1, "PRIV_alice", "mypassword1")

    assert result.saved is not None
    stored = await repos.users.get(1)
    assert stored.account_name == "alice1111111"
    assert stored.public_key == "PUB_alice"
    assert stored.permission_name == "active"
    assert stored.encrypted_private_key != "PRIV_alice"
    assert crypto.decrypt(stored.encrypted_private_key, "mypassword1") == "PRIV_alice"

    assert await sessions.authorize(1, "mypassword1", 1) == AuthorizationResult.GRANTED
    assert sessions.get_private_key(1) == "PRIV_alice"


@pytest.mark.asyncio
async def test_import_multiple_accounts_waits_for_choice(service, chain, repos):
    chain.key_accounts["PUB_multi"] = [
        KeyAccount("first1111111", "active"),
        KeyAccount("second111111", "owner"),
    ]

    result = await service.import_account(1, "PRIV_multi", "mypassword1")

    assert result.saved is None
    assert len(result.accounts) == 2
    assert await repos.users.get(1) is None

    saved = await service.select_account(1, result, result.accounts[1])
    assert saved.account_name == "second111111"
    assert saved.permission_name == "owner"


@pytest.mark.asyncio
async def test_select_account_rejects_unlisted_account(service, chain):
    chain.key_accounts["PUB_multi"] = [KeyAccount("first1111111", "active"), KeyAccount("first1111111", "owner")]
    result = await service.import_account(1, "PRIV_multi", "mypassword1")

    with pytest.raises(InvalidInput):
        await service.select_account(1, result, KeyAccount("someoneelse1", "active"))


@pytest.mark.asyncio
async def test_import_key_without_accounts(service, repos):
    with pytest.raises(NoAccount):
        await service.import_account(1, "PRIV_orphan", "mypassword1")
    assert await repos.users.get(1) is None


@pytest.mark.asyncio
async def test_import_rejects_malformed_key_and_short_password(service, chain):
    chain.key_accounts["PUB_alice"] = [KeyAccount("alice1111111", "active")]
    with pytest.raises(InvalidInput):
        await service.import_account(1, "garbage", "mypassword1")
    with pytest.raises(InvalidInput):
        await service.import_account(1, "PRIV_alice", "short")


@pytest.mark.asyncio
async def test_reimport_ends_previous_session(service, chain, sessions):
    chain.key_accounts["PUB_alice"] = [KeyAccount("alice1111111", "active")]
    chain.key_accounts["PUB_bob"] = [KeyAccount("bob111111111", "active")]
    await service.import_account(1, "PRIV_alice", "mypassword1")
    await sessions.authorize(1, "mypassword1", 6)

    await service.import_account(1, "PRIV_bob", "otherpassword")

    assert not sessions.is_active(1)


@pytest.mark.asyncio
async def test_create_order_then_activate(service, chain, repos):
    order = await service.create_order(1, "mypassword1")

    assert order.account_name == "newaccount12"
    assert order.public_key == "PUB_generated"
    assert crypto.decrypt(order.encrypted_private_key, "mypassword1") == "PRIV_generated"
    assert (await service.get_pending_order(1)).order_id == order.order_id

    with pytest.raises(AccountNotYetCreated):
        await service.activate(1)
    assert await service.get_pending_order(1) is not None

    chain.existing_accounts.add("newaccount12")
    credential = await service.activate(1)

    assert credential.account_name == "newaccount12"
    assert credential.permission_name == "active"
    assert await service.get_pending_order(1) is None
    assert (await repos.users.get(1)).has_credential


@pytest.mark.asyncio
async def test_only_one_pending_order(service):
    await service.create_order(1, "mypassword1")
    with pytest.raises(PendingOrderExists) as exc:
        await service.create_order(1, "mypassword1")
    assert exc.value.account_name == "newaccount12"


@pytest.mark.asyncio
async def test_taken_account_name_writes_nothing(service, chain):
    chain.existing_accounts.add("newaccount12")
    with pytest.raises(AccountAlreadyExists):
        await service.create_order(1, "mypassword1")
    assert await service.get_pending_order(1) is None


@pytest.mark.asyncio
async def test_activate_without_order(service):
    with pytest.raises(NoPendingOrder):
        await service.activate(1)


@pytest.mark.asyncio
async def test_delete_order(service):
    await service.create_order(1, "mypassword1")
    assert await service.delete_order(1) is True
    assert await service.delete_order(1) is False
    assert await service.get_pending_order(1) is None


@pytest.mark.asyncio
async def test_delete_account_clears_credential_and_session(service, chain, repos, sessions):
    chain.key_accounts["PUB_alice"] = [KeyAccount("alice1111111", "active")]
    await service.import_account(1, "PRIV_alice", "mypassword1")
    await sessions.authorize(1, "mypassword1", 1)

    await service.delete_account(1)

    stored = await repos.users.get(1)
    assert not stored.has_credential
    assert stored.account_name is None
    assert not sessions.is_active(1)
    assert await sessions.authorize(1, "mypassword1", 1) == AuthorizationResult.NO_ACCOUNT


@pytest.mark.asyncio
async def test_failed_promotion_keeps_session(service, chain, repos, sessions, monkeypatch):
    await service.create_order(1, "mypassword1")
    chain.existing_accounts.add("newaccount12")
    await sessions.grant(1, "PRIV_old", 1)

    async def lost_race(order, permission_name):
        raise NoPendingOrder()

    monkeypatch.setattr(repos.account_orders, "promote", lost_race)

    with pytest.raises(NoPendingOrder):
        await service.activate(1)
    assert sessions.is_active(1)
