import pytest

from wallet_bot.conversation import commands as cmd


@pytest.mark.parametrize(
    "data,expected",
    [
        ("wallets", cmd.Wallets()),
        ("view_order", cmd.ViewAccountOrder()),
        ("delete_order", cmd.DeleteAccountOrder()),
        ("authorize", cmd.Authorize()),
        ("authorize:24:tok123", cmd.ConfirmAuthorization(hours=24, token="tok123")),
        ("view_ram_orders", cmd.ViewRamOrders(page=1)),
        ("view_ram_orders:3", cmd.ViewRamOrders(page=3)),
        ("select_account:abc:1", cmd.SelectAccount(token="abc", index=1)),
        ("confirm_clear_ram_orders", cmd.ConfirmClearRamOrders()),
        ("close", cmd.Close()),
    ],
)
def test_decode_callback(data, expected):
    assert cmd.decode_callback(data) == expected


@pytest.mark.parametrize(
    "data",
    [
        "",
        "nonsense",
        "wallets:extra",
        "authorize:5:tok",
        "authorize:24",
        "authorize:abc:tok",
        "view_ram_orders:0",
        "view_ram_orders:-1",
        "select_account:tok",
    ],
)
def test_decode_callback_rejects_malformed_payloads(data):
    with pytest.raises(cmd.UnknownCommand):
        cmd.decode_callback(data)


def test_confirm_authorization_encodes_duration_and_token():
    command = cmd.ConfirmAuthorization(hours=168, token="tok")
    assert cmd.encode_callback(command) == "authorize:168:tok"
    assert cmd.decode_callback(command.encode()) == command


def test_encode_callback_enforces_telegram_limit():
    with pytest.raises(ValueError):
        cmd.encode_callback(cmd.SelectAccount(token="x" * 64, index=0))


def test_every_authorization_duration_fits_in_a_callback():
    for hours in cmd.AUTHORIZATION_HOURS:
        assert len(cmd.encode_callback(cmd.ConfirmAuthorization(hours=hours, token="A" * 11))) <= 64
