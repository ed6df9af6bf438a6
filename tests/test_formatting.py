from datetime import datetime, timezone
from decimal import Decimal

from wallet_bot.bot import formatting
from wallet_bot.chain import ResourceUsage
from wallet_bot.db import AccountOrder, RamOrder, RamOrderStatus
from wallet_bot.orders import OrderPage


def _order(order_id, status, **kwargs):
    return RamOrder(
        order_id=order_id,
        user_id=1,
        account_name="alice1111111",
        ram_bytes=2048,
        price_per_kb=Decimal("0.0150"),
        status=status,
        order_date=datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc),
        **kwargs,
    )


def test_format_size_scales_by_1024():
    assert formatting.format_size(512) == "512.00 Bytes"
    assert formatting.format_size(1536) == "1.50 KB"
    assert formatting.format_size(3 * 1024 ** 3) == "3.00 GB"
    assert formatting.format_size(5 * 1024 ** 3, largest="MB") == "5120.00 MB"


def test_format_cpu_scales_by_1000():
    assert formatting.format_cpu(999) == "999.00 us"
    assert formatting.format_cpu(1500) == "1.50 ms"
    assert formatting.format_cpu(2_500_000) == "2.50 s"


def test_format_profile():
    text = formatting.format_profile("alice1111111", ResourceUsage(2048, 8192, 100, 1024 * 1024, 1500, 2_000_000))
    assert "<code>alice1111111</code>" in text
    assert "RAM: 2.00 KB / 8.00 KB" in text
    assert "NET: 100.00 Bytes / 1.00 MB" in text
    assert "CPU: 1.50 ms / 2.00 s" in text


def test_format_account_order_shows_signup_memo():
    order = AccountOrder(1, 1, "newaccount12", "EOS6abc", "cipher")
    text = formatting.format_account_order(order, "signupeoseos", "4 EOS")
    assert "<code>newaccount12-EOS6abc</code>" in text
    assert "Transfer 4 EOS" in text
    assert "<code>signupeoseos</code>" in text


def test_format_ram_orders_shows_outcome_per_status():
    page = OrderPage(
        orders=[
            _order(3, RamOrderStatus.SUCCESS, transaction_id="abc123"),
            _order(2, RamOrderStatus.FAILED, failure_reason="price not reached"),
            _order(1, RamOrderStatus.PENDING),
        ],
        total_count=8,
        page=2,
        page_size=5,
    )

    text = formatting.format_ram_orders(page)

    assert text.startswith("Your RAM Orders 8/8:")
    assert "Transaction ID: abc123" in text
    assert "Failure Reason: price not reached" in text
    assert text.count("Status:") == 3
    assert "Order Date(UTC): 2024-05-01 08:30:00" in text


def test_format_ram_orders_empty():
    page = OrderPage(orders=[], total_count=0, page=1, page_size=5)
    assert "No RAM orders found." in formatting.format_ram_orders(page)


def test_resource_remediation_links():
    text = formatting.resource_remediation("alice1111111", "https://eospowerup.io/free", "https://t.me/eospowerupbot")
    assert "https://eospowerup.io/free" in text
    assert "https://t.me/eospowerupbot" in text
    assert "alice1111111" in text
