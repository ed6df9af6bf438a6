"""Message text for the bot's screens."""

from html import escape

from ..chain.client import ResourceUsage
from ..db.models import AccountOrder, RamOrderStatus
from ..orders import OrderPage

_BYTE_UNITS = ("Bytes", "KB", "MB", "GB")
_TIME_UNITS = ("us", "ms", "s")


def format_size(value: int, largest: str = "GB") -> str:
    """1536 -> '1.50 KB'. Scales by 1024 up to ``largest``."""
    amount = float(value)
    units = _BYTE_UNITS[:_BYTE_UNITS.index(largest) + 1]
    for unit in units[:-1]:
        if amount < 1024:
            return f"{amount:.2f} {unit}"
        amount /= 1024
    return f"{amount:.2f} {units[-1]}"


def format_cpu(microseconds: int) -> str:
    """1500 -> '1.50 ms'. Scales by 1000 up to seconds."""
    amount = float(microseconds)
    for unit in _TIME_UNITS[:-1]:
        if amount < 1000:
            return f"{amount:.2f} {unit}"
        amount /= 1000
    return f"{amount:.2f} {_TIME_UNITS[-1]}"


def format_profile(account_name: str, usage: ResourceUsage) -> str:
    return (
        f"🔹 Account Name: <code>{escape(account_name)}</code>\n"
        f"🔹 RAM: {format_size(usage.ram_used)} / {format_size(usage.ram_quota)}\n"
        f"🔹 NET: {format_size(usage.net_used, 'MB')} / {format_size(usage.net_max, 'MB')}\n"
        f"🔹 CPU: {format_cpu(usage.cpu_used)} / {format_cpu(usage.cpu_max)}"
    )


def format_account_order(order: AccountOrder, creator: str, fee: str) -> str:
    name = escape(order.account_name)
    return (
        "<b>EOS Account Order</b>\n\n"
        f"Create Account Name: <code>{name}</code>\n\n"
        "Creation Steps:\n"
        f"1. Transfer {escape(fee)} to the following account:\n\n<code>{escape(creator)}</code>\n\n"
        f"with the memo:\n<code>{name}-{escape(order.public_key)}</code>\n\n"
        "2. After the transfer is complete, wait for 1 minute and then click the activation button below.\n\n"
        "⚠️ Note: The bot does not charge any fee during the creation process. "
        "If the account creation fails and leads to asset loss, the bot cannot help you recover assets.\n\n"
        "Please complete the registration order as soon as possible. "
        "Once the account name is taken, the EOS cannot be refunded."
    )


def format_ram_orders(page: OrderPage) -> str:
    lines = [f"Your RAM Orders {page.shown_through}/{page.total_count}:", ""]
    if not page.orders:
        lines.append("No RAM orders found.")
        return "\n".join(lines)

    for order in page.orders:
        lines.append(f"🔹 Account Name: {order.account_name}")
        lines.append(f"🔹 RAM Amount: {order.ram_bytes} bytes")
        lines.append(f"🔹 Price per KB: {order.price_per_kb} EOS")
        lines.append(f"🔹 Status: {order.status.value}")
        lines.append(f"🔹 Order Date(UTC): {order.order_date:%Y-%m-%d %H:%M:%S}")
        if order.status == RamOrderStatus.SUCCESS:
            lines.append(f"🔹 Transaction ID: {order.transaction_id}")
        elif order.status == RamOrderStatus.FAILED:
            lines.append(f"🔹 Failure Reason: {order.failure_reason}")
        lines.append("")
    return "\n".join(lines).rstrip()


def resource_remediation(account_name: str, powerup_url: str, powerup_bot_url: str) -> str:
    return (
        "\n\nYour account resources are insufficient. "
        f"Please visit {powerup_url} and enter your account {account_name} to get free resources, "
        f"or add {powerup_bot_url} to get assistance."
    )
