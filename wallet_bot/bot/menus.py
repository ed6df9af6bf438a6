"""Inline keyboards."""

from ..conversation import commands as cmd
from .transport import Button, Keyboard

WALLET_BUTTON = Button("↔️ Wallet", cmd.Wallets())
CLOSE_BUTTON = Button("❌ Close", cmd.Close())


def start_menu() -> Keyboard:
    return [
        [WALLET_BUTTON],
        [Button("👤 Profile", cmd.Profile())],
        [CLOSE_BUTTON],
    ]


def back_to_wallet() -> Keyboard:
    return [[WALLET_BUTTON]]


def wallet_menu_no_account() -> Keyboard:
    return [
        [Button("🆕 Create Account", cmd.CreateAccount())],
        [Button("📥 Import Account", cmd.ImportAccount())],
        [CLOSE_BUTTON],
    ]


def wallet_menu_with_account(has_ram_orders: bool = False) -> Keyboard:
    keyboard = [
        [Button("💸 Transfer", cmd.Transfer()), Button("💾 Buy RAM", cmd.BuyRam())],
        [Button("📈 RAM Limit Order", cmd.PlaceRamOrder())],
        [Button("🔑 Authorize", cmd.Authorize()), Button("🔒 Lock", cmd.LockWallet())],
        [Button("👤 Profile", cmd.Profile())],
        [Button("🗑 Delete Account", cmd.DeleteAccount())],
        [CLOSE_BUTTON],
    ]
    if has_ram_orders:
        keyboard.insert(0, [Button("📜 RAM Orders", cmd.ViewRamOrders())])
    return keyboard


def pending_order_menu() -> Keyboard:
    return [
        [Button("View Order", cmd.ViewAccountOrder())],
        [CLOSE_BUTTON],
    ]


def account_order_menu(with_delete: bool = False) -> Keyboard:
    keyboard = [
        [Button("Activate", cmd.ActivateAccount())],
        [WALLET_BUTTON],
    ]
    if with_delete:
        keyboard.insert(0, [Button("❌ Delete Order", cmd.DeleteAccountOrder())])
    return keyboard


def authorization_durations(token: str) -> Keyboard:
    def label(hours: int) -> str:
        if hours < 24:
            return f"{hours} hour" + ("s" if hours > 1 else "")
        days = hours // 24
        return f"{days} day" + ("s" if days > 1 else "")

    buttons = [Button(label(h), cmd.ConfirmAuthorization(hours=h, token=token)) for h in cmd.AUTHORIZATION_HOURS]
    return [buttons[:3], buttons[3:]]


def ram_orders_menu(page: int, has_previous: bool, has_next: bool) -> Keyboard:
    keyboard: Keyboard = [[Button("Clear Orders", cmd.ClearRamOrders())]]
    if has_next:
        keyboard.append([Button("➡️ Next", cmd.ViewRamOrders(page=page + 1))])
    if has_previous:
        keyboard.append([Button("⬅️ Previous", cmd.ViewRamOrders(page=page - 1))])
    keyboard.append([WALLET_BUTTON])
    return keyboard


def confirm_menu(confirm: cmd.Command, label: str = "Yes, delete") -> Keyboard:
    return [
        [Button(label, confirm)],
        [Button("No, go back", cmd.Wallets())],
    ]


def select_account_menu(token: str, accounts) -> Keyboard:
    return [
        [Button(f"{a.account_name} ({a.permission_name})", cmd.SelectAccount(token=token, index=i))]
        for i, a in enumerate(accounts)
    ]
