"""
Menu-driven wallet flows.

Every inbound update is handled to completion under a per-chat lock before
the next update for the same chat starts. Flows that need a typed reply arm
the chat's prompt slot; the reply handler runs inside its own error guard, so
a failure is reported with the flow's label and the user lands back on a menu.
"""

import asyncio
import weakref
from html import escape
from typing import Awaitable, Callable, Optional

from ..accounts import AccountService, ImportResult, validate_password
from ..chain.client import ChainClient
from ..config import BotConfig
from ..conversation import commands as cmd
from ..conversation.collector import ConversationCollector
from ..db.base import UserStore
from ..db.models import UserCredential
from ..errors import (
    AccountAlreadyExists,
    AccountNotYetCreated,
    DecryptionFailure,
    InvalidInput,
    NoAccount,
    NoPendingOrder,
    NoSession,
    PendingLimitExceeded,
    PendingOrderExists,
    ResourceInsufficient,
    WalletError,
)
from ..logging import get_logger
from ..orders import RamOrderManager
from ..vault import crypto
from ..vault.pending import PendingStore
from ..vault.session import AuthorizationResult, SessionAuthorizer
from . import formatting, inputs, menus
from .transport import ChatTransport, InboundEvent, Keyboard, TransportError

logger = get_logger("handlers")

HTML = "HTML"

TRANSFER_PROMPT = (
    "Enter the receiver, the amount and an optional memo, separated by commas.\n\n"
    "&lt;receiver&gt;,&lt;amount&gt;,&lt;memo&gt;\n\n"
    "<b>Example (Click to Copy):</b>\n"
    "1. <code>replace_account,0.001</code>\n"
    "2. <code>replace_account,1,ThisIsTheMemo</code>\n"
    "3. <code>replace_account,3.45,This_is_The_memo</code>\n"
    '("_" will be replaced with space)'
)

BUY_RAM_PROMPT = (
    "Enter the receiver and the amount (bytes or EOS), separated by a comma.\n\n"
    "&lt;receiver&gt;,&lt;ram_bytes&gt; or &lt;eos_amount&gt;\n\n"
    "<b>Example (Click to Copy):</b>\n"
    "1. <code>replace_account,1024bytes</code>\n"
    "2. <code>replace_account,1.2kb</code>\n"
    "3. <code>replace_account,1mb</code>\n"
    "4. <code>replace_account,2.1gb</code>\n"
    "5. <code>replace_account,1EOS</code>\n"
    "6. <code>replace_account,3.45EOS</code>"
)

RAM_ORDER_PROMPT = (
    "Please make sure your session lasts long enough for the order to execute "
    "(use Authorize on the wallet page).\n\n"
    "Enter RAM order details in the format:\n\n"
    "&lt;receiver&gt;,&lt;ram_amount&gt;,&lt;price_per_kb(EOS)&gt;\n\n"
    "<b>Example (Click to Copy):</b>\n"
    "1. <code>replace_account,1024bytes,0.01</code>\n"
    "2. <code>replace_account,1kb,0.01</code>\n"
    "3. <code>replace_account,1mb,0.01</code>\n"
    "4. <code>replace_account,1gb,0.01</code>"
)

AUTHORIZE_PROMPT = (
    "⚠️The bot will be authorized to execute some transactions with your private key "
    "temporarily, such as executing limit orders.\n\n"
    "🔐Please enter your password to authorize:"
)


class WalletBot:
    """Routes inbound chat events to the wallet flows."""

    def __init__(
        self,
        transport: ChatTransport,
        chain: ChainClient,
        users: UserStore,
        sessions: SessionAuthorizer,
        collector: ConversationCollector,
        orders: RamOrderManager,
        accounts: AccountService,
        grants: PendingStore[tuple[str, str]],
        imports: PendingStore[ImportResult],
        config: BotConfig,
    ):
        self.transport = transport
        self.chain = chain
        self.users = users
        self.sessions = sessions
        self.collector = collector
        self.orders = orders
        self.accounts = accounts
        self.grants = grants
        self.imports = imports
        self.config = config
        # An entry lives only while some update for that chat holds or awaits it
        self._chat_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

        self._routes: dict[type, Callable[[InboundEvent, cmd.Command], Awaitable[None]]] = {
            cmd.Wallets: self.show_wallet,
            cmd.ImportAccount: self.import_account,
            cmd.SelectAccount: self.select_account,
            cmd.CreateAccount: self.create_account,
            cmd.ViewAccountOrder: self.view_account_order,
            cmd.ActivateAccount: self.activate_account,
            cmd.DeleteAccountOrder: self.delete_account_order,
            cmd.Authorize: self.authorize,
            cmd.ConfirmAuthorization: self.confirm_authorization,
            cmd.LockWallet: self.lock_wallet,
            cmd.Profile: self.profile,
            cmd.Transfer: self.transfer,
            cmd.BuyRam: self.buy_ram,
            cmd.PlaceRamOrder: self.place_ram_order,
            cmd.ViewRamOrders: self.view_ram_orders,
            cmd.ClearRamOrders: self.clear_ram_orders,
            cmd.ConfirmClearRamOrders: self.confirm_clear_ram_orders,
            cmd.DeleteAccount: self.delete_account,
            cmd.ConfirmDeleteAccount: self.confirm_delete_account,
            cmd.Close: self.close,
        }

    # --- Entry point ---

    async def handle(self, event: InboundEvent) -> None:
        lock = self._chat_locks.setdefault(event.chat_id, asyncio.Lock())
        async with lock:
            try:
                if event.is_callback:
                    await self._handle_callback(event)
                else:
                    await self._handle_text(event)
            except Exception as e:
                logger.exception(f"Unhandled error in chat {event.chat_id}: {e}")
                await self._safe_send(event.chat_id, f"Error: {e}", menus.back_to_wallet())

    async def _handle_callback(self, event: InboundEvent) -> None:
        if event.callback_id:
            try:
                await self.transport.answer_callback(event.callback_id)
            except TransportError as e:
                logger.debug(f"Could not answer callback {event.callback_id}: {e}")

        try:
            command = cmd.decode_callback(event.callback_data or "")
        except cmd.UnknownCommand as e:
            logger.warning(f"Ignoring callback from user {event.user_id}: {e}")
            return

        await self._routes[type(command)](event, command)

    async def _handle_text(self, event: InboundEvent) -> None:
        text = event.text or ""
        if text.startswith("/"):
            self.collector.abandon(event.chat_id)
            await self._handle_slash_command(event, text.split()[0].split("@")[0])
            return

        if not await self.collector.deliver(event.chat_id, text):
            logger.debug(f"Chat {event.chat_id}: message with no armed prompt ignored")

    async def _handle_slash_command(self, event: InboundEvent, command: str) -> None:
        if command == "/start":
            await self.users.ensure(event.user_id)
            await self.transport.send_message(
                event.chat_id,
                "👋 Welcome! Manage your EOS account right here in the chat.",
                menus.start_menu(),
            )
        elif command == "/wallet":
            await self.show_wallet(event, cmd.Wallets())
        else:
            logger.debug(f"Unknown slash command {command} from user {event.user_id}")

    # --- Helpers ---

    async def _show(
        self,
        event: InboundEvent,
        text: str,
        keyboard: Optional[Keyboard] = None,
        parse_mode: Optional[str] = None,
    ) -> None:
        """Replace the pressed message in place, or send a new one."""
        if event.is_callback and event.message_id is not None:
            try:
                await self.transport.edit_message(event.chat_id, event.message_id, text, keyboard, parse_mode)
                return
            except TransportError as e:
                logger.debug(f"Edit failed in chat {event.chat_id}, sending instead: {e}")
        await self.transport.send_message(event.chat_id, text, keyboard, parse_mode)

    async def _safe_send(self, chat_id: int, text: str, keyboard: Optional[Keyboard] = None) -> None:
        try:
            await self.transport.send_message(chat_id, text, keyboard)
        except TransportError as e:
            logger.error(f"Could not deliver error message to chat {chat_id}: {e}")

    async def _report(self, chat_id: int, label: str, error: Exception, account_name: Optional[str] = None) -> None:
        message = str(error) or type(error).__name__
        if isinstance(error, ResourceInsufficient) and account_name:
            message += formatting.resource_remediation(
                account_name, self.config.powerup_url, self.config.powerup_bot_url
            )
        await self._safe_send(chat_id, f"{label} {message}", menus.back_to_wallet())

    async def _guarded(
        self,
        chat_id: int,
        label: str,
        step: Callable[[], Awaitable[None]],
        account_name: Optional[str] = None,
    ) -> None:
        """Run one conversation step, turning any failure into a labelled message."""
        try:
            await step()
        except WalletError as e:
            logger.info(f"{label} {e} (chat {chat_id})")
            await self._report(chat_id, label, e, account_name)
        except Exception as e:
            logger.exception(f"{label} {e} (chat {chat_id})")
            await self._report(chat_id, label, e, account_name)

    async def _credential(self, user_id: int) -> Optional[UserCredential]:
        user = await self.users.get(user_id)
        return user if user is not None and user.has_credential else None

    def _tx_link(self, tx_id: str) -> str:
        return f"{self.config.explorer_tx_url}{tx_id}"

    async def _ram_price_line(self) -> str:
        try:
            price = await self.chain.get_ram_price()
        except Exception as e:
            logger.warning(f"RAM price unavailable: {e}")
            return "RAM price: unavailable\n\n"
        return f"RAM price: {price} EOS/KB\n\n"

    # --- Wallet ---

    async def _wallet_text(self, user: UserCredential, private_key: str) -> str:
        balance = await self.chain.get_balance(user.account_name)
        text = (
            f"🔹 Account Name: <code>{escape(user.account_name)}</code>\n"
            f"🔹 Public Key: <code>{escape(user.public_key)}</code>\n"
            f"🔹 Private Key(Plz Backup❗️): <span class=\"tg-spoiler\">{escape(private_key)}</span>\n"
            f"🔹 Balance: {balance} EOS\n"
        )
        expiration = self.sessions.get_expiration(user.user_id)
        if expiration is not None:
            text += f"🔹 Session expires in {expiration.describe()}"
        return text

    async def show_wallet(self, event: InboundEvent, command: cmd.Command) -> None:
        user = await self._credential(event.user_id)
        if user is None:
            order = await self.accounts.get_pending_order(event.user_id)
            if order is not None:
                await self._show(
                    event,
                    f"You have an ongoing order for account: <code>{escape(order.account_name)}</code>",
                    menus.pending_order_menu(),
                    HTML,
                )
            else:
                await self._show(event, "Please Create Account or Import Account.", menus.wallet_menu_no_account())
            return

        private_key = self.sessions.get_private_key(event.user_id)
        if private_key is not None:
            text = await self._wallet_text(user, private_key)
            keyboard = menus.wallet_menu_with_account(await self.orders.has_orders(event.user_id))
            await self._show(event, text, keyboard, HTML)
            return

        chat_id = event.chat_id
        user_id = event.user_id

        async def on_password(password: str) -> None:
            async def step() -> None:
                result = await self.sessions.authorize(user_id, password, self.config.default_unlock_hours)
                if result == AuthorizationResult.PASSWORD_INCORRECT:
                    await self.transport.send_message(
                        chat_id, "🙅 Incorrect password. Please try again.", menus.start_menu()
                    )
                    return
                if result == AuthorizationResult.NO_ACCOUNT:
                    raise NoAccount()

                unlocked = await self._credential(user_id)
                key = self.sessions.get_private_key(user_id)
                if unlocked is None or key is None:
                    raise NoSession()
                text = "<b>Wallet unlocked. You can now buy RAM or transfer.</b>\n\n"
                text += await self._wallet_text(unlocked, key)
                keyboard = menus.wallet_menu_with_account(await self.orders.has_orders(user_id))
                await self.transport.send_message(chat_id, text, keyboard, HTML)

            await self._guarded(chat_id, "Error unlocking wallet:", step)

        await self.transport.send_message(chat_id, "🔐Please enter your password to unlock:")
        self.collector.prompt(chat_id, on_password, label="unlock")

    async def lock_wallet(self, event: InboundEvent, command: cmd.Command) -> None:
        await self.sessions.lock(event.user_id)
        self.grants.discard_owner(event.user_id)
        await self._show(event, "🔒 Wallet locked.", menus.back_to_wallet())

    # --- Import ---

    async def import_account(self, event: InboundEvent, command: cmd.Command) -> None:
        chat_id = event.chat_id
        user_id = event.user_id
        label = "Error importing account:"

        async def on_private_key(private_key: str) -> None:
            if not private_key.strip():
                await self.transport.send_message(chat_id, "Please provide your EOS private key.")
                return

            async def on_password(password: str) -> None:
                try:
                    validate_password(password)
                except InvalidInput as e:
                    await self.transport.send_message(chat_id, str(e))
                    self.collector.prompt(chat_id, on_password, label="import:password")
                    return

                async def step() -> None:
                    result = await self.accounts.import_account(user_id, private_key, password)
                    if result.saved is not None:
                        await self._send_imported(chat_id, result.saved)
                        return
                    token = self.imports.put(user_id, result)
                    await self.transport.send_message(
                        chat_id,
                        "Multiple accounts found. Please select one:",
                        menus.select_account_menu(token, result.accounts),
                    )

                await self._guarded(chat_id, label, step)

            await self.transport.send_message(
                chat_id, "🔐Please enter an encryption password (>= 8 characters):"
            )
            self.collector.prompt(chat_id, on_password, label="import:password")

        await self.transport.send_message(chat_id, "🔑Please enter your EOS private key:")
        self.collector.prompt(chat_id, on_private_key, label="import:key")

    async def _send_imported(self, chat_id: int, user: UserCredential) -> None:
        await self.transport.send_message(
            chat_id,
            "Account imported successfully.\n\n"
            f"🔹 Account Name: {user.account_name}\n"
            f"🔹 Public Key: {user.public_key}\n"
            f"🔹 Permission: {user.permission_name}",
            menus.start_menu(),
        )

    async def select_account(self, event: InboundEvent, command: cmd.SelectAccount) -> None:
        async def step() -> None:
            result = self.imports.peek(command.token, event.user_id)
            if result is None:
                raise InvalidInput("This import has expired. Please import the account again.")
            if not 0 <= command.index < len(result.accounts):
                raise InvalidInput("Unknown account choice.")
            self.imports.pop(command.token, event.user_id)
            saved = await self.accounts.select_account(event.user_id, result, result.accounts[command.index])
            await self._send_imported(event.chat_id, saved)

        await self._guarded(event.chat_id, "Error importing account:", step)

    # --- Account creation orders ---

    async def create_account(self, event: InboundEvent, command: cmd.Command) -> None:
        chat_id = event.chat_id
        user_id = event.user_id

        pending = await self.accounts.get_pending_order(user_id)
        if pending is not None:
            await self._show(
                event,
                f"You have an ongoing order for account: <code>{escape(pending.account_name)}</code>",
                menus.pending_order_menu(),
                HTML,
            )
            return

        async def on_password(password: str) -> None:
            try:
                validate_password(password)
            except InvalidInput as e:
                await self.transport.send_message(chat_id, str(e))
                self.collector.prompt(chat_id, on_password, label="create:password")
                return

            async def step() -> None:
                try:
                    order = await self.accounts.create_order(user_id, password)
                except AccountAlreadyExists as e:
                    await self.transport.send_message(chat_id, str(e), menus.back_to_wallet())
                    return
                except PendingOrderExists as e:
                    await self.transport.send_message(chat_id, str(e), menus.pending_order_menu())
                    return
                await self.transport.send_message(
                    chat_id,
                    formatting.format_account_order(
                        order, self.config.account_creator, self.config.account_creation_fee
                    ),
                    menus.account_order_menu(),
                    HTML,
                )

            await self._guarded(chat_id, "Error creating account:", step)

        await self.transport.send_message(
            chat_id, "🔐Please enter a password to encrypt your private key (>= 8 characters):"
        )
        self.collector.prompt(chat_id, on_password, label="create:password")

    async def view_account_order(self, event: InboundEvent, command: cmd.Command) -> None:
        order = await self.accounts.get_pending_order(event.user_id)
        if order is None:
            await self._show(event, "No pending order found.", menus.back_to_wallet())
            return
        await self._show(
            event,
            formatting.format_account_order(order, self.config.account_creator, self.config.account_creation_fee),
            menus.account_order_menu(with_delete=True),
            HTML,
        )

    async def activate_account(self, event: InboundEvent, command: cmd.Command) -> None:
        try:
            user = await self.accounts.activate(event.user_id)
        except (NoPendingOrder, AccountNotYetCreated) as e:
            await self.transport.send_message(event.chat_id, str(e), menus.back_to_wallet())
            return
        await self.transport.send_message(
            event.chat_id,
            "Account activated successfully!\n\n"
            f"🔹 Account Name: {user.account_name}\n"
            f"🔹 Public Key: {user.public_key}",
            menus.back_to_wallet(),
        )

    async def delete_account_order(self, event: InboundEvent, command: cmd.Command) -> None:
        if await self.accounts.delete_order(event.user_id):
            text = "Your account order has been deleted."
        else:
            text = "No pending order found."
        await self.transport.send_message(event.chat_id, text, menus.back_to_wallet())

    # --- Authorization ---

    async def authorize(self, event: InboundEvent, command: cmd.Command) -> None:
        chat_id = event.chat_id
        user_id = event.user_id

        if await self._credential(user_id) is None:
            await self.transport.send_message(chat_id, "No account found for authorization.", menus.back_to_wallet())
            return

        async def on_password(password: str) -> None:
            async def step() -> None:
                user = await self._credential(user_id)
                if user is None:
                    raise NoAccount()
                try:
                    private_key = crypto.decrypt(user.encrypted_private_key, password)
                except DecryptionFailure:
                    await self.transport.send_message(
                        chat_id, "🙅 Incorrect password. Please try again.", menus.back_to_wallet()
                    )
                    return
                token = self.grants.put(user_id, (user.encrypted_private_key, private_key))
                await self.transport.send_message(
                    chat_id, "Select authorization duration:", menus.authorization_durations(token)
                )

            await self._guarded(chat_id, "Error authorizing:", step)

        await self.transport.send_message(chat_id, AUTHORIZE_PROMPT)
        self.collector.prompt(chat_id, on_password, label="authorize")

    async def confirm_authorization(self, event: InboundEvent, command: cmd.ConfirmAuthorization) -> None:
        async def step() -> None:
            grant = self.grants.pop(command.token, event.user_id)
            if grant is None:
                raise InvalidInput("This authorization request has expired. Please authorize again.")
            encrypted_private_key, private_key = grant

            user = await self._credential(event.user_id)
            if user is None or user.encrypted_private_key != encrypted_private_key:
                raise NoAccount("The account changed since you entered your password. Please authorize again.")

            await self.sessions.grant(event.user_id, private_key, command.hours)
            await self.transport.send_message(
                event.chat_id, f"✅Authorized for {command.hours} hour(s).", menus.back_to_wallet()
            )

        await self._guarded(event.chat_id, "Error authorizing:", step)

    # --- Profile ---

    async def profile(self, event: InboundEvent, command: cmd.Command) -> None:
        keyboard = [[menus.Button("⬅️ Return to wallet", cmd.Wallets())], [menus.CLOSE_BUTTON]]
        user = await self._credential(event.user_id)
        if user is None:
            await self._show(event, "Please Create or Import an EOS account.", keyboard)
            return
        usage = await self.chain.get_account_resource_usage(user.account_name)
        await self._show(event, formatting.format_profile(user.account_name, usage), keyboard, HTML)

    # --- Signed transactions ---

    async def _require_session(self, event: InboundEvent, locked_text: str) -> Optional[UserCredential]:
        user = await self._credential(event.user_id)
        if user is None or not self.sessions.is_active(event.user_id):
            await self._show(event, locked_text, menus.back_to_wallet())
            return None
        return user

    def _signing_key(self, user_id: int) -> str:
        private_key = self.sessions.get_private_key(user_id)
        if private_key is None:
            raise NoSession("Your session has expired. Please unlock the wallet again.")
        return private_key

    async def transfer(self, event: InboundEvent, command: cmd.Command) -> None:
        user = await self._require_session(event, "Unlock Wallet to Transfer.")
        if user is None:
            return
        chat_id = event.chat_id

        async def on_reply(text: str) -> None:
            async def step() -> None:
                request = inputs.parse_transfer(text)
                tx_id = await self.chain.transfer(
                    self._signing_key(user.user_id),
                    user.account_name,
                    request.receiver,
                    request.amount,
                    request.memo,
                    user.permission_name or "active",
                )
                memo = f" with memo: {request.memo}" if request.memo else ""
                await self.transport.send_message(
                    chat_id,
                    f"Successfully transferred {request.amount} EOS to {request.receiver}{memo}.\n\n"
                    f"View Transaction: {self._tx_link(tx_id)}",
                    menus.back_to_wallet(),
                )

            await self._guarded(chat_id, "Error transferring:", step, account_name=user.account_name)

        await self.transport.send_message(chat_id, TRANSFER_PROMPT, parse_mode=HTML)
        self.collector.prompt(chat_id, on_reply, label="transfer")

    async def buy_ram(self, event: InboundEvent, command: cmd.Command) -> None:
        user = await self._require_session(event, "Unlock Wallet then buy RAM.")
        if user is None:
            return
        chat_id = event.chat_id

        async def on_reply(text: str) -> None:
            async def step() -> None:
                request = inputs.parse_buy_ram(text)
                key = self._signing_key(user.user_id)
                permission = user.permission_name or "active"
                if request.ram_bytes is not None:
                    tx_id = await self.chain.buy_ram_bytes(
                        key, user.account_name, request.receiver, request.ram_bytes, permission
                    )
                else:
                    tx_id = await self.chain.buy_ram(
                        key, user.account_name, request.receiver, request.eos_amount, permission
                    )
                await self.transport.send_message(
                    chat_id,
                    f"RAM bought successfully!\nTransaction: {self._tx_link(tx_id)}",
                    menus.back_to_wallet(),
                )

            await self._guarded(chat_id, "Error buying RAM:", step, account_name=user.account_name)

        price = await self._ram_price_line()
        await self.transport.send_message(chat_id, price + BUY_RAM_PROMPT, parse_mode=HTML)
        self.collector.prompt(chat_id, on_reply, label="buy_ram")

    # --- RAM orders ---

    async def place_ram_order(self, event: InboundEvent, command: cmd.Command) -> None:
        user = await self._require_session(event, "Unlock Wallet then buy RAM.")
        if user is None:
            return
        chat_id = event.chat_id

        async def on_reply(text: str) -> None:
            async def step() -> None:
                request = inputs.parse_ram_order(text)
                try:
                    await self.orders.place_order(
                        user.user_id, request.receiver, request.ram_bytes, request.price_per_kb
                    )
                except PendingLimitExceeded as e:
                    await self.transport.send_message(chat_id, str(e), menus.back_to_wallet())
                    return
                await self.transport.send_message(chat_id, "RAM order created successfully.", menus.back_to_wallet())

            await self._guarded(chat_id, "Error placing RAM order:", step)

        price = await self._ram_price_line()
        await self.transport.send_message(chat_id, price + RAM_ORDER_PROMPT, parse_mode=HTML)
        self.collector.prompt(chat_id, on_reply, label="ram_order")

    async def view_ram_orders(self, event: InboundEvent, command: cmd.ViewRamOrders) -> None:
        page = await self.orders.list_orders(event.user_id, command.page)
        await self._show(
            event,
            formatting.format_ram_orders(page),
            menus.ram_orders_menu(page.page, page.has_previous, page.has_next),
        )

    async def clear_ram_orders(self, event: InboundEvent, command: cmd.Command) -> None:
        await self._show(
            event,
            "Clear all of your RAM orders, including completed and failed ones?",
            menus.confirm_menu(cmd.ConfirmClearRamOrders(), label="Yes, clear"),
        )

    async def confirm_clear_ram_orders(self, event: InboundEvent, command: cmd.Command) -> None:
        await self.orders.clear_orders(event.user_id)
        await self._show(event, "All your RAM orders have been cleared.", menus.back_to_wallet())

    # --- Deletion ---

    async def delete_account(self, event: InboundEvent, command: cmd.Command) -> None:
        await self._show(
            event,
            "Are you sure you want to delete your EOS account?",
            menus.confirm_menu(cmd.ConfirmDeleteAccount()),
        )

    async def confirm_delete_account(self, event: InboundEvent, command: cmd.Command) -> None:
        await self.accounts.delete_account(event.user_id)
        self.grants.discard_owner(event.user_id)
        self.imports.discard_owner(event.user_id)
        await self._show(event, "Your EOS account information has been deleted.", [[menus.CLOSE_BUTTON]])

    async def close(self, event: InboundEvent, command: cmd.Command) -> None:
        if event.message_id is None:
            return
        try:
            await self.transport.delete_message(event.chat_id, event.message_id)
        except TransportError as e:
            logger.warning(f"Error deleting message in chat {event.chat_id}: {e}")
            await self.transport.send_message(
                event.chat_id, "Failed to delete the message. It may have already been deleted."
            )
