"""
Button payloads as typed commands.

Inline buttons carry a short colon-delimited token (``view_ram_orders:2``).
``decode_callback`` turns it into one of the Command variants below exactly
once, at the transport boundary; handlers only ever see typed values.
Payloads never contain secrets: flows that need server-side state put it in a
PendingStore and pass the opaque token instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

MAX_CALLBACK_BYTES = 64

AUTHORIZATION_HOURS = (1, 6, 12, 24, 72, 168)


class UnknownCommand(ValueError):
    """The payload does not decode to any known command."""


@dataclass(frozen=True)
class Command:
    tag: ClassVar[str] = ""

    def encode(self) -> str:
        return self.tag

    @classmethod
    def parse(cls, args: list[str]) -> Command:
        if args:
            raise UnknownCommand(f"{cls.tag} takes no arguments")
        return cls()


@dataclass(frozen=True)
class Wallets(Command):
    tag: ClassVar[str] = "wallets"


@dataclass(frozen=True)
class ImportAccount(Command):
    tag: ClassVar[str] = "import_account"


@dataclass(frozen=True)
class SelectAccount(Command):
    """Pick one of the accounts found for an imported key."""
    tag: ClassVar[str] = "select_account"
    token: str
    index: int

    def encode(self) -> str:
        return f"{self.tag}:{self.token}:{self.index}"

    @classmethod
    def parse(cls, args: list[str]) -> Command:
        if len(args) != 2 or not args[0]:
            raise UnknownCommand("select_account needs a token and an index")
        return cls(token=args[0], index=_parse_int(args[1], minimum=0))


@dataclass(frozen=True)
class CreateAccount(Command):
    tag: ClassVar[str] = "create_account"


@dataclass(frozen=True)
class ViewAccountOrder(Command):
    tag: ClassVar[str] = "view_order"


@dataclass(frozen=True)
class ActivateAccount(Command):
    tag: ClassVar[str] = "activate_account"


@dataclass(frozen=True)
class DeleteAccountOrder(Command):
    tag: ClassVar[str] = "delete_order"


@dataclass(frozen=True)
class Authorize(Command):
    tag: ClassVar[str] = "authorize"

    @classmethod
    def parse(cls, args: list[str]) -> Command:
        if args:
            return ConfirmAuthorization.parse(args)
        return cls()


@dataclass(frozen=True)
class ConfirmAuthorization(Command):
    """Duration choice for an unlock whose password was already verified."""
    tag: ClassVar[str] = "authorize"
    hours: int
    token: str

    def encode(self) -> str:
        return f"{self.tag}:{self.hours}:{self.token}"

    @classmethod
    def parse(cls, args: list[str]) -> Command:
        if len(args) != 2 or not args[1]:
            raise UnknownCommand("authorize needs a duration and a token")
        hours = _parse_int(args[0], minimum=1)
        if hours not in AUTHORIZATION_HOURS:
            raise UnknownCommand(f"unsupported authorization duration: {hours}")
        return cls(hours=hours, token=args[1])


@dataclass(frozen=True)
class LockWallet(Command):
    tag: ClassVar[str] = "lock_wallet"


@dataclass(frozen=True)
class Profile(Command):
    tag: ClassVar[str] = "profile"


@dataclass(frozen=True)
class Transfer(Command):
    tag: ClassVar[str] = "transfer"


@dataclass(frozen=True)
class BuyRam(Command):
    tag: ClassVar[str] = "buy_ram"


@dataclass(frozen=True)
class PlaceRamOrder(Command):
    tag: ClassVar[str] = "ram_order"


@dataclass(frozen=True)
class ViewRamOrders(Command):
    tag: ClassVar[str] = "view_ram_orders"
    page: int = 1

    def encode(self) -> str:
        return f"{self.tag}:{self.page}"

    @classmethod
    def parse(cls, args: list[str]) -> Command:
        if not args:
            return cls()
        if len(args) != 1:
            raise UnknownCommand("view_ram_orders takes one page number")
        return cls(page=_parse_int(args[0], minimum=1))


@dataclass(frozen=True)
class ClearRamOrders(Command):
    tag: ClassVar[str] = "clear_ram_orders"


@dataclass(frozen=True)
class ConfirmClearRamOrders(Command):
    tag: ClassVar[str] = "confirm_clear_ram_orders"


@dataclass(frozen=True)
class DeleteAccount(Command):
    tag: ClassVar[str] = "delete_account"


@dataclass(frozen=True)
class ConfirmDeleteAccount(Command):
    tag: ClassVar[str] = "confirm_delete_account"


@dataclass(frozen=True)
class Close(Command):
    tag: ClassVar[str] = "close"


_COMMANDS: dict[str, type[Command]] = {
    cls.tag: cls
    for cls in (
        Wallets,
        ImportAccount,
        SelectAccount,
        CreateAccount,
        ViewAccountOrder,
        ActivateAccount,
        DeleteAccountOrder,
        Authorize,
        LockWallet,
        Profile,
        Transfer,
        BuyRam,
        PlaceRamOrder,
        ViewRamOrders,
        ClearRamOrders,
        ConfirmClearRamOrders,
        DeleteAccount,
        ConfirmDeleteAccount,
        Close,
    )
}


def _parse_int(value: str, minimum: int) -> int:
    if not value.isdigit():
        raise UnknownCommand(f"expected a number, got {value!r}")
    number = int(value)
    if number < minimum:
        raise UnknownCommand(f"{number} is below {minimum}")
    return number


def decode_callback(data: str) -> Command:
    """Decode a button payload.

    Raises:
        UnknownCommand: unrecognized tag or malformed arguments
    """
    if not data:
        raise UnknownCommand("empty callback payload")
    tag, *args = data.split(":")
    command_cls = _COMMANDS.get(tag)
    if command_cls is None:
        raise UnknownCommand(f"unknown command: {tag}")
    return command_cls.parse(args)


def encode_callback(command: Command) -> str:
    payload = command.encode()
    if len(payload.encode("utf-8")) > MAX_CALLBACK_BYTES:
        raise ValueError(f"callback payload too long: {payload}")
    return payload
