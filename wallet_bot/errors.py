"""Typed failures raised by the wallet core and its collaborators."""

from typing import Optional


class WalletError(Exception):
    """Base class for failures that are reported to the user."""


class DecryptionFailure(WalletError):
    """Wrong password or corrupted ciphertext."""

    def __init__(self, message: str = "Unable to decrypt private key"):
        super().__init__(message)


class NoAccount(WalletError):
    """The user has no stored credential."""

    def __init__(self, message: str = "No account found. Please create or import an account."):
        super().__init__(message)


class NoSession(WalletError):
    """A signing operation was attempted without a live session."""

    def __init__(self, message: str = "Wallet is locked. Please unlock it first."):
        super().__init__(message)


class NoPendingOrder(WalletError):
    """No outstanding account-creation order exists for the user."""

    def __init__(self, message: str = "No pending orders found."):
        super().__init__(message)


class PendingOrderExists(WalletError):
    """The user already has an account-creation order waiting for activation."""

    def __init__(self, account_name: str):
        self.account_name = account_name
        super().__init__(f"You already have a pending order for account {account_name}.")


class AccountAlreadyExists(WalletError):
    """A generated account name is already registered on chain."""

    def __init__(self, account_name: str):
        self.account_name = account_name
        super().__init__("Generated account already exists. Please try again.")


class AccountNotYetCreated(WalletError):
    """Activation was attempted before the account exists on chain."""

    def __init__(self, account_name: str):
        self.account_name = account_name
        super().__init__(
            f"Account activation failed. The account {account_name} does not exist yet."
        )


class PendingLimitExceeded(WalletError):
    """The user already has the maximum number of pending RAM orders."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"You have reached the maximum limit of {limit} pending RAM orders.")


class InvalidInput(WalletError):
    """A free-text reply could not be parsed."""


class ChainError(WalletError):
    """A fault reported by the chain RPC or the signing library.

    ``name`` carries the node's structured error name when one is available
    (e.g. ``tx_cpu_usage_exceeded``).
    """

    def __init__(self, message: str, name: Optional[str] = None, code: Optional[int] = None):
        self.name = name
        self.code = code
        super().__init__(message)


class ResourceInsufficient(ChainError):
    """A signed transaction was rejected for CPU, NET or RAM exhaustion."""

    def __init__(self, message: str, resource: str, name: Optional[str] = None):
        self.resource = resource
        super().__init__(message, name=name)
