"""Account name helpers."""

import re
import secrets

ACCOUNT_NAME_ALPHABET = "abcdefghijklmnopqrstuvwxyz12345"
ACCOUNT_NAME_LENGTH = 12

_ACCOUNT_NAME_RE = re.compile(r"^[a-z1-5.]{1,12}$")


def generate_account_name() -> str:
    """A random 12-character name, valid for self-service sign-up."""
    return "".join(secrets.choice(ACCOUNT_NAME_ALPHABET) for _ in range(ACCOUNT_NAME_LENGTH))


def is_valid_account_name(name: str) -> bool:
    return bool(_ACCOUNT_NAME_RE.match(name)) and not name.endswith(".")
