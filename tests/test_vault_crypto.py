import base64

import pytest

from wallet_bot.errors import DecryptionFailure
from wallet_bot.vault import crypto


def test_encrypt_then_decrypt_returns_original_key():
    ciphertext = crypto.encrypt("5KQwrPbwdL6PhXujxW37FSSQZ1JiwsST4cqQzDeyXtP79zkvFD3", "mypassword1")
    assert crypto.decrypt(ciphertext, "mypassword1") == "5KQwrPbwdL6PhXujxW37FSSQZ1JiwsST4cqQzDeyXtP79zkvFD3"


def test_each_encryption_uses_fresh_salt_and_iv():
    first = crypto.encrypt("PRIV_same", "mypassword1")
    second = crypto.encrypt("PRIV_same", "mypassword1")
    assert first != second

    first_raw = base64.b64decode(first)
    second_raw = base64.b64decode(second)
    assert first_raw[:crypto.SALT_LENGTH_BYTES] != second_raw[:crypto.SALT_LENGTH_BYTES]


def test_ciphertext_layout_is_salt_iv_and_tagged_body():
    raw = base64.b64decode(crypto.encrypt("abc", "mypassword1"))
    expected = crypto.SALT_LENGTH_BYTES + crypto.IV_LENGTH_BYTES + len(b"abc") + crypto.TAG_LENGTH_BYTES
    assert len(raw) == expected


def test_wrong_password_raises_decryption_failure():
    ciphertext = crypto.encrypt("PRIV_secret", "mypassword1")
    with pytest.raises(DecryptionFailure):
        crypto.decrypt(ciphertext, "wrongpassword")


def test_tampered_ciphertext_raises_decryption_failure():
    raw = bytearray(base64.b64decode(crypto.encrypt("PRIV_secret", "mypassword1")))
    raw[-1] ^= 0x01
    with pytest.raises(DecryptionFailure):
        crypto.decrypt(base64.b64encode(bytes(raw)).decode(), "mypassword1")


@pytest.mark.parametrize("ciphertext", ["not base64!!", "", base64.b64encode(b"short").decode()])
def test_malformed_ciphertext_raises_decryption_failure(ciphertext):
    with pytest.raises(DecryptionFailure):
        crypto.decrypt(ciphertext, "mypassword1")


def test_derive_key_is_deterministic_per_salt():
    salt = b"\x00" * crypto.SALT_LENGTH_BYTES
    assert crypto.derive_key("mypassword1", salt) == crypto.derive_key("mypassword1", salt)
    assert len(crypto.derive_key("mypassword1", salt)) == crypto.KEY_LENGTH_BYTES
    assert crypto.derive_key("mypassword1", salt) != crypto.derive_key("mypassword1", b"\x01" * 16)
