"""
Private key encryption at rest using PBKDF2 + AES-GCM.

The stored value is a single base64 string:

    base64(salt[16] || iv[12] || ciphertext+tag)

A fresh salt and IV are generated on every call to ``encrypt`` so the same
key and password never produce the same ciphertext.
"""

import base64
import binascii
import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import DecryptionFailure

# PBKDF2 configuration
PBKDF2_ITERATIONS = 100000
PBKDF2_HASH = 'sha256'
KEY_LENGTH_BYTES = 32  # 256 bits
SALT_LENGTH_BYTES = 16

# AES-GCM configuration
IV_LENGTH_BYTES = 12  # 96 bits, recommended for AES-GCM
TAG_LENGTH_BYTES = 16

_HEADER_LENGTH = SALT_LENGTH_BYTES + IV_LENGTH_BYTES


def derive_key(password: str, salt: bytes) -> bytes:
    """
    Derive a 256-bit AES key from password and salt using PBKDF2.

    Args:
        password: The user's wallet password
        salt: Random salt stored alongside the ciphertext

    Returns:
        32-byte key suitable for AES-256-GCM
    """
    return hashlib.pbkdf2_hmac(
        PBKDF2_HASH,
        password.encode('utf-8'),
        salt,
        PBKDF2_ITERATIONS,
        dklen=KEY_LENGTH_BYTES
    )


def encrypt(private_key: str, password: str) -> str:
    """
    Encrypt a private key under a password.

    Args:
        private_key: Key material to protect
        password: The user's wallet password

    Returns:
        Base64 string embedding salt, IV and ciphertext
    """
    salt = os.urandom(SALT_LENGTH_BYTES)
    iv = os.urandom(IV_LENGTH_BYTES)

    aesgcm = AESGCM(derive_key(password, salt))
    ciphertext = aesgcm.encrypt(iv, private_key.encode('utf-8'), None)

    return base64.b64encode(salt + iv + ciphertext).decode('ascii')


def decrypt(ciphertext: str, password: str) -> str:
    """
    Decrypt a private key produced by ``encrypt``.

    Args:
        ciphertext: Base64 string from the users table
        password: The user's wallet password

    Returns:
        The private key

    Raises:
        DecryptionFailure: wrong password, truncated or tampered data
    """
    try:
        blob = base64.b64decode(ciphertext.encode('ascii'), validate=True)
    except (binascii.Error, ValueError, UnicodeEncodeError) as e:
        raise DecryptionFailure("Stored key is not valid base64") from e

    if len(blob) < _HEADER_LENGTH + TAG_LENGTH_BYTES:
        raise DecryptionFailure("Stored key is truncated")

    salt = blob[:SALT_LENGTH_BYTES]
    iv = blob[SALT_LENGTH_BYTES:_HEADER_LENGTH]
    body = blob[_HEADER_LENGTH:]

    aesgcm = AESGCM(derive_key(password, salt))
    try:
        plaintext = aesgcm.decrypt(iv, body, None)
    except InvalidTag as e:
        raise DecryptionFailure() from e

    try:
        return plaintext.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecryptionFailure() from e
