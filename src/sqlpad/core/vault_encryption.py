"""Vault encryption primitives using PBKDF2 + AES-256-CBC + HMAC-SHA256.

This module provides low-level cryptographic functions for sealing the stored
connection settings:
- PBKDF2-HMAC-SHA256 key derivation from a passphrase and a 32-byte salt
- AES-256-CBC encryption with PKCS7 padding
- HMAC-SHA256 over salt, IV and ciphertext (encrypt-then-MAC)

Salt and IV are generated fresh on every encryption.
"""

import hmac
import os

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from sqlpad.constants import (
    AES_BLOCK_SIZE,
    AES_KEY_SIZE,
    KDF_DEFAULT_ITERATIONS,
    KDF_MIN_ITERATIONS,
    KDF_SALT_SIZE,
    VAULT_IV_SIZE,
    VAULT_TAG_SIZE,
)
from sqlpad.core.errors import DecryptError
from sqlpad.models.connection import EncryptedBlob

_KEY_BYTES = AES_KEY_SIZE // 8
_CBC_IV_BYTES = AES_BLOCK_SIZE // 8


def generate_salt() -> bytes:
    """Generate a cryptographically secure random salt.

    Returns:
        32 bytes of random data suitable for use as a salt
    """
    return os.urandom(KDF_SALT_SIZE)


def generate_iv() -> bytes:
    """Generate a fresh 32-byte IV field (AES-CBC consumes the first 16 bytes)."""
    return os.urandom(VAULT_IV_SIZE)


def derive_keys(
    passphrase: str, salt: bytes, iterations: int = KDF_DEFAULT_ITERATIONS
) -> tuple[bytes, bytes]:
    """Derive an AES-256 key and an HMAC-SHA256 key from a passphrase.

    PBKDF2-HMAC-SHA256 produces 64 bytes: the first 32 are the encryption key,
    the last 32 the authentication key.

    Args:
        passphrase: Passphrase source (install path or a real user secret)
        salt: 32-byte salt stored alongside the ciphertext
        iterations: PBKDF2 iteration count (at least 1000)

    Returns:
        Tuple of (encryption_key, mac_key)

    Raises:
        ValueError: If the iteration count is below the minimum
    """
    if iterations < KDF_MIN_ITERATIONS:
        raise ValueError(f"KDF iteration count must be at least {KDF_MIN_ITERATIONS}")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=_KEY_BYTES * 2,
        salt=salt,
        iterations=iterations,
    )
    material = kdf.derive(passphrase.encode("utf-8"))
    return material[:_KEY_BYTES], material[_KEY_BYTES:]


def compute_tag(mac_key: bytes, salt: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """HMAC-SHA256 over ``salt || iv || ciphertext``."""
    return hmac.new(mac_key, salt + iv + ciphertext, "sha256").digest()


def encrypt_data(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """Encrypt data using AES-256-CBC with PKCS7 padding.

    Args:
        plaintext: Data to encrypt
        key: 32-byte AES-256 key
        iv: IV field; its first 16 bytes seed CBC

    Returns:
        Padded ciphertext
    """
    padder = padding.PKCS7(AES_BLOCK_SIZE).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv[:_CBC_IV_BYTES])).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def decrypt_data(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypt AES-256-CBC data and strip PKCS7 padding.

    Raises:
        DecryptError: If the ciphertext length or padding is invalid
    """
    if not ciphertext or len(ciphertext) % _CBC_IV_BYTES:
        raise DecryptError("Ciphertext is not a whole number of AES blocks")

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv[:_CBC_IV_BYTES])).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(AES_BLOCK_SIZE).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise DecryptError("Invalid padding in decrypted data") from e


class VaultEncryption:
    """High-level vault encryption interface.

    Combines PBKDF2 key derivation, AES-256-CBC and an HMAC tag.

    Blob format:
        [salt: 32 bytes][iv: 32 bytes][ciphertext: variable][tag: 32 bytes]
    """

    def __init__(self, iterations: int = KDF_DEFAULT_ITERATIONS) -> None:
        if iterations < KDF_MIN_ITERATIONS:
            raise ValueError(f"KDF iteration count must be at least {KDF_MIN_ITERATIONS}")
        self.iterations = iterations

    def encrypt(self, plaintext: bytes, passphrase: str) -> EncryptedBlob:
        """Seal ``plaintext`` under a key derived from ``passphrase``.

        A new salt and IV are drawn for every call.
        """
        salt = generate_salt()
        iv = generate_iv()
        key, mac_key = derive_keys(passphrase, salt, self.iterations)

        ciphertext = encrypt_data(plaintext, key, iv)
        tag = compute_tag(mac_key, salt, iv, ciphertext)

        return EncryptedBlob(salt=salt, iv=iv, ciphertext=ciphertext + tag)

    def decrypt(self, blob: EncryptedBlob, passphrase: str) -> bytes:
        """Verify and open a sealed blob.

        Raises:
            DecryptError: If the blob is malformed, was sealed with a different
                key, or has been modified
        """
        if len(blob.ciphertext) < VAULT_TAG_SIZE + _CBC_IV_BYTES:
            raise DecryptError("Invalid encrypted blob: ciphertext too small")

        ciphertext = blob.ciphertext[:-VAULT_TAG_SIZE]
        tag = blob.ciphertext[-VAULT_TAG_SIZE:]

        key, mac_key = derive_keys(passphrase, blob.salt, self.iterations)
        expected = compute_tag(mac_key, blob.salt, blob.iv, ciphertext)
        if not hmac.compare_digest(tag, expected):
            raise DecryptError("Integrity check failed: wrong key or corrupted data")

        return decrypt_data(ciphertext, key, blob.iv)

    def encrypt_to_string(self, plaintext: bytes, passphrase: str) -> str:
        return self.encrypt(plaintext, passphrase).to_base64()

    def decrypt_from_string(self, stored: str, passphrase: str) -> bytes:
        return self.decrypt(EncryptedBlob.from_base64(stored), passphrase)
