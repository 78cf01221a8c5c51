"""Credential vault for the console's connection settings.

Seals a ``ConnectionConfig`` with a key derived from a passphrase source and
keeps the result as one opaque base64 string in a preference store.

The default passphrase source is the installation directory, which is not a
secret: this hides the connection string from casual inspection only. Pass a
real user secret as ``passphrase_source`` when confidentiality matters.
"""

from __future__ import annotations

from typing import Any

import orjson

from sqlpad.constants import INSTALL_DIR, KDF_DEFAULT_ITERATIONS
from sqlpad.core.errors import DecryptError
from sqlpad.core.preference_store import MemoryPreferenceStore, PreferenceStore, preference_key
from sqlpad.core.vault_encryption import VaultEncryption
from sqlpad.models.connection import ConnectionConfig
from sqlpad.utils.app_logger import get_logger

logger = get_logger(__name__)

_FIELDS = tuple(ConnectionConfig.model_fields)


def _serialize(config: ConnectionConfig) -> bytes:
    return orjson.dumps(config.model_dump())


def _deserialize(plaintext: bytes, base: ConnectionConfig) -> ConnectionConfig:
    """Overlay the stored fields onto ``base``.

    Raises:
        DecryptError: If the plaintext is not a JSON object of strings
    """
    try:
        data: Any = orjson.loads(plaintext)
    except orjson.JSONDecodeError as e:
        raise DecryptError(f"Decrypted data is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecryptError("Decrypted data is not a JSON object")

    update: dict[str, str] = {}
    for name in _FIELDS:
        if name not in data:
            continue
        value = data[name]
        if not isinstance(value, str):
            raise DecryptError(f"Stored field '{name}' is not a string")
        update[name] = value

    return base.model_copy(update=update)


class CredentialVault:
    """Encrypts, persists and restores the console's ConnectionConfig.

    Attributes:
        store: Key-value persistence collaborator
        passphrase_source: Passphrase the vault key is derived from
        storage_key: Key of the blob inside ``store``
    """

    def __init__(
        self,
        store: PreferenceStore,
        passphrase_source: str | None = None,
        *,
        storage_key: str | None = None,
        iterations: int = KDF_DEFAULT_ITERATIONS,
    ) -> None:
        self.store = store
        self.passphrase_source = passphrase_source or str(INSTALL_DIR)
        self.storage_key = storage_key or preference_key()
        self._encryption = VaultEncryption(iterations)

    def seal(self, config: ConnectionConfig) -> str:
        """Encrypt ``config`` into its base64 blob form (fresh salt and IV)."""
        return self._encryption.encrypt_to_string(_serialize(config), self.passphrase_source)

    def unseal(self, stored: str, base: ConnectionConfig | None = None) -> ConnectionConfig:
        """Decrypt a blob produced by :meth:`seal`.

        Raises:
            DecryptError: If the blob is corrupt or sealed with another key
        """
        plaintext = self._encryption.decrypt_from_string(stored, self.passphrase_source)
        return _deserialize(plaintext, base or ConnectionConfig())

    def restore(
        self, stored: str | None, fallback: ConnectionConfig | None = None
    ) -> ConnectionConfig:
        """Decrypt ``stored`` or return ``fallback`` (defaults) when it can't be read.

        Never raises for bad input; the fallback object is never modified.
        """
        base = fallback if fallback is not None else ConnectionConfig()
        if not stored:
            return base.model_copy()

        try:
            return self.unseal(stored, base)
        except DecryptError as e:
            logger.warning(f"Ignoring stored connection settings: {e}")
            return base.model_copy()

    def save(self, config: ConnectionConfig) -> str:
        """Seal ``config`` and overwrite the stored blob.

        Returns:
            The persisted base64 blob
        """
        blob = self.seal(config)
        self.store.set_string(self.storage_key, blob)
        logger.debug("Saved connection settings under %s", self.storage_key)
        return blob

    def load(self, fallback: ConnectionConfig | None = None) -> ConnectionConfig:
        """Read and decrypt the stored settings, falling back to defaults."""
        stored = self.store.get_string(self.storage_key, None)
        return self.restore(stored, fallback)

    def forget(self) -> None:
        """Remove the stored blob."""
        self.store.delete(self.storage_key)
        logger.info("Removed stored connection settings")


def save(config: ConnectionConfig, passphrase_source: str, **kwargs: Any) -> str:
    """Seal ``config`` without touching any store."""
    return CredentialVault(MemoryPreferenceStore(), passphrase_source, **kwargs).seal(config)


def load(stored: str | None, passphrase_source: str, **kwargs: Any) -> ConnectionConfig:
    """Restore a ConnectionConfig from ``stored`` or return defaults."""
    return CredentialVault(MemoryPreferenceStore(), passphrase_source, **kwargs).restore(stored)
