"""Connection settings and their encrypted at-rest form."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from pydantic import BaseModel, Field

from sqlpad.constants import (
    DEFAULT_CONNECTION_STRING,
    DEFAULT_QUERY_TEXT,
    KDF_SALT_SIZE,
    VAULT_IV_SIZE,
    VAULT_TAG_SIZE,
)
from sqlpad.core.errors import DecryptError


class ConnectionConfig(BaseModel):
    """User-edited console inputs persisted by the credential vault.

    Attributes:
        connection_string: ADO-style connection string ("Server=...; UserID=...;")
        query_text: SQL text shown in the editor
    """

    connection_string: str = Field(
        default=DEFAULT_CONNECTION_STRING, description="Database connection string"
    )
    query_text: str = Field(default=DEFAULT_QUERY_TEXT, description="SQL query text")

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "examples": [
                {
                    "connection_string": "Server=localhost; Port=3306; UserID=root;",
                    "query_text": "SHOW DATABASES;",
                }
            ]
        },
    }


@dataclass(frozen=True)
class EncryptedBlob:
    """Sealed ConnectionConfig.

    Serialized layout (base64 of the concatenation):
        [salt: 32 bytes][iv: 32 bytes][ciphertext + hmac tag: variable]
    """

    salt: bytes
    iv: bytes
    ciphertext: bytes

    def __post_init__(self) -> None:
        if len(self.salt) != KDF_SALT_SIZE:
            raise ValueError(f"Salt must be {KDF_SALT_SIZE} bytes, got {len(self.salt)}")
        if len(self.iv) != VAULT_IV_SIZE:
            raise ValueError(f"IV must be {VAULT_IV_SIZE} bytes, got {len(self.iv)}")

    def to_bytes(self) -> bytes:
        return self.salt + self.iv + self.ciphertext

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_bytes(cls, data: bytes) -> "EncryptedBlob":
        """Split a raw blob into its parts.

        Raises:
            DecryptError: If the blob cannot hold salt, IV and a tag
        """
        header = KDF_SALT_SIZE + VAULT_IV_SIZE
        if len(data) < header + VAULT_TAG_SIZE:
            raise DecryptError("Invalid encrypted blob: too small")
        return cls(
            salt=data[:KDF_SALT_SIZE],
            iv=data[KDF_SALT_SIZE:header],
            ciphertext=data[header:],
        )

    @classmethod
    def from_base64(cls, text: str) -> "EncryptedBlob":
        """Parse the persisted base64 form.

        Raises:
            DecryptError: If the text is not valid base64 or too small
        """
        try:
            data = base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise DecryptError(f"Invalid encrypted blob: {e}") from e
        return cls.from_bytes(data)
