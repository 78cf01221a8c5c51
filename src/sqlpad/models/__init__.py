"""Data models for the SqlPad console."""

from sqlpad.models.config import AppConfig
from sqlpad.models.connection import ConnectionConfig, EncryptedBlob
from sqlpad.models.result import ColumnLayout, ResultTable

__all__ = [
    "AppConfig",
    "ColumnLayout",
    "ConnectionConfig",
    "EncryptedBlob",
    "ResultTable",
]
