"""Key-value persistence for console preferences.

The vault stores one opaque string per key. ``JsonPreferenceStore`` keeps all
keys in a single JSON object file written atomically with 0600 permissions;
``MemoryPreferenceStore`` keeps them in a dict.
"""

from __future__ import annotations

import hashlib
import threading
from pathlib import Path
from typing import Protocol

from sqlpad.constants import INSTALL_DIR, PREFERENCE_KEY_PREFIX
from sqlpad.utils.app_logger import get_logger
from sqlpad.utils.file_utils import read_json_file, write_json_file

logger = get_logger(__name__)


def preference_key(install_dir: Path | str = INSTALL_DIR) -> str:
    """Stable storage key derived from an installation directory."""
    digest = hashlib.sha256(str(Path(install_dir).resolve()).encode("utf-8")).hexdigest()
    return f"{PREFERENCE_KEY_PREFIX}.{digest[:16]}"


class PreferenceStore(Protocol):
    """Storage collaborator used by the credential vault."""

    def get_string(self, key: str, default: str | None = None) -> str | None: ...

    def set_string(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryPreferenceStore:
    """In-process preference store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get_string(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._values)


class JsonPreferenceStore:
    """Preference store backed by a JSON object file."""

    def __init__(self, path: Path) -> None:
        """
        Initialize JsonPreferenceStore.

        Args:
            path: Location of the JSON file (created on first write)
        """
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = read_json_file(self.path)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable preference file {self.path}: {e}")
            return {}
        return {key: value for key, value in data.items() if isinstance(value, str)}

    def get_string(self, key: str, default: str | None = None) -> str | None:
        with self._lock:
            return self._read().get(key, default)

    def set_string(self, key: str, value: str) -> None:
        with self._lock:
            values = self._read()
            values[key] = value
            write_json_file(self.path, values)

    def delete(self, key: str) -> None:
        with self._lock:
            values = self._read()
            if values.pop(key, None) is not None:
                write_json_file(self.path, values)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._read())
