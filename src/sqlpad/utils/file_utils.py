"""File utility functions for safe file operations."""

import json
from pathlib import Path
from typing import Any

from sqlpad.utils.app_logger import get_logger

logger = get_logger(__name__)


def ensure_directory(path: Path, *, mode: int = 0o700) -> None:
    """Ensure a directory exists with owner-only permissions.

    Args:
        path: Path to the directory to create
        mode: Permission mode for newly created directories (default: 0o700)

    Raises:
        OSError: If the directory cannot be created
    """
    try:
        path.mkdir(mode=mode, parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        raise


def read_json_file(path: Path) -> dict[str, Any]:
    """Read and parse a JSON object file.

    Args:
        path: Path to the JSON file to read

    Returns:
        Parsed JSON object

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON object
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, found {type(data).__name__}")
    return data


def write_json_file(path: Path, data: dict[str, Any], *, mode: int = 0o600) -> None:
    """Write data to a JSON file atomically with restrictive permissions.

    Args:
        path: Path to the JSON file to write
        data: Data to serialize to JSON
        mode: Permission mode for the file (default: 0o600 - owner read/write only)

    Raises:
        OSError: If the file cannot be written
    """
    ensure_directory(path.parent)

    temp_path = path.with_suffix(".tmp")
    try:
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        # Set permissions before the rename makes the file visible
        temp_path.chmod(mode)
        temp_path.replace(path)
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise
