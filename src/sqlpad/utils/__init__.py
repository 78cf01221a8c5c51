"""Utilities for the SqlPad console."""

from sqlpad.utils.app_logger import get_logger, setup_logging
from sqlpad.utils.file_utils import (
    ensure_directory,
    read_json_file,
    write_json_file,
)
from sqlpad.utils.formatting import format_cell_value
from sqlpad.utils.templates import TEMPLATES, get_template

__all__ = [
    "get_logger",
    "setup_logging",
    "ensure_directory",
    "read_json_file",
    "write_json_file",
    "format_cell_value",
    "TEMPLATES",
    "get_template",
]
