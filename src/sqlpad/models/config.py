"""Configuration data models."""

from pathlib import Path

from pydantic import BaseModel, Field

from sqlpad.constants import (
    DEFAULT_FRAME_INTERVAL_MS,
    DEFAULT_LOG_FILE,
    DEFAULT_MAX_DISPLAY_CELLS,
    DEFAULT_PREFS_FILE,
    DEFAULT_QUERY_TIMEOUT,
    MIN_COLUMN_WIDTH,
)


class AppConfig(BaseModel):
    """Application-wide configuration.

    Attributes:
        config_dir: Directory for configuration files
        prefs_file: Filename of the preference store holding the encrypted blob
        log_file: Filename for application logs
        max_display_cells: Cell budget for width measurement and display
        min_column_width: Narrowest column width in measurement units
        query_timeout_seconds: Deadline per execution (0 disables it)
        frame_interval_ms: Delay between host loop frames
    """

    config_dir: Path = Field(..., description="Directory for configuration files")
    prefs_file: str = Field(default=DEFAULT_PREFS_FILE, description="Preference store filename")
    log_file: str = Field(default=DEFAULT_LOG_FILE, description="Filename for application logs")
    max_display_cells: int = Field(
        default=DEFAULT_MAX_DISPLAY_CELLS, ge=1, description="Truncation budget in cells"
    )
    min_column_width: int = Field(
        default=MIN_COLUMN_WIDTH,
        ge=MIN_COLUMN_WIDTH,
        description="Minimum column width in units",
    )
    query_timeout_seconds: int = Field(
        default=DEFAULT_QUERY_TIMEOUT, ge=0, description="Query deadline in seconds (0 = none)"
    )
    frame_interval_ms: int = Field(
        default=DEFAULT_FRAME_INTERVAL_MS, ge=1, le=1000, description="Host loop frame interval"
    )

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "examples": [
                {
                    "config_dir": "/home/user/.sqlpad",
                    "prefs_file": "prefs.json",
                    "log_file": "app.log",
                    "max_display_cells": 2048,
                    "min_column_width": 32,
                    "query_timeout_seconds": 300,
                    "frame_interval_ms": 50,
                }
            ]
        },
    }

    @property
    def prefs_path(self) -> Path:
        """Get full path to the preference store."""
        return self.config_dir / self.prefs_file

    @property
    def log_path(self) -> Path:
        """Get full path to log file."""
        return self.config_dir / self.log_file

    @property
    def query_timeout(self) -> float | None:
        """Deadline in seconds, or None when disabled."""
        return float(self.query_timeout_seconds) or None
