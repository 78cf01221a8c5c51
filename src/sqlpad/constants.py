"""Application-wide constants and configuration values."""

from pathlib import Path
from typing import Final

# Exit Codes (0-49 reserved for application use)
EXIT_SUCCESS: Final[int] = 0
EXIT_GENERAL_ERROR: Final[int] = 1
EXIT_INVALID_ARGS: Final[int] = 2
EXIT_CONFIG_ERROR: Final[int] = 3
EXIT_DECRYPT_ERROR: Final[int] = 5
EXIT_NETWORK_ERROR: Final[int] = 7
EXIT_DATABASE_ERROR: Final[int] = 8
EXIT_QUERY_ERROR: Final[int] = 9
EXIT_FILE_ERROR: Final[int] = 10
EXIT_PERMISSION_ERROR: Final[int] = 11
EXIT_TIMEOUT_ERROR: Final[int] = 12

# Default Paths
DEFAULT_CONFIG_DIR: Final[Path] = Path.home() / ".sqlpad"
DEFAULT_CONFIG_FILE: Final[str] = "config.json"
DEFAULT_PREFS_FILE: Final[str] = "prefs.json"
DEFAULT_LOG_FILE: Final[str] = "app.log"

# Installation directory, the default (non-secret) passphrase source
INSTALL_DIR: Final[Path] = Path(__file__).resolve().parent
PREFERENCE_KEY_PREFIX: Final[str] = "sqlpad.preference"

# Default console contents
DEFAULT_CONNECTION_STRING: Final[str] = (
    "Server=localhost; Port=3306; UserID=root; AllowUserVariables=true;"
)
DEFAULT_QUERY_TEXT: Final[str] = "SHOW DATABASES;"

# Timeouts (in seconds)
DEFAULT_QUERY_TIMEOUT: Final[int] = 300  # 5 minutes
DEFAULT_FRAME_INTERVAL_MS: Final[int] = 50

# Credential vault parameters
KDF_SALT_SIZE: Final[int] = 32
KDF_MIN_ITERATIONS: Final[int] = 1000
KDF_DEFAULT_ITERATIONS: Final[int] = 100_000
VAULT_IV_SIZE: Final[int] = 32
VAULT_TAG_SIZE: Final[int] = 32
AES_KEY_SIZE: Final[int] = 256  # bits
AES_BLOCK_SIZE: Final[int] = 128  # bits

# Result grid limits
MAX_CELL_LENGTH: Final[int] = 255
TRUNCATION_MARKER: Final[str] = "(..."
NULL_DISPLAY: Final[str] = "(null)"
TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
DEFAULT_MAX_DISPLAY_CELLS: Final[int] = 2048
MIN_COLUMN_WIDTH: Final[int] = 32
ERROR_COLUMN: Final[str] = "Error"
TRUNCATION_NOTICE: Final[str] = (
    "(For performance reasons, the remaining lines will not be output...)"
)

# Driver
DEFAULT_MYSQL_PORT: Final[int] = 3306
FETCH_BATCH_SIZE: Final[int] = 500

# Concurrency Limits
MAX_THREAD_POOL_SIZE: Final[int] = 4

# Logging Configuration
LOG_MAX_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT: Final[int] = 5
