"""
# Configuration Management Module

Settings for the replica set membership core, built on **Pydantic Settings**.

## Loading Hierarchy

1. **Environment variables** (highest priority)
2. **`MONGO_MEMBERSHIP_CONFIG_PATH`**: custom dotenv file path from env var
3. **`.env` file** in the project root
4. **Default values** declared on `Settings` (lowest priority)

If no file is found the module runs in environment-only mode, which is how the
membership sidecar is normally deployed next to a `mongod` container.

## Configuration Groups

| Group | Purpose |
|-------|---------|
| **Connection** | Port, database, credentials, timeouts, default host |
| **TLS** | Paths of certificate, key, CA bundle and revocation list |
| **Bootstrap** | Config-server role, reconfigure retry budget |
| **Reconciliation** | Per-cycle membership change limits |
| **Logging** | Default log level |

## Usage

```python
from mongo_membership.config import settings

if settings.MONGODB_TLS:
    print(settings.MONGODB_TLS_CA)
```

Note:
    Like the rest of the configuration layer, this module does not log. It is
    imported before the logging manager is configured.
"""

import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "MONGO_MEMBERSHIP_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the configuration file path.

    Checks, in order, the `MONGO_MEMBERSHIP_CONFIG_PATH` environment variable and a
    `.env` file in the project root.

    Returns:
        Optional[str]: Path to the configuration file, or `None` for environment-only mode.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    load_dotenv(dotenv_path=CONFIG_PATH, override=False)


class Settings(BaseSettings):
    """
    Runtime settings for connecting to and reconfiguring a replica set.

    **Configuration Groups:**
    *   **Connection**: `MONGODB_*` connection parameters and credentials.
    *   **TLS**: Optional certificate material, read once per process.
    *   **Bootstrap**: `IS_CONFIG_RS` and the `INIT_RECONFIG_*` retry budget.
    *   **Reconciliation**: How many membership changes a single reconfigure may carry.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # MongoDB connection
    MONGODB_PORT: int = 27017
    MONGODB_DATABASE: str = "local"
    MONGODB_DEFAULT_HOST: str = "127.0.0.1"  # sidecar reaches mongod over loopback
    MONGODB_CONNECTION_TIMEOUT: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT: int = 5000

    # Authentication (optional)
    MONGODB_USERNAME: Optional[str] = None
    MONGODB_PASSWORD: Optional[SecretStr] = None
    MONGODB_AUTH_SOURCE: str = "admin"
    MONGODB_AUTH_MECHANISM: str = "SCRAM-SHA-1"

    # TLS
    MONGODB_TLS: bool = False
    MONGODB_TLS_CERT: Optional[str] = None
    MONGODB_TLS_KEY: Optional[str] = None
    MONGODB_TLS_CA: Optional[str] = None
    MONGODB_TLS_CRL: Optional[str] = None
    MONGODB_TLS_PASSWORD: Optional[SecretStr] = None
    MONGODB_TLS_SERVER_IDENTITY_CHECK: bool = True

    # Bootstrap
    IS_CONFIG_RS: bool = False
    INIT_RECONFIG_ATTEMPTS: int = 20
    INIT_RECONFIG_INTERVAL: float = 0.5  # seconds, fixed, no backoff

    # Reconciliation
    UNFORCED_CHANGE_LIMIT: int = 1
    FORCED_CHANGE_LIMIT: int = 50

    # Logging
    DEFAULT_LOG_LEVEL: str = "INFO"

    @field_validator("MONGODB_PORT", mode="before")
    @classmethod
    def validate_port(cls, v: Any, info: Any) -> int:
        """
        Validates that the port is within the TCP range.

        Raises:
            ValueError: If the port is outside 1-65535.
        """
        port = int(v)
        if not 1 <= port <= 65535:
            raise ValueError(f"{info.field_name} must be between 1 and 65535, got {port}")
        return port

    @field_validator(
        "MONGODB_CONNECTION_TIMEOUT",
        "MONGODB_SERVER_SELECTION_TIMEOUT",
        "INIT_RECONFIG_ATTEMPTS",
        "UNFORCED_CHANGE_LIMIT",
        "FORCED_CHANGE_LIMIT",
        mode="before",
    )
    @classmethod
    def validate_positive_integers(cls, v: Any, info: Any) -> int:
        """
        Validates that numeric settings are positive integers.

        Raises:
            ValueError: If the value is not a positive integer.
        """
        value = int(v)
        if value <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer, got {value}")
        return value

    @field_validator("INIT_RECONFIG_INTERVAL", mode="before")
    @classmethod
    def validate_interval(cls, v: Any, info: Any) -> float:
        value = float(v)
        if value < 0:
            raise ValueError(f"{info.field_name} must not be negative, got {value}")
        return value

    @field_validator("MONGODB_DATABASE", mode="before")
    @classmethod
    def no_empty_database(cls, v: Any, info: Any) -> Any:
        if not v or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .env and not empty!")
        return v

    @property
    def tls_files_configured(self) -> bool:
        """`True` if TLS is enabled and at least one certificate path is set."""
        if not self.MONGODB_TLS:
            return False
        return any([self.MONGODB_TLS_CERT, self.MONGODB_TLS_KEY, self.MONGODB_TLS_CA, self.MONGODB_TLS_CRL])


# Global settings instance
settings: Settings = Settings()
