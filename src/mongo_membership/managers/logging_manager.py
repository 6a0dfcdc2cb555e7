"""
# Logging Manager

Central entry point for loggers used throughout `mongo_membership`.

Every module obtains its logger through `get_logger()`, optionally with a prefix
that tags all of its records (e.g. `[CONFIG_STORE]`). The package logger gets a
single stream handler the first time a logger is requested; the level comes from
`settings.DEFAULT_LOG_LEVEL`.

## Usage

```python
from mongo_membership.managers.logging_manager import get_logger

logger = get_logger()
store_logger = get_logger(prefix="[CONFIG_STORE]")

store_logger.info("Submitting replSetReconfig with version %d", 4)
# 2026-01-01 12:00:00,000 - mongo_membership - INFO - [CONFIG_STORE] Submitting replSetReconfig with version 4
```
"""

import logging
import sys
from typing import Any, MutableMapping, Optional, Tuple

from mongo_membership.config import settings

ROOT_LOGGER_NAME = "mongo_membership"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


class PrefixedLoggerAdapter(logging.LoggerAdapter):
    """Prepends a fixed prefix to every message."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        prefix = self.extra.get("prefix") if self.extra else None
        if prefix:
            return f"{prefix} {msg}", kwargs
        return msg, kwargs


def _configure_root() -> None:
    global _configured
    if _configured:
        return

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(getattr(logging, settings.DEFAULT_LOG_LEVEL.upper(), logging.INFO))
    _configured = True


def get_logger(name: Optional[str] = None, prefix: str = "") -> PrefixedLoggerAdapter:
    """
    Return a logger under the `mongo_membership` namespace.

    Args:
        name: Child logger name. Defaults to the package logger.
        prefix: Text prepended to every message, e.g. `"[RECONCILER]"`.

    Returns:
        PrefixedLoggerAdapter: Adapter usable exactly like a `logging.Logger`.
    """
    _configure_root()
    logger_name = f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME
    return PrefixedLoggerAdapter(logging.getLogger(logger_name), {"prefix": prefix})
